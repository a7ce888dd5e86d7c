"""
Slide classification and enrichment.

Turns the loosely-typed slide objects from the model reply into render-ready
Slide models: settles the slide type, validates the fields that type needs,
derives the palette, attaches best-effort image/icon references and caches
the generated markup on the slide.
"""

import asyncio
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from agents.generation.exceptions import FormatError
from agents.generation.markup_generator import render
from agents.generation.theme_derivation import derive_theme
from agents.prompts.generation.deck_prompts import BULLET_MARKER
from models.deck import HEX_COLOR_PATTERN, Palette, RawDeck, Slide, SlideType
from services.image_service import ImageService
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

ICON_KEYWORDS = ('summary', 'key', 'features', 'benefits', 'conclusion')
ICON_EVERY_N_SLIDES = 3
LAYOUTS = ('left', 'right', 'center')

_LIST_PREFIX = re.compile(r"^\s*(?:[-*]|\d+[.)])\s+")
_SLIDE_TYPES = {t.value for t in SlideType}


def _text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, list):
        return '\n'.join(_text(v) for v in value)
    return value if isinstance(value, str) else str(value)


def split_bullets(content: str) -> List[str]:
    """Split bullet-marked text into its non-empty, trimmed items."""
    return [segment.strip() for segment in content.split(BULLET_MARKER) if segment.strip()]


def infer_type(raw_slide: Dict[str, Any]) -> SlideType:
    """Declared type when it is a known tag, otherwise guessed from the content shape."""
    declared = raw_slide.get('type')
    if isinstance(declared, str) and declared.strip().lower() in _SLIDE_TYPES:
        return SlideType(declared.strip().lower())
    if declared:
        logger.warning(f"Unknown slide type {declared!r}, inferring from content")
    if BULLET_MARKER in _text(raw_slide.get('content')):
        return SlideType.BULLETS
    return SlideType.CONTENT


def _bullet_items(raw_slide: Dict[str, Any], content: str) -> List[str]:
    declared = raw_slide.get('bullets')
    if isinstance(declared, list):
        items = [_text(item).strip() for item in declared]
        items = [item for item in items if item]
        if items:
            return items
    if BULLET_MARKER in content:
        return split_bullets(content)
    # Plain list lines: "- one", "1. two", or one item per line
    lines = (_LIST_PREFIX.sub('', line).strip() for line in content.splitlines())
    return [line for line in lines if line]


def needs_icon(slide_type: SlideType, title: str, content: str, index: int) -> bool:
    if slide_type == SlideType.TITLE:
        return True
    text = f"{title} {content}".lower()
    if any(keyword in text for keyword in ICON_KEYWORDS):
        return True
    return index % ICON_EVERY_N_SLIDES == 0


def _explicit_theme(raw_slide: Dict[str, Any], index: int) -> Optional[Palette]:
    theme = raw_slide.get('theme')
    if not isinstance(theme, dict):
        return None
    try:
        return Palette.model_validate(theme)
    except ValidationError:
        logger.warning(f"Slide {index} carries an invalid theme override, deriving one instead")
        return None


def _background_color(raw_slide: Dict[str, Any]) -> Optional[str]:
    value = raw_slide.get('backgroundColor')
    if isinstance(value, str) and re.match(HEX_COLOR_PATTERN, value.strip()):
        return value.strip()
    return None


async def _fetch_media(
    image_service: ImageService,
    slide_type: SlideType,
    title: str,
    content: str,
    image_prompt: Optional[str],
    index: int,
) -> Dict[str, str]:
    lookups = {}
    if needs_icon(slide_type, title, content, index):
        lookups['iconUrl'] = image_service.icon_for_slide(title)
    if slide_type == SlideType.IMAGE:
        lookups['imageUrl'] = image_service.image_for_slide(title, content, image_prompt)
    if not lookups:
        return {}

    results = await asyncio.gather(*lookups.values(), return_exceptions=True)
    media = {}
    for field_name, result in zip(lookups, results):
        if isinstance(result, Exception):
            logger.warning(f"Slide {index}: {field_name} lookup failed: {result}")
        elif isinstance(result, BaseException):
            raise result
        elif result:
            media[field_name] = result
    return media


async def enrich(raw_slide: Dict[str, Any], index: int, image_service: ImageService) -> Slide:
    """Build a render-ready slide from one raw slide object.

    Raises:
        FormatError: the slide lacks the fields its type requires
    """
    slide_type = infer_type(raw_slide)
    title = _text(raw_slide.get('title')).strip()
    content = _text(raw_slide.get('content')).strip()

    bullets: List[str] = []
    if slide_type == SlideType.BULLETS:
        bullets = _bullet_items(raw_slide, content)
        if not bullets:
            raise FormatError(
                f"Bullet slide {index} has no bullet items",
                raw_text=str(raw_slide),
                context={'slide_index': index},
            )
    elif isinstance(raw_slide.get('bullets'), list):
        bullets = [item for item in (_text(b).strip() for b in raw_slide['bullets']) if item]

    if slide_type == SlideType.TITLE and not title:
        raise FormatError(
            f"Title slide {index} has no title",
            raw_text=str(raw_slide),
            context={'slide_index': index},
        )

    theme = _explicit_theme(raw_slide, index) or derive_theme(title)
    image_prompt = _text(raw_slide.get('imagePrompt')).strip() or None
    media = await _fetch_media(image_service, slide_type, title, content, image_prompt, index)

    layout = raw_slide.get('layout')
    slide = Slide(
        id=f"slide-{index}",
        type=slide_type,
        title=title,
        content=content,
        bullets=bullets,
        imagePrompt=image_prompt,
        caption=_text(raw_slide.get('caption')).strip() or None,
        backgroundColor=_background_color(raw_slide),
        layout=layout if layout in LAYOUTS else None,
        theme=theme,
        **media,
    )

    markup = render(slide, theme)
    return slide.model_copy(update={'html': markup.html, 'css': markup.css})


async def enrich_all(raw_deck: RawDeck, image_service: ImageService) -> List[Slide]:
    """Enrich every slide concurrently; returns once all are done, in reply order.

    The first failure cancels the remaining slides before it propagates.
    """
    tasks = [
        asyncio.ensure_future(enrich(raw_slide, index, image_service))
        for index, raw_slide in enumerate(raw_deck.slides)
    ]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
