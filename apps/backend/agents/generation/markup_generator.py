"""
HTML/CSS generation for enriched slides.

Every slide shares one frame (header with optional icon and title, then a
body); the body and the extra style rules come from a per-type table.
Output is a pure function of the slide and its palette: no timestamps, no
generated ids, so rendering the same slide twice gives identical strings.
Free text is always escaped before it is embedded.
"""

import html
import re
from dataclasses import dataclass
from typing import Callable, Dict, List

from models.deck import Palette, Slide, SlideType


@dataclass(frozen=True)
class SlideMarkup:
    html: str
    css: str


def _esc(text) -> str:
    return html.escape(text or '', quote=True)


def _css_id(slide_id: str) -> str:
    return re.sub(r'[^A-Za-z0-9_-]', '-', slide_id)


def _paragraphs(text: str, css_class: str = 'slide-text') -> List[str]:
    return [
        f'<p class="{css_class}">{_esc(line.strip())}</p>'
        for line in (text or '').splitlines()
        if line.strip()
    ]


# === Body renderers ===

def _title_body(slide: Slide) -> List[str]:
    if not slide.content.strip():
        return []
    return [f'<p class="slide-subtitle">{_esc(line)}</p>' for line in slide.content.splitlines() if line.strip()]


def _bullets_body(slide: Slide) -> List[str]:
    items = [
        f'<li class="slide-bullet"><span class="bullet-index">{number:02d}</span>'
        f'<span class="bullet-text">{_esc(text)}</span></li>'
        for number, text in enumerate(slide.bullets, start=1)
    ]
    return ['<ol class="slide-bullets">', *items, '</ol>']


def _image_body(slide: Slide) -> List[str]:
    parts: List[str] = []
    if slide.imageUrl:
        parts.append(
            f'<div class="slide-media"><img class="slide-image" src="{_esc(slide.imageUrl)}" '
            f'alt="{_esc(slide.title)}"></div>'
        )
    caption = []
    if slide.caption:
        caption.append(f'<p class="slide-caption-text">{_esc(slide.caption)}</p>')
    caption.extend(_paragraphs(slide.content))
    if caption:
        parts.extend(['<div class="slide-caption">', *caption, '</div>'])
    return parts


def _text_body(slide: Slide) -> List[str]:
    return _paragraphs(slide.content)


BODY_RENDERERS: Dict[SlideType, Callable[[Slide], List[str]]] = {
    SlideType.TITLE: _title_body,
    SlideType.BULLETS: _bullets_body,
    SlideType.IMAGE: _image_body,
}

TYPE_STYLES: Dict[SlideType, str] = {
    SlideType.TITLE: (
        "{scope} {{ justify-content: center; align-items: center; text-align: center; }}\n"
        "{scope} .slide-header {{ flex-direction: column; }}\n"
        "{scope} .slide-title {{ font-size: 3.5rem; background: linear-gradient(90deg, var(--slide-primary), var(--slide-secondary)); "
        "-webkit-background-clip: text; background-clip: text; color: transparent; }}\n"
        "{scope} .slide-subtitle {{ font-size: 1.5rem; opacity: 0.85; }}\n"
    ),
    SlideType.BULLETS: (
        "{scope} .slide-bullets {{ list-style: none; margin: 0; padding: 0; display: grid; gap: 1rem; }}\n"
        "{scope} .slide-bullet {{ display: flex; align-items: baseline; gap: 1rem; font-size: 1.35rem; }}\n"
        "{scope} .bullet-index {{ font-weight: 700; color: var(--slide-accent); min-width: 2.5ch; }}\n"
    ),
    SlideType.IMAGE: (
        "{scope} .slide-body {{ display: grid; grid-template-columns: 3fr 2fr; gap: 2rem; align-items: center; }}\n"
        "{scope} .slide-media {{ border-radius: 1rem; overflow: hidden; border: 2px solid var(--slide-secondary); }}\n"
        "{scope} .slide-image {{ display: block; width: 100%; height: 100%; object-fit: cover; }}\n"
        "{scope} .slide-caption-text {{ font-style: italic; color: var(--slide-secondary); }}\n"
    ),
}

BASE_STYLE = (
    "{scope} {{\n"
    "  --slide-primary: {primary};\n"
    "  --slide-secondary: {secondary};\n"
    "  --slide-accent: {accent};\n"
    "  --slide-background: {background};\n"
    "  --slide-text: {text};\n"
    "  display: flex; flex-direction: column; gap: 1.5rem; padding: 3rem;\n"
    "  background: var(--slide-background); color: var(--slide-text);\n"
    "}}\n"
    "{scope} .slide-header {{ display: flex; align-items: center; gap: 1rem; }}\n"
    "{scope} .slide-icon {{ width: 3rem; height: 3rem; border-radius: 0.75rem; }}\n"
    "{scope} .slide-title {{ margin: 0; font-size: 2.25rem; color: var(--slide-primary); }}\n"
    "{scope} .slide-text {{ font-size: 1.25rem; line-height: 1.6; }}\n"
    "{scope}.slide--center {{ align-items: center; text-align: center; }}\n"
)


def _header(slide: Slide) -> str:
    tag = 'h1' if slide.type == SlideType.TITLE else 'h2'
    icon = f'<img class="slide-icon" src="{_esc(slide.iconUrl)}" alt="">' if slide.iconUrl else ''
    return f'<header class="slide-header">{icon}<{tag} class="slide-title">{_esc(slide.title)}</{tag}></header>'


def render(slide: Slide, theme: Palette) -> SlideMarkup:
    """Generate the markup and stylesheet fragments for one slide."""
    slide_type = SlideType(slide.type)
    css_id = _css_id(slide.id)
    classes = f"slide slide--{slide_type.value}"
    if slide.layout == 'center':
        classes += " slide--center"

    body = BODY_RENDERERS.get(slide_type, _text_body)(slide)
    markup = "\n".join([
        f'<section class="{classes}" id="{css_id}" data-slide-type="{slide_type.value}">',
        _header(slide),
        '<div class="slide-body">',
        *body,
        '</div>',
        '</section>',
    ])

    scope = f"#{css_id}"
    css = BASE_STYLE.format(
        scope=scope,
        primary=theme.primary,
        secondary=theme.secondary,
        accent=theme.accent,
        background=slide.backgroundColor or theme.background,
        text=theme.text,
    ) + TYPE_STYLES.get(slide_type, "").format(scope=scope)

    return SlideMarkup(html=markup, css=css)
