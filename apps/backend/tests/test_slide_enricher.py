import asyncio

import pytest

from agents.generation.exceptions import FormatError
from agents.generation.slide_enricher import enrich, enrich_all, infer_type, needs_icon, split_bullets
from agents.generation.theme_derivation import derive_theme
from models.deck import RawDeck, SlideType
from services.image_service import ImageService
from fakes import IMAGE_ENDPOINT, make_config


@pytest.fixture
def images():
    return ImageService(make_config().media)


def run(coro):
    return asyncio.run(coro)


def test_bullet_marker_infers_bullets_type(images):
    raw = {"title": "Benefits", "content": "• Faster • Cheaper •  • Safer"}

    slide = run(enrich(raw, 1, images))

    assert slide.type == SlideType.BULLETS
    assert slide.bullets == ["Faster", "Cheaper", "Safer"]


def test_plain_content_infers_content_type(images):
    slide = run(enrich({"title": "Market", "content": "Growth was steady"}, 1, images))

    assert slide.type == SlideType.CONTENT
    assert slide.bullets == []


def test_unknown_declared_type_is_inferred():
    assert infer_type({"type": "chart", "content": "plain text"}) == SlideType.CONTENT
    assert infer_type({"type": "chart", "content": "• a • b"}) == SlideType.BULLETS
    assert infer_type({"type": "IMAGE"}) == SlideType.IMAGE


def test_declared_bullets_array_wins(images):
    raw = {"type": "bullets", "title": "Plan", "bullets": ["Hire", " ", "Ship"], "content": "• ignored"}

    slide = run(enrich(raw, 1, images))

    assert slide.bullets == ["Hire", "Ship"]


def test_bullets_from_list_lines(images):
    raw = {"type": "bullets", "title": "Steps", "content": "1. Plan\n2. Build\n- Launch"}

    slide = run(enrich(raw, 1, images))

    assert slide.bullets == ["Plan", "Build", "Launch"]


def test_bullets_slide_without_items_is_rejected(images):
    with pytest.raises(FormatError):
        run(enrich({"type": "bullets", "title": "Empty", "content": "   "}, 1, images))


def test_title_slide_without_title_is_rejected(images):
    with pytest.raises(FormatError):
        run(enrich({"type": "title", "content": "Subtitle only"}, 0, images))


def test_split_bullets_drops_empty_segments():
    assert split_bullets("•  • one •two• ") == ["one", "two"]


@pytest.mark.parametrize("slide_type,title,content,index,expected", [
    (SlideType.TITLE, "Welcome", "", 1, True),
    (SlideType.CONTENT, "Key Takeaways", "", 1, True),
    (SlideType.CONTENT, "Wrap up", "In conclusion, we won", 2, True),
    (SlideType.CONTENT, "Market", "Growth was steady", 0, True),
    (SlideType.CONTENT, "Market", "Growth was steady", 3, True),
    (SlideType.CONTENT, "Market", "Growth was steady", 1, False),
    (SlideType.CONTENT, "Market", "Growth was steady", 4, False),
])
def test_icon_policy(slide_type, title, content, index, expected):
    assert needs_icon(slide_type, title, content, index) is expected


def test_title_slide_gets_icon_reference(images):
    slide = run(enrich({"type": "title", "title": "Solar Power"}, 1, images))

    assert slide.iconUrl.startswith(IMAGE_ENDPOINT)
    assert "width=256" in slide.iconUrl
    assert "nologo=true" in slide.iconUrl
    assert slide.imageUrl is None


def test_image_slide_uses_model_image_prompt(images):
    raw = {"type": "image", "title": "Growth", "content": "Up", "imagePrompt": "rising bar chart"}

    slide = run(enrich(raw, 1, images))

    assert slide.imageUrl == IMAGE_ENDPOINT + "rising%20bar%20chart?width=1280&height=720&nologo=true"
    assert slide.imagePrompt == "rising bar chart"


def test_non_image_slide_has_no_image(images):
    slide = run(enrich({"title": "Market", "content": "Growth"}, 1, images))

    assert slide.imageUrl is None
    assert slide.iconUrl is None


class _BrokenImageService(ImageService):
    async def icon_for_slide(self, title):
        raise RuntimeError("image endpoint down")

    async def image_for_slide(self, title, content, image_prompt=None):
        raise RuntimeError("image endpoint down")


def test_media_failures_leave_fields_unset():
    service = _BrokenImageService(make_config().media)

    slide = run(enrich({"type": "image", "title": "Summary", "content": "All good"}, 0, service))

    assert slide.iconUrl is None
    assert slide.imageUrl is None
    assert slide.html


def test_theme_override_and_fallback(images):
    override = {"primary": "#111111", "secondary": "#222222", "accent": "#333333",
                "background": "#000000", "text": "#FFFFFF"}

    kept = run(enrich({"title": "Custom", "theme": override}, 1, images))
    derived = run(enrich({"title": "Custom", "theme": {"primary": "red"}}, 1, images))

    assert kept.theme.primary == "#111111"
    assert derived.theme == derive_theme("Custom")


def test_markup_is_attached(images):
    slide = run(enrich({"title": "Market", "content": "Growth", "backgroundColor": "#123456"}, 1, images))

    assert 'id="slide-1"' in slide.html
    assert "#slide-1" in slide.css
    assert "--slide-background: #123456;" in slide.css


class _SlowFirstImageService(ImageService):
    """Earlier slides finish later, so completion order is the reverse of deck order."""

    async def icon_for_slide(self, title):
        await asyncio.sleep(0.01 * (10 - int(title.split()[-1])))
        return await super().icon_for_slide(title)


def test_enrich_all_preserves_reply_order():
    service = _SlowFirstImageService(make_config().media)
    raw_deck = RawDeck(title="Order", slides=[{"type": "title", "title": f"Slide {i}"} for i in range(6)])

    slides = run(enrich_all(raw_deck, service))

    assert [s.id for s in slides] == [f"slide-{i}" for i in range(6)]
    assert [s.title for s in slides] == [f"Slide {i}" for i in range(6)]
    assert all(s.iconUrl for s in slides)


class _RecordingImageService(ImageService):
    def __init__(self, config):
        super().__init__(config)
        self.finished = []

    async def icon_for_slide(self, title):
        await asyncio.sleep(0.05)
        self.finished.append(title)
        return await super().icon_for_slide(title)


def test_failed_slide_cancels_remaining_lookups():
    service = _RecordingImageService(make_config().media)
    slides = [{"type": "title", "title": f"S{i}"} for i in range(3)]
    slides.append({"type": "bullets", "title": "Broken", "content": ""})
    raw_deck = RawDeck(title="Partial", slides=slides)

    async def scenario():
        with pytest.raises(FormatError):
            await enrich_all(raw_deck, service)
        await asyncio.sleep(0.2)

    run(scenario())

    assert service.finished == []
