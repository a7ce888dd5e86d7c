"""
JSON export of generated decks.
Converts pydantic models and other values to plain JSON data and names the
downloadable file after the deck title.
"""
import json
import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from models.deck import PresentationDeck
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def to_json_safe(obj: Any) -> Any:
    """
    Convert any object to a JSON-serializable representation.
    Handles pydantic models, enums, datetime, Decimal and containers.
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return to_json_safe(obj.value)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return float(obj)
    if hasattr(obj, 'model_dump'):
        return to_json_safe(obj.model_dump(mode='json'))
    if isinstance(obj, dict):
        return {str(key): to_json_safe(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [to_json_safe(item) for item in obj]
    if hasattr(obj, '__dict__'):
        return to_json_safe(vars(obj))

    logger.warning(f"Falling back to str() for object {type(obj)}")
    return str(obj)


def slugify_title(title: str) -> str:
    """Lower-case the title and collapse whitespace runs into dashes."""
    slug = _WHITESPACE.sub('-', (title or '').strip().lower())
    slug = _UNSAFE_FILENAME_CHARS.sub('', slug)
    return slug or 'untitled'


def export_filename(deck: PresentationDeck) -> str:
    return f"{slugify_title(deck.title)}-presentation.json"


def export_deck_json(deck: PresentationDeck) -> str:
    """Literal JSON dump of the deck, as offered for download."""
    return json.dumps(to_json_safe(deck), indent=2, ensure_ascii=False)
