"""
Parser for the model's deck reply.

The model is asked for a bare JSON object but commonly wraps it in a
markdown code fence, surrounds it with prose or leaves trailing commas.
parse() strips the fence, decodes, falls back to a best-effort repair and
then checks the minimal deck shape. It never returns an empty deck.
"""

import json
import re
from typing import Any, Optional

from agents.generation.exceptions import FormatError
from models.deck import RawDeck
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\r?\n?")
_FENCE_CLOSE = re.compile(r"\r?\n?```$")
_CLOSER_AHEAD = re.compile(r"\s*[}\]]")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json (or bare ```) line and a trailing ``` fence."""
    t = text.strip()
    if t.startswith("```"):
        t = _FENCE_OPEN.sub("", t, count=1)
        t = _FENCE_CLOSE.sub("", t, count=1)
    return t.strip()


def _extract_balanced_object(text: str) -> Optional[str]:
    start = text.find('{')
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def _strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede a closing bracket, leaving string literals untouched."""
    out = []
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == ',' and _CLOSER_AHEAD.match(text, i + 1):
            continue
        out.append(ch)
    return ''.join(out)


def _decode(text: str, raw_text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as first_error:
        candidate = _extract_balanced_object(text)
        if candidate is None:
            raise FormatError("Model reply is not valid JSON", raw_text=raw_text, cause=first_error) from first_error
        candidate = _strip_trailing_commas(candidate)
        try:
            data = json.loads(candidate)
        except ValueError as e:
            raise FormatError("Model reply is not valid JSON", raw_text=raw_text, cause=e) from e
        logger.warning("Model reply needed repair before decoding")
        return data


def parse(raw_text: Optional[str]) -> RawDeck:
    """Decode the model reply into a title and an ordered list of raw slides.

    Raises:
        FormatError: reply is empty, not JSON, or lacks a title / slide list
    """
    if raw_text is None or not raw_text.strip():
        raise FormatError("Model reply is empty", raw_text=raw_text)

    data = _decode(strip_code_fence(raw_text), raw_text)

    if not isinstance(data, dict):
        raise FormatError("Model reply must be a JSON object", raw_text=raw_text)

    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        raise FormatError("Model reply is missing a non-empty 'title'", raw_text=raw_text)

    slides = data.get('slides')
    if not isinstance(slides, list):
        raise FormatError("Model reply is missing a 'slides' array", raw_text=raw_text)
    if not slides:
        raise FormatError("Model reply contains no slides", raw_text=raw_text)
    for index, slide in enumerate(slides):
        if not isinstance(slide, dict):
            raise FormatError(
                f"Slide {index} is not an object",
                raw_text=raw_text,
                context={'slide_index': index},
            )

    return RawDeck(title=title.strip(), slides=slides)
