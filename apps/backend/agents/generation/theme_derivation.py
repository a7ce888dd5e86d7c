"""
Deterministic palette derivation from a text seed.

The seed (usually a slide title) is hashed into a hue; primary, secondary and
accent colors are placed around it on the color wheel and paired with one of
a fixed set of dark backgrounds. No network, no randomness.
"""

import math
from typing import Optional

from models.deck import Palette

DARK_BACKGROUNDS = (
    '#0F172A',  # slate-900
    '#111827',  # gray-900
    '#18181B',  # zinc-900
    '#1E1B4B',  # indigo-950
    '#042F2E',  # teal-950
)

TEXT_COLOR = '#FFFFFF'


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _code_units(seed: str):
    # Hash over UTF-16 code units so astral characters count twice, like charCodeAt
    data = seed.encode('utf-16-le', 'surrogatepass')
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def hash_seed(seed: Optional[str]) -> int:
    """Rolling hash ``hash = ch + ((hash << 5) - hash)`` with 32-bit shift semantics."""
    h = 0
    for unit in _code_units(seed or ''):
        h = unit + (_to_int32(_to_int32(h) << 5) - h)
    return h


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Convert hue (degrees) and saturation/lightness (percent) to #RRGGBB."""
    l /= 100
    a = s * min(l, 1 - l) / 100

    def channel(n: int) -> str:
        k = (n + h / 30) % 12
        color = l - a * max(min(k - 3, 9 - k, 1), -1)
        return f"{int(math.floor(255 * color + 0.5)):02X}"

    return f"#{channel(0)}{channel(8)}{channel(4)}"


def derive_theme(seed: Optional[str]) -> Palette:
    """Map a seed string to a palette. Same seed, same palette; never raises."""
    seed = seed or ''
    base_hue = abs(hash_seed(seed)) % 360

    return Palette(
        primary=hsl_to_hex(base_hue, 75, 55),
        secondary=hsl_to_hex((base_hue + 30) % 360, 70, 60),
        accent=hsl_to_hex((base_hue + 180) % 360, 80, 50),
        background=DARK_BACKGROUNDS[sum(1 for _ in _code_units(seed)) % len(DARK_BACKGROUNDS)],
        text=TEXT_COLOR,
    )
