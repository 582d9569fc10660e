"""Channel shading for gradient stops and shadow tints."""

from __future__ import annotations

import re

# Amount used to darken the edges of bar gradients
GRADIENT_EDGE_SHADE = -40

_HEX = re.compile(r"^[0-9a-fA-F]{6}$")


def _clamp(channel: int) -> int:
    return max(0, min(255, channel))


def shade(color: str, amount: int) -> str:
    """Add ``amount`` to each RGB channel of a hex color, clamped to [0, 255].

    Negative amounts darken, positive amounts lighten. A leading ``#`` is
    preserved when present. Clamping is lossy, so shading back by the
    opposite amount does not always restore the input.

    Raises:
        ValueError: If ``color`` is not a six-digit hex color
    """
    has_pound = color.startswith("#")
    digits = color[1:] if has_pound else color
    if not _HEX.match(digits):
        raise ValueError(f"Invalid hex color: {color!r}")
    if amount == 0:
        return color

    num = int(digits, 16)
    r = _clamp((num >> 16) + amount)
    g = _clamp(((num >> 8) & 0xFF) + amount)
    b = _clamp((num & 0xFF) + amount)
    shaded = f"{(r << 16) | (g << 8) | b:06x}"
    if digits.isupper():
        shaded = shaded.upper()
    return f"#{shaded}" if has_pound else shaded


def channels(color: str) -> tuple[int, int, int]:
    digits = color.lstrip("#")
    if not _HEX.match(digits):
        raise ValueError(f"Invalid hex color: {color!r}")
    num = int(digits, 16)
    return (num >> 16) & 0xFF, (num >> 8) & 0xFF, num & 0xFF
