"""Numeric normalization of loosely typed data points.

The understanding service emits values such as ``"$12,500"``, ``"94%"``,
``"15,000 users"`` or plain numbers. Each point is collapsed into a numeric
magnitude for geometry and the original text for display, and gets its
palette color by position.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.models import DataPoint

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")
_FLOAT_PREFIX = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")

# Magnitudes outside this range overflow or underflow the layout arithmetic
MAX_MAGNITUDE = 1e300
MIN_MAGNITUDE = 1e-300


@dataclass(frozen=True, slots=True)
class NormalizedPoint:
    index: int
    name: str
    numeric_value: float
    display_value: str
    color: str
    description: str | None = None


def format_number(value: float) -> str:
    """Render a magnitude without a trailing ``.0`` for whole numbers."""
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def clamp_magnitude(number: float) -> float:
    """Clamp ``number`` into the range the chart geometry can handle.

    Non-finite values become ``0.0``, values smaller than ``MIN_MAGNITUDE``
    flush to zero and values beyond ``MAX_MAGNITUDE`` saturate at it.
    """
    if not math.isfinite(number) or abs(number) < MIN_MAGNITUDE:
        return 0.0
    return max(-MAX_MAGNITUDE, min(MAX_MAGNITUDE, number))


def extract_number(value: str | int | float) -> float:
    """Extract the numeric magnitude of a value, or ``0.0`` when there is none."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    else:
        match = _FLOAT_PREFIX.match(_NON_NUMERIC.sub("", str(value)))
        if not match:
            return 0.0
        number = float(match.group(0))
    return clamp_magnitude(number)


def display_text(value: str | int | float) -> str:
    if isinstance(value, float) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


def normalize(point: DataPoint, index: int, palette: Sequence[str]) -> NormalizedPoint:
    return NormalizedPoint(
        index=index,
        name=point.label,
        numeric_value=extract_number(point.value),
        display_value=display_text(point.value),
        color=palette[index % len(palette)],
        description=point.description,
    )


def normalize_points(
    points: Sequence[DataPoint], palette: Sequence[str]
) -> tuple[NormalizedPoint, ...]:
    return tuple(normalize(p, i, palette) for i, p in enumerate(points))
