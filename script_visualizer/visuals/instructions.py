"""Presentation-agnostic render instructions produced by the chart layouts.

Coordinates are on a fixed 16:9 virtual canvas with the origin at the top-left
corner and y growing downwards. Every value type is frozen and built from
tuples so that equal inputs give equal (and hashable) instructions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from ..core.enums import VisualType
from .registry import Symbol

CANVAS_WIDTH = 960.0
CANVAS_HEIGHT = 540.0


@dataclass(frozen=True, slots=True)
class GradientStop:
    offset: float
    color: str
    opacity: float = 1.0


@dataclass(frozen=True, slots=True)
class Gradient:
    id: str
    stops: tuple[GradientStop, ...]
    vertical: bool = False


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: str
    opacity: float = 1.0
    gradient: str | None = None
    radius: float = 0.0
    stroke: str | None = None
    stroke_width: float = 0.0
    shadow: bool = False


@dataclass(frozen=True, slots=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: str
    opacity: float = 1.0
    stroke: str | None = None
    stroke_width: float = 0.0
    shadow: bool = False


@dataclass(frozen=True, slots=True)
class Wedge:
    cx: float
    cy: float
    inner_radius: float
    outer_radius: float
    start_angle: float  # degrees, counter-clockwise from 3 o'clock
    end_angle: float
    fill: str
    opacity: float = 1.0
    stroke: str | None = None
    shadow: bool = True


@dataclass(frozen=True, slots=True)
class Path:
    points: tuple[tuple[float, float], ...]
    stroke: str | None = None
    stroke_width: float = 1.0
    fill: str | None = None
    gradient: str | None = None
    closed: bool = False
    dashed: bool = False
    opacity: float = 1.0
    shadow: bool = False


@dataclass(frozen=True, slots=True)
class GlyphMark:
    cx: float
    cy: float
    size: float
    symbol: Symbol
    color: str
    opacity: float = 1.0


Shape = Union[Rect, Circle, Wedge, Path, GlyphMark]


@dataclass(frozen=True, slots=True)
class Label:
    x: float
    y: float
    text: str
    color: str
    size: float = 14.0
    weight: str = "bold"
    anchor: str = "middle"  # start | middle | end
    baseline: str = "middle"  # top | middle | bottom


@dataclass(frozen=True, slots=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class Mark:
    """Layout metadata for one data point."""

    index: int
    name: str
    value: float
    display_value: str
    color: str
    bounds: Bounds
    side: str | None = None  # process-flow emphasis side


@dataclass(frozen=True, slots=True)
class RenderInstructions:
    type: VisualType
    symbol: Symbol
    palette: tuple[str, ...]
    width: float = CANVAS_WIDTH
    height: float = CANVAS_HEIGHT
    gradients: tuple[Gradient, ...] = ()
    shapes: tuple[Shape, ...] = ()
    labels: tuple[Label, ...] = ()
    marks: tuple[Mark, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.marks
