"""Chart layout algorithms.

Each algorithm is a pure function ``(points, palette, symbol) ->
RenderInstructions`` over the fixed virtual canvas. Algorithms hold no state
between calls and never depend on other cards. Zero points give an empty
container; colors always cycle through the palette by position.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

from ..core.enums import VisualType
from ..core.models import VisualizationCard
from .instructions import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    Bounds,
    Circle,
    GlyphMark,
    Gradient,
    GradientStop,
    Label,
    Mark,
    Path,
    Rect,
    RenderInstructions,
    Shape,
    Wedge,
)
from .normalize import NormalizedPoint, clamp_magnitude, format_number, normalize_points
from .registry import Symbol, resolve_palette, resolve_symbol
from .shading import GRADIENT_EDGE_SHADE, shade

ChartAlgorithm = Callable[[Sequence[NormalizedPoint], Sequence[str], Symbol], RenderInstructions]

# Cartesian plot area (bar and line charts)
PLOT_LEFT = 70.0
PLOT_RIGHT = CANVAS_WIDTH - 30.0
PLOT_TOP = 60.0
PLOT_BOTTOM = CANVAS_HEIGHT - 50.0
TICK_INTERVALS = 4

BAR_MAX_WIDTH = 60.0
BAR_LABEL_OFFSET = 12.0
LINE_STROKE_WIDTH = 6.0
LINE_LABEL_OFFSET = 15.0

PIE_INNER_RATIO = 0.45
PIE_OUTER_RATIO = 0.70
PIE_PADDING_ANGLE = 5.0
PIE_LABEL_OFFSET = 25.0
PIE_BADGE_RADIUS = 40.0

GRID_COLUMNS = 2
TILE_PADDING = 32.0
TILE_GAP = 32.0
TILE_MAX_HEIGHT = 200.0

ROW_PADDING = 24.0
ROW_GAP = 16.0
ROW_MAX_HEIGHT = 80.0
MIN_ROW_HEIGHT = 12.0

AXIS_COLOR = "#94a3b8"
GRID_COLOR = "#cbd5e1"
TEXT_DARK = "#1e293b"
TEXT_BODY = "#334155"
TEXT_MUTED = "#64748b"
TEXT_SOFT = "#94a3b8"
CONNECTOR_COLOR = "#e2e8f0"
SURFACE = "#ffffff"
SURFACE_BORDER = "#f1f5f9"


# ---------------------------------------------------------------------------
# shared helpers
# ---------------------------------------------------------------------------


def _nice_step(raw: float) -> float:
    exponent = math.floor(math.log10(raw))
    base = 10.0**exponent
    for nice in (1.0, 2.0, 2.5, 5.0, 10.0):
        if raw / base <= nice:
            return nice * base
    return 10.0 * base


def _value_axis(values: Sequence[float]) -> tuple[float, float, tuple[float, ...]]:
    """Return (axis_min, axis_max, ticks) covering ``values`` and zero."""
    hi = max(0.0, *values)
    lo = min(0.0, *values)
    if hi == lo:
        hi = lo + 1.0
    step = _nice_step((hi - lo) / TICK_INTERVALS)
    top = math.ceil(round(hi / step, 9)) * step
    bottom = math.floor(round(lo / step, 9)) * step
    count = int(round((top - bottom) / step))
    digits = 9 - math.floor(math.log10(step))
    ticks = tuple(round(bottom + i * step, digits) for i in range(count + 1))
    return bottom, top, ticks


def _magnitudes(points: Sequence[NormalizedPoint]) -> list[float]:
    return [clamp_magnitude(p.numeric_value) for p in points]


def _scale(axis_min: float, axis_max: float) -> Callable[[float], float]:
    span = PLOT_BOTTOM - PLOT_TOP

    def to_y(value: float) -> float:
        return PLOT_BOTTOM - (value - axis_min) / (axis_max - axis_min) * span

    return to_y


def _band_centers(count: int) -> tuple[float, list[float]]:
    slot = (PLOT_RIGHT - PLOT_LEFT) / count
    return slot, [PLOT_LEFT + slot * (i + 0.5) for i in range(count)]


def _grid(ticks: Sequence[float], to_y: Callable[[float], float]) -> tuple[list[Shape], list[Label]]:
    shapes: list[Shape] = []
    labels: list[Label] = []
    for tick in ticks:
        y = to_y(tick)
        shapes.append(
            Path(
                points=((PLOT_LEFT, y), (PLOT_RIGHT, y)),
                stroke=GRID_COLOR,
                stroke_width=1.0,
                dashed=True,
                opacity=0.6,
            )
        )
        labels.append(
            Label(PLOT_LEFT - 10, y, format_number(tick), TEXT_SOFT, size=12, weight="semibold", anchor="end")
        )
    shapes.append(
        Path(points=((PLOT_LEFT, PLOT_BOTTOM), (PLOT_RIGHT, PLOT_BOTTOM)), stroke=AXIS_COLOR, stroke_width=2.0)
    )
    return shapes, labels


def _category_label(x: float, name: str) -> Label:
    return Label(x, PLOT_BOTTOM + 12, name, "#475569", size=14, weight="bold", baseline="top")


def _stacked_rows(count: int, padding: float, gap: float, max_height: float) -> tuple[float, float]:
    """Return (row_height, first_row_top) for ``count`` vertically centered rows."""
    available = CANVAS_HEIGHT - 2 * padding - gap * (count - 1)
    row_height = max(MIN_ROW_HEIGHT, min(max_height, available / count))
    total = count * row_height + (count - 1) * gap
    return row_height, (CANVAS_HEIGHT - total) / 2


def _arc_bounds(wedge: Wedge) -> Bounds:
    angles = [wedge.start_angle, wedge.end_angle]
    quarter = math.ceil(wedge.start_angle / 90.0) * 90.0
    while quarter < wedge.end_angle:
        angles.append(quarter)
        quarter += 90.0
    xs: list[float] = []
    ys: list[float] = []
    for angle in angles:
        rad = math.radians(angle)
        for radius in (wedge.inner_radius, wedge.outer_radius):
            xs.append(wedge.cx + radius * math.cos(rad))
            ys.append(wedge.cy - radius * math.sin(rad))
    return Bounds(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def _mark(point: NormalizedPoint, bounds: Bounds, side: str | None = None) -> Mark:
    return Mark(
        index=point.index,
        name=point.name,
        value=point.numeric_value,
        display_value=point.display_value,
        color=point.color,
        bounds=bounds,
        side=side,
    )


def bar_gradient_id(index: int, palette: Sequence[str]) -> str:
    return f"bar-gradient-{index % len(palette)}"


def _bar_gradients(palette: Sequence[str]) -> tuple[Gradient, ...]:
    return tuple(
        Gradient(
            id=f"bar-gradient-{idx}",
            stops=(
                GradientStop(0.0, shade(color, GRADIENT_EDGE_SHADE)),
                GradientStop(0.5, color),
                GradientStop(1.0, shade(color, GRADIENT_EDGE_SHADE)),
            ),
        )
        for idx, color in enumerate(palette)
    )


# ---------------------------------------------------------------------------
# algorithms
# ---------------------------------------------------------------------------


def layout_bar_chart(
    points: Sequence[NormalizedPoint], palette: Sequence[str], symbol: Symbol
) -> RenderInstructions:
    """One gradient bar per point, left to right, numeric label above each bar."""
    palette = tuple(palette)
    gradients = _bar_gradients(palette)
    if not points:
        return RenderInstructions(VisualType.BAR_CHART, symbol, palette, gradients=gradients)

    values = _magnitudes(points)
    axis_min, axis_max, ticks = _value_axis(values)
    to_y = _scale(axis_min, axis_max)
    shapes, labels = _grid(ticks, to_y)
    slot, centers = _band_centers(len(points))
    bar_width = min(BAR_MAX_WIDTH, slot * 0.8)
    baseline = to_y(0.0)

    marks = []
    for point, value, cx in zip(points, values, centers, strict=True):
        top_y = to_y(value)
        bar = Rect(
            x=cx - bar_width / 2,
            y=min(baseline, top_y),
            width=bar_width,
            height=abs(baseline - top_y),
            fill=point.color,
            gradient=bar_gradient_id(point.index, palette),
            radius=8.0,
            shadow=True,
        )
        shapes.append(bar)
        labels.append(
            Label(cx, bar.y - BAR_LABEL_OFFSET, format_number(value), TEXT_BODY,
                  size=16, weight="heavy", baseline="bottom")
        )
        labels.append(_category_label(cx, point.name))
        marks.append(_mark(point, Bounds(bar.x, bar.y, bar.width, bar.height)))

    return RenderInstructions(
        VisualType.BAR_CHART, symbol, palette,
        gradients=gradients, shapes=tuple(shapes), labels=tuple(labels), marks=tuple(marks),
    )


def layout_line_chart(
    points: Sequence[NormalizedPoint], palette: Sequence[str], symbol: Symbol
) -> RenderInstructions:
    """Single area series; the fill fades from the first to the second palette color."""
    palette = tuple(palette)
    gradients = (
        Gradient(
            id="area-gradient",
            stops=(
                GradientStop(0.05, palette[0], 0.8),
                GradientStop(0.95, palette[1 % len(palette)], 0.1),
            ),
            vertical=True,
        ),
    )
    if not points:
        return RenderInstructions(VisualType.LINE_CHART, symbol, palette, gradients=gradients)

    values = _magnitudes(points)
    axis_min, axis_max, ticks = _value_axis(values)
    to_y = _scale(axis_min, axis_max)
    shapes, labels = _grid(ticks, to_y)
    _, centers = _band_centers(len(points))

    vertices = tuple((cx, to_y(value)) for value, cx in zip(values, centers, strict=True))
    area = ((vertices[0][0], PLOT_BOTTOM), *vertices, (vertices[-1][0], PLOT_BOTTOM))
    shapes.append(Path(points=area, fill=palette[0], gradient="area-gradient", closed=True, shadow=True))
    shapes.append(Path(points=vertices, stroke=palette[0], stroke_width=LINE_STROKE_WIDTH))

    marks = []
    for point, value, (x, y) in zip(points, values, vertices, strict=True):
        labels.append(
            Label(x, y - LINE_LABEL_OFFSET, format_number(value), palette[0],
                  size=15, weight="heavy", baseline="bottom")
        )
        labels.append(_category_label(x, point.name))
        marks.append(_mark(point, Bounds(x, y, 0.0, PLOT_BOTTOM - y)))

    return RenderInstructions(
        VisualType.LINE_CHART, symbol, palette,
        gradients=gradients, shapes=tuple(shapes), labels=tuple(labels), marks=tuple(marks),
    )


def layout_pie_chart(
    points: Sequence[NormalizedPoint], palette: Sequence[str], symbol: Symbol
) -> RenderInstructions:
    """Donut wedges in input order with a symbol badge in the center."""
    palette = tuple(palette)
    if not points:
        return RenderInstructions(VisualType.PIE_CHART, symbol, palette)

    cx, cy = CANVAS_WIDTH / 2, CANVAS_HEIGHT / 2
    half = min(CANVAS_WIDTH, CANVAS_HEIGHT) / 2
    inner, outer = half * PIE_INNER_RATIO, half * PIE_OUTER_RATIO

    values = _magnitudes(points)
    magnitudes = [max(0.0, value) for value in values]
    total = sum(magnitudes)
    non_zero = sum(1 for m in magnitudes if m > 0)
    sweep_total = 360.0 - non_zero * PIE_PADDING_ANGLE

    shapes: list[Shape] = []
    labels: list[Label] = []
    marks = []
    angle = 0.0
    for i, (point, value, magnitude) in enumerate(zip(points, values, magnitudes, strict=True)):
        if i > 0 and magnitude > 0:
            angle += PIE_PADDING_ANGLE
        sweep = sweep_total * (magnitude / total) if total > 0 else 0.0
        wedge = Wedge(cx, cy, inner, outer, angle, angle + sweep, point.color, stroke="#ffffff")
        angle += sweep
        shapes.append(wedge)

        mid = math.radians((wedge.start_angle + wedge.end_angle) / 2)
        cos_mid = math.cos(mid)
        anchor = "middle" if abs(cos_mid) < 0.1 else ("start" if cos_mid > 0 else "end")
        labels.append(
            Label(
                cx + (outer + PIE_LABEL_OFFSET) * cos_mid,
                cy - (outer + PIE_LABEL_OFFSET) * math.sin(mid),
                format_number(value),
                TEXT_DARK,
                size=14,
                weight="heavy",
                anchor=anchor,
            )
        )
        marks.append(_mark(point, _arc_bounds(wedge)))

    shapes.append(Circle(cx, cy, PIE_BADGE_RADIUS, palette[0], stroke="#ffffff", stroke_width=4.0, shadow=True))
    shapes.append(GlyphMark(cx, cy, 36.0, symbol, "#ffffff"))

    return RenderInstructions(
        VisualType.PIE_CHART, symbol, palette,
        shapes=tuple(shapes), labels=tuple(labels), marks=tuple(marks),
    )


def layout_stat_cards(
    points: Sequence[NormalizedPoint], palette: Sequence[str], symbol: Symbol
) -> RenderInstructions:
    """Two-column grid of tiles, row-major, headline shows the display value."""
    palette = tuple(palette)
    if not points:
        return RenderInstructions(VisualType.STAT_CARD, symbol, palette)

    rows = math.ceil(len(points) / GRID_COLUMNS)
    tile_w = (CANVAS_WIDTH - 2 * TILE_PADDING - TILE_GAP * (GRID_COLUMNS - 1)) / GRID_COLUMNS
    tile_h, top = _stacked_rows(rows, TILE_PADDING, TILE_GAP, TILE_MAX_HEIGHT)

    shapes: list[Shape] = []
    labels: list[Label] = []
    marks = []
    for position, point in enumerate(points):
        row, col = divmod(position, GRID_COLUMNS)
        x = TILE_PADDING + col * (tile_w + TILE_GAP)
        y = top + row * (tile_h + TILE_GAP)
        tint_radius = min(tile_w, tile_h) * 0.6

        shapes.append(Rect(x, y, tile_w, tile_h, SURFACE, radius=24.0, stroke=SURFACE_BORDER,
                           stroke_width=1.0, shadow=True))
        shapes.append(Wedge(x + tile_w, y, 0.0, tint_radius, 180.0, 270.0, point.color,
                                  opacity=0.1, shadow=False))
        shapes.append(GlyphMark(x + tile_w - 32, y + 32, 24.0, symbol, point.color, opacity=0.5))

        labels.append(Label(x + 24, y + 28, point.name.upper(), TEXT_MUTED, size=11, anchor="start"))
        headline_y = y + tile_h - (44 if point.description else 20)
        labels.append(Label(x + 24, headline_y, point.display_value, point.color, size=44,
                            weight="heavy", anchor="start", baseline="bottom"))
        if point.description:
            labels.append(Label(x + 24, y + tile_h - 20, point.description, TEXT_SOFT, size=13,
                                weight="semibold", anchor="start", baseline="bottom"))
        marks.append(_mark(point, Bounds(x, y, tile_w, tile_h)))

    return RenderInstructions(
        VisualType.STAT_CARD, symbol, palette,
        shapes=tuple(shapes), labels=tuple(labels), marks=tuple(marks),
    )


def layout_process_flow(
    points: Sequence[NormalizedPoint], palette: Sequence[str], symbol: Symbol
) -> RenderInstructions:
    """Vertical steps; even indexes put the bubble on the left, odd on the right."""
    palette = tuple(palette)
    if not points:
        return RenderInstructions(VisualType.PROCESS_FLOW, symbol, palette)

    row_h, top = _stacked_rows(len(points), ROW_PADDING, ROW_GAP, ROW_MAX_HEIGHT)
    radius = min(24.0, row_h / 2)
    card_w = CANVAS_WIDTH - 2 * ROW_PADDING - 2 * radius - 16

    shapes: list[Shape] = []
    labels: list[Label] = []
    marks = []
    for position, point in enumerate(points):
        y = top + position * (row_h + ROW_GAP)
        cy = y + row_h / 2
        side = "left" if position % 2 == 0 else "right"
        if side == "left":
            bubble_x = ROW_PADDING + radius
            card_x = ROW_PADDING + 2 * radius + 16
        else:
            bubble_x = CANVAS_WIDTH - ROW_PADDING - radius
            card_x = ROW_PADDING

        shapes.append(Rect(card_x, y, card_w, row_h, SURFACE, radius=16.0, shadow=True))
        shapes.append(Rect(card_x, y, 4.0, row_h, point.color))
        shapes.append(Circle(bubble_x, cy, radius, point.color, stroke="#ffffff", stroke_width=2.0, shadow=True))
        if position < len(points) - 1:
            shapes.append(
                Path(points=((bubble_x, cy + radius), (bubble_x, y + row_h + ROW_GAP)),
                     stroke=CONNECTOR_COLOR, stroke_width=4.0)
            )

        labels.append(Label(bubble_x, cy, str(position + 1), "#ffffff", size=18, weight="heavy"))
        labels.append(Label(card_x + 20, cy, point.name, TEXT_BODY, size=18, anchor="start"))
        labels.append(Label(card_x + card_w - 20, cy, point.display_value, TEXT_MUTED, size=15,
                            weight="semibold", anchor="end"))
        marks.append(_mark(point, Bounds(card_x, y, card_w, row_h), side=side))

    return RenderInstructions(
        VisualType.PROCESS_FLOW, symbol, palette,
        shapes=tuple(shapes), labels=tuple(labels), marks=tuple(marks),
    )


def layout_key_points(
    points: Sequence[NormalizedPoint], palette: Sequence[str], symbol: Symbol
) -> RenderInstructions:
    """One row per point with a left accent bar and a numbered badge."""
    palette = tuple(palette)
    if not points:
        return RenderInstructions(VisualType.KEY_POINTS, symbol, palette)

    row_h, top = _stacked_rows(len(points), TILE_PADDING, ROW_GAP, ROW_MAX_HEIGHT)
    row_w = CANVAS_WIDTH - 2 * TILE_PADDING
    badge = min(40.0, row_h - 8)

    shapes: list[Shape] = []
    labels: list[Label] = []
    marks = []
    for position, point in enumerate(points):
        y = top + position * (row_h + ROW_GAP)
        cy = y + row_h / 2
        badge_x = TILE_PADDING + 28
        text_x = badge_x + badge + 20

        shapes.append(Rect(TILE_PADDING, y, row_w, row_h, SURFACE, radius=16.0, stroke=SURFACE_BORDER,
                           stroke_width=1.0))
        shapes.append(Rect(TILE_PADDING, y, 8.0, row_h, point.color))
        shapes.append(Rect(badge_x, cy - badge / 2, badge, badge, point.color, opacity=0.125, radius=8.0))

        labels.append(Label(badge_x + badge / 2, cy, str(position + 1), point.color, size=20, weight="heavy"))
        labels.append(Label(text_x, cy - 10, point.name, TEXT_DARK, size=18, anchor="start"))
        labels.append(Label(text_x, cy + 14, point.display_value, TEXT_MUTED, size=14, weight="medium",
                            anchor="start"))
        marks.append(_mark(point, Bounds(TILE_PADDING, y, row_w, row_h)))

    return RenderInstructions(
        VisualType.KEY_POINTS, symbol, palette,
        shapes=tuple(shapes), labels=tuple(labels), marks=tuple(marks),
    )


CHART_ALGORITHMS: dict[VisualType, ChartAlgorithm] = {
    VisualType.BAR_CHART: layout_bar_chart,
    VisualType.LINE_CHART: layout_line_chart,
    VisualType.PIE_CHART: layout_pie_chart,
    VisualType.STAT_CARD: layout_stat_cards,
    VisualType.PROCESS_FLOW: layout_process_flow,
    VisualType.KEY_POINTS: layout_key_points,
}


def render(
    visual_type: VisualType | str,
    points: Sequence[NormalizedPoint],
    palette: Sequence[str],
    symbol: Symbol,
) -> RenderInstructions:
    """Dispatch to the layout algorithm for ``visual_type``.

    Raises:
        ValueError: If ``visual_type`` is not one of the six chart types
    """
    algorithm = CHART_ALGORITHMS[VisualType(visual_type)]
    return algorithm(points, palette, symbol)


def render_card(card: VisualizationCard) -> RenderInstructions:
    """Resolve style tokens, normalize the card's data and lay it out."""
    palette = resolve_palette(card.color_theme)
    symbol = resolve_symbol(card.visual_symbol)
    points = normalize_points(card.data, palette)
    return render(card.type, points, palette, symbol)
