"""Tests for the six chart layout algorithms."""

from __future__ import annotations

import pytest

from script_visualizer.core.enums import VisualType
from script_visualizer.core.models import DataPoint, VisualizationCard
from script_visualizer.visuals.instructions import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    Circle,
    GlyphMark,
    Path,
    Rect,
    Wedge,
)
from script_visualizer.visuals.layouts import (
    BAR_LABEL_OFFSET,
    LINE_LABEL_OFFSET,
    PIE_PADDING_ANGLE,
    render,
    render_card,
)
from script_visualizer.visuals.normalize import NormalizedPoint, normalize_points
from script_visualizer.visuals.registry import resolve_palette, resolve_symbol

ALL_TYPES = list(VisualType)
PALETTE = resolve_palette("indigo")
SYMBOL = resolve_symbol("money")


def _points(*values: str | int | float):
    return normalize_points([DataPoint(f"P{i + 1}", v) for i, v in enumerate(values)], PALETTE)


def _card(visual_type: VisualType, values: list[str | int | float], theme: str | None = "indigo") -> VisualizationCard:
    return VisualizationCard(
        id="card",
        title="Card",
        description="",
        script_segment="",
        type=visual_type,
        data=tuple(DataPoint(f"Q{i + 1}", v) for i, v in enumerate(values)),
        visual_symbol="money",
        color_theme=theme,
    )


class TestBarChartScenario:
    """Three quarters of revenue as a bar chart."""

    @pytest.fixture
    def instructions(self):
        return render_card(_card(VisualType.BAR_CHART, ["10,000", "12,500", "15,000"]))

    def test_three_marks_in_input_order(self, instructions) -> None:
        assert [m.name for m in instructions.marks] == ["Q1", "Q2", "Q3"]
        assert [m.index for m in instructions.marks] == [0, 1, 2]

    def test_colors_follow_palette(self, instructions) -> None:
        assert [m.color for m in instructions.marks] == list(PALETTE[:3])

    def test_numeric_and_display_values(self, instructions) -> None:
        assert [m.value for m in instructions.marks] == [10000.0, 12500.0, 15000.0]
        assert [m.display_value for m in instructions.marks] == ["10,000", "12,500", "15,000"]

    def test_bars_left_to_right_with_equal_width(self, instructions) -> None:
        bars = [s for s in instructions.shapes if isinstance(s, Rect) and s.gradient]
        assert len(bars) == 3
        assert bars[0].x < bars[1].x < bars[2].x
        assert len({b.width for b in bars}) == 1
        assert bars[0].height < bars[1].height < bars[2].height

    def test_bars_use_darker_edge_gradients(self, instructions) -> None:
        gradients = {g.id: g for g in instructions.gradients}
        bars = [s for s in instructions.shapes if isinstance(s, Rect) and s.gradient]
        for i, bar in enumerate(bars):
            gradient = gradients[bar.gradient]
            assert gradient.stops[1].color == PALETTE[i]
            assert gradient.stops[0].color == gradient.stops[2].color != PALETTE[i]

    def test_numeric_label_centered_above_each_bar(self, instructions) -> None:
        bars = [s for s in instructions.shapes if isinstance(s, Rect) and s.gradient]
        for bar, text in zip(bars, ["10000", "12500", "15000"], strict=True):
            label = next(
                lbl for lbl in instructions.labels if lbl.text == text and lbl.weight == "heavy"
            )
            assert label.x == pytest.approx(bar.x + bar.width / 2)
            assert label.y == pytest.approx(bar.y - BAR_LABEL_OFFSET)

    def test_value_axis_ticks(self, instructions) -> None:
        ticks = [lbl.text for lbl in instructions.labels if lbl.weight == "semibold"]
        assert ticks == ["0", "5000", "10000", "15000"]


def test_negative_bar_grows_down_from_baseline() -> None:
    instructions = render(VisualType.BAR_CHART, _points(-5, 10), PALETTE, SYMBOL)
    negative, positive = instructions.marks
    assert negative.bounds.height > 0
    assert negative.bounds.y == pytest.approx(positive.bounds.y + positive.bounds.height)


class TestEmptyAndSinglePoint:
    """Degenerate inputs never raise."""

    @pytest.mark.parametrize("visual_type", ALL_TYPES)
    def test_zero_points_give_empty_container(self, visual_type: VisualType) -> None:
        instructions = render(visual_type, (), PALETTE, SYMBOL)

        assert instructions.type is visual_type
        assert instructions.is_empty
        assert instructions.shapes == ()
        assert instructions.labels == ()
        assert (instructions.width, instructions.height) == (CANVAS_WIDTH, CANVAS_HEIGHT)

    @pytest.mark.parametrize("visual_type", ALL_TYPES)
    def test_single_point_has_complete_layout(self, visual_type: VisualType) -> None:
        instructions = render(visual_type, _points("42"), PALETTE, SYMBOL)

        assert len(instructions.marks) == 1
        mark = instructions.marks[0]
        assert mark.color == PALETTE[0]
        assert mark.value == 42.0
        assert instructions.shapes
        assert instructions.labels

    @pytest.mark.parametrize("visual_type", ALL_TYPES)
    def test_empty_card_renders(self, visual_type: VisualType) -> None:
        assert render_card(_card(visual_type, [])).is_empty


@pytest.mark.parametrize("visual_type", ALL_TYPES)
def test_rendering_is_idempotent(visual_type: VisualType) -> None:
    points = _points("$1,200", "30%", "N/A", 7)

    first = render(visual_type, points, PALETTE, SYMBOL)
    second = render(visual_type, points, PALETTE, SYMBOL)

    assert first == second
    assert hash(first) == hash(second)


@pytest.mark.parametrize("visual_type", ALL_TYPES)
def test_colors_cycle_past_palette_length(visual_type: VisualType) -> None:
    points = _points(*range(1, 13))

    instructions = render(visual_type, points, PALETTE, SYMBOL)

    assert [m.color for m in instructions.marks] == [PALETTE[i % len(PALETTE)] for i in range(12)]
    assert instructions.palette == PALETTE


@pytest.mark.parametrize("visual_type", ALL_TYPES)
def test_marks_stay_on_canvas(visual_type: VisualType) -> None:
    instructions = render(visual_type, _points(5, 3, 8, 1, 9, 2, 4), PALETTE, SYMBOL)

    for mark in instructions.marks:
        b = mark.bounds
        assert 0 <= b.x and b.x + b.width <= CANVAS_WIDTH
        assert 0 <= b.y and b.y + b.height <= CANVAS_HEIGHT


@pytest.mark.parametrize("visual_type", ALL_TYPES)
@pytest.mark.parametrize("value", [1.7e308, -1.7e308, 5e-324, 10**400])
def test_extreme_magnitudes_render(visual_type: VisualType, value: float) -> None:
    instructions = render_card(_card(visual_type, [value, 3]))

    assert len(instructions.marks) == 2
    for mark in instructions.marks:
        b = mark.bounds
        assert 0 <= b.x and b.x + b.width <= CANVAS_WIDTH
        assert 0 <= b.y and b.y + b.height <= CANVAS_HEIGHT


@pytest.mark.parametrize("visual_type", [VisualType.BAR_CHART, VisualType.LINE_CHART, VisualType.PIE_CHART])
def test_unclamped_points_render(visual_type: VisualType) -> None:
    points = (NormalizedPoint(0, "huge", 1.7e308, "huge", PALETTE[0]),)

    instructions = render(visual_type, points, PALETTE, SYMBOL)

    assert len(instructions.marks) == 1


def test_subnormal_value_counts_as_zero_on_axis() -> None:
    instructions = render_card(_card(VisualType.BAR_CHART, [5e-324]))

    ticks = [label.text for label in instructions.labels if label.weight == "semibold"]
    assert ticks == ["0", "0.25", "0.5", "0.75", "1"]


def test_tiny_values_keep_distinct_ticks() -> None:
    instructions = render_card(_card(VisualType.BAR_CHART, [4e-299]))

    ticks = [label.text for label in instructions.labels if label.weight == "semibold"]
    assert len(set(ticks)) == len(ticks) == 5


def test_huge_pie_splits_evenly() -> None:
    instructions = render_card(_card(VisualType.PIE_CHART, [1e308, 1e308]))

    first, second = [s for s in instructions.shapes if isinstance(s, Wedge)]
    assert first.end_angle - first.start_angle == pytest.approx(175.0)
    assert second.end_angle - second.start_angle == pytest.approx(175.0)


def test_bar_gradients_are_reused_cyclically() -> None:
    instructions = render(VisualType.BAR_CHART, _points(*range(1, 8)), PALETTE, SYMBOL)

    bars = [s for s in instructions.shapes if isinstance(s, Rect) and s.gradient]
    assert len(instructions.gradients) == len(PALETTE)
    assert bars[5].gradient == bars[0].gradient == "bar-gradient-0"


class TestLineChart:
    def test_area_fades_between_first_two_colors(self) -> None:
        instructions = render(VisualType.LINE_CHART, _points(3, 5, 4), PALETTE, SYMBOL)

        (gradient,) = instructions.gradients
        assert gradient.vertical
        assert [s.color for s in gradient.stops] == [PALETTE[0], PALETTE[1]]
        assert gradient.stops[0].opacity > gradient.stops[1].opacity

        area = next(s for s in instructions.shapes if isinstance(s, Path) and s.closed)
        assert area.gradient == gradient.id

    def test_single_continuous_series(self) -> None:
        instructions = render(VisualType.LINE_CHART, _points(3, 5, 4), PALETTE, SYMBOL)

        series = [s for s in instructions.shapes if isinstance(s, Path) and s.stroke == PALETTE[0]]
        assert len(series) == 1
        xs = [p[0] for p in series[0].points]
        assert xs == sorted(xs) and len(xs) == 3

    def test_labels_above_points(self) -> None:
        instructions = render(VisualType.LINE_CHART, _points(3, 5), PALETTE, SYMBOL)

        for mark, text in zip(instructions.marks, ["3", "5"], strict=True):
            label = next(lbl for lbl in instructions.labels if lbl.text == text and lbl.color == PALETTE[0])
            assert label.y == pytest.approx(mark.bounds.y - LINE_LABEL_OFFSET)


class TestPieChart:
    def test_wedges_in_order_with_padding(self) -> None:
        instructions = render(VisualType.PIE_CHART, _points(50, 30, 20), PALETTE, SYMBOL)

        wedges = [s for s in instructions.shapes if isinstance(s, Wedge)]
        assert [w.fill for w in wedges] == list(PALETTE[:3])
        assert wedges[0].start_angle == 0.0
        for prev, nxt in zip(wedges, wedges[1:]):
            assert nxt.start_angle == pytest.approx(prev.end_angle + PIE_PADDING_ANGLE)
        assert wedges[-1].end_angle == pytest.approx(360.0 - PIE_PADDING_ANGLE)

    def test_sweeps_proportional_to_values(self) -> None:
        instructions = render(VisualType.PIE_CHART, _points(30, 10), PALETTE, SYMBOL)

        big, small = (w for w in instructions.shapes if isinstance(w, Wedge))
        assert (big.end_angle - big.start_angle) == pytest.approx(3 * (small.end_angle - small.start_angle))

    def test_center_badge_shows_symbol_on_primary_color(self) -> None:
        instructions = render(VisualType.PIE_CHART, _points(1, 2), PALETTE, SYMBOL)

        badge = next(s for s in instructions.shapes if isinstance(s, Circle))
        glyph = next(s for s in instructions.shapes if isinstance(s, GlyphMark))
        assert badge.fill == PALETTE[0]
        assert glyph.symbol == SYMBOL
        assert glyph.color == "#ffffff"
        assert (glyph.cx, glyph.cy) == (badge.cx, badge.cy)

    def test_all_zero_values_do_not_raise(self) -> None:
        instructions = render(VisualType.PIE_CHART, _points("N/A", 0), PALETTE, SYMBOL)

        wedges = [s for s in instructions.shapes if isinstance(s, Wedge)]
        assert all(w.start_angle == w.end_angle for w in wedges)
        assert len(instructions.marks) == 2


class TestStatCards:
    def test_two_column_grid_row_major(self) -> None:
        instructions = render(VisualType.STAT_CARD, _points("94%", "61", "3x"), PALETTE, SYMBOL)

        first, second, third = (m.bounds for m in instructions.marks)
        assert first.y == second.y and first.x < second.x
        assert third.x == first.x and third.y > first.y

    def test_headline_shows_original_text(self) -> None:
        instructions = render(VisualType.STAT_CARD, _points("94%"), PALETTE, SYMBOL)

        headline = next(lbl for lbl in instructions.labels if lbl.size == 44)
        assert headline.text == "94%"
        assert headline.color == PALETTE[0]

    def test_description_is_shown(self) -> None:
        points = normalize_points([DataPoint("Rate", "94%", description="up from 88%")], PALETTE)
        instructions = render(VisualType.STAT_CARD, points, PALETTE, SYMBOL)

        assert "up from 88%" in [lbl.text for lbl in instructions.labels]

    def test_tiles_tinted_by_point_color(self) -> None:
        instructions = render(VisualType.STAT_CARD, _points(1, 2), PALETTE, SYMBOL)

        tints = [s for s in instructions.shapes if isinstance(s, Wedge)]
        assert [t.fill for t in tints] == list(PALETTE[:2])
        assert all(t.opacity < 1 for t in tints)


class TestProcessFlow:
    def test_sides_alternate_by_step_index(self) -> None:
        instructions = render(VisualType.PROCESS_FLOW, _points("a", "b", "c", "d", "e"), PALETTE, SYMBOL)

        assert [m.side for m in instructions.marks] == ["left", "right", "left", "right", "left"]

    def test_steps_flow_downwards_with_connectors(self) -> None:
        instructions = render(VisualType.PROCESS_FLOW, _points("a", "b", "c"), PALETTE, SYMBOL)

        ys = [m.bounds.y for m in instructions.marks]
        assert ys == sorted(ys)
        connectors = [s for s in instructions.shapes if isinstance(s, Path)]
        assert len(connectors) == 2

    def test_bubbles_use_step_color(self) -> None:
        instructions = render(VisualType.PROCESS_FLOW, _points("a", "b"), PALETTE, SYMBOL)

        bubbles = [s for s in instructions.shapes if isinstance(s, Circle)]
        assert [b.fill for b in bubbles] == list(PALETTE[:2])
        assert ["1", "2"] == [lbl.text for lbl in instructions.labels if lbl.text in ("1", "2")]


class TestKeyPoints:
    def test_rows_with_accent_bar_and_badge(self) -> None:
        instructions = render(VisualType.KEY_POINTS, _points("x", "y", "z"), PALETTE, SYMBOL)

        accents = [s for s in instructions.shapes if isinstance(s, Rect) and s.width == 8.0]
        assert [a.fill for a in accents] == list(PALETTE[:3])
        badges = [s for s in instructions.shapes if isinstance(s, Rect) and s.opacity < 1]
        assert len(badges) == 3
        ys = [m.bounds.y for m in instructions.marks]
        assert ys == sorted(ys)


def test_unknown_type_raises() -> None:
    with pytest.raises(ValueError):
        render("DONUT_CHART", _points(1), PALETTE, SYMBOL)


def test_render_accepts_type_strings() -> None:
    assert render("KEY_POINTS", _points(1), PALETTE, SYMBOL).type is VisualType.KEY_POINTS


def test_unknown_theme_uses_fallback_palette() -> None:
    instructions = render_card(_card(VisualType.BAR_CHART, [1, 2], theme="plaid"))
    assert instructions.palette == resolve_palette("default")
