"""Raster painting of render instructions using matplotlib."""

from __future__ import annotations

import base64
import re
from io import BytesIO
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from matplotlib import patches, patheffects
from matplotlib.axes import Axes
from matplotlib.colors import to_rgba

from ..core.logging_config import get_logger
from ..core.models import VisualizationCard
from .instructions import (
    Circle,
    GlyphMark,
    Gradient,
    Label,
    Path as PathShape,
    Rect,
    RenderInstructions,
    Shape,
    Wedge,
)
from .layouts import render_card

# Use non-interactive backend for server environments
matplotlib.use("Agg")

logger = get_logger(__name__)

# Canvas units are 1/100 inch; text and strokes are specified in canvas units
POINTS_PER_UNIT = 0.72
GRADIENT_STEPS = 256
BACKGROUND = "#f8fafc"

_H_ALIGN = {"start": "left", "middle": "center", "end": "right"}
_V_ALIGN = {"top": "top", "middle": "center", "bottom": "bottom"}


def chart_file_basename(board_name: str, card_id: str, position: int | None = None) -> str:
    """Filename (without extension) for a card's chart, safe to use as a path segment."""
    safe_id = re.sub(r"[^a-zA-Z0-9_-]", "_", card_id)
    if position is None:
        return f"{board_name}_{safe_id}"
    return f"{board_name}_{position + 1:02d}_{safe_id}"


def _shadow() -> list[patheffects.AbstractPathEffect]:
    return [
        patheffects.withSimplePatchShadow(offset=(2, -4), shadow_rgbFace="#0f172a", alpha=0.3),
    ]


class ChartPainter:
    """Paint RenderInstructions to PNG files and/or base64 strings."""

    def __init__(self, output_dir: Path | None = None, dpi: int = 100):
        """Initialize chart painter.

        Args:
            output_dir: Optional directory to save chart images. If None, charts are only returned as base64.
            dpi: Resolution for chart images (default: 100)
        """
        self.output_dir = output_dir
        self.dpi = dpi
        if output_dir:
            output_dir.mkdir(parents=True, exist_ok=True)

    def paint_card(
        self, card: VisualizationCard, board_name: str = "board", position: int | None = None
    ) -> dict[str, str]:
        """Lay out and paint a single card.

        Args:
            card: Card to paint
            board_name: Filename prefix shared by the board's charts
            position: Zero-based card position, numbered into the filename when given

        Returns:
            Dict with 'path' (if output_dir set) and 'base64' keys
        """
        instructions = render_card(card)
        return self.paint(instructions, chart_file_basename(board_name, card.id, position))

    def paint(self, instructions: RenderInstructions, filename: str) -> dict[str, str]:
        """Paint instructions onto a figure matching the virtual canvas.

        Args:
            instructions: Output of a layout algorithm
            filename: Base filename (without extension)

        Returns:
            Dict with 'path' (if output_dir set) and 'base64' keys
        """
        fig = plt.figure(figsize=(instructions.width / 100, instructions.height / 100))
        ax = fig.add_axes((0, 0, 1, 1))
        ax.set_xlim(0, instructions.width)
        ax.set_ylim(instructions.height, 0)
        ax.set_aspect("equal")
        ax.axis("off")
        fig.patch.set_facecolor(BACKGROUND)

        gradients = {g.id: g for g in instructions.gradients}
        for zorder, shape in enumerate(instructions.shapes, start=1):
            self._draw_shape(ax, shape, gradients, zorder)

        label_z = len(instructions.shapes) + 1
        for label in instructions.labels:
            self._draw_label(ax, label, label_z)

        logger.debug(
            "Painted chart",
            extra={
                "type": instructions.type.value,
                "shapes": len(instructions.shapes),
                "marks": len(instructions.marks),
            },
        )
        return self._save_chart(fig, filename)

    def _draw_shape(self, ax: Axes, shape: Shape, gradients: dict[str, Gradient], zorder: int) -> None:
        if isinstance(shape, GlyphMark):
            ax.text(
                shape.cx, shape.cy, shape.symbol.glyph,
                color=shape.color, alpha=shape.opacity, fontsize=shape.size * POINTS_PER_UNIT,
                ha="center", va="center", zorder=zorder,
            )
            return

        if isinstance(shape, PathShape) and not shape.closed:
            ax.plot(
                [p[0] for p in shape.points], [p[1] for p in shape.points],
                color=shape.stroke, linewidth=shape.stroke_width * POINTS_PER_UNIT,
                linestyle="--" if shape.dashed else "-", alpha=shape.opacity,
                solid_capstyle="round", zorder=zorder,
            )
            return

        patch = self._patch_for(shape)
        patch.set_zorder(zorder)
        if getattr(shape, "shadow", False):
            patch.set_path_effects(_shadow())
        ax.add_patch(patch)

        gradient_id = getattr(shape, "gradient", None)
        if gradient_id and gradient_id in gradients:
            patch.set_facecolor("none")
            self._fill_gradient(ax, patch, gradients[gradient_id], zorder)

    def _patch_for(self, shape: Shape) -> patches.Patch:
        if isinstance(shape, Rect):
            box = patches.FancyBboxPatch(
                (shape.x, shape.y), shape.width, shape.height,
                boxstyle=f"round,pad=0,rounding_size={min(shape.radius, shape.width / 2, shape.height / 2)}",
            )
            fill, opacity = shape.fill, shape.opacity
        elif isinstance(shape, Circle):
            box = patches.Circle((shape.cx, shape.cy), shape.r)
            fill, opacity = shape.fill, shape.opacity
        elif isinstance(shape, Wedge):
            # y grows downwards, so visual counter-clockwise angles are mirrored
            box = patches.Wedge(
                (shape.cx, shape.cy), shape.outer_radius, -shape.end_angle, -shape.start_angle,
                width=shape.outer_radius - shape.inner_radius,
            )
            fill, opacity = shape.fill, shape.opacity
        elif isinstance(shape, PathShape):
            box = patches.Polygon(list(shape.points), closed=True)
            fill, opacity = shape.fill or "none", shape.opacity
        else:
            raise TypeError(f"Unsupported shape: {type(shape).__name__}")

        box.set_facecolor(to_rgba(fill, opacity) if fill != "none" else "none")
        stroke = getattr(shape, "stroke", None)
        if stroke:
            box.set_edgecolor(stroke)
            box.set_linewidth(getattr(shape, "stroke_width", 1.0) * POINTS_PER_UNIT)
        else:
            box.set_edgecolor("none")
        return box

    def _fill_gradient(self, ax: Axes, patch: patches.Patch, gradient: Gradient, zorder: int) -> None:
        """Draw a gradient image clipped to ``patch``."""
        offsets = [stop.offset for stop in gradient.stops]
        rgba = np.array([to_rgba(stop.color, stop.opacity) for stop in gradient.stops])
        positions = np.linspace(0.0, 1.0, GRADIENT_STEPS)
        ramp = np.stack([np.interp(positions, offsets, rgba[:, c]) for c in range(4)], axis=-1)
        image = ramp[:, np.newaxis, :] if gradient.vertical else ramp[np.newaxis, :, :]

        box = patch.get_extents().transformed(ax.transData.inverted())
        if not box.width or not box.height:
            return
        top, bottom = min(box.y0, box.y1), max(box.y0, box.y1)
        im = ax.imshow(
            image,
            extent=(box.x0, box.x1, bottom, top),
            origin="upper",
            aspect="auto",
            interpolation="bilinear",
            zorder=zorder,
        )
        im.set_clip_path(patch)

    def _draw_label(self, ax: Axes, label: Label, zorder: int) -> None:
        ax.text(
            label.x, label.y, label.text,
            color=label.color,
            fontsize=label.size * POINTS_PER_UNIT,
            fontweight=label.weight,
            ha=_H_ALIGN.get(label.anchor, "center"),
            va=_V_ALIGN.get(label.baseline, "center"),
            zorder=zorder,
        )

    def _save_chart(self, fig: plt.Figure, filename: str) -> dict[str, str]:
        """Save chart to file and/or encode as base64.

        Args:
            fig: Matplotlib figure to save
            filename: Base filename (without extension)

        Returns:
            Dict with 'path' and/or 'base64' keys
        """
        result = {}

        if self.output_dir:
            filepath = self.output_dir / f"{filename}.png"
            try:
                fig.savefig(filepath, dpi=self.dpi, format="png", facecolor=fig.get_facecolor())
                result["path"] = str(filepath)
                logger.debug(f"Chart saved to {filepath}")
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to save chart to {filepath}: {e}")

        # Always generate base64 for embedding
        try:
            buffer = BytesIO()
            fig.savefig(buffer, dpi=self.dpi, format="png", facecolor=fig.get_facecolor())
            buffer.seek(0)
            result["base64"] = base64.b64encode(buffer.read()).decode("utf-8")
            buffer.close()
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to generate base64 for chart: {e}")

        plt.close(fig)
        return result
