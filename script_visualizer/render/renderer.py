from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from .. import __version__
from ..core.errors import ExportError
from ..core.logging_config import get_logger
from ..core.models import AnalysisResult, VisualizationCard
from ..visuals.charts import ChartPainter
from ..visuals.registry import resolve_palette, resolve_symbol

logger = get_logger(__name__)


class BoardRenderer:
    """Renders a visualization board using Jinja2 templates."""

    def __init__(
        self, templates_dir: Path | None = None, assets_dir: Path | None = None
    ):
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"
        # Escape HTML templates only; Markdown is emitted verbatim
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=lambda name: name is not None and name.endswith(".html.j2"),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.assets_dir = assets_dir
        self.painter = ChartPainter(output_dir=assets_dir)

    def render_html(self, result: AnalysisResult, generate_charts: bool = True) -> str:
        """Render a self-contained HTML board.

        Args:
            result: Validated analysis result
            generate_charts: Whether to paint and embed card charts (default: True)

        Returns:
            Rendered HTML string with charts embedded as base64 PNG

        Raises:
            ExportError: If the template is missing or rendering fails
        """
        charts = self._paint_cards(result) if generate_charts else {}
        return self._render("board.html.j2", result, charts)

    def render_markdown(
        self,
        result: AnalysisResult,
        generate_charts: bool = False,
        relative_to: Path | None = None,
    ) -> str:
        """Render a Markdown outline of the board.

        Chart images are referenced by path, so they are only linked when an
        assets directory is configured. Pass ``relative_to`` (the directory the
        Markdown file is written to) to link images relative to it.
        """
        charts = self._paint_cards(result) if generate_charts else {}
        if relative_to is not None:
            for chart in charts.values():
                if "path" in chart:
                    chart["path"] = Path(os.path.relpath(chart["path"], relative_to)).as_posix()
        return self._render("board.md.j2", result, charts)

    def _render(
        self, template_name: str, result: AnalysisResult, charts: dict[str, dict[str, str]]
    ) -> str:
        try:
            template = self.env.get_template(template_name)
            logger.debug(
                "Rendering board", extra={"template": template_name, "cards": len(result.cards)}
            )
            return template.render(
                title=result.title,
                summary=result.summary,
                cards=[self._card_context(card) for card in result.cards],
                scene_count=len(result.cards),
                data_point_count=sum(len(card.data) for card in result.cards),
                charts=charts,
                version=__version__,
            )
        except TemplateNotFound as e:
            logger.error("Board template not found", extra={"error": str(e)})
            raise ExportError(
                f"Board template not found: {e}. "
                f"Ensure script_visualizer/render/templates/{template_name} exists."
            ) from e
        except Exception as e:
            logger.error("Failed to render board", extra={"error": str(e)})
            raise ExportError(f"Failed to render board: {e}") from e

    @staticmethod
    def _card_context(card: VisualizationCard) -> dict[str, Any]:
        palette = resolve_palette(card.color_theme)
        return {
            "id": card.id,
            "title": card.title,
            "description": card.description,
            "script_segment": card.script_segment,
            "type": card.type.value,
            "type_label": card.type.value.replace("_", " ").title(),
            "symbol": resolve_symbol(card.visual_symbol),
            "accent": palette[0],
            "points": card.data,
        }

    def _paint_cards(self, result: AnalysisResult) -> dict[str, dict[str, str]]:
        """Paint every card, tolerating individual painting failures."""
        charts: dict[str, dict[str, str]] = {}
        failures: list[str] = []
        board_name = board_file_basename(result.title)

        for position, card in enumerate(result.cards):
            try:
                charts[card.id] = self.painter.paint_card(card, board_name, position)
            except Exception as e:
                failures.append(card.id)
                logger.warning(f"Failed to paint card {card.id}: {e}", exc_info=True)

        if failures:
            logger.warning(
                f"Painted {len(charts)}/{len(result.cards)} cards. Failures: {', '.join(failures)}",
                extra={"board": result.title, "failures": failures},
            )
        else:
            logger.info(
                f"Painted all {len(charts)} cards for board", extra={"board": result.title}
            )
        return charts


def board_file_basename(title: str) -> str:
    """Suggested export base name: non-alphanumerics replaced by underscores."""
    safe = re.sub(r"[^a-zA-Z0-9]", "_", title)
    return f"{safe}_VisualBoard"


def write_text(path: str | Path, content: str) -> None:
    """Write text content to file."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")
