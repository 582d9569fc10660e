from __future__ import annotations

import asyncio
import json
from dataclasses import asdict
from pathlib import Path

import typer

from .. import __version__
from ..analysis.client import ClaudeScriptAnalyzer, ScriptAnalysisService
from ..analysis.orchestrator import AnalysisOrchestrator
from ..core.config import Settings, get_settings
from ..core.errors import AnalysisFailed, ExportError
from ..core.logging_config import get_logger, setup_logging
from ..core.models import AnalysisResult
from ..render.renderer import BoardRenderer, board_file_basename, write_text
from . import output as cli_output

app = typer.Typer(help="ScriptVisualizer CLI")

logger = get_logger(__name__)

RETRY_MESSAGE = "Something went wrong while processing the script. Please try again."


@app.callback()
def callback(
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Configure global CLI options."""
    setup_logging(json_output=json_logs, log_level=log_level)
    logger.debug("CLI initialized", extra={"json_logs": json_logs, "log_level": log_level})


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(__version__)


def build_service(settings: Settings) -> ScriptAnalysisService:
    """Create the understanding service used by ``analyze``."""
    return ClaudeScriptAnalyzer.from_settings(settings)


def result_to_payload(result: AnalysisResult) -> dict:
    """Serialize a validated result back to the camelCase wire shape."""
    raw = asdict(result)
    cards = []
    for card in raw["cards"]:
        cards.append(
            {
                "id": card["id"],
                "title": card["title"],
                "description": card["description"],
                "scriptSegment": card["script_segment"],
                "type": card["type"].value,
                "visualSymbol": card["visual_symbol"],
                "colorTheme": card["color_theme"],
                "data": [
                    {k: v for k, v in point.items() if v is not None} for point in card["data"]
                ],
            }
        )
    return {"title": raw["title"], "summary": raw["summary"], "cards": cards}


@app.command()
def analyze(
    script_file: Path = typer.Argument(  # noqa: B008
        ..., exists=True, dir_okay=False, readable=True, help="Path to the narrated script text"
    ),
    out: Path = typer.Option(Path("out"), "--out", help="Output directory for the board"),  # noqa: B008
    html: bool = typer.Option(True, "--html/--no-html", help="Write a self-contained HTML board"),
    markdown: bool = typer.Option(False, "--markdown", help="Also write a Markdown outline"),
    pdf: bool = typer.Option(False, "--pdf", help="Also export the board as PDF"),
    json_output: bool = typer.Option(False, "--json", help="Also write the validated analysis as JSON"),
) -> None:
    """Analyze a script and render its visualization board."""
    script = script_file.read_text(encoding="utf-8")
    if not script.strip():
        cli_output.error("Script is empty; nothing to analyze")
        raise typer.Exit(code=1)

    try:
        service = build_service(get_settings())
    except RuntimeError as e:
        cli_output.error(str(e))
        raise typer.Exit(code=1) from None

    orchestrator = AnalysisOrchestrator(service)
    logger.info("Starting analysis", extra={"script_file": str(script_file), "script_length": len(script)})
    cli_output.info("Analyzing script...")

    try:
        result = asyncio.run(orchestrator.analyze(script))
    except AnalysisFailed:
        cli_output.error(RETRY_MESSAGE)
        raise typer.Exit(code=1) from None

    for warning in orchestrator.last_warnings:
        cli_output.warning(warning)

    basename = board_file_basename(result.title)
    assets_dir = out / "assets" if markdown else None
    renderer = BoardRenderer(assets_dir=assets_dir)

    try:
        if html:
            html_path = out / f"{basename}.html"
            write_text(html_path, renderer.render_html(result))
            cli_output.success(f"Board written to {html_path}")

        if markdown:
            md_path = out / f"{basename}.md"
            write_text(md_path, renderer.render_markdown(result, generate_charts=True, relative_to=out))
            cli_output.success(f"Outline written to {md_path}")
            cli_output.info(f"Chart images saved to {assets_dir}")

        if json_output:
            json_path = out / f"{basename}.json"
            write_text(json_path, json.dumps(result_to_payload(result), indent=2, ensure_ascii=False))
            cli_output.success(f"Analysis written to {json_path}")

        if pdf:
            from ..render.pdf import export_board_pdf

            pdf_path = export_board_pdf(result, out, renderer=renderer, orchestrator=orchestrator)
            cli_output.success(f"Board written to {pdf_path}")
    except ExportError as e:
        cli_output.error(f"Export failed: {e}")
        raise typer.Exit(code=1) from None

    logger.info(
        "Board generated",
        extra={"title": result.title, "cards": len(result.cards), "output_dir": str(out)},
    )
    cli_output.plain(f"{result.title}: {len(result.cards)} cards")
