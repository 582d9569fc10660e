"""PDF export of visualization boards.

This module converts a rendered HTML board to PDF using WeasyPrint. It is the
export collaborator of the engine: it receives a renderable surface (the HTML
board) and a suggested base name derived from the board title, and reports
success or a generation failure.

Export Process:
1. Refuse to start while an analysis request is outstanding
2. Render the board to HTML (charts embedded as base64 PNG)
3. Convert HTML to PDF using WeasyPrint under a timeout
4. Write ``<Title>_VisualBoard.pdf`` to the output directory

Usage:
    from script_visualizer.render.pdf import export_board_pdf

    path = export_board_pdf(result, Path("out"), orchestrator=orchestrator)

System Dependencies:
    WeasyPrint requires system libraries:
    - macOS: brew install cairo pango gdk-pixbuf libffi
    - Ubuntu: apt-get install libcairo2 libpango-1.0-0 libgdk-pixbuf2.0-0
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from ..analysis.orchestrator import AnalysisOrchestrator
from ..core.errors import ExportError
from ..core.logging_config import get_logger
from ..core.models import AnalysisResult
from .renderer import BoardRenderer, board_file_basename

logger = get_logger(__name__)


class ExportTimeout(ExportError):
    """Exception raised when PDF generation exceeds timeout."""

    pass


def _run_with_timeout(func: Any, args: tuple[Any, ...], timeout_seconds: float) -> Any:
    """Run a function with a timeout.

    Raises:
        ExportTimeout: If function exceeds timeout
    """
    result: list[Any] = []
    exception: list[Exception] = []

    def target() -> None:
        try:
            result.append(func(*args))
        except Exception as e:
            exception.append(e)

    thread = threading.Thread(target=target)
    thread.daemon = True
    thread.start()
    thread.join(timeout=timeout_seconds)

    if thread.is_alive():
        raise ExportTimeout(f"PDF generation exceeded {timeout_seconds}s timeout")

    if exception:
        raise exception[0]

    return result[0] if result else None


class PDFExporter:
    """Export HTML boards to PDF format using WeasyPrint."""

    def __init__(self) -> None:
        self._weasyprint_available = self._check_weasyprint()

    def _check_weasyprint(self) -> bool:
        """Check if WeasyPrint is available and properly configured."""
        try:
            import weasyprint  # type: ignore  # noqa: F401

            return True
        except ImportError as e:
            logger.error(
                "WeasyPrint not installed. Install with: pip install weasyprint",
                extra={"error": str(e)},
            )
            return False
        except OSError as e:
            logger.error(
                "WeasyPrint system dependencies missing. "
                "On macOS: brew install cairo pango gdk-pixbuf libffi. "
                "On Ubuntu: apt-get install libcairo2 libpango-1.0-0 libgdk-pixbuf2.0-0",
                extra={"error": str(e)},
            )
            return False

    def html_to_pdf(
        self, html_content: str, base_url: str | None = None, timeout_seconds: float = 60
    ) -> bytes:
        """Convert HTML content to PDF with timeout protection.

        Args:
            html_content: HTML string to convert to PDF
            base_url: Optional base URL for resolving relative paths in HTML
            timeout_seconds: Maximum time to allow for PDF generation (default: 60s)

        Returns:
            PDF content as bytes

        Raises:
            ExportError: If WeasyPrint is not available, conversion fails or times out
        """
        if not self._weasyprint_available:
            raise ExportError(
                "WeasyPrint is not available. Please install system dependencies and "
                "reinstall weasyprint."
            )

        from weasyprint import HTML

        logger.debug("Converting HTML to PDF", extra={"html_length": len(html_content)})

        def _generate_pdf() -> bytes:
            html = HTML(string=html_content, base_url=base_url)
            pdf: bytes = html.write_pdf()
            return pdf

        try:
            pdf_bytes: bytes = _run_with_timeout(_generate_pdf, (), timeout_seconds)
        except ExportTimeout:
            logger.error(
                f"PDF generation exceeded {timeout_seconds}s timeout",
                extra={"html_size": len(html_content), "timeout": timeout_seconds},
            )
            raise
        except Exception as e:
            logger.error(
                "Failed to convert HTML to PDF",
                extra={"error": str(e), "error_type": type(e).__name__},
                exc_info=True,
            )
            raise ExportError(f"PDF conversion failed: {e}") from e

        logger.info(
            "PDF generated successfully",
            extra={"pdf_size": len(pdf_bytes), "html_size": len(html_content)},
        )
        return pdf_bytes

    def is_available(self) -> bool:
        return self._weasyprint_available


def write_pdf(path: str | Path, pdf_bytes: bytes) -> None:
    """Write PDF bytes to file, creating parent directories.

    Raises:
        OSError: If file writing fails
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    try:
        p.write_bytes(pdf_bytes)
        logger.info(f"PDF written to {p}", extra={"size": len(pdf_bytes)})
    except OSError as e:
        logger.error(f"Failed to write PDF to {p}", extra={"error": str(e)}, exc_info=True)
        raise


def export_board_pdf(
    result: AnalysisResult,
    output_dir: Path,
    *,
    renderer: BoardRenderer | None = None,
    exporter: PDFExporter | None = None,
    orchestrator: AnalysisOrchestrator | None = None,
    timeout_seconds: float = 60,
) -> Path:
    """Render ``result`` and write it as ``<Title>_VisualBoard.pdf``.

    Raises:
        ExportError: If an analysis is in progress or generation fails
    """
    if orchestrator is not None and orchestrator.busy:
        raise ExportError("Cannot export while an analysis is in progress")

    renderer = renderer or BoardRenderer()
    exporter = exporter or PDFExporter()

    html = renderer.render_html(result)
    pdf_bytes = exporter.html_to_pdf(html, timeout_seconds=timeout_seconds)

    path = output_dir / f"{board_file_basename(result.title)}.pdf"
    try:
        write_pdf(path, pdf_bytes)
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e
    return path
