"""Request lifecycle for script analyses.

``AnalysisOrchestrator`` is an explicit state machine::

    IDLE -> REQUESTING -> SUCCEEDED | FAILED
    SUCCEEDED | FAILED -> REQUESTING   (a new request discards the old result)

Only one request may be outstanding; a second ``analyze`` call while
``REQUESTING`` is rejected with ``AnalysisInProgress`` and leaves the
in-flight state untouched. Every result-level failure reaches the caller as a
single ``AnalysisFailed``; the classified cause is kept for logging.
"""

from __future__ import annotations

from typing import NoReturn

from ..core.enums import AnalysisState
from ..core.errors import (
    AnalysisFailed,
    AnalysisInProgress,
    EmptyResponse,
    EmptyScript,
    SchemaViolation,
    TransportError,
)
from ..core.logging_config import get_logger
from ..core.models import AnalysisResult
from .client import ScriptAnalysisService, parse_response_body
from .validator import validate

logger = get_logger(__name__)


class AnalysisOrchestrator:
    """Owns one analysis request at a time and the latest outcome."""

    def __init__(self, service: ScriptAnalysisService):
        self.service = service
        self._state = AnalysisState.IDLE
        self._result: AnalysisResult | None = None
        self._error: Exception | None = None
        self.last_warnings: tuple[str, ...] = ()

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def result(self) -> AnalysisResult | None:
        return self._result

    @property
    def error(self) -> Exception | None:
        """Classified cause of the last failure, if the last request failed."""
        return self._error

    @property
    def busy(self) -> bool:
        """True while a request is outstanding; exports must wait."""
        return self._state is AnalysisState.REQUESTING

    async def analyze(self, script: str) -> AnalysisResult:
        """Run one analysis of ``script``.

        Raises:
            AnalysisInProgress: If a request is already outstanding
            EmptyScript: If ``script`` is blank; state is left untouched
            AnalysisFailed: On transport failure, empty response or schema violation
        """
        if self.busy:
            raise AnalysisInProgress("An analysis is already in progress")
        if not script.strip():
            raise EmptyScript("Script is empty; nothing to analyze")

        self._state = AnalysisState.REQUESTING
        self._result = None
        self._error = None
        self.last_warnings = ()

        try:
            result = await self._request(script)
        except (TransportError, EmptyResponse, SchemaViolation) as e:
            self._fail(e)
        except Exception as e:
            # Unclassified service errors are transport failures for callers
            self._fail(TransportError(str(e) or type(e).__name__))
        except BaseException:
            # Cancelled from outside; release the re-entrancy guard
            self._state = AnalysisState.FAILED
            raise

        self._result = result
        self._state = AnalysisState.SUCCEEDED
        logger.info(
            "Analysis succeeded",
            extra={"title": result.title, "cards": len(result.cards), "dropped": len(self.last_warnings)},
        )
        return result

    async def _request(self, script: str) -> AnalysisResult:
        body = await self.service.request_analysis(script)
        payload = parse_response_body(body)
        outcome = validate(payload)
        self.last_warnings = outcome.warnings
        for warning in outcome.warnings:
            logger.warning("Analysis payload warning", extra={"warning": warning})
        return outcome.unwrap()

    def _fail(self, cause: Exception) -> NoReturn:
        self._error = cause
        self._state = AnalysisState.FAILED
        logger.error(
            "Analysis failed",
            extra={"error": str(cause), "error_type": type(cause).__name__},
        )
        raise AnalysisFailed(cause) from cause

    def reset(self) -> None:
        """Return to IDLE, discarding any finished result."""
        if self.busy:
            raise AnalysisInProgress("Cannot reset while an analysis is in progress")
        self._state = AnalysisState.IDLE
        self._result = None
        self._error = None
        self.last_warnings = ()
