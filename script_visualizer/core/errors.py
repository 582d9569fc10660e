"""Error taxonomy for script analysis, validation and export.

Result-level problems (transport, empty body, schema) abort an analysis and
reach the caller as a single ``AnalysisFailed``. Card-level problems are
recovered locally by the validator and never raised to the caller.
"""

from __future__ import annotations


class ScriptVisualizerError(Exception):
    """Base exception for ScriptVisualizer."""

    pass


class TransportError(ScriptVisualizerError):
    """The understanding service could not be reached or did not answer."""

    pass


class EmptyResponse(ScriptVisualizerError):
    """The understanding service answered without a usable payload."""

    pass


class SchemaViolation(ScriptVisualizerError):
    """The payload parsed but does not have the minimum required shape."""

    pass


class ValidationError(SchemaViolation):
    """Structural validation of an analysis payload failed."""

    pass


class MissingField(ValidationError):
    """A required top-level field is absent or has the wrong type."""

    def __init__(self, field: str, detail: str = "is missing"):
        self.field = field
        super().__init__(f"Required field '{field}' {detail}")


class MalformedCard(ValidationError):
    """A single card lacks its minimum shape."""

    def __init__(self, index: int, reason: str, card_id: str | None = None):
        self.index = index
        self.reason = reason
        self.card_id = card_id
        label = f"card {index}" if card_id is None else f"card {index} ('{card_id}')"
        super().__init__(f"Malformed {label}: {reason}")


class EmptyResult(ValidationError):
    """Every supplied card was malformed."""

    pass


class AnalysisFailed(ScriptVisualizerError):
    """Opaque failure surfaced to callers of the orchestrator.

    The classified error (TransportError, EmptyResponse, SchemaViolation) is
    kept on ``cause`` for logging; callers present one generic retry message.
    """

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__("Something went wrong while processing the script. Please try again.")


class AnalysisInProgress(ScriptVisualizerError):
    """An analysis request is already outstanding."""

    pass


class EmptyScript(ScriptVisualizerError):
    """The script is empty or whitespace only; nothing is sent to the service."""

    pass


class ExportError(ScriptVisualizerError):
    """Board export (HTML/PDF generation) failed."""

    pass
