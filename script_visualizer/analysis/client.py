"""Script understanding via Claude.

This module is the boundary to the external text-understanding service. It
sends a narrated script to Claude together with the vocabulary the rendering
engine understands (six chart types, twelve symbols, five color themes) and
returns the raw response body. Everything the engine needs from the model
comes back as one JSON object; this module does not interpret it.

Workflow:
1. Build a prompt embedding the script verbatim plus the expected JSON shape
2. Send it with the AsyncAnthropic client (the client's timeout applies)
3. Return the concatenated text blocks, or None when the model sent none
4. ``parse_response_body`` strips Markdown fences and decodes the JSON

Usage:
    from script_visualizer.analysis.client import ClaudeScriptAnalyzer

    analyzer = ClaudeScriptAnalyzer(api_key="sk-...")
    body = await analyzer.request_analysis(script_text)

Error Notes:
    - Connection failures, timeouts and API status errors raise TransportError
    - Undecodable bodies raise SchemaViolation from ``parse_response_body``
    - The API key is never logged
"""

from __future__ import annotations

import json
from typing import Any, Protocol

import anthropic

from ..core.config import DEFAULT_MODEL, Settings
from ..core.enums import ColorTheme, VisualType
from ..core.errors import EmptyResponse, SchemaViolation, TransportError
from ..core.logging_config import get_logger
from ..visuals.registry import symbol_names

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are an expert Information Designer and Art Director."

THEME_HINTS = {
    ColorTheme.INDIGO: "Tech/Trust",
    ColorTheme.EMERALD: "Money/Growth",
    ColorTheme.ROSE: "Urgent/Decline",
    ColorTheme.AMBER: "Warning/Highlight",
    ColorTheme.CYAN: "Future/Clean",
}


class ScriptAnalysisService(Protocol):
    """Anything that can turn a script into a raw analysis response body."""

    async def request_analysis(self, script: str) -> str | None: ...


def build_prompt(script: str) -> str:
    """Build the analysis prompt. The script is embedded verbatim."""
    types = ", ".join(f"'{t.value}'" for t in VisualType)
    symbols = ", ".join(f"'{s}'" for s in symbol_names())
    themes = ", ".join(f"'{t.value}' ({hint})" for t, hint in THEME_HINTS.items())

    return f"""Your task is to analyze the provided video script and transform it into a set of data-rich visual cards.

Process:
1. Segment: Break the script into logical scenes.
2. Visualize: Choose the best chart type for the data in each scene.
3. Design: Select a visualSymbol that represents the topic and a colorTheme that fits its emotion.

Available options:
- Types: {types}
- Symbols: {symbols}
- Themes: {themes}

Data extraction:
- Extract precise numbers for charts.
- For 'PROCESS_FLOW', steps are labels.
- For 'KEY_POINTS', bullet points are labels.

Respond with ONLY a JSON object of this shape:

{{
  "title": "A catchy title for the visualization board",
  "summary": "A one-sentence summary of the script",
  "cards": [
    {{
      "id": "scene-1",
      "title": "...",
      "description": "...",
      "scriptSegment": "the excerpt this card covers",
      "type": "BAR_CHART",
      "visualSymbol": "chart",
      "colorTheme": "indigo",
      "data": [{{"label": "...", "value": "...", "description": "optional"}}]
    }}
  ]
}}

The script is:
"{script}\""""


def parse_response_body(body: str | None) -> Any:
    """Decode a response body into a Python object.

    Raises:
        EmptyResponse: If the body is missing or blank
        SchemaViolation: If the body is not valid JSON
    """
    if body is None or not body.strip():
        raise EmptyResponse("No response received from the understanding service")

    content = body.strip()

    # Remove markdown code block if present
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    content = content.strip()

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse analysis response as JSON", extra={"error": str(e)})
        raise SchemaViolation(f"Failed to parse analysis results: {e}") from e


class ClaudeScriptAnalyzer:
    """Requests script analyses from the Claude API."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4000,
        temperature: float = 0.2,
        timeout: float = 60.0,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        """Initialize the analyzer.

        Args:
            api_key: Anthropic API key
            model: Claude model name
            max_tokens: Maximum tokens for the response (default: 4000)
            temperature: Response temperature 0-1 (default: 0.2)
            timeout: Transport timeout in seconds (default: 60)
            client: Preconfigured client, mainly for tests
        """
        self.client = client or anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> ClaudeScriptAnalyzer:
        if not settings.anthropic_api_key:
            raise RuntimeError("SV_ANTHROPIC_API_KEY or ANTHROPIC_API_KEY must be set")
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.model,
            max_tokens=settings.max_tokens,
            timeout=settings.timeout_seconds,
        )

    async def request_analysis(self, script: str) -> str | None:
        """Send ``script`` for analysis and return the raw response text.

        Raises:
            TransportError: If the API call does not complete
        """
        logger.info("Requesting script analysis", extra={"script_length": len(script), "model": self.model})

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": build_prompt(script)}],
            )
        except anthropic.APIError as e:
            logger.error(
                "Script analysis request failed",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise TransportError(f"Understanding service unavailable: {e}") from e

        texts = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        if not texts:
            logger.warning("Analysis response contained no text blocks")
            return None

        body = "".join(texts)
        logger.debug("Analysis response received", extra={"body_length": len(body)})
        return body
