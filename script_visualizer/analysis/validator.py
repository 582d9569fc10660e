"""Validation of raw analysis payloads.

The understanding service is a best-effort natural-language process, so
partial structural noise is expected. Malformed cards are dropped with a
recorded warning and the rest of the board survives; only problems with the
top-level shape, or a board where every card is broken, fail the result.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..core.enums import VisualType
from ..core.errors import EmptyResult, MalformedCard, MissingField, ValidationError
from ..core.logging_config import get_logger
from ..core.models import AnalysisResult, DataPoint, VisualizationCard

logger = get_logger(__name__)

REQUIRED_CARD_FIELDS = ("id", "type", "data")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one payload: either a result or an error."""

    result: AnalysisResult | None = None
    error: ValidationError | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.result is not None

    def unwrap(self) -> AnalysisResult:
        if self.result is None:
            raise self.error or ValidationError("Validation produced no result")
        return self.result


def _optional_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _parse_point(raw: Any, card_index: int, point_index: int, warnings: list[str]) -> DataPoint | None:
    if not isinstance(raw, Mapping):
        warnings.append(f"Card {card_index}: dropped data point {point_index} (not an object)")
        return None
    value = raw.get("value", "")
    if value is None or isinstance(value, bool) or not isinstance(value, (str, int, float)):
        value = _text(value)
    return DataPoint(
        label=_text(raw.get("label")),
        value=value,
        description=_optional_text(raw.get("description")),
    )


def parse_card(raw: Any, index: int, warnings: list[str] | None = None) -> VisualizationCard:
    """Build a card from its raw mapping.

    Raises:
        MalformedCard: If the card lacks ``id``, ``type`` or ``data``, or they
            have an unusable shape
    """
    warnings = warnings if warnings is not None else []
    if not isinstance(raw, Mapping):
        raise MalformedCard(index, "card is not an object")

    missing = [name for name in REQUIRED_CARD_FIELDS if raw.get(name) in (None, "")]
    card_id = raw.get("id")
    card_id = str(card_id) if card_id not in (None, "") else None
    if missing:
        raise MalformedCard(index, f"missing {', '.join(missing)}", card_id)

    try:
        visual_type = VisualType(raw["type"])
    except ValueError:
        raise MalformedCard(index, f"unknown type {raw['type']!r}", card_id) from None

    data = raw["data"]
    if not isinstance(data, list):
        raise MalformedCard(index, "data is not a list", card_id)

    points = [_parse_point(p, index, i, warnings) for i, p in enumerate(data)]
    return VisualizationCard(
        id=str(card_id),
        title=_text(raw.get("title")),
        description=_text(raw.get("description")),
        script_segment=_text(raw.get("scriptSegment")),
        type=visual_type,
        data=tuple(p for p in points if p is not None),
        visual_symbol=_optional_text(raw.get("visualSymbol")),
        color_theme=_optional_text(raw.get("colorTheme")),
    )


def validate(raw: Any) -> ValidationResult:
    """Validate a decoded payload into an AnalysisResult.

    Pure: never raises, never mutates ``raw``. Card-level problems become
    warnings; result-level problems become the returned error.
    """
    if not isinstance(raw, Mapping):
        return ValidationResult(error=ValidationError("Analysis payload must be a JSON object"))

    for name in ("title", "summary", "cards"):
        if name not in raw:
            return ValidationResult(error=MissingField(name))

    title, summary, raw_cards = raw["title"], raw["summary"], raw["cards"]
    if not isinstance(title, str) or not title.strip():
        return ValidationResult(error=MissingField("title", "must be a non-empty string"))
    if not isinstance(summary, str):
        return ValidationResult(error=MissingField("summary", "must be a string"))
    if not isinstance(raw_cards, list):
        return ValidationResult(error=MissingField("cards", "must be a list"))

    warnings: list[str] = []
    cards: list[VisualizationCard] = []
    seen_ids: set[str] = set()
    for index, raw_card in enumerate(raw_cards):
        try:
            card = parse_card(raw_card, index, warnings)
            if card.id in seen_ids:
                raise MalformedCard(index, "duplicate id", card.id)
        except MalformedCard as e:
            warnings.append(str(e))
            logger.warning("Dropping malformed card", extra={"card_index": index, "reason": e.reason})
            continue
        seen_ids.add(card.id)
        cards.append(card)

    if raw_cards and not cards:
        return ValidationResult(
            error=EmptyResult(f"All {len(raw_cards)} cards were malformed"),
            warnings=tuple(warnings),
        )

    return ValidationResult(
        result=AnalysisResult(title=title, summary=summary, cards=tuple(cards)),
        warnings=tuple(warnings),
    )
