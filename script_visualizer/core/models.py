from __future__ import annotations

from dataclasses import dataclass

from .enums import VisualType


@dataclass(frozen=True, slots=True)
class DataPoint:
    label: str
    value: str | int | float  # text or number, collapsed by the normalizer
    description: str | None = None


@dataclass(frozen=True, slots=True)
class VisualizationCard:
    id: str
    title: str
    description: str
    script_segment: str
    type: VisualType
    data: tuple[DataPoint, ...]
    visual_symbol: str | None = None
    color_theme: str | None = None


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    title: str
    summary: str
    cards: tuple[VisualizationCard, ...]

    def card_ids(self) -> list[str]:
        return [card.id for card in self.cards]
