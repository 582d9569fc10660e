"""Shared fixtures for ScriptVisualizer tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from script_visualizer.analysis.validator import validate
from script_visualizer.core.models import AnalysisResult


@pytest.fixture
def raw_payload() -> dict[str, Any]:
    """A well-formed analysis payload as the understanding service returns it."""
    return {
        "title": "Quarterly Growth Story",
        "summary": "Revenue climbed every quarter while churn fell.",
        "cards": [
            {
                "id": "scene-1",
                "title": "Revenue by Quarter",
                "description": "Steady growth through the year",
                "scriptSegment": "We went from ten thousand to fifteen thousand.",
                "type": "BAR_CHART",
                "visualSymbol": "money",
                "colorTheme": "indigo",
                "data": [
                    {"label": "Q1", "value": "10,000"},
                    {"label": "Q2", "value": "12,500"},
                    {"label": "Q3", "value": "15,000"},
                ],
            },
            {
                "id": "scene-2",
                "title": "Retention",
                "description": "Customers stay longer",
                "scriptSegment": "Ninety-four percent of customers renewed.",
                "type": "STAT_CARD",
                "visualSymbol": "users",
                "colorTheme": "emerald",
                "data": [
                    {"label": "Renewal rate", "value": "94%", "description": "up from 88%"},
                    {"label": "NPS", "value": 61},
                ],
            },
            {
                "id": "scene-3",
                "title": "How we did it",
                "description": "Three steps",
                "scriptSegment": "First we listened, then we shipped, then we measured.",
                "type": "PROCESS_FLOW",
                "visualSymbol": "list",
                "colorTheme": "cyan",
                "data": [
                    {"label": "Listen", "value": "Interviews"},
                    {"label": "Ship", "value": "Weekly releases"},
                    {"label": "Measure", "value": "Dashboards"},
                ],
            },
        ],
    }


@pytest.fixture
def raw_body(raw_payload: dict[str, Any]) -> str:
    return json.dumps(raw_payload)


@pytest.fixture
def analysis_result(raw_payload: dict[str, Any]) -> AnalysisResult:
    return validate(raw_payload).unwrap()


class StubService:
    """Understanding service double returning a canned body or raising."""

    def __init__(self, body: str | None = None, error: Exception | None = None):
        self.body = body
        self.error = error
        self.calls: list[str] = []

    async def request_analysis(self, script: str) -> str | None:
        self.calls.append(script)
        if self.error is not None:
            raise self.error
        return self.body


@pytest.fixture
def make_service() -> type[StubService]:
    return StubService
