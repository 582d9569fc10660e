from __future__ import annotations

from enum import Enum


class VisualType(str, Enum):
    BAR_CHART = "BAR_CHART"
    PIE_CHART = "PIE_CHART"
    LINE_CHART = "LINE_CHART"
    STAT_CARD = "STAT_CARD"
    PROCESS_FLOW = "PROCESS_FLOW"
    KEY_POINTS = "KEY_POINTS"


class ColorTheme(str, Enum):
    INDIGO = "indigo"
    EMERALD = "emerald"
    ROSE = "rose"
    AMBER = "amber"
    CYAN = "cyan"


class SymbolName(str, Enum):
    TREND_UP = "trend_up"
    TREND_DOWN = "trend_down"
    USERS = "users"
    MONEY = "money"
    TARGET = "target"
    TIME = "time"
    LIST = "list"
    CHECK = "check"
    GLOBAL = "global"
    PRODUCT = "product"
    CHART = "chart"
    IDEA = "idea"


class AnalysisState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
