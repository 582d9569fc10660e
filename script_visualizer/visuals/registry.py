"""Palette and symbol registry.

Maps declarative style tokens chosen by the understanding service to concrete
rendering primitives. Both lookups are total: any token, including ``None``,
the empty string or an unrecognized name, resolves to a defined default.
Adding a theme or symbol is a change to the tables below only.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ColorTheme, SymbolName

REGISTRY_VERSION = 1

PALETTE_LENGTH = 5

# Rich palettes, varied within a theme so adjacent points stay distinguishable
PALETTES: dict[str, tuple[str, ...]] = {
    ColorTheme.INDIGO.value: ("#6366f1", "#a855f7", "#06b6d4", "#ec4899", "#3b82f6"),
    ColorTheme.EMERALD.value: ("#10b981", "#f59e0b", "#06b6d4", "#84cc16", "#059669"),
    ColorTheme.ROSE.value: ("#f43f5e", "#f97316", "#a855f7", "#e11d48", "#db2777"),
    ColorTheme.AMBER.value: ("#f59e0b", "#ef4444", "#84cc16", "#eab308", "#d97706"),
    ColorTheme.CYAN.value: ("#06b6d4", "#3b82f6", "#8b5cf6", "#14b8a6", "#0ea5e9"),
    "default": ("#6366f1", "#ec4899", "#f59e0b", "#10b981", "#3b82f6"),
}

DEFAULT_THEME = ColorTheme.INDIGO.value
FALLBACK_THEME = "default"


@dataclass(frozen=True, slots=True)
class Symbol:
    name: str
    icon: str  # icon-set identifier for HTML front ends
    glyph: str  # single character drawable by the raster painter


SYMBOLS: dict[str, Symbol] = {
    s.name: s
    for s in (
        Symbol(SymbolName.TREND_UP.value, "trending-up", "↗"),
        Symbol(SymbolName.TREND_DOWN.value, "trending-down", "↘"),
        Symbol(SymbolName.USERS.value, "users", "☺"),
        Symbol(SymbolName.MONEY.value, "dollar-sign", "$"),
        Symbol(SymbolName.TARGET.value, "target", "◎"),
        Symbol(SymbolName.TIME.value, "clock", "◷"),
        Symbol(SymbolName.LIST.value, "list", "☰"),
        Symbol(SymbolName.CHECK.value, "check-circle-2", "✓"),
        Symbol(SymbolName.GLOBAL.value, "globe", "⊕"),
        Symbol(SymbolName.PRODUCT.value, "package", "▣"),
        Symbol(SymbolName.CHART.value, "bar-chart-3", "▇"),
        Symbol(SymbolName.IDEA.value, "lightbulb", "☀"),
    )
}

DEFAULT_SYMBOL = SymbolName.CHART.value
FALLBACK_SYMBOL = Symbol("activity", "activity", "∿")


def _token(name: str | None) -> str:
    return name.strip() if isinstance(name, str) else ""


def resolve_palette(theme_name: str | None = None) -> tuple[str, ...]:
    """Return the color sequence for a theme name.

    ``None`` selects the default theme; unknown or empty names select the
    fallback palette.
    """
    if theme_name is None:
        return PALETTES[DEFAULT_THEME]
    return PALETTES.get(_token(theme_name), PALETTES[FALLBACK_THEME])


def resolve_symbol(symbol_name: str | None = None) -> Symbol:
    """Return the symbol for a symbol name, never failing."""
    if symbol_name is None:
        return SYMBOLS[DEFAULT_SYMBOL]
    return SYMBOLS.get(_token(symbol_name), FALLBACK_SYMBOL)


def theme_names() -> list[str]:
    return [t.value for t in ColorTheme]


def symbol_names() -> list[str]:
    return list(SYMBOLS)
