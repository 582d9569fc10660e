"""Tests for palette and symbol resolution."""

from __future__ import annotations

import pytest

from script_visualizer.core.enums import ColorTheme, SymbolName
from script_visualizer.visuals.registry import (
    FALLBACK_SYMBOL,
    PALETTE_LENGTH,
    PALETTES,
    SYMBOLS,
    resolve_palette,
    resolve_symbol,
    symbol_names,
    theme_names,
)


class TestResolvePalette:
    """Palette lookup is total."""

    @pytest.mark.parametrize("theme", [t.value for t in ColorTheme])
    def test_known_themes(self, theme: str) -> None:
        assert resolve_palette(theme) == PALETTES[theme]

    def test_none_selects_indigo(self) -> None:
        assert resolve_palette(None) == PALETTES["indigo"]
        assert resolve_palette() == PALETTES["indigo"]

    @pytest.mark.parametrize("token", ["", "   ", "magenta", "INDIGO", "indigo-dark", "😀"])
    def test_unknown_tokens_fall_back(self, token: str) -> None:
        assert resolve_palette(token) == PALETTES["default"]

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert resolve_palette("  rose ") == PALETTES["rose"]

    @pytest.mark.parametrize("token", [None, "", "indigo", "nope", "cyan"])
    def test_palettes_are_fixed_length(self, token: str | None) -> None:
        palette = resolve_palette(token)
        assert len(palette) == PALETTE_LENGTH
        assert all(color.startswith("#") and len(color) == 7 for color in palette)


class TestResolveSymbol:
    """Symbol lookup is total."""

    @pytest.mark.parametrize("name", [s.value for s in SymbolName])
    def test_known_symbols(self, name: str) -> None:
        symbol = resolve_symbol(name)
        assert symbol is SYMBOLS[name]
        assert symbol.name == name
        assert symbol.glyph

    def test_none_selects_chart(self) -> None:
        assert resolve_symbol(None).name == "chart"

    @pytest.mark.parametrize("token", ["", "rocket", "Money", " \t"])
    def test_unknown_tokens_fall_back(self, token: str) -> None:
        assert resolve_symbol(token) == FALLBACK_SYMBOL


def test_registry_covers_every_token() -> None:
    """Every enumerated token has a table entry."""
    assert sorted(theme_names()) == sorted(t for t in PALETTES if t != "default")
    assert sorted(symbol_names()) == sorted(s.value for s in SymbolName)
