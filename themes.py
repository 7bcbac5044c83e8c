"""Colour palettes shared by the SVG badge and the HTML widget."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ThemeColors:
    bg: str
    header_bg: str
    border: str
    title: str
    authors: str
    citation_badge: str
    citation_text: str
    year_text: str
    divider: str
    header_title: str
    header_sub: str
    link: str


LIGHT_THEME = ThemeColors(
    bg="#ffffff",
    header_bg="#f6f8fa",
    border="#d0d7de",
    title="#24292f",
    authors="#656d76",
    citation_badge="#0969da",
    citation_text="#ffffff",
    year_text="#656d76",
    divider="#d8dee4",
    header_title="#24292f",
    header_sub="#656d76",
    link="#0969da",
)

DARK_THEME = ThemeColors(
    bg="#0d1117",
    header_bg="#161b22",
    border="#30363d",
    title="#e6edf3",
    authors="#8b949e",
    citation_badge="#58a6ff",
    citation_text="#ffffff",
    year_text="#8b949e",
    divider="#21262d",
    header_title="#e6edf3",
    header_sub="#8b949e",
    link="#58a6ff",
)

THEMES: dict[str, ThemeColors] = {
    "light": LIGHT_THEME,
    "dark": DARK_THEME,
}


def get_theme(name: str | None) -> ThemeColors | None:
    """Return a fixed palette by name, or None when the caller should auto-detect."""
    if not name:
        return None
    return THEMES.get(name.strip().lower())
