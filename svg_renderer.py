"""SVG badge listing a profile's most-cited papers."""

from __future__ import annotations

from collections.abc import Sequence
from xml.sax.saxutils import escape

from models import Paper
from themes import DARK_THEME, LIGHT_THEME, ThemeColors, get_theme

CONTENT_TYPE = "image/svg+xml"
DEFAULT_MAX_PAPERS = 5

HEADER_HEIGHT = 40
ROW_HEIGHT = 64
PADDING_X = 16
WIDTH = 720
FONT_FAMILY = "Segoe UI, Helvetica, Arial, sans-serif"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def render_svg(papers: Sequence[Paper], max_papers: int = DEFAULT_MAX_PAPERS, theme: str | None = "auto") -> str:
    """Render the first ``max_papers`` papers as a standalone SVG document.

    ``theme`` is ``light`` or ``dark`` for a fixed palette; anything else
    follows the viewer's ``prefers-color-scheme``.
    """
    shown = list(papers[: max(1, max_papers)])
    total_height = HEADER_HEIGHT + len(shown) * ROW_HEIGHT + 8
    rows = "\n".join(_render_row(paper, index) for index, paper in enumerate(shown))

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{WIDTH}" height="{total_height}" viewBox="0 0 {WIDTH} {total_height}">
  {_render_styles(theme)}
  <rect x="0.5" y="0.5" width="{WIDTH - 1}" height="{total_height - 1}" rx="6" class="badge-surface badge-border" stroke-width="1"/>
  <rect x="0.5" y="0.5" width="{WIDTH - 1}" height="{HEADER_HEIGHT}" rx="6" class="badge-header-bg badge-border" stroke-width="1"/>
  <rect x="0.5" y="20" width="{WIDTH - 1}" height="{HEADER_HEIGHT - 19}" class="badge-header-bg"/>
  <line x1="0.5" y1="{HEADER_HEIGHT}" x2="{WIDTH - 0.5}" y2="{HEADER_HEIGHT}" class="badge-border" stroke-width="1"/>
  <text x="{PADDING_X}" y="26" font-family="{FONT_FAMILY}" font-size="14" class="badge-header-title" font-weight="700">Publications</text>
  <text x="{WIDTH - PADDING_X}" y="26" font-family="{FONT_FAMILY}" font-size="12" class="badge-header-sub" font-weight="600" text-anchor="end">Cites</text>
{rows}
</svg>"""


def _render_row(paper: Paper, index: int) -> str:
    y = HEADER_HEIGHT + index * ROW_HEIGHT
    year = str(paper.year) if paper.year is not None else "N/A"
    citations = str(paper.citation_count)

    badge_width = max(30, len(citations) * 9 + 12)
    badge_x = WIDTH - PADDING_X - badge_width
    badge_y = y + (ROW_HEIGHT - 22) / 2

    divider = (
        f'<line x1="{PADDING_X}" y1="{y}" x2="{WIDTH - PADDING_X}" y2="{y}" class="paper-divider" stroke-width="1"/>'
        if index > 0
        else ""
    )

    return f"""{divider}
    <text x="{PADDING_X}" y="{y + 18}" font-family="{FONT_FAMILY}" font-size="13" class="paper-title" font-weight="600">{_xml(truncate(paper.title, 65))}</text>
    <text x="{PADDING_X}" y="{y + 34}" font-family="{FONT_FAMILY}" font-size="11" class="paper-authors">{_xml(truncate(paper.authors, 80))}</text>
    <text x="{PADDING_X}" y="{y + 48}" font-family="{FONT_FAMILY}" font-size="11" class="paper-year">{_xml(year)}</text>
    <rect x="{badge_x}" y="{badge_y}" width="{badge_width}" height="22" rx="11" class="paper-citation-badge"/>
    <text x="{badge_x + badge_width / 2}" y="{badge_y + 15}" font-family="{FONT_FAMILY}" font-size="11" class="paper-citation-text" text-anchor="middle" font-weight="600">{_xml(citations)}</text>"""


def _render_styles(theme: str | None) -> str:
    fixed = get_theme(theme)
    if fixed is not None:
        return f"<style>{_theme_rules(fixed)}\n</style>"
    return f"""<style>{_theme_rules(LIGHT_THEME)}
  @media (prefers-color-scheme: dark) {{{_theme_rules(DARK_THEME)}
  }}
</style>"""


def _theme_rules(colors: ThemeColors) -> str:
    return f"""
  .badge-surface {{ fill: {colors.bg}; }}
  .badge-border {{ stroke: {colors.border}; }}
  .badge-header-bg {{ fill: {colors.header_bg}; }}
  .badge-header-title {{ fill: {colors.header_title}; }}
  .badge-header-sub {{ fill: {colors.header_sub}; }}
  .paper-divider {{ stroke: {colors.divider}; }}
  .paper-title {{ fill: {colors.title}; }}
  .paper-authors {{ fill: {colors.authors}; }}
  .paper-year {{ fill: {colors.year_text}; }}
  .paper-citation-badge {{ fill: {colors.citation_badge}; }}
  .paper-citation-text {{ fill: {colors.citation_text}; }}"""


def truncate(text: str, max_chars: int) -> str:
    """Shorten text to max_chars, ending with an ellipsis when cut."""
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 1] + "…"


def _xml(text: str) -> str:
    return escape(text, _XML_ENTITIES)
