"""Embeddable HTML widget listing a profile's most-cited papers."""

from __future__ import annotations

from collections.abc import Sequence
from html import escape

from models import Paper
from themes import LIGHT_THEME, get_theme

CONTENT_TYPE = "text/html"
DEFAULT_MAX_PAPERS = 5


def render_widget(papers: Sequence[Paper], max_papers: int = DEFAULT_MAX_PAPERS, theme: str | None = "light") -> str:
    """Render the first ``max_papers`` papers as a complete HTML page."""
    colors = get_theme(theme) or LIGHT_THEME
    shown = papers[: max(1, max_papers)]
    cards = "\n".join(_render_card(paper) for paper in shown)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Publications</title>
  <style>
    *, *::before, *::after {{ box-sizing: border-box; margin: 0; padding: 0; }}
    body {{
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
      background: {colors.bg};
      color: {colors.title};
      padding: 16px;
      line-height: 1.5;
    }}
    .widget-container {{ max-width: 600px; margin: 0 auto; }}
    .widget-header {{
      font-size: 18px;
      font-weight: 700;
      margin-bottom: 12px;
      padding-bottom: 8px;
      border-bottom: 1px solid {colors.border};
    }}
    .paper-card {{ padding: 12px 0; border-bottom: 1px solid {colors.divider}; }}
    .paper-card:last-child {{ border-bottom: none; }}
    .paper-header {{ display: flex; justify-content: space-between; align-items: flex-start; gap: 8px; }}
    .paper-title {{
      font-size: 15px;
      font-weight: 600;
      color: {colors.link};
      text-decoration: none;
      flex: 1;
      overflow-wrap: break-word;
    }}
    .paper-title:hover, .scholar-link:hover {{ text-decoration: underline; }}
    .citation-wrapper {{ display: flex; flex-direction: column; align-items: center; flex-shrink: 0; gap: 2px; }}
    .citation-label {{ font-size: 10px; color: {colors.authors}; font-weight: 500; }}
    .citation-badge {{
      background: {colors.citation_badge};
      color: {colors.citation_text};
      font-size: 12px;
      font-weight: 600;
      padding: 2px 8px;
      border-radius: 12px;
      white-space: nowrap;
    }}
    .paper-authors {{ font-size: 13px; color: {colors.authors}; margin-top: 4px; overflow-wrap: break-word; }}
    .paper-meta {{ display: flex; justify-content: space-between; align-items: center; margin-top: 6px; font-size: 12px; }}
    .paper-year {{ color: {colors.year_text}; }}
    .scholar-link {{ color: {colors.link}; text-decoration: none; font-size: 12px; }}
    @media (max-width: 480px) {{
      body {{ padding: 12px; }}
      .paper-header {{ flex-direction: column; gap: 4px; }}
      .citation-badge {{ align-self: flex-start; }}
    }}
  </style>
</head>
<body>
  <div class="widget-container">
    <div class="widget-header">Publications</div>
{cards}
  </div>
</body>
</html>"""


def _render_card(paper: Paper) -> str:
    year = str(paper.year) if paper.year is not None else "N/A"
    url = escape(paper.scholar_url)

    return f"""      <div class="paper-card">
        <div class="paper-header">
          <a class="paper-title" href="{url}" target="_blank" rel="noopener noreferrer">{escape(paper.title)}</a>
          <div class="citation-wrapper">
            <span class="citation-label">Cites</span>
            <span class="citation-badge">{paper.citation_count}</span>
          </div>
        </div>
        <div class="paper-authors">{escape(paper.authors)}</div>
        <div class="paper-meta">
          <span class="paper-year">{year}</span>
          <a class="scholar-link" href="{url}" target="_blank" rel="noopener noreferrer">View on Google Scholar</a>
        </div>
      </div>"""
