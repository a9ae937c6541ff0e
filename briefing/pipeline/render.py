"""HTML renderer — injects a serialized briefing record into the page template.

Placeholders are replaced by plain string substitution; every value is
HTML-escaped. A missing field falls back to its default so no token is ever
left blank.
"""

import html
import os
from typing import Any, Dict, List

from briefing.core.logger import logger

INDEX_FILENAME = "index.html"

DIR_LABEL = {
    "up": "↑ up",
    "down": "↓ down",
    "flat": "→ flat",
    "elevated": "↑ elevated",
    "subdued": "↓ subdued",
    "steady": "→ steady",
}


def _esc(value: Any) -> str:
    return html.escape(str(value), quote=True)


def _direction(direction: Any) -> str:
    key = direction if direction in DIR_LABEL else "flat"
    return f'<span class="direction direction-{key}">{DIR_LABEL[key]}</span>'


def _pct(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:+.2f}%"
    return "—"


def render_digest(items: List[Any]) -> str:
    return "\n".join(f"        <li>{_esc(item)}</li>" for item in items)


def render_top_headlines(items: List[Dict[str, Any]]) -> str:
    return "\n".join(
        f'        <li><span class="source">{_esc(h.get("source", ""))}</span> '
        f'{_esc(h.get("title", ""))}</li>'
        for h in items
        if isinstance(h, dict)
    )


def render_drivers(items: List[Dict[str, Any]]) -> str:
    return "\n".join(
        f'        <li><strong>{_esc(d.get("label", ""))}</strong> {_esc(d.get("summary", ""))}</li>'
        for d in items
        if isinstance(d, dict)
    )


def _render_regions(regions: List[Dict[str, Any]]) -> str:
    rows = []
    for r in regions:
        value = "—" if r.get("isPlaceholder") else _pct(r.get("changePct"))
        rows.append(
            f'          <li class="region"><span class="label">{_esc(r.get("label", ""))}</span> '
            f'<span class="value">{_esc(value)}</span> {_direction(r.get("direction"))}</li>'
        )
    return "\n".join(rows)


def _render_tickers(tickers: List[Dict[str, Any]]) -> str:
    rows = []
    for t in tickers:
        price = t.get("price")
        if isinstance(price, (int, float)) and not isinstance(price, bool):
            value = f"{price:,.2f} ({_pct(t.get('changePct'))})"
        else:
            value = ""
        rows.append(
            f'          <li class="ticker"><span class="symbol">{_esc(t.get("symbol", ""))}</span> '
            f'<span class="name">{_esc(t.get("name", ""))}</span>'
            + (f' <span class="value">{_esc(value)}</span>' if value else "")
            + "</li>"
        )
    return "\n".join(rows)


def render_segments(segments: List[Dict[str, Any]]) -> str:
    blocks = []
    for s in segments:
        if not isinstance(s, dict):
            continue
        if s.get("regions"):
            body = _render_regions(s["regions"])
        elif s.get("tickers"):
            body = _render_tickers(s["tickers"])
        else:
            body = ""
        blocks.append(
            f'      <article class="segment">\n'
            f'        <div class="segment-header">\n'
            f'          <h3>{_esc(s.get("name", ""))}</h3>\n'
            f'          {_direction(s.get("direction"))}\n'
            f'        </div>\n'
            f'        <p>{_esc(s.get("description", ""))}</p>\n'
            f'        <ul class="instruments">\n{body}\n        </ul>\n'
            f'      </article>'
        )
    return "\n\n".join(blocks)


def render_html(data: Dict[str, Any], template: str) -> str:
    """Return ``template`` with every placeholder filled from ``data``."""
    sentiment = data.get("sentimentIndex") or {}
    replacements = {
        "{{BIG_PICTURE}}": _esc(data.get("bigPicture") or ""),
        "{{MARKET_MOOD}}": _esc(data.get("marketMood") or "Neutral"),
        "{{FEAR_GREED_VALUE}}": _esc(sentiment.get("value", 50)),
        "{{FEAR_GREED_LABEL}}": _esc(sentiment.get("label") or "Neutral"),
        "{{TRENDING_NEWS}}": render_digest(data.get("headlineDigest") or []),
        "{{TOP_HEADLINES}}": render_top_headlines(data.get("topHeadlines") or []),
        "{{MARKET_DRIVERS}}": render_drivers(data.get("marketDrivers") or []),
        "{{SEGMENTS}}": render_segments(data.get("segments") or []),
        "{{UPDATED_AT}}": _esc(data.get("generatedAt") or ""),
        "{{DATE}}": _esc(data.get("date") or ""),
    }
    for token, value in replacements.items():
        template = template.replace(token, value)
    return template


def write_html(data: Dict[str, Any], template_path: str, output_dir: str) -> str:
    """Render ``data`` through ``template_path`` into ``<output_dir>/index.html``.

    Raises:
        OSError: If the template cannot be read or the page cannot be written.
    """
    with open(template_path, "r", encoding="utf-8") as f:
        template = f.read()

    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, INDEX_FILENAME)
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_html(data, template))
    logger.info(f"render: wrote {path}")
    return path
