"""Markdown → HTML for material notes and docs."""

import markdown

EXTENSIONS = ["extra", "sane_lists"]


def render_markdown(text: str | None) -> str:
    """Render Markdown; empty / missing text → ''."""
    if not text:
        return ""
    return markdown.markdown(str(text), extensions=EXTENSIONS)
