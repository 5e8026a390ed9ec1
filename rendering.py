from __future__ import annotations

import re

import markdown

# tables, fenced code, footnotes, attr lists, abbreviations...
MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]

_TAG_RE = re.compile(r"<.*?>")


def render_markdown(source: str | None) -> str:
    if not source:
        return ""
    return markdown.markdown(source, extensions=MARKDOWN_EXTENSIONS, output_format="html")


def strip_tags(html: str | None) -> str:
    """Plain-text body from an HTML fragment (tags dropped, text kept as-is)."""
    if not html:
        return ""
    return _TAG_RE.sub("", html)
