# === FILE: page_scout/parser/html_parser.py ===
"""Head-section helpers for PageScout.

The curation stage only needs a compact hint of what a page is about, so
instead of parsing the whole document we isolate the raw ``<head>`` markup
and drop the two kinds of blocks that carry no descriptive value:

* ``<script>`` blocks (inline JS, JSON-LD included);
* ``<style>`` blocks.

Everything else (``<title>``, ``<meta>``, ``<link>``...) is kept verbatim.
Matching is plain string scanning rather than a DOM parse: broken markup in
the wild must never make extraction fail, it only makes the fragment shorter.
"""
from __future__ import annotations

import re
from collections.abc import Sequence

__all__: Sequence[str] = ("extract_head", "strip_tag_blocks", "clean_head", "head_fragment")

# ``<head>`` or ``<head lang=..>`` but never ``<header>``
_HEAD_OPEN_RE = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)
_HEAD_CLOSE = "</head>"

STRIPPED_TAGS: tuple[str, ...] = ("script", "style")


def extract_head(html: str) -> str:
    """Return the inner markup of the first ``<head>...</head>`` span, or ``""``."""
    opening = _HEAD_OPEN_RE.search(html)
    if opening is None:
        return ""
    end = html.lower().find(_HEAD_CLOSE, opening.end())
    if end == -1:
        return ""
    return html[opening.end():end]


def strip_tag_blocks(html: str, tag: str) -> str:
    """Remove every ``<tag ...>...</tag>`` block, case-insensitively.

    A block whose closing tag (or the ``>`` of its opening tag) is missing
    cuts the string off at the dangling opening tag.
    """
    open_tag = f"<{tag}".lower()
    close_tag = f"</{tag}>".lower()
    result = html
    while True:
        lowered = result.lower()
        start = lowered.find(open_tag)
        if start == -1:
            return result
        open_end = lowered.find(">", start)
        if open_end == -1:
            return result[:start]
        close_start = lowered.find(close_tag, open_end + 1)
        if close_start == -1:
            return result[:start]
        result = result[:start] + result[close_start + len(close_tag):]


def clean_head(fragment: str) -> str:
    """Strip script and style blocks from a head fragment."""
    for tag in STRIPPED_TAGS:
        fragment = strip_tag_blocks(fragment, tag)
    return fragment


def head_fragment(html: str) -> str:
    """Isolate and clean the head of a full HTML document."""
    head = extract_head(html)
    return clean_head(head) if head else ""
