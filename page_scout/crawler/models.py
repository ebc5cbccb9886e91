# page_scout/crawler/models.py
"""
Data models for the PageScout HTTP layer.
"""
from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class PageData:
    """Raw result of one GET: status, encoding hints and the body bytes."""

    url: str
    status: int
    reason: str
    content: bytes
    content_encoding: str = ""
    charset: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def status_line(self) -> str:
        return f"{self.status} {self.reason}".strip()

    @property
    def encoding(self) -> str:
        """Announced charset if Python knows it, otherwise utf-8."""
        if self.charset:
            try:
                return codecs.lookup(self.charset).name
            except LookupError:
                pass
        return "utf-8"

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding, errors="replace")
