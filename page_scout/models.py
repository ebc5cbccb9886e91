"""
Result model returned by the discovery pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DiscoveryResult:
    """A curated page: URL, category from the curation stage and reachability status.

    ``status`` is empty until the reachability check fills it in.
    """

    url: str
    category: str
    status: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"url": self.url, "status": self.status, "category": self.category}
