"""
Content extractor: fetches candidate pages one by one and keeps a cleaned
``<head>`` fragment for each of them.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Sequence

from aiohttp import ClientError

from page_scout.crawler.fetcher import Fetcher
from page_scout.logger import get_logger
from page_scout.parser.html_parser import head_fragment

__all__ = ["HeadExtractor"]

log = get_logger("heads")


class HeadExtractor:
    """Serial head extraction with a fixed pause between requests."""

    def __init__(self, fetcher: Fetcher, delay: float = 0.1) -> None:
        self.fetcher = fetcher
        self.delay = delay

    async def extract_heads(self, urls: Sequence[str]) -> Dict[str, str]:
        """
        Map every URL to its cleaned head markup.

        A failed request yields ``""`` for that URL; the batch always completes.
        """
        heads: Dict[str, str] = {}
        for index, url in enumerate(urls):
            if index and self.delay:
                await asyncio.sleep(self.delay)
            try:
                page = await self.fetcher.fetch(url)
            except (ClientError, asyncio.TimeoutError) as exc:
                log.warning("Failed to get %s: %r", url, exc)
                heads[url] = ""
                continue
            heads[url] = head_fragment(page.text)
            if not heads[url]:
                log.debug("No <head> section in %s", url)
        log.info("Extracted heads for %d URL(s)", len(heads))
        return heads
