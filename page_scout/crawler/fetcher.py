# page_scout/crawler/fetcher.py
"""
Fetcher module: thin GET wrapper shared by the sitemap resolver, the head
extractor and the reachability checker.

Requests are issued one at a time by the callers; the fetcher itself keeps
no queue and does not retry. Transport problems surface as
:class:`aiohttp.ClientError` or :class:`asyncio.TimeoutError` and each caller
decides whether they are fatal.
"""
from __future__ import annotations

from aiohttp import ClientSession, ClientTimeout

from page_scout.config import DiscoveryConfig
from page_scout.crawler.models import PageData
from page_scout.logger import get_logger

__all__ = ("Fetcher", "open_session")

log = get_logger("fetcher")


def open_session(config: DiscoveryConfig) -> ClientSession:
    """Create the per-run session with the configured timeout and User-Agent."""
    return ClientSession(
        timeout=ClientTimeout(total=config.timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Issues GET requests through a shared :class:`ClientSession`."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> PageData:
        """GET *url* and read the whole body.

        Transfer-level gzip is decoded by aiohttp; ``content_encoding`` keeps
        the announced header so callers can tell how the body was sent.
        """
        async with self.session.get(url) as resp:
            content = await resp.read()
            log.debug("GET %s -> %s (%d bytes)", url, resp.status, len(content))
            return PageData(
                url=url,
                status=resp.status,
                reason=resp.reason or "",
                content=content,
                content_encoding=resp.headers.get("Content-Encoding", "").lower(),
                charset=resp.charset,
            )

    async def status_line(self, url: str) -> str:
        """GET *url* and return ``"<code> <reason>"`` without reading the body."""
        async with self.session.get(url) as resp:
            log.debug("GET %s -> %s", url, resp.status)
            return f"{resp.status} {resp.reason or ''}".strip()
