# File: page_scout/sitemap.py
"""page_scout.sitemap: Рекурсивное раскрытие sitemap.xml в плоский список URL страниц."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Set

from aiohttp import ClientError

from page_scout.crawler.fetcher import Fetcher
from page_scout.errors import FetchError, SitemapError
from page_scout.logger import get_logger
from page_scout.parser.sitemap_parser import SitemapDocument, maybe_gunzip, parse_sitemap

__all__ = ["SitemapResolver", "sitemap_url_for"]

log = get_logger("sitemap")


def sitemap_url_for(site_root: str) -> str:
    """Возвращает адрес корневого sitemap для сайта."""
    return f"{site_root.rstrip('/')}/sitemap.xml"


class SitemapResolver:
    """Загружает sitemap и рекурсивно раскрывает sitemap index.

    Ошибки корневого документа фатальны; ошибки вложенных sitemap только
    логируются, обход продолжается с соседними документами. Глубина
    вложенности ограничена ``max_depth``, повторные ссылки на уже
    обработанный sitemap пропускаются.
    """

    def __init__(self, fetcher: Fetcher, max_depth: int = 5) -> None:
        self.fetcher = fetcher
        self.max_depth = max_depth

    async def resolve(self, site_root: str) -> List[str]:
        """Возвращает URL страниц из ``{site_root}/sitemap.xml`` в порядке документов."""
        root_url = sitemap_url_for(site_root)
        log.info("Разбор sitemap: %s", root_url)
        urls = await self._resolve(root_url, depth=0, visited=set())
        log.info("Найдено %d URL в sitemap %s", len(urls), root_url)
        return urls

    async def _resolve(self, url: str, depth: int, visited: Set[str]) -> List[str]:
        visited.add(url)
        document = await self.load(url)
        if document.kind == "urlset":
            return document.locations

        urls: List[str] = []
        for child in document.locations:
            child_urls = await self._resolve_child(child, depth + 1, visited)
            if child_urls:
                urls.extend(child_urls)
        return urls

    async def _resolve_child(self, url: str, depth: int, visited: Set[str]) -> Optional[List[str]]:
        if depth > self.max_depth:
            log.warning("Пропуск sitemap %s: превышена глубина вложенности %d", url, self.max_depth)
            return None
        if url in visited:
            log.warning("Пропуск sitemap %s: уже обработан", url)
            return None
        try:
            return await self._resolve(url, depth, visited)
        except SitemapError as exc:
            log.warning("Пропуск вложенного sitemap %s: %s", url, exc)
            return None

    async def load(self, url: str) -> SitemapDocument:
        """Загружает и разбирает один документ sitemap.

        Raises:
            FetchError: сетевая ошибка или статус не 2xx.
            ParseError: битый gzip, некорректный XML или неизвестный корень.
        """
        try:
            page = await self.fetcher.fetch(url)
        except (ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(url, f"не удалось загрузить sitemap: {exc!r}") from exc
        if not page.ok:
            raise FetchError(url, f"sitemap недоступен, HTTP {page.status}", status=page.status)
        body = maybe_gunzip(url, page.content, page.content_encoding)
        return parse_sitemap(body, url)

