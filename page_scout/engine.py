# File: page_scout/engine.py
"""page_scout.engine: Оркестрация конвейера обнаружения страниц для аудита."""

from __future__ import annotations

import asyncio
import random
from typing import List, Optional

from aiohttp import ClientSession

from page_scout.config import DiscoveryConfig, load_config
from page_scout.crawler.fetcher import Fetcher, open_session
from page_scout.curation import Curator, GeminiCurator
from page_scout.heads import HeadExtractor
from page_scout.logger import logger
from page_scout.models import DiscoveryResult
from page_scout.reachability import check_status
from page_scout.sampler import sample_urls
from page_scout.sitemap import SitemapResolver

__all__ = ["Engine", "discover"]


class Engine:
    """Фасад для CLI и тестов: один экземпляр — одна HTTP-сессия.

    Порядок этапов: sitemap → выборка → курация (этап 1) → секции <head> →
    курация (этап 2) → проверка статусов. Ошибки sitemap и курации
    пробрасываются без изменений, повторов нет.
    """

    @staticmethod
    def load_config(path: Optional[str]) -> DiscoveryConfig:
        """Загружает конфиг из YAML/JSON или использует значения по умолчанию."""
        return load_config(path)

    def __init__(
        self,
        config: DiscoveryConfig,
        curator: Optional[Curator] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Инициализирует Engine; *curator* и *rng* можно подменить в тестах."""
        self.config = config
        self.rng = rng
        self._curator = curator
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None

    async def __aenter__(self) -> Engine:
        self.session = open_session(self.config)
        self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    @property
    def curator(self) -> Curator:
        if self._curator is None:
            self._curator = GeminiCurator(
                self.config.curation,
                narrow_size=self.config.narrow_size,
                narrow_limit=self.config.narrow_limit,
                result_size=self.config.result_size,
            )
        return self._curator

    async def discover(self, site_url: str, site_category: str = "") -> List[DiscoveryResult]:
        """Полный прогон конвейера для одного сайта."""
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        cfg = self.config
        logger.info("Обнаружение страниц: %s (категория %r)", site_url, site_category)

        resolver = SitemapResolver(self.fetcher, max_depth=cfg.max_sitemap_depth)
        candidates = await resolver.resolve(site_url)
        if not candidates:
            logger.warning("Sitemap %s не содержит URL", site_url)
            return []

        sampled = sample_urls(
            candidates,
            rng=self.rng,
            threshold=cfg.sample_threshold,
            shortest=cfg.sample_shortest,
            random_count=cfg.sample_random,
        )
        narrowed = await self.curator.narrow_down(sampled, site_category)
        logger.info("Этап 1: отобрано %d из %d URL", len(narrowed), len(sampled))

        heads = await HeadExtractor(self.fetcher, delay=cfg.head_delay).extract_heads(narrowed)
        curated = await self.curator.select_and_categorize(narrowed, heads, site_category)
        results = [DiscoveryResult(url=page.url, category=page.category) for page in curated[: cfg.result_size]]
        logger.info("Этап 2: выбрано %d URL", len(results))

        for result in results:
            result.status = await check_status(self.fetcher, result.url)
        return results

    def run(self, site_url: str, site_category: str = "") -> List[DiscoveryResult]:
        """Синхронный запуск с общим таймаутом ``run_timeout``."""

        async def _runner() -> List[DiscoveryResult]:
            async with self:
                return await self.discover(site_url, site_category)

        try:
            return asyncio.run(asyncio.wait_for(_runner(), timeout=self.config.run_timeout))
        except asyncio.TimeoutError:
            logger.error("Discovery did not finish within %s seconds", self.config.run_timeout)
            raise
        except Exception as exc:
            logger.error("Discovery failed: %s", exc)
            raise


async def discover(
    site_url: str,
    site_category: str = "",
    *,
    config: Optional[DiscoveryConfig] = None,
    curator: Optional[Curator] = None,
    rng: Optional[random.Random] = None,
) -> List[DiscoveryResult]:
    """Единственная публичная точка входа конвейера (корутина)."""
    async with Engine(config or DiscoveryConfig(), curator=curator, rng=rng) as engine:
        return await engine.discover(site_url, site_category)
