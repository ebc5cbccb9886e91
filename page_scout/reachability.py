"""page_scout.reachability: Проверка доступности итоговых URL."""

from __future__ import annotations

import asyncio

from aiohttp import ClientError

from page_scout.crawler.fetcher import Fetcher
from page_scout.logger import get_logger

__all__ = ["check_status"]

log = get_logger("reachability")


async def check_status(fetcher: Fetcher, url: str) -> str:
    """Возвращает строку статуса (``"200 OK"``) или описание сетевой ошибки.

    Исключения транспорта не пробрасываются: статус — лишь аннотация результата.
    """
    try:
        return await fetcher.status_line(url)
    except (ClientError, asyncio.TimeoutError) as exc:
        log.warning("Проверка %s не удалась: %r", url, exc)
        # asyncio.TimeoutError has an empty str()
        return f"Error: {str(exc) or repr(exc)}"
