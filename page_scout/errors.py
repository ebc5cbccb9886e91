"""page_scout.errors: Иерархия исключений конвейера обнаружения страниц.

Фатальные ошибки (корневой sitemap, оба вызова курации) поднимаются до
вызывающего кода без изменений. Ошибки отдельных страниц сюда не попадают:
они превращаются в данные (пустой фрагмент или строка статуса).
"""
from __future__ import annotations

from typing import Optional

__all__ = [
    "DiscoveryError",
    "SitemapError",
    "FetchError",
    "ParseError",
    "CurationError",
    "LLMError",
    "FormatError",
]


class DiscoveryError(Exception):
    """Базовый класс всех ошибок PageScout."""


class SitemapError(DiscoveryError):
    """Ошибка на этапе разбора sitemap; хранит URL документа."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url


class FetchError(SitemapError):
    """Sitemap недоступен: сетевая ошибка или ответ не 2xx."""

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(url, message)
        self.status = status


class ParseError(SitemapError):
    """Некорректный XML, битый gzip или неизвестный корневой элемент."""


class CurationError(DiscoveryError):
    """Ошибка внешнего сервиса курации; ``stage`` — ``"narrow"`` или ``"categorize"``."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage


class LLMError(CurationError):
    """Транспортная ошибка или ошибка авторизации при обращении к модели."""


class FormatError(CurationError):
    """Ответ модели не разбирается в ожидаемую JSON-структуру."""
