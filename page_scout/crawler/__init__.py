"""page_scout.crawler: HTTP-слой (общая сессия и GET-запросы)."""
