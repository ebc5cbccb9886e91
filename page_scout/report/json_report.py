# page_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта PageScout.

Сериализация списка DiscoveryResult в строку или файл.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Optional

from page_scout.models import DiscoveryResult

__all__ = ["results_to_json", "render_json"]


def results_to_json(results: Iterable[DiscoveryResult], indent: Optional[int] = None) -> str:
    """Возвращает JSON-массив объектов ``{"url", "status", "category"}``."""
    return json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=indent)


def render_json(results: Iterable[DiscoveryResult], output_path: Path | str) -> Path:
    """
    Сохраняет результаты в формате JSON по указанному пути.

    :param results: список DiscoveryResult
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(results_to_json(results, indent=2), encoding="utf-8")
    return output
