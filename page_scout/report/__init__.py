"""page_scout.report: Сериализация результатов обнаружения для CLI и тестов."""

from page_scout.report.json_report import render_json, results_to_json

__all__ = ["render_json", "results_to_json"]
