# cli.py

"""
Точка входа для запуска PageScout без установки пакета.

Пример запуска:
    python cli.py discover https://example.com --category e-commerce --json reports/pages.json
"""
from page_scout.cli import cli

if __name__ == "__main__":
    cli()
