# === FILE: page_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска PageScout через командную строку.

Команды:
  discover  Найти страницы сайта для аудита и вывести/сохранить результат
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда discover опции:
  --category TEXT     Категория сайта (подсказка для курации)
  --json PATH         Сохранить JSON-результат в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --timeout SEC       Таймаут всего запуска (override run_timeout)

Пример:
  page-scout discover https://example.com --category e-commerce --pretty
"""
import asyncio
import sys
from pathlib import Path

import click

from page_scout import __version__
from page_scout.config import load_config
from page_scout.engine import Engine
from page_scout.errors import DiscoveryError
from page_scout.logger import init_logging
from page_scout.report.json_report import render_json, results_to_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def run_discovery(cfg, url, category):
    """Запуск конвейера; вынесен на уровень модуля для подмены в тестах."""
    return Engine(cfg).run(url, category)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='PageScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд PageScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('discover', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--category', '-k', 'category',
    default='', show_default=False,
    help='Категория сайта (например, e-commerce)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-результат в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--timeout', 'run_timeout',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Таймаут всего запуска (секунд)'
)
@click.pass_context
def discover_cmd(ctx, url, category, json_output, pretty, run_timeout):
    """Найти страницы сайта URL, подходящие для аудита доступности."""
    cfg = ctx.obj['config']
    if run_timeout is not None:
        cfg = cfg.model_copy(update={'run_timeout': run_timeout})
    try:
        results = run_discovery(cfg, url, category)
    except asyncio.TimeoutError:
        print_error(f'Обнаружение не завершено за {cfg.run_timeout} секунд')
    except DiscoveryError as e:
        print_error(f'Ошибка при обнаружении страниц: {e}')

    if not json_output:
        click.echo(results_to_json(results, indent=2 if pretty else None))
        return

    try:
        saved = render_json(results, json_output)
    except OSError as e:
        print_error(f'Ошибка при сохранении JSON: {e}')
    click.echo(f'JSON report: {saved}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON (ключ API скрыт)."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
