"""page_scout.logger: общий логгер PageScout.

Все модули пишут в дочерние логгеры ``PageScout.<модуль>`` (см. :func:`get_logger`),
вывод настраивается один раз на корневом ``PageScout``: stdout и, по желанию,
файл с ротацией. CLI вызывает :func:`init_logging` при каждом запуске.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

LOGGER_NAME: Final[str] = "PageScout"
_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
# ротация файла: 5 MiB, три архивных копии
_ROTATE_BYTES: Final[int] = 5 * 1024 * 1024
_ROTATE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]
_PathT = Union[str, Path]


def _build_handlers(fmt: str, log_file: Optional[_PathT]) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file),
                maxBytes=_ROTATE_BYTES,
                backupCount=_ROTATE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: Optional[_PathT] = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Настраивает логгер ``PageScout`` и возвращает его.

    Args:
        level: уровень, числом или именем (``"DEBUG"``).
        log_file: путь к файлу лога; ``None`` — только консоль.
        log_format: строка формата для :class:`logging.Formatter`.
        replace_handlers: закрыть и убрать прежние обработчики перед добавлением новых.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    if replace_handlers:
        for old in list(root.handlers):
            root.removeHandler(old)
            old.close()
    for handler in _build_handlers(log_format, log_file):
        root.addHandler(handler)
    root.propagate = False
    return root


def init_logging(
    level: _LevelT = "INFO",
    log_file: Optional[_PathT] = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """Вариант :func:`configure` для CLI: обработчики всегда заменяются."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """``PageScout`` или его потомок ``PageScout.<suffix>``."""
    if not suffix:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{suffix}")


logger: logging.Logger = configure()

__all__ = ["LOGGER_NAME", "logger", "configure", "init_logging", "get_logger"]
