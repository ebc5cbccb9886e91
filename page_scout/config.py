"""
Модуль для загрузки и валидации конфигурации PageScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    model_validator,
)

__all__ = ["CurationConfig", "DiscoveryConfig", "load_config"]


class CurationConfig(BaseModel):
    """Параметры модели Gemini для двух этапов отбора."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key: Optional[SecretStr] = Field(
        None, description="Ключ API; если не задан, берётся из GEMINI_API_KEY."
    )
    model: str = Field("gemini-2.5-flash", min_length=1, description="Имя модели.")
    temperature: float = Field(0.0, ge=0, le=2, description="Температура генерации.")
    request_timeout: float = Field(60.0, gt=0, description="Таймаут одного вызова модели (секунд).")
    max_retries: int = Field(1, ge=0, description="Повторы внутри клиента модели.")
    narrow_max_tokens: int = Field(2048, ge=1, description="Лимит токенов первого вызова.")
    select_max_tokens: int = Field(4096, ge=1, description="Лимит токенов второго вызова.")


class DiscoveryConfig(BaseModel):
    """Конфигурация одного запуска обнаружения страниц."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(10.0, gt=0, description="Таймаут на один HTTP-запрос (секунд).")
    run_timeout: float = Field(300.0, gt=0, description="Таймаут всего запуска (секунд).")
    user_agent: str = Field("PageScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    head_delay: float = Field(0.1, ge=0, description="Пауза между запросами страниц (секунд).")
    max_sitemap_depth: int = Field(5, ge=0, description="Максимальная вложенность sitemap index.")

    sample_threshold: int = Field(200, ge=1, description="Размер, до которого выборка не делается.")
    sample_shortest: int = Field(20, ge=0, description="Сколько самых коротких URL брать всегда.")
    sample_random: int = Field(180, ge=0, description="Сколько случайных URL добавить.")

    narrow_size: int = Field(15, ge=1, description="Сколько URL просить на первом этапе.")
    narrow_limit: int = Field(20, ge=1, description="Жёсткий лимит результата первого этапа.")
    result_size: int = Field(10, ge=1, description="Максимальный размер итогового списка.")

    curation: CurationConfig = Field(default_factory=CurationConfig)

    @model_validator(mode="after")
    def _check_sizes(self) -> DiscoveryConfig:
        if self.sample_shortest + self.sample_random > self.sample_threshold:
            raise ValueError("sample_shortest + sample_random must not exceed sample_threshold")
        if self.narrow_size > self.narrow_limit:
            raise ValueError("narrow_size must not exceed narrow_limit")
        return self


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> DiscoveryConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект DiscoveryConfig.
    Без пути используется configs/default.yaml, а если его нет — значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return DiscoveryConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return DiscoveryConfig(**data)
    except ValidationError:
        raise
