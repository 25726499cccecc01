"""
Конфигурация прогона шаблона.

YAML-файл описывает параметры запроса и атрибуты ответа, с которыми
шаблон выполняется из командной строки:

    parameters:            {a: "1", b: "2"}
    persistent_parameters: {visits: "3"}
    temporary_parameters:  {}
    encoding: utf-8
    mime_type: text/plain
    status_code: 200
    status_text: OK
    headers: false
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import SmartScriptError
from .request_context import DEFAULT_ENCODING, DEFAULT_MIME_TYPE
from .types import ParameterMap

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

_KNOWN_KEYS = {
    "parameters",
    "persistent_parameters",
    "temporary_parameters",
    "encoding",
    "mime_type",
    "status_code",
    "status_text",
    "headers",
}


class ConfigLoadError(SmartScriptError):
    """Файл конфигурации отсутствует, повреждён или содержит поля неверного типа."""
    pass


@dataclass(frozen=True)
class RunConfig:
    parameters: ParameterMap = field(default_factory=dict)
    persistent_parameters: ParameterMap = field(default_factory=dict)
    temporary_parameters: ParameterMap = field(default_factory=dict)
    encoding: str = DEFAULT_ENCODING
    mime_type: str = DEFAULT_MIME_TYPE
    status_code: int = 200
    status_text: str = "OK"
    headers: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RunConfig:
        """
        Создание экземпляра из словаря (из YAML).

        Raises:
            ConfigLoadError: При неверной структуре или типах полей
        """
        if not isinstance(data, Mapping):
            raise ConfigLoadError(f"Run configuration must be a mapping, got {type(data).__name__}")

        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise ConfigLoadError(f"Unknown run configuration keys: {', '.join(sorted(map(str, unknown)))}")

        return cls(
            parameters=_string_map(data, "parameters"),
            persistent_parameters=_string_map(data, "persistent_parameters"),
            temporary_parameters=_string_map(data, "temporary_parameters"),
            encoding=_typed(data, "encoding", str, DEFAULT_ENCODING),
            mime_type=_typed(data, "mime_type", str, DEFAULT_MIME_TYPE),
            status_code=_typed(data, "status_code", int, 200),
            status_text=_typed(data, "status_text", str, "OK"),
            headers=_typed(data, "headers", bool, False),
        )

    def with_overrides(
        self,
        *,
        parameters: Optional[ParameterMap] = None,
        persistent_parameters: Optional[ParameterMap] = None,
        temporary_parameters: Optional[ParameterMap] = None,
        headers: Optional[bool] = None,
    ) -> RunConfig:
        """Копия конфигурации, в которой значения из аргументов перекрывают файловые."""
        changes: Dict[str, Any] = {}
        for attr, extra in (
            ("parameters", parameters),
            ("persistent_parameters", persistent_parameters),
            ("temporary_parameters", temporary_parameters),
        ):
            if extra:
                current: ParameterMap = getattr(self, attr)
                for key in extra.keys() & current.keys():
                    logger.warning(f"Overriding {attr} '{key}' from command line")
                changes[attr] = {**current, **extra}
        if headers is not None:
            changes["headers"] = headers
        return replace(self, **changes)


def load_run_config(path: Path) -> RunConfig:
    """
    Читает конфигурацию прогона из YAML-файла.

    Raises:
        ConfigLoadError: Файл не найден, не является YAML-отображением или содержит ошибки
    """
    if not path.is_file():
        raise ConfigLoadError(f"Run configuration file not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"YAML must be a mapping: {path}")
    logger.debug(f"Loaded run configuration from {path}")
    return RunConfig.from_dict(raw)


def parse_assignments(items: Iterable[str]) -> ParameterMap:
    """
    Разбирает аргументы вида name=value.

    Raises:
        ConfigLoadError: Если в аргументе нет '=' или имя пустое
    """
    result: ParameterMap = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise ConfigLoadError(f"Expected NAME=VALUE, got '{item}'")
        result[name] = value
    return result


# ======= Внутренние функции =======

def _string_map(data: Mapping[str, Any], key: str) -> ParameterMap:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigLoadError(f"'{key}' must be a mapping, got {type(value).__name__}")
    result: ParameterMap = {}
    for name, item in value.items():
        if isinstance(item, (dict, list)) or item is None:
            raise ConfigLoadError(f"'{key}.{name}' must be a scalar value")
        result[str(name)] = str(item)
    return result


def _typed(data: Mapping[str, Any], key: str, expected: type, default: Any) -> Any:
    value = data.get(key, default)
    # bool является подклассом int, поэтому проверяем точный тип
    if type(value) is not expected:
        raise ConfigLoadError(f"'{key}' must be of type {expected.__name__}, got {type(value).__name__}")
    return value


__all__ = ["RunConfig", "ConfigLoadError", "load_run_config", "parse_assignments"]
