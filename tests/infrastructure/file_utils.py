"""
Утилиты для создания файлов шаблонов и конфигураций в тестах.
"""

from __future__ import annotations

import textwrap
from pathlib import Path


def write(p: Path, text: str) -> Path:
    """
    Записывает текст в файл, создавая родительские директории при необходимости.

    Args:
        p: Путь к файлу
        text: Содержимое для записи

    Returns:
        Путь к созданному файлу
    """
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def write_template(root: Path, name: str, body: str) -> Path:
    """Создаёт файл шаблона <name>.smscr с текстом как есть (без dedent)."""
    return write(root / f"{name}.smscr", body)


def write_run_config(root: Path, yaml_text: str, name: str = "run.yaml") -> Path:
    """Создаёт YAML-файл конфигурации прогона (текст проходит через dedent)."""
    return write(root / name, textwrap.dedent(yaml_text).lstrip())


__all__ = ["write", "write_template", "write_run_config"]
