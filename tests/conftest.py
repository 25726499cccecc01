from pathlib import Path

import pytest

from smartscript.processor import TemplateProcessor

# Импорт из унифицированной инфраструктуры
from tests.infrastructure.sinks import MemorySink


@pytest.fixture
def sink() -> MemorySink:
    """Пустой приёмник в памяти."""
    return MemorySink()


@pytest.fixture
def processor() -> TemplateProcessor:
    return TemplateProcessor()


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """Рабочая директория с простым шаблоном hello.smscr."""
    (tmp_path / "hello.smscr").write_text(
        "Hello {$= \"world\" $}!{$ FOR i 1 3 1 $} {$= i $}{$ END $}",
        encoding="utf-8",
    )
    return tmp_path
