from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel


def dumps(obj: Any, indent: Optional[int] = None) -> str:
    """
    JSON-вывод для ответов CLI.

    Pydantic-модели и списки моделей сериализуются через model_dump(mode="json").
    Не-ASCII символы выводятся как есть; завершающий перевод строки добавляет вызывающий код.
    """
    return json.dumps(_plain(obj), ensure_ascii=False, indent=indent)


def _plain(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (list, tuple)):
        return [_plain(item) for item in obj]
    return obj


__all__ = ["dumps"]
