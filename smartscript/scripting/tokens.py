"""
Лексические типы SmartScript.

Определяет типы токенов, режимы работы лексера и сам токен.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

from ..errors import SmartScriptError


class TokenType(enum.Enum):
    """Типы токенов в шаблоне SmartScript."""

    # Текстовый контент вне тегов
    TEXT = "TEXT"

    # Элементы внутри тегов
    VARIABLE = "VARIABLE"
    CONSTANT_INTEGER = "CONSTANT_INTEGER"
    CONSTANT_DOUBLE = "CONSTANT_DOUBLE"
    STRING = "STRING"
    FUNCTION = "FUNCTION"                    # @name
    OPERATOR = "OPERATOR"                    # + - * / ^

    # Разделители и имена тегов
    TAG_OPEN = "TAG_OPEN"                    # {$
    TAG_NAME = "TAG_NAME"                    # FOR, END, =
    TAG_CLOSE = "TAG_CLOSE"                  # $}

    EOF = "EOF"


class LexerState(enum.Enum):
    """Режимы работы лексера."""
    TEXT = "TEXT"
    TAG = "TAG"


# Значение токена: строка, целое, дробное или None (для EOF)
TokenValue = Union[str, int, float, None]


@dataclass(frozen=True)
class Token:
    """
    Неизменяемый токен: тип и полезная нагрузка.
    """
    type: TokenType
    value: TokenValue = None

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r})"


class ParserError(SmartScriptError):
    """Ошибка синтаксического анализа."""

    def __init__(self, message: str, token: Optional[Token] = None):
        if token is not None:
            super().__init__(f"{message} (token: {token.type.name})")
        else:
            super().__init__(message)
        self.message = message
        self.token = token


__all__ = ["TokenType", "LexerState", "TokenValue", "Token", "ParserError"]
