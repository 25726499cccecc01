"""
Модели элементов SmartScript.

Элементы - неизменяемые листовые значения внутри тегов: переменные, константы,
строки, функции и операторы. Каждый элемент умеет вернуть своё каноническое
текстовое представление, пригодное для повторного парсинга.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Union


class ElementType(Enum):
    """Типы элементов тегов."""
    VARIABLE = "variable"
    CONSTANT_INTEGER = "constant_integer"
    CONSTANT_DOUBLE = "constant_double"
    STRING = "string"
    FUNCTION = "function"
    OPERATOR = "operator"


@dataclass(frozen=True)
class Element(ABC):
    """Базовый абстрактный класс для всех элементов."""

    @abstractmethod
    def get_type(self) -> ElementType:
        """Возвращает тип элемента."""
        pass

    @abstractmethod
    def as_text(self) -> str:
        """Каноническое текстовое представление элемента."""
        pass

    def __str__(self) -> str:
        return self.as_text()


@dataclass(frozen=True)
class ElementVariable(Element):
    """Ссылка на переменную: i, counter_2"""
    name: str

    def get_type(self) -> ElementType:
        return ElementType.VARIABLE

    def as_text(self) -> str:
        return self.name


@dataclass(frozen=True)
class ElementConstantInteger(Element):
    """Целочисленная константа: 42, -7"""
    value: int

    def get_type(self) -> ElementType:
        return ElementType.CONSTANT_INTEGER

    def as_text(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ElementConstantDouble(Element):
    """Дробная константа: 3.14, -0.5"""
    value: float

    def get_type(self) -> ElementType:
        return ElementType.CONSTANT_DOUBLE

    def as_text(self) -> str:
        return format_double(self.value)


@dataclass(frozen=True)
class ElementString(Element):
    """
    Строковая константа: "text"

    Значение хранится в раскрытом виде; as_text() возвращает экранирование
    '\\' и '"' обратно.
    """
    value: str

    def get_type(self) -> ElementType:
        return ElementType.STRING

    def as_text(self) -> str:
        escaped = self.value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'


@dataclass(frozen=True)
class ElementFunction(Element):
    """Функция: @sin, @decfmt. Имя хранится вместе с ведущим '@'."""
    name: str

    def get_type(self) -> ElementType:
        return ElementType.FUNCTION

    def as_text(self) -> str:
        return self.name


@dataclass(frozen=True)
class ElementOperator(Element):
    """Оператор: + - * / ^"""
    symbol: str

    def get_type(self) -> ElementType:
        return ElementType.OPERATOR

    def as_text(self) -> str:
        return self.symbol


def format_double(value: float) -> str:
    """
    Текстовая форма дробного числа без экспоненты.

    Лексер не распознаёт экспоненциальную запись, поэтому '1e+16'
    разворачивается в '10000000000000000.0'.
    """
    text = repr(value)
    if "e" not in text and "E" not in text:
        return text
    text = format(Decimal(text), "f")
    return text if "." in text else text + ".0"


# Элементы, допустимые в качестве границ и шага цикла FOR
CONSTANT_TYPES = (ElementConstantInteger, ElementConstantDouble, ElementString)

AnyElement = Union[
    ElementVariable,
    ElementConstantInteger,
    ElementConstantDouble,
    ElementString,
    ElementFunction,
    ElementOperator,
]

__all__ = [
    "ElementType",
    "Element",
    "ElementVariable",
    "ElementConstantInteger",
    "ElementConstantDouble",
    "ElementString",
    "ElementFunction",
    "ElementOperator",
    "CONSTANT_TYPES",
    "AnyElement",
    "format_double",
]
