"""
Обёртка над динамически типизированным скаляром.

Поддерживает арифметику и сравнение с единым правилом приведения:
- None → 0 (целое)
- int и float остаются как есть
- строка с '.', 'e' или 'E' разбирается как float, иначе как int
- если хотя бы один операнд float, вычисление идёт во float, иначе в int
"""

from __future__ import annotations

import re
from typing import Any, Callable, Union

from .errors import DivisionByZeroError, InvalidOperandError, NumberFormatError

Number = Union[int, float]

# Делитель, меньший по модулю, считается нулём
DIVISION_EPSILON = 1e-6

_INTEGER = re.compile(r'[+-]?\d+\Z')


class ValueWrapper:
    """
    Изменяемая обёртка одного значения: int, float, str или None.

    Арифметические операции изменяют хранимое значение на месте.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    # ======= Арифметика =======

    def add(self, other: Any) -> None:
        self._apply(other, lambda a, b: a + b)

    def subtract(self, other: Any) -> None:
        self._apply(other, lambda a, b: a - b)

    def multiply(self, other: Any) -> None:
        self._apply(other, lambda a, b: a * b)

    def divide(self, other: Any) -> None:
        first = to_number(self.value)
        second = to_number(other)
        # Проверка по дробному представлению, поэтому целый ноль тоже отклоняется
        if abs(float(second)) < DIVISION_EPSILON:
            raise DivisionByZeroError(f"Division by zero: {self!s} / {other!r}")
        if isinstance(first, float) or isinstance(second, float):
            self.value = float(first) / float(second)
        else:
            self.value = _int_divide(first, second)

    def num_compare(self, other: Any) -> int:
        """
        Сравнивает хранимое значение с other по тем же правилам приведения.

        Returns:
            -1, 0 или 1
        """
        first = to_number(self.value)
        second = to_number(other)
        if isinstance(first, float) or isinstance(second, float):
            first, second = float(first), float(second)
        return (first > second) - (first < second)

    def _apply(self, other: Any, operation: Callable[[Number, Number], Number]) -> None:
        first = to_number(self.value)
        second = to_number(other)
        if isinstance(first, float) or isinstance(second, float):
            self.value = float(operation(float(first), float(second)))
        else:
            self.value = int(operation(first, second))

    # ======= Служебное =======

    def copy(self) -> ValueWrapper:
        return ValueWrapper(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValueWrapper):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __str__(self) -> str:
        if self.value is None:
            return "null"
        return str(self.value)

    def __repr__(self) -> str:
        return f"ValueWrapper({self.value!r})"


def to_number(value: Any) -> Number:
    """
    Приводит значение к числу.

    Raises:
        NumberFormatError: Строка не является числом
        InvalidOperandError: Значение недопустимого типа
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise InvalidOperandError(f"Unsupported operand type: {type(value).__name__}")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return _parse_number(value)
    raise InvalidOperandError(f"Unsupported operand type: {type(value).__name__}")


def _parse_number(text: str) -> Number:
    if "." in text or "e" in text or "E" in text:
        if "_" in text:
            raise NumberFormatError(text)
        try:
            return float(text)
        except ValueError:
            raise NumberFormatError(text) from None
    if not _INTEGER.match(text):
        raise NumberFormatError(text)
    return int(text)


def _int_divide(first: int, second: int) -> int:
    """Целочисленное деление с отбрасыванием дробной части (к нулю)."""
    quotient = abs(first) // abs(second)
    return quotient if (first >= 0) == (second >= 0) else -quotient


__all__ = ["ValueWrapper", "to_number", "DIVISION_EPSILON"]
