"""
Ошибки выполнения шаблонов SmartScript.
"""

from __future__ import annotations

from ..errors import SmartScriptError


class EvaluationError(SmartScriptError):
    """Ошибка при выполнении шаблона. Прерывает текущий прогон."""
    pass


class UnsupportedOperationError(EvaluationError):
    """Оператор или функция не зарегистрированы в таблице операций."""

    def __init__(self, name: str):
        super().__init__(f"Operation '{name}' is not supported")
        self.name = name


class InvalidOperandError(EvaluationError, TypeError):
    """Операнд недопустимого типа или элемент, не имеющий скалярного значения."""
    pass


class NumberFormatError(EvaluationError, ValueError):
    """Строку не удалось разобрать как число."""

    def __init__(self, text: str):
        super().__init__(f"Cannot interpret '{text}' as a number")
        self.text = text


class DivisionByZeroError(EvaluationError, ArithmeticError):
    """Делитель по модулю меньше допустимой погрешности."""
    pass


class EmptyStackError(EvaluationError):
    """
    Стек пуст или имя никогда не помещалось в хранилище.

    Отделено от InvalidOperandError, чтобы вызывающий код мог отличить,
    например, обращение к переменной цикла вне цикла.
    """
    pass


__all__ = [
    "EvaluationError",
    "UnsupportedOperationError",
    "InvalidOperandError",
    "NumberFormatError",
    "DivisionByZeroError",
    "EmptyStackError",
]
