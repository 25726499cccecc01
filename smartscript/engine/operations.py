"""
Таблица операторов и функций для выражений эхо-тегов.

Каждая операция получает приёмник и текущий стек операндов, снимает
ровно нужное ей число операндов и кладёт 0 или 1 результат.
Таблица строится один раз и дальше только читается.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from .decfmt import PatternError, format_decimal
from .errors import (
    EmptyStackError,
    InvalidOperandError,
    NumberFormatError,
    UnsupportedOperationError,
)
from .value_wrapper import ValueWrapper, to_number
from ..protocols import OutputSink

OperandStack = List[ValueWrapper]
StackOperation = Callable[[OutputSink, OperandStack], None]

FUNCTION_PREFIX = "@"


class StackOperationProvider:
    """
    Неизменяемое отображение имя операции → реализация.

    Экземпляр передаётся движку явно, глобального состояния нет.
    """

    def __init__(self, operations: Mapping[str, StackOperation]):
        self._operations: Mapping[str, StackOperation] = MappingProxyType(dict(operations))

    def calculate(self, name: str, sink: OutputSink, stack: OperandStack) -> None:
        """
        Выполняет операцию над стеком операндов.

        Raises:
            UnsupportedOperationError: Операция не зарегистрирована
            EvaluationError: Ошибка внутри операции
        """
        operation = self._operations.get(name)
        if operation is None:
            raise UnsupportedOperationError(name)
        operation(sink, stack)

    def names(self) -> List[str]:
        return sorted(self._operations)

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def with_operations(self, extra: Mapping[str, StackOperation]) -> StackOperationProvider:
        """Новая таблица, дополненная (или переопределённая) операциями extra."""
        merged: Dict[str, StackOperation] = dict(self._operations)
        merged.update(extra)
        return StackOperationProvider(merged)


# ======= Вспомогательные функции =======

def pop_operand(stack: OperandStack, operation: str) -> ValueWrapper:
    if not stack:
        raise EmptyStackError(f"Not enough operands on stack for '{operation}'")
    return stack.pop()


def _as_float(value: Any) -> float:
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise NumberFormatError(value) from None
    return float(to_number(value))


def _as_name(wrapper: ValueWrapper) -> str:
    return str(wrapper.value) if wrapper.value is not None else str(wrapper)


# ======= Арифметика =======

def _binary(name: str, method: Callable[[ValueWrapper, Any], None]) -> StackOperation:
    def operation(sink: OutputSink, stack: OperandStack) -> None:
        # Вершина стека - второй операнд
        second = pop_operand(stack, name)
        first = pop_operand(stack, name)
        method(first, second.value)
        stack.append(first)
    return operation


# ======= Функции =======

def _sin(sink: OutputSink, stack: OperandStack) -> None:
    argument = pop_operand(stack, "@sin")
    x = _as_float(argument.value)
    # Синус бесконечности не определён
    stack.append(ValueWrapper(math.nan if math.isinf(x) else math.sin(x)))


def _decfmt(sink: OutputSink, stack: OperandStack) -> None:
    pattern = pop_operand(stack, "@decfmt")
    number = pop_operand(stack, "@decfmt")
    try:
        formatted = format_decimal(to_number(number.value), str(pattern.value))
    except PatternError as e:
        raise InvalidOperandError(f"@decfmt: {e}") from e
    stack.append(ValueWrapper(formatted))


def _dup(sink: OutputSink, stack: OperandStack) -> None:
    top = pop_operand(stack, "@dup")
    stack.append(top)
    stack.append(top.copy())


def _swap(sink: OutputSink, stack: OperandStack) -> None:
    first = pop_operand(stack, "@swap")
    second = pop_operand(stack, "@swap")
    stack.append(first)
    stack.append(second)


def _set_mime_type(sink: OutputSink, stack: OperandStack) -> None:
    sink.set_mime_type(_as_name(pop_operand(stack, "@setMimeType")))


def _param_getter(name: str, getter: Callable[[OutputSink, str], Optional[str]]) -> StackOperation:
    """
    Один операнд служит и именем параметра, и значением по умолчанию:
    если параметра нет, операнд возвращается на стек без изменений.
    """
    def operation(sink: OutputSink, stack: OperandStack) -> None:
        default = pop_operand(stack, name)
        value = getter(sink, _as_name(default))
        stack.append(ValueWrapper(default.value if value is None else value))
    return operation


def _param_setter(name: str, setter: Callable[[OutputSink, str, str], None]) -> StackOperation:
    def operation(sink: OutputSink, stack: OperandStack) -> None:
        param_name = pop_operand(stack, name)
        value = pop_operand(stack, name)
        setter(sink, _as_name(param_name), str(value))
    return operation


def _param_remover(name: str, remover: Callable[[OutputSink, str], None]) -> StackOperation:
    def operation(sink: OutputSink, stack: OperandStack) -> None:
        remover(sink, _as_name(pop_operand(stack, name)))
    return operation


def _build_default_operations() -> Dict[str, StackOperation]:
    f = FUNCTION_PREFIX
    return {
        "+": _binary("+", ValueWrapper.add),
        "-": _binary("-", ValueWrapper.subtract),
        "*": _binary("*", ValueWrapper.multiply),
        "/": _binary("/", ValueWrapper.divide),
        f + "sin": _sin,
        f + "decfmt": _decfmt,
        f + "dup": _dup,
        f + "swap": _swap,
        f + "setMimeType": _set_mime_type,
        f + "paramGet": _param_getter(f + "paramGet", lambda s, n: s.get_parameter(n)),
        f + "pparamGet": _param_getter(f + "pparamGet", lambda s, n: s.get_persistent_parameter(n)),
        f + "pparamSet": _param_setter(f + "pparamSet", lambda s, n, v: s.set_persistent_parameter(n, v)),
        f + "pparamDel": _param_remover(f + "pparamDel", lambda s, n: s.remove_persistent_parameter(n)),
        f + "tparamGet": _param_getter(f + "tparamGet", lambda s, n: s.get_temporary_parameter(n)),
        f + "tparamSet": _param_setter(f + "tparamSet", lambda s, n, v: s.set_temporary_parameter(n, v)),
        f + "tparamDel": _param_remover(f + "tparamDel", lambda s, n: s.remove_temporary_parameter(n)),
    }


# Таблица по умолчанию, создаётся один раз при импорте
DEFAULT_OPERATIONS = StackOperationProvider(_build_default_operations())


__all__ = [
    "StackOperation",
    "OperandStack",
    "StackOperationProvider",
    "DEFAULT_OPERATIONS",
    "FUNCTION_PREFIX",
    "pop_operand",
]
