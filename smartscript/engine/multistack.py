"""
Хранилище именованных стеков.

Каждому имени переменной соответствует собственный LIFO-стек значений;
вложенные циклы с одинаковой переменной затеняют внешнее значение.
"""

from __future__ import annotations

from typing import Dict, List

from .errors import EmptyStackError, InvalidOperandError
from .value_wrapper import ValueWrapper


class ObjectMultistack:
    """
    Отображение имя → стек ValueWrapper.

    push/pop/peek работают за O(1). Имя, которое никогда не помещалось
    или стек которого полностью опустошён, считается пустым.
    """

    def __init__(self) -> None:
        self._stacks: Dict[str, List[ValueWrapper]] = {}

    def push(self, name: str, value: ValueWrapper) -> None:
        if name is None or value is None:
            raise InvalidOperandError(
                f"Neither name nor value may be None (name={name!r}, value={value!r})"
            )
        self._stacks.setdefault(name, []).append(value)

    def pop(self, name: str) -> ValueWrapper:
        stack = self._require_stack(name)
        value = stack.pop()
        if not stack:
            del self._stacks[name]
        return value

    def peek(self, name: str) -> ValueWrapper:
        return self._require_stack(name)[-1]

    def is_empty(self, name: str) -> bool:
        return not self._stacks.get(name)

    def _require_stack(self, name: str) -> List[ValueWrapper]:
        stack = self._stacks.get(name)
        if not stack:
            raise EmptyStackError(f"No value on stack '{name}'")
        return stack


__all__ = ["ObjectMultistack"]
