"""
Выполнение шаблонов SmartScript: значения, стеки, операции и движок.
"""

from __future__ import annotations

from .decfmt import DecimalPattern, PatternError, format_decimal
from .engine import SmartScriptEngine
from .errors import (
    DivisionByZeroError,
    EmptyStackError,
    EvaluationError,
    InvalidOperandError,
    NumberFormatError,
    UnsupportedOperationError,
)
from .multistack import ObjectMultistack
from .operations import DEFAULT_OPERATIONS, StackOperation, StackOperationProvider
from .value_wrapper import ValueWrapper, to_number

__all__ = [
    "DecimalPattern",
    "PatternError",
    "format_decimal",
    "SmartScriptEngine",
    "DivisionByZeroError",
    "EmptyStackError",
    "EvaluationError",
    "InvalidOperandError",
    "NumberFormatError",
    "UnsupportedOperationError",
    "ObjectMultistack",
    "DEFAULT_OPERATIONS",
    "StackOperation",
    "StackOperationProvider",
    "ValueWrapper",
    "to_number",
]
