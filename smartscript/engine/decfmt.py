"""
Форматирование чисел по шаблонам десятичного формата.

Поддерживается синтаксис шаблонов в стиле DecimalFormat:
- '0' - обязательная цифра, '#' - необязательная цифра
- ',' - разделитель групп (размер группы - число цифр после последней запятой)
- '.' - десятичный разделитель
- 'E0' - экспоненциальная запись с минимальным числом цифр порядка
- '%' и '‰' в префиксе или суффиксе умножают значение на 100 и 1000
- текст в одинарных кавычках выводится как есть, '' - сама кавычка
- ';' отделяет необязательный шаблон для отрицательных чисел

Округление - банковское (HALF_EVEN) по точному двоичному значению числа.
Бесконечность выводится как ∞ с префиксом и суффиксом, NaN - как "NaN".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from typing import List, Optional, Tuple

_DIGIT_CHARS = "0#,."

_PRECISION = 1200

_INFINITY = "∞"
_NAN = "NaN"


class PatternError(ValueError):
    """Некорректный шаблон формата."""
    pass


@dataclass(frozen=True)
class _Affix:
    text: str
    multiplier: int


@dataclass(frozen=True)
class DecimalPattern:
    """Разобранный шаблон формата."""
    prefix: str
    suffix: str
    negative_prefix: Optional[str]
    negative_suffix: Optional[str]
    multiplier: int
    min_int: int
    grouping: int
    min_frac: int
    max_frac: int
    always_show_point: bool
    min_exp: int  # 0 - без экспоненты

    @classmethod
    def parse(cls, pattern: str) -> DecimalPattern:
        positive, negative = _split_subpatterns(pattern)

        prefix, number, suffix = _split_affixes(positive, pattern)
        min_int, grouping, min_frac, max_frac, always_point, min_exp = _parse_number_part(number, pattern)

        multiplier = prefix.multiplier * suffix.multiplier
        neg_prefix = neg_suffix = None
        if negative is not None:
            n_prefix, _, n_suffix = _split_affixes(negative, pattern)
            neg_prefix, neg_suffix = n_prefix.text, n_suffix.text

        return cls(
            prefix=prefix.text,
            suffix=suffix.text,
            negative_prefix=neg_prefix,
            negative_suffix=neg_suffix,
            multiplier=multiplier,
            min_int=min_int,
            grouping=grouping,
            min_frac=min_frac,
            max_frac=max_frac,
            always_show_point=always_point,
            min_exp=min_exp,
        )

    def format(self, value: float | int) -> str:
        if isinstance(value, float) and not math.isfinite(value):
            return self._format_non_finite(value)
        # Точное двоичное значение float может содержать сотни цифр
        with localcontext() as ctx:
            ctx.prec = _PRECISION + self.max_frac
            if isinstance(value, int):
                ctx.prec += len(str(abs(value)))
            return self._format(Decimal(value) * self.multiplier)

    def _format_non_finite(self, value: float) -> str:
        # NaN выводится без префикса и суффикса
        if math.isnan(value):
            return _NAN
        return self._with_affixes(_INFINITY, value < 0)

    def _format(self, number: Decimal) -> str:
        negative = number < 0 or (number == 0 and str(number).startswith("-"))
        number = abs(number)

        if self.min_exp:
            body = self._format_scientific(number)
        else:
            body = self._format_plain(number)

        return self._with_affixes(body, negative)

    def _with_affixes(self, body: str, negative: bool) -> str:
        if negative:
            if self.negative_prefix is not None:
                return f"{self.negative_prefix}{body}{self.negative_suffix}"
            return f"-{self.prefix}{body}{self.suffix}"
        return f"{self.prefix}{body}{self.suffix}"

    def _format_plain(self, number: Decimal) -> str:
        int_digits, frac_digits = self._round(number)
        if len(int_digits) < self.min_int:
            int_digits = int_digits.rjust(self.min_int, "0")
        if self.grouping:
            int_digits = _group(int_digits, self.grouping)
        if not int_digits and not frac_digits:
            int_digits = "0"
        if frac_digits or self.always_show_point:
            return f"{int_digits}.{frac_digits}"
        return int_digits

    def _format_scientific(self, number: Decimal) -> str:
        int_width = max(self.min_int, 1)
        exponent = 0
        if number != 0:
            exponent = number.adjusted() - (int_width - 1)
            number = number.scaleb(-exponent)
        int_digits, frac_digits = self._round(number)
        # Округление могло дать лишний разряд: 9.99 → 10.0
        if len(int_digits) > int_width:
            exponent += 1
            int_digits, frac_digits = self._round(number.scaleb(-1))
        int_digits = int_digits.rjust(int_width, "0")
        mantissa = f"{int_digits}.{frac_digits}" if frac_digits or self.always_show_point else int_digits
        sign = "-" if exponent < 0 else ""
        return f"{mantissa}E{sign}{str(abs(exponent)).rjust(self.min_exp, '0')}"

    def _round(self, number: Decimal) -> Tuple[str, str]:
        quantum = Decimal(1).scaleb(-self.max_frac)
        rounded = number.quantize(quantum, rounding=ROUND_HALF_EVEN)
        text = format(rounded, "f")
        int_part, _, frac_part = text.partition(".")
        frac_part = frac_part.rstrip("0")
        if len(frac_part) < self.min_frac:
            frac_part = frac_part.ljust(self.min_frac, "0")
        int_part = int_part.lstrip("0")
        return int_part, frac_part


def format_decimal(value: float | int, pattern: str) -> str:
    """
    Форматирует число по шаблону.

    Raises:
        PatternError: При некорректном шаблоне
    """
    return DecimalPattern.parse(pattern).format(value)


def _split_subpatterns(pattern: str) -> Tuple[str, Optional[str]]:
    in_quote = False
    for i, char in enumerate(pattern):
        if char == "'":
            in_quote = not in_quote
        elif char == ";" and not in_quote:
            return pattern[:i], pattern[i + 1:]
    return pattern, None


def _split_affixes(subpattern: str, pattern: str) -> Tuple[_Affix, str, _Affix]:
    prefix_chars: List[str] = []
    number_chars: List[str] = []
    suffix_chars: List[str] = []
    multiplier = [1, 1]

    section = 0  # 0 - префикс, 1 - число, 2 - суффикс
    i = 0
    while i < len(subpattern):
        char = subpattern[i]
        if char == "'":
            end = subpattern.find("'", i + 1)
            if end < 0:
                raise PatternError(f"Unterminated quote in pattern '{pattern}'")
            literal = subpattern[i + 1:end] or "'"
            i = end + 1
            if section == 1:
                section = 2
            (prefix_chars if section == 0 else suffix_chars).append(literal)
            continue

        if char in _DIGIT_CHARS or (char == "E" and section == 1):
            if section == 2:
                raise PatternError(f"Unexpected '{char}' in pattern suffix '{pattern}'")
            section = 1
            number_chars.append(char)
        else:
            if section == 1:
                section = 2
            target = prefix_chars if section == 0 else suffix_chars
            if char == "%":
                multiplier[min(section, 1)] = 100
            elif char == "‰":
                multiplier[min(section, 1)] = 1000
            target.append(char)
        i += 1

    if not number_chars:
        raise PatternError(f"Pattern '{pattern}' contains no digits")

    return (
        _Affix("".join(prefix_chars), multiplier[0]),
        "".join(number_chars),
        _Affix("".join(suffix_chars), multiplier[1]),
    )


def _parse_number_part(number: str, pattern: str) -> Tuple[int, int, int, int, bool, int]:
    mantissa, _, exponent = number.partition("E")
    if "E" in number and (not exponent or set(exponent) != {"0"}):
        raise PatternError(f"Malformed exponent in pattern '{pattern}'")

    if mantissa.count(".") > 1:
        raise PatternError(f"Multiple decimal separators in pattern '{pattern}'")
    int_part, point, frac_part = mantissa.partition(".")

    if "," in frac_part:
        raise PatternError(f"Grouping separator after decimal point in pattern '{pattern}'")
    int_digits = int_part.replace(",", "")
    if "0#" in int_digits or (int_digits and "#" in int_digits.lstrip("#")):
        raise PatternError(f"Unexpected '#' after '0' in pattern '{pattern}'")
    if "#0" in frac_part:
        raise PatternError(f"Unexpected '0' after '#' in pattern '{pattern}'")

    grouping = 0
    if "," in int_part:
        grouping = len(int_part) - int_part.rindex(",") - 1
        if grouping == 0:
            raise PatternError(f"Grouping separator at end of integer part in pattern '{pattern}'")

    min_int = int_digits.count("0")
    min_frac = frac_part.count("0")
    max_frac = len(frac_part)
    always_point = bool(point) and not frac_part
    return min_int, grouping, min_frac, max_frac, always_point, len(exponent)


def _group(digits: str, size: int) -> str:
    groups: List[str] = []
    while len(digits) > size:
        groups.insert(0, digits[-size:])
        digits = digits[:-size]
    if digits:
        groups.insert(0, digits)
    return ",".join(groups)


__all__ = ["DecimalPattern", "PatternError", "format_decimal"]
