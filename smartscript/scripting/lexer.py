"""
Лексический анализатор SmartScript.

Работает как однопроходный курсор по исходному тексту и поддерживает два режима:
- TEXT: накапливает обычный текст до неэкранированной '{'
- TAG: разбирает содержимое тегов {$ ... $} на отдельные элементы

Переключение в режим TAG происходит в момент, когда лексер видит '{',
обратно в TEXT после закрывающей последовательности '$}'.
"""

from __future__ import annotations

import math
import re
from typing import List, Optional

from .tokens import LexerState, Token, TokenType
from ..errors import SmartScriptError


class LexerError(SmartScriptError):
    """Ошибка лексического анализа."""

    def __init__(self, message: str, position: int = -1):
        if position >= 0:
            super().__init__(f"{message} at position {position}")
        else:
            super().__init__(message)
        self.message = message
        self.position = position


# Имена тегов (сравниваются без учёта регистра)
FOR = "FOR"
END = "END"
ECHO = "="

OPERATORS = frozenset("+-*/^")

_ESCAPE = "\\"


class SmartScriptLexer:
    """
    Лексер шаблонов SmartScript.

    Выдаёт токены по одному через next_token(). Возврат назад не поддерживается,
    единственный просмотр вперёд: один символ после '\\' в escape-последовательностях.
    """

    _WHITESPACE = re.compile(r'[ \t\r\n]+')

    # Идентификатор: начинается с буквы, далее буквы, цифры и '_'
    _IDENTIFIER = re.compile(r'[^\W\d_]\w*')

    # Число: цифры, точки и минусы; корректность проверяется при конвертации
    _NUMBER = re.compile(r'-?\d[\d.\-]*')

    # Escape-последовательности внутри строк тега
    _STRING_ESCAPES = {
        "\\": "\\",
        '"': '"',
        "n": "\n",
        "r": "\r",
        "t": "\t",
    }

    def __init__(self, text: str):
        if text is None:
            raise LexerError("Lexer input must not be None")
        self.text = text
        self.position = 0
        self.length = len(text)
        self.state = LexerState.TEXT
        self.current_token: Optional[Token] = None

    def next_token(self) -> Token:
        """
        Извлекает следующий токен из входного потока.

        Raises:
            LexerError: Если вход не токенизируется или EOF уже был выдан
        """
        if self.current_token is not None and self.current_token.type == TokenType.EOF:
            raise LexerError("No more tokens available", self.position)

        if self._is_at_end():
            self.current_token = Token(TokenType.EOF)
            return self.current_token

        if self.text[self.position] == "{":
            self.state = LexerState.TAG

        if self.state == LexerState.TEXT:
            self.current_token = self._next_text_token()
        else:
            self.current_token = self._next_tag_token()
        return self.current_token

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь оставшийся текст и возвращает список токенов, включая EOF.
        """
        tokens: List[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens

    # ======= Режим TEXT =======

    def _next_text_token(self) -> Token:
        """Накапливает текст до неэкранированной '{' или конца входа."""
        parts: List[str] = []
        while not self._is_at_end():
            char = self.text[self.position]
            if char == "{":
                break
            if char == _ESCAPE:
                parts.append(self._read_text_escape())
                continue
            parts.append(char)
            self.position += 1
        return Token(TokenType.TEXT, "".join(parts))

    def _read_text_escape(self) -> str:
        """В тексте допустимы только '\\\\' и '\\{'."""
        start = self.position
        self.position += 1
        if self._is_at_end():
            raise LexerError("Unfinished escape sequence at end of input", start)
        char = self.text[self.position]
        if char not in (_ESCAPE, "{"):
            raise LexerError(f"Invalid escape sequence '\\{char}' in text", start)
        self.position += 1
        return char

    # ======= Режим TAG =======

    def _next_tag_token(self) -> Token:
        """Пропускает пробелы и разбирает очередной элемент тега."""
        match = self._WHITESPACE.match(self.text, self.position)
        if match:
            self.position = match.end()

        # После пробелов вход мог закончиться - это EOF, а не ошибка
        if self._is_at_end():
            return Token(TokenType.EOF)

        char = self.text[self.position]

        if char == "{":
            return self._read_open_tag()
        if char == "$":
            return self._read_close_tag()
        if char.isalpha():
            return self._read_variable_or_tag_name()
        if char == ECHO:
            self.position += 1
            return Token(TokenType.TAG_NAME, ECHO)
        if char.isdecimal() or (char == "-" and self._peek_is_digit()):
            return self._read_number()
        if char in OPERATORS:
            self.position += 1
            return Token(TokenType.OPERATOR, char)
        if char == '"':
            return self._read_string()
        if char == "@":
            return self._read_function()

        raise LexerError(f"Unexpected character '{char}' in tag", self.position)

    def _read_open_tag(self) -> Token:
        start = self.position
        self.position += 1
        if self._is_at_end() or self.text[self.position] != "$":
            found = "" if self._is_at_end() else self.text[self.position]
            raise LexerError(f"Invalid tag opening '{{{found}', expected '{{$'", start)
        self.position += 1
        return Token(TokenType.TAG_OPEN, "{$")

    def _read_close_tag(self) -> Token:
        start = self.position
        self.position += 1
        if self._is_at_end() or self.text[self.position] != "}":
            raise LexerError("Character '$' may only appear before '}'", start)
        self.position += 1
        self.state = LexerState.TEXT
        return Token(TokenType.TAG_CLOSE, "$}")

    def _read_variable_or_tag_name(self) -> Token:
        name = self._read_identifier()
        if name.upper() in (FOR, END):
            return Token(TokenType.TAG_NAME, name)
        return Token(TokenType.VARIABLE, name)

    def _read_number(self) -> Token:
        start = self.position
        match = self._NUMBER.match(self.text, self.position)
        # Гарантировано проверкой первого символа
        assert match is not None
        literal = match.group(0)
        self.position = match.end()
        try:
            if "." not in literal:
                return Token(TokenType.CONSTANT_INTEGER, int(literal))
            value = float(literal)
        except ValueError:
            raise LexerError(f"Invalid number format '{literal}'", start) from None
        if not math.isfinite(value):
            raise LexerError(f"Number '{literal}' is out of range", start)
        return Token(TokenType.CONSTANT_DOUBLE, value)

    def _read_string(self) -> Token:
        start = self.position
        self.position += 1  # открывающая кавычка в значение не входит
        parts: List[str] = []
        while True:
            if self._is_at_end():
                raise LexerError(f"String '{''.join(parts)}' is never closed", start)
            char = self.text[self.position]
            if char == _ESCAPE:
                parts.append(self._read_string_escape())
                continue
            self.position += 1
            if char == '"':
                break
            parts.append(char)
        return Token(TokenType.STRING, "".join(parts))

    def _read_string_escape(self) -> str:
        start = self.position
        self.position += 1
        if self._is_at_end():
            raise LexerError("Unfinished escape sequence at end of input", start)
        char = self.text[self.position]
        replacement = self._STRING_ESCAPES.get(char)
        if replacement is None:
            raise LexerError(f"Invalid escape sequence '\\{char}' in string", start)
        self.position += 1
        return replacement

    def _read_function(self) -> Token:
        start = self.position
        self.position += 1  # '@'
        if self._is_at_end() or not self.text[self.position].isalpha():
            raise LexerError("Function name must start with '@' followed by a letter", start)
        return Token(TokenType.FUNCTION, "@" + self._read_identifier())

    # ======= Вспомогательные методы =======

    def _read_identifier(self) -> str:
        match = self._IDENTIFIER.match(self.text, self.position)
        if not match:
            raise LexerError("Identifier must start with a letter", self.position)
        self.position = match.end()
        return match.group(0)

    def _peek_is_digit(self) -> bool:
        nxt = self.position + 1
        return nxt < self.length and self.text[nxt].isdecimal()

    def _is_at_end(self) -> bool:
        return self.position >= self.length


def tokenize_template(text: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список токенов, последний - EOF

    Raises:
        LexerError: При ошибке лексического анализа
    """
    return SmartScriptLexer(text).tokenize()


__all__ = [
    "SmartScriptLexer",
    "LexerError",
    "tokenize_template",
    "FOR",
    "END",
    "ECHO",
    "OPERATORS",
]
