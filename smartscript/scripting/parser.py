"""
Парсер шаблонов SmartScript.

Потребляет токены лексера по одному и строит дерево документа,
используя явный стек открытых родительских узлов (изначально - только DocumentNode).

Грамматика:
document   → (TEXT | tag)* EOF
tag        → "{$" (for_tag | end_tag | echo_tag)
for_tag    → "FOR" VARIABLE constant constant [constant] "$}"
end_tag    → "END" "$}"
echo_tag   → "=" element+ "$}"
constant   → CONSTANT_INTEGER | CONSTANT_DOUBLE | STRING
"""

from __future__ import annotations

from typing import List, Optional

from .elements import (
    Element,
    ElementConstantDouble,
    ElementConstantInteger,
    ElementFunction,
    ElementOperator,
    ElementString,
    ElementVariable,
)
from .lexer import END, FOR, LexerError, SmartScriptLexer
from .nodes import DocumentNode, EchoNode, ForLoopNode, ParentNode, TextNode
from .tokens import LexerState, ParserError, Token, TokenType


class SmartScriptParser:
    """
    Парсер документа SmartScript.

    Разбор выполняется сразу в конструкторе; результат доступен через document_node.
    Частичное дерево при ошибке не возвращается.
    """

    def __init__(self, document_body: str):
        """
        Args:
            document_body: Исходный текст шаблона

        Raises:
            ParserError: При любой лексической или синтаксической ошибке
        """
        if document_body is None:
            raise ParserError("Document body must not be None")

        self.lexer = SmartScriptLexer(document_body)
        self.document_node = DocumentNode()
        self._node_stack: List[ParentNode] = [self.document_node]

        self._parse_document()

    def _parse_document(self) -> None:
        while self._next_token().type != TokenType.EOF:
            if self.lexer.state == LexerState.TEXT:
                self._add_text_node()
            else:
                self._parse_tag()

        if len(self._node_stack) != 1:
            raise ParserError(
                f"Unbalanced FOR/END tags: {len(self._node_stack) - 1} FOR tag(s) left unclosed"
            )

    def _add_text_node(self) -> None:
        token = self._current_token()
        self._parent().add_child(TextNode(str(token.value)))

    def _parse_tag(self) -> None:
        """Разбирает тег, начиная с токена TAG_OPEN."""
        opening = self._current_token()
        if opening.type != TokenType.TAG_OPEN:
            raise ParserError("Expected tag opening '{$'", opening)

        token = self._next_token()
        if token.type != TokenType.TAG_NAME:
            raise ParserError("Tag must start with a tag name (FOR, END or =)", token)

        tag_name = str(token.value).upper()
        if tag_name == FOR:
            self._add_for_loop_node()
        elif tag_name == END:
            self._close_for_loop()
        else:
            self._add_echo_node()

    def _add_for_loop_node(self) -> None:
        node = ForLoopNode.from_elements(self._collect_tag_elements())
        self._parent().add_child(node)
        # Цикл становится родителем для последующего содержимого
        self._node_stack.append(node)

    def _close_for_loop(self) -> None:
        token = self._next_token()
        if token.type != TokenType.TAG_CLOSE:
            raise ParserError("END tag must be closed immediately with '$}'", token)
        if len(self._node_stack) <= 1:
            raise ParserError("END tag without matching FOR tag", token)
        self._node_stack.pop()

    def _add_echo_node(self) -> None:
        # EchoNode не может иметь детей, поэтому на стек не кладётся
        self._parent().add_child(EchoNode(tuple(self._collect_tag_elements())))

    def _collect_tag_elements(self) -> List[Element]:
        """Собирает элементы тега до TAG_CLOSE (имя тега уже прочитано)."""
        elements: List[Element] = []
        token = self._next_token()
        while token.type != TokenType.TAG_CLOSE:
            if token.type == TokenType.EOF:
                raise ParserError("Document ended before the tag was closed", token)
            elements.append(self._create_element(token))
            token = self._next_token()
        return elements

    @staticmethod
    def _create_element(token: Token) -> Element:
        token_type = token.type

        if token_type == TokenType.CONSTANT_DOUBLE:
            return ElementConstantDouble(float(token.value))
        elif token_type == TokenType.CONSTANT_INTEGER:
            return ElementConstantInteger(int(token.value))
        elif token_type == TokenType.FUNCTION:
            return ElementFunction(str(token.value))
        elif token_type == TokenType.OPERATOR:
            return ElementOperator(str(token.value))
        elif token_type == TokenType.STRING:
            return ElementString(str(token.value))
        elif token_type == TokenType.VARIABLE:
            return ElementVariable(str(token.value))
        else:
            raise ParserError(f"Token of type {token_type.name} cannot appear inside a tag", token)

    def _parent(self) -> ParentNode:
        return self._node_stack[-1]

    def _current_token(self) -> Token:
        token: Optional[Token] = self.lexer.current_token
        assert token is not None
        return token

    def _next_token(self) -> Token:
        """Следующий токен; лексические ошибки оборачиваются в ParserError."""
        current = self.lexer.current_token
        if current is not None and current.type == TokenType.EOF:
            return current
        try:
            return self.lexer.next_token()
        except LexerError as e:
            raise ParserError(f"Lexer error (state: {self.lexer.state.name}): {e}") from e


def parse_document(text: str) -> DocumentNode:
    """
    Удобная функция: разбирает текст шаблона и возвращает корень дерева.

    Raises:
        ParserError: При ошибке разбора
    """
    return SmartScriptParser(text).document_node


__all__ = ["SmartScriptParser", "ParserError", "parse_document"]
