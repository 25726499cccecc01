"""
Язык шаблонов SmartScript: лексер, элементы, узлы дерева и парсер.
"""

from __future__ import annotations

from .elements import (
    Element,
    ElementConstantDouble,
    ElementConstantInteger,
    ElementFunction,
    ElementOperator,
    ElementString,
    ElementType,
    ElementVariable,
)
from .lexer import LexerError, SmartScriptLexer, tokenize_template
from .nodes import DocumentNode, EchoNode, ForLoopNode, Node, NodeVisitor, TextNode
from .parser import ParserError, SmartScriptParser, parse_document
from .tokens import LexerState, Token, TokenType
from .writer import TreeWriter, write_tree

__all__ = [
    "Element",
    "ElementConstantDouble",
    "ElementConstantInteger",
    "ElementFunction",
    "ElementOperator",
    "ElementString",
    "ElementType",
    "ElementVariable",
    "LexerError",
    "SmartScriptLexer",
    "tokenize_template",
    "DocumentNode",
    "EchoNode",
    "ForLoopNode",
    "Node",
    "NodeVisitor",
    "TextNode",
    "ParserError",
    "SmartScriptParser",
    "parse_document",
    "LexerState",
    "Token",
    "TokenType",
    "TreeWriter",
    "write_tree",
]
