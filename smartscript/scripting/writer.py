"""
Восстановление исходного текста по дереву документа.

Результат повторно разбирается в структурно равное дерево.
"""

from __future__ import annotations

from typing import List

from .nodes import DocumentNode, EchoNode, ForLoopNode, NodeVisitor, ParentNode, TextNode


class TreeWriter(NodeVisitor):
    """Посетитель, собирающий каноническое текстовое представление дерева."""

    def __init__(self) -> None:
        self._parts: List[str] = []

    def visit_text_node(self, node: TextNode) -> None:
        self._parts.append(node.as_text())

    def visit_for_loop_node(self, node: ForLoopNode) -> None:
        header = " ".join(e.as_text() for e in (node.variable, *node.expressions()))
        self._parts.append(f"{{$ FOR {header} $}}")
        self._visit_children(node)
        self._parts.append("{$ END $}")

    def visit_echo_node(self, node: EchoNode) -> None:
        body = " ".join(e.as_text() for e in node.elements)
        self._parts.append(f"{{$= {body} $}}")

    def visit_document_node(self, node: DocumentNode) -> None:
        self._visit_children(node)

    def _visit_children(self, node: ParentNode) -> None:
        for child in node:
            child.accept(self)

    def getvalue(self) -> str:
        return "".join(self._parts)


def write_tree(document: DocumentNode) -> str:
    """Возвращает исходный текст, соответствующий дереву."""
    writer = TreeWriter()
    document.accept(writer)
    return writer.getvalue()


__all__ = ["TreeWriter", "write_tree"]
