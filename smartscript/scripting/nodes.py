"""
Узлы дерева документа SmartScript.

Дерево строится парсером один раз и после этого только читается.
Детей могут иметь лишь DocumentNode и ForLoopNode; TextNode и EchoNode - листья.
Обход реализован через двойную диспетчеризацию (NodeVisitor).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .elements import (
    CONSTANT_TYPES,
    Element,
    ElementVariable,
)
from .tokens import ParserError


class NodeVisitor(ABC):
    """Посетитель узлов дерева: по одному методу на каждый вид узла."""

    @abstractmethod
    def visit_text_node(self, node: TextNode) -> None:
        pass

    @abstractmethod
    def visit_for_loop_node(self, node: ForLoopNode) -> None:
        pass

    @abstractmethod
    def visit_echo_node(self, node: EchoNode) -> None:
        pass

    @abstractmethod
    def visit_document_node(self, node: DocumentNode) -> None:
        pass


@dataclass
class Node(ABC):
    """Базовый класс для всех узлов дерева."""

    @abstractmethod
    def accept(self, visitor: NodeVisitor) -> None:
        """Вызывает соответствующий метод посетителя."""
        pass


@dataclass
class ParentNode(Node, ABC):
    """Узел, который может содержать дочерние узлы."""
    children: List[Node] = field(default_factory=list, kw_only=True)

    def add_child(self, node: Node) -> None:
        self.children.append(node)

    def __iter__(self):
        return iter(self.children)


@dataclass
class DocumentNode(ParentNode):
    """Корень дерева документа."""

    def accept(self, visitor: NodeVisitor) -> None:
        visitor.visit_document_node(self)


@dataclass
class TextNode(Node):
    """
    Обычный текст вне тегов.

    Текст хранится уже раскрытым лексером; экранирование '\\' и '{'
    возвращается только при выводе в исходную форму.
    """
    text: str

    def accept(self, visitor: NodeVisitor) -> None:
        visitor.visit_text_node(self)

    def as_text(self) -> str:
        return self.text.replace("\\", "\\\\").replace("{", "\\{")


@dataclass
class ForLoopNode(ParentNode):
    """
    Цикл: {$ FOR variable start end [step] $} ... {$ END $}

    Границы и шаг - только числовые или строковые константы.
    """
    variable: ElementVariable
    start: Element
    end: Element
    step: Optional[Element] = None

    @classmethod
    def from_elements(cls, elements: Sequence[Element]) -> ForLoopNode:
        """
        Строит узел из элементов тега FOR с проверкой арности и типов.

        Raises:
            ParserError: При неверном числе или типе элементов
        """
        if len(elements) not in (3, 4):
            raise ParserError(f"FOR tag expects 3 or 4 elements, got {len(elements)}")

        variable = elements[0]
        if not isinstance(variable, ElementVariable):
            raise ParserError(f"First element of FOR tag must be a variable, got '{variable.as_text()}'")

        start, end, *rest = (_require_constant(e) for e in elements[1:])
        return cls(variable=variable, start=start, end=end, step=rest[0] if rest else None)

    def expressions(self) -> Tuple[Element, ...]:
        """Элементы заголовка цикла в исходном порядке (без переменной)."""
        if self.step is None:
            return self.start, self.end
        return self.start, self.end, self.step

    def accept(self, visitor: NodeVisitor) -> None:
        visitor.visit_for_loop_node(self)


@dataclass
class EchoNode(Node):
    """
    Вывод выражения: {$= element element ... $}

    Элементы образуют постфиксное выражение, которое вычисляется движком.
    """
    elements: Tuple[Element, ...]

    def __post_init__(self) -> None:
        self.elements = tuple(self.elements)
        if not self.elements:
            raise ParserError("Echo tag must contain at least one element")

    def accept(self, visitor: NodeVisitor) -> None:
        visitor.visit_echo_node(self)


def _require_constant(element: Element) -> Element:
    if isinstance(element, CONSTANT_TYPES):
        return element
    raise ParserError(
        f"FOR tag bounds must be numbers or strings, got '{element.as_text()}'"
    )


__all__ = [
    "NodeVisitor",
    "Node",
    "ParentNode",
    "DocumentNode",
    "TextNode",
    "ForLoopNode",
    "EchoNode",
]
