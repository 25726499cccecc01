"""
Движок выполнения шаблонов SmartScript.

Обходит дерево документа в глубину и собирает результат в буфер,
который целиком передаётся приёмнику по завершении обхода DocumentNode.

Всё изменяемое состояние (хранилище переменных, стеки операндов, буфер)
создаётся заново для каждого вызова execute(), поэтому одно и то же дерево
можно выполнять параллельно из нескольких потоков.
"""

from __future__ import annotations

import logging
from typing import Any, List, cast

from .errors import EvaluationError, InvalidOperandError
from .multistack import ObjectMultistack
from .operations import DEFAULT_OPERATIONS, OperandStack, StackOperationProvider
from .value_wrapper import ValueWrapper
from ..protocols import OutputSink
from ..scripting.elements import (
    Element,
    ElementConstantDouble,
    ElementConstantInteger,
    ElementString,
    ElementType,
    ElementVariable,
)
from ..scripting.nodes import DocumentNode, EchoNode, ForLoopNode, NodeVisitor, ParentNode, TextNode

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


class SmartScriptEngine:
    """
    Исполнитель разобранного документа.

    Args:
        document_node: Корень дерева, полученный от парсера
        sink: Приёмник результата (обычно RequestContext)
        operations: Таблица операторов и функций
        tolerate_write_errors: Только записывать в лог ошибку финальной записи
            в приёмник, не пробрасывая её
    """

    def __init__(
        self,
        document_node: DocumentNode,
        sink: OutputSink,
        operations: StackOperationProvider = DEFAULT_OPERATIONS,
        *,
        encoding: str = DEFAULT_ENCODING,
        tolerate_write_errors: bool = False,
    ):
        if document_node is None:
            raise ValueError("Document node must not be None")
        if sink is None:
            raise ValueError("Output sink must not be None")
        self.document_node = document_node
        self.sink = sink
        self.operations = operations
        self.encoding = encoding
        self.tolerate_write_errors = tolerate_write_errors

    def execute(self) -> None:
        """
        Выполняет документ и записывает результат в приёмник.

        Raises:
            EvaluationError: При ошибке вычисления; частичный результат не записывается
            OSError: Если запись в приёмник не удалась (и tolerate_write_errors выключен)
        """
        visitor = _ExecutionVisitor(self)
        self.document_node.accept(visitor)


class _ExecutionVisitor(NodeVisitor):
    """Состояние одного прогона: хранилище переменных и буфер вывода."""

    def __init__(self, engine: SmartScriptEngine):
        self._engine = engine
        self._multistack = ObjectMultistack()
        self._buffer: List[str] = []

    def visit_text_node(self, node: TextNode) -> None:
        self._buffer.append(node.text)

    def visit_for_loop_node(self, node: ForLoopNode) -> None:
        counter = ValueWrapper(self._resolve(node.start))
        self._bind_loop_variable(node.variable, counter)

        step = 0 if node.step is None else self._resolve(node.step)
        end = self._resolve(node.end)

        if counter.num_compare(end) <= 0 and ValueWrapper(step).num_compare(0) <= 0:
            raise EvaluationError(
                f"FOR loop over '{node.variable.name}' has non-positive step {step} and would never terminate"
            )

        while counter.num_compare(end) <= 0:
            self._visit_children(node)
            counter.add(step)

    def visit_echo_node(self, node: EchoNode) -> None:
        stack: OperandStack = []

        for element in node.elements:
            element_type = element.get_type()
            if element_type in (ElementType.FUNCTION, ElementType.OPERATOR):
                self._engine.operations.calculate(element.as_text(), self._engine.sink, stack)
            else:
                stack.append(ValueWrapper(self._resolve(element)))

        # Стек выводится снизу вверх, то есть в исходном порядке
        self._buffer.append(" ".join(str(value) for value in stack))

    def visit_document_node(self, node: DocumentNode) -> None:
        self._visit_children(node)
        self._flush()

    def _bind_loop_variable(self, variable: ElementVariable, counter: ValueWrapper) -> None:
        """
        Кладёт счётчик цикла в хранилище переменных.

        Счётчик не снимается после завершения цикла: переменная остаётся
        видимой (и затеняет внешнюю с тем же именем) до конца прогона.
        """
        self._multistack.push(variable.name, counter)

    def _resolve(self, element: Element) -> Any:
        """Скалярное значение элемента: переменной или константы."""
        element_type = element.get_type()

        if element_type == ElementType.VARIABLE:
            return self._multistack.peek(cast(ElementVariable, element).name).value
        elif element_type == ElementType.CONSTANT_INTEGER:
            return cast(ElementConstantInteger, element).value
        elif element_type == ElementType.CONSTANT_DOUBLE:
            return cast(ElementConstantDouble, element).value
        elif element_type == ElementType.STRING:
            return cast(ElementString, element).value
        else:
            raise InvalidOperandError(f"Cannot extract a value from element '{element.as_text()}'")

    def _visit_children(self, node: ParentNode) -> None:
        for child in node:
            child.accept(self)

    def _flush(self) -> None:
        """Однократная запись накопленного результата в приёмник."""
        data = "".join(self._buffer).encode(self._engine.encoding)
        try:
            self._engine.sink.write(data)
        except OSError as e:
            logger.error(f"Failed to write rendered document to output: {e}")
            if not self._engine.tolerate_write_errors:
                raise


__all__ = ["SmartScriptEngine", "DEFAULT_ENCODING"]
