"""
Процессор шаблонов SmartScript.

Публичный API, объединяющий лексер, парсер и движок в удобный интерфейс:
компиляция текста в дерево (с кэшированием) и выполнение дерева
над приёмником результата.
"""

from __future__ import annotations

import io
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from .config import RunConfig
from .engine import DEFAULT_OPERATIONS, SmartScriptEngine, StackOperationProvider
from .errors import SmartScriptError
from .protocols import OutputSink
from .request_context import DEFAULT_ENCODING, RequestContext
from .scripting import DocumentNode, SmartScriptParser
from .types import RenderResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TemplateProcessingError(SmartScriptError):
    """Общая ошибка обработки шаблона."""

    def __init__(self, message: str, template_name: str = "", cause: Optional[Exception] = None):
        super().__init__(f"Template processing error in '{template_name}': {message}")
        self.template_name = template_name
        self.cause = cause


class TemplateProcessor:
    """
    Основной процессор шаблонов.

    Скомпилированные деревья неизменяемы и кэшируются по (имя, хэш текста);
    один процессор можно использовать из нескольких потоков.
    """

    def __init__(self, operations: StackOperationProvider = DEFAULT_OPERATIONS):
        """
        Args:
            operations: Таблица операторов и функций для движка
        """
        self.operations = operations
        self._template_cache: Dict[Tuple[str, str], DocumentNode] = {}
        self._cache_lock = threading.Lock()

    def compile(self, template_text: str, template_name: str = "") -> DocumentNode:
        """
        Разбирает текст шаблона в дерево документа с кэшированием.

        Raises:
            TemplateProcessingError: При лексической или синтаксической ошибке
        """
        return self._handle_template_errors(
            lambda: self._parse_template(template_text, template_name),
            template_name,
            "Failed to parse template",
        )

    def render_text(
        self,
        template_text: str,
        context: Optional[OutputSink] = None,
        template_name: str = "",
    ) -> str:
        """
        Выполняет шаблон из текста.

        Args:
            template_text: Текст шаблона
            context: Приёмник; если не задан, создаётся RequestContext в памяти без заголовков
            template_name: Имя шаблона для диагностики и кэша

        Returns:
            Отрендеренный текст (тот же, что записан в приёмник)

        Raises:
            TemplateProcessingError: При ошибке обработки шаблона
        """
        if context is None:
            context = RequestContext(io.BytesIO(), generate_header=False)

        def process_text() -> str:
            document = self._parse_template(template_text, template_name)
            return self._execute(document, context)

        return self._handle_template_errors(process_text, template_name, "Failed to render template")

    def render_file(self, path: Path, context: Optional[OutputSink] = None) -> str:
        """
        Читает шаблон из файла (UTF-8) и выполняет его.

        Raises:
            TemplateProcessingError: Файл не читается или шаблон содержит ошибку
        """
        template_name = str(path)
        template_text = self._handle_template_errors(
            lambda: Path(path).read_text(encoding="utf-8"),
            template_name,
            "Failed to read template file",
        )
        return self.render_text(template_text, context, template_name)

    def render_with_config(
        self,
        template_text: str,
        config: RunConfig,
        template_name: str = "",
    ) -> RenderResult:
        """
        Выполняет шаблон над свежим RequestContext, построенным по конфигурации,
        и возвращает результат вместе с итоговым состоянием параметров.
        """
        context = RequestContext(
            io.BytesIO(),
            parameters=config.parameters,
            persistent_parameters=dict(config.persistent_parameters),
            temporary_parameters=dict(config.temporary_parameters),
            generate_header=False,
        )
        apply_response_settings(context, config)

        output = self.render_text(template_text, context, template_name)
        return RenderResult(
            output=output,
            mime_type=context.mime_type,
            status_code=context.status_code,
            status_text=context.status_text,
            persistent_parameters={
                name: context.get_persistent_parameter(name) or ""
                for name in sorted(context.persistent_parameter_names())
            },
            temporary_parameters={
                name: context.get_temporary_parameter(name) or ""
                for name in sorted(context.temporary_parameter_names())
            },
        )

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._template_cache.clear()

    # ======= Внутренние методы =======

    def _parse_template(self, template_text: str, template_name: str) -> DocumentNode:
        """Парсит текст шаблона в дерево с кэшированием."""
        if template_text is None:
            raise TemplateProcessingError("Template text must not be None", template_name)

        cache_key = (template_name, template_text)
        with self._cache_lock:
            cached = self._template_cache.get(cache_key)
        if cached is not None:
            return cached

        document = SmartScriptParser(template_text).document_node
        with self._cache_lock:
            self._template_cache[cache_key] = document
        logger.debug(f"Parsed template '{template_name}' -> {len(document.children)} top-level nodes")
        return document

    def _execute(self, document: DocumentNode, sink: OutputSink) -> str:
        encoding = getattr(sink, "encoding", DEFAULT_ENCODING)
        capturing = _CapturingSink(sink)
        SmartScriptEngine(document, capturing, self.operations, encoding=encoding).execute()
        return capturing.captured.decode(encoding)

    def _handle_template_errors(self, func: Callable[[], T], template_name: str, error_message: str) -> T:
        """Общий обработчик ошибок для операций с шаблонами."""
        try:
            return func()
        except TemplateProcessingError:
            # Передаем ошибки обработки как есть
            raise
        except (SmartScriptError, OSError, UnicodeError) as e:
            raise TemplateProcessingError(f"{error_message}: {e}", template_name, e) from e


class _CapturingSink:
    """
    Обёртка над приёмником, запоминающая записанные байты.

    Все остальные вызовы передаются исходному приёмнику.
    """

    def __init__(self, target: OutputSink):
        self._target = target
        self.captured = b""

    def write(self, data: bytes) -> object:
        result = self._target.write(data)
        self.captured += data
        return result

    def __getattr__(self, name: str) -> Any:
        return getattr(self._target, name)


def apply_response_settings(context: RequestContext, config: RunConfig) -> None:
    """Переносит атрибуты ответа из конфигурации в контекст (до первой записи)."""
    context.encoding = config.encoding
    context.mime_type = config.mime_type
    context.status_code = config.status_code
    context.status_text = config.status_text


__all__ = ["TemplateProcessor", "TemplateProcessingError", "apply_response_settings"]
