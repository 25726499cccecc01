"""
Контекст запроса: конкретный приёмник результата шаблона.

Хранит параметры запроса (только чтение), постоянные и временные параметры,
атрибуты ответа и исходящие cookie. При первой записи формирует блок
HTTP-заголовков, после чего атрибуты ответа менять нельзя.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import BinaryIO, Dict, List, Mapping, Optional, Set

from .errors import SmartScriptError

DEFAULT_ENCODING = "utf-8"
DEFAULT_STATUS_CODE = 200
DEFAULT_STATUS_TEXT = "OK"
DEFAULT_MIME_TYPE = "text/html"

HEADER_ENCODING = "iso-8859-1"
HTTP_NEWLINE = "\r\n"


class HeaderAlreadyGeneratedError(SmartScriptError):
    """Попытка изменить атрибут ответа после отправки заголовков."""

    def __init__(self, attribute: str):
        super().__init__(f"Cannot change '{attribute}': response header has already been generated")
        self.attribute = attribute


@dataclass
class RCCookie:
    """Исходящий cookie."""
    name: str
    value: str
    max_age: Optional[int] = None
    domain: Optional[str] = None
    path: Optional[str] = None
    http_only: bool = False

    def header_line(self) -> str:
        line = f'Set-Cookie: {self.name}="{self.value}";'
        if self.domain is not None:
            line += f" Domain={self.domain};"
        if self.path is not None:
            line += f" Path={self.path};"
        if self.max_age is not None:
            line += f" Max-Age={self.max_age};"
        if self.http_only:
            line += "HttpOnly"
        return line


class RequestContext:
    """
    Приёмник, пишущий ответ в бинарный поток.

    Args:
        output_stream: Поток, в который пишется ответ
        parameters: Параметры запроса (копируются, доступны только для чтения)
        persistent_parameters: Постоянные параметры (изменяются на месте)
        output_cookies: Исходящие cookie
        temporary_parameters: Начальные временные параметры
        generate_header: Формировать ли HTTP-заголовки перед телом
    """

    def __init__(
        self,
        output_stream: BinaryIO,
        parameters: Optional[Mapping[str, str]] = None,
        persistent_parameters: Optional[Dict[str, str]] = None,
        output_cookies: Optional[List[RCCookie]] = None,
        *,
        temporary_parameters: Optional[Dict[str, str]] = None,
        generate_header: bool = True,
    ):
        if output_stream is None:
            raise ValueError("Output stream must not be None")

        self._output_stream = output_stream
        self._parameters: Mapping[str, str] = MappingProxyType(dict(parameters or {}))
        self._persistent_parameters: Dict[str, str] = (
            persistent_parameters if persistent_parameters is not None else {}
        )
        self._temporary_parameters: Dict[str, str] = (
            temporary_parameters if temporary_parameters is not None else {}
        )
        self._output_cookies: List[RCCookie] = output_cookies if output_cookies is not None else []

        self._encoding = DEFAULT_ENCODING
        self._status_code = DEFAULT_STATUS_CODE
        self._status_text = DEFAULT_STATUS_TEXT
        self._mime_type = DEFAULT_MIME_TYPE
        self._full_content = True

        self.generate_header = generate_header
        self._header_generated = False

    # ======= Атрибуты ответа =======

    @property
    def encoding(self) -> str:
        return self._encoding

    @encoding.setter
    def encoding(self, value: str) -> None:
        self._check_header_not_generated("encoding")
        self._encoding = value

    @property
    def status_code(self) -> int:
        return self._status_code

    @status_code.setter
    def status_code(self, value: int) -> None:
        self._check_header_not_generated("status_code")
        self._status_code = value

    @property
    def status_text(self) -> str:
        return self._status_text

    @status_text.setter
    def status_text(self, value: str) -> None:
        self._check_header_not_generated("status_text")
        self._status_text = value

    @property
    def mime_type(self) -> str:
        return self._mime_type

    @mime_type.setter
    def mime_type(self, value: str) -> None:
        self._check_header_not_generated("mime_type")
        self._mime_type = value

    @property
    def full_content(self) -> bool:
        return self._full_content

    @full_content.setter
    def full_content(self, value: bool) -> None:
        self._check_header_not_generated("full_content")
        self._full_content = value

    @property
    def header_generated(self) -> bool:
        return self._header_generated

    @property
    def output_cookies(self) -> List[RCCookie]:
        return list(self._output_cookies)

    def set_mime_type(self, mime_type: str) -> None:
        self.mime_type = mime_type

    def add_cookie(self, cookie: RCCookie) -> None:
        self._check_header_not_generated("output_cookies")
        self._output_cookies.append(cookie)

    # ======= Параметры =======

    def get_parameter(self, name: str) -> Optional[str]:
        return self._parameters.get(name)

    def parameter_names(self) -> Set[str]:
        return set(self._parameters)

    def get_persistent_parameter(self, name: str) -> Optional[str]:
        return self._persistent_parameters.get(name)

    def persistent_parameter_names(self) -> Set[str]:
        return set(self._persistent_parameters)

    def set_persistent_parameter(self, name: str, value: str) -> None:
        self._persistent_parameters[name] = value

    def remove_persistent_parameter(self, name: str) -> None:
        self._persistent_parameters.pop(name, None)

    def get_temporary_parameter(self, name: str) -> Optional[str]:
        return self._temporary_parameters.get(name)

    def temporary_parameter_names(self) -> Set[str]:
        return set(self._temporary_parameters)

    def set_temporary_parameter(self, name: str, value: str) -> None:
        self._temporary_parameters[name] = value

    def remove_temporary_parameter(self, name: str) -> None:
        self._temporary_parameters.pop(name, None)

    # ======= Запись =======

    def write(self, data: bytes) -> RequestContext:
        """
        Пишет байты в поток, перед первой записью - заголовки.

        Raises:
            ValueError: Если data равно None
            OSError: При ошибке записи в поток
        """
        if data is None:
            raise ValueError("Data to write must not be None")

        if not self._header_generated:
            self._write_header(len(data))

        self._output_stream.write(data)
        self._output_stream.flush()
        return self

    def write_text(self, text: str) -> RequestContext:
        """Кодирует текст в текущей кодировке ответа и пишет его."""
        if text is None:
            raise ValueError("Text to write must not be None")
        return self.write(text.encode(self._encoding))

    def build_header(self, content_length: int) -> str:
        """Текст блока заголовков для тела указанной длины."""
        lines = [
            f"HTTP/1.1 {self._status_code} {self._status_text}",
            f"Content-Type: {self._mime_type}"
            + (f"; charset={self._encoding}" if self._mime_type.startswith("text/") else ""),
        ]
        if self._full_content:
            lines.append(f"Content-Length: {content_length}")
        lines.extend(cookie.header_line() for cookie in self._output_cookies)
        return HTTP_NEWLINE.join(lines) + HTTP_NEWLINE + HTTP_NEWLINE

    def _write_header(self, content_length: int) -> None:
        self._header_generated = True
        if not self.generate_header:
            return
        self._output_stream.write(self.build_header(content_length).encode(HEADER_ENCODING))
        self._output_stream.flush()

    def _check_header_not_generated(self, attribute: str) -> None:
        if self._header_generated:
            raise HeaderAlreadyGeneratedError(attribute)


__all__ = [
    "RequestContext",
    "RCCookie",
    "HeaderAlreadyGeneratedError",
    "DEFAULT_ENCODING",
    "DEFAULT_MIME_TYPE",
]
