"""
Протоколы взаимодействия движка с внешним окружением.

Движок не знает о конкретном сервере или HTTP-ответе: ему нужен только
приёмник (sink), в который можно записать байты и у которого можно
читать и изменять именованные параметры.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class OutputSink(Protocol):
    """
    Приёмник результата выполнения шаблона.

    Реализация по умолчанию - RequestContext.
    """

    def write(self, data: bytes) -> object:
        """
        Дописывает байты в видимый клиенту ответ.

        Raises:
            OSError: Если запись невозможна
        """
        ...

    def set_mime_type(self, mime_type: str) -> None:
        ...

    def get_parameter(self, name: str) -> Optional[str]:
        """Параметр запроса (только для чтения)."""
        ...

    def get_temporary_parameter(self, name: str) -> Optional[str]:
        ...

    def set_temporary_parameter(self, name: str, value: str) -> None:
        ...

    def remove_temporary_parameter(self, name: str) -> None:
        ...

    def get_persistent_parameter(self, name: str) -> Optional[str]:
        ...

    def set_persistent_parameter(self, name: str, value: str) -> None:
        ...

    def remove_persistent_parameter(self, name: str) -> None:
        ...


__all__ = ["OutputSink"]
