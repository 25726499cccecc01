from __future__ import annotations

from importlib import metadata

DIST_NAME = "smartscript"

# Версия при запуске из исходников без установки пакета
UNKNOWN_VERSION = "0.0.0"


def tool_version() -> str:
    """Версия установленного дистрибутива smartscript."""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return UNKNOWN_VERSION


__all__ = ["tool_version", "DIST_NAME"]
