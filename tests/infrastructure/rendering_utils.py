"""
Utilities for parsing and executing templates in tests.
"""

from __future__ import annotations

from typing import Optional

from smartscript.engine import SmartScriptEngine
from smartscript.scripting import DocumentNode, parse_document

from .sinks import MemorySink


def run_template(text: str, sink: Optional[MemorySink] = None) -> MemorySink:
    """
    Parses and executes a template against an in-memory sink.

    Args:
        text: Template source
        sink: Sink to use; a fresh MemorySink by default

    Returns:
        The sink after execution
    """
    sink = sink if sink is not None else MemorySink()
    SmartScriptEngine(parse_document(text), sink).execute()
    return sink


def render(text: str, **parameters: str) -> str:
    """Executes a template with the given request parameters and returns the output text."""
    return run_template(text, MemorySink(parameters=parameters)).text


def reparse(document: DocumentNode) -> DocumentNode:
    """Writes a tree back to source text and parses it again."""
    from smartscript.scripting import write_tree
    return parse_document(write_tree(document))


__all__ = ["run_template", "render", "reparse"]
