"""
Root of the SmartScript error hierarchy.

Lexer, parser, evaluation, configuration and response errors all derive
from SmartScriptError, so callers (and the CLI) can report any template
problem as a one-line message with exit code 2. Anything else is a bug
and is left to surface with its traceback.
"""

from __future__ import annotations


class SmartScriptError(Exception):
    """
    A problem in a template, its run configuration or its output sink
    that the template author can fix.
    """
    pass


__all__ = ["SmartScriptError"]
