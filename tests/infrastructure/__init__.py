"""
Unified test infrastructure for SmartScript.

Modules:
- file_utils: Utilities for creating template and config files
- sinks: In-memory output sinks
- rendering_utils: Utilities for parsing and executing templates
- cli_utils: Utilities for running the CLI in a subprocess
"""

from .file_utils import write, write_template, write_run_config
from .sinks import MemorySink, FailingSink
from .rendering_utils import run_template, render, reparse
from .cli_utils import run_cli, jload

__all__ = [
    # File utilities
    "write", "write_template", "write_run_config",

    # Sinks
    "MemorySink", "FailingSink",

    # Rendering utilities
    "run_template", "render", "reparse",

    # CLI utilities
    "run_cli", "jload",
]
