from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, NewType

# ---- Aliases for clarity ----
TemplateName = NewType("TemplateName", str)  # путь к файлу или произвольная метка, "" - без имени
ParameterMap = Dict[str, str]


# -----------------------------
@dataclass(frozen=True)
class RenderResult:
    """
    Итог одного прогона шаблона вместе с состоянием приёмника после него.
    """
    output: str
    mime_type: str
    status_code: int = 200
    status_text: str = "OK"
    # Снимки параметров после выполнения
    persistent_parameters: ParameterMap = field(default_factory=dict)
    temporary_parameters: ParameterMap = field(default_factory=dict)


__all__ = ["TemplateName", "ParameterMap", "RenderResult"]
