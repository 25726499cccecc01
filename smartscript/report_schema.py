from __future__ import annotations

from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RenderReport(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
    )
    output: str = Field(..., description="Rendered document body")
    mime_type: str
    status_code: int = 200
    status_text: str = "OK"
    persistent_parameters: Dict[str, str] = Field(default_factory=dict)
    temporary_parameters: Dict[str, str] = Field(default_factory=dict)


class TokenRecord(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
    )
    type: str
    value: Optional[Union[int, float, str]] = None

