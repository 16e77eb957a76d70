"""
Data Models for the RTL fix service

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FixRequest(BaseModel):
    """Text to fix plus optional per-request overrides."""

    text: Optional[str] = Field(None, description="Text in logical order")
    use_ligatures: bool = Field(
        True,
        description="Fuse Lam-Alef pairs (turn off for editable input fields)",
    )
    options: Dict[str, Any] = Field(
        default_factory=dict,
        description="Configuration overrides, e.g. {'MirrorBrackets': false}",
    )


class FixResponse(BaseModel):
    text: Optional[str] = Field(None, description="Text in visual order")
    changed: bool = Field(False, description="Whether the output differs from the input")
    signature: str = Field(..., description="Processing signature as 8 hex digits")


class BatchFixRequest(BaseModel):
    texts: List[Optional[str]] = Field(default_factory=list)
    use_ligatures: bool = True


class BatchFixResponse(BaseModel):
    texts: List[Optional[str]]


class CacheStatsResponse(BaseModel):
    entries: int = Field(0, ge=0)
    max_size: int = Field(0, ge=0)
    hits: int = Field(0, ge=0)
    misses: int = Field(0, ge=0)
    evictions: int = Field(0, ge=0)
    trims: int = Field(0, ge=0)
    hit_rate: float = Field(0.0, ge=0, le=100, description="Hit rate in percent")


class HealthResponse(BaseModel):
    status: str = "ok"
    diagnostics_passed: int = 0
    diagnostics_total: int = 0
    diagnostics_skipped: bool = False
