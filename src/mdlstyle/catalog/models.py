"""Pydantic models for the rule catalog."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RuleEntry(BaseModel):
    """Metadata for a single lint rule."""

    id: str  # "MD013"
    alias: str  # "line-length"
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    params: dict[str, Any] = Field(default_factory=dict)  # option name -> default value
