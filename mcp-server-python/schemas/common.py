"""Shared schema primitives for MCP tool request/response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def validate_non_empty_str(value: str, field_name: str) -> str:
    """Trim a required string field and reject empty/whitespace values."""
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"Invalid {field_name}: cannot be empty")
    return trimmed


class StrictIgnoreRequest(BaseModel):
    """Request base with strict typing and ignored unknown fields."""

    model_config = ConfigDict(extra="ignore", strict=True)


class StrictResponse(BaseModel):
    """Response/result base with strict typing and forbidden unknown fields."""

    model_config = ConfigDict(extra="forbid")
