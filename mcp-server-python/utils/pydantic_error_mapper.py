"""Convert Pydantic validation errors to the ToolError contract."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from models.errors import ToolError, create_validation_error


def _loc_to_field(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc if part != "__root__")


def map_pydantic_validation_error(error: ValidationError) -> ToolError:
    """Map the first Pydantic issue to a VALIDATION_ERROR ToolError."""
    issues = error.errors()
    if not issues:
        return create_validation_error("Invalid input")

    first = issues[0]
    field = _loc_to_field(first.get("loc", ()))
    message = first.get("msg", "Invalid input").removeprefix("Value error, ")

    # Field validators already phrase their message as "Invalid <field>: ..."
    if not field or message.startswith("Invalid "):
        return create_validation_error(message)
    return create_validation_error(f"Invalid {field}: {message}")
