"""
Value models produced by the instruction parser.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONFIDENCE = 0.9


class ParseResult(BaseModel):
    """A recognised instruction: canonical command name plus extracted parameters."""

    model_config = ConfigDict(frozen=True)

    command: str = Field(..., description="Canonical command name")
    parameters: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(
        default=DEFAULT_CONFIDENCE,
        ge=0.0,
        le=1.0,
        description="Fixed for every pattern match; carries no ranking meaning",
    )
    original_text: str = Field(..., description="Instruction exactly as received")


class ValidationResult(BaseModel):
    """Outcome of checking a ParseResult against its command definition."""

    is_valid: bool
    missing_parameters: list[str] = Field(default_factory=list)
    invalid_parameters: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    error_message: str | None = None


class CommandInfo(BaseModel):
    """Introspection entry for one supported command."""

    name: str
    description: str
    required_parameters: list[str] = Field(default_factory=list)
    optional_parameters: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
