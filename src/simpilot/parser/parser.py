"""
Instruction parser: recognition, validation and normalization of free text.
"""

from __future__ import annotations

import re
from typing import Any

import structlog

from simpilot.parser.models import CommandInfo, ParseResult, ValidationResult
from simpilot.parser.registry import CommandRegistry

logger = structlog.get_logger(__name__)

_INTEGER = re.compile(r"[+-]?\d+")
_DECIMAL = re.compile(r"[+-]?(\d+\.\d*|\.\d+)([eE][+-]?\d+)?|[+-]?\d+[eE][+-]?\d+")


def _coerce(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    candidate = value.strip()
    if _INTEGER.fullmatch(candidate):
        return int(candidate)
    if _DECIMAL.fullmatch(candidate):
        return float(candidate)
    if candidate.lower() in ("true", "false"):
        return candidate.lower() == "true"
    return value


class InstructionParser:
    """Turns natural-language instructions into validated, typed ParseResults."""

    def __init__(self, registry: CommandRegistry | None = None) -> None:
        self._registry = registry or CommandRegistry()
        self._log = logger.bind(component="instruction_parser")

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    def parse(self, text: str) -> ParseResult:
        """
        Recognise an instruction.

        Raises:
            UnrecognizedInstructionError: If no catalog pattern matches.
        """
        return self._registry.match(text)

    def validate(self, result: ParseResult) -> ValidationResult:
        """Check a parse result against the definition it names."""
        definition = self._registry.find(result.command)
        if definition is None:
            return ValidationResult(
                is_valid=False,
                suggestions=self._registry.suggest(result.command),
                error_message=f"Unrecognized command: {result.command}",
            )

        missing = [
            name for name in definition.required_parameters if name not in result.parameters
        ]
        if missing:
            self._log.debug("Missing parameters", command=result.command, missing=missing)
            return ValidationResult(
                is_valid=False,
                missing_parameters=missing,
                suggestions=list(definition.examples),
                error_message=f"Missing required parameters: {', '.join(missing)}",
            )

        invalid = [name for name, value in result.parameters.items() if value is None]
        if invalid:
            return ValidationResult(
                is_valid=False,
                invalid_parameters=invalid,
                error_message="Some parameters have invalid values",
            )

        return ValidationResult(is_valid=True)

    def normalize(self, result: ParseResult) -> ParseResult:
        """
        Coerce string parameters to their natural types.

        Decimal number strings become int or float and "true"/"false" (any
        case) become bool. Non-string values are left alone, so applying this
        twice is the same as applying it once.
        """
        parameters = {name: _coerce(value) for name, value in result.parameters.items()}
        return result.model_copy(update={"parameters": parameters})

    def suggest(self, partial: str) -> list[str]:
        return self._registry.suggest(partial)

    def list_supported(self) -> list[CommandInfo]:
        return self._registry.list_supported()
