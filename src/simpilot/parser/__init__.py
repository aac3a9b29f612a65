"""Natural-language instruction parsing."""

from simpilot.parser.models import CommandInfo, ParseResult, ValidationResult
from simpilot.parser.parser import InstructionParser
from simpilot.parser.registry import CommandRegistry

__all__ = [
    "CommandInfo",
    "CommandRegistry",
    "InstructionParser",
    "ParseResult",
    "ValidationResult",
]
