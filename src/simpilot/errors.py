"""
Exception types raised across the instruction pipeline.

Recognition and mapping failures are raised before any backend call is made;
the orchestrator converts every one of them into a failed CommandResult.
"""

from __future__ import annotations


class SimpilotError(Exception):
    """Base class for all simpilot errors."""


class UnrecognizedInstructionError(SimpilotError):
    """Raised when no catalog pattern matches an instruction."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Could not understand the instruction: {text}")


class CommandMappingError(SimpilotError):
    """Raised when a parsed command cannot be turned into an executable command."""

    def __init__(self, command: str, reason: str | None = None) -> None:
        self.command = command
        self.reason = reason
        message = f'Could not map command "{command}" to a command kind'
        if reason:
            message = f'Could not convert command "{command}": {reason}'
        super().__init__(message)


class UnsupportedCommandError(SimpilotError):
    """Raised by the backend adapter for a kind it cannot dispatch."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Unsupported command kind: {kind}")


class BackendError(SimpilotError):
    """Raised when a simulator backend capability fails."""

    def __init__(self, message: str, command: list[str] | None = None) -> None:
        self.command = command
        super().__init__(message)
