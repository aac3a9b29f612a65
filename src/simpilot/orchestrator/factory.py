"""
Sanctioned constructor for orchestrator commands.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Any

from simpilot.config import SimpilotSettings
from simpilot.orchestrator.models import (
    CommandHooks,
    CommandKind,
    ConditionalCommand,
    OrchestratorCommand,
    Predicate,
    SequenceCommand,
)


class CommandFactory:
    """Builds commands with fresh ids and the configured timeout/retry defaults."""

    def __init__(self, settings: SimpilotSettings | None = None) -> None:
        self._settings = settings or SimpilotSettings()

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    def create_command(
        self,
        kind: CommandKind,
        parameters: dict[str, Any] | None = None,
        description: str | None = None,
        *,
        hooks: CommandHooks | None = None,
        timeout_ms: int | None = None,
        retries: int | None = None,
    ) -> OrchestratorCommand:
        return OrchestratorCommand(
            kind=CommandKind(kind),
            parameters=dict(parameters or {}),
            id=self.new_id(),
            description=description,
            timeout_ms=self._settings.default_timeout_ms if timeout_ms is None else timeout_ms,
            retries=self._settings.default_retries if retries is None else retries,
            hooks=hooks or CommandHooks(),
        )

    def create_sequence(
        self,
        commands: Iterable[OrchestratorCommand],
        stop_on_error: bool = True,
    ) -> SequenceCommand:
        children = list(commands)
        return SequenceCommand(
            kind=CommandKind.SEQUENCE,
            parameters={"commands": children, "stop_on_error": stop_on_error},
            id=self.new_id(),
            description=f"Sequence of {len(children)} commands",
            timeout_ms=self._settings.default_timeout_ms,
            retries=self._settings.default_retries,
        )

    def create_conditional(
        self,
        condition: Predicate,
        if_true: OrchestratorCommand,
        if_false: OrchestratorCommand | None = None,
    ) -> ConditionalCommand:
        parameters: dict[str, Any] = {"condition": condition, "if_true": if_true}
        if if_false is not None:
            parameters["if_false"] = if_false
        return ConditionalCommand(
            kind=CommandKind.CONDITIONAL,
            parameters=parameters,
            id=self.new_id(),
            description="Conditional command",
            timeout_ms=self._settings.default_timeout_ms,
            retries=self._settings.default_retries,
        )
