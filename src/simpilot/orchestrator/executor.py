"""
Orchestrator: runs instructions and commands against a simulator backend.

One Orchestrator instance owns the active session id, a bounded execution
history and an event feed. None of that state is synchronized, so an
instance must serve one caller at a time.
"""

from __future__ import annotations

import inspect
from collections import deque
from types import TracebackType
from typing import Any, Self

import structlog

from simpilot.adapters.backend import BackendAdapter
from simpilot.adapters.translator import CommandTranslator
from simpilot.backend.interface import SimulatorBackend
from simpilot.config import SimpilotSettings
from simpilot.orchestrator.events import EventFeed, Listener, OrchestratorEvent
from simpilot.orchestrator.factory import CommandFactory
from simpilot.orchestrator.models import (
    CommandContext,
    CommandKind,
    CommandResult,
    ConditionalCommand,
    HistoryEntry,
    OrchestratorCommand,
    SequenceCommand,
)
from simpilot.parser.models import CommandInfo
from simpilot.parser.parser import InstructionParser

logger = structlog.get_logger(__name__)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Orchestrator:
    """
    Parses, translates and executes natural-language instructions.

    Example:
        async with Orchestrator(InstructionParser(), IdbBackend()) as orchestrator:
            await orchestrator.process_instruction("create session with iPhone 15")
            await orchestrator.process_instruction("tap en 100, 200")
    """

    def __init__(
        self,
        parser: InstructionParser,
        backend: SimulatorBackend,
        settings: SimpilotSettings | None = None,
        factory: CommandFactory | None = None,
    ) -> None:
        self._settings = settings or SimpilotSettings()
        self._parser = parser
        self._factory = factory or CommandFactory(self._settings)
        self._translator = CommandTranslator(self._factory)
        self._adapter = BackendAdapter(backend, self._settings)
        self._events = EventFeed()
        self._history: deque[HistoryEntry] = deque(maxlen=self._settings.history_limit)
        self._active_session_id: str | None = None
        self._log = logger.bind(component="orchestrator")

    @property
    def factory(self) -> CommandFactory:
        return self._factory

    @property
    def parser(self) -> InstructionParser:
        return self._parser

    # Instruction pipeline

    async def process_instruction(self, instruction: str) -> CommandResult:
        """
        Parse, validate, normalize, translate and execute one instruction.

        Recognition, validation and mapping failures are returned as failed
        results without reaching the backend.
        """
        self._log.info("Processing instruction", instruction=instruction)
        try:
            parsed = self._parser.parse(instruction)
            validation = self._parser.validate(parsed)
            if not validation.is_valid:
                self._log.info(
                    "Instruction rejected",
                    command=parsed.command,
                    error=validation.error_message,
                )
                return CommandResult(
                    success=False,
                    data={"suggestions": validation.suggestions} if validation.suggestions else None,
                    error=validation.error_message or "Invalid instruction",
                )
            normalized = self._parser.normalize(parsed)
            command = self._translator.to_command(normalized, raw=parsed)
        except Exception as e:
            self._log.warning("Instruction could not be processed", instruction=instruction, error=str(e))
            return CommandResult(success=False, error=str(e) or "Unknown error")

        return await self.execute(command)

    # Execution

    async def execute(self, command: OrchestratorCommand) -> CommandResult:
        """
        Execute a command of any kind.

        Never raises: errors become failed results. Every call appends one
        history entry and emits ``command_executed``.
        """
        self._log.debug("Executing command", kind=str(command.kind), command_id=command.id)
        try:
            match command.kind:
                case CommandKind.SEQUENCE:
                    result = await self._execute_sequence(command)
                case CommandKind.CONDITIONAL:
                    result = await self._execute_conditional(command)
                case _:
                    result = await self._execute_atomic(command)
        except Exception as e:
            self._log.error(
                "Command execution failed",
                kind=str(command.kind),
                command_id=command.id,
                error=str(e),
            )
            result = CommandResult(success=False, error=str(e) or "Unknown error")

        self._history.append(HistoryEntry(command=command, result=result))
        self._events.emit(OrchestratorEvent.COMMAND_EXECUTED, {"command": command, "result": result})
        return result

    def _context(self) -> CommandContext:
        return CommandContext(session_id=self._active_session_id)

    async def _execute_atomic(self, command: OrchestratorCommand) -> CommandResult:
        hooks = command.hooks
        if hooks.validate is not None:
            valid = await _resolve(hooks.validate(self._context()))
            if not valid:
                return CommandResult(success=False, error="Parameter validation failed")

        if hooks.transform is not None:
            command.parameters = dict(
                await _resolve(hooks.transform(dict(command.parameters), self._context()))
            )

        result = await self._adapter.execute(command, self._active_session_id)

        if command.kind is CommandKind.CREATE_SIMULATOR_SESSION and result.success and result.data:
            self._active_session_id = str(result.data)
            self._log.info("Session created", session_id=self._active_session_id)
            self._events.emit(
                OrchestratorEvent.SESSION_CREATED, {"session_id": self._active_session_id}
            )
        elif command.kind is CommandKind.TERMINATE_SIMULATOR_SESSION and result.success:
            previous = self._active_session_id
            self._active_session_id = None
            self._log.info("Session terminated", session_id=previous)
            self._events.emit(OrchestratorEvent.SESSION_TERMINATED, {"session_id": previous})

        return result

    async def _execute_sequence(self, command: OrchestratorCommand) -> CommandResult:
        sequence = command if isinstance(command, SequenceCommand) else None
        children: list[OrchestratorCommand] = (
            sequence.commands if sequence else command.parameters.get("commands", [])
        )
        stop_on_error = (
            sequence.stop_on_error if sequence else bool(command.parameters.get("stop_on_error"))
        )

        results: list[CommandResult] = []
        failed = 0
        for index, child in enumerate(children):
            result = await self.execute(child)
            results.append(result)
            if result.success:
                continue
            failed += 1
            if stop_on_error:
                return CommandResult(
                    success=False,
                    data={
                        "results": results,
                        "completed_commands": index + 1,
                        "total_commands": len(children),
                    },
                    error=f"Error in command {child.id}: {result.error}",
                )

        # Without stop_on_error a completed loop is reported as success;
        # failed_commands tells callers how many children actually failed.
        data: dict[str, Any] = {
            "results": results,
            "completed_commands": len(children),
            "total_commands": len(children),
        }
        if not stop_on_error:
            data["failed_commands"] = failed
        return CommandResult(success=True, data=data)

    async def _execute_conditional(self, command: OrchestratorCommand) -> CommandResult:
        if isinstance(command, ConditionalCommand):
            condition, if_true, if_false = command.condition, command.if_true, command.if_false
        else:
            condition = command.parameters["condition"]
            if_true = command.parameters["if_true"]
            if_false = command.parameters.get("if_false")

        outcome = bool(await _resolve(condition(self._context())))
        if outcome:
            return await self.execute(if_true)
        if if_false is not None:
            return await self.execute(if_false)
        return CommandResult(success=True, data={"condition_result": False, "executed": False})

    # Session state

    def get_active_session_id(self) -> str | None:
        return self._active_session_id

    def set_active_session_id(self, session_id: str | None) -> None:
        self._active_session_id = session_id
        if session_id:
            self._events.emit(OrchestratorEvent.SESSION_ACTIVATED, {"session_id": session_id})
        else:
            self._events.emit(OrchestratorEvent.SESSION_DEACTIVATED, {})

    # History

    def get_command_history(self, limit: int | None = None) -> list[HistoryEntry]:
        """Return the last ``limit`` entries (all when omitted) as a new list."""
        entries = list(self._history)
        if limit is not None:
            return entries[-limit:] if limit > 0 else []
        return entries

    # Events

    def on(self, event: str, listener: Listener) -> None:
        self._events.on(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self._events.off(event, listener)

    # Introspection

    def get_supported_commands(self) -> list[CommandInfo]:
        return self._parser.list_supported()

    def suggest_completions(self, partial: str) -> list[str]:
        return self._parser.suggest(partial)

    # Lifecycle

    def close(self) -> None:
        """Drop session state, history and listeners."""
        self._active_session_id = None
        self._history.clear()
        self._events.clear()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
