"""
Executable command model for the orchestrator.

Commands are plain dataclasses tagged by CommandKind. Composite commands
(sequence, conditional) carry their children in ``parameters``; behaviour
hooks live in a separate CommandHooks value so that ``to_dict()`` can
serialize a command without any callables.
"""

from __future__ import annotations

import base64
import dataclasses
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, StrEnum
from typing import Any

from pydantic import BaseModel


class CommandKind(StrEnum):
    """Every operation the orchestrator can execute."""

    # Simulator lifecycle
    CREATE_SIMULATOR_SESSION = "create_simulator_session"
    TERMINATE_SIMULATOR_SESSION = "terminate_simulator_session"
    LIST_AVAILABLE_SIMULATORS = "list_available_simulators"
    LIST_BOOTED_SIMULATORS = "list_booted_simulators"
    LIST_SESSIONS = "list_sessions"
    BOOT_SIMULATOR = "boot_simulator"
    SHUTDOWN_SIMULATOR = "shutdown_simulator"
    IS_SIMULATOR_BOOTED = "is_simulator_booted"
    FOCUS_SIMULATOR = "focus_simulator"

    # App lifecycle
    INSTALL_APP = "install_app"
    LAUNCH_APP = "launch_app"
    TERMINATE_APP = "terminate_app"
    UNINSTALL_APP = "uninstall_app"
    LIST_APPS = "list_apps"
    IS_APP_INSTALLED = "is_app_installed"

    # UI interaction
    TAP = "tap"
    SWIPE = "swipe"
    PRESS_BUTTON = "press_button"
    INPUT_TEXT = "input_text"
    PRESS_KEY = "press_key"
    PRESS_KEY_SEQUENCE = "press_key_sequence"

    # Accessibility
    DESCRIBE_ELEMENTS = "describe_elements"
    DESCRIBE_POINT = "describe_point"

    # Capture and logs
    TAKE_SCREENSHOT = "take_screenshot"
    START_VIDEO_RECORDING = "start_video_recording"
    STOP_VIDEO_RECORDING = "stop_video_recording"
    GET_SYSTEM_LOGS = "get_system_logs"
    GET_APP_LOGS = "get_app_logs"

    # Debug
    START_DEBUG_SESSION = "start_debug_session"
    STOP_DEBUG_SESSION = "stop_debug_session"
    GET_DEBUG_SESSION_STATUS = "get_debug_session_status"
    LIST_CRASH_LOGS = "list_crash_logs"
    GET_CRASH_LOG = "get_crash_log"
    DELETE_CRASH_LOGS = "delete_crash_logs"

    # Misc device state
    INSTALL_DYLIB = "install_dylib"
    OPEN_URL = "open_url"
    CLEAR_KEYCHAIN = "clear_keychain"
    SET_LOCATION = "set_location"
    ADD_MEDIA = "add_media"
    APPROVE_PERMISSIONS = "approve_permissions"
    UPDATE_CONTACTS = "update_contacts"

    # Composite
    SEQUENCE = "sequence"
    CONDITIONAL = "conditional"


@dataclass
class CommandContext:
    """Snapshot handed to hooks and predicates."""

    session_id: str | None = None
    previous_results: dict[str, CommandResult] = field(default_factory=dict)
    variables: dict[str, Any] = field(default_factory=dict)


@dataclass
class CommandResult:
    """Uniform result envelope for every execution path."""

    success: bool
    data: Any = None
    error: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.data is not None:
            payload["data"] = to_jsonable(self.data)
        if self.error is not None:
            payload["error"] = self.error
        return payload


Predicate = Callable[[CommandContext], Awaitable[bool] | bool]
ValidateHook = Callable[[CommandContext], Awaitable[bool] | bool]
TransformHook = Callable[[dict[str, Any], CommandContext], Awaitable[dict[str, Any]] | dict[str, Any]]
ErrorHook = Callable[[Exception, CommandContext], Awaitable[CommandResult] | CommandResult]


@dataclass(frozen=True)
class CommandHooks:
    """
    Optional per-command strategies.

    validate: return False to reject the command before dispatch.
    transform: return the parameters to dispatch instead of the stored ones.
    on_error: build the result for a failed backend call.

    Each hook may be a plain function or a coroutine function.
    """

    validate: ValidateHook | None = None
    transform: TransformHook | None = None
    on_error: ErrorHook | None = None


@dataclass
class OrchestratorCommand:
    """An executable unit: atomic when kind maps to a backend call."""

    kind: CommandKind
    parameters: dict[str, Any]
    id: str
    description: str | None = None
    timeout_ms: int = 30000
    retries: int = 1
    hooks: CommandHooks = field(default_factory=CommandHooks)

    @property
    def is_composite(self) -> bool:
        return self.kind in (CommandKind.SEQUENCE, CommandKind.CONDITIONAL)

    def to_dict(self) -> dict[str, Any]:
        """Serialize without hooks or predicates."""
        return {
            "id": self.id,
            "kind": str(self.kind),
            "description": self.description,
            "timeout_ms": self.timeout_ms,
            "retries": self.retries,
            "parameters": {
                name: to_jsonable(value)
                for name, value in self.parameters.items()
                if not callable(value)
            },
        }


@dataclass
class SequenceCommand(OrchestratorCommand):
    """Runs ``commands`` in order, optionally halting on the first failure."""

    def __post_init__(self) -> None:
        if self.kind is not CommandKind.SEQUENCE:
            raise ValueError(f"SequenceCommand requires kind {CommandKind.SEQUENCE}, got {self.kind}")

    @property
    def commands(self) -> list[OrchestratorCommand]:
        return self.parameters.get("commands", [])

    @property
    def stop_on_error(self) -> bool:
        return bool(self.parameters.get("stop_on_error", False))


@dataclass
class ConditionalCommand(OrchestratorCommand):
    """Evaluates ``condition`` once and runs ``if_true`` or ``if_false``."""

    def __post_init__(self) -> None:
        if self.kind is not CommandKind.CONDITIONAL:
            raise ValueError(
                f"ConditionalCommand requires kind {CommandKind.CONDITIONAL}, got {self.kind}"
            )

    @property
    def condition(self) -> Predicate:
        return self.parameters["condition"]

    @property
    def if_true(self) -> OrchestratorCommand:
        return self.parameters["if_true"]

    @property
    def if_false(self) -> OrchestratorCommand | None:
        return self.parameters.get("if_false")


@dataclass
class HistoryEntry:
    """One executed command and its outcome."""

    command: OrchestratorCommand
    result: CommandResult
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": self.command.to_dict(),
            "result": self.result.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }


def to_jsonable(value: Any) -> Any:
    """Convert results, commands, dataclasses and models into JSON-friendly values."""
    match value:
        case CommandResult() | OrchestratorCommand() | HistoryEntry():
            return value.to_dict()
        case BaseModel():
            return value.model_dump(mode="json")
        case datetime():
            return value.isoformat()
        case bytes():
            return base64.b64encode(value).decode("ascii")
        case Enum():
            return value.value
        case dict():
            return {str(k): to_jsonable(v) for k, v in value.items()}
        case list() | tuple() | set() | frozenset():
            return [to_jsonable(v) for v in value]
        case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
        case _:
            return value
