"""
simpilot: natural-language control of iOS simulators.

Instructions such as "launch app com.example.app" or "tap en 100, 200" are
parsed against a static command catalog, translated into orchestrator
commands and executed through a simulator backend (idb by default).
"""

__version__ = "1.0.0"

from simpilot.config import SimpilotSettings, load_settings
from simpilot.errors import (
    BackendError,
    CommandMappingError,
    SimpilotError,
    UnrecognizedInstructionError,
    UnsupportedCommandError,
)
from simpilot.parser import (
    CommandInfo,
    CommandRegistry,
    InstructionParser,
    ParseResult,
    ValidationResult,
)
from simpilot.orchestrator import (
    CommandContext,
    CommandFactory,
    CommandHooks,
    CommandKind,
    CommandResult,
    ConditionalCommand,
    EventFeed,
    HistoryEntry,
    OrchestratorCommand,
    OrchestratorEvent,
    SequenceCommand,
)
from simpilot.backend import IdbBackend, SimulatorBackend
from simpilot.adapters import BackendAdapter, CommandTranslator
from simpilot.orchestrator.executor import Orchestrator

__all__ = [
    "BackendAdapter",
    "BackendError",
    "CommandContext",
    "CommandFactory",
    "CommandHooks",
    "CommandInfo",
    "CommandKind",
    "CommandMappingError",
    "CommandRegistry",
    "CommandResult",
    "CommandTranslator",
    "ConditionalCommand",
    "EventFeed",
    "HistoryEntry",
    "IdbBackend",
    "InstructionParser",
    "Orchestrator",
    "OrchestratorCommand",
    "OrchestratorEvent",
    "ParseResult",
    "SequenceCommand",
    "SimpilotError",
    "SimpilotSettings",
    "SimulatorBackend",
    "UnrecognizedInstructionError",
    "UnsupportedCommandError",
    "ValidationResult",
    "load_settings",
]
