"""Command model, factory and event feed. The executor lives in ``simpilot.orchestrator.executor``."""

from simpilot.orchestrator.events import EventFeed, OrchestratorEvent
from simpilot.orchestrator.factory import CommandFactory
from simpilot.orchestrator.models import (
    CommandContext,
    CommandHooks,
    CommandKind,
    CommandResult,
    ConditionalCommand,
    HistoryEntry,
    OrchestratorCommand,
    SequenceCommand,
)

__all__ = [
    "CommandContext",
    "CommandFactory",
    "CommandHooks",
    "CommandKind",
    "CommandResult",
    "ConditionalCommand",
    "EventFeed",
    "HistoryEntry",
    "OrchestratorCommand",
    "OrchestratorEvent",
    "SequenceCommand",
]
