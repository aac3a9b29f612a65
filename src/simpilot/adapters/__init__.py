"""Adapters between the parser, the orchestrator and simulator backends."""

from simpilot.adapters.backend import BackendAdapter
from simpilot.adapters.translator import COMMAND_KINDS, CommandTranslator

__all__ = ["COMMAND_KINDS", "BackendAdapter", "CommandTranslator"]
