"""
Static command catalog.

Groups are consulted in DEFAULT_GROUPS order, definitions in declaration
order and patterns in declaration order; the first match wins.
"""

from simpilot.catalog.accessibility import ACCESSIBILITY_COMMANDS
from simpilot.catalog.app import APP_COMMANDS
from simpilot.catalog.base import CommandDefinition, CommandGroup, define
from simpilot.catalog.capture import CAPTURE_COMMANDS
from simpilot.catalog.debug import DEBUG_COMMANDS
from simpilot.catalog.misc import MISC_COMMANDS
from simpilot.catalog.simulator import SIMULATOR_COMMANDS
from simpilot.catalog.ui import UI_COMMANDS

DEFAULT_GROUPS: tuple[CommandGroup, ...] = (
    SIMULATOR_COMMANDS,
    APP_COMMANDS,
    UI_COMMANDS,
    ACCESSIBILITY_COMMANDS,
    CAPTURE_COMMANDS,
    DEBUG_COMMANDS,
    MISC_COMMANDS,
)

__all__ = [
    "ACCESSIBILITY_COMMANDS",
    "APP_COMMANDS",
    "CAPTURE_COMMANDS",
    "DEBUG_COMMANDS",
    "DEFAULT_GROUPS",
    "MISC_COMMANDS",
    "SIMULATOR_COMMANDS",
    "UI_COMMANDS",
    "CommandDefinition",
    "CommandGroup",
    "define",
]
