"""
Command registry: ordered first-match lookup over catalog groups.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import structlog

from simpilot.catalog import DEFAULT_GROUPS, CommandDefinition, CommandGroup
from simpilot.errors import UnrecognizedInstructionError
from simpilot.parser.models import CommandInfo, ParseResult

logger = structlog.get_logger(__name__)

DEFAULT_SUGGESTIONS: tuple[str, ...] = (
    "create session",
    "list simulators",
    "install app",
    "launch app",
    "end session",
)
MAX_SUGGESTIONS = 5


class CommandRegistry:
    """
    Holds catalog groups in registration order and matches text against them.

    Groups, definitions and patterns are each scanned in order and the first
    successful pattern decides the command. There is no scoring: a more
    specific definition must be declared before a more general one.
    """

    def __init__(self, groups: Iterable[CommandGroup] | None = None) -> None:
        self._groups: list[CommandGroup] = list(DEFAULT_GROUPS if groups is None else groups)
        self._log = logger.bind(component="command_registry")

    def register(self, group: CommandGroup) -> None:
        """Append a group; it is consulted after every group already registered."""
        self._groups.append(group)
        self._log.debug("Registered command group", group=group.name, definitions=len(group))

    @property
    def groups(self) -> tuple[CommandGroup, ...]:
        return tuple(self._groups)

    def definitions(self) -> Iterator[CommandDefinition]:
        for group in self._groups:
            yield from group

    def find(self, name: str) -> CommandDefinition | None:
        """Look up a definition by canonical name."""
        for definition in self.definitions():
            if definition.name == name:
                return definition
        return None

    def match(self, text: str) -> ParseResult:
        """
        Resolve text to a ParseResult.

        Raises:
            UnrecognizedInstructionError: If no pattern matches.
        """
        normalized = text.strip().lower()
        for definition in self.definitions():
            found = definition.match(normalized)
            if found is None:
                continue
            parameters = definition.extract(found)
            self._log.debug(
                "Instruction matched",
                command=definition.name,
                parameters=sorted(parameters),
            )
            return ParseResult(
                command=definition.name,
                parameters=parameters,
                original_text=text,
            )

        self._log.debug("No command matched", text=text)
        raise UnrecognizedInstructionError(text)

    def list_supported(self) -> list[CommandInfo]:
        return [
            CommandInfo(
                name=d.name,
                description=d.description,
                required_parameters=list(d.required_parameters),
                optional_parameters=list(d.optional_parameters),
                examples=list(d.examples),
            )
            for d in self.definitions()
        ]

    def suggest(self, partial: str) -> list[str]:
        """
        Suggest command names and example phrasings containing ``partial``.

        Empty input yields a fixed set of starter commands.
        """
        needle = partial.strip().lower()
        if not needle:
            return list(DEFAULT_SUGGESTIONS)

        suggestions: list[str] = []
        for definition in self.definitions():
            for candidate in (definition.name, *definition.examples):
                if needle in candidate.lower() and candidate not in suggestions:
                    suggestions.append(candidate)
                    if len(suggestions) >= MAX_SUGGESTIONS:
                        return suggestions
        return suggestions
