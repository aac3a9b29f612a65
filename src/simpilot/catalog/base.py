"""
Building blocks for the static command catalog.

A CommandDefinition is an immutable recipe: the canonical command name, the
ordered regular expressions that recognise it, and the extractors that turn a
successful match into parameters. Definitions are grouped per domain in a
CommandGroup; declaration order inside a group is the matching precedence.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

Extractor = Callable[[re.Match[str]], Any]

# RFC 4122 style simulator UDID, matched against lowercased text.
UDID = r"(?P<udid>[0-9a-f]{8}(?:-[0-9a-f]{4}){3}-[0-9a-f]{12})"
COORDS = r"(?P<x>\d+)\s*,\s*(?P<y>\d+)"
TOKEN = r"[^\s,]+"


@dataclass(frozen=True)
class CommandDefinition:
    """A named, pattern-matchable instruction family."""

    name: str
    patterns: tuple[re.Pattern[str], ...]
    description: str
    required_parameters: tuple[str, ...] = ()
    optional_parameters: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    extractors: Mapping[str, Extractor] = field(default_factory=dict)

    @property
    def parameter_names(self) -> frozenset[str]:
        return frozenset(self.required_parameters) | frozenset(self.optional_parameters)

    def match(self, text: str) -> re.Match[str] | None:
        """Return the first pattern match for already-normalized text."""
        for pattern in self.patterns:
            found = pattern.search(text)
            if found:
                return found
        return None

    def extract(self, match: re.Match[str]) -> dict[str, Any]:
        """Run every extractor; extractors returning None are omitted."""
        parameters: dict[str, Any] = {}
        for name, extractor in self.extractors.items():
            value = extractor(match)
            if value is not None:
                parameters[name] = value
        return parameters


@dataclass(frozen=True)
class CommandGroup:
    """An ordered set of definitions for one domain (simulator, app, ui...)."""

    name: str
    definitions: tuple[CommandDefinition, ...]

    def __iter__(self) -> Iterator[CommandDefinition]:
        return iter(self.definitions)

    def __len__(self) -> int:
        return len(self.definitions)


def define(
    name: str,
    patterns: Iterable[str],
    description: str,
    *,
    required: Iterable[str] = (),
    optional: Iterable[str] = (),
    examples: Iterable[str] = (),
    extractors: Mapping[str, Extractor] | None = None,
) -> CommandDefinition:
    """
    Build a CommandDefinition from raw pattern strings.

    Each pattern is anchored on a word boundary so that, for example,
    "uninstall app" is never read as "install app".
    """
    compiled = tuple(re.compile(rf"\b{p}", re.IGNORECASE) for p in patterns)
    return CommandDefinition(
        name=name,
        patterns=compiled,
        description=description,
        required_parameters=tuple(required),
        optional_parameters=tuple(optional),
        examples=tuple(examples),
        extractors=MappingProxyType(dict(extractors or {})),
    )


def _group_value(match: re.Match[str], group: str) -> str | None:
    value = match.groupdict().get(group)
    if value is None:
        return None
    value = value.strip()
    return value or None


def text(group: str) -> Extractor:
    """Extract a named group as stripped text."""

    def extract(match: re.Match[str]) -> str | None:
        return _group_value(match, group)

    return extract


def upper(group: str) -> Extractor:
    """Extract a named group as upper-case text."""

    def extract(match: re.Match[str]) -> str | None:
        value = _group_value(match, group)
        return value.upper() if value is not None else None

    return extract


def integer(group: str) -> Extractor:
    """Extract a named group as an int."""

    def extract(match: re.Match[str]) -> int | None:
        value = _group_value(match, group)
        return int(value) if value is not None else None

    return extract


def decimal(group: str) -> Extractor:
    """Extract a named group as a float."""

    def extract(match: re.Match[str]) -> float | None:
        value = _group_value(match, group)
        return float(value) if value is not None else None

    return extract


def words(group: str) -> Extractor:
    """Extract a named group as a whitespace separated list."""

    def extract(match: re.Match[str]) -> list[str] | None:
        value = _group_value(match, group)
        return value.split() if value is not None else None

    return extract


def integers(group: str) -> Extractor:
    """Extract a named group as a list of ints."""

    def extract(match: re.Match[str]) -> list[int] | None:
        value = _group_value(match, group)
        return [int(part) for part in value.split()] if value is not None else None

    return extract
