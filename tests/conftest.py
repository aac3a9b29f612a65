"""Pytest fixtures for simpilot tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from simpilot.backend.interface import SimulatorBackend
from simpilot.config import SimpilotSettings
from simpilot.orchestrator.executor import Orchestrator
from simpilot.orchestrator.factory import CommandFactory
from simpilot.parser.parser import InstructionParser

SESSION_ID = "session-1"


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[Path, None, None]:
    """Keep SIMPILOT_* variables and stray config files out of every test."""
    for key in list(os.environ):
        if key.upper().startswith("SIMPILOT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def settings() -> SimpilotSettings:
    """Default settings with retry delays removed."""
    return SimpilotSettings(retry_delay_ms=0, boot_poll_interval_s=0)


@pytest.fixture
def parser() -> InstructionParser:
    return InstructionParser()


@pytest.fixture
def factory(settings: SimpilotSettings) -> CommandFactory:
    return CommandFactory(settings)


@pytest.fixture
def mock_backend() -> AsyncMock:
    """Backend stub recording every capability call."""
    backend = AsyncMock(spec=SimulatorBackend)
    backend.create_simulator_session.return_value = SESSION_ID
    backend.terminate_simulator_session.return_value = None
    backend.tap.return_value = None
    backend.launch_app.return_value = None
    backend.list_available_simulators.return_value = []
    return backend


@pytest.fixture
def orchestrator(
    parser: InstructionParser,
    mock_backend: AsyncMock,
    settings: SimpilotSettings,
) -> Orchestrator:
    return Orchestrator(parser, mock_backend, settings=settings)
