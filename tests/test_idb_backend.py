"""
Tests for the idb/simctl backend.

No simulator tooling is needed: tool invocations are replaced with canned
output keyed on the argument list.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest

from simpilot.backend.idb import IdbBackend, _fmt, _parse_json_records
from simpilot.backend.interface import ButtonType, SimulatorBackend, SimulatorState
from simpilot.config import SimpilotSettings
from simpilot.errors import BackendError
from simpilot.orchestrator.executor import Orchestrator
from simpilot.parser.parser import InstructionParser

RUNTIME = "com.apple.CoreSimulator.SimRuntime.iOS-17-0"


def _devices(*devices: dict[str, str]) -> str:
    return json.dumps({"devices": {RUNTIME: list(devices)}})


BOOTED = {"udid": "U1", "name": "iPhone 15", "state": "Booted"}
SHUTDOWN = {"udid": "U2", "name": "iPhone 14", "state": "Shutdown"}


def _tools(outputs: dict[str, str] | None = None) -> Callable[..., Any]:
    """Fake ``_run``: returns the output registered for the joined argv prefix."""
    outputs = outputs or {}

    async def run(*args: str) -> str:
        joined = " ".join(args)
        for prefix, output in outputs.items():
            if joined.startswith(prefix):
                return output
        return ""

    return run


@pytest.fixture
def backend(settings: SimpilotSettings) -> IdbBackend:
    return IdbBackend(settings)


async def _session(backend: IdbBackend, run: AsyncMock) -> str:
    backend._run = run  # type: ignore[method-assign]
    return await backend.create_simulator_session("iPhone 15")


class _FakeProcess:
    def __init__(self, returncode: int, stdout: bytes = b"", stderr: bytes = b"") -> None:
        self.returncode = returncode
        self._stdout = stdout
        self._stderr = stderr

    async def communicate(self) -> tuple[bytes, bytes]:
        return self._stdout, self._stderr


class TestProcessRunner:
    """Tests for IdbBackend._run."""

    @pytest.mark.asyncio
    async def test_returns_stripped_stdout(
        self, backend: IdbBackend, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        spawn = AsyncMock(return_value=_FakeProcess(0, b"  ok\n"))
        monkeypatch.setattr("asyncio.create_subprocess_exec", spawn)

        assert await backend._run("idb", "--version") == "ok"
        assert spawn.await_args.args == ("idb", "--version")

    @pytest.mark.asyncio
    async def test_argv_is_stringified(
        self, backend: IdbBackend, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        spawn = AsyncMock(return_value=_FakeProcess(0))
        monkeypatch.setattr("asyncio.create_subprocess_exec", spawn)

        await backend._run("idb", "crash", "show", "--udid", "U1", 42)

        assert spawn.await_args.args == ("idb", "crash", "show", "--udid", "U1", "42")
        assert all(isinstance(arg, str) for arg in spawn.await_args.args)

    @pytest.mark.asyncio
    async def test_nonzero_exit(
        self, backend: IdbBackend, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        spawn = AsyncMock(return_value=_FakeProcess(1, stderr=b"no such device"))
        monkeypatch.setattr("asyncio.create_subprocess_exec", spawn)

        with pytest.raises(BackendError, match="no such device") as exc_info:
            await backend._run("idb", "focus")

        assert exc_info.value.command == ["idb", "focus"]

    @pytest.mark.asyncio
    async def test_missing_executable(
        self, backend: IdbBackend, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        spawn = AsyncMock(side_effect=FileNotFoundError())
        monkeypatch.setattr("asyncio.create_subprocess_exec", spawn)

        with pytest.raises(BackendError, match="Executable not found: idb"):
            await backend._run("idb", "--version")

    @pytest.mark.asyncio
    async def test_idb_check_is_cached(self, backend: IdbBackend) -> None:
        run = AsyncMock(side_effect=_tools())
        backend._run = run  # type: ignore[method-assign]

        await backend.verify_idb_available()
        await backend.verify_idb_available()

        assert run.await_count == 1

    @pytest.mark.asyncio
    async def test_idb_missing_message(self, backend: IdbBackend) -> None:
        backend._run = AsyncMock(side_effect=BackendError("Executable not found: idb"))  # type: ignore[method-assign]

        with pytest.raises(BackendError, match="idb is not installed"):
            await backend.verify_idb_available()


class TestSimulatorLifecycle:
    """Tests for sessions and boot handling."""

    def test_satisfies_protocol(self, backend: IdbBackend) -> None:
        assert isinstance(backend, SimulatorBackend)

    @pytest.mark.asyncio
    async def test_list_simulators(self, backend: IdbBackend) -> None:
        backend._run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED, SHUTDOWN)}))  # type: ignore[method-assign]

        simulators = await backend.list_available_simulators()
        booted = await backend.list_booted_simulators()

        assert [s.udid for s in simulators] == ["U1", "U2"]
        assert simulators[0].os == "iOS-17-0"
        assert simulators[1].state is SimulatorState.SHUTDOWN
        assert [s.udid for s in booted] == ["U1"]

    @pytest.mark.asyncio
    async def test_create_session_case_insensitive(self, backend: IdbBackend) -> None:
        """Test device names match regardless of case and already booted devices are not booted again."""
        run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED, SHUTDOWN)}))
        backend._run = run  # type: ignore[method-assign]

        session_id = await backend.create_simulator_session("IPHONE 15")

        assert session_id.startswith("session_")
        assert await backend.list_simulator_sessions() == [session_id]
        assert not any(call.args[:3] == ("xcrun", "simctl", "boot") for call in run.await_args_list)

    @pytest.mark.asyncio
    async def test_unknown_device(self, backend: IdbBackend) -> None:
        backend._run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED)}))  # type: ignore[method-assign]

        with pytest.raises(BackendError, match="No simulator found with name iPad"):
            await backend.create_simulator_session("iPad")

    @pytest.mark.asyncio
    async def test_platform_version_filter(self, backend: IdbBackend) -> None:
        backend._run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED)}))  # type: ignore[method-assign]

        with pytest.raises(BackendError):
            await backend.create_simulator_session("iPhone 15", platform_version="16")

    @pytest.mark.asyncio
    async def test_boot_timeout(self) -> None:
        """Test a device that never reports Booted raises after the configured polls."""
        backend = IdbBackend(SimpilotSettings(boot_poll_attempts=2, boot_poll_interval_s=0))
        run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(SHUTDOWN)}))
        backend._run = run  # type: ignore[method-assign]

        with pytest.raises(BackendError, match="Timeout waiting for simulator U2 to boot"):
            await backend.create_simulator_session("iPhone 14")

        run.assert_any_await("xcrun", "simctl", "boot", "U2")

    @pytest.mark.asyncio
    async def test_unknown_session(self, backend: IdbBackend) -> None:
        with pytest.raises(BackendError, match="Session not found: nope"):
            await backend.tap("nope", 1, 2)

    @pytest.mark.asyncio
    async def test_terminate_forgets_session(self, backend: IdbBackend) -> None:
        session_id = await _session(
            backend, AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED)}))
        )

        await backend.terminate_simulator_session(session_id)

        assert await backend.list_simulator_sessions() == []
        with pytest.raises(BackendError):
            await backend.terminate_simulator_session(session_id)


class TestCommandLines:
    """Tests for the argv each capability produces."""

    @pytest.mark.asyncio
    async def test_tap(self, backend: IdbBackend) -> None:
        run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED)}))
        session_id = await _session(backend, run)

        await backend.tap(session_id, 100, 200.0, duration=0.5)

        run.assert_awaited_with("idb", "ui", "tap", "--udid", "U1", "100", "200", "--duration", "0.5")

    @pytest.mark.asyncio
    async def test_swipe_and_button(self, backend: IdbBackend) -> None:
        run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED)}))
        session_id = await _session(backend, run)

        await backend.swipe(session_id, 1, 2, 3, 4, delta=10)
        run.assert_awaited_with("idb", "ui", "swipe", "--udid", "U1", "1", "2", "3", "4", "--delta", "10")

        await backend.press_button(session_id, ButtonType.HOME)
        run.assert_awaited_with("idb", "ui", "button", "--udid", "U1", "HOME")

    @pytest.mark.asyncio
    async def test_set_location_keeps_precision(self, backend: IdbBackend) -> None:
        run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED)}))
        session_id = await _session(backend, run)

        await backend.set_location(session_id, 37.7749295, -122.4194155)

        run.assert_awaited_with("idb", "set-location", "--udid", "U1", "37.7749295", "-122.4194155")

    @pytest.mark.asyncio
    async def test_list_apps_json_lines(self, backend: IdbBackend) -> None:
        lines = "\n".join(
            [
                json.dumps({"bundle_id": "com.example.app", "name": "Example"}),
                json.dumps({"bundle_id": "com.apple.mobilesafari"}),
            ]
        )
        run = AsyncMock(
            side_effect=_tools({"xcrun simctl list": _devices(BOOTED), "idb list-apps": lines})
        )
        session_id = await _session(backend, run)

        apps = await backend.list_apps(session_id)

        assert [(a.bundle_id, a.name) for a in apps] == [
            ("com.example.app", "Example"),
            ("com.apple.mobilesafari", "com.apple.mobilesafari"),
        ]
        assert await backend.is_app_installed(session_id, "com.example.app") is True

    @pytest.mark.asyncio
    async def test_logs_arguments(self, backend: IdbBackend) -> None:
        run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED)}))
        session_id = await _session(backend, run)

        await backend.get_app_logs(session_id, "com.example.app", limit=20)

        run.assert_awaited_with(
            "idb", "log", "--udid", "U1", "--bundle", "com.example.app", "--limit", "20", "--timeout", "5"
        )

    @pytest.mark.asyncio
    async def test_screenshot_to_path(self, backend: IdbBackend) -> None:
        run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED)}))
        session_id = await _session(backend, run)

        assert await backend.take_screenshot(session_id, "/tmp/shot.png") == "/tmp/shot.png"
        run.assert_awaited_with("idb", "screenshot", "--udid", "U1", "/tmp/shot.png")

    @pytest.mark.asyncio
    async def test_delete_crash_logs_variants(self, backend: IdbBackend) -> None:
        run = AsyncMock(side_effect=_tools({"xcrun simctl list": _devices(BOOTED)}))
        session_id = await _session(backend, run)

        await backend.delete_crash_logs(session_id, delete_all=True)
        run.assert_awaited_with("idb", "crash", "delete", "--udid", "U1", "--all")

        await backend.delete_crash_logs(session_id, bundle_id="com.example.app")
        run.assert_awaited_with("idb", "crash", "delete", "--udid", "U1", "--bundle-id", "com.example.app")


class TestOutputParsing:
    """Tests for parsing idb text output."""

    @pytest.mark.asyncio
    async def test_debug_status(self, backend: IdbBackend) -> None:
        run = AsyncMock(
            side_effect=_tools(
                {
                    "xcrun simctl list": _devices(BOOTED),
                    "idb debugserver status": "running port: 1234 bundle_id: com.example.app",
                }
            )
        )
        session_id = await _session(backend, run)

        status = await backend.get_debug_server_status(session_id)

        assert status.running is True
        assert status.port == 1234
        assert status.bundle_id == "com.example.app"

    @pytest.mark.asyncio
    async def test_debug_status_not_running(self, backend: IdbBackend) -> None:
        run = AsyncMock(
            side_effect=_tools(
                {
                    "xcrun simctl list": _devices(BOOTED),
                    "idb debugserver status": "No debug server running",
                }
            )
        )
        session_id = await _session(backend, run)

        assert (await backend.get_debug_server_status(session_id)).running is False

    @pytest.mark.asyncio
    async def test_crash_list(self, backend: IdbBackend) -> None:
        output = (
            "Example-2024-01-02 - com.example.app - 2024-01-02T10:00:00 - /tmp/a.ips\n"
            "Orphan\n"
        )
        run = AsyncMock(
            side_effect=_tools({"xcrun simctl list": _devices(BOOTED), "idb crash list": output})
        )
        session_id = await _session(backend, run)

        crashes = await backend.list_crash_logs(session_id)

        assert crashes[0].name == "Example-2024-01-02"
        assert crashes[0].bundle_id == "com.example.app"
        assert crashes[0].date == datetime(2024, 1, 2, 10, 0, 0)
        assert crashes[0].path == "/tmp/a.ips"
        assert crashes[1].name == "Orphan"
        assert crashes[1].bundle_id is None

    def test_json_records(self) -> None:
        assert _parse_json_records("") == []
        assert _parse_json_records('[{"a": 1}]') == [{"a": 1}]
        assert _parse_json_records('{"a": 1}\n{"a": 2}') == [{"a": 1}, {"a": 2}]

    def test_fmt(self) -> None:
        assert _fmt(100) == "100"
        assert _fmt(100.0) == "100"
        assert _fmt(0.25) == "0.25"


class TestInstructionArguments:
    """Tests for instructions run end to end against the real argv builder."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("instruction", "expected"),
        [
            ("input text 1234", ("idb", "ui", "text", "--udid", "U1", "1234")),
            ("type text true", ("idb", "ui", "text", "--udid", "U1", "true")),
            ("show crash log 42", ("idb", "crash", "show", "--udid", "U1", "42")),
        ],
    )
    async def test_free_text_argv(
        self,
        backend: IdbBackend,
        settings: SimpilotSettings,
        monkeypatch: pytest.MonkeyPatch,
        instruction: str,
        expected: tuple[str, ...],
    ) -> None:
        """Test values that look numeric or boolean reach the tool as the typed text."""
        spawned: list[tuple[Any, ...]] = []

        async def spawn(*args: Any, **kwargs: Any) -> _FakeProcess:
            spawned.append(args)
            listing = args[1:3] == ("simctl", "list")
            return _FakeProcess(0, _devices(BOOTED).encode() if listing else b"")

        monkeypatch.setattr("asyncio.create_subprocess_exec", spawn)
        orchestrator = Orchestrator(InstructionParser(), backend, settings=settings)
        orchestrator.set_active_session_id(await backend.create_simulator_session("iPhone 15"))

        result = await orchestrator.process_instruction(instruction)

        assert result.success is True, result.error
        assert spawned[-1] == expected
        assert all(isinstance(arg, str) for argv in spawned for arg in argv)
