"""
Simulator backend driven by the ``idb`` and ``xcrun simctl`` command-line tools.

Sessions are an in-process mapping from a generated session id to a
simulator UDID; nothing is persisted. Every tool invocation goes through
``asyncio.create_subprocess_exec`` with an argument list, so user-supplied
values are never interpreted by a shell.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import re
import signal
import tempfile
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog

from simpilot.backend.interface import (
    AppInfo,
    ButtonType,
    CrashLogInfo,
    DebugServerStatus,
    SimulatorInfo,
    SimulatorState,
)
from simpilot.config import SimpilotSettings
from simpilot.errors import BackendError

logger = structlog.get_logger(__name__)

RUNTIME_PREFIX = "com.apple.CoreSimulator.SimRuntime."
LOG_TIMEOUT_S = 5

_PORT = re.compile(r"port:\s*(\d+)")
_BUNDLE = re.compile(r"bundle_id:\s*(\S+)")
_INSTALLED = re.compile(r"Installed:?\s+(\S+)")


def _fmt(value: float | int) -> str:
    """Render a number without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_json_records(output: str) -> list[dict[str, Any]]:
    """idb emits either a JSON array or one JSON object per line."""
    if not output:
        return []
    try:
        data = json.loads(output)
    except json.JSONDecodeError:
        return [json.loads(line) for line in output.splitlines() if line.strip()]
    if isinstance(data, list):
        return data
    return [data]


@dataclass
class _Recording:
    session_id: str
    output_path: str
    process: asyncio.subprocess.Process


class IdbBackend:
    """
    SimulatorBackend implementation over idb and simctl.

    Example:
        backend = IdbBackend(settings)
        session_id = await backend.create_simulator_session("iPhone 15")
        await backend.tap(session_id, 100, 200)
    """

    def __init__(self, settings: SimpilotSettings | None = None) -> None:
        self._settings = settings or SimpilotSettings()
        self._idb = self._settings.idb_path
        self._xcrun = self._settings.xcrun_path
        self._sessions: dict[str, str] = {}
        self._recordings: dict[str, _Recording] = {}
        self._counter = itertools.count()
        self._idb_verified = False
        self._log = logger.bind(component="idb_backend")

    # Process helpers

    async def _run(self, *args: Any) -> str:
        command = [str(arg) for arg in args]
        self._log.debug("Running tool", command=command)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise BackendError(f"Executable not found: {command[0]}", command=command) from e

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode(errors="replace").strip() or f"exit status {process.returncode}"
            self._log.warning("Tool failed", command=command, returncode=process.returncode)
            raise BackendError(f"Error executing {' '.join(command)}: {detail}", command=command)
        return stdout.decode(errors="replace").strip()

    async def _idb_run(self, *args: str) -> str:
        return await self._run(self._idb, *args)

    async def _simctl(self, *args: str) -> str:
        return await self._run(self._xcrun, "simctl", *args)

    async def verify_idb_available(self) -> None:
        """Raise BackendError unless ``idb --version`` succeeds. Checked once per instance."""
        if self._idb_verified:
            return
        try:
            await self._idb_run("--version")
        except BackendError as e:
            raise BackendError(
                "idb is not installed or not available in PATH. "
                "Make sure idb-companion and fb-idb are properly installed."
            ) from e
        self._idb_verified = True

    def _udid(self, session_id: str) -> str:
        udid = self._sessions.get(session_id)
        if udid is None:
            raise BackendError(f"Session not found: {session_id}")
        return udid

    def _new_session_id(self) -> str:
        return f"session_{int(time.time() * 1000)}_{next(self._counter)}"

    # Simulator lifecycle

    async def create_simulator_session(
        self,
        device_name: str | None = None,
        platform_version: str | None = None,
        autoboot: bool = True,
    ) -> str:
        await self.verify_idb_available()
        simulators = await self.list_available_simulators()

        if device_name:
            wanted = str(device_name).strip().lower()
            simulator = next(
                (
                    sim
                    for sim in simulators
                    if sim.name.lower() == wanted
                    and (not platform_version or platform_version in sim.os)
                ),
                None,
            )
            if simulator is None:
                raise BackendError(f"No simulator found with name {device_name}")
        else:
            if not simulators:
                raise BackendError("No available simulators found")
            simulator = simulators[0]

        if autoboot:
            await self.boot_simulator_by_udid(simulator.udid)

        session_id = self._new_session_id()
        self._sessions[session_id] = simulator.udid
        self._log.info(
            "Session created",
            session_id=session_id,
            udid=simulator.udid,
            device=simulator.name,
        )
        return session_id

    async def terminate_simulator_session(self, session_id: str) -> None:
        self._udid(session_id)
        for recording_id, recording in list(self._recordings.items()):
            if recording.session_id == session_id:
                await self.stop_video_recording(session_id, recording_id)
        del self._sessions[session_id]
        self._log.info("Session terminated", session_id=session_id)

    async def list_available_simulators(self) -> list[SimulatorInfo]:
        output = await self._simctl("list", "devices", "--json")
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise BackendError(f"Unexpected simctl output: {e}") from e

        simulators: list[SimulatorInfo] = []
        for runtime, devices in data.get("devices", {}).items():
            for device in devices:
                try:
                    state = SimulatorState(device.get("state"))
                except ValueError:
                    state = SimulatorState.UNKNOWN
                simulators.append(
                    SimulatorInfo(
                        udid=device["udid"],
                        name=device["name"],
                        state=state,
                        os=runtime.replace(RUNTIME_PREFIX, ""),
                        device_type=device.get("deviceTypeIdentifier") or "Unknown",
                    )
                )
        return simulators

    async def list_booted_simulators(self) -> list[SimulatorInfo]:
        return [
            sim
            for sim in await self.list_available_simulators()
            if sim.state == SimulatorState.BOOTED
        ]

    async def list_simulator_sessions(self) -> list[str]:
        return list(self._sessions)

    async def _is_udid_booted(self, udid: str) -> bool:
        return any(sim.udid == udid for sim in await self.list_booted_simulators())

    async def boot_simulator_by_udid(self, udid: str) -> None:
        if await self._is_udid_booted(udid):
            return

        await self._simctl("boot", udid)

        attempts = self._settings.boot_poll_attempts
        for attempt in range(attempts):
            try:
                if await self._is_udid_booted(udid):
                    self._log.info("Simulator booted", udid=udid, attempts=attempt + 1)
                    return
            except BackendError as e:
                self._log.debug("Boot poll failed", udid=udid, error=str(e))
            await asyncio.sleep(self._settings.boot_poll_interval_s)

        raise BackendError(f"Timeout waiting for simulator {udid} to boot")

    async def shutdown_simulator_by_udid(self, udid: str) -> None:
        await self._simctl("shutdown", udid)

    async def shutdown_simulator(self, session_id: str) -> None:
        await self.shutdown_simulator_by_udid(self._udid(session_id))

    async def is_simulator_booted(self, session_id: str) -> bool:
        return await self._is_udid_booted(self._udid(session_id))

    async def focus_simulator(self, session_id: str) -> None:
        await self._idb_run("focus", "--udid", self._udid(session_id))

    # App lifecycle

    async def install_app(self, session_id: str, app_path: str) -> AppInfo:
        udid = self._udid(session_id)
        path = Path(app_path)
        if not path.exists():
            raise BackendError(f"File does not exist: {app_path}")

        output = await self._idb_run("install", "--udid", udid, str(path))
        found = _INSTALLED.search(output)
        return AppInfo(
            bundle_id=found.group(1) if found else path.stem,
            name=path.stem,
            installed_path=str(path),
        )

    async def launch_app(self, session_id: str, bundle_id: str) -> None:
        await self._idb_run("launch", "--udid", self._udid(session_id), bundle_id)

    async def terminate_app(self, session_id: str, bundle_id: str) -> None:
        await self._idb_run("terminate", "--udid", self._udid(session_id), bundle_id)

    async def uninstall_app(self, session_id: str, bundle_id: str) -> None:
        await self._idb_run("uninstall", "--udid", self._udid(session_id), bundle_id)

    async def list_apps(self, session_id: str) -> list[AppInfo]:
        output = await self._idb_run("list-apps", "--udid", self._udid(session_id), "--json")
        return [
            AppInfo(
                bundle_id=app["bundle_id"],
                name=app.get("name") or app["bundle_id"],
                installed_path=app.get("install_path"),
            )
            for app in _parse_json_records(output)
        ]

    async def is_app_installed(self, session_id: str, bundle_id: str) -> bool:
        return any(app.bundle_id == bundle_id for app in await self.list_apps(session_id))

    # UI interaction

    async def tap(
        self, session_id: str, x: float, y: float, duration: float | None = None
    ) -> None:
        args = ["ui", "tap", "--udid", self._udid(session_id), _fmt(x), _fmt(y)]
        if duration:
            args += ["--duration", _fmt(duration)]
        await self._idb_run(*args)

    async def swipe(
        self,
        session_id: str,
        start_x: float,
        start_y: float,
        end_x: float,
        end_y: float,
        duration: float | None = None,
        delta: float | None = None,
    ) -> None:
        args = [
            "ui",
            "swipe",
            "--udid",
            self._udid(session_id),
            _fmt(start_x),
            _fmt(start_y),
            _fmt(end_x),
            _fmt(end_y),
        ]
        if duration:
            args += ["--duration", _fmt(duration)]
        if delta:
            args += ["--delta", _fmt(delta)]
        await self._idb_run(*args)

    async def press_button(
        self, session_id: str, button: ButtonType, duration: float | None = None
    ) -> None:
        args = ["ui", "button", "--udid", self._udid(session_id), str(ButtonType(button))]
        if duration:
            args += ["--duration", _fmt(duration)]
        await self._idb_run(*args)

    async def input_text(self, session_id: str, text: str) -> None:
        await self._idb_run("ui", "text", "--udid", self._udid(session_id), text)

    async def press_key(
        self, session_id: str, key_code: int, duration: float | None = None
    ) -> None:
        args = ["ui", "key", "--udid", self._udid(session_id), str(key_code)]
        if duration:
            args += ["--duration", _fmt(duration)]
        await self._idb_run(*args)

    async def press_key_sequence(self, session_id: str, key_codes: list[int]) -> None:
        await self._idb_run(
            "ui", "key-sequence", "--udid", self._udid(session_id), *(str(k) for k in key_codes)
        )

    # Accessibility

    async def describe_all_elements(self, session_id: str) -> list[dict[str, Any]]:
        output = await self._idb_run("ui", "describe-all", "--udid", self._udid(session_id), "--json")
        return _parse_json_records(output)

    async def describe_point(self, session_id: str, x: float, y: float) -> dict[str, Any]:
        output = await self._idb_run(
            "ui", "describe-point", "--udid", self._udid(session_id), _fmt(x), _fmt(y), "--json"
        )
        records = _parse_json_records(output)
        return records[0] if records else {}

    # Capture and logs

    async def take_screenshot(self, session_id: str, output_path: str | None = None) -> str | bytes:
        udid = self._udid(session_id)
        if output_path:
            await self._idb_run("screenshot", "--udid", udid, output_path)
            return output_path

        with tempfile.TemporaryDirectory(prefix="simpilot-") as tmp:
            target = Path(tmp) / f"screenshot_{int(time.time() * 1000)}.png"
            await self._idb_run("screenshot", "--udid", udid, str(target))
            return target.read_bytes()

    async def start_video_recording(self, session_id: str, output_path: str) -> str:
        udid = self._udid(session_id)
        command = [self._idb, "record", "video", "--udid", udid, str(output_path)]
        self._log.debug("Starting recording", command=command)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise BackendError(f"Executable not found: {self._idb}", command=command) from e

        recording_id = str(uuid.uuid4())
        self._recordings[recording_id] = _Recording(session_id, output_path, process)
        self._log.info("Recording started", recording_id=recording_id, output_path=output_path)
        return recording_id

    async def stop_video_recording(self, session_id: str, recording_id: str | None = None) -> str:
        if recording_id is None:
            recording_id = next(
                (rid for rid, rec in reversed(self._recordings.items()) if rec.session_id == session_id),
                None,
            )
        recording = self._recordings.pop(recording_id, None) if recording_id else None
        if recording is None:
            raise BackendError(f"No active recording for session {session_id}")

        if recording.process.returncode is None:
            recording.process.send_signal(signal.SIGINT)
        await recording.process.wait()
        self._log.info("Recording stopped", recording_id=recording_id, output_path=recording.output_path)
        return recording.output_path

    async def get_system_logs(
        self, session_id: str, bundle_id: str | None = None, limit: int | None = None
    ) -> str:
        args = ["log", "--udid", self._udid(session_id)]
        if bundle_id:
            args += ["--bundle", bundle_id]
        if limit:
            args += ["--limit", str(limit)]
        args += ["--timeout", str(LOG_TIMEOUT_S)]
        return await self._idb_run(*args)

    async def get_app_logs(self, session_id: str, bundle_id: str, limit: int | None = None) -> str:
        return await self.get_system_logs(session_id, bundle_id=bundle_id, limit=limit)

    # Debug

    async def start_debug_session(self, session_id: str, bundle_id: str) -> DebugServerStatus:
        await self._idb_run("debugserver", "start", "--udid", self._udid(session_id), bundle_id)
        return await self.get_debug_server_status(session_id)

    async def stop_debug_session(self, session_id: str) -> None:
        await self._idb_run("debugserver", "stop", "--udid", self._udid(session_id))

    async def get_debug_server_status(self, session_id: str) -> DebugServerStatus:
        udid = self._udid(session_id)
        try:
            output = await self._idb_run("debugserver", "status", "--udid", udid)
        except BackendError as e:
            self._log.debug("Debug server status unavailable", udid=udid, error=str(e))
            return DebugServerStatus(running=False)

        if "No debug server running" in output:
            return DebugServerStatus(running=False)
        port = _PORT.search(output)
        bundle = _BUNDLE.search(output)
        return DebugServerStatus(
            running=True,
            port=int(port.group(1)) if port else None,
            bundle_id=bundle.group(1) if bundle else None,
        )

    async def list_crash_logs(
        self, session_id: str, bundle_id: str | None = None
    ) -> list[CrashLogInfo]:
        args = ["crash", "list", "--udid", self._udid(session_id)]
        if bundle_id:
            args += ["--bundle-id", bundle_id]
        output = await self._idb_run(*args)

        crashes: list[CrashLogInfo] = []
        for line in filter(None, output.splitlines()):
            parts = [part.strip() for part in line.split(" - ")]
            date: datetime | None = None
            if len(parts) > 2 and parts[2]:
                try:
                    date = datetime.fromisoformat(parts[2])
                except ValueError:
                    date = None
            crashes.append(
                CrashLogInfo(
                    name=parts[0],
                    bundle_id=parts[1] if len(parts) > 1 and parts[1] else None,
                    date=date,
                    path=parts[3] if len(parts) > 3 else "",
                )
            )
        return crashes

    async def get_crash_log(self, session_id: str, crash_name: str) -> str:
        return await self._idb_run("crash", "show", "--udid", self._udid(session_id), crash_name)

    async def delete_crash_logs(
        self,
        session_id: str,
        crash_names: list[str] | None = None,
        bundle_id: str | None = None,
        delete_all: bool = False,
    ) -> None:
        udid = self._udid(session_id)
        if delete_all:
            await self._idb_run("crash", "delete", "--udid", udid, "--all")
            return
        if crash_names:
            for name in crash_names:
                await self._idb_run("crash", "delete", "--udid", udid, name)
            return

        args = ["crash", "delete", "--udid", udid]
        if bundle_id:
            args += ["--bundle-id", bundle_id]
        await self._idb_run(*args)

    # Misc device state

    async def install_dylib(self, session_id: str, dylib_path: str) -> None:
        await self._idb_run("dylib", "install", "--udid", self._udid(session_id), dylib_path)

    async def open_url(self, session_id: str, url: str) -> None:
        await self._idb_run("open", "--udid", self._udid(session_id), url)

    async def clear_keychain(self, session_id: str) -> None:
        await self._idb_run("clear-keychain", "--udid", self._udid(session_id))

    async def set_location(self, session_id: str, latitude: float, longitude: float) -> None:
        await self._idb_run(
            "set-location", "--udid", self._udid(session_id), _fmt(latitude), _fmt(longitude)
        )

    async def add_media(self, session_id: str, media_paths: list[str]) -> None:
        await self._idb_run("add-media", "--udid", self._udid(session_id), *media_paths)

    async def approve_permissions(
        self, session_id: str, bundle_id: str, permissions: list[str]
    ) -> None:
        await self._idb_run("approve", "--udid", self._udid(session_id), bundle_id, *permissions)

    async def update_contacts(self, session_id: str, db_path: str) -> None:
        await self._idb_run("contacts", "update", "--udid", self._udid(session_id), db_path)
