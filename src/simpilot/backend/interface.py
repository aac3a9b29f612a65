"""
Simulator backend capability interface.

The orchestrator never talks to simulator tooling directly; it goes through
an object satisfying SimulatorBackend. Every capability is a coroutine that
may raise, and almost all of them are keyed by a session id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable


class SimulatorState(StrEnum):
    """Boot state reported by simctl."""

    BOOTED = "Booted"
    SHUTDOWN = "Shutdown"
    UNKNOWN = "Unknown"


class ButtonType(StrEnum):
    """Hardware buttons understood by ``idb ui button``."""

    APPLE_PAY = "APPLE_PAY"
    HOME = "HOME"
    LOCK = "LOCK"
    SIDE_BUTTON = "SIDE_BUTTON"
    SIRI = "SIRI"


@dataclass
class SimulatorInfo:
    """A simulator device known to simctl."""

    udid: str
    name: str
    state: SimulatorState
    os: str
    device_type: str = "Unknown"


@dataclass
class AppInfo:
    """An installed application."""

    bundle_id: str
    name: str
    installed_path: str | None = None


@dataclass
class CrashLogInfo:
    """One crash report entry."""

    name: str
    bundle_id: str | None = None
    date: datetime | None = None
    path: str = ""


@dataclass
class DebugServerStatus:
    """State of the debugserver attached to a session."""

    running: bool
    port: int | None = None
    bundle_id: str | None = None


@runtime_checkable
class SimulatorBackend(Protocol):
    """Async capability surface the backend adapter dispatches onto."""

    # Simulator lifecycle

    async def create_simulator_session(
        self,
        device_name: str | None = None,
        platform_version: str | None = None,
        autoboot: bool = True,
    ) -> str: ...

    async def terminate_simulator_session(self, session_id: str) -> None: ...

    async def list_available_simulators(self) -> list[SimulatorInfo]: ...

    async def list_booted_simulators(self) -> list[SimulatorInfo]: ...

    async def list_simulator_sessions(self) -> list[str]: ...

    async def boot_simulator_by_udid(self, udid: str) -> None: ...

    async def shutdown_simulator_by_udid(self, udid: str) -> None: ...

    async def shutdown_simulator(self, session_id: str) -> None: ...

    async def is_simulator_booted(self, session_id: str) -> bool: ...

    async def focus_simulator(self, session_id: str) -> None: ...

    # App lifecycle

    async def install_app(self, session_id: str, app_path: str) -> AppInfo: ...

    async def launch_app(self, session_id: str, bundle_id: str) -> None: ...

    async def terminate_app(self, session_id: str, bundle_id: str) -> None: ...

    async def uninstall_app(self, session_id: str, bundle_id: str) -> None: ...

    async def list_apps(self, session_id: str) -> list[AppInfo]: ...

    async def is_app_installed(self, session_id: str, bundle_id: str) -> bool: ...

    # UI interaction

    async def tap(
        self, session_id: str, x: float, y: float, duration: float | None = None
    ) -> None: ...

    async def swipe(
        self,
        session_id: str,
        start_x: float,
        start_y: float,
        end_x: float,
        end_y: float,
        duration: float | None = None,
        delta: float | None = None,
    ) -> None: ...

    async def press_button(
        self, session_id: str, button: ButtonType, duration: float | None = None
    ) -> None: ...

    async def input_text(self, session_id: str, text: str) -> None: ...

    async def press_key(
        self, session_id: str, key_code: int, duration: float | None = None
    ) -> None: ...

    async def press_key_sequence(self, session_id: str, key_codes: list[int]) -> None: ...

    # Accessibility

    async def describe_all_elements(self, session_id: str) -> list[dict[str, Any]]: ...

    async def describe_point(self, session_id: str, x: float, y: float) -> dict[str, Any]: ...

    # Capture and logs

    async def take_screenshot(self, session_id: str, output_path: str | None = None) -> str | bytes: ...

    async def start_video_recording(self, session_id: str, output_path: str) -> str: ...

    async def stop_video_recording(self, session_id: str, recording_id: str | None = None) -> str: ...

    async def get_system_logs(
        self, session_id: str, bundle_id: str | None = None, limit: int | None = None
    ) -> str: ...

    async def get_app_logs(self, session_id: str, bundle_id: str, limit: int | None = None) -> str: ...

    # Debug

    async def start_debug_session(self, session_id: str, bundle_id: str) -> DebugServerStatus: ...

    async def stop_debug_session(self, session_id: str) -> None: ...

    async def get_debug_server_status(self, session_id: str) -> DebugServerStatus: ...

    async def list_crash_logs(
        self, session_id: str, bundle_id: str | None = None
    ) -> list[CrashLogInfo]: ...

    async def get_crash_log(self, session_id: str, crash_name: str) -> str: ...

    async def delete_crash_logs(
        self,
        session_id: str,
        crash_names: list[str] | None = None,
        bundle_id: str | None = None,
        delete_all: bool = False,
    ) -> None: ...

    # Misc device state

    async def install_dylib(self, session_id: str, dylib_path: str) -> None: ...

    async def open_url(self, session_id: str, url: str) -> None: ...

    async def clear_keychain(self, session_id: str) -> None: ...

    async def set_location(self, session_id: str, latitude: float, longitude: float) -> None: ...

    async def add_media(self, session_id: str, media_paths: list[str]) -> None: ...

    async def approve_permissions(
        self, session_id: str, bundle_id: str, permissions: list[str]
    ) -> None: ...

    async def update_contacts(self, session_id: str, db_path: str) -> None: ...
