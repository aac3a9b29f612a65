"""
Backend adapter: one orchestrator command -> one simulator backend capability call.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

import structlog

from simpilot.backend.interface import ButtonType, SimulatorBackend
from simpilot.config import SimpilotSettings
from simpilot.errors import BackendError, UnsupportedCommandError
from simpilot.orchestrator.models import (
    CommandContext,
    CommandKind,
    CommandResult,
    OrchestratorCommand,
)

logger = structlog.get_logger(__name__)

K = CommandKind
MAX_BACKOFF_MS = 30000


class BackendAdapter:
    """
    Dispatches atomic commands onto a SimulatorBackend.

    The effective session id is ``parameters["session_id"]`` when set, else
    the ``session_id`` argument, else the empty string. Backend errors are
    turned into results: the command's ``on_error`` hook decides the result
    when present, otherwise a generic failure is returned.

    Timeouts and retries are only enforced when the corresponding settings
    are enabled; otherwise ``timeout_ms`` and ``retries`` are carried as
    metadata only.
    """

    def __init__(
        self,
        backend: SimulatorBackend,
        settings: SimpilotSettings | None = None,
    ) -> None:
        self._backend = backend
        self._settings = settings or SimpilotSettings()
        self._log = logger.bind(component="backend_adapter")

    @property
    def backend(self) -> SimulatorBackend:
        return self._backend

    async def execute(
        self,
        command: OrchestratorCommand,
        session_id: str | None = None,
    ) -> CommandResult:
        explicit = command.parameters.get("session_id")
        if explicit is not None:
            effective = str(explicit)
        elif session_id is not None:
            effective = session_id
        else:
            effective = ""

        try:
            data = await self._call_with_policy(command, effective)
            return CommandResult(success=True, data=data)

        except Exception as e:
            self._log.error(
                "Backend call failed",
                kind=str(command.kind),
                command_id=command.id,
                error=str(e),
            )
            if command.hooks.on_error is not None:
                handled = command.hooks.on_error(e, CommandContext(session_id=session_id))
                if inspect.isawaitable(handled):
                    handled = await handled
                return handled
            return CommandResult(success=False, error=str(e) or type(e).__name__)

    async def _call_with_policy(self, command: OrchestratorCommand, session_id: str) -> Any:
        retries = max(command.retries, 0) if self._settings.enforce_retries else 0

        for attempt in range(retries):
            try:
                return await self._call_once(command, session_id)
            except UnsupportedCommandError:
                raise
            except Exception as e:
                # Exponential backoff before retry
                delay = self._calculate_backoff_delay(attempt)
                self._log.debug(
                    "Command failed, retrying with backoff",
                    kind=str(command.kind),
                    command_id=command.id,
                    attempt=attempt + 1,
                    max_retries=command.retries,
                    delay_ms=delay,
                    error=str(e),
                )
                await asyncio.sleep(delay / 1000)

        return await self._call_once(command, session_id)

    async def _call_once(self, command: OrchestratorCommand, session_id: str) -> Any:
        call = self._dispatch(command.kind, command.parameters, session_id)
        if not self._settings.enforce_timeouts:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=command.timeout_ms / 1000)
        except TimeoutError as e:
            raise BackendError(
                f"Command {command.kind} timed out after {command.timeout_ms} ms"
            ) from e

    def _calculate_backoff_delay(self, attempt: int) -> int:
        """Exponential backoff: base * 2^attempt with a 30 s cap."""
        return min(self._settings.retry_delay_ms * (2**attempt), MAX_BACKOFF_MS)

    async def _dispatch(self, kind: CommandKind, p: dict[str, Any], sid: str) -> Any:
        b = self._backend

        match kind:
            # Simulator lifecycle
            case K.CREATE_SIMULATOR_SESSION:
                return await b.create_simulator_session(
                    device_name=p.get("device_name"),
                    platform_version=p.get("platform_version"),
                    autoboot=p.get("autoboot", True) is not False,
                )
            case K.TERMINATE_SIMULATOR_SESSION:
                await b.terminate_simulator_session(sid)
                return {"session_id": sid}
            case K.LIST_AVAILABLE_SIMULATORS:
                return await b.list_available_simulators()
            case K.LIST_BOOTED_SIMULATORS:
                return await b.list_booted_simulators()
            case K.LIST_SESSIONS:
                return await b.list_simulator_sessions()
            case K.BOOT_SIMULATOR:
                await b.boot_simulator_by_udid(p["udid"])
                return {"udid": p["udid"]}
            case K.SHUTDOWN_SIMULATOR:
                if p.get("udid"):
                    await b.shutdown_simulator_by_udid(p["udid"])
                    return {"udid": p["udid"]}
                await b.shutdown_simulator(sid)
                return {"session_id": sid}
            case K.IS_SIMULATOR_BOOTED:
                return await b.is_simulator_booted(sid)
            case K.FOCUS_SIMULATOR:
                await b.focus_simulator(sid)
                return {"session_id": sid}

            # App lifecycle
            case K.INSTALL_APP:
                return await b.install_app(sid, p["app_path"])
            case K.LAUNCH_APP:
                await b.launch_app(sid, p["bundle_id"])
                return {"bundle_id": p["bundle_id"]}
            case K.TERMINATE_APP:
                await b.terminate_app(sid, p["bundle_id"])
                return {"bundle_id": p["bundle_id"]}
            case K.UNINSTALL_APP:
                await b.uninstall_app(sid, p["bundle_id"])
                return {"bundle_id": p["bundle_id"]}
            case K.LIST_APPS:
                return await b.list_apps(sid)
            case K.IS_APP_INSTALLED:
                return await b.is_app_installed(sid, p["bundle_id"])

            # UI interaction
            case K.TAP:
                await b.tap(sid, p["x"], p["y"], duration=p.get("duration"))
                return {"x": p["x"], "y": p["y"]}
            case K.SWIPE:
                await b.swipe(
                    sid,
                    p["start_x"],
                    p["start_y"],
                    p["end_x"],
                    p["end_y"],
                    duration=p.get("duration"),
                    delta=p.get("delta"),
                )
                return {
                    "start_x": p["start_x"],
                    "start_y": p["start_y"],
                    "end_x": p["end_x"],
                    "end_y": p["end_y"],
                }
            case K.PRESS_BUTTON:
                button = ButtonType(str(p["button"]).upper())
                await b.press_button(sid, button, duration=p.get("duration"))
                return {"button": str(button)}
            case K.INPUT_TEXT:
                await b.input_text(sid, p["text"])
                return {"text": p["text"]}
            case K.PRESS_KEY:
                await b.press_key(sid, p["key_code"], duration=p.get("duration"))
                return {"key_code": p["key_code"]}
            case K.PRESS_KEY_SEQUENCE:
                await b.press_key_sequence(sid, list(p["key_codes"]))
                return {"key_codes": list(p["key_codes"])}

            # Accessibility
            case K.DESCRIBE_ELEMENTS:
                return await b.describe_all_elements(sid)
            case K.DESCRIBE_POINT:
                return await b.describe_point(sid, p["x"], p["y"])

            # Capture and logs
            case K.TAKE_SCREENSHOT:
                return await b.take_screenshot(sid, p.get("output_path"))
            case K.START_VIDEO_RECORDING:
                recording_id = await b.start_video_recording(sid, p["output_path"])
                return {"recording_id": recording_id, "output_path": p["output_path"]}
            case K.STOP_VIDEO_RECORDING:
                output_path = await b.stop_video_recording(sid, p.get("recording_id"))
                return {"output_path": output_path}
            case K.GET_SYSTEM_LOGS:
                return await b.get_system_logs(
                    sid, bundle_id=p.get("bundle_id"), limit=p.get("limit")
                )
            case K.GET_APP_LOGS:
                return await b.get_app_logs(sid, p["bundle_id"], limit=p.get("limit"))

            # Debug
            case K.START_DEBUG_SESSION:
                return await b.start_debug_session(sid, p["bundle_id"])
            case K.STOP_DEBUG_SESSION:
                await b.stop_debug_session(sid)
                return {"session_id": sid}
            case K.GET_DEBUG_SESSION_STATUS:
                return await b.get_debug_server_status(sid)
            case K.LIST_CRASH_LOGS:
                return await b.list_crash_logs(sid, bundle_id=p.get("bundle_id"))
            case K.GET_CRASH_LOG:
                return await b.get_crash_log(sid, p["crash_name"])
            case K.DELETE_CRASH_LOGS:
                await b.delete_crash_logs(
                    sid,
                    crash_names=p.get("crash_names"),
                    bundle_id=p.get("bundle_id"),
                    delete_all=bool(p.get("all", False)),
                )
                return {"session_id": sid}

            # Misc device state
            case K.INSTALL_DYLIB:
                await b.install_dylib(sid, p["dylib_path"])
                return {"dylib_path": p["dylib_path"]}
            case K.OPEN_URL:
                await b.open_url(sid, p["url"])
                return {"url": p["url"]}
            case K.CLEAR_KEYCHAIN:
                await b.clear_keychain(sid)
                return {"session_id": sid}
            case K.SET_LOCATION:
                await b.set_location(sid, p["latitude"], p["longitude"])
                return {"latitude": p["latitude"], "longitude": p["longitude"]}
            case K.ADD_MEDIA:
                await b.add_media(sid, list(p["media_paths"]))
                return {"media_paths": list(p["media_paths"])}
            case K.APPROVE_PERMISSIONS:
                await b.approve_permissions(sid, p["bundle_id"], list(p["permissions"]))
                return {"bundle_id": p["bundle_id"], "permissions": list(p["permissions"])}
            case K.UPDATE_CONTACTS:
                await b.update_contacts(sid, p["db_path"])
                return {"db_path": p["db_path"]}

            case _:
                raise UnsupportedCommandError(str(kind))
