"""
Translation from parser output to executable orchestrator commands.
"""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType
from typing import Any

import structlog

from simpilot.errors import CommandMappingError
from simpilot.orchestrator.factory import CommandFactory
from simpilot.orchestrator.models import CommandKind, OrchestratorCommand
from simpilot.parser.models import ParseResult

logger = structlog.get_logger(__name__)

K = CommandKind

# Exact lookup first, then the first key contained in the command name, in
# insertion order. Canonical catalog names come first; the Spanish and
# shorthand aliases after them only matter for names coming from elsewhere.
COMMAND_KINDS: MappingProxyType[str, CommandKind] = MappingProxyType({
    # Canonical catalog names
    "boot simulator": K.BOOT_SIMULATOR,
    "shutdown simulator": K.SHUTDOWN_SIMULATOR,
    "list booted simulators": K.LIST_BOOTED_SIMULATORS,
    "list simulators": K.LIST_AVAILABLE_SIMULATORS,
    "create session": K.CREATE_SIMULATOR_SESSION,
    "end session": K.TERMINATE_SIMULATOR_SESSION,
    "focus simulator": K.FOCUS_SIMULATOR,
    "check simulator booted": K.IS_SIMULATOR_BOOTED,
    "install app": K.INSTALL_APP,
    "launch app": K.LAUNCH_APP,
    "terminate app": K.TERMINATE_APP,
    "uninstall app": K.UNINSTALL_APP,
    "list apps": K.LIST_APPS,
    "check app installed": K.IS_APP_INSTALLED,
    "tap": K.TAP,
    "swipe": K.SWIPE,
    "press device button": K.PRESS_BUTTON,
    "input text": K.INPUT_TEXT,
    "press key sequence": K.PRESS_KEY_SEQUENCE,
    "press key": K.PRESS_KEY,
    "describe elements": K.DESCRIBE_ELEMENTS,
    "describe point": K.DESCRIBE_POINT,
    "capture screen": K.TAKE_SCREENSHOT,
    "record video": K.START_VIDEO_RECORDING,
    "stop recording": K.STOP_VIDEO_RECORDING,
    "get logs": K.GET_SYSTEM_LOGS,
    "start debug": K.START_DEBUG_SESSION,
    "stop debug": K.STOP_DEBUG_SESSION,
    "debug status": K.GET_DEBUG_SESSION_STATUS,
    "list crash logs": K.LIST_CRASH_LOGS,
    "show crash log": K.GET_CRASH_LOG,
    "delete crash logs": K.DELETE_CRASH_LOGS,
    "install dylib": K.INSTALL_DYLIB,
    "open url": K.OPEN_URL,
    "clear keychain": K.CLEAR_KEYCHAIN,
    "set location": K.SET_LOCATION,
    "add media": K.ADD_MEDIA,
    "approve permissions": K.APPROVE_PERMISSIONS,
    "update contacts": K.UPDATE_CONTACTS,
    # Aliases
    "crear sesión": K.CREATE_SIMULATOR_SESSION,
    "crear simulador": K.CREATE_SIMULATOR_SESSION,
    "iniciar simulador": K.CREATE_SIMULATOR_SESSION,
    "terminar sesión": K.TERMINATE_SIMULATOR_SESSION,
    "cerrar simulador": K.TERMINATE_SIMULATOR_SESSION,
    "listar simuladores arrancados": K.LIST_BOOTED_SIMULATORS,
    "listar simuladores": K.LIST_AVAILABLE_SIMULATORS,
    "mostrar simuladores": K.LIST_AVAILABLE_SIMULATORS,
    "arrancar simulador": K.BOOT_SIMULATOR,
    "apagar simulador": K.SHUTDOWN_SIMULATOR,
    "instalar app": K.INSTALL_APP,
    "instalar aplicación": K.INSTALL_APP,
    "lanzar app": K.LAUNCH_APP,
    "abrir app": K.LAUNCH_APP,
    "iniciar app": K.LAUNCH_APP,
    "cerrar app": K.TERMINATE_APP,
    "terminar app": K.TERMINATE_APP,
    "tocar": K.TAP,
    "pulsar": K.TAP,
    "deslizar": K.SWIPE,
    "capturar pantalla": K.TAKE_SCREENSHOT,
    "screenshot": K.TAKE_SCREENSHOT,
    "captura": K.TAKE_SCREENSHOT,
    "logs de app": K.GET_APP_LOGS,
    "logs del sistema": K.GET_SYSTEM_LOGS,
    "logs": K.GET_SYSTEM_LOGS,
    "verificar simulador": K.IS_SIMULATOR_BOOTED,
    "comprobar simulador": K.IS_SIMULATOR_BOOTED,
    "verificar app": K.IS_APP_INSTALLED,
    "comprobar app": K.IS_APP_INSTALLED,
})

NUMERIC_PARAMETERS: MappingProxyType[CommandKind, tuple[str, ...]] = MappingProxyType({
    K.TAP: ("x", "y", "duration"),
    K.SWIPE: ("start_x", "start_y", "end_x", "end_y", "duration", "delta"),
    K.DESCRIBE_POINT: ("x", "y"),
    K.SET_LOCATION: ("latitude", "longitude"),
    K.PRESS_KEY: ("key_code", "duration"),
    K.PRESS_BUTTON: ("duration",),
    K.GET_SYSTEM_LOGS: ("limit",),
    K.GET_APP_LOGS: ("limit",),
})

# Free-text parameters: normalize() may have read "1234" or "true" as a
# number or bool, but the backend needs the text exactly as typed.
STRING_PARAMETERS: MappingProxyType[CommandKind, tuple[str, ...]] = MappingProxyType({
    K.CREATE_SIMULATOR_SESSION: ("device_name", "platform_version"),
    K.BOOT_SIMULATOR: ("udid",),
    K.SHUTDOWN_SIMULATOR: ("udid",),
    K.INSTALL_APP: ("app_path",),
    K.LAUNCH_APP: ("bundle_id",),
    K.TERMINATE_APP: ("bundle_id",),
    K.UNINSTALL_APP: ("bundle_id",),
    K.IS_APP_INSTALLED: ("bundle_id",),
    K.PRESS_BUTTON: ("button",),
    K.INPUT_TEXT: ("text",),
    K.TAKE_SCREENSHOT: ("output_path",),
    K.START_VIDEO_RECORDING: ("output_path",),
    K.STOP_VIDEO_RECORDING: ("recording_id",),
    K.GET_SYSTEM_LOGS: ("bundle_id",),
    K.GET_APP_LOGS: ("bundle_id",),
    K.START_DEBUG_SESSION: ("bundle_id",),
    K.LIST_CRASH_LOGS: ("bundle_id",),
    K.GET_CRASH_LOG: ("crash_name",),
    K.DELETE_CRASH_LOGS: ("bundle_id",),
    K.INSTALL_DYLIB: ("dylib_path",),
    K.OPEN_URL: ("url",),
    K.APPROVE_PERMISSIONS: ("bundle_id",),
    K.UPDATE_CONTACTS: ("db_path",),
})


def _to_number(value: Any) -> int | float:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, int | float):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def _as_bool(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


class CommandTranslator:
    """Maps a ParseResult onto a CommandKind and builds the command through the factory."""

    def __init__(
        self,
        factory: CommandFactory | None = None,
        kinds: dict[str, CommandKind] | None = None,
    ) -> None:
        self._factory = factory or CommandFactory()
        self._kinds = MappingProxyType(dict(kinds)) if kinds is not None else COMMAND_KINDS
        self._log = logger.bind(component="command_translator")

    def resolve_kind(self, command: str) -> CommandKind:
        """
        Find the kind for a parsed command name.

        Raises:
            CommandMappingError: If neither an exact nor a substring key matches.
        """
        name = command.lower()
        kind = self._kinds.get(name)
        if kind is not None:
            return kind
        for key, candidate in self._kinds.items():
            if key in name:
                return candidate
        raise CommandMappingError(command)

    def to_command(
        self,
        result: ParseResult,
        raw: ParseResult | None = None,
    ) -> OrchestratorCommand:
        """
        Build the command for a normalized parse result.

        ``raw`` is the same result before normalization; free-text parameters
        are taken from it verbatim when given.
        """
        kind = self.resolve_kind(result.command)
        parameters = self._convert_parameters(
            result.command,
            kind,
            result.parameters,
            raw.parameters if raw is not None else {},
        )

        # "get logs for <bundle>" is an app log request
        if kind is K.GET_SYSTEM_LOGS and parameters.get("bundle_id"):
            kind = K.GET_APP_LOGS

        command = self._factory.create_command(
            kind,
            parameters,
            f'Command generated from: "{result.original_text}"',
        )
        self._log.debug(
            "Translated instruction",
            command=result.command,
            kind=str(kind),
            command_id=command.id,
        )
        return command

    def _convert_parameters(
        self,
        command: str,
        kind: CommandKind,
        source: dict[str, Any],
        raw: dict[str, Any],
    ) -> dict[str, Any]:
        parameters = dict(source)

        for name in STRING_PARAMETERS.get(kind, ()):
            if parameters.get(name) is None:
                continue
            original = raw.get(name)
            parameters[name] = original if isinstance(original, str) else _as_text(parameters[name])

        coerce: dict[str, Callable[[Any], Any]] = {
            name: _to_number for name in NUMERIC_PARAMETERS.get(kind, ())
        }
        match kind:
            case K.CREATE_SIMULATOR_SESSION:
                coerce["autoboot"] = _as_bool
            case K.PRESS_KEY_SEQUENCE:
                coerce["key_codes"] = lambda codes: [int(_to_number(c)) for c in codes]
            case K.PRESS_KEY:
                coerce["key_code"] = lambda code: int(_to_number(code))
            case K.DELETE_CRASH_LOGS:
                coerce["all"] = _as_bool

        for name, convert in coerce.items():
            if parameters.get(name) is None:
                continue
            try:
                parameters[name] = convert(parameters[name])
            except (TypeError, ValueError) as e:
                raise CommandMappingError(
                    command, f"parameter {name!r} has invalid value {parameters[name]!r}"
                ) from e
        return parameters
