"""Debug server and crash log commands."""

from __future__ import annotations

from simpilot.catalog.base import TOKEN, CommandGroup, define, text

_BUNDLE = rf"(?P<bundle_id>{TOKEN})"
_CRASH = rf"(?P<crash_name>{TOKEN})"

DEBUG_COMMANDS = CommandGroup(
    name="debug",
    definitions=(
        define(
            "start debug",
            [
                rf"iniciar\s+debug\s+{_BUNDLE}",
                rf"start\s+debug\s+{_BUNDLE}",
                rf"debug\s+app\s+{_BUNDLE}",
                rf"begin\s+debug\s+{_BUNDLE}",
                rf"launch\s+debug\s+{_BUNDLE}",
            ],
            "Starts a debug session for an application",
            required=["bundle_id"],
            optional=["session_id"],
            examples=[
                "iniciar debug com.example.app",
                "start debug com.apple.mobilesafari",
                "debug app com.example.app",
                "begin debug com.example.app",
                "launch debug com.apple.mobilesafari",
            ],
            extractors={"bundle_id": text("bundle_id")},
        ),
        define(
            "stop debug",
            [
                r"detener\s+debug",
                r"parar\s+debug",
                r"stop\s+debug",
                r"end\s+debug",
                r"terminate\s+debug",
            ],
            "Stops a debug session",
            optional=["session_id"],
            examples=["detener debug", "parar debug", "stop debug", "end debug", "terminate debug"],
        ),
        define(
            "debug status",
            [
                r"estado\s+debug",
                r"status\s+debug",
                r"información\s+debug",
                r"debug\s+status",
                r"get\s+debug\s+status",
            ],
            "Gets the debug session status",
            optional=["session_id"],
            examples=[
                "estado debug",
                "status debug",
                "información debug",
                "debug status",
                "get debug status",
            ],
        ),
        define(
            "list crash logs",
            [
                r"listar\s+crash\s+logs",
                r"mostrar\s+crash\s+logs",
                r"list\s+crash\s+logs",
                r"show\s+crash\s+logs",
                r"display\s+crash\s+logs",
            ],
            "Lists available crash logs",
            optional=["bundle_id", "session_id"],
            examples=[
                "listar crash logs",
                "mostrar crash logs",
                "list crash logs",
                "show crash logs",
                "display crash logs",
            ],
        ),
        define(
            "show crash log",
            [
                rf"mostrar\s+crash\s+log\s+{_CRASH}",
                rf"ver\s+crash\s+log\s+{_CRASH}",
                rf"show\s+crash\s+log\s+{_CRASH}",
                rf"display\s+crash\s+log\s+{_CRASH}",
                rf"view\s+crash\s+log\s+{_CRASH}",
            ],
            "Gets the content of a crash log",
            required=["crash_name"],
            optional=["session_id"],
            examples=[
                "mostrar crash log crash_2023-01-01",
                "ver crash log app_crash_123",
                "show crash log system_crash",
                "display crash log error_log_123",
                "view crash log app_crash_456",
            ],
            extractors={"crash_name": text("crash_name")},
        ),
        define(
            "delete crash logs",
            [
                r"eliminar\s+crash\s+logs",
                r"borrar\s+crash\s+logs",
                r"delete\s+crash\s+logs",
                r"remove\s+crash\s+logs",
                r"clear\s+crash\s+logs",
            ],
            "Deletes crash logs",
            optional=["bundle_id", "session_id", "all"],
            examples=[
                "eliminar crash logs",
                "borrar crash logs",
                "delete crash logs",
                "remove crash logs",
                "clear crash logs",
            ],
        ),
    ),
)
