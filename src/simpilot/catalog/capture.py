"""Screen capture, video recording and log commands."""

from __future__ import annotations

from simpilot.catalog.base import TOKEN, CommandGroup, define, text

_OUTPUT = rf"(?P<output_path>{TOKEN})"
_BUNDLE = rf"(?P<bundle_id>{TOKEN})"

CAPTURE_COMMANDS = CommandGroup(
    name="capture",
    definitions=(
        define(
            "capture screen",
            [
                rf"capturar\s+(la\s+)?pantalla(\s+en\s+{_OUTPUT})?",
                rf"tomar\s+(una\s+)?captura(\s+en\s+{_OUTPUT})?",
                rf"capture\s+(the\s+)?screen(\s+to\s+{_OUTPUT})?",
                # "take screenshot to x" must not fall through to the bare form
                rf"take\s+(a\s+)?screenshot(\s+to\s+{_OUTPUT})?",
                rf"screenshot(\s+(en|to)\s+{_OUTPUT})?",
            ],
            "Captures a screenshot of the simulator",
            optional=["output_path", "session_id"],
            examples=[
                "capturar pantalla",
                "screenshot en /ruta/captura.png",
                "tomar una captura",
                "capture screen",
                "take screenshot to /path/capture.png",
            ],
            extractors={"output_path": text("output_path")},
        ),
        define(
            "record video",
            [
                rf"grabar\s+video\s+{_OUTPUT}",
                rf"record\s+video\s+{_OUTPUT}",
                rf"iniciar\s+grabación\s+de\s+video\s+{_OUTPUT}",
                rf"start\s+recording\s+video\s+{_OUTPUT}",
                rf"begin\s+video\s+recording\s+{_OUTPUT}",
            ],
            "Starts video recording of the simulator",
            required=["output_path"],
            optional=["session_id"],
            examples=[
                "grabar video /ruta/video.mp4",
                "record video /tmp/captura.mp4",
                "iniciar grabación de video /ruta/salida.mp4",
                "start recording video /path/output.mp4",
                "begin video recording /path/video.mp4",
            ],
            extractors={"output_path": text("output_path")},
        ),
        define(
            "stop recording",
            [
                r"detener\s+grabación(\s+de\s+video)?",
                r"parar\s+grabación(\s+de\s+video)?",
                r"stop\s+recording",
                r"end\s+recording",
                r"stop\s+video\s+recording",
            ],
            "Stops video recording of the simulator",
            optional=["recording_id", "session_id"],
            examples=[
                "detener grabación",
                "parar grabación de video",
                "stop recording",
                "end recording",
                "stop video recording",
            ],
        ),
        define(
            "get logs",
            [
                rf"obtener\s+logs(\s+de\s+{_BUNDLE})?",
                rf"mostrar\s+logs(\s+de\s+{_BUNDLE})?",
                rf"get\s+logs(\s+for\s+{_BUNDLE})?",
                rf"show\s+logs(\s+for\s+{_BUNDLE})?",
                rf"display\s+logs(\s+for\s+{_BUNDLE})?",
            ],
            "Gets system logs or the logs of a specific application",
            optional=["bundle_id", "limit", "session_id"],
            examples=[
                "obtener logs",
                "mostrar logs de com.example.app",
                "get logs for com.apple.mobilesafari",
                "show logs",
                "display logs for com.example.app",
            ],
            extractors={"bundle_id": text("bundle_id")},
        ),
    ),
)
