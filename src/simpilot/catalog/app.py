"""Application lifecycle commands."""

from __future__ import annotations

from simpilot.catalog.base import TOKEN, CommandGroup, define, text

_BUNDLE = rf"(?P<bundle_id>{TOKEN})"
_PATH = rf"(?P<app_path>{TOKEN})"

APP_COMMANDS = CommandGroup(
    name="app",
    definitions=(
        define(
            "install app",
            [
                rf"instalar\s+(la\s+)?app(\s+en\s+la\s+ruta)?\s+{_PATH}",
                rf"instalar\s+(la\s+)?aplicación(\s+en\s+la\s+ruta)?\s+{_PATH}",
                rf"install\s+(the\s+)?app(\s+at)?\s+{_PATH}",
                rf"install\s+(the\s+)?application(\s+at)?\s+{_PATH}",
            ],
            "Installs an application on the simulator",
            required=["app_path"],
            optional=["session_id"],
            examples=[
                "instalar app /ruta/a/la/app.ipa",
                "instalar la aplicación /ruta/a/la/app.app",
                "install app /path/to/app.ipa",
                "install application /path/to/app.app",
            ],
            extractors={"app_path": text("app_path")},
        ),
        define(
            "launch app",
            [
                rf"lanzar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"abrir\s+(la\s+)?app\s+{_BUNDLE}",
                rf"iniciar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"launch\s+(the\s+)?app\s+{_BUNDLE}",
                rf"open\s+(the\s+)?app\s+{_BUNDLE}",
                rf"start\s+(the\s+)?app\s+{_BUNDLE}",
            ],
            "Launches an application on the simulator",
            required=["bundle_id"],
            optional=["session_id"],
            examples=[
                "lanzar app com.example.app",
                "abrir app com.apple.mobilesafari",
                "launch app com.example.app",
                "open app com.apple.mobilesafari",
            ],
            extractors={"bundle_id": text("bundle_id")},
        ),
        define(
            "terminate app",
            [
                rf"terminar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"cerrar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"matar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"terminate\s+(the\s+)?app\s+{_BUNDLE}",
                rf"close\s+(the\s+)?app\s+{_BUNDLE}",
                rf"kill\s+(the\s+)?app\s+{_BUNDLE}",
            ],
            "Terminates a running application",
            required=["bundle_id"],
            optional=["session_id"],
            examples=[
                "terminar app com.example.app",
                "cerrar app com.apple.mobilesafari",
                "matar app com.example.app",
                "terminate app com.example.app",
                "close app com.apple.mobilesafari",
                "kill app com.example.app",
            ],
            extractors={"bundle_id": text("bundle_id")},
        ),
        define(
            "uninstall app",
            [
                rf"desinstalar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"eliminar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"borrar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"uninstall\s+(the\s+)?app\s+{_BUNDLE}",
                rf"remove\s+(the\s+)?app\s+{_BUNDLE}",
                rf"delete\s+(the\s+)?app\s+{_BUNDLE}",
            ],
            "Uninstalls an application",
            required=["bundle_id"],
            optional=["session_id"],
            examples=[
                "desinstalar app com.example.app",
                "eliminar app com.apple.mobilesafari",
                "borrar app com.example.app",
                "uninstall app com.example.app",
                "remove app com.apple.mobilesafari",
                "delete app com.example.app",
            ],
            extractors={"bundle_id": text("bundle_id")},
        ),
        define(
            "list apps",
            [
                r"listar\s+(las\s+)?apps",
                r"mostrar\s+(las\s+)?apps",
                r"qué\s+apps\s+(hay|están\s+instaladas)",
                r"list\s+(the\s+)?apps",
                r"show\s+(the\s+)?apps",
                r"what\s+apps\s+(are\s+there|are\s+installed)",
            ],
            "Lists installed applications",
            optional=["session_id"],
            examples=[
                "listar apps",
                "mostrar apps",
                "qué apps hay",
                "list apps",
                "show apps",
                "what apps are installed",
            ],
        ),
        define(
            "check app installed",
            [
                rf"verificar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"comprobar\s+(la\s+)?app\s+{_BUNDLE}",
                rf"is\s+(the\s+)?app\s+{_BUNDLE}\s+installed",
                rf"check\s+(if\s+)?(the\s+)?app\s+{_BUNDLE}",
            ],
            "Checks whether an application is installed",
            required=["bundle_id"],
            optional=["session_id"],
            examples=[
                "verificar app com.example.app",
                "comprobar app com.apple.mobilesafari",
                "is app com.example.app installed",
                "check app com.example.app",
            ],
            extractors={"bundle_id": text("bundle_id")},
        ),
    ),
)
