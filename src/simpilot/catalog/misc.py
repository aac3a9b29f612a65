"""Miscellaneous device state commands: dylibs, URLs, keychain, location, media."""

from __future__ import annotations

from simpilot.catalog.base import TOKEN, CommandGroup, decimal, define, text, words

_NUMBER = r"-?\d+(?:\.\d+)?"
_LOCATION = rf"(?P<latitude>{_NUMBER})\s*,\s*(?P<longitude>{_NUMBER})"
_BUNDLE = rf"(?P<bundle_id>{TOKEN})"

MISC_COMMANDS = CommandGroup(
    name="misc",
    definitions=(
        define(
            "install dylib",
            [
                rf"instalar\s+dylib\s+(?P<dylib_path>{TOKEN})",
                rf"install\s+dylib\s+(?P<dylib_path>{TOKEN})",
                rf"add\s+dylib\s+(?P<dylib_path>{TOKEN})",
                rf"load\s+dylib\s+(?P<dylib_path>{TOKEN})",
            ],
            "Installs a dynamic library (.dylib)",
            required=["dylib_path"],
            optional=["session_id"],
            examples=[
                "instalar dylib /ruta/a/lib.dylib",
                "install dylib /tmp/library.dylib",
                "add dylib /path/to/lib.dylib",
                "load dylib /path/to/library.dylib",
            ],
            extractors={"dylib_path": text("dylib_path")},
        ),
        define(
            "open url",
            [
                r"abrir\s+url\s+(?P<url>\S+)",
                r"open\s+url\s+(?P<url>\S+)",
                r"navegar\s+a\s+(?P<url>\S+)",
                r"navigate\s+to\s+(?P<url>\S+)",
                r"browse\s+to\s+(?P<url>\S+)",
            ],
            "Opens a URL in the simulator",
            required=["url"],
            optional=["session_id"],
            examples=[
                "abrir url https://example.com",
                "open url https://google.com",
                "navegar a https://apple.com",
                "navigate to https://example.com",
                "browse to https://apple.com",
            ],
            extractors={"url": text("url")},
        ),
        define(
            "clear keychain",
            [
                r"limpiar\s+keychain",
                r"clear\s+keychain",
                r"borrar\s+keychain",
                r"reset\s+keychain",
                r"empty\s+keychain",
            ],
            "Clears the simulator keychain",
            optional=["session_id"],
            examples=[
                "limpiar keychain",
                "clear keychain",
                "borrar keychain",
                "reset keychain",
                "empty keychain",
            ],
        ),
        define(
            "set location",
            [
                rf"establecer\s+ubicación\s+{_LOCATION}",
                rf"set\s+location\s+{_LOCATION}",
                rf"cambiar\s+ubicación\s+a\s+{_LOCATION}",
                rf"update\s+location\s+{_LOCATION}",
                rf"change\s+location\s+to\s+{_LOCATION}",
            ],
            "Sets the simulator location",
            required=["latitude", "longitude"],
            optional=["session_id"],
            examples=[
                "establecer ubicación 37.7749, -122.4194",
                "set location 40.7128, -74.0060",
                "cambiar ubicación a 51.5074, -0.1278",
                "update location 48.8566, 2.3522",
                "change location to 35.6762, 139.6503",
            ],
            extractors={"latitude": decimal("latitude"), "longitude": decimal("longitude")},
        ),
        define(
            "add media",
            [
                r"añadir\s+media\s+(?P<media_paths>.+)",
                r"add\s+media\s+(?P<media_paths>.+)",
                r"importar\s+multimedia\s+(?P<media_paths>.+)",
                r"import\s+media\s+(?P<media_paths>.+)",
                r"upload\s+media\s+(?P<media_paths>.+)",
            ],
            "Adds media files to the simulator camera roll",
            required=["media_paths"],
            optional=["session_id"],
            examples=[
                "añadir media /ruta/imagen.jpg /ruta/video.mp4",
                "add media /tmp/photo.png",
                "importar multimedia /ruta/a/fotos/*.jpg",
                "import media /path/to/photos/*.jpg",
                "upload media /path/video.mp4",
            ],
            extractors={"media_paths": words("media_paths")},
        ),
        define(
            "approve permissions",
            [
                rf"aprobar\s+permisos\s+{_BUNDLE}\s+(?P<permissions>.+)",
                rf"approve\s+permissions\s+{_BUNDLE}\s+(?P<permissions>.+)",
                rf"dar\s+permisos\s+a\s+{_BUNDLE}\s+(?P<permissions>.+)",
                rf"grant\s+permissions\s+{_BUNDLE}\s+(?P<permissions>.+)",
                rf"allow\s+permissions\s+{_BUNDLE}\s+(?P<permissions>.+)",
            ],
            "Approves permissions for an application",
            required=["bundle_id", "permissions"],
            optional=["session_id"],
            examples=[
                "aprobar permisos com.example.app photos camera",
                "approve permissions com.apple.mobilesafari contacts",
                "dar permisos a com.example.app photos",
                "grant permissions com.example.app camera",
                "allow permissions com.example.app location",
            ],
            extractors={"bundle_id": text("bundle_id"), "permissions": words("permissions")},
        ),
        define(
            "update contacts",
            [
                rf"actualizar\s+contactos\s+(?P<db_path>{TOKEN})",
                rf"update\s+contacts\s+(?P<db_path>{TOKEN})",
                rf"importar\s+contactos\s+(?P<db_path>{TOKEN})",
                rf"import\s+contacts\s+(?P<db_path>{TOKEN})",
                rf"load\s+contacts\s+(?P<db_path>{TOKEN})",
            ],
            "Updates the simulator contacts database",
            required=["db_path"],
            optional=["session_id"],
            examples=[
                "actualizar contactos /ruta/a/contactos.sqlite",
                "update contacts /tmp/contacts.db",
                "importar contactos /ruta/contacts.sqlite",
                "import contacts /path/to/contacts.db",
                "load contacts /path/contacts.sqlite",
            ],
            extractors={"db_path": text("db_path")},
        ),
    ),
)
