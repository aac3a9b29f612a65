"""Simulator lifecycle commands."""

from __future__ import annotations

from simpilot.catalog.base import UDID, CommandGroup, define, text, upper

EXAMPLE_UDID = "5A321B8F-4D85-4267-9F79-2F5C91D142C2"

# "start simulator <udid>" must be tried before "start simulator <device name>",
# and "list booted simulators" before "list simulators".
SIMULATOR_COMMANDS = CommandGroup(
    name="simulator",
    definitions=(
        define(
            "boot simulator",
            [
                rf"arrancar\s+(el\s+)?simulador\s+{UDID}",
                rf"bootear\s+(el\s+)?simulador\s+{UDID}",
                rf"boot\s+(the\s+)?simulator\s+{UDID}",
                rf"start\s+(the\s+)?simulator\s+{UDID}",
            ],
            "Boots a simulator by its UDID",
            required=["udid"],
            examples=[
                f"arrancar simulador {EXAMPLE_UDID}",
                f"bootear simulador {EXAMPLE_UDID}",
                f"boot simulator {EXAMPLE_UDID}",
                f"start simulator {EXAMPLE_UDID}",
            ],
            extractors={"udid": upper("udid")},
        ),
        define(
            "shutdown simulator",
            [
                rf"apagar\s+(el\s+)?simulador\s+{UDID}",
                rf"shutdown\s+(el\s+)?simulador\s+{UDID}",
                rf"shutdown\s+(the\s+)?simulator\s+{UDID}",
                rf"turn\s+off\s+(the\s+)?simulator\s+{UDID}",
            ],
            "Shuts down a simulator by its UDID",
            required=["udid"],
            examples=[
                f"apagar simulador {EXAMPLE_UDID}",
                f"shutdown simulador {EXAMPLE_UDID}",
                f"shutdown simulator {EXAMPLE_UDID}",
                f"turn off simulator {EXAMPLE_UDID}",
            ],
            extractors={"udid": upper("udid")},
        ),
        define(
            "list booted simulators",
            [
                r"listar\s+(los\s+)?simuladores\s+arrancados",
                r"mostrar\s+(los\s+)?simuladores\s+arrancados",
                r"qué\s+simuladores\s+están\s+arrancados",
                r"list\s+(all\s+)?booted\s+simulators",
                r"show\s+running\s+simulators",
                r"display\s+active\s+simulators",
            ],
            "Lists booted simulators",
            examples=[
                "listar simuladores arrancados",
                "mostrar simuladores arrancados",
                "qué simuladores están arrancados",
                "list booted simulators",
                "show running simulators",
                "display active simulators",
            ],
        ),
        define(
            "list simulators",
            [
                r"listar\s+(los\s+)?simuladores",
                r"mostrar\s+(los\s+)?simuladores",
                r"qué\s+simuladores\s+(hay|están\s+disponibles)",
                r"list\s+(all\s+)?simulators",
                r"show\s+(all\s+)?simulators",
                r"display\s+(all\s+)?simulators",
            ],
            "Lists available simulators",
            examples=[
                "listar simuladores",
                "mostrar simuladores",
                "qué simuladores hay",
                "list simulators",
                "show all simulators",
                "display simulators",
            ],
        ),
        define(
            "create session",
            [
                r"crear\s+(una\s+)?sesión(\s+de\s+simulador)?(\s+con\s+(?P<device_name>[^,]+))?",
                r"iniciar\s+(un\s+)?simulador(\s+(?P<device_name>[^,]+))?",
                r"create\s+(a\s+)?session(\s+with\s+(?P<device_name>[^,]+))?",
                r"start\s+(a\s+)?simulator(\s+(?P<device_name>[^,]+))?",
                r"launch\s+(a\s+)?simulator(\s+(?P<device_name>[^,]+))?",
            ],
            "Creates a new simulator session",
            optional=["device_name", "platform_version", "autoboot"],
            examples=[
                "crear sesión",
                "crear una sesión de simulador",
                "iniciar simulador iPhone 12",
                "create session with iPhone 12",
                "start simulator iPhone 13",
            ],
            extractors={"device_name": text("device_name")},
        ),
        define(
            "end session",
            [
                r"terminar\s+(la\s+)?sesión",
                r"cerrar\s+(el\s+)?simulador",
                r"end\s+(the\s+)?session",
                r"close\s+(the\s+)?simulator",
                r"terminate\s+(the\s+)?session",
            ],
            "Ends the current simulator session",
            optional=["session_id"],
            examples=[
                "terminar sesión",
                "cerrar simulador",
                "end session",
                "close simulator",
                "terminate session",
            ],
        ),
        define(
            "focus simulator",
            [
                r"enfocar\s+(el\s+)?simulador",
                r"focus\s+(el\s+)?simulador",
                r"traer\s+(el\s+)?simulador\s+al\s+frente",
                r"focus\s+(the\s+)?simulator",
                r"bring\s+(the\s+)?simulator\s+to\s+front",
            ],
            "Focuses the simulator window",
            optional=["session_id"],
            examples=[
                "enfocar simulador",
                "focus simulador",
                "traer simulador al frente",
                "focus simulator",
                "bring simulator to front",
            ],
        ),
        define(
            "check simulator booted",
            [
                r"verificar\s+(el\s+)?simulador",
                r"comprobar\s+(el\s+)?simulador",
                r"is\s+(the\s+)?simulator\s+booted",
                r"check\s+(the\s+)?simulator",
            ],
            "Checks whether the session simulator is booted",
            optional=["session_id"],
            examples=[
                "verificar simulador",
                "comprobar simulador",
                "is the simulator booted",
                "check simulator",
            ],
        ),
    ),
)
