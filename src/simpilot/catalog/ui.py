"""UI interaction commands: taps, swipes, hardware buttons and keyboard input."""

from __future__ import annotations

from simpilot.catalog.base import COORDS, CommandGroup, define, integer, integers, text, upper

BUTTONS = ("APPLE_PAY", "HOME", "LOCK", "SIDE_BUTTON", "SIRI")
_BUTTON = rf"(?P<button>{'|'.join(b.lower() for b in BUTTONS)})"
_SWIPE = (
    r"(?P<start_x>\d+)\s*,\s*(?P<start_y>\d+)\s+{to}\s+(?P<end_x>\d+)\s*,\s*(?P<end_y>\d+)"
)

UI_COMMANDS = CommandGroup(
    name="ui",
    definitions=(
        define(
            "tap",
            [
                rf"tap(\s+(at|en))?\s+{COORDS}",
                rf"tocar(\s+en)?\s+{COORDS}",
                rf"pulsar(\s+en)?\s+{COORDS}",
            ],
            "Performs a tap at the specified coordinates",
            required=["x", "y"],
            optional=["session_id", "duration"],
            examples=[
                "tap en 100, 200",
                "tocar 150, 300",
                "pulsar en 200, 400",
                "tap at 100, 200",
                "tap 150, 300",
            ],
            extractors={"x": integer("x"), "y": integer("y")},
        ),
        define(
            "swipe",
            [
                r"swipe\s+(from|desde)\s+"
                + _SWIPE.format(to="(to|hasta)")
                + r"(\s+(with|con)\s+(duration|duración)\s+(?P<duration>\d+))?",
                r"deslizar\s+desde\s+"
                + _SWIPE.format(to="hasta")
                + r"(\s+con\s+duración\s+(?P<duration>\d+))?",
            ],
            "Performs a swipe from one point to another",
            required=["start_x", "start_y", "end_x", "end_y"],
            optional=["duration", "delta", "session_id"],
            examples=[
                "swipe desde 100, 200 hasta 300, 400",
                "deslizar desde 150, 300 hasta 150, 100 con duración 500",
                "swipe from 100, 200 to 300, 400",
                "swipe from 150, 300 to 150, 100 with duration 500",
            ],
            extractors={
                "start_x": integer("start_x"),
                "start_y": integer("start_y"),
                "end_x": integer("end_x"),
                "end_y": integer("end_y"),
                "duration": integer("duration"),
            },
        ),
        define(
            "press device button",
            [
                rf"presionar\s+(el\s+)?botón\s+del\s+dispositivo\s+{_BUTTON}",
                rf"pulsar\s+(el\s+)?botón\s+del\s+dispositivo\s+{_BUTTON}",
                rf"presionar\s+(el\s+)?botón\s+físico\s+{_BUTTON}",
                rf"press\s+(the\s+)?device\s+button\s+{_BUTTON}",
                rf"push\s+(the\s+)?device\s+button\s+{_BUTTON}",
                rf"tap\s+(the\s+)?device\s+button\s+{_BUTTON}",
            ],
            "Presses a hardware device button",
            required=["button"],
            optional=["duration", "session_id"],
            examples=[
                "presionar botón del dispositivo HOME",
                "pulsar botón del dispositivo SIRI",
                "presionar botón físico HOME",
                "press device button HOME",
                "push device button SIRI",
                "tap device button LOCK",
            ],
            extractors={"button": upper("button")},
        ),
        define(
            "input text",
            [
                r"introducir\s+texto\s+(?P<text>.+)",
                r"escribir\s+texto\s+(?P<text>.+)",
                r"input\s+text\s+(?P<text>.+)",
                r"type\s+text\s+(?P<text>.+)",
                r"enter\s+text\s+(?P<text>.+)",
            ],
            "Inputs text in the simulator",
            required=["text"],
            optional=["session_id"],
            examples=[
                "introducir texto Hola mundo",
                "escribir texto Prueba de texto",
                "input text Hello world",
                "type text Test message",
                "enter text Hello",
            ],
            extractors={"text": text("text")},
        ),
        define(
            "press key",
            [
                r"presionar\s+(la\s+)?tecla\s+(?P<key_code>\d+)",
                r"pulsar\s+(la\s+)?tecla\s+(?P<key_code>\d+)",
                r"press\s+key\s+(?P<key_code>\d+)",
                r"hit\s+key\s+(?P<key_code>\d+)",
                r"type\s+key\s+(?P<key_code>\d+)",
            ],
            "Presses a specific key by its code",
            required=["key_code"],
            optional=["duration", "session_id"],
            examples=[
                "presionar tecla 4",
                "pulsar la tecla 65",
                "press key 4",
                "hit key 65",
                "type key 13",
            ],
            extractors={"key_code": integer("key_code")},
        ),
        define(
            "press key sequence",
            [
                r"presionar\s+secuencia\s+de\s+teclas\s+(?P<key_codes>[\d\s]+)",
                r"pulsar\s+secuencia\s+de\s+teclas\s+(?P<key_codes>[\d\s]+)",
                r"press\s+key\s+sequence\s+(?P<key_codes>[\d\s]+)",
                r"type\s+key\s+sequence\s+(?P<key_codes>[\d\s]+)",
                r"enter\s+key\s+sequence\s+(?P<key_codes>[\d\s]+)",
            ],
            "Presses a sequence of keys",
            required=["key_codes"],
            optional=["session_id"],
            examples=[
                "presionar secuencia de teclas 4 5 6",
                "pulsar secuencia de teclas 65 66 67",
                "press key sequence 4 5 6",
                "type key sequence 65 66 67",
                "enter key sequence 13 14 15",
            ],
            extractors={"key_codes": integers("key_codes")},
        ),
    ),
)
