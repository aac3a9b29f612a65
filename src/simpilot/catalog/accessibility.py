"""Accessibility inspection commands."""

from __future__ import annotations

from simpilot.catalog.base import COORDS, CommandGroup, define, integer

ACCESSIBILITY_COMMANDS = CommandGroup(
    name="accessibility",
    definitions=(
        define(
            "describe elements",
            [
                r"describir\s+(todos\s+los\s+)?elementos",
                r"describe\s+all\s+elements",
                r"mostrar\s+elementos\s+de\s+accesibilidad",
            ],
            "Describes all accessibility elements on the screen",
            optional=["session_id"],
            examples=[
                "describir todos los elementos",
                "describe all elements",
                "mostrar elementos de accesibilidad",
            ],
        ),
        define(
            "describe point",
            [
                rf"describir\s+punto\s+{COORDS}",
                rf"describe\s+point\s+{COORDS}",
                rf"qué\s+hay\s+en\s+{COORDS}",
            ],
            "Describes the accessibility element at a specific point",
            required=["x", "y"],
            optional=["session_id"],
            examples=[
                "describir punto 100, 200",
                "describe point 150, 300",
                "qué hay en 200, 400",
            ],
            extractors={"x": integer("x"), "y": integer("y")},
        ),
    ),
)
