"""
Tests for the parser-to-command translator and the command factory.
"""

from __future__ import annotations

import pytest

from simpilot.adapters.translator import COMMAND_KINDS, CommandTranslator
from simpilot.errors import CommandMappingError
from simpilot.orchestrator.factory import CommandFactory
from simpilot.orchestrator.models import (
    CommandKind,
    ConditionalCommand,
    OrchestratorCommand,
    SequenceCommand,
)
from simpilot.parser.models import ParseResult
from simpilot.parser.parser import InstructionParser
from simpilot.parser.registry import CommandRegistry


def _result(command: str, original_text: str | None = None, **parameters: object) -> ParseResult:
    return ParseResult(command=command, parameters=parameters, original_text=original_text or command)


@pytest.fixture
def translator(factory: CommandFactory) -> CommandTranslator:
    return CommandTranslator(factory)


class TestKindResolution:
    """Tests for name -> kind lookup."""

    @pytest.mark.parametrize(
        "name", [d.name for d in CommandRegistry().definitions()]
    )
    def test_every_catalog_name_maps_exactly(self, translator: CommandTranslator, name: str) -> None:
        """Test each canonical catalog name is a table key."""
        assert name in COMMAND_KINDS
        assert translator.resolve_kind(name) is COMMAND_KINDS[name]

    def test_exact_lookup_is_case_insensitive(self, translator: CommandTranslator) -> None:
        """Test names are lowercased before lookup."""
        assert translator.resolve_kind("Launch App") is CommandKind.LAUNCH_APP

    def test_spanish_alias(self, translator: CommandTranslator) -> None:
        """Test alias keys resolve too."""
        assert translator.resolve_kind("arrancar simulador") is CommandKind.BOOT_SIMULATOR
        assert translator.resolve_kind("listar simuladores arrancados") is (
            CommandKind.LIST_BOOTED_SIMULATORS
        )

    def test_substring_fallback(self, translator: CommandTranslator) -> None:
        """Test the first contained key wins when there is no exact match."""
        assert translator.resolve_kind("double tap") is CommandKind.TAP

    def test_substring_follows_insertion_order(self) -> None:
        """Test iteration order decides between several contained keys."""
        translator = CommandTranslator(kinds={"app": CommandKind.LIST_APPS, "launch": CommandKind.LAUNCH_APP})

        assert translator.resolve_kind("launch my app") is CommandKind.LIST_APPS

    def test_unmapped_raises(self, translator: CommandTranslator) -> None:
        """Test unknown names raise a mapping error naming the command."""
        with pytest.raises(CommandMappingError, match='Could not map command "fly"'):
            translator.resolve_kind("fly")


class TestParameterCoercion:
    """Tests for kind-specific parameter conversion."""

    def test_tap_coordinates_numeric(self, translator: CommandTranslator) -> None:
        """Test tap coordinates are forced to numbers."""
        command = translator.to_command(_result("tap", x="100", y="200.5"))

        assert command.kind is CommandKind.TAP
        assert command.parameters == {"x": 100, "y": 200.5}

    def test_swipe_coordinates_and_duration(self, translator: CommandTranslator) -> None:
        """Test swipe start/end coordinates and duration are numeric."""
        command = translator.to_command(
            _result("swipe", start_x="1", start_y="2", end_x="3", end_y="4", duration="500")
        )

        assert command.parameters == {
            "start_x": 1,
            "start_y": 2,
            "end_x": 3,
            "end_y": 4,
            "duration": 500,
        }

    @pytest.mark.parametrize(("raw", "expected"), [("TRUE", True), ("true", True), ("no", False)])
    def test_autoboot_string_to_bool(
        self, translator: CommandTranslator, raw: str, expected: bool
    ) -> None:
        """Test autoboot compares case-insensitively to "true"."""
        command = translator.to_command(_result("create session", autoboot=raw))

        assert command.kind is CommandKind.CREATE_SIMULATOR_SESSION
        assert command.parameters["autoboot"] is expected

    def test_non_numeric_coordinate_raises(self, translator: CommandTranslator) -> None:
        """Test an unconvertible numeric parameter is a mapping error."""
        with pytest.raises(CommandMappingError, match="'x'"):
            translator.to_command(_result("tap", x="left", y="10"))

    def test_other_kinds_pass_through(self, translator: CommandTranslator) -> None:
        """Test parameters of kinds without coercion are unchanged."""
        command = translator.to_command(_result("launch app", bundle_id="com.example.app"))

        assert command.parameters == {"bundle_id": "com.example.app"}

    def test_get_logs_for_bundle_is_app_logs(self, translator: CommandTranslator) -> None:
        """Test log requests naming a bundle become app log requests."""
        with_bundle = translator.to_command(_result("get logs", bundle_id="com.example.app"))
        without = translator.to_command(_result("get logs"))

        assert with_bundle.kind is CommandKind.GET_APP_LOGS
        assert without.kind is CommandKind.GET_SYSTEM_LOGS

    def test_description_references_original_text(self, translator: CommandTranslator) -> None:
        """Test commands carry the instruction they came from."""
        command = translator.to_command(_result("tap", "tap en 100, 200", x=100, y=200))

        assert command.description == 'Command generated from: "tap en 100, 200"'

    def test_full_pipeline_types(self, translator: CommandTranslator, parser: InstructionParser) -> None:
        """Test parse -> normalize -> translate keeps numeric coordinates."""
        parsed = parser.normalize(parser.parse("tap en 100, 200"))
        command = translator.to_command(parsed)

        assert command.kind is CommandKind.TAP
        assert command.parameters == {"x": 100, "y": 200}
        assert isinstance(command.parameters["x"], int)

    def test_free_text_taken_from_raw(
        self, translator: CommandTranslator, parser: InstructionParser
    ) -> None:
        """Test free text keeps leading zeros normalization would have dropped."""
        parsed = parser.parse("input text 0123")
        command = translator.to_command(parser.normalize(parsed), raw=parsed)

        assert command.kind is CommandKind.INPUT_TEXT
        assert command.parameters == {"text": "0123"}

    def test_free_text_without_raw(self, translator: CommandTranslator) -> None:
        """Test already-coerced free text is turned back into a string."""
        typed = translator.to_command(_result("input text", text=True))
        crash = translator.to_command(_result("show crash log", crash_name=42))

        assert typed.parameters == {"text": "true"}
        assert crash.parameters == {"crash_name": "42"}


class TestCommandFactory:
    """Tests for CommandFactory."""

    def test_defaults(self, factory: CommandFactory) -> None:
        """Test default timeout, retries and fresh ids."""
        first = factory.create_command(CommandKind.TAP, {"x": 1, "y": 2})
        second = factory.create_command(CommandKind.TAP, {"x": 1, "y": 2})

        assert first.timeout_ms == 30000
        assert first.retries == 1
        assert first.id != second.id

    def test_parameters_are_copied(self, factory: CommandFactory) -> None:
        """Test the factory does not alias the caller's dict."""
        params = {"x": 1, "y": 2}
        command = factory.create_command(CommandKind.TAP, params)
        params["x"] = 99

        assert command.parameters["x"] == 1

    def test_sequence(self, factory: CommandFactory) -> None:
        """Test sequences default to stop_on_error and describe their size."""
        children = [factory.create_command(CommandKind.TAP, {"x": i, "y": i}) for i in range(3)]

        sequence = factory.create_sequence(children)

        assert isinstance(sequence, SequenceCommand)
        assert sequence.kind is CommandKind.SEQUENCE
        assert sequence.stop_on_error is True
        assert sequence.commands == children
        assert sequence.description == "Sequence of 3 commands"

    def test_conditional(self, factory: CommandFactory) -> None:
        """Test conditional wiring without a false branch."""
        if_true = factory.create_command(CommandKind.TAP, {"x": 1, "y": 1})

        conditional = factory.create_conditional(lambda ctx: True, if_true)

        assert isinstance(conditional, ConditionalCommand)
        assert conditional.if_true is if_true
        assert conditional.if_false is None
        assert conditional.description == "Conditional command"

    def test_to_dict_skips_callables(self, factory: CommandFactory) -> None:
        """Test serialization drops predicates and nests children."""
        if_true = factory.create_command(CommandKind.TAP, {"x": 1, "y": 1})
        conditional = factory.create_conditional(lambda ctx: True, if_true)

        data = conditional.to_dict()

        assert data["kind"] == "conditional"
        assert "condition" not in data["parameters"]
        assert data["parameters"]["if_true"]["id"] == if_true.id

    def test_sequence_kind_is_checked(self) -> None:
        """Test a SequenceCommand cannot carry another kind."""
        with pytest.raises(ValueError):
            SequenceCommand(kind=CommandKind.TAP, parameters={}, id="x")

    def test_plain_command_is_not_composite(self, factory: CommandFactory) -> None:
        command: OrchestratorCommand = factory.create_command(CommandKind.TAP, {})
        assert command.is_composite is False
