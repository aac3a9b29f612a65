"""
End-to-end tests: instruction text in, backend call and result envelope out.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from simpilot.backend.interface import ButtonType
from simpilot.orchestrator.executor import Orchestrator


class TestInstructionPipeline:
    """Tests for Orchestrator.process_instruction against a stub backend."""

    @pytest.mark.asyncio
    async def test_tap_reaches_backend(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        """Test a tap instruction results in one backend tap with numeric coordinates."""
        result = await orchestrator.process_instruction("tap en 100, 200")

        assert result.success is True
        assert result.data == {"x": 100, "y": 200}
        mock_backend.tap.assert_awaited_once_with("", 100, 200, duration=None)

    @pytest.mark.asyncio
    async def test_unrecognized_never_reaches_backend(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        """Test an unknown instruction fails without any backend interaction."""
        result = await orchestrator.process_instruction("invalid command here")

        assert result.success is False
        assert "invalid command here" in result.error
        assert mock_backend.method_calls == []

    @pytest.mark.asyncio
    async def test_spanish_launch(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        result = await orchestrator.process_instruction("lanzar app com.example.app")

        assert result.success is True
        mock_backend.launch_app.assert_awaited_once_with("", "com.example.app")

    @pytest.mark.asyncio
    async def test_list_simulators(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        result = await orchestrator.process_instruction("list simulators")

        assert result.success is True
        assert result.data == []
        mock_backend.list_available_simulators.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_swipe_with_duration(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        await orchestrator.process_instruction("swipe from 100, 200 to 300, 400 with duration 500")

        mock_backend.swipe.assert_awaited_once_with(
            "", 100, 200, 300, 400, duration=500, delta=None
        )

    @pytest.mark.asyncio
    async def test_device_button(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        result = await orchestrator.process_instruction("press device button home")

        assert result.data == {"button": "HOME"}
        mock_backend.press_button.assert_awaited_once_with("", ButtonType.HOME, duration=None)

    @pytest.mark.asyncio
    async def test_key_sequence(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        await orchestrator.process_instruction("press key sequence 4 5 6")

        mock_backend.press_key_sequence.assert_awaited_once_with("", [4, 5, 6])

    @pytest.mark.asyncio
    async def test_app_logs_for_bundle(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        mock_backend.get_app_logs.return_value = ["line"]

        result = await orchestrator.process_instruction("get logs for com.example.app")

        assert result.data == ["line"]
        mock_backend.get_app_logs.assert_awaited_once_with("", "com.example.app", limit=None)
        mock_backend.get_system_logs.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_backend_error_is_result(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        """Test backend exceptions come back as failed results."""
        mock_backend.launch_app.side_effect = RuntimeError("Session not found: x")

        result = await orchestrator.process_instruction("launch app com.example.app")

        assert result.success is False
        assert result.error == "Session not found: x"

    @pytest.mark.asyncio
    async def test_result_envelope(self, orchestrator: Orchestrator) -> None:
        result = await orchestrator.process_instruction("tap en 1, 2")

        payload = result.to_dict()

        assert payload["success"] is True
        assert payload["data"] == {"x": 1, "y": 2}
        assert "error" not in payload
        assert "timestamp" in payload

    @pytest.mark.asyncio
    async def test_numeric_text_stays_text(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        """Test digits typed as text reach the backend as the same string."""
        result = await orchestrator.process_instruction("input text 1234")

        assert result.success is True
        mock_backend.input_text.assert_awaited_once_with("", "1234")
        assert isinstance(mock_backend.input_text.await_args.args[1], str)

    @pytest.mark.asyncio
    async def test_boolean_word_stays_text(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        result = await orchestrator.process_instruction("type text true")

        assert result.success is True
        mock_backend.input_text.assert_awaited_once_with("", "true")

    @pytest.mark.asyncio
    async def test_numeric_crash_name(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        mock_backend.get_crash_log.return_value = "log body"

        result = await orchestrator.process_instruction("show crash log 42")

        assert result.success is True
        assert result.data == "log body"
        mock_backend.get_crash_log.assert_awaited_once_with("", "42")
        assert isinstance(mock_backend.get_crash_log.await_args.args[1], str)

    @pytest.mark.asyncio
    async def test_numeric_device_name(
        self, orchestrator: Orchestrator, mock_backend: AsyncMock
    ) -> None:
        result = await orchestrator.process_instruction("start simulator 15")

        assert result.success is True
        assert orchestrator.get_active_session_id() == "session-1"
        kwargs = mock_backend.create_simulator_session.await_args.kwargs
        assert kwargs["device_name"] == "15"
