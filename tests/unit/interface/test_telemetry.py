"""Unit tests for ProjectTelemetry."""
from unittest.mock import MagicMock
from markup_style_linter.interface.telemetry import ProjectTelemetry


def test_handshake_prints_banner():
    tel = ProjectTelemetry("Test", "blue", "Hello")
    tel.console = MagicMock()
    tel.logger = MagicMock()
    tel.handshake()
    tel.console.print.assert_called_once_with("[bold blue]Test[/] [dim]Hello[/]")
    tel.logger.info.assert_called_once_with("%s: %s", "Test", "Hello")


def test_step_prints_and_logs():
    tel = ProjectTelemetry("Test", "blue", "Hello")
    tel.console = MagicMock()
    tel.logger = MagicMock()
    tel.step("Done")
    tel.console.print.assert_called_once_with("[blue]>[/] Done")
    tel.logger.info.assert_called_once_with("Done")


def test_quiet_mode_only_logs_steps():
    tel = ProjectTelemetry("Test", quiet=True)
    tel.console = MagicMock()
    tel.logger = MagicMock()
    tel.handshake()
    tel.step("Done")
    tel.console.print.assert_not_called()
    assert tel.logger.info.call_count == 2


def test_error_prints_and_logs():
    tel = ProjectTelemetry("Test", "blue", "Hello")
    tel.console = MagicMock()
    tel.logger = MagicMock()
    tel.error("Failed")
    tel.logger.error.assert_called_once_with("Failed")
    tel.console.print.assert_called_once_with("[bold red]error:[/] Failed")


def test_markup_in_messages_is_escaped():
    tel = ProjectTelemetry("Test")
    tel.console = MagicMock()
    tel.logger = MagicMock()
    tel.warning("Path not found: [site]")
    tel.console.print.assert_called_once_with("[yellow]warning:[/] Path not found: \\[site]")
    tel.logger.warning.assert_called_once_with("Path not found: [site]")


def test_debug_logs():
    tel = ProjectTelemetry("Test", "blue", "Hello")
    tel.console = MagicMock()
    tel.logger = MagicMock()
    tel.debug("Detail")
    tel.logger.debug.assert_called_once_with("Detail")
    tel.console.print.assert_not_called()
