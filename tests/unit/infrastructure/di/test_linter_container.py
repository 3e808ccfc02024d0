"""Unit tests for LinterContainer and the composition root."""

from unittest.mock import MagicMock, patch

import pytest

from markup_style_linter.infrastructure.config_file_loader import ConfigFileLoader
from markup_style_linter.infrastructure.di.container import LinterContainer
from markup_style_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from markup_style_linter.infrastructure.parsers import DocumentParser
from markup_style_linter.infrastructure.services.guidance_service import GuidanceService
from markup_style_linter.interface.telemetry import ProjectTelemetry


class TestLinterContainer:
    """Default registrations."""

    def test_defaults_are_registered(self) -> None:
        container = LinterContainer()
        assert isinstance(container.get_config_loader(), ConfigFileLoader)
        assert isinstance(container.get_telemetry_port(), ProjectTelemetry)
        assert isinstance(container.get_filesystem_gateway(), FileSystemGateway)
        assert isinstance(container.get_document_parser(), DocumentParser)
        assert isinstance(container.get_guidance_service(), GuidanceService)

    def test_singletons_can_be_replaced(self) -> None:
        container = LinterContainer()
        telemetry = MagicMock()
        container.register_singleton("TelemetryPort", telemetry)
        assert container.get_telemetry_port() is telemetry

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(ValueError, match="not registered"):
            LinterContainer().get("Missing")


class TestMain:
    """The console script entry point."""

    @patch("markup_style_linter.__main__.create_app")
    def test_main_wires_dependencies(self, mock_create_app: MagicMock) -> None:
        from markup_style_linter.__main__ import main

        main()

        deps = mock_create_app.call_args[0][0]
        assert isinstance(deps.parser, DocumentParser)
        assert isinstance(deps.guidance_service, GuidanceService)
        mock_create_app.return_value.assert_called_once_with()
