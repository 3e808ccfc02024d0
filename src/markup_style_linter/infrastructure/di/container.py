from typing import TYPE_CHECKING, Any, cast

from markup_style_linter.infrastructure.config_file_loader import ConfigFileLoader
from markup_style_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from markup_style_linter.infrastructure.parsers import DocumentParser
from markup_style_linter.infrastructure.services.guidance_service import GuidanceService
from markup_style_linter.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from markup_style_linter.domain.protocols import (
        ConfigLoaderProtocol,
        DocumentParserProtocol,
        FileSystemProtocol,
        TelemetryPort,
    )


class LinterContainer:
    """Dependency Injection Container for the markup style linter."""

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        self.register_singleton("ConfigFileLoader", ConfigFileLoader())
        self.register_singleton(
            "TelemetryPort", ProjectTelemetry("MARKUP-STYLE", "cyan", "HTML/CSS style linter")
        )
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("DocumentParser", DocumentParser())
        self.register_singleton("GuidanceService", GuidanceService())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> "ConfigLoaderProtocol":
        return cast("ConfigLoaderProtocol", self.get("ConfigFileLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_document_parser(self) -> "DocumentParserProtocol":
        return cast("DocumentParserProtocol", self.get("DocumentParser"))

    def get_guidance_service(self) -> GuidanceService:
        """Return the rule guidance registry."""
        return cast(GuidanceService, self.get("GuidanceService"))
