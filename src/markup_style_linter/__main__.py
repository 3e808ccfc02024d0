"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from markup_style_linter.infrastructure.di.container import LinterContainer
from markup_style_linter.interface.cli import CLIDependencies, create_app


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = LinterContainer()

    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        filesystem=container.get_filesystem_gateway(),
        parser=container.get_document_parser(),
        guidance_service=container.get_guidance_service(),
    )

    app = create_app(deps)
    app()


if __name__ == "__main__":
    main()
