"""CLI entry points for markup-style - Thin Controller using Typer."""

import logging
import sys
from dataclasses import dataclass
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from markup_style_linter.domain.config import LinterConfig
from markup_style_linter.domain.errors import ConfigError, FixVerificationError
from markup_style_linter.domain.protocols import (
    ConfigLoaderProtocol,
    DocumentParserProtocol,
    FileSystemProtocol,
    TelemetryPort,
)
from markup_style_linter.domain.registry import RuleRegistry
from markup_style_linter.domain.rules.catalog import build_default_registry
from markup_style_linter.infrastructure.services.guidance_service import GuidanceService
from markup_style_linter.interface.reporters import REPORT_FORMATS, create_reporter
from markup_style_linter.use_cases.lint_document import LintDocumentUseCase
from markup_style_linter.use_cases.lint_project import (
    EXIT_INTERNAL_ERROR,
    LintProjectUseCase,
    ProjectResult,
)

# B008: avoid function call in default; use module-level singletons for Typer Options
_PATHS = typer.Argument(None, help="Files or directories to lint (default: current directory)")
_FORMAT = typer.Option("text", "--format", "-f", help=f"Report format: {', '.join(REPORT_FORMATS)}")
_ENABLE = typer.Option(None, "--enable", "-e", help="Enable a rule in addition to the defaults (repeatable)")
_DISABLE = typer.Option(None, "--disable", "-d", help="Disable a rule (repeatable)")
_MAX_DEPTH = typer.Option(None, "--max-selector-depth", min=1, help="Override max_selector_depth")
_JOBS = typer.Option(1, "--jobs", "-j", min=1, help="Documents processed in parallel")
_CONFIG = typer.Option(None, "--config", help="pyproject.toml to read [tool.markup-style] from")
_VERBOSE = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigLoaderProtocol
    telemetry: TelemetryPort
    filesystem: FileSystemProtocol
    parser: DocumentParserProtocol
    guidance_service: GuidanceService


@dataclass(frozen=True)
class RunSettings:
    """Per-invocation options shared by check and fix."""

    config_file: Optional[str] = None
    enable: tuple[str, ...] = ()
    disable: tuple[str, ...] = ()
    max_selector_depth: Optional[int] = None
    jobs: int = 1


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def resolve_config(deps: CLIDependencies, settings: RunSettings) -> LinterConfig:
        """File settings first, then command line flags. Raises ConfigError."""
        config = LinterConfig.from_mapping(deps.config_loader.load(settings.config_file))
        config = config.with_overrides(max_selector_depth=settings.max_selector_depth)
        if not settings.enable and not settings.disable:
            return config
        enabled = config.enabled_rules
        if settings.enable:
            defaults = {info.name for info in build_default_registry(config).describe(config) if info.enabled}
            enabled = frozenset((enabled if enabled is not None else defaults) | set(settings.enable))
        disabled = (config.disabled_rules - set(settings.enable)) | set(settings.disable)
        return config.with_overrides(enabled_rules=enabled, disabled_rules=frozenset(disabled))

    @staticmethod
    def build_use_case(
        deps: CLIDependencies, config: LinterConfig, jobs: int
    ) -> LintProjectUseCase:
        registry = build_default_registry(config).configured(config)
        return LintProjectUseCase(
            document_use_case=LintDocumentUseCase(deps.parser, registry, config),
            parser=deps.parser,
            filesystem=deps.filesystem,
            telemetry=deps.telemetry,
            jobs=jobs,
        )

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        if verbose:
            logging.basicConfig(
                level=logging.DEBUG,
                format="%(name)s: %(message)s",
                handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
                force=True,
            )

    @staticmethod
    def run(deps: CLIDependencies, paths: list[str], settings: RunSettings, fix: bool, write: bool) -> ProjectResult:
        """Resolve configuration and run the project use case. ConfigError propagates."""
        config = CLIAppFactory.resolve_config(deps, settings)
        use_case = CLIAppFactory.build_use_case(deps, config, settings.jobs)
        return use_case.execute(paths or ["."], fix=fix, write=write)

    @staticmethod
    def report_failures(deps: CLIDependencies, result: ProjectResult) -> None:
        for document in result.documents:
            if document.error is not None:
                deps.telemetry.error(f"{document.path}: {document.error}")

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="markup-style",
            help="Lint and safely auto-fix HTML and CSS against a style guide.",
            add_completion=False,
        )

        @app.command()
        def check(
            paths: Optional[list[str]] = _PATHS,
            fmt: str = _FORMAT,
            enable: Optional[list[str]] = _ENABLE,
            disable: Optional[list[str]] = _DISABLE,
            max_selector_depth: Optional[int] = _MAX_DEPTH,
            jobs: int = _JOBS,
            config: Optional[str] = _CONFIG,
            verbose: bool = _VERBOSE,
        ) -> None:
            """Report style violations. Exit 1 on errors, 2 on internal failures."""
            CLIAppFactory.configure_logging(verbose)
            if fmt not in REPORT_FORMATS:
                deps.telemetry.error(f"Unknown format '{fmt}'; choose from {', '.join(REPORT_FORMATS)}")
                raise typer.Exit(EXIT_INTERNAL_ERROR)
            settings = RunSettings(config, tuple(enable or ()), tuple(disable or ()), max_selector_depth, jobs)
            deps.telemetry.handshake()
            try:
                result = CLIAppFactory.run(deps, paths or [], settings, fix=False, write=False)
            except ConfigError as exc:
                deps.telemetry.error(f"Configuration error: {exc}")
                raise typer.Exit(EXIT_INTERNAL_ERROR) from exc
            create_reporter(
                fmt, sys.stdout, Console(file=sys.stdout), deps.guidance_service
            ).report(result)
            CLIAppFactory.report_failures(deps, result)
            raise typer.Exit(result.exit_code)

        @app.command()
        def fix(
            paths: Optional[list[str]] = _PATHS,
            dry_run: bool = typer.Option(False, "--dry-run", help="Report what would change without writing files"),
            fmt: str = _FORMAT,
            enable: Optional[list[str]] = _ENABLE,
            disable: Optional[list[str]] = _DISABLE,
            max_selector_depth: Optional[int] = _MAX_DEPTH,
            jobs: int = _JOBS,
            config: Optional[str] = _CONFIG,
            verbose: bool = _VERBOSE,
        ) -> None:
            """Apply safe fixes in place, then report what remains."""
            CLIAppFactory.configure_logging(verbose)
            if fmt not in REPORT_FORMATS:
                deps.telemetry.error(f"Unknown format '{fmt}'; choose from {', '.join(REPORT_FORMATS)}")
                raise typer.Exit(EXIT_INTERNAL_ERROR)
            settings = RunSettings(config, tuple(enable or ()), tuple(disable or ()), max_selector_depth, jobs)
            deps.telemetry.handshake()
            try:
                result = CLIAppFactory.run(deps, paths or [], settings, fix=True, write=not dry_run)
            except ConfigError as exc:
                deps.telemetry.error(f"Configuration error: {exc}")
                raise typer.Exit(EXIT_INTERNAL_ERROR) from exc
            applied = deferred = 0
            for document in result.documents:
                if document.fix is None:
                    continue
                applied += document.fix.applied_count
                deferred += document.fix.deferred_count
                if document.fix.changed:
                    verb = "Would fix" if dry_run else "Fixed"
                    deps.telemetry.step(
                        f"{verb} {document.path}: {document.fix.applied_count} fix(es) "
                        f"in {document.fix.passes} pass(es)"
                    )
            create_reporter(
                fmt, sys.stdout, Console(file=sys.stdout), deps.guidance_service
            ).report(result)
            CLIAppFactory.report_failures(deps, result)
            deps.telemetry.step(
                f"{applied} fix(es) applied, {deferred} deferred, "
                f"{result.files_changed} file(s) {'would change' if dry_run else 'changed'}"
            )
            for document in result.documents:
                if isinstance(document.error, FixVerificationError):
                    deps.telemetry.error(f"{document.path}: fix verification failed; file left unchanged")
            raise typer.Exit(result.exit_code)

        @app.command()
        def rules(
            config: Optional[str] = _CONFIG,
        ) -> None:
            """List the built-in rules in registry order."""
            try:
                linter_config = LinterConfig.from_mapping(deps.config_loader.load(config))
            except ConfigError as exc:
                deps.telemetry.error(f"Configuration error: {exc}")
                raise typer.Exit(EXIT_INTERNAL_ERROR) from exc
            registry: RuleRegistry = build_default_registry(linter_config)
            table = Table(title="Markup Style Rules", header_style="bold cyan")
            table.add_column("Code", style="cyan")
            table.add_column("Rule")
            table.add_column("Severity")
            table.add_column("Enabled", justify="center")
            table.add_column("Fix?", justify="center")
            table.add_column("Description")
            fixable = set(deps.guidance_service.get_fixable_rules())
            for info in registry.describe(linter_config):
                table.add_row(
                    info.code,
                    info.name,
                    info.severity.value,
                    "yes" if info.enabled else "no",
                    "yes" if info.name in fixable else "",
                    escape(info.description),
                )
            Console(file=sys.stdout).print(table)

        @app.command()
        def explain(
            rule: str = typer.Argument(..., help="Rule name or code, e.g. tag-case or H002"),
        ) -> None:
            """Show guidance for one rule."""
            registry = build_default_registry()
            match = next(
                (r for r in registry if r.name == rule or r.code.lower() == rule.lower()), None
            )
            if match is None:
                deps.telemetry.error(f"Unknown rule '{rule}'. Run 'markup-style rules' for the list.")
                raise typer.Exit(EXIT_INTERNAL_ERROR)
            guidance = deps.guidance_service
            console = Console(file=sys.stdout, highlight=False)
            console.print(f"[bold]{match.code} {match.name}[/]: {escape(guidance.get_display_name(match.name))}")
            console.print(escape(match.description))
            console.print(f"Default severity: {match.default_severity.value}")
            console.print(f"Checks: {', '.join(sorted(k.value for k in match.interested_in()))}")
            console.print()
            console.print(escape(guidance.get_manual_instructions(match.name)))
            bad, good = guidance.get_examples(match.name)
            if bad:
                console.print(f"\n[red]Bad:[/]  {escape(bad)}")
            if good:
                console.print(f"[green]Good:[/] {escape(good)}")
            references = guidance.get_references(match.name)
            if references:
                console.print("\nReferences:")
                for reference in references:
                    console.print(f"  {escape(reference)}")

        return app


def create_app(deps: CLIDependencies) -> typer.Typer:
    return CLIAppFactory.create_app(deps)
