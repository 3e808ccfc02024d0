"""Telemetry port implementation: a rich console for people, a logger for everything else."""

import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape

from markup_style_linter.domain.protocols import TelemetryPort


class ProjectTelemetry(TelemetryPort):
    """
    Status output for CLI runs.

    Messages go to stderr so that report output on stdout stays machine
    readable; every message is mirrored to the ``markup_style_linter`` logger.
    """

    def __init__(
        self,
        project_name: str,
        color: str = "cyan",
        welcome_msg: str = "",
        console: Optional[Console] = None,
        quiet: bool = False,
    ) -> None:
        self.project_name = project_name
        self.color = color
        self.welcome_msg = welcome_msg
        self.console = console or Console(stderr=True, highlight=False)
        self.logger = logging.getLogger("markup_style_linter")
        self.quiet = quiet

    def handshake(self) -> None:
        self.logger.info("%s: %s", self.project_name, self.welcome_msg)
        if self.quiet:
            return
        banner = f"[bold {self.color}]{self.project_name}[/]"
        if self.welcome_msg:
            banner += f" [dim]{escape(self.welcome_msg)}[/]"
        self.console.print(banner)

    def step(self, message: str) -> None:
        self.logger.info(message)
        if not self.quiet:
            self.console.print(f"[{self.color}]>[/] {escape(message)}")

    def warning(self, message: str) -> None:
        self.logger.warning(message)
        self.console.print(f"[yellow]warning:[/] {escape(message)}")

    def error(self, message: str) -> None:
        self.logger.error(message)
        self.console.print(f"[bold red]error:[/] {escape(message)}")

    def debug(self, message: str) -> None:
        self.logger.debug(message)
