from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, override

from rich.console import Console
from rich.markup import escape

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from pathlib import Path


class LogLevel(IntEnum):
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass(slots=True)
class LogContext:
    command: str = ""
    source: str = ""
    start_time: datetime = field(default_factory=datetime.now)

    def elapsed_ms(self) -> float:
        return (datetime.now() - self.start_time).total_seconds() * 1000


def _fresh_stats() -> dict[str, int]:
    return {
        "profiles": 0,
        "elements": 0,
        "files_written": 0,
        "warnings": 0,
        "errors": 0,
    }


class ConsoleLogger(LoggerPort):
    """Rich console logger.

    FHIR element ids contain square brackets (``value[x]``), so every
    message is escaped before it reaches rich's markup parser.
    """

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        super().__init__()
        self.console = console or Console()
        self.verbosity = verbosity
        self._context: LogContext | None = None
        self._stats = _fresh_stats()

    @override
    def info(self, message: str, *, level: int = LogLevel.NORMAL) -> None:
        if self.verbosity >= level:
            self.console.print(escape(message))

    @override
    def verbose(self, message: str) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    @override
    def debug(self, message: str) -> None:
        if self.verbosity >= LogLevel.DEBUG:
            self.console.print(f"[dim cyan]{escape(message)}[/dim cyan]")

    @override
    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    @override
    def warning(self, message: str) -> None:
        self._stats["warnings"] += 1
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    @override
    def error(self, message: str) -> None:
        self._stats["errors"] += 1
        self.console.print(f"[red]✗[/red] {escape(message)}")

    @override
    def log_run_start(self, command: str, source: Path, mode: str | None = None) -> None:
        self._context = LogContext(command=command, source=str(source))
        self.verbose(f"Running {command} on {source}")
        if mode == "all":
            self.info("Running in ALL mode.")
        elif mode is not None:
            self.info("Running in MustSupport only mode.")

    @override
    def log_profile_count(self, profiles: int, elements: int) -> None:
        self._stats["profiles"] += profiles
        self._stats["elements"] += elements
        self.verbose(f"Summarized {profiles} profiles into {elements:,} data elements")

    @override
    def log_file_written(self, kind: str, path: Path) -> None:
        self._stats["files_written"] += 1
        self.success(f"{kind} file written to {path}")

    @override
    def log_final_stats(self) -> None:
        if self.verbosity < LogLevel.VERBOSE:
            return
        self.console.print()
        self.console.print("[dim]Run statistics:[/dim]")
        self.console.print(f"[dim]  Profiles: {self._stats['profiles']}[/dim]")
        self.console.print(f"[dim]  Data elements: {self._stats['elements']:,}[/dim]")
        self.console.print(f"[dim]  Files written: {self._stats['files_written']}[/dim]")
        if self._context is not None:
            self.console.print(
                f"[dim]  Elapsed: {self._context.elapsed_ms():.0f} ms[/dim]"
            )
        if self._stats["warnings"] > 0:
            self.console.print(
                f"[dim yellow]  Warnings: {self._stats['warnings']}[/dim yellow]"
            )
        if self._stats["errors"] > 0:
            self.console.print(f"[dim red]  Errors: {self._stats['errors']}[/dim red]")

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()

    def reset_stats(self) -> None:
        self._stats = _fresh_stats()
