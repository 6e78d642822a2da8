from __future__ import annotations

from typing import TYPE_CHECKING, override

from ...application.ports.services import LoggerPort

if TYPE_CHECKING:
    from pathlib import Path


class NullLogger(LoggerPort):
    pass

    @override
    def info(self, message: str) -> None:
        return

    @override
    def success(self, message: str) -> None:
        return

    @override
    def warning(self, message: str) -> None:
        return

    @override
    def error(self, message: str) -> None:
        return

    @override
    def debug(self, message: str) -> None:
        return

    @override
    def verbose(self, message: str) -> None:
        return

    @override
    def log_run_start(self, command: str, source: Path, mode: str | None = None) -> None:
        return

    @override
    def log_profile_count(self, profiles: int, elements: int) -> None:
        return

    @override
    def log_file_written(self, kind: str, path: Path) -> None:
        return

    @override
    def log_final_stats(self) -> None:
        return
