from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from ...domain.entities.data_dictionary import DataDictionaryDocument
    from ...domain.entities.settings import DataDictionarySettings
    from ...domain.services.differ import Differ
    from ..models import ImplementationGuideMetadata


@runtime_checkable
class LoggerPort(Protocol):
    pass

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def verbose(self, message: str) -> None: ...

    def log_run_start(self, command: str, source: Path, mode: str | None = None) -> None: ...

    def log_profile_count(self, profiles: int, elements: int) -> None: ...

    def log_file_written(self, kind: str, path: Path) -> None: ...

    def log_final_stats(self) -> None: ...


@runtime_checkable
class SummaryWorkbookWriterPort(Protocol):
    pass

    def write(
        self,
        document: DataDictionaryDocument,
        metadata: ImplementationGuideMetadata,
        settings: DataDictionarySettings,
        path: Path,
    ) -> Path: ...


@runtime_checkable
class DiffWorkbookWriterPort(Protocol):
    pass

    def write(self, differ: Differ, path: Path) -> Path: ...
