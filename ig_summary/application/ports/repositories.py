from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from ...domain.entities.data_dictionary import DataDictionaryDocument
    from ...domain.entities.settings import (
        DataDictionaryMode,
        DataDictionarySettings,
        DiffSettings,
    )
    from ..models import LoadedImplementationGuide


@runtime_checkable
class ImplementationGuideRepositoryPort(Protocol):
    pass

    def load(self, ig_dir: Path) -> LoadedImplementationGuide: ...


@runtime_checkable
class DataDictionaryRepositoryPort(Protocol):
    pass

    def read(self, path: Path) -> DataDictionaryDocument: ...

    def write(self, document: DataDictionaryDocument, path: Path) -> Path: ...


@runtime_checkable
class SettingsRepositoryPort(Protocol):
    pass

    def load_summary_settings(
        self, path: Path | None, mode: DataDictionaryMode | None = None
    ) -> DataDictionarySettings: ...

    def load_diff_settings(self, path: Path | None) -> DiffSettings: ...
