from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..domain.entities.data_dictionary import DataDictionaryMetadata
from ..domain.services.value_set_expander import IncludedValueSetBehavior

if TYPE_CHECKING:
    from pathlib import Path

    from ..domain.entities.data_dictionary import DataDictionaryDocument
    from ..domain.entities.settings import DataDictionaryMode
    from ..domain.services.differ import Differ
    from ..domain.services.ports import DefinitionCatalogPort, DefinitionLookupPort


def _empty_str_tuple() -> tuple[str, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class ImplementationGuideMetadata:
    id: str
    name: str = ""
    title: str = ""
    url: str = ""
    canonical: str = ""
    version: str = ""
    status: str = ""
    fhir_versions: tuple[str, ...] = field(default_factory=_empty_str_tuple)

    def to_document_metadata(self) -> DataDictionaryMetadata:
        return DataDictionaryMetadata(title=self.title or self.name, version=self.version)


@dataclass(frozen=True, slots=True)
class LoadedImplementationGuide:
    """An IG folder loaded together with its external dependencies."""

    metadata: ImplementationGuideMetadata
    catalog: DefinitionCatalogPort
    lookup: DefinitionLookupPort
    profile_groups: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class CreateSummaryRequest:
    ig_dir: Path
    output_dir: Path
    mode: DataDictionaryMode | None = None
    settings_path: Path | None = None
    comparison_path: Path | None = None
    included_value_sets: IncludedValueSetBehavior = IncludedValueSetBehavior.REFERENCE


@dataclass(slots=True)
class CreateSummaryResponse:
    success: bool = True
    document: DataDictionaryDocument | None = None
    json_path: Path | None = None
    workbook_path: Path | None = None
    comparison: Differ | None = None
    error: str | None = None


@dataclass(slots=True)
class DiffRequest:
    left_path: Path
    right_path: Path
    output_dir: Path
    settings_path: Path | None = None


@dataclass(slots=True)
class DiffResponse:
    success: bool = True
    differ: Differ | None = None
    workbook_path: Path | None = None
    error: str | None = None
