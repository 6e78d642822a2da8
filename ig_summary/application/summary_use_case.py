"""Summary use case.

Loads an Implementation Guide folder, flattens its profiles into data
dictionary rows and writes the result as JSON and as a workbook. When an
older data dictionary is supplied, the fresh one is compared against it and
the differences are logged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from ..constants import Defaults
from ..domain.entities.settings import DiffSettings
from ..domain.services.differ import Differ
from ..domain.services.elements import ElementResolver
from ..domain.services.summary_assembler import SummaryAssembler
from ..domain.services.value_set_expander import (
    IncludedValueSetBehavior,
    ValueSetExpander,
)
from .models import CreateSummaryResponse

if TYPE_CHECKING:
    from pathlib import Path

    from ..domain.entities.data_dictionary import DataDictionaryDocument
    from ..domain.entities.settings import DataDictionarySettings
    from .models import CreateSummaryRequest, LoadedImplementationGuide
    from .ports.repositories import (
        DataDictionaryRepositoryPort,
        ImplementationGuideRepositoryPort,
        SettingsRepositoryPort,
    )
    from .ports.services import LoggerPort, SummaryWorkbookWriterPort


@dataclass(slots=True)
class SummaryDependencies:
    logger: LoggerPort
    settings_repository: SettingsRepositoryPort
    implementation_guide_repository: ImplementationGuideRepositoryPort
    data_dictionary_repository: DataDictionaryRepositoryPort
    workbook_writer: SummaryWorkbookWriterPort | None = None


class SummaryUseCase:
    """Create the data dictionary of one Implementation Guide.

    Steps:
    1. Load run settings (mode from the request wins over the file)
    2. Load the IG definitions and their dependency packages
    3. Assemble profile, element, value set and extension rows
    4. Write ``<filename>.json`` and ``<filename>.xlsx``
    5. Optionally compare with an older ``.json`` summary
    """

    def __init__(self, dependencies: SummaryDependencies) -> None:
        super().__init__()
        self.logger = dependencies.logger
        self._settings_repository = dependencies.settings_repository
        self._ig_repository = dependencies.implementation_guide_repository
        self._data_dictionary_repository = dependencies.data_dictionary_repository
        self._workbook_writer = dependencies.workbook_writer

    def execute(self, request: CreateSummaryRequest) -> CreateSummaryResponse:
        response = CreateSummaryResponse()
        try:
            settings = self._settings_repository.load_summary_settings(
                request.settings_path, request.mode
            )
            self.logger.log_run_start("create", request.ig_dir, settings.mode.value)

            guide = self._ig_repository.load(request.ig_dir)
            document = self.build_document(guide, settings, request.included_value_sets)
            response.document = document
            self.logger.log_profile_count(
                len(document.profiles), len(document.profile_elements)
            )

            filename = self._filename(settings, guide)
            response.json_path = self._data_dictionary_repository.write(
                document, request.output_dir / f"{filename}.json"
            )
            self.logger.log_file_written("JSON", response.json_path)

            if self._workbook_writer is not None:
                response.workbook_path = self._workbook_writer.write(
                    document,
                    guide.metadata,
                    settings,
                    request.output_dir / f"{filename}.xlsx",
                )
                self.logger.log_file_written("Excel", response.workbook_path)

            if request.comparison_path is not None:
                response.comparison = self._compare(request.comparison_path, document)

            self.logger.log_final_stats()
        except Exception as exc:
            response.success = False
            response.error = str(exc)
            self.logger.error(f"Summary failed: {exc}")
        return response

    def build_document(
        self,
        guide: LoadedImplementationGuide,
        settings: DataDictionarySettings,
        included_value_sets: IncludedValueSetBehavior = IncludedValueSetBehavior.REFERENCE,
    ) -> DataDictionaryDocument:
        resolver = ElementResolver(
            definitions=guide.lookup, settings=settings, diagnostics=self.logger
        )
        expander = ValueSetExpander(settings, self.logger, included_value_sets)
        metadata = guide.metadata.to_document_metadata()
        if settings.title:
            metadata = replace(metadata, title=settings.title)
        return SummaryAssembler(resolver, expander).assemble(
            guide.catalog, metadata, guide.profile_groups
        )

    def _compare(self, comparison_path: Path, document: DataDictionaryDocument) -> Differ:
        left = self._data_dictionary_repository.read(comparison_path)
        differ = Differ(left, document, DiffSettings(), self.logger)
        differ.log_details(self.logger)
        differ.log_summary(self.logger)
        return differ

    @staticmethod
    def _filename(settings: DataDictionarySettings, guide: LoadedImplementationGuide) -> str:
        return settings.filename or f"{Defaults.SUMMARY_FILENAME_PREFIX}{guide.metadata.id}"
