"""Diff use case: compare two data dictionary JSON documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.services.differ import Differ
from .models import DiffResponse

if TYPE_CHECKING:
    from .models import DiffRequest
    from .ports.repositories import DataDictionaryRepositoryPort, SettingsRepositoryPort
    from .ports.services import DiffWorkbookWriterPort, LoggerPort


@dataclass(slots=True)
class DiffDependencies:
    logger: LoggerPort
    settings_repository: SettingsRepositoryPort
    data_dictionary_repository: DataDictionaryRepositoryPort
    workbook_writer: DiffWorkbookWriterPort | None = None


class DiffUseCase:
    def __init__(self, dependencies: DiffDependencies) -> None:
        super().__init__()
        self.logger = dependencies.logger
        self._settings_repository = dependencies.settings_repository
        self._data_dictionary_repository = dependencies.data_dictionary_repository
        self._workbook_writer = dependencies.workbook_writer

    def execute(self, request: DiffRequest) -> DiffResponse:
        response = DiffResponse()
        try:
            self.logger.log_run_start("diff", request.left_path)
            settings = self._settings_repository.load_diff_settings(request.settings_path)
            left = self._data_dictionary_repository.read(request.left_path)
            right = self._data_dictionary_repository.read(request.right_path)

            differ = Differ(left, right, settings, self.logger)
            response.differ = differ
            differ.log_summary(self.logger)

            if self._workbook_writer is not None:
                response.workbook_path = self._workbook_writer.write(
                    differ, request.output_dir / f"{settings.filename}.xlsx"
                )
                self.logger.log_file_written("Excel", response.workbook_path)

            self.logger.log_final_stats()
        except Exception as exc:
            response.success = False
            response.error = str(exc)
            self.logger.error(f"Diff failed: {exc}")
        return response
