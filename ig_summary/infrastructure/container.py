from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from ..application.diff_use_case import DiffDependencies, DiffUseCase
from ..application.summary_use_case import SummaryDependencies, SummaryUseCase
from ..config import SummaryConfig
from .io.diff_workbook_writer import DiffWorkbookWriter
from .io.summary_workbook_writer import SummaryWorkbookWriter
from .logging.console_logger import ConsoleLogger
from .logging.null_logger import NullLogger
from .repositories.data_dictionary_repository import DataDictionaryRepository
from .repositories.package_loader import ImplementationGuideLoader
from .repositories.settings_loader import SettingsLoader

if TYPE_CHECKING:
    from ..application.ports.repositories import (
        DataDictionaryRepositoryPort,
        ImplementationGuideRepositoryPort,
        SettingsRepositoryPort,
    )
    from ..application.ports.services import (
        DiffWorkbookWriterPort,
        LoggerPort,
        SummaryWorkbookWriterPort,
    )


class DependencyContainer:
    pass

    def __init__(
        self,
        verbose: int = 0,
        console: Console | None = None,
        use_null_logger: bool = False,
        config: SummaryConfig | None = None,
    ) -> None:
        super().__init__()
        self.verbose = verbose
        self.console = console or Console()
        self.use_null_logger = use_null_logger
        self.config = config or SummaryConfig()
        self._logger_instance: LoggerPort | None = None
        self._settings_repository_instance: SettingsRepositoryPort | None = None
        self._ig_repository_instance: ImplementationGuideRepositoryPort | None = None
        self._data_dictionary_repository_instance: DataDictionaryRepositoryPort | None = (
            None
        )
        self._summary_writer_instance: SummaryWorkbookWriterPort | None = None
        self._diff_writer_instance: DiffWorkbookWriterPort | None = None

    def create_logger(self) -> LoggerPort:
        if self._logger_instance is None:
            if self.use_null_logger:
                self._logger_instance = NullLogger()
            else:
                self._logger_instance = ConsoleLogger(
                    console=self.console, verbosity=self.verbose
                )
        return self._logger_instance

    def create_settings_repository(self) -> SettingsRepositoryPort:
        if self._settings_repository_instance is None:
            self._settings_repository_instance = SettingsLoader(
                default_mode=self.config.mode
            )
        return self._settings_repository_instance

    def create_implementation_guide_repository(self) -> ImplementationGuideRepositoryPort:
        if self._ig_repository_instance is None:
            self._ig_repository_instance = ImplementationGuideLoader(
                config=self.config, logger=self.create_logger()
            )
        return self._ig_repository_instance

    def create_data_dictionary_repository(self) -> DataDictionaryRepositoryPort:
        if self._data_dictionary_repository_instance is None:
            self._data_dictionary_repository_instance = DataDictionaryRepository()
        return self._data_dictionary_repository_instance

    def create_summary_workbook_writer(self) -> SummaryWorkbookWriterPort:
        if self._summary_writer_instance is None:
            self._summary_writer_instance = SummaryWorkbookWriter(self.create_logger())
        return self._summary_writer_instance

    def create_diff_workbook_writer(self) -> DiffWorkbookWriterPort:
        if self._diff_writer_instance is None:
            self._diff_writer_instance = DiffWorkbookWriter()
        return self._diff_writer_instance

    def create_summary_use_case(self) -> SummaryUseCase:
        return SummaryUseCase(
            SummaryDependencies(
                logger=self.create_logger(),
                settings_repository=self.create_settings_repository(),
                implementation_guide_repository=self.create_implementation_guide_repository(),
                data_dictionary_repository=self.create_data_dictionary_repository(),
                workbook_writer=self.create_summary_workbook_writer(),
            )
        )

    def create_diff_use_case(self) -> DiffUseCase:
        return DiffUseCase(
            DiffDependencies(
                logger=self.create_logger(),
                settings_repository=self.create_settings_repository(),
                data_dictionary_repository=self.create_data_dictionary_repository(),
                workbook_writer=self.create_diff_workbook_writer(),
            )
        )

    def reset_singletons(self) -> None:
        self._logger_instance = None
        self._settings_repository_instance = None
        self._ig_repository_instance = None
        self._data_dictionary_repository_instance = None
        self._summary_writer_instance = None
        self._diff_writer_instance = None


def create_default_container(
    verbose: int = 0, config: SummaryConfig | None = None
) -> DependencyContainer:
    return DependencyContainer(verbose=verbose, config=config)
