"""Tests for the dependency injection container."""

from pathlib import Path

from rich.console import Console

from ig_summary.application.diff_use_case import DiffUseCase
from ig_summary.application.ports import (
    DataDictionaryRepositoryPort,
    DiffWorkbookWriterPort,
    ImplementationGuideRepositoryPort,
    LoggerPort,
    SettingsRepositoryPort,
    SummaryWorkbookWriterPort,
)
from ig_summary.application.summary_use_case import SummaryUseCase
from ig_summary.config import SummaryConfig
from ig_summary.domain.entities.settings import DataDictionaryMode
from ig_summary.infrastructure.container import (
    DependencyContainer,
    create_default_container,
)
from ig_summary.infrastructure.logging import ConsoleLogger, NullLogger


class TestDependencyContainer:
    """Tests for DependencyContainer class."""

    def test_defaults(self):
        container = DependencyContainer()

        assert container.verbose == 0
        assert container.console is not None
        assert container.use_null_logger is False
        assert isinstance(container.config, SummaryConfig)

    def test_console_logger_uses_verbosity_and_console(self):
        console = Console()
        container = DependencyContainer(verbose=2, console=console)

        logger = container.create_logger()

        assert isinstance(logger, ConsoleLogger)
        assert logger.verbosity == 2
        assert logger.console is console

    def test_null_logger(self):
        container = DependencyContainer(use_null_logger=True)

        assert isinstance(container.create_logger(), NullLogger)

    def test_adapters_satisfy_ports(self):
        container = DependencyContainer(use_null_logger=True)

        assert isinstance(container.create_logger(), LoggerPort)
        assert isinstance(container.create_settings_repository(), SettingsRepositoryPort)
        assert isinstance(
            container.create_implementation_guide_repository(),
            ImplementationGuideRepositoryPort,
        )
        assert isinstance(
            container.create_data_dictionary_repository(), DataDictionaryRepositoryPort
        )
        assert isinstance(container.create_summary_workbook_writer(), SummaryWorkbookWriterPort)
        assert isinstance(container.create_diff_workbook_writer(), DiffWorkbookWriterPort)

    def test_adapters_are_singletons(self):
        container = DependencyContainer(use_null_logger=True)

        assert container.create_logger() is container.create_logger()
        assert (
            container.create_settings_repository()
            is container.create_settings_repository()
        )
        assert (
            container.create_diff_workbook_writer()
            is container.create_diff_workbook_writer()
        )

    def test_use_cases_are_new_each_time(self):
        container = DependencyContainer(use_null_logger=True)

        first = container.create_summary_use_case()
        second = container.create_summary_use_case()

        assert isinstance(first, SummaryUseCase)
        assert first is not second
        assert first.logger is second.logger
        assert isinstance(container.create_diff_use_case(), DiffUseCase)

    def test_reset_singletons(self):
        container = DependencyContainer(use_null_logger=True)
        logger = container.create_logger()

        container.reset_singletons()

        assert container.create_logger() is not logger

    def test_config_reaches_adapters(self, tmp_path):
        config = SummaryConfig(package_cache_dir=tmp_path, default_mode="all")
        container = DependencyContainer(use_null_logger=True, config=config)

        loader = container.create_implementation_guide_repository()
        settings = container.create_settings_repository().load_summary_settings(None)

        assert loader.package_cache.root == tmp_path
        assert settings.mode is DataDictionaryMode.ALL


def test_create_default_container():
    config = SummaryConfig(package_cache_dir=Path("x"))

    container = create_default_container(verbose=1, config=config)

    assert container.verbose == 1
    assert container.config.package_cache_dir == Path("x")
