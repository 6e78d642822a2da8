"""Unit tests for logger implementations."""

# pyright: reportPrivateUsage=false

from io import StringIO
from pathlib import Path
import unittest

from rich.console import Console

from ig_summary.application.ports.services import LoggerPort
from ig_summary.domain.services.ports import DiagnosticsPort
from ig_summary.infrastructure.logging import (
    ConsoleLogger,
    LogContext,
    LogLevel,
    NullLogger,
)


class TestLoggerPort(unittest.TestCase):
    """Logger implementations comply with both logging protocols."""

    def test_console_logger_implements_ports(self):
        logger = ConsoleLogger()
        self.assertIsInstance(logger, LoggerPort)
        self.assertIsInstance(logger, DiagnosticsPort)

    def test_null_logger_implements_ports(self):
        logger = NullLogger()
        self.assertIsInstance(logger, LoggerPort)
        self.assertIsInstance(logger, DiagnosticsPort)


class TestConsoleLogger(unittest.TestCase):
    def setUp(self):
        self.buffer = StringIO()
        self.console = Console(file=self.buffer, force_terminal=False, width=200)
        self.logger = ConsoleLogger(console=self.console, verbosity=LogLevel.DEBUG)

    def output(self) -> str:
        return self.buffer.getvalue()

    def test_initialization(self):
        logger = ConsoleLogger()
        self.assertEqual(logger.verbosity, 0)
        self.assertIsNone(logger._context)
        self.assertEqual(logger.get_stats()["warnings"], 0)

    def test_square_brackets_are_printed_literally(self):
        """Element ids such as value[x] must not be read as markup."""
        self.logger.info("Processing Observation.value[x]")

        self.assertIn("Processing Observation.value[x]", self.output())

    def test_warning_and_error_are_counted(self):
        self.logger.warning("Suppressing Patient.telecom")
        self.logger.error("Value set expansion http://x could not be found.")

        self.assertIn("Suppressing Patient.telecom", self.output())
        self.assertIn("could not be found", self.output())
        stats = self.logger.get_stats()
        self.assertEqual(stats["warnings"], 1)
        self.assertEqual(stats["errors"], 1)

    def test_reset_stats(self):
        self.logger.warning("w")
        self.logger.reset_stats()

        self.assertEqual(self.logger.get_stats()["warnings"], 0)

    def test_success(self):
        self.logger.success("Done")

        self.assertIn("Done", self.output())

    def test_verbose_hidden_at_normal_level(self):
        logger = ConsoleLogger(console=self.console, verbosity=LogLevel.NORMAL)

        logger.verbose("hidden verbose")
        logger.debug("hidden debug")
        logger.info("hidden info", level=LogLevel.VERBOSE)

        self.assertEqual(self.output(), "")

    def test_debug_shown_at_debug_level(self):
        self.logger.debug("Processing Patient.gender")

        self.assertIn("Processing Patient.gender", self.output())

    def test_run_start_announces_mode(self):
        self.logger.log_run_start("create", Path("ig"), "all")

        self.assertIn("Running in ALL mode.", self.output())
        self.assertEqual(self.logger._context.command, "create")

    def test_run_start_must_support_mode(self):
        self.logger.log_run_start("create", Path("ig"), "ms")

        self.assertIn("Running in MustSupport only mode.", self.output())

    def test_run_start_without_mode(self):
        logger = ConsoleLogger(console=self.console, verbosity=LogLevel.NORMAL)

        logger.log_run_start("diff", Path("a.json"))

        self.assertEqual(self.output(), "")

    def test_profile_count_and_files(self):
        self.logger.log_profile_count(3, 1200)
        self.logger.log_file_written("JSON", Path("out/summary.json"))

        stats = self.logger.get_stats()
        self.assertEqual(stats["profiles"], 3)
        self.assertEqual(stats["elements"], 1200)
        self.assertEqual(stats["files_written"], 1)
        self.assertIn("1,200 data elements", self.output())
        self.assertIn("JSON file written to", self.output())

    def test_final_stats(self):
        self.logger.log_run_start("create", Path("ig"))
        self.logger.log_profile_count(2, 10)
        self.logger.warning("w")

        self.logger.log_final_stats()

        self.assertIn("Run statistics:", self.output())
        self.assertIn("Profiles: 2", self.output())
        self.assertIn("Warnings: 1", self.output())
        self.assertIn("Elapsed:", self.output())

    def test_final_stats_hidden_at_normal_level(self):
        logger = ConsoleLogger(console=self.console, verbosity=LogLevel.NORMAL)

        logger.log_final_stats()

        self.assertEqual(self.output(), "")


class TestLogContext(unittest.TestCase):
    def test_elapsed_is_not_negative(self):
        context = LogContext(command="diff", source="a.json")

        self.assertGreaterEqual(context.elapsed_ms(), 0)


class TestNullLogger(unittest.TestCase):
    def test_all_methods_are_silent(self):
        logger = NullLogger()

        logger.info("x")
        logger.success("x")
        logger.warning("x")
        logger.error("x")
        logger.debug("x")
        logger.verbose("x")
        logger.log_run_start("create", Path("ig"), "ms")
        logger.log_profile_count(1, 1)
        logger.log_file_written("JSON", Path("x.json"))
        logger.log_final_stats()
