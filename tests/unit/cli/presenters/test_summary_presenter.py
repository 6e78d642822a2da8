"""Unit tests for SummaryPresenter."""

from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from fhir_fixtures import RecordingDiagnostics, data_element_row
from ig_summary.application.models import CreateSummaryResponse
from ig_summary.cli.presenters import SummaryPresenter
from ig_summary.domain.entities.data_dictionary import (
    DataDictionaryDocument,
    DataDictionaryMetadata,
    SummaryRow,
)
from ig_summary.domain.entities.settings import DiffSettings
from ig_summary.domain.services.differ import Differ


class TestSummaryPresenter:
    """Test suite for SummaryPresenter."""

    @pytest.fixture
    def console(self):
        return Console(file=StringIO(), force_terminal=False, width=120)

    @pytest.fixture
    def document(self):
        return DataDictionaryDocument(
            profiles=(SummaryRow(title="My Patient", url="http://p"),),
            profile_elements=(
                data_element_row("Patient.gender"),
                data_element_row("Patient.birthDate"),
            ),
            metadata=DataDictionaryMetadata(title="Test IG", version="0.1.0"),
        )

    def output(self, console) -> str:
        return console.file.getvalue()

    def test_counts_table(self, console, document):
        SummaryPresenter(console).present(CreateSummaryResponse(document=document))

        output = self.output(console)
        assert "Test IG (0.1.0)" in output
        assert "Data elements" in output
        assert "Profiles" in output

    def test_counts_table_rows(self, document):
        table = SummaryPresenter.build_counts_table(document)

        assert table.row_count == 6

    def test_written_files(self, console, document):
        response = CreateSummaryResponse(
            document=document,
            json_path=Path("out/summary.json"),
            workbook_path=Path("out/summary.xlsx"),
        )

        SummaryPresenter(console).present(response)

        output = self.output(console)
        assert "out/summary.json" in output
        assert "out/summary.xlsx" in output

    def test_comparison_is_presented(self, console, document):
        differ = Differ(
            DataDictionaryDocument(), document, DiffSettings(), RecordingDiagnostics()
        )

        SummaryPresenter(console).present(
            CreateSummaryResponse(document=document, comparison=differ)
        )

        assert "Data Dictionary Diff" in self.output(console)

    def test_failure(self, console):
        response = CreateSummaryResponse(success=False, error="No profiles found in [ig].")

        SummaryPresenter(console).present(response)

        assert "Summary failed: No profiles found in [ig]." in self.output(console)
