"""Tests for the summary workbook."""

from datetime import datetime

from openpyxl import load_workbook
from openpyxl.utils import get_column_letter
import pytest

from fhir_fixtures import EXAMPLE_BASE, RecordingDiagnostics, data_element_row
from ig_summary.application.models import ImplementationGuideMetadata
from ig_summary.constants import ColumnNames, SheetNames
from ig_summary.domain.entities.data_dictionary import (
    DataDictionaryDocument,
    SummaryRow,
    ValueSetRow,
)
from ig_summary.domain.entities.settings import DataDictionarySettings
from ig_summary.infrastructure.io.summary_workbook_writer import (
    SummaryWorkbookWriter,
    information_rows,
)

RACE_VS = "http://example.org/fhir/ValueSet/race"


def hidden_columns(sheet) -> set[str]:
    hidden = set()
    for dimension in sheet.column_dimensions.values():
        if dimension.hidden:
            for index in range(dimension.min, dimension.max + 1):
                hidden.add(get_column_letter(index))
    return hidden


def header(sheet) -> list[str]:
    return [cell.value for cell in sheet[1]]


@pytest.fixture
def metadata():
    return ImplementationGuideMetadata(
        id="example.fhir.test",
        name="TestIG",
        title="Test IG",
        url="http://example.org/fhir/ImplementationGuide/example.fhir.test",
        version="0.1.0",
        status="draft",
        fhir_versions=("4.0.1",),
    )


@pytest.fixture
def document():
    return DataDictionaryDocument(
        profiles=(
            SummaryRow(title="My Patient", url=f"{EXAMPLE_BASE}/my-patient", group="Default"),
        ),
        profile_elements=(
            data_element_row("Patient.gender"),
            data_element_row("Observation.value[x]", data_element_name="Value"),
        ),
        value_sets=(SummaryRow(title="Race", url=RACE_VS),),
        value_set_elements=(
            ValueSetRow("Race", RACE_VS, "urn:oid:2.16.840.1.113883.6.238", code="1"),
            ValueSetRow("Race", RACE_VS, "urn:oid:2.16.840.1.113883.6.238", code="2"),
        ),
        extensions=(SummaryRow(title="Race", url=f"{EXAMPLE_BASE}/race"),),
    )


class TestInformationRows:
    def test_ig_facts_and_counts(self, document, metadata):
        rows, headings = information_rows(
            document, metadata, DataDictionarySettings(), datetime(2024, 1, 2, 15, 4, 5)
        )

        labels = dict(rows)
        assert rows[1] == ("IG Summary", "")
        assert labels["IG version"] == "0.1.0"
        assert labels["Base FHIR version"] == "4.0.1"
        assert labels["# Profiles"] == "1"
        assert labels["# Extensions"] == "1"
        assert labels["Data dictionary generated date"] == "01/02/2024, 03:04:05 PM"
        assert headings == set()

    def test_custom_content(self, document, metadata):
        settings = DataDictionarySettings(
            title="My Data Dictionary",
            information_tab_content={
                "ABOUT": "What this is.",
                "EMPTY-1": "A line without label.",
                "Contact": "someone@example.org",
            },
        )

        rows, headings = information_rows(document, metadata, settings, datetime.now())

        assert rows[1] == ("My Data Dictionary", "")
        assert rows[-3:] == [
            ("About", "What this is."),
            ("", "A line without label."),
            ("Contact", "someone@example.org"),
        ]
        assert headings == {len(rows) - 3}


class TestSummaryWorkbookWriter:
    """Tests for SummaryWorkbookWriter."""

    def _write(self, tmp_path, document, metadata, settings=None):
        self.logger = RecordingDiagnostics()
        path = SummaryWorkbookWriter(self.logger).write(
            document,
            metadata,
            settings or DataDictionarySettings(),
            tmp_path / "out" / "summary.xlsx",
        )
        return load_workbook(path)

    def test_sheets(self, tmp_path, document, metadata):
        workbook = self._write(tmp_path, document, metadata)

        assert workbook.sheetnames == [
            SheetNames.INFORMATION,
            SheetNames.PROFILES,
            SheetNames.DATA_ELEMENTS,
            SheetNames.VALUE_SETS,
            SheetNames.VALUE_SET_CODES,
            SheetNames.EXTENSIONS,
        ]

    def test_data_elements_sheet(self, tmp_path, document, metadata):
        sheet = self._write(tmp_path, document, metadata)[SheetNames.DATA_ELEMENTS]

        assert header(sheet) == list(ColumnNames.ORDERED)
        assert sheet.max_row == 3
        fhir_column = ColumnNames.ORDERED.index(ColumnNames.FHIR_ELEMENT) + 1
        assert sheet.cell(row=3, column=fhir_column).value == "Observation.value[x]"
        assert sheet.freeze_panes == "A2"

    def test_default_group_and_uri_columns_are_hidden(self, tmp_path, document, metadata):
        workbook = self._write(tmp_path, document, metadata)

        assert hidden_columns(workbook[SheetNames.DATA_ELEMENTS]) == {"A", "K", "L"}
        assert hidden_columns(workbook[SheetNames.PROFILES]) == {"A"}

    def test_named_groups_stay_visible(self, tmp_path, document, metadata):
        grouped = DataDictionaryDocument(
            profiles=(SummaryRow(title="P", url="http://p", group="Core"),),
            profile_elements=(data_element_row("Patient.gender", group="Core"),),
        )

        workbook = self._write(tmp_path, grouped, metadata)

        assert hidden_columns(workbook[SheetNames.DATA_ELEMENTS]) == {"K", "L"}
        assert hidden_columns(workbook[SheetNames.PROFILES]) == set()

    def test_value_set_codes_grouped_under_heading(self, tmp_path, document, metadata):
        sheet = self._write(tmp_path, document, metadata)[SheetNames.VALUE_SET_CODES]

        assert sheet["A2"].value == "Race"
        assert sheet["E3"].value == "1"
        assert sheet["E4"].value == "2"
        assert sheet.row_dimensions[3].outline_level == 1
        assert sheet.row_dimensions[4].outline_level == 1

    def test_missing_value_sets_and_extensions(self, tmp_path, metadata):
        minimal = DataDictionaryDocument(
            profile_elements=(data_element_row("Patient.gender"),)
        )

        workbook = self._write(tmp_path, minimal, metadata)

        assert SheetNames.VALUE_SETS not in workbook.sheetnames
        assert SheetNames.EXTENSIONS not in workbook.sheetnames
        assert self.logger.of("warning") == [
            "No value set found. Skipped creating tab for value set",
            "No Extension found. Skipped creating tab for extension",
        ]

    def test_information_sheet(self, tmp_path, document, metadata):
        settings = DataDictionarySettings(title="My Data Dictionary")

        sheet = self._write(tmp_path, document, metadata, settings)[SheetNames.INFORMATION]

        assert sheet["B2"].value == "My Data Dictionary"
        assert sheet["B4"].value == "IG name"
        assert sheet["C4"].value == "TestIG"
        assert sheet["B2"].font.sz == 16
