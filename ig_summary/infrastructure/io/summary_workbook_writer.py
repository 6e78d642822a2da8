from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING, override

import pandas as pd
from openpyxl.styles import Font
from titlecase import titlecase

from ...application.ports.services import SummaryWorkbookWriterPort
from ...constants import ColumnNames, Defaults, SheetNames, ValueSetColumns
from .excel_sheets import (
    HEADER_FONT,
    autosize_columns,
    frame_from_rows,
    listing_frame,
    write_table,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from ...application.models import ImplementationGuideMetadata
    from ...application.ports.services import LoggerPort
    from ...domain.entities.data_dictionary import DataDictionaryDocument, SummaryRow
    from ...domain.entities.settings import DataDictionarySettings

_TITLE_FONT = Font(bold=True, size=16)
_HEADING_FONT = Font(bold=True, size=14)
_HEADING_KEY = re.compile(r"^[A-Z ]*$")
_BLANK_KEY_PREFIX = "EMPTY-"
_LONG_TEXT_WIDTH = 100
_HIDDEN_ELEMENT_COLUMNS = (ColumnNames.SOURCE_PROFILE_URI, ColumnNames.ELEMENT_SD_URI)


def information_rows(
    document: DataDictionaryDocument,
    metadata: ImplementationGuideMetadata,
    settings: DataDictionarySettings,
    generated: datetime,
) -> tuple[list[tuple[str, str]], set[int]]:
    """Label/value lines of the information sheet and the heading line indexes.

    ``informationTabContent`` keys written in capitals become headings;
    keys starting with ``EMPTY-`` produce an unlabelled line.
    """
    rows: list[tuple[str, str]] = [
        ("", ""),
        (settings.title or "IG Summary", ""),
        ("", ""),
        ("IG name", metadata.name),
        ("IG URL", metadata.url),
        ("IG version", metadata.version),
        ("IG status", metadata.status),
        ("Base FHIR version", ", ".join(metadata.fhir_versions)),
        ("", ""),
        ("# Profiles", str(len(document.profiles))),
        ("# Extensions", str(len(document.extensions))),
        ("# Value Sets", str(len(document.value_sets))),
        ("# Code Systems", str(len(document.code_systems))),
        ("", ""),
        ("Data dictionary generated date", generated.strftime("%m/%d/%Y, %I:%M:%S %p")),
    ]
    headings: set[int] = set()
    for key, text in settings.information_tab_content.items():
        label = key
        if key.startswith(_BLANK_KEY_PREFIX):
            label = ""
        elif _HEADING_KEY.match(key):
            label = titlecase(key.lower())
            headings.add(len(rows))
        rows.append((label, text))
    return rows, headings


def _all_default(rows: Iterable[SummaryRow]) -> bool:
    return all((row.group or Defaults.GROUP) == Defaults.GROUP for row in rows)


class SummaryWorkbookWriter(SummaryWorkbookWriterPort):
    pass

    def __init__(self, logger: LoggerPort) -> None:
        super().__init__()
        self.logger = logger

    @override
    def write(
        self,
        document: DataDictionaryDocument,
        metadata: ImplementationGuideMetadata,
        settings: DataDictionarySettings,
        path: Path,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            self._write_information(writer, document, metadata, settings)
            self._write_profiles(writer, document)
            self._write_elements(writer, document)
            self._write_value_sets(writer, document)
            self._write_extensions(writer, document)
        return path

    def _write_information(
        self,
        writer: pd.ExcelWriter,
        document: DataDictionaryDocument,
        metadata: ImplementationGuideMetadata,
        settings: DataDictionarySettings,
    ) -> None:
        rows, headings = information_rows(document, metadata, settings, datetime.now())
        frame = pd.DataFrame(rows, columns=["label", "value"])
        frame.to_excel(
            writer, sheet_name=SheetNames.INFORMATION, index=False, header=False, startcol=1
        )
        sheet = writer.sheets[SheetNames.INFORMATION]
        for row_index in range(1, len(rows) + 1):
            sheet.cell(row=row_index, column=2).font = HEADER_FONT
        sheet.cell(row=2, column=2).font = _TITLE_FONT
        for index in headings:
            sheet.cell(row=index + 1, column=2).font = _HEADING_FONT
        autosize_columns(sheet, frame, first_column=2)
        sheet.column_dimensions["A"].width = 4
        sheet.column_dimensions["C"].width = _LONG_TEXT_WIDTH

    def _write_profiles(self, writer: pd.ExcelWriter, document: DataDictionaryDocument) -> None:
        frame = listing_frame(document.profiles, grouped=True)
        write_table(
            writer,
            SheetNames.PROFILES,
            frame,
            hidden_columns=("Group",) if _all_default(document.profiles) else (),
            widths={"Description": _LONG_TEXT_WIDTH},
        )

    def _write_elements(self, writer: pd.ExcelWriter, document: DataDictionaryDocument) -> None:
        frame = frame_from_rows(
            (row.to_dict() for row in document.profile_elements), ColumnNames.ORDERED
        )
        groups = frame[ColumnNames.GROUP].tolist()
        hidden = list(_HIDDEN_ELEMENT_COLUMNS)
        if all(group in ("", Defaults.GROUP) for group in groups):
            hidden.append(ColumnNames.GROUP)
        write_table(
            writer,
            SheetNames.DATA_ELEMENTS,
            frame,
            hidden_columns=hidden,
            wrap=True,
            widths={
                ColumnNames.GROUP: 20,
                ColumnNames.PROFILE_TITLE: 20,
                ColumnNames.DATA_ELEMENT_NAME: 20,
                ColumnNames.DEFINITION: 50,
            },
        )

    def _write_value_sets(
        self, writer: pd.ExcelWriter, document: DataDictionaryDocument
    ) -> None:
        if not document.value_sets:
            self.logger.warning("No value set found. Skipped creating tab for value set")
            return
        write_table(
            writer,
            SheetNames.VALUE_SETS,
            listing_frame(document.value_sets),
            widths={"Description": _LONG_TEXT_WIDTH},
        )

        # One heading line per value set; its codes are grouped beneath it.
        records: list[dict[str, str]] = []
        code_rows: list[int] = []
        current = None
        for row in document.value_set_elements:
            if row.value_set_name != current:
                current = row.value_set_name
                records.append({ValueSetColumns.NAME: current})
            records.append(row.to_dict())
            code_rows.append(len(records) + 1)
        frame = frame_from_rows(records, ValueSetColumns.ORDERED)
        sheet = write_table(writer, SheetNames.VALUE_SET_CODES, frame, wrap=True)
        for row_index in code_rows:
            sheet.row_dimensions[row_index].outline_level = 1

    def _write_extensions(
        self, writer: pd.ExcelWriter, document: DataDictionaryDocument
    ) -> None:
        if not document.extensions:
            self.logger.warning("No Extension found. Skipped creating tab for extension")
            return
        write_table(
            writer,
            SheetNames.EXTENSIONS,
            listing_frame(document.extensions),
            widths={"Description": _LONG_TEXT_WIDTH},
        )
