from __future__ import annotations

from typing import TYPE_CHECKING, override

import pandas as pd
from openpyxl.styles import Font

from ...application.ports.services import DiffWorkbookWriterPort
from ...constants import ColumnNames, SheetNames, ValueSetColumns
from .excel_sheets import (
    CHANGED_FILL,
    HEADER_FONT,
    autosize_columns,
    column_letter,
    frame_from_rows,
    listing_frame,
    write_table,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from ...domain.services.differ import ChangedRowPair, Differ

_NOTE_FONT = Font(bold=True, color="FFFF0000")
_TITLE_FONT = Font(bold=True, size=16)

SHEET_DESCRIPTIONS = (
    f"{SheetNames.ADDED_PROFILES}: profiles absent from the old data dictionary. "
    "Their elements are not part of the diff.",
    f"{SheetNames.REMOVED_PROFILES}: profiles absent from the new data dictionary. "
    "Their elements are not part of the diff.",
    f"{SheetNames.ADDED_ELEMENTS}: elements in the new data dictionary only.",
    f"{SheetNames.REMOVED_ELEMENTS}: elements in the old data dictionary only.",
    f"{SheetNames.CHANGED_ELEMENTS}: elements in both data dictionaries with at "
    "least one changed attribute. Changes are highlighted in yellow.",
    f"{SheetNames.ADDED_VALUE_SETS}: value sets absent from the old data dictionary.",
    f"{SheetNames.REMOVED_VALUE_SETS}: value sets absent from the new data dictionary.",
    f"{SheetNames.ADDED_CODES}: codes added to value sets present in both.",
    f"{SheetNames.REMOVED_CODES}: codes removed from value sets present in both.",
    f"{SheetNames.CHANGED_CODES}: changed code descriptions, highlighted in yellow.",
)

_CHANGED_ELEMENT_COLUMNS = (ColumnNames.FILE, *ColumnNames.ORDERED)
_CHANGED_CODE_COLUMNS = (ColumnNames.FILE, *ValueSetColumns.ORDERED)


def changed_rows_frame(
    pairs: Iterable[ChangedRowPair], columns: tuple[str, ...]
) -> tuple[pd.DataFrame, list[tuple[int, tuple[str, ...]]], list[int]]:
    """Left row, right row, then a note or spacer row per changed pair.

    Also returns the frame positions whose changed cells get highlighted,
    and the positions of note rows.
    """
    records: list[Mapping[str, str]] = []
    highlighted: list[tuple[int, tuple[str, ...]]] = []
    notes: list[int] = []
    for pair in pairs:
        for row in (pair.left, pair.right):
            highlighted.append((len(records), pair.changed_fields))
            records.append(row)
        if pair.note:
            notes.append(len(records))
            records.append({ColumnNames.DEFINITION: pair.note})
        else:
            records.append({})
    return frame_from_rows(records, columns), highlighted, notes


class DiffWorkbookWriter(DiffWorkbookWriterPort):
    pass

    @override
    def write(self, differ: Differ, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        hide_group = differ.all_groups_are_default
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            self._write_information(writer, differ)

            for sheet_name, rows in (
                (SheetNames.ADDED_PROFILES, differ.added_profiles.values()),
                (SheetNames.REMOVED_PROFILES, differ.removed_profiles.values()),
            ):
                write_table(
                    writer,
                    sheet_name,
                    listing_frame(rows),
                    hidden_columns=("Group",) if hide_group else (),
                )

            element_hidden = [ColumnNames.SOURCE_PROFILE_URI, ColumnNames.ELEMENT_SD_URI]
            if hide_group:
                element_hidden.append(ColumnNames.GROUP)
            for sheet_name, elements in (
                (SheetNames.ADDED_ELEMENTS, differ.added_elements_in_existing_profiles),
                (SheetNames.REMOVED_ELEMENTS, differ.removed_elements_in_existing_profiles),
            ):
                write_table(
                    writer,
                    sheet_name,
                    frame_from_rows(elements.values(), ColumnNames.ORDERED),
                    hidden_columns=element_hidden,
                    wrap=True,
                    widths={ColumnNames.DEFINITION: 75},
                )

            self._write_changed(
                writer,
                SheetNames.CHANGED_ELEMENTS,
                differ.changed_element_pairs(),
                _CHANGED_ELEMENT_COLUMNS,
                hidden_columns=element_hidden,
            )

            for sheet_name, rows in (
                (SheetNames.ADDED_VALUE_SETS, differ.added_value_sets.values()),
                (SheetNames.REMOVED_VALUE_SETS, differ.removed_value_sets.values()),
            ):
                write_table(writer, sheet_name, listing_frame(rows, grouped=False))

            for sheet_name, values in (
                (SheetNames.ADDED_CODES, differ.added_values_in_existing_value_sets),
                (SheetNames.REMOVED_CODES, differ.removed_values_in_existing_value_sets),
            ):
                write_table(
                    writer, sheet_name, frame_from_rows(values.values(), ValueSetColumns.ORDERED)
                )

            self._write_changed(
                writer,
                SheetNames.CHANGED_CODES,
                differ.changed_value_set_value_pairs(),
                _CHANGED_CODE_COLUMNS,
            )
        return path

    @staticmethod
    def _write_information(writer: pd.ExcelWriter, differ: Differ) -> None:
        settings = differ.settings
        left, right = differ.left.metadata, differ.right.metadata
        rows = [
            ("", ""),
            ("Data Dictionary Diff", ""),
            ("", ""),
            ("Implementation guide", right.title),
            ("", ""),
            ('"Old" data dictionary', f"{settings.left_name} ({left.version})"),
            ('"New" data dictionary', f"{settings.right_name} ({right.version})"),
            ("", ""),
            ("Sheet descriptions", "\n\n".join(SHEET_DESCRIPTIONS)),
        ]
        frame = pd.DataFrame(rows, columns=["label", "value"])
        frame.to_excel(
            writer, sheet_name=SheetNames.INFORMATION, index=False, header=False, startcol=1
        )
        sheet = writer.sheets[SheetNames.INFORMATION]
        for row_index in range(1, len(rows) + 1):
            sheet.cell(row=row_index, column=2).font = HEADER_FONT
        sheet.cell(row=2, column=2).font = _TITLE_FONT
        autosize_columns(sheet, frame, first_column=2)
        sheet.column_dimensions["A"].width = 4
        sheet.column_dimensions["C"].width = 100

    @staticmethod
    def _write_changed(
        writer: pd.ExcelWriter,
        sheet_name: str,
        pairs: list[ChangedRowPair],
        columns: tuple[str, ...],
        *,
        hidden_columns: Iterable[str] = (),
    ) -> None:
        frame, highlighted, notes = changed_rows_frame(pairs, columns)
        sheet = write_table(
            writer,
            sheet_name,
            frame,
            hidden_columns=hidden_columns,
            widths={ColumnNames.FILE: 15, ColumnNames.DEFINITION: 75},
        )
        frame_columns = list(frame.columns)
        # Frame position 0 is worksheet row 2, below the header.
        for position, fields in highlighted:
            for name in fields:
                if name in frame_columns:
                    cell = f"{column_letter(frame_columns, name)}{position + 2}"
                    sheet[cell].fill = CHANGED_FILL
        if ColumnNames.DEFINITION in frame_columns:
            letter = column_letter(frame_columns, ColumnNames.DEFINITION)
            for position in notes:
                sheet[f"{letter}{position + 2}"].font = _NOTE_FONT
