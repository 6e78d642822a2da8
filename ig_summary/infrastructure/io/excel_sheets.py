"""Worksheet helpers shared by the summary and diff workbooks.

Sheets are written from pandas DataFrames through ``pd.ExcelWriter`` on the
openpyxl engine, then styled on the underlying openpyxl worksheet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from ...constants import Defaults, SummaryColumns

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from openpyxl.worksheet.worksheet import Worksheet

    from ...domain.entities.data_dictionary import SummaryRow

HEADER_FONT = Font(bold=True)
CHANGED_FILL = PatternFill(start_color="FFFFF601", end_color="FFFFF601", fill_type="solid")
WRAP = Alignment(wrap_text=True, vertical="top")

MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 60


def frame_from_rows(
    rows: Iterable[Mapping[str, object]], columns: Sequence[str]
) -> pd.DataFrame:
    """DataFrame with ``columns`` first, then any extra keys the rows carry."""
    records = [dict(row) for row in rows]
    ordered = list(columns)
    for record in records:
        ordered.extend(key for key in record if key not in ordered)
    return pd.DataFrame.from_records(records, columns=ordered).fillna("")


def write_table(
    writer: pd.ExcelWriter,
    sheet_name: str,
    frame: pd.DataFrame,
    *,
    hidden_columns: Iterable[str] = (),
    wrap: bool = False,
    widths: Mapping[str, int] | None = None,
) -> Worksheet:
    frame.to_excel(writer, sheet_name=sheet_name, index=False)
    sheet = writer.sheets[sheet_name]

    for cell in sheet[1]:
        cell.font = HEADER_FONT
    sheet.freeze_panes = "A2"
    if len(frame.columns):
        sheet.auto_filter.ref = sheet.dimensions

    autosize_columns(sheet, frame)
    columns = list(frame.columns)
    for name, width in (widths or {}).items():
        if name in columns:
            sheet.column_dimensions[column_letter(columns, name)].width = width
    for name in hidden_columns:
        if name in columns:
            sheet.column_dimensions[column_letter(columns, name)].hidden = True

    if wrap:
        for row in sheet.iter_rows(min_row=2):
            for cell in row:
                cell.alignment = WRAP
    return sheet


def autosize_columns(
    sheet: Worksheet, frame: pd.DataFrame, *, first_column: int = 1
) -> None:
    for index, name in enumerate(frame.columns, start=first_column):
        longest = max(
            [len(str(name)), *(len(str(v)) for v in frame[name].tolist())],
            default=0,
        )
        width = min(max(longest + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)
        sheet.column_dimensions[get_column_letter(index)].width = width


def column_letter(columns: Sequence[str], name: str) -> str:
    return get_column_letter(list(columns).index(name) + 1)


def listing_frame(rows: Iterable[SummaryRow], *, grouped: bool = True) -> pd.DataFrame:
    """Profiles, value sets, extensions or code systems as a sheet."""
    keys = [key for key in SummaryColumns.LABELS if grouped or key != "group"]
    records = []
    for row in rows:
        data = row.to_dict()
        if grouped:
            data.setdefault("group", row.group or Defaults.GROUP)
        records.append({SummaryColumns.LABELS[key]: data.get(key, "") for key in keys})
    return frame_from_rows(records, [SummaryColumns.LABELS[key] for key in keys])
