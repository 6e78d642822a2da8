"""Differ: classify what changed between two data dictionary documents.

Rows are indexed by natural key:

* profiles and value sets by URL,
* elements by ``source profile>element structure definition>FHIR path``,
* value set codes by ``value set URL>code=<code>`` or ``>logic=<definition>``.

The left ("old") document can be reconciled with the right ("new") one
through the diff settings: cell remaps, value set renames, suppressed rows
and notes. Input documents are never mutated; every row is copied into a
working dictionary first. Each classification is computed on first access
and cached on the instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

from ...constants import ColumnNames, Defaults, ValueSetColumns
from ..entities.data_element import element_key
from .value_set_expander import normalize_code

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ..entities.data_dictionary import (
        DataDictionaryDocument,
        SummaryRow,
        ValueSetRow,
    )
    from ..entities.settings import DiffSettings
    from .ports import DiagnosticsPort

type Row = dict[str, str]

NOTE_PREFIX = "**Note:** "


@dataclass(frozen=True, slots=True)
class FieldChange:
    field: str
    old: str | None
    new: str | None


@dataclass(frozen=True, slots=True)
class ChangeDetail:
    key: str
    label: str
    changes: tuple[FieldChange, ...]


@dataclass(frozen=True, slots=True)
class ChangedRowPair:
    """Left and right rows of one changed element, ready for display."""

    key: str
    left: Row
    right: Row
    changed_fields: tuple[str, ...]
    note: str | None = None


@dataclass(frozen=True, slots=True)
class DiffSummary:
    added_profiles: int
    removed_profiles: int
    added_elements: int
    removed_elements: int
    changed_elements: int
    added_value_sets: int
    removed_value_sets: int
    added_value_set_values: int
    removed_value_set_values: int
    changed_value_set_values: int


def ordered_fields(fields: Iterable[str]) -> tuple[str, ...]:
    """Fields in sheet column order, unknown ones last and alphabetical."""
    known = {name: index for index, name in enumerate(ColumnNames.ORDERED)}
    known.update(
        {name: len(known) + i for i, name in enumerate(ValueSetColumns.ORDERED)}
    )
    return tuple(sorted(fields, key=lambda f: (known.get(f, len(known)), f)))


class Differ:
    def __init__(
        self,
        left: DataDictionaryDocument,
        right: DataDictionaryDocument,
        settings: DiffSettings,
        diagnostics: DiagnosticsPort,
    ) -> None:
        super().__init__()
        self.left = left
        self.right = right
        self.settings = settings
        self.diagnostics = diagnostics

        self.left_profiles = {
            settings.remapped_profile_url(row.url): row for row in left.profiles
        }
        self.right_profiles = {row.url: row for row in right.profiles}

        self.left_elements = self._index_elements(r.to_dict() for r in left.profile_elements)
        self.right_elements = self._index_elements(
            r.to_dict() for r in right.profile_elements
        )

        self.left_value_sets = {
            settings.follow_value_set_rename(row.url): row for row in left.value_sets
        }
        self.right_value_sets = {row.url: row for row in right.value_sets}

        self.left_values = {
            self.value_set_value_key(row): row.to_dict() for row in left.value_set_elements
        }
        self.right_values = {
            self.value_set_value_key(row): row.to_dict()
            for row in right.value_set_elements
        }

    # Preprocessing -----------------------------------------------------------

    def remap_cell_values(self, row: Mapping[str, str]) -> Row:
        remapped = dict(row)
        for rule in self.settings.remap_values:
            if rule.column in remapped and remapped[rule.column] == rule.old:
                remapped[rule.column] = rule.new
        return remapped

    def is_suppressed(self, row: Mapping[str, str]) -> bool:
        for criteria in self.settings.suppress_rows:
            if all(row.get(column) == value for column, value in criteria.items()):
                self.diagnostics.warning(
                    f"Suppressing {row.get(ColumnNames.FHIR_ELEMENT, '')}"
                )
                return True
        return False

    def note_for(self, row: Mapping[str, str]) -> str | None:
        for rule in self.settings.notes:
            for criteria in rule.appear_by:
                if all(row.get(column) == value for column, value in criteria.items()):
                    return f"{NOTE_PREFIX}{rule.note}"
        return None

    def _index_elements(self, rows: Iterable[Row]) -> dict[str, Row]:
        indexed: dict[str, Row] = {}
        for raw in rows:
            row = self.remap_cell_values(raw)
            if self.is_suppressed(row):
                continue
            row.pop(ColumnNames.NOTE, None)
            note = self.note_for(row)
            if note is not None:
                row[ColumnNames.NOTE] = note
            indexed[
                element_key(
                    row.get(ColumnNames.SOURCE_PROFILE_URI, ""),
                    row.get(ColumnNames.ELEMENT_SD_URI, ""),
                    row.get(ColumnNames.FHIR_ELEMENT, ""),
                )
            ] = row
        return indexed

    def value_set_value_key(self, row: ValueSetRow) -> str:
        key = self.settings.follow_value_set_rename(row.value_set_uri)
        if row.logical_definition:
            return f"{key}>logic={row.logical_definition}"
        return f"{key}>code={normalize_code(row.code_system, row.code or '')}"

    # Profiles ----------------------------------------------------------------

    @cached_property
    def added_profiles(self) -> dict[str, SummaryRow]:
        return _missing_from(self.right_profiles, self.left_profiles)

    @cached_property
    def removed_profiles(self) -> dict[str, SummaryRow]:
        return _missing_from(self.left_profiles, self.right_profiles)

    # Elements ----------------------------------------------------------------

    @cached_property
    def added_elements(self) -> dict[str, Row]:
        return {
            key: _fold_note(row)
            for key, row in _missing_from(self.right_elements, self.left_elements).items()
        }

    @cached_property
    def removed_elements(self) -> dict[str, Row]:
        return {
            key: _fold_note(row)
            for key, row in _missing_from(self.left_elements, self.right_elements).items()
        }

    @cached_property
    def changed_elements(self) -> dict[str, frozenset[str]]:
        ignored = self.settings.ignore_columns_when_comparing | {ColumnNames.NOTE}
        changed: dict[str, frozenset[str]] = {}
        for key, right in self.right_elements.items():
            left = self.left_elements.get(key)
            if left is None:
                continue
            fields = _differing_fields(left, right, ignored)
            if fields:
                changed[key] = fields
        return changed

    @property
    def added_elements_in_existing_profiles(self) -> dict[str, Row]:
        return {
            key: row
            for key, row in self.added_elements.items()
            if row.get(ColumnNames.SOURCE_PROFILE_URI) not in self.added_profiles
        }

    @property
    def removed_elements_in_existing_profiles(self) -> dict[str, Row]:
        return {
            key: row
            for key, row in self.removed_elements.items()
            if row.get(ColumnNames.SOURCE_PROFILE_URI) not in self.removed_profiles
        }

    # Value sets --------------------------------------------------------------

    @cached_property
    def added_value_sets(self) -> dict[str, SummaryRow]:
        return _missing_from(self.right_value_sets, self.left_value_sets)

    @cached_property
    def removed_value_sets(self) -> dict[str, SummaryRow]:
        return _missing_from(self.left_value_sets, self.right_value_sets)

    @cached_property
    def added_value_set_values(self) -> dict[str, Row]:
        return _missing_from(self.right_values, self.left_values)

    @cached_property
    def removed_value_set_values(self) -> dict[str, Row]:
        return _missing_from(self.left_values, self.right_values)

    @cached_property
    def changed_value_set_values(self) -> dict[str, frozenset[str]]:
        changed: dict[str, frozenset[str]] = {}
        for key, right in self.right_values.items():
            left = self.left_values.get(key)
            if left is None:
                continue
            fields = _differing_fields(
                self.remap_cell_values(left), self.remap_cell_values(right), frozenset()
            )
            if fields:
                changed[key] = fields
        return changed

    @property
    def added_values_in_existing_value_sets(self) -> dict[str, Row]:
        return _outside(self.added_value_set_values, self.added_value_sets)

    @property
    def removed_values_in_existing_value_sets(self) -> dict[str, Row]:
        return _outside(self.removed_value_set_values, self.removed_value_sets)

    # Counts and textual output -----------------------------------------------

    @property
    def number_of_added_elements(self) -> int:
        return len(self.added_elements)

    @property
    def number_of_removed_elements(self) -> int:
        return len(self.removed_elements)

    @property
    def number_of_changed_elements(self) -> int:
        return len(self.changed_elements)

    @property
    def all_groups_are_default(self) -> bool:
        rows = [*self.left_profiles.values(), *self.right_profiles.values()]
        return all(row.group == Defaults.GROUP for row in rows)

    def summary(self) -> DiffSummary:
        return DiffSummary(
            added_profiles=len(self.added_profiles),
            removed_profiles=len(self.removed_profiles),
            added_elements=self.number_of_added_elements,
            removed_elements=self.number_of_removed_elements,
            changed_elements=self.number_of_changed_elements,
            added_value_sets=len(self.added_value_sets),
            removed_value_sets=len(self.removed_value_sets),
            added_value_set_values=len(self.added_value_set_values),
            removed_value_set_values=len(self.removed_value_set_values),
            changed_value_set_values=len(self.changed_value_set_values),
        )

    def details(self) -> list[ChangeDetail]:
        details = []
        for key, fields in self.changed_elements.items():
            left = self.left_elements[key]
            right = self.right_elements[key]
            details.append(
                ChangeDetail(
                    key=key,
                    label=_element_label(left),
                    changes=tuple(
                        FieldChange(field=f, old=left.get(f), new=right.get(f))
                        for f in ordered_fields(fields)
                    ),
                )
            )
        return details

    def changed_element_pairs(self) -> list[ChangedRowPair]:
        pairs = []
        for key, fields in self.changed_elements.items():
            left = self.left_elements[key]
            pairs.append(
                ChangedRowPair(
                    key=key,
                    left=_display_row(left, self.settings.left_name),
                    right=_display_row(self.right_elements[key], self.settings.right_name),
                    changed_fields=ordered_fields(fields),
                    note=left.get(ColumnNames.NOTE),
                )
            )
        return pairs

    def changed_value_set_value_pairs(self) -> list[ChangedRowPair]:
        return [
            ChangedRowPair(
                key=key,
                left=_display_row(self.left_values[key], self.settings.left_name),
                right=_display_row(self.right_values[key], self.settings.right_name),
                changed_fields=ordered_fields(fields),
            )
            for key, fields in self.changed_value_set_values.items()
        ]

    def log_summary(self, logger: DiagnosticsPort) -> None:
        for count, word in (
            (self.number_of_added_elements, "added"),
            (self.number_of_removed_elements, "removed"),
            (self.number_of_changed_elements, "changed"),
        ):
            if count == 0:
                logger.info(f"0 {word} elements")
            else:
                logger.warning(f"{count} {word} element(s)")

    def log_details(self, logger: DiagnosticsPort) -> None:
        for detail in self.details():
            logger.info(detail.label)
            for change in detail.changes:
                logger.info(f"  {change.field}: {change.old!r} -> {change.new!r}")


def _missing_from[V](source: Mapping[str, V], other: Mapping[str, V]) -> dict[str, V]:
    return {key: value for key, value in source.items() if key not in other}


def _outside(values: Mapping[str, Row], value_sets: Mapping[str, object]) -> dict[str, Row]:
    return {
        key: row
        for key, row in values.items()
        if not any(key.startswith(f"{url}>") for url in value_sets)
    }


def _differing_fields(
    left: Mapping[str, str], right: Mapping[str, str], ignored: frozenset[str]
) -> frozenset[str]:
    fields = (left.keys() | right.keys()) - ignored
    return frozenset(f for f in fields if left.get(f) != right.get(f))


def _fold_note(row: Row) -> Row:
    folded = dict(row)
    note = folded.pop(ColumnNames.NOTE, None)
    if note:
        folded[ColumnNames.DEFINITION] = f"{folded.get(ColumnNames.DEFINITION, '')}\n\n{note}"
    return folded


def _display_row(row: Mapping[str, str], file_name: str) -> Row:
    display = {ColumnNames.FILE: file_name}
    display.update((k, v) for k, v in row.items() if k != ColumnNames.NOTE)
    return display


def _element_label(row: Mapping[str, str]) -> str:
    return (
        f"{row.get(ColumnNames.GROUP, '')} > {row.get(ColumnNames.PROFILE_TITLE, '')} "
        f"{row.get(ColumnNames.DATA_ELEMENT_NAME, '')}"
    )
