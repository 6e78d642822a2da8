from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from ...constants import ColumnNames

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .element_definition import ElementDefinition


@dataclass(frozen=True, slots=True)
class ValueSetData:
    uri: str = ""
    binding: str = ""


@dataclass(frozen=True, slots=True)
class ResolutionContext:
    """Metadata threaded through element resolution.

    ``sub_element_of`` points back at the element that spawned this one and
    is only used for display context.
    """

    profile_title: str
    profile_group: str
    base_resource_type: str
    source_profile_uri: str
    element_structure_definition_uri: str
    sub_element_of: ElementDefinition | None = None

    def derive(self, **changes: Any) -> ResolutionContext:
        return replace(self, **changes)


_FIELD_COLUMNS: tuple[tuple[str, str], ...] = (
    ("group", ColumnNames.GROUP),
    ("profile_title", ColumnNames.PROFILE_TITLE),
    ("data_element_name", ColumnNames.DATA_ELEMENT_NAME),
    ("definition", ColumnNames.DEFINITION),
    ("required", ColumnNames.REQUIRED),
    ("occurrences", ColumnNames.OCCURRENCES),
    ("data_type", ColumnNames.DATA_TYPE),
    ("value_set_uri", ColumnNames.VALUE_SET_URI),
    ("value_set_binding", ColumnNames.VALUE_SET_BINDING),
    ("fhir_element", ColumnNames.FHIR_ELEMENT),
    ("source_profile_uri", ColumnNames.SOURCE_PROFILE_URI),
    ("element_structure_definition_uri", ColumnNames.ELEMENT_SD_URI),
    ("used_by_measure", ColumnNames.USED_BY_MEASURE),
)


@dataclass(frozen=True, slots=True)
class DataElementRow:
    """One resolved row of the data elements sheet.

    ``extra`` carries columns beyond the fixed set (for example ``Note``)
    so documents written by other runs load without loss.
    """

    group: str
    profile_title: str
    data_element_name: str
    definition: str
    required: str
    occurrences: str
    data_type: str
    value_set_uri: str
    value_set_binding: str
    fhir_element: str
    source_profile_uri: str
    element_structure_definition_uri: str
    used_by_measure: str = ""
    extra: Mapping[str, str] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return element_key(
            self.source_profile_uri,
            self.element_structure_definition_uri,
            self.fhir_element,
        )

    def with_changes(self, **changes: Any) -> DataElementRow:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, str]:
        row = {column: getattr(self, name) for name, column in _FIELD_COLUMNS}
        row.update(self.extra)
        return row

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DataElementRow:
        known = {column for _, column in _FIELD_COLUMNS}
        values = {name: _as_text(data.get(column)) for name, column in _FIELD_COLUMNS}
        extra = {k: _as_text(v) for k, v in data.items() if k not in known}
        return cls(**values, extra=extra)


def element_key(
    source_profile_uri: str, element_structure_definition_uri: str, fhir_element: str
) -> str:
    return f"{source_profile_uri}>{element_structure_definition_uri}>{fhir_element}"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)
