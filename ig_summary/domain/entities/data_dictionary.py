"""Data Dictionary Document: the unit exchanged between summary and diff runs.

Key names written by ``to_json_dict`` are the persisted interchange format;
changing them breaks loading documents produced by earlier runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ...constants import DocumentKeys, ValueSetColumns
from .data_element import DataElementRow

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class SummaryRow:
    """A profile, extension, value set or code system listing entry."""

    title: str
    url: str
    description: str = ""
    group: str | None = None

    def to_dict(self) -> dict[str, str]:
        row: dict[str, str] = {}
        if self.group is not None:
            row["group"] = self.group
        row["title"] = self.title
        row["url"] = self.url
        row["description"] = self.description
        return row

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SummaryRow:
        group = data.get("group")
        return cls(
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            description=str(data.get("description") or ""),
            group=None if group is None else str(group),
        )


@dataclass(frozen=True, slots=True)
class ValueSetRow:
    """One code, or one logical definition, of a value set. Never both."""

    value_set_name: str
    value_set_uri: str
    code_system: str
    code: str | None = None
    code_description: str | None = None
    logical_definition: str | None = None

    def __post_init__(self) -> None:
        if self.code is not None and self.logical_definition is not None:
            raise ValueError(
                "ValueSetRow must carry either a code or a logical definition"
            )

    def to_dict(self) -> dict[str, str]:
        row = {
            ValueSetColumns.NAME: self.value_set_name,
            ValueSetColumns.URI: self.value_set_uri,
            ValueSetColumns.CODE_SYSTEM: self.code_system,
        }
        if self.logical_definition is not None:
            row[ValueSetColumns.LOGICAL_DEFINITION] = self.logical_definition
        if self.code is not None:
            row[ValueSetColumns.CODE] = self.code
        if self.code_description is not None:
            row[ValueSetColumns.CODE_DESCRIPTION] = self.code_description
        return row

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ValueSetRow:
        return cls(
            value_set_name=str(data.get(ValueSetColumns.NAME) or ""),
            value_set_uri=str(data.get(ValueSetColumns.URI) or ""),
            code_system=str(data.get(ValueSetColumns.CODE_SYSTEM) or ""),
            code=data.get(ValueSetColumns.CODE),
            code_description=data.get(ValueSetColumns.CODE_DESCRIPTION),
            logical_definition=data.get(ValueSetColumns.LOGICAL_DEFINITION),
        )


@dataclass(frozen=True, slots=True)
class DataDictionaryMetadata:
    title: str = ""
    version: str = ""


@dataclass(frozen=True, slots=True)
class DataDictionaryDocument:
    profiles: tuple[SummaryRow, ...] = ()
    profile_elements: tuple[DataElementRow, ...] = ()
    value_sets: tuple[SummaryRow, ...] = ()
    value_set_elements: tuple[ValueSetRow, ...] = ()
    extensions: tuple[SummaryRow, ...] = ()
    code_systems: tuple[SummaryRow, ...] = ()
    metadata: DataDictionaryMetadata = field(default_factory=DataDictionaryMetadata)

    def to_json_dict(self) -> dict[str, Any]:
        return {
            DocumentKeys.PROFILES: [r.to_dict() for r in self.profiles],
            DocumentKeys.PROFILE_ELEMENTS: [r.to_dict() for r in self.profile_elements],
            DocumentKeys.VALUE_SETS: [r.to_dict() for r in self.value_sets],
            DocumentKeys.VALUE_SET_ELEMENTS: [
                r.to_dict() for r in self.value_set_elements
            ],
            DocumentKeys.EXTENSIONS: [r.to_dict() for r in self.extensions],
            DocumentKeys.CODE_SYSTEMS: [r.to_dict() for r in self.code_systems],
            DocumentKeys.METADATA: {
                "title": self.metadata.title,
                "version": self.metadata.version,
            },
        }

    @classmethod
    def from_json_dict(cls, data: Mapping[str, Any]) -> DataDictionaryDocument:
        metadata = data.get(DocumentKeys.METADATA) or {}
        return cls(
            profiles=_summary_rows(data.get(DocumentKeys.PROFILES)),
            profile_elements=tuple(
                DataElementRow.from_dict(r)
                for r in data.get(DocumentKeys.PROFILE_ELEMENTS) or ()
            ),
            value_sets=_summary_rows(data.get(DocumentKeys.VALUE_SETS)),
            value_set_elements=tuple(
                ValueSetRow.from_dict(r)
                for r in data.get(DocumentKeys.VALUE_SET_ELEMENTS) or ()
            ),
            extensions=_summary_rows(data.get(DocumentKeys.EXTENSIONS)),
            code_systems=_summary_rows(data.get(DocumentKeys.CODE_SYSTEMS)),
            metadata=DataDictionaryMetadata(
                title=str(metadata.get("title") or ""),
                version=str(metadata.get("version") or ""),
            ),
        )


def _summary_rows(rows: Any) -> tuple[SummaryRow, ...]:
    return tuple(SummaryRow.from_dict(r) for r in rows or ())
