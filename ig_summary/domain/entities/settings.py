"""Run settings for summary and diff runs.

Both settings objects are loaded once per run and never mutated afterwards;
they are passed explicitly to every service that branches on them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from ...constants import ColumnNames, Defaults, Extensions

if TYPE_CHECKING:
    from collections.abc import Mapping


class DataDictionaryMode(StrEnum):
    MUST_SUPPORT = "ms"
    ALL = "all"

    @classmethod
    def parse(cls, value: str | DataDictionaryMode) -> DataDictionaryMode:
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"mode must be one of {choices}, got {value!r}") from exc


@dataclass(frozen=True, slots=True)
class DataDictionarySettings:
    mode: DataDictionaryMode = DataDictionaryMode.MUST_SUPPORT
    title: str | None = None
    filename: str | None = None
    code_systems: Mapping[str, str] = field(default_factory=dict)
    information_tab_content: Mapping[str, str] = field(default_factory=dict)
    touch_up_humanized_element_names: Mapping[str, str] = field(default_factory=dict)
    suppress_fixed_codes: bool = False
    extension_column: tuple[str, ...] = (Extensions.USED_BY_MEASURE,)
    exclude_element: tuple[str, ...] = ()

    @property
    def must_support_only(self) -> bool:
        return self.mode is DataDictionaryMode.MUST_SUPPORT

    def code_system_name(self, uri: str) -> str:
        return self.code_systems.get(uri, uri)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], mode: DataDictionaryMode | None = None
    ) -> DataDictionarySettings:
        resolved_mode = mode or DataDictionaryMode.parse(
            data.get("mode") or Defaults.MODE
        )
        return cls(
            mode=resolved_mode,
            title=_optional_str(data, "title"),
            filename=_optional_str(data, "filename"),
            code_systems=_str_mapping(data, "codeSystems"),
            information_tab_content=_str_mapping(data, "informationTabContent"),
            touch_up_humanized_element_names=_str_mapping(
                data, "touchUpHumanizedElementNames"
            ),
            suppress_fixed_codes=bool(data.get("suppressFixedCodes", False)),
            extension_column=_str_tuple(data, "extensionColumn")
            or (Extensions.USED_BY_MEASURE,),
            exclude_element=_str_tuple(data, "excludeElement"),
        )


@dataclass(frozen=True, slots=True)
class RemapRule:
    column: str
    old: str
    new: str


@dataclass(frozen=True, slots=True)
class NoteRule:
    """A note attached to rows matching any of ``appear_by``.

    Every field within one criteria mapping must match; the mappings
    themselves are alternatives.
    """

    note: str
    appear_by: tuple[Mapping[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class DiffSettings:
    left_name: str = Defaults.LEFT_NAME
    right_name: str = Defaults.RIGHT_NAME
    filename: str = Defaults.DIFF_FILENAME
    renamed_value_sets: Mapping[str, str] = field(default_factory=dict)
    ignore_columns_when_comparing: frozenset[str] = frozenset()
    remap_values: tuple[RemapRule, ...] = ()
    notes: tuple[NoteRule, ...] = ()
    suppress_rows: tuple[Mapping[str, str], ...] = ()

    def follow_value_set_rename(self, uri: str) -> str:
        return self.renamed_value_sets.get(uri, uri)

    def remapped_profile_url(self, url: str) -> str:
        for rule in self.remap_values:
            if rule.column == ColumnNames.SOURCE_PROFILE_URI and rule.old == url:
                return rule.new
        return url

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DiffSettings:
        value_sets = data.get("valueSets") or {}
        if not isinstance(value_sets, dict):
            raise ValueError("valueSets must be a mapping")
        renamed = {
            str(entry["old"]): str(entry["new"])
            for entry in _mapping_list(value_sets, "renamed")
        }
        return cls(
            left_name=_optional_str(data, "leftName") or Defaults.LEFT_NAME,
            right_name=_optional_str(data, "rightName") or Defaults.RIGHT_NAME,
            filename=_optional_str(data, "filename") or Defaults.DIFF_FILENAME,
            renamed_value_sets=renamed,
            ignore_columns_when_comparing=frozenset(
                _str_tuple(data, "ignoreColumnsWhenComparing")
            ),
            remap_values=tuple(
                RemapRule(
                    column=str(entry["column"]),
                    old=_cell_text(entry["old"]),
                    new=_cell_text(entry["new"]),
                )
                for entry in _mapping_list(data, "remapValues")
            ),
            notes=tuple(
                NoteRule(
                    note=str(entry["note"]),
                    appear_by=tuple(
                        _stringify(criteria)
                        for criteria in _mapping_list(entry, "appearBy")
                    ),
                )
                for entry in _mapping_list(data, "notes")
            ),
            suppress_rows=tuple(
                _stringify(criteria) for criteria in _mapping_list(data, "suppressRows")
            ),
        )


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    return None if value is None else str(value)


def _str_mapping(data: Mapping[str, Any], key: str) -> dict[str, str]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be a mapping")
    return _stringify(value)


def _str_tuple(data: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key) or ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValueError(f"{key} must be a list")
    return tuple(str(v) for v in value)


def _mapping_list(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise ValueError(f"{key} must be a list of mappings")
    return value


def _cell_text(value: Any) -> str:
    """Spreadsheet form of a YAML scalar; booleans are written lower-case."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _stringify(mapping: Mapping[str, Any]) -> dict[str, str]:
    return {str(k): _cell_text(v) for k, v in mapping.items()}
