"""ValueSet → value set code rows."""

from __future__ import annotations

from dataclasses import replace
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from ...constants import CodeSystems, FilterOperators
from ..entities.data_dictionary import ValueSetRow

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..entities.settings import DataDictionarySettings
    from .ports import DiagnosticsPort


class IncludedValueSetBehavior(StrEnum):
    REFERENCE = "reference"
    EXPAND = "expand"


def normalize_code(code_system: str, code: str) -> str:
    """Comparison form of a code; ICD-10-CM codes lose their decimal points."""
    if code_system in CodeSystems.ICD10CM:
        return code.replace(".", "")
    return code


def _sort_key(row: ValueSetRow) -> tuple[str, bool, str]:
    return (row.code_system, row.code is None, row.code or "")


class ValueSetExpander:
    """Builds the "Value set codes" rows for one value set.

    Included value sets are shown as a single "Include codes from ..." row
    unless ``included_value_sets`` is ``EXPAND``, in which case their codes
    are pulled in and relabelled as belonging to the including set.
    """

    def __init__(
        self,
        settings: DataDictionarySettings,
        diagnostics: DiagnosticsPort,
        included_value_sets: IncludedValueSetBehavior = IncludedValueSetBehavior.REFERENCE,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.diagnostics = diagnostics
        self.included_value_sets = included_value_sets

    def expand(
        self,
        value_set: Mapping[str, Any],
        all_value_sets: Mapping[str, Mapping[str, Any]],
    ) -> list[ValueSetRow]:
        return self._expand(value_set, all_value_sets, frozenset())

    def _expand(
        self,
        value_set: Mapping[str, Any],
        all_value_sets: Mapping[str, Mapping[str, Any]],
        visiting: frozenset[str],
    ) -> list[ValueSetRow]:
        includes = (value_set.get("compose") or {}).get("include")
        if not includes:
            return []

        name = _display_name(value_set)
        url = str(value_set.get("url", ""))
        visiting = visiting | {url}
        rows: list[ValueSetRow] = []
        filters: dict[str, list[str]] = {}

        for include in includes:
            system = str(include.get("system", ""))
            if include.get("concept"):
                rows.extend(
                    ValueSetRow(
                        value_set_name=name,
                        value_set_uri=url,
                        code_system=self.settings.code_system_name(system),
                        code=str(concept.get("code", "")),
                        code_description=concept.get("display"),
                    )
                    for concept in include["concept"]
                )
            elif include.get("valueSet"):
                rows.extend(
                    self._included(name, url, include["valueSet"], all_value_sets, visiting)
                )
            elif include.get("filter"):
                clauses = filters.setdefault(system, [])
                clauses.extend(
                    f"{f.get('property', '')}"
                    f"{FilterOperators.PHRASES.get(f.get('op', ''), FilterOperators.DEFAULT_PHRASE)}"
                    f"{f.get('value', '')}"
                    for f in include["filter"]
                )

        rows.extend(
            ValueSetRow(
                value_set_name=name,
                value_set_uri=url,
                code_system=self.settings.code_system_name(system),
                logical_definition=" OR ".join(clauses),
            )
            for system, clauses in filters.items()
        )
        return sorted(rows, key=_sort_key)

    def _included(
        self,
        name: str,
        url: str,
        included_urls: list[str],
        all_value_sets: Mapping[str, Mapping[str, Any]],
        visiting: frozenset[str],
    ) -> list[ValueSetRow]:
        rows: list[ValueSetRow] = []
        for included_url in included_urls:
            included = all_value_sets.get(included_url)
            if included is None:
                self.diagnostics.error(
                    f"Value set expansion {included_url} could not be found."
                )
                break

            if self.included_value_sets is IncludedValueSetBehavior.REFERENCE:
                rows.append(
                    ValueSetRow(
                        value_set_name=name,
                        value_set_uri=url,
                        code_system="n/a",
                        logical_definition=f"Include codes from {_display_name(included)}",
                    )
                )
            elif included_url in visiting:
                self.diagnostics.warning(
                    f"Value set {included_url} includes itself; not expanding it again."
                )
            else:
                rows.extend(
                    replace(row, value_set_name=name, value_set_uri=url)
                    for row in self._expand(included, all_value_sets, visiting)
                )
        return rows


def _display_name(value_set: Mapping[str, Any]) -> str:
    return str(value_set.get("title") or value_set.get("name") or "")
