"""Summary assembly: every profile element of an IG into one document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...constants import Defaults
from ..entities.data_dictionary import DataDictionaryDocument, SummaryRow
from ..entities.data_element import ResolutionContext

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ..entities.data_dictionary import DataDictionaryMetadata, ValueSetRow
    from ..entities.data_element import DataElementRow
    from ..entities.element_definition import StructureDefinition
    from .elements.factory import ElementResolver
    from .ports import DefinitionCatalogPort
    from .value_set_expander import ValueSetExpander


@dataclass(frozen=True, slots=True)
class SummaryAssembler:
    resolver: ElementResolver
    expander: ValueSetExpander

    def assemble(
        self,
        catalog: DefinitionCatalogPort,
        metadata: DataDictionaryMetadata,
        profile_groups: Mapping[str, str] | None = None,
    ) -> DataDictionaryDocument:
        groups = profile_groups or {}
        profiles = _unique(catalog.profiles(), key=lambda sd: sd.id)
        value_sets = _unique(catalog.value_sets(), key=lambda vs: vs.get("url"))

        return DataDictionaryDocument(
            profiles=self._profile_rows(profiles, groups),
            profile_elements=self.profile_elements(profiles, groups),
            value_sets=tuple(_resource_row(vs) for vs in value_sets),
            value_set_elements=self.value_set_elements(value_sets),
            extensions=tuple(
                SummaryRow(
                    title=ext.display_title,
                    url=ext.url,
                    description=ext.description or "",
                )
                for ext in _unique(catalog.extensions(), key=lambda sd: sd.url)
            ),
            code_systems=tuple(
                _resource_row(cs)
                for cs in _unique(catalog.code_systems(), key=lambda cs: cs.get("url"))
            ),
            metadata=metadata,
        )

    def profile_elements(
        self,
        profiles: Iterable[StructureDefinition],
        profile_groups: Mapping[str, str],
    ) -> tuple[DataElementRow, ...]:
        profiles = list(profiles)
        settings = self.resolver.settings
        diagnostics = self.resolver.diagnostics
        used_by_measure = self._used_by_measure(profiles)

        rows: list[DataElementRow] = []
        seen: set[tuple[str, str, str]] = set()
        for sd in profiles:
            if sd.abstract:
                continue
            diagnostics.debug(f"Summarizing {sd.url}")
            context = ResolutionContext(
                profile_title=sd.display_title,
                profile_group=profile_groups.get(sd.id) or Defaults.GROUP,
                base_resource_type=sd.type or "",
                source_profile_uri=sd.url,
                element_structure_definition_uri=sd.url,
            )
            # The first snapshot element describes the resource itself.
            for elem in list(sd.snapshot)[1:]:
                if elem.id in settings.exclude_element:
                    diagnostics.warning(
                        f"{elem.id} wasn't included in the output summary report"
                    )
                    continue
                if settings.must_support_only and not elem.must_support:
                    continue

                for row in self.resolver.resolve(elem, context):
                    identity = (
                        row.source_profile_uri,
                        row.element_structure_definition_uri,
                        row.fhir_element,
                    )
                    # Extensions pull in sub-elements that may also be listed on their own.
                    if identity in seen:
                        continue
                    seen.add(identity)
                    rows.append(row)

        return tuple(
            row.with_changes(
                used_by_measure=(
                    "true"
                    if (row.profile_title, row.fhir_element) in used_by_measure
                    else ""
                )
            )
            for row in rows
        )

    def _used_by_measure(
        self, profiles: Iterable[StructureDefinition]
    ) -> set[tuple[str, str]]:
        markers = self.resolver.settings.extension_column
        flagged: set[tuple[str, str]] = set()
        for sd in profiles:
            for elem in list(sd.snapshot)[1:]:
                if any(m in url for url in elem.extension_urls for m in markers):
                    flagged.add((sd.display_title, elem.id))
        return flagged

    def value_set_elements(
        self, value_sets: Iterable[Mapping[str, object]]
    ) -> tuple[ValueSetRow, ...]:
        by_url = {str(vs.get("url", "")): vs for vs in value_sets}
        rows: list[ValueSetRow] = []
        for value_set in by_url.values():
            rows.extend(self.expander.expand(value_set, by_url))
        return tuple(rows)

    @staticmethod
    def _profile_rows(
        profiles: Iterable[StructureDefinition], profile_groups: Mapping[str, str]
    ) -> tuple[SummaryRow, ...]:
        rows = [
            SummaryRow(
                group=profile_groups.get(sd.id) or Defaults.GROUP,
                title=sd.display_title,
                url=sd.url,
                description=sd.description or "",
            )
            for sd in _unique(profiles, key=lambda sd: sd.url)
        ]
        return tuple(sorted(rows, key=lambda r: (r.group or "", r.title)))


def _resource_row(resource: Mapping[str, object]) -> SummaryRow:
    return SummaryRow(
        title=str(resource.get("title") or resource.get("name") or ""),
        url=str(resource.get("url") or ""),
        description=str(resource.get("description") or ""),
    )


def _unique[T](items: Iterable[T], *, key) -> list[T]:
    seen = set()
    unique: list[T] = []
    for item in items:
        marker = key(item)
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(item)
    return unique
