"""Plain element variant: one profile element turned into data dictionary rows."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ....constants import FHIRTypes
from ...entities.data_element import DataElementRow, ValueSetData
from ...exceptions import DefinitionNotFoundError
from . import policies
from .naming import humanize_element_name, join_with_or

if TYPE_CHECKING:
    from ...entities.data_element import ResolutionContext
    from ...entities.element_definition import (
        ElementDefinition,
        ElementIndex,
        ElementType,
        StructureDefinition,
    )
    from .factory import ElementResolver

_LAST_PATH_ITEM = re.compile(r".*\.([a-zA-Z]+(\[x\])?)")
_NESTED_PATH = re.compile(r"[A-Za-z]+\.[A-Za-z.]+\.[A-Za-z]+")
_NESTED_PARENT = re.compile(r"[A-Za-z]+\.([A-Za-z.]+)\.[A-Za-z]+")


class ProfileElement:
    """A single element of a profile, resolved for display.

    Sibling lookups run against the snapshot of the profile named by
    ``context.source_profile_uri``; the extension variant overrides
    ``structure_definition`` to look inside the extension instead.
    """

    def __init__(
        self,
        elem: ElementDefinition,
        context: ResolutionContext,
        resolver: ElementResolver,
    ) -> None:
        super().__init__()
        resolver.diagnostics.debug(f"Processing {elem.id}")
        self.elem = elem
        self.context = context
        self.resolver = resolver
        self.settings = resolver.settings
        self.sub_elements: list[ProfileElement] = []
        self._elem_name: str | None = None
        self._value_set: ValueSetData | None = None
        self._structure_definition: StructureDefinition | None = None

    @staticmethod
    def can_be_created_from(elem: ElementDefinition) -> bool:
        return True

    @property
    def definition(self) -> str:
        return self.elem.definition or ""

    @property
    def fhir_path(self) -> str:
        if self.is_collapsible_value_x_slice:
            return self.elem.id.replace(f":{self.elem.slice_name}", "", 1)
        return self.elem.id

    @property
    def elem_name(self) -> str:
        if self._elem_name is None:
            self._elem_name = self.humanize(self._raw_name())
        return self._elem_name

    @elem_name.setter
    def elem_name(self, name: str) -> None:
        self._elem_name = name

    def _raw_name(self) -> str:
        elem = self.elem
        name = elem.path.replace(f"{self.context.profile_title}.", "", 1).replace(
            f"{self.context.base_resource_type}.", "", 1
        )

        if elem.slice_name:
            if name == "extension":
                name = elem.slice_name
            elif not self.is_collapsible_value_x_slice:
                name += f" > {elem.slice_name}"
            if elem.path.endswith("extension"):
                name = name.replace(".extension", "", 1)
            return name

        # Children of a slice carry the slice only in their id.
        last_path_item = _LAST_PATH_ITEM.sub(r"\1", elem.path, count=1)
        owning_slice = re.search(
            rf":([a-zA-Z]+)\.{re.escape(last_path_item)}", elem.id
        )
        if owning_slice:
            name = name.replace(
                last_path_item, f"{owning_slice.group(1)}.{last_path_item}", 1
            )
        return name

    def humanize(self, name: str) -> str:
        return humanize_element_name(name, self.settings.touch_up_humanized_element_names)

    @property
    def elem_type(self) -> str:
        if self.elem.types is None:
            return "n/a"
        type_strings = [
            self.reference_type_string(t) if t.code == FHIRTypes.REFERENCE else t.code
            for t in self.elem.types
        ]
        if len(type_strings) == 1:
            return type_strings[0]
        if FHIRTypes.ANY_VALUE.issubset(type_strings):
            return "Any"
        if len(type_strings) > 1:
            return join_with_or(type_strings)
        return "Polymorphic with no defined types"

    def reference_type_string(self, reference: ElementType) -> str:
        if not reference.target_profiles:
            return "Reference: Any"
        names = []
        for target in reference.target_profiles:
            found = self.resolver.definitions.find_profile(target)
            names.append(found.name if found is not None and found.name else "Unknown")
        return f"Reference: {join_with_or(names)}"

    @property
    def required(self) -> str:
        conditional = ""
        if _NESTED_PATH.search(self.elem.path):
            parent = _NESTED_PARENT.sub(r"\1", self.elem.path, count=1)
            conditional = f" (conditional on {self.humanize(parent)})"
        if self.elem.min == 1:
            return f"Required{conditional}"
        if self.elem.must_support and self.elem.min == 0:
            return f"Required if known{conditional}"
        return ""

    @property
    def occurrences(self) -> str:
        elem = self.elem
        if elem.max == "1":
            return "Single"
        if elem.is_prohibited:
            return "None"
        if elem.max == "*":
            return "Multiple"
        return elem.max or ""

    @property
    def value_set(self) -> ValueSetData:
        if self._value_set is None:
            self._value_set = self._resolve_value_set()
        return self._value_set

    def _resolve_value_set(self) -> ValueSetData:
        elem = self.elem
        if elem.is_polymorphic_value and elem.binding is None:
            bound = [s for s in self.snapshot.with_start(elem.id) if s.binding]
            if bound:
                return ValueSetData(
                    uri=bound[0].binding.value_set or "",
                    binding=bound[0].binding.strength or "",
                )

        if elem.binding is not None and elem.binding.value_set:
            coded = any(c.lower() in FHIRTypes.CODED for c in elem.type_codes)
            if coded:
                return ValueSetData(
                    uri=elem.binding.value_set, binding=elem.binding.strength or ""
                )
        return ValueSetData()

    @property
    def structure_definition(self) -> StructureDefinition:
        if self._structure_definition is None:
            uri = self.context.source_profile_uri
            found = self.resolver.definitions.find_structure_definition(uri)
            if found is None:
                raise DefinitionNotFoundError(
                    f"Could not find StructureDefinition {uri} "
                    f"for {self.context.profile_title}"
                )
            self._structure_definition = found
        return self._structure_definition

    @property
    def snapshot(self) -> ElementIndex:
        return self.structure_definition.snapshot

    @property
    def is_collapsible_value_x_slice(self) -> bool:
        return policies.is_collapsible_value_x_slice(self.elem, self.snapshot)

    def _suppressed(self) -> bool:
        if not self.settings.must_support_only:
            return False
        return policies.slices_replace_sliced_element(
            self.elem, self.snapshot
        ) or policies.duplicates_value_x_binding(self.elem, self.snapshot, self.value_set)

    def to_rows(self) -> list[DataElementRow]:
        """Rows for this element followed by the rows of its sub-elements."""
        required = self.required
        fixed = self.elem.fixed_code
        if fixed is not None:
            if self.settings.suppress_fixed_codes:
                return []
            system, code = fixed
            required += f"{' ' if required else ''}[Fixed to {system}#{code}]"

        if self._suppressed():
            return []

        value_set = self.value_set
        rows = [
            DataElementRow(
                group=self.context.profile_group,
                profile_title=self.context.profile_title,
                data_element_name=self.elem_name,
                definition=self.definition,
                required=required,
                occurrences=self.occurrences,
                data_type=self.elem_type,
                value_set_uri=value_set.uri,
                value_set_binding=value_set.binding,
                fhir_element=self.fhir_path,
                source_profile_uri=self.context.source_profile_uri,
                element_structure_definition_uri=(
                    self.context.element_structure_definition_uri
                ),
            )
        ]
        for sub_element in self.sub_elements:
            rows.extend(
                row.with_changes(source_profile_uri=self.context.source_profile_uri)
                for row in sub_element.to_rows()
            )
        return rows
