"""Extension element variant.

Simple extensions (one value) are flattened into a single row showing the
value's type and binding. Complex extensions get an ``Extension: <title>``
row followed by one row per displayed child.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, override

from ....constants import FHIRTypes
from ...entities.data_element import ValueSetData
from ...exceptions import DefinitionNotFoundError
from . import policies
from .base import ProfileElement
from .naming import join_with_or

if TYPE_CHECKING:
    from ...entities.data_element import ResolutionContext
    from ...entities.element_definition import ElementDefinition, StructureDefinition
    from .factory import ElementResolver

_TYPED_VALUE_SLICE = re.compile(r"value\[x\]:value[A-Z][a-zA-Z0-9]+")


class ExtensionProfileElement(ProfileElement):
    def __init__(
        self,
        elem: ElementDefinition,
        context: ResolutionContext,
        resolver: ElementResolver,
    ) -> None:
        super().__init__(elem, context, resolver)
        self._elem_type = ""

        root = self.snapshot.root
        child_context = context.derive(
            base_resource_type=root.id if root is not None else FHIRTypes.EXTENSION,
            element_structure_definition_uri=(
                self.extension_profile_uri or context.source_profile_uri
            ),
            sub_element_of=elem,
        )

        self.complexity = policies.classify_extension(
            policies.ExtensionFacts(
                element=elem,
                name_root=self.name_root,
                definition=self.structure_definition,
                source_profile_uri=context.source_profile_uri,
            ),
            resolver.diagnostics,
        )
        if self.complexity is policies.ExtensionComplexity.SIMPLE:
            self._resolve_simple(child_context)
        else:
            self._elem_type = f"Extension: {self.structure_definition.display_title}"

        self.sub_elements.extend(self._displayed_children(child_context))

        if policies.collapses_into_parent(self.sub_elements):
            only = self.sub_elements[0]
            if only.value_set.binding != "":
                self._value_set = only.value_set
            self._elem_type = only.elem_type
            self.sub_elements = []

    @override
    @staticmethod
    def can_be_created_from(elem: ElementDefinition) -> bool:
        return elem.has_type_code(FHIRTypes.EXTENSION)

    @property
    def extension_profile_uri(self) -> str | None:
        if self.elem.types and self.elem.types[0].profiles:
            return self.elem.types[0].profiles[0]
        return None

    @property
    def name_root(self) -> str:
        """Id prefix of the extension's own elements."""
        return FHIRTypes.EXTENSION if self.extension_profile_uri else self.elem.id

    @property
    @override
    def elem_type(self) -> str:
        return self._elem_type

    @property
    @override
    def value_set(self) -> ValueSetData:
        return self._value_set if self._value_set is not None else ValueSetData()

    @property
    @override
    def structure_definition(self) -> StructureDefinition:
        if self._structure_definition is None:
            uri = (
                self.extension_profile_uri
                or self.context.element_structure_definition_uri
            )
            found = self.resolver.definitions.find_structure_definition(uri)
            if found is None:
                raise DefinitionNotFoundError(
                    f"Could not find extension definition for {self.elem.path} "
                    f"in {self.context.profile_title}"
                )
            self._structure_definition = found
        return self._structure_definition

    def _resolve_simple(self, child_context: ResolutionContext) -> None:
        self._elem_type = "Extension (simple)"
        snapshot = self.snapshot
        value_x = snapshot.by_id(f"{self.name_root}.value[x]")

        candidates = [value_x]
        for suffix in FHIRTypes.SIMPLE_EXTENSION_VALUE_SUFFIXES:
            candidates.extend(snapshot.with_start_and_end(self.name_root, suffix))
        bound = [e for e in candidates if e is not None and e.binding is not None]

        if len(bound) == 1:
            self._value_set = self.resolver.create(bound[0], child_context).value_set
        else:
            self._value_set = self._binding_from_host_profile()

        value_types = [
            e.first_type_code
            for e in snapshot.with_start(self.name_root)
            if _TYPED_VALUE_SLICE.search(e.id) and e.first_type_code
        ]
        if value_types:
            self._elem_type = join_with_or(value_types)
        elif value_x is not None and value_x.types:
            self._elem_type = self.resolver.create(value_x, child_context).elem_type

    def _binding_from_host_profile(self) -> ValueSetData | None:
        # Older IGs bind the value on the profile's slice instead of the extension.
        uri = self.context.source_profile_uri
        host = self.resolver.definitions.find_profile(uri)
        if host is None:
            raise DefinitionNotFoundError(
                f"Could not find profile {uri} for {self.context.profile_title}"
            )
        prefix = f"{self.elem.id}.value[x]"
        bound = [
            e
            for e in host.snapshot.with_start_and_end(prefix, "")
            if e.binding is not None
        ]
        if len(bound) != 1:
            return None
        binding = bound[0].binding
        return ValueSetData(uri=binding.value_set or "", binding=binding.strength or "")

    def _displayed_children(
        self, child_context: ResolutionContext
    ) -> list[ProfileElement]:
        if self.settings.must_support_only:
            selected = [e for e in self.snapshot.with_start(self.name_root) if e.must_support]
        else:
            selected = [
                e for e in self.snapshot.with_start(self.name_root) if (e.min or 0) > 0
            ]

        prefix = f"{self.elem_name} > "
        children = []
        for child_elem in selected:
            child = self.resolver.create(child_elem, child_context)
            if not child.elem_name.startswith(prefix):
                child.elem_name = f"{prefix}{child.elem_name}"
            children.append(child)
        return children
