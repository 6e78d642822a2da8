"""Named heuristics for element shapes seen in published Implementation Guides.

None of these are FHIR rules. Each one recognises an authoring idiom and
decides how it should be displayed; they are kept as separate functions so a
new idiom can be added without touching the others.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from ....constants import FHIRTypes

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ...entities.data_element import ValueSetData
    from ...entities.element_definition import (
        ElementDefinition,
        ElementIndex,
        StructureDefinition,
    )
    from ..ports import DiagnosticsPort

_VALUE_X = "value[x]"


def is_collapsible_value_x_slice(
    elem: ElementDefinition, snapshot: ElementIndex
) -> bool:
    """A value[x] slice that is the only slice of its value[x].

    Such a slice says nothing more than a type restriction, so it is shown
    under the unsliced name and path.
    """
    if not elem.is_polymorphic_value or not elem.slice_name:
        return False
    suffix = f":{elem.slice_name}"
    unsliced_id = elem.id.removesuffix(suffix)
    return len(snapshot.with_start(f"{unsliced_id}:")) == 1


def slices_replace_sliced_element(
    elem: ElementDefinition, snapshot: ElementIndex
) -> bool:
    """A slicing parent whose named slices are all must-support."""
    if not elem.sliced:
        return False
    slices = snapshot.with_start(f"{elem.path}:")
    return bool(slices) and all(s.must_support for s in slices)


def duplicates_value_x_binding(
    elem: ElementDefinition, snapshot: ElementIndex, value_set: ValueSetData
) -> bool:
    """A backbone slice whose bubbled-up binding is already shown on its value[x]."""
    if not elem.slice_name or elem.first_type_code != FHIRTypes.BACKBONE_ELEMENT:
        return False
    if not value_set.binding:
        return False
    candidates = snapshot.with_start_and_end(f"{elem.id}.", _VALUE_X)
    if not candidates:
        return False
    return candidates[0].binding is not None and candidates[0].must_support


def polymorphic_value_descendant(
    elem: ElementDefinition, snapshot: ElementIndex
) -> ElementDefinition | None:
    """First value[x] below a backbone element, whose type and binding bubble up."""
    matches = snapshot.with_start_and_end(elem.id, _VALUE_X)
    return matches[0] if matches else None


def collapses_into_parent(sub_elements: Sequence[object]) -> bool:
    """An extension with a single displayed child is shown as one row."""
    return len(sub_elements) == 1


class ExtensionComplexity(StrEnum):
    SIMPLE = "simple"
    COMPLEX = "complex"


@dataclass(frozen=True, slots=True)
class ExtensionFacts:
    element: ElementDefinition
    name_root: str
    definition: StructureDefinition
    source_profile_uri: str

    def sibling(self, element_id: str) -> ElementDefinition | None:
        return self.definition.snapshot.by_id(element_id)


type ComplexityRule = Callable[
    [ExtensionFacts, DiagnosticsPort], ExtensionComplexity | None
]


def child_extensions_prohibited(
    facts: ExtensionFacts, diagnostics: DiagnosticsPort
) -> ExtensionComplexity | None:
    extension = facts.sibling(f"{facts.name_root}.extension")
    if extension is None or not extension.is_prohibited:
        return None
    value = facts.sibling(f"{facts.name_root}.{_VALUE_X}")
    if value is not None and value.is_prohibited:
        diagnostics.error(
            f"{facts.element.id} in {facts.source_profile_uri} is an extension "
            "with 0..0 extensions and 0..0 values. This is likely an error in the IG."
        )
    return ExtensionComplexity.SIMPLE


def slice_requires_value(
    facts: ExtensionFacts, diagnostics: DiagnosticsPort
) -> ExtensionComplexity | None:
    if not facts.element.slice_name:
        return None
    values = facts.definition.snapshot.with_start(f"{facts.name_root}.{_VALUE_X}")
    if not any((v.min or 0) > 0 for v in values):
        return None
    diagnostics.warning(
        f"{facts.element.id} is a slice with a required value[x], but child "
        "extensions are also allowed. Treating it as a simple extension."
    )
    return ExtensionComplexity.SIMPLE


def child_extensions_untouched(
    facts: ExtensionFacts, diagnostics: DiagnosticsPort
) -> ExtensionComplexity | None:
    prefix = f"{facts.name_root}.extension"
    if any(e.id.startswith(prefix) for e in facts.definition.differential):
        return None
    diagnostics.warning(
        f"{facts.element.id} is an extension that does not require .value[x] or "
        ".extension and does not modify .extension in the differential. "
        "Treating it as a simple extension."
    )
    return ExtensionComplexity.SIMPLE


EXTENSION_COMPLEXITY_RULES: tuple[ComplexityRule, ...] = (
    child_extensions_prohibited,
    slice_requires_value,
    child_extensions_untouched,
)


def classify_extension(
    facts: ExtensionFacts,
    diagnostics: DiagnosticsPort,
    rules: Sequence[ComplexityRule] = EXTENSION_COMPLEXITY_RULES,
) -> ExtensionComplexity:
    for rule in rules:
        verdict = rule(facts, diagnostics)
        if verdict is not None:
            return verdict
    return ExtensionComplexity.COMPLEX
