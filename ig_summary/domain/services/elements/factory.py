from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...exceptions import ElementResolutionError
from .backbone import BackboneProfileElement
from .base import ProfileElement
from .extension import ExtensionProfileElement

if TYPE_CHECKING:
    from collections.abc import Callable

    from ...entities.data_element import DataElementRow, ResolutionContext
    from ...entities.element_definition import ElementDefinition
    from ...entities.settings import DataDictionarySettings
    from ..ports import DefinitionLookupPort, DiagnosticsPort


# Checked in order; the first variant whose predicate accepts the element wins.
ELEMENT_VARIANTS: tuple[
    tuple[Callable[[ElementDefinition], bool], type[ProfileElement]], ...
] = (
    (ExtensionProfileElement.can_be_created_from, ExtensionProfileElement),
    (BackboneProfileElement.can_be_created_from, BackboneProfileElement),
    (ProfileElement.can_be_created_from, ProfileElement),
)


@dataclass(frozen=True, slots=True)
class ElementResolver:
    """Turns element definitions into data dictionary rows.

    Every resolution is a function of the element, its context, and the
    three collaborators held here.
    """

    definitions: DefinitionLookupPort
    settings: DataDictionarySettings
    diagnostics: DiagnosticsPort

    def create(
        self, elem: ElementDefinition, context: ResolutionContext
    ) -> ProfileElement:
        for accepts, variant in ELEMENT_VARIANTS:
            if accepts(elem):
                return variant(elem, context, self)
        raise ElementResolutionError(f"Could not create ProfileElement for {elem.id}")

    def resolve(
        self, elem: ElementDefinition, context: ResolutionContext
    ) -> list[DataElementRow]:
        return self.create(elem, context).to_rows()
