from __future__ import annotations

from typing import TYPE_CHECKING, override

from ....constants import FHIRTypes
from . import policies
from .base import ProfileElement

if TYPE_CHECKING:
    from ...entities.data_element import ResolutionContext, ValueSetData
    from ...entities.element_definition import ElementDefinition
    from .factory import ElementResolver


class BackboneProfileElement(ProfileElement):
    """BackboneElement displayed as its value[x] when it has one.

    A component holding a single CodeableConcept value reads as that
    CodeableConcept rather than as a "BackboneElement".
    """

    def __init__(
        self,
        elem: ElementDefinition,
        context: ResolutionContext,
        resolver: ElementResolver,
    ) -> None:
        super().__init__(elem, context, resolver)
        descendant = policies.polymorphic_value_descendant(elem, self.snapshot)
        self.polymorphic_value_sub_element: ProfileElement | None = (
            resolver.create(descendant, context) if descendant is not None else None
        )

    @override
    @staticmethod
    def can_be_created_from(elem: ElementDefinition) -> bool:
        return elem.has_type_code(FHIRTypes.BACKBONE_ELEMENT)

    @property
    @override
    def elem_type(self) -> str:
        if self.polymorphic_value_sub_element is not None:
            return self.polymorphic_value_sub_element.elem_type
        return super().elem_type

    @property
    @override
    def value_set(self) -> ValueSetData:
        if self.polymorphic_value_sub_element is not None:
            return self.polymorphic_value_sub_element.value_set
        return super().value_set
