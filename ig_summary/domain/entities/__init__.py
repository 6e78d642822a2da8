"""Domain entities.

FHIR definitions as read by the resolver, resolved rows, the data dictionary
document and run settings.
"""

from .data_dictionary import (
    DataDictionaryDocument,
    DataDictionaryMetadata,
    SummaryRow,
    ValueSetRow,
)
from .data_element import DataElementRow, ResolutionContext, ValueSetData, element_key
from .element_definition import (
    ElementBinding,
    ElementDefinition,
    ElementIndex,
    ElementType,
    StructureDefinition,
)
from .settings import (
    DataDictionaryMode,
    DataDictionarySettings,
    DiffSettings,
    NoteRule,
    RemapRule,
)

__all__ = [
    "DataDictionaryDocument",
    "DataDictionaryMetadata",
    "DataDictionaryMode",
    "DataDictionarySettings",
    "DataElementRow",
    "DiffSettings",
    "ElementBinding",
    "ElementDefinition",
    "ElementIndex",
    "ElementType",
    "NoteRule",
    "RemapRule",
    "ResolutionContext",
    "StructureDefinition",
    "SummaryRow",
    "ValueSetData",
    "ValueSetRow",
    "element_key",
]
