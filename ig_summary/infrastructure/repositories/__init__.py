"""Repository implementations: FHIR definitions, data dictionaries and settings."""

from .data_dictionary_repository import DataDictionaryRepository
from .definition_repository import FHIRDefinitions, LayeredDefinitionLookup
from .package_loader import (
    FHIRPackageCache,
    ImplementationGuideLoader,
    PackageReference,
)
from .settings_loader import SettingsLoader

__all__ = [
    "DataDictionaryRepository",
    "FHIRDefinitions",
    "FHIRPackageCache",
    "ImplementationGuideLoader",
    "LayeredDefinitionLookup",
    "PackageReference",
    "SettingsLoader",
]
