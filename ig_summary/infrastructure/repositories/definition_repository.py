"""In-memory FHIR definition index.

Resources are indexed by ``url``, ``id`` and ``name`` within their
resource type, so a profile can be found by whichever identifier an
element happens to carry. StructureDefinition JSON is parsed into domain
entities lazily and memoised.
"""

from __future__ import annotations

import json
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from ...constants import FHIRTypes
from ...domain.entities.element_definition import StructureDefinition
from ..caching.memory_cache import MemoryCache
from ..io.exceptions import DataParseError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

_STRUCTURE_DEFINITION = "StructureDefinition"
_IDENTIFYING_KEYS = ("url", "id", "name")


def read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8").strip())
    except json.JSONDecodeError as exc:
        raise DataParseError(f"Failed to parse {path}: {exc}") from exc


class FHIRDefinitions:
    def __init__(self, cache: MemoryCache[StructureDefinition] | None = None) -> None:
        super().__init__()
        self._resources: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self._index: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._cache: MemoryCache[StructureDefinition] = cache or MemoryCache()

    def add(self, resource: Mapping[str, Any]) -> bool:
        resource_type = resource.get("resourceType")
        if not isinstance(resource_type, str):
            return False
        stored = dict(resource)
        self._resources[resource_type].append(stored)
        for key in _IDENTIFYING_KEYS:
            value = stored.get(key)
            if value:
                self._index[resource_type].setdefault(str(value), stored)
        return True

    def add_directory(self, folder: Path) -> int:
        """Add every FHIR resource found in ``folder/*.json``."""
        added = 0
        for path in sorted(folder.glob("*.json")):
            data = read_json(path)
            if isinstance(data, dict) and self.add(data):
                added += 1
        return added

    def fetch(
        self, identifier: str, resource_type: str = _STRUCTURE_DEFINITION
    ) -> dict[str, Any] | None:
        # Canonical references may carry a version suffix (url|1.0.0).
        key = identifier.split("|", 1)[0]
        return self._index[resource_type].get(key)

    def all(self, resource_type: str) -> list[dict[str, Any]]:
        return list(self._resources.get(resource_type, ()))

    def __len__(self) -> int:
        return sum(len(resources) for resources in self._resources.values())

    # DefinitionCatalogPort --------------------------------------------------

    def profiles(self) -> list[StructureDefinition]:
        return [
            self._parse(raw)
            for raw in self.all(_STRUCTURE_DEFINITION)
            if _is_profile(raw)
        ]

    def extensions(self) -> list[StructureDefinition]:
        return [
            self._parse(raw)
            for raw in self.all(_STRUCTURE_DEFINITION)
            if _is_extension(raw)
        ]

    def value_sets(self) -> list[dict[str, Any]]:
        return self.all("ValueSet")

    def code_systems(self) -> list[dict[str, Any]]:
        return self.all("CodeSystem")

    def implementation_guides(self) -> list[dict[str, Any]]:
        unique: dict[str, dict[str, Any]] = {}
        for ig in self.all("ImplementationGuide"):
            unique.setdefault(str(ig.get("id", "")), ig)
        return list(unique.values())

    # DefinitionLookupPort ---------------------------------------------------

    def find_structure_definition(self, identifier: str) -> StructureDefinition | None:
        raw = self.fetch(identifier)
        return self._parse(raw) if raw is not None else None

    def find_profile(self, identifier: str) -> StructureDefinition | None:
        raw = self.fetch(identifier)
        if raw is None or not _is_profile(raw):
            return None
        return self._parse(raw)

    def _parse(self, raw: Mapping[str, Any]) -> StructureDefinition:
        key = f"{raw.get('url', '')}#{raw.get('id', '')}"
        return self._cache.get_or_create(key, lambda: StructureDefinition.from_json(raw))


def _is_extension(raw: Mapping[str, Any]) -> bool:
    return (
        raw.get("type") == FHIRTypes.EXTENSION
        and raw.get("derivation") != "specialization"
    )


def _is_profile(raw: Mapping[str, Any]) -> bool:
    return raw.get("derivation") == "constraint" and not _is_extension(raw)


class LayeredDefinitionLookup:
    """IG definitions first, then the dependency packages."""

    def __init__(self, primary: FHIRDefinitions, external: FHIRDefinitions) -> None:
        super().__init__()
        self.primary = primary
        self.external = external

    def find_structure_definition(self, identifier: str) -> StructureDefinition | None:
        return self.primary.find_structure_definition(
            identifier
        ) or self.external.find_structure_definition(identifier)

    def find_profile(self, identifier: str) -> StructureDefinition | None:
        return self.primary.find_profile(
            identifier
        ) or self.external.find_structure_definition(identifier)
