"""FHIR StructureDefinition and ElementDefinition entities.

Only the attributes the data dictionary reads are modelled. Element trees are
kept as the flat, ordered ``snapshot`` sequence FHIR ships, wrapped in an
``ElementIndex`` that answers the prefix/suffix questions resolution asks
("which elements live under this id?") without re-scanning the whole list.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from itertools import islice
from typing import TYPE_CHECKING, Any

from ...constants import FHIRTypes

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping


@dataclass(frozen=True, slots=True)
class ElementType:
    code: str
    profiles: tuple[str, ...] = ()
    target_profiles: tuple[str, ...] = ()

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> ElementType:
        return cls(
            code=str(data.get("code", "")),
            profiles=tuple(data.get("profile") or ()),
            target_profiles=tuple(data.get("targetProfile") or ()),
        )


@dataclass(frozen=True, slots=True)
class ElementBinding:
    value_set: str | None = None
    strength: str | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> ElementBinding:
        return cls(value_set=data.get("valueSet"), strength=data.get("strength"))


@dataclass(frozen=True, slots=True)
class ElementDefinition:
    """One node of a profile's element tree.

    ``types`` is ``None`` when the source declares no ``type`` at all, which
    is different from an empty list.
    """

    id: str
    path: str
    min: int | None = None
    max: str | None = None
    types: tuple[ElementType, ...] | None = None
    binding: ElementBinding | None = None
    slice_name: str | None = None
    definition: str | None = None
    must_support: bool = False
    sliced: bool = False
    pattern_codings: tuple[Mapping[str, Any], ...] = ()
    extension_urls: tuple[str, ...] = ()

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> ElementDefinition:
        path = str(data.get("path", ""))
        raw_types = data.get("type")
        binding = data.get("binding")
        pattern = data.get("patternCodeableConcept") or {}
        return cls(
            id=str(data.get("id") or path),
            path=path,
            min=data.get("min"),
            max=data.get("max"),
            types=(
                tuple(ElementType.from_json(t) for t in raw_types)
                if raw_types is not None
                else None
            ),
            binding=ElementBinding.from_json(binding) if binding else None,
            slice_name=data.get("sliceName"),
            definition=data.get("definition"),
            must_support=data.get("mustSupport") is True,
            sliced="slicing" in data,
            pattern_codings=tuple(pattern.get("coding") or ()),
            extension_urls=tuple(
                str(ext.get("url", "")) for ext in data.get("extension") or ()
            ),
        )

    @property
    def type_codes(self) -> tuple[str, ...]:
        return tuple(t.code for t in self.types or ())

    def has_type_code(self, code: str) -> bool:
        return code in self.type_codes

    @property
    def first_type_code(self) -> str | None:
        return self.types[0].code if self.types else None

    @property
    def is_polymorphic_value(self) -> bool:
        return self.path.endswith("value[x]")

    @property
    def is_prohibited(self) -> bool:
        return self.min == 0 and self.max == "0"

    @property
    def fixed_code(self) -> tuple[str, str] | None:
        """``(system, code)`` when a single coding is fixed by pattern."""
        if len(self.pattern_codings) != 1:
            return None
        coding = self.pattern_codings[0]
        if "system" not in coding or "code" not in coding:
            return None
        return str(coding["system"]), str(coding["code"])


class ElementIndex:
    """Ordered element sequence with id-prefix range queries.

    Results are always returned in snapshot order.
    """

    def __init__(self, elements: Iterable[ElementDefinition] = ()) -> None:
        super().__init__()
        self._elements = tuple(elements)
        self._positions: dict[str, int] = {}
        for position, element in enumerate(self._elements):
            self._positions.setdefault(element.id, position)
        self._sorted = sorted(
            (element.id, position) for position, element in enumerate(self._elements)
        )
        self._sorted_ids = [element_id for element_id, _ in self._sorted]

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[ElementDefinition]:
        return iter(self._elements)

    def __getitem__(self, position: int) -> ElementDefinition:
        return self._elements[position]

    @property
    def root(self) -> ElementDefinition | None:
        return self._elements[0] if self._elements else None

    def by_id(self, element_id: str) -> ElementDefinition | None:
        position = self._positions.get(element_id)
        return None if position is None else self._elements[position]

    def _prefixed(self, start: str) -> list[ElementDefinition]:
        positions: list[int] = []
        lower = bisect_left(self._sorted_ids, start)
        for element_id, position in islice(self._sorted, lower, None):
            if not element_id.startswith(start):
                break
            positions.append(position)
        return [self._elements[position] for position in sorted(positions)]

    def with_start(self, start: str) -> list[ElementDefinition]:
        """Elements whose id starts with ``start``, excluding ``start`` itself."""
        return [e for e in self._prefixed(start) if e.id != start]

    def with_start_and_end(self, start: str, end: str) -> list[ElementDefinition]:
        return [e for e in self._prefixed(start) if e.id.endswith(end)]


@dataclass(frozen=True, slots=True, eq=False)
class StructureDefinition:
    url: str
    id: str
    name: str
    title: str | None = None
    type: str | None = None
    description: str | None = None
    base_definition: str | None = None
    derivation: str | None = None
    kind: str | None = None
    abstract: bool = False
    snapshot: ElementIndex = field(default_factory=ElementIndex)
    differential: tuple[ElementDefinition, ...] = ()

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> StructureDefinition:
        snapshot = (data.get("snapshot") or {}).get("element") or ()
        differential = (data.get("differential") or {}).get("element") or ()
        return cls(
            url=str(data.get("url", "")),
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            title=data.get("title"),
            type=data.get("type"),
            description=data.get("description"),
            base_definition=data.get("baseDefinition"),
            derivation=data.get("derivation"),
            kind=data.get("kind"),
            abstract=data.get("abstract") is True,
            snapshot=ElementIndex(ElementDefinition.from_json(e) for e in snapshot),
            differential=tuple(ElementDefinition.from_json(e) for e in differential),
        )

    @property
    def display_title(self) -> str:
        return self.title or self.name

    @property
    def is_extension(self) -> bool:
        return self.type == FHIRTypes.EXTENSION

