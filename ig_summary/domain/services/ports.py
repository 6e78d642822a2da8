from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ..entities.element_definition import StructureDefinition


@runtime_checkable
class DiagnosticsPort(Protocol):
    """Side channel for data-quality warnings raised while resolving."""

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...


@runtime_checkable
class DefinitionLookupPort(Protocol):
    """Primary definitions first, then external dependencies."""

    def find_structure_definition(
        self, identifier: str
    ) -> StructureDefinition | None: ...

    def find_profile(self, identifier: str) -> StructureDefinition | None: ...


@runtime_checkable
class DefinitionCatalogPort(Protocol):
    """The resources defined by the Implementation Guide being summarized."""

    def profiles(self) -> Iterable[StructureDefinition]: ...

    def extensions(self) -> Iterable[StructureDefinition]: ...

    def value_sets(self) -> Iterable[Mapping[str, Any]]: ...

    def code_systems(self) -> Iterable[Mapping[str, Any]]: ...
