"""Implementation Guide folder and FHIR package cache loading.

An IG folder is either a SUSHI project (``sushi-config.yaml`` with IG
Publisher output in ``output/``) or an unpacked package whose
``package.json`` sits next to the resource JSON. Dependencies are read
from the local FHIR package cache (``~/.fhir/packages/<id>#<version>``);
nothing is downloaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import yaml

from ...application.models import ImplementationGuideMetadata, LoadedImplementationGuide
from ...constants import InputFiles
from ...domain.services.profile_groups import (
    groups_from_implementation_guide,
    groups_from_sushi_config,
)
from ..io.exceptions import DataParseError, DataSourceError, DataSourceNotFoundError
from .definition_repository import FHIRDefinitions, LayeredDefinitionLookup, read_json

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from ...application.ports.services import LoggerPort
    from ...config import SummaryConfig

_REQUIRED_PACKAGE_KEYS = ("canonical", "fhirVersions", "name")
_UNPINNED_VERSIONS = frozenset({"latest", "current", "dev"})


@dataclass(frozen=True, slots=True)
class PackageReference:
    id: str
    version: str

    def __str__(self) -> str:
        return f"{self.id}#{self.version}"


def dependencies_from_mapping(dependencies: Mapping[str, Any] | None) -> list[PackageReference]:
    """``{id: version}`` or SUSHI's ``{id: {version: ...}}`` form."""
    references = []
    for package_id, spec in (dependencies or {}).items():
        version = spec.get("version") if isinstance(spec, dict) else spec
        if version is not None:
            references.append(PackageReference(str(package_id), str(version)))
    return references


def dependencies_from_implementation_guide(ig: Mapping[str, Any]) -> list[PackageReference]:
    return [
        PackageReference(str(dep["packageId"]), str(dep["version"]))
        for dep in ig.get("dependsOn") or []
        if dep.get("packageId") and dep.get("version")
    ]


class FHIRPackageCache:
    def __init__(self, root: Path, logger: LoggerPort) -> None:
        super().__init__()
        self.root = root
        self.logger = logger

    def package_dir(self, reference: PackageReference) -> Path | None:
        if reference.version in _UNPINNED_VERSIONS:
            candidates = sorted(self.root.glob(f"{reference.id}#*/package"))
            return candidates[-1] if candidates else None
        folder = self.root / str(reference) / "package"
        return folder if folder.is_dir() else None

    def load(
        self, references: Iterable[PackageReference], definitions: FHIRDefinitions
    ) -> list[PackageReference]:
        """Load packages and everything they depend on into ``definitions``."""
        pending = list(references)
        seen: set[PackageReference] = set()
        loaded: list[PackageReference] = []
        while pending:
            reference = pending.pop(0)
            if reference in seen:
                continue
            seen.add(reference)

            folder = self.package_dir(reference)
            if folder is None:
                self.logger.warning(
                    f"Package {reference} is not in the FHIR package cache at {self.root}"
                )
                continue

            count = definitions.add_directory(folder)
            self.logger.verbose(f"Loaded {count} resources from {reference}")
            loaded.append(reference)

            manifest = folder / InputFiles.PACKAGE_JSON
            if manifest.exists():
                data = read_json(manifest)
                if isinstance(data, dict):
                    pending.extend(dependencies_from_mapping(data.get("dependencies")))
        return loaded


class ImplementationGuideLoader:
    def __init__(self, config: SummaryConfig, logger: LoggerPort) -> None:
        super().__init__()
        self.config = config
        self.logger = logger
        self.package_cache = FHIRPackageCache(config.package_cache_dir, logger)

    def load(self, ig_dir: Path) -> LoadedImplementationGuide:
        if not ig_dir.is_dir():
            raise DataSourceNotFoundError(
                f"The folder you specified in --input ({ig_dir}) does not exist."
            )

        sushi_config = self._read_sushi_config(ig_dir)
        definitions_dir = self._definitions_dir(ig_dir, sushi_config is not None)

        primary = FHIRDefinitions()
        primary.add_directory(definitions_dir)
        ig = self._single_implementation_guide(primary, definitions_dir)

        if sushi_config is not None:
            self.logger.info("Has SUSHI configuration file")
            metadata = _metadata_from_sushi(sushi_config, ig)
            dependencies = dependencies_from_mapping(sushi_config.get("dependencies"))
            groups = (
                groups_from_sushi_config(sushi_config)
                if sushi_config.get("groups")
                else groups_from_implementation_guide(ig)
            )
        else:
            self.logger.info(
                "No SUSHI configuration file found; grabbing from package.json "
                "and the IG instance"
            )
            package_json = self._read_package_json(definitions_dir)
            metadata = _metadata_from_package(package_json, ig)
            dependencies = [
                *dependencies_from_mapping(package_json.get("dependencies")),
                *dependencies_from_implementation_guide(ig),
            ]
            groups = groups_from_implementation_guide(ig)

        if not primary.profiles():
            raise DataSourceError(f"No profiles found in {definitions_dir}.")

        external = FHIRDefinitions()
        self.package_cache.load(
            [*self._core_packages(metadata.fhir_versions), *dependencies], external
        )

        return LoadedImplementationGuide(
            metadata=metadata,
            catalog=primary,
            lookup=LayeredDefinitionLookup(primary, external),
            profile_groups=groups,
        )

    def _core_packages(self, fhir_versions: Iterable[str]) -> list[PackageReference]:
        references = []
        for version in fhir_versions:
            core = self.config.core_packages.get(version)
            if core is None:
                self.logger.warning(f"No core package known for FHIR {version}")
                continue
            references.append(PackageReference(*core))
        return references

    @staticmethod
    def _read_sushi_config(ig_dir: Path) -> dict[str, Any] | None:
        path = ig_dir / InputFiles.SUSHI_CONFIG
        if not path.exists():
            return None
        try:
            with path.open(encoding="utf-8") as handle:
                data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise DataParseError(f"Failed to parse {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise DataParseError(f"{path} must contain a mapping")
        return data

    @staticmethod
    def _definitions_dir(ig_dir: Path, has_sushi_config: bool) -> Path:
        if not has_sushi_config:
            return ig_dir
        output = ig_dir / InputFiles.SUSHI_OUTPUT_DIR
        if not output.is_dir():
            raise DataSourceNotFoundError(
                f"{ig_dir}/{InputFiles.SUSHI_CONFIG} file found, but {output} does not "
                "exist. You may need to re-run the FHIR IG Publisher, or point --input "
                "to the folder that contains ImplementationGuide-<id>.json."
            )
        return output

    @staticmethod
    def _single_implementation_guide(
        definitions: FHIRDefinitions, folder: Path
    ) -> dict[str, Any]:
        guides = definitions.implementation_guides()
        if not guides:
            raise DataSourceError(
                f"An instance of ImplementationGuide could not be found in '{folder}'."
            )
        if len(guides) > 1:
            raise DataSourceError(
                f"Multiple ImplementationGuide instances found in {folder}."
            )
        return guides[0]

    @staticmethod
    def _read_package_json(folder: Path) -> dict[str, Any]:
        path = folder / InputFiles.PACKAGE_JSON
        if not path.exists():
            raise DataSourceNotFoundError(
                f"{path} was not found. Make sure this file exists, or point --input "
                f"to a folder with a {InputFiles.SUSHI_CONFIG} file and IG Publisher "
                "output in output/."
            )
        data = read_json(path)
        if not isinstance(data, dict):
            raise DataParseError(f"{path} must contain a JSON object")
        missing = [key for key in _REQUIRED_PACKAGE_KEYS if data.get(key) is None]
        if missing:
            raise DataParseError(
                f"package.json must contain {', '.join(_REQUIRED_PACKAGE_KEYS)}"
            )
        return data


def _as_versions(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return (str(value),)


def _metadata_from_sushi(
    sushi_config: Mapping[str, Any], ig: Mapping[str, Any]
) -> ImplementationGuideMetadata:
    return ImplementationGuideMetadata(
        id=str(sushi_config.get("id") or ig.get("id") or ""),
        name=str(sushi_config.get("name") or ig.get("name") or ""),
        title=str(sushi_config.get("title") or ig.get("title") or ""),
        url=str(ig.get("url") or ""),
        canonical=str(sushi_config.get("canonical") or ""),
        version=str(sushi_config.get("version") or ig.get("version") or ""),
        status=str(sushi_config.get("status") or ig.get("status") or ""),
        fhir_versions=_as_versions(
            sushi_config.get("fhirVersion") or ig.get("fhirVersion")
        ),
    )


def _metadata_from_package(
    package_json: Mapping[str, Any], ig: Mapping[str, Any]
) -> ImplementationGuideMetadata:
    return ImplementationGuideMetadata(
        id=str(package_json["name"]),
        name=str(ig.get("name") or ""),
        title=str(ig.get("title") or package_json.get("title") or ""),
        url=str(ig.get("url") or ""),
        canonical=str(package_json["canonical"]),
        version=str(package_json.get("version") or ig.get("version") or ""),
        status=str(ig.get("status") or ""),
        fhir_versions=_as_versions(package_json["fhirVersions"]),
    )
