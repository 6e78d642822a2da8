from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
import tomllib
from typing import cast
import warnings

from .constants import CorePackages, Defaults, InputFiles
from .domain.entities.settings import DataDictionaryMode


def _default_core_packages() -> dict[str, tuple[str, str]]:
    return dict(CorePackages.BY_FHIR_VERSION)


@dataclass(frozen=True, slots=True)
class SummaryConfig:
    package_cache_dir: Path = field(
        default_factory=lambda: Path(Defaults.PACKAGE_CACHE_DIR).expanduser()
    )
    default_mode: str = Defaults.MODE
    truncate_length: int = Defaults.TRUNCATE_LENGTH
    core_packages: Mapping[str, tuple[str, str]] = field(
        default_factory=_default_core_packages
    )

    def __post_init__(self) -> None:
        DataDictionaryMode.parse(self.default_mode)
        if self.truncate_length < 4:
            raise ValueError(
                f"truncate_length must be at least 4, got {self.truncate_length}"
            )
        for version, package in self.core_packages.items():
            if len(package) != 2:
                raise ValueError(
                    f"core package for FHIR {version} must be (id, version), got {package!r}"
                )

    @property
    def mode(self) -> DataDictionaryMode:
        return DataDictionaryMode.parse(self.default_mode)

    @classmethod
    def from_env(cls) -> SummaryConfig:
        return cls(
            package_cache_dir=Path(
                os.getenv("IG_SUMMARY_PACKAGE_CACHE", Defaults.PACKAGE_CACHE_DIR)
            ).expanduser(),
            default_mode=os.getenv("IG_SUMMARY_MODE", Defaults.MODE),
            truncate_length=int(
                os.getenv("IG_SUMMARY_TRUNCATE", str(Defaults.TRUNCATE_LENGTH))
            ),
        )


class ConfigLoader:
    pass

    @staticmethod
    def load(config_file: Path | None = None) -> SummaryConfig:
        config = SummaryConfig.from_env()
        if config_file is None:
            config_file = Path(InputFiles.CONFIG_FILE)
        if config_file.exists():
            try:
                config = ConfigLoader._load_from_toml(config_file, config)
            except Exception as e:
                warnings.warn(
                    f"Failed to load config from {config_file}: {e}", stacklevel=2
                )
        return config

    @staticmethod
    def _load_from_toml(config_file: Path, base_config: SummaryConfig) -> SummaryConfig:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
        paths = _get_table(data, "paths")
        default_section = _get_table(data, "default")
        display = _get_table(data, "display")

        package_cache_dir = base_config.package_cache_dir
        if value := paths.get("package_cache"):
            package_cache_dir = Path(str(value)).expanduser()
        default_mode = base_config.default_mode
        if (value := default_section.get("mode")) is not None:
            default_mode = str(value)
        truncate_length = base_config.truncate_length
        if (value := display.get("truncate")) is not None:
            truncate_length = _coerce_int(value, key="display.truncate")

        core_packages = dict(base_config.core_packages)
        for version, package in _get_table(data, "core_packages").items():
            core_packages[str(version)] = _coerce_package(
                package, key=f"core_packages.{version}"
            )

        return SummaryConfig(
            package_cache_dir=package_cache_dir,
            default_mode=default_mode,
            truncate_length=truncate_length,
            core_packages=core_packages,
        )


def _get_table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}


def _coerce_int(value: object, *, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value)
    raise ValueError(f"{key} must be int-like or string, got {type(value).__name__}")


def _coerce_package(value: object, *, key: str) -> tuple[str, str]:
    if isinstance(value, str) and "#" in value:
        package_id, version = value.split("#", 1)
        return package_id, version
    raise ValueError(f"{key} must look like '<package id>#<version>', got {value!r}")
