"""YAML run settings for ``create`` and ``diff``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml

from ...domain.entities.settings import DataDictionarySettings, DiffSettings
from ..io.exceptions import DataSourceNotFoundError, SettingsError

if TYPE_CHECKING:
    from pathlib import Path

    from ...domain.entities.settings import DataDictionaryMode


class SettingsLoader:
    """Reads settings files; no file at all means default settings.

    An explicitly given path that does not exist is an error, as is a YAML
    document whose top level is not a mapping. The dictionary mode comes from
    the caller first, then the file, then ``default_mode``.
    """

    def __init__(self, default_mode: DataDictionaryMode | None = None) -> None:
        super().__init__()
        self.default_mode = default_mode

    def load_summary_settings(
        self, path: Path | None, mode: DataDictionaryMode | None = None
    ) -> DataDictionarySettings:
        data = self._read(path)
        if mode is None and not data.get("mode"):
            mode = self.default_mode
        try:
            return DataDictionarySettings.from_mapping(data, mode=mode)
        except (KeyError, TypeError, ValueError) as exc:
            raise SettingsError(f"Invalid settings in {path}: {exc}") from exc

    def load_diff_settings(self, path: Path | None) -> DiffSettings:
        data = self._read(path)
        try:
            return DiffSettings.from_mapping(data)
        except KeyError as exc:
            raise SettingsError(f"Invalid settings in {path}: missing key {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise SettingsError(f"Invalid settings in {path}: {exc}") from exc

    @staticmethod
    def _read(path: Path | None) -> dict[str, Any]:
        if path is None:
            return {}
        if not path.exists():
            raise DataSourceNotFoundError(
                f"--settings '{path}' was specified, but this file does not exist."
            )
        try:
            with path.open(encoding="utf-8") as handle:
                data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise SettingsError(f"Failed to parse {path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SettingsError(
                f"{path} must contain a mapping at the top level, got {type(data).__name__}"
            )
        return data
