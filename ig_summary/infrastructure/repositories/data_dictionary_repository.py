from __future__ import annotations

import json
from typing import TYPE_CHECKING

from ...constants import Defaults
from ...domain.entities.data_dictionary import DataDictionaryDocument
from ..io.exceptions import DataParseError, DataSourceNotFoundError
from .definition_repository import read_json

if TYPE_CHECKING:
    from pathlib import Path


class DataDictionaryRepository:
    """Data dictionary documents stored as JSON files."""

    def read(self, path: Path) -> DataDictionaryDocument:
        if not path.exists():
            raise DataSourceNotFoundError(f"Data dictionary not found: {path}")
        data = read_json(path)
        if not isinstance(data, dict):
            raise DataParseError(f"{path} does not contain a data dictionary object")
        try:
            return DataDictionaryDocument.from_json_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise DataParseError(f"Malformed data dictionary {path}: {exc}") from exc

    def write(self, document: DataDictionaryDocument, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(document.to_json_dict(), indent=Defaults.JSON_INDENT),
            encoding="utf-8",
        )
        return path
