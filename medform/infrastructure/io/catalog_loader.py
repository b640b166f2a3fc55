"""Destination catalog loading from discovery dumps.

Three layouts are accepted:

- a list of ``{"name", "type", "position"}`` objects,
- a template object whose ``fields`` member is such a list or a
  ``{name: position}`` map,
- a bare ``{name: position}`` map.

Entry order is preserved; it decides resolution ties.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ...domain.entities.catalog import DestinationCatalog, DestinationEntry
from .exceptions import DataParseError, DataSourceNotFoundError, DataValidationError


class CatalogLoader:
    pass

    def load(self, path: Path) -> DestinationCatalog:
        if not path.exists():
            raise DataSourceNotFoundError(f"Catalog not found: {path}")
        if not path.is_file():
            raise DataSourceNotFoundError(f"Not a file: {path}")
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise DataParseError(f"Invalid JSON in {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise DataParseError(f"Encoding error reading {path}: {exc}") from exc
        return self.parse(data, source=str(path))

    def parse(self, data: Any, *, source: str = "<memory>") -> DestinationCatalog:
        if isinstance(data, dict) and "fields" in data:
            data = data["fields"]
        if isinstance(data, dict):
            raw_entries = [
                {"name": name, "position": position}
                for name, position in data.items()
            ]
        elif isinstance(data, list):
            raw_entries = data
        else:
            raise DataValidationError(
                f"Unsupported catalog layout in {source}: {type(data).__name__}"
            )
        entries: list[DestinationEntry] = []
        for index, raw in enumerate(raw_entries):
            if not isinstance(raw, dict):
                raise DataValidationError(
                    f"Catalog entry {index} in {source} is not an object"
                )
            try:
                entries.append(DestinationEntry.model_validate(_entry_payload(raw)))
            except ValidationError as exc:
                raise DataValidationError(
                    f"Invalid catalog entry {index} in {source}: {exc}"
                ) from exc
        return DestinationCatalog.from_entries(entries)


def _entry_payload(raw: dict[str, Any]) -> dict[str, Any]:
    payload = dict(raw)
    if "type" not in payload and "fieldType" in payload:
        payload["type"] = payload.pop("fieldType")
    position = payload.get("position")
    if not isinstance(position, dict):
        payload["position"] = None
    return payload
