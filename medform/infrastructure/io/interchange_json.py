"""JSON files for the interchange map and model snapshots."""

from __future__ import annotations

from collections.abc import Mapping
import json
from pathlib import Path
from typing import Any

from ...constants import Defaults
from ...domain.entities.semantic_model import SemanticModel
from .exceptions import DataParseError, InterchangeLoadError


def _read_object(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise InterchangeLoadError(f"File not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise InterchangeLoadError(f"Invalid JSON in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise InterchangeLoadError(f"Failed to read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise InterchangeLoadError(
            f"Expected a JSON object in {path}, got {type(data).__name__}"
        )
    return data


def _write_object(path: Path, payload: Mapping[str, Any]) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
    except OSError as exc:
        raise DataParseError(f"Failed to write {path}: {exc}") from exc
    return path


class JsonInterchangeRepository:
    """Flat ``{destinationName: value}`` interchange files."""

    def read(self, path: Path) -> dict[str, Any]:
        return _read_object(path)

    def write(self, path: Path, values: Mapping[str, str]) -> Path:
        return _write_object(path, dict(values))


class JsonModelSnapshotRepository:
    def __init__(self, *, max_sequela_rows: int = Defaults.MAX_SEQUELA_ROWS) -> None:
        self.max_sequela_rows = max_sequela_rows

    def load(self, path: Path) -> SemanticModel:
        data = _read_object(path)
        try:
            return SemanticModel.from_dict(
                data, max_sequela_rows=self.max_sequela_rows
            )
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            raise InterchangeLoadError(f"Invalid model snapshot {path}: {exc}") from exc

    def save(self, model: SemanticModel, path: Path) -> Path:
        return _write_object(path, model.to_dict())
