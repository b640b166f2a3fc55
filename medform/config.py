from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os
from pathlib import Path
import tomllib
from typing import cast
import warnings

from .constants import Defaults


@dataclass(frozen=True, slots=True)
class MedformConfig:
    overflow_budget: int = Defaults.OVERFLOW_BUDGET
    contamination_threshold: int = Defaults.CONTAMINATION_THRESHOLD
    min_segment_confidence: float = Defaults.MIN_SEGMENT_CONFIDENCE
    fuzzy_match_threshold: float = Defaults.FUZZY_MATCH_THRESHOLD
    max_sequela_rows: int = Defaults.MAX_SEQUELA_ROWS

    def __post_init__(self) -> None:
        if self.overflow_budget < 1:
            raise ValueError(
                f"overflow_budget must be positive, got {self.overflow_budget}"
            )
        if self.contamination_threshold < 1:
            raise ValueError(
                f"contamination_threshold must be positive, got {self.contamination_threshold}"
            )
        if not 0.0 <= self.min_segment_confidence <= 1.0:
            raise ValueError(
                f"min_segment_confidence must be between 0.0 and 1.0, got {self.min_segment_confidence}"
            )
        if not 0.0 <= self.fuzzy_match_threshold <= 1.0:
            raise ValueError(
                f"fuzzy_match_threshold must be between 0.0 and 1.0, got {self.fuzzy_match_threshold}"
            )
        if self.max_sequela_rows < Defaults.MIN_SEQUELA_ROWS:
            raise ValueError(
                f"max_sequela_rows must be at least {Defaults.MIN_SEQUELA_ROWS}, got {self.max_sequela_rows}"
            )

    @classmethod
    def from_env(cls) -> MedformConfig:
        return cls(
            overflow_budget=int(
                os.getenv("OVERFLOW_BUDGET", str(Defaults.OVERFLOW_BUDGET))
            ),
            contamination_threshold=int(
                os.getenv(
                    "CONTAMINATION_THRESHOLD", str(Defaults.CONTAMINATION_THRESHOLD)
                )
            ),
            min_segment_confidence=float(
                os.getenv(
                    "MIN_SEGMENT_CONFIDENCE", str(Defaults.MIN_SEGMENT_CONFIDENCE)
                )
            ),
            fuzzy_match_threshold=float(
                os.getenv("FUZZY_MATCH_THRESHOLD", str(Defaults.FUZZY_MATCH_THRESHOLD))
            ),
            max_sequela_rows=int(
                os.getenv("MAX_SEQUELA_ROWS", str(Defaults.MAX_SEQUELA_ROWS))
            ),
        )


class ConfigLoader:
    pass

    @staticmethod
    def load(config_file: Path | None = None) -> MedformConfig:
        config = MedformConfig.from_env()
        if config_file is None:
            config_file = Path(Defaults.CONFIG_FILE)
        if config_file.exists():
            try:
                config = ConfigLoader._load_from_toml(config_file, config)
            except Exception as e:
                warnings.warn(
                    f"Failed to load config from {config_file}: {e}", stacklevel=2
                )
        return config

    @staticmethod
    def _load_from_toml(config_file: Path, base_config: MedformConfig) -> MedformConfig:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
        overflow = _get_table(data, "overflow")
        sanitizer = _get_table(data, "sanitizer")
        speech = _get_table(data, "speech")
        matching = _get_table(data, "matching")
        overflow_budget = base_config.overflow_budget
        if (value := overflow.get("budget")) is not None:
            overflow_budget = _coerce_int(value, key="overflow.budget")
        contamination_threshold = base_config.contamination_threshold
        if (value := sanitizer.get("threshold")) is not None:
            contamination_threshold = _coerce_int(value, key="sanitizer.threshold")
        min_segment_confidence = base_config.min_segment_confidence
        if (value := speech.get("min_confidence")) is not None:
            min_segment_confidence = _coerce_float(value, key="speech.min_confidence")
        fuzzy_match_threshold = base_config.fuzzy_match_threshold
        if (value := matching.get("fuzzy_threshold")) is not None:
            fuzzy_match_threshold = _coerce_float(
                value, key="matching.fuzzy_threshold"
            )
        max_sequela_rows = base_config.max_sequela_rows
        if (value := matching.get("max_sequela_rows")) is not None:
            max_sequela_rows = _coerce_int(value, key="matching.max_sequela_rows")
        return MedformConfig(
            overflow_budget=overflow_budget,
            contamination_threshold=contamination_threshold,
            min_segment_confidence=min_segment_confidence,
            fuzzy_match_threshold=fuzzy_match_threshold,
            max_sequela_rows=max_sequela_rows,
        )


def _get_table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}


def _coerce_float(value: object, *, key: str) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value)
    raise ValueError(f"{key} must be numeric or string, got {type(value).__name__}")


def _coerce_int(value: object, *, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        return int(value)
    raise ValueError(f"{key} must be int-like or string, got {type(value).__name__}")
