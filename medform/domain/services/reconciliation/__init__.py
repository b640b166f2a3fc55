"""Reconciliation of external data into the semantic model."""

from .engine import ReconciliationEngine, ReconciliationResult
from .flatten import FlatInput, flatten_external
from .module_paths import ModulePathParser, PathResolution
from .sequela_parser import (
    encode_combined,
    merge_encodings,
    parse_combined,
    parse_individual_key,
)

__all__ = [
    "ReconciliationEngine",
    "ReconciliationResult",
    "FlatInput",
    "flatten_external",
    "ModulePathParser",
    "PathResolution",
    "encode_combined",
    "merge_encodings",
    "parse_combined",
    "parse_individual_key",
]
