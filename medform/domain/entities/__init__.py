"""Domain entities.

Catalog entries, the semantic model, module vocabulary, sequela rows and
mapping tables.
"""

from .catalog import DestinationCatalog, DestinationEntry, FieldPosition, FieldType
from .mapping import MappingEntry, MappingTable, RuleKind
from .modules import (
    MODULES,
    ExamGroup,
    LeafShape,
    ModuleItem,
    ModuleSchema,
    flat_key,
    get_module,
    leaf_key,
    list_modules,
    split_leaf_key,
)
from .overflow import OverflowPair, OverflowState
from .semantic_model import ModelSnapshot, SemanticModel
from .sequela import (
    CombinedEncoding,
    IndividualEncoding,
    SequelaEncoding,
    SequelaFields,
    SequelaRow,
)

__all__ = [
    # Catalog
    "DestinationCatalog",
    "DestinationEntry",
    "FieldPosition",
    "FieldType",
    # Mapping
    "MappingEntry",
    "MappingTable",
    "RuleKind",
    # Modules
    "MODULES",
    "ExamGroup",
    "LeafShape",
    "ModuleItem",
    "ModuleSchema",
    "flat_key",
    "get_module",
    "leaf_key",
    "list_modules",
    "split_leaf_key",
    # Model
    "ModelSnapshot",
    "OverflowPair",
    "OverflowState",
    "SemanticModel",
    # Sequelae
    "CombinedEncoding",
    "IndividualEncoding",
    "SequelaEncoding",
    "SequelaFields",
    "SequelaRow",
]
