"""Field resolution.

Declarative rule table and the resolver that folds over it.
"""

from .resolver import FieldResolver, is_scalar_key, sequela_row_of
from .rule_table import (
    COMBINED_SEQUELAE_RULES,
    SCALAR_KEYS,
    SCALAR_RULES,
    build_rule_table,
    module_rules,
    sequela_key,
)
from .rules import AliasRule, FieldRules, PatternRule, RowRule
from .utils import compact, fold, strip_accents

__all__ = [
    "FieldResolver",
    "is_scalar_key",
    "sequela_row_of",
    "COMBINED_SEQUELAE_RULES",
    "SCALAR_KEYS",
    "SCALAR_RULES",
    "build_rule_table",
    "module_rules",
    "sequela_key",
    "AliasRule",
    "FieldRules",
    "PatternRule",
    "RowRule",
    "compact",
    "fold",
    "strip_accents",
]
