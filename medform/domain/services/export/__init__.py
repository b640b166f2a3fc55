"""Export of the semantic model."""

from .fill_plan import FillAction, FillInstruction, FillPlan, FillPlanner, MatchKind
from .serializer import ExportResult, ExportSerializer, derive_age, parse_date
from .text_encoding import normalize_for_winansi

__all__ = [
    "FillAction",
    "FillInstruction",
    "FillPlan",
    "FillPlanner",
    "MatchKind",
    "ExportResult",
    "ExportSerializer",
    "derive_age",
    "parse_date",
    "normalize_for_winansi",
]
