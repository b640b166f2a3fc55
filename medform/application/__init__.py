"""Application layer for medform.

This layer holds the form session, the import and export use cases and the
ports (interfaces) their adapters implement.
"""

from .models import ExportRequest, ExportResponse, ImportRequest, ImportResponse
from .session import FormSession

# Use cases are imported from their modules:
#   from medform.application.import_use_case import ImportUseCase

__all__ = [
    "ExportRequest",
    "ExportResponse",
    "FormSession",
    "ImportRequest",
    "ImportResponse",
]
