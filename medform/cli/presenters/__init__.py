"""Presenters for CLI output formatting.

Presenters turn catalogs, mapping tables and fill plans into rich tables.
"""

from .mapping_table import CatalogPresenter, FillPlanPresenter, MappingPresenter

__all__ = ["CatalogPresenter", "FillPlanPresenter", "MappingPresenter"]
