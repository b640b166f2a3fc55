"""Infrastructure layer for medform.

This layer contains adapters for files and the console. It implements the
ports defined in the application layer.
"""

__all__ = []
