"""Domain services.

Resolution, overflow splitting, sanitization, reconciliation and export.
"""
