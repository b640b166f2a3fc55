"""Domain layer.

Pure entities and services. Nothing in this package performs I/O or
depends on the application, infrastructure or CLI layers.
"""
