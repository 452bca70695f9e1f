"""Import preview and column-mapping engine."""

__version__ = "0.1.0"
