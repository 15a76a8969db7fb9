"""Health Export running activity importer for GraphJSON."""

__version__ = "0.1.0"
