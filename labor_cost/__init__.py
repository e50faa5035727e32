"""Labor cost tracker for small construction and trades teams."""

__version__ = "1.0.0"
