"""Academy administration backend: grading and ranking service."""

__version__ = "1.0.0"
