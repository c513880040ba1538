"""Brain: a file-backed task API."""

__version__ = "1.0.0"
