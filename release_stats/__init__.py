"""GitHub release statistics."""

__version__ = "1.0.0"
