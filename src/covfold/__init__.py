"""Coverage aggregation and threshold enforcement for test runs."""

from covfold._meta import __version__, logger

__all__ = ["__version__", "logger"]
