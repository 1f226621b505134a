"""Regex position lookup and sandboxed path validation for tool-calling clients."""

__version__ = "0.1.0"

__all__ = ["__version__"]
