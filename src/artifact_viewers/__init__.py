"""Resolve pipeline run output artifacts into renderer-ready viewer descriptors."""

__version__ = "0.1.0"

__all__ = ["__version__"]
