"""Validation helpers for manifests and settings."""

from .validation import validate_engines

__all__ = ["validate_engines"]
