"""Output contracts: packaged JSON schemas and payload validation."""

from .validate import validate, validate_self

__all__ = ["validate", "validate_self"]
