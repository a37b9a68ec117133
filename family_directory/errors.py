"""Exceptions raised by the family directory."""


class FamilyDirectoryError(Exception):
    """Base class for directory errors scoped to a single operation."""


class StoreError(FamilyDirectoryError):
    """The document store failed (network, IO, missing record)."""


class ValidationError(FamilyDirectoryError):
    """User input was rejected before any store call."""
