"""Failure types raised by catalog collaborators and the creation workflow."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for every failure surfaced by the catalog core."""


class FetchFailure(CatalogError):
    """A read against the record store failed or timed out."""

    def __init__(self, resource: str, message: str):
        super().__init__(message)
        self.resource = resource
        self.message = message


class ValidationFailure(CatalogError, ValueError):
    """Caller supplied input that cannot be submitted."""


class MissingField(ValidationFailure):
    """A required creation field was absent or blank."""

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}")
        self.field = field


class PersistFailure(CatalogError):
    """The record store rejected a write."""


class UploadFailure(CatalogError):
    """The upload collaborator could not resolve a public URL."""
