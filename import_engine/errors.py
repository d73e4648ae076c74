"""
import_engine.errors - Exception taxonomy of the import pipeline.

Only PipelineFatalError escapes the orchestrator; every RowError is
caught per row and recorded in the ImportSummary.
"""

from __future__ import annotations


class ImportEngineError(Exception):
    """Base class for import pipeline failures."""


class RowError(ImportEngineError):
    """Raised when a row cannot be imported."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class RowValidationError(RowError):
    """A required field is missing/empty or a value is malformed."""


class ResolutionError(RowError):
    """Category/supplier lookup or creation failed in the database."""


class PersistenceError(RowError):
    """The material itself could not be saved."""


class PipelineFatalError(ImportEngineError):
    """The file cannot be read at all, so no row can be attempted."""


class FieldSpecError(ValueError):
    """Unknown, duplicated or missing field identifiers in a field list."""
