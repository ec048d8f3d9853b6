"""Exceptions raised by the deduplication stages."""
from __future__ import annotations

from typing import Iterable


class DedupError(Exception):
    """Base error; ``reason`` is a short machine-friendly tag."""

    reason = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(DedupError):
    reason = "missing input"


class NotFoundError(DedupError):
    reason = "object not found"


class SchemaMismatchError(DedupError):
    reason = "columns do not exist"

    def __init__(self, message: str, columns: Iterable[str]) -> None:
        super().__init__(message)
        self.columns = tuple(columns)


class ExecutionError(DedupError):
    reason = "unable to delete records"


class IntegrityViolationError(DedupError):
    reason = "duplicates remain after deletion"


class CatalogUnavailable(DedupError):
    reason = "catalog unavailable"


class DedupCancelled(DedupError):
    reason = "cancelled"

    def __init__(self, message: str = "Deduplication cancelled; no records were deleted.") -> None:
        super().__init__(message)


__all__ = [
    "CatalogUnavailable",
    "ConfigError",
    "DedupCancelled",
    "DedupError",
    "ExecutionError",
    "IntegrityViolationError",
    "NotFoundError",
    "SchemaMismatchError",
]
