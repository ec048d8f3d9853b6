"""Value types shared by the deduplication stages."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

SUCCESS = "success"
NOOP = "noop"
PROBE = "probe"
FAILURE = "failure"


def quote_identifier(name: str) -> str:
    """Quote a DuckDB identifier, doubling embedded double quotes."""
    return '"' + str(name).replace('"', '""') + '"'


@dataclass(frozen=True)
class TargetRef:
    database: str
    schema: str
    table: str

    @property
    def qualified_name(self) -> str:
        return ".".join(quote_identifier(part) for part in (self.database, self.schema, self.table))

    @property
    def display_name(self) -> str:
        return f"[{self.database}].[{self.schema}].[{self.table}]"


@dataclass(frozen=True)
class ColumnSet:
    """Ordered, distinct column names that define duplicate groups."""

    names: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.names:
            raise ValueError("ColumnSet requires at least one column")

    def __iter__(self):
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def quoted(self) -> str:
        return ", ".join(quote_identifier(name) for name in self.names)

    def display(self) -> str:
        return ", ".join(self.names)


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    columns: Optional[ColumnSet] = None
    reason: Optional[str] = None
    offending_columns: Tuple[str, ...] = ()

    @classmethod
    def valid(cls, columns: ColumnSet) -> "ValidationResult":
        return cls(ok=True, columns=columns)

    @classmethod
    def invalid(cls, reason: str, offending: Iterable[str] = ()) -> "ValidationResult":
        return cls(ok=False, reason=reason, offending_columns=tuple(offending))


@dataclass(frozen=True)
class DuplicateReport:
    total_duplicate_rows: int

    @property
    def has_duplicates(self) -> bool:
        return self.total_duplicate_rows > 0


@dataclass(frozen=True)
class DedupOutcome:
    """Result handed back to callers of the orchestrator.

    ``kind`` is one of ``success``, ``noop``, ``probe`` or ``failure``. Only
    ``failure`` maps to a non-zero status code.
    """

    kind: str
    message: str
    deleted_count: int = 0
    duplicate_count: int = 0
    reason: Optional[str] = None
    offending_columns: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls, deleted_count: int, message: str) -> "DedupOutcome":
        return cls(kind=SUCCESS, message=message, deleted_count=deleted_count, duplicate_count=deleted_count)

    @classmethod
    def noop(cls, message: str = "No duplicate records found. No records will be deleted.") -> "DedupOutcome":
        return cls(kind=NOOP, message=message)

    @classmethod
    def probe(cls, duplicate_count: int, message: str) -> "DedupOutcome":
        return cls(kind=PROBE, message=message, duplicate_count=duplicate_count)

    @classmethod
    def failure(cls, reason: str, message: str, offending: Iterable[str] = ()) -> "DedupOutcome":
        return cls(kind=FAILURE, message=message, reason=reason, offending_columns=tuple(offending))

    @property
    def ok(self) -> bool:
        return self.kind != FAILURE

    @property
    def status_code(self) -> int:
        return 0 if self.ok else 1


__all__ = [
    "ColumnSet",
    "DedupOutcome",
    "DuplicateReport",
    "FAILURE",
    "NOOP",
    "PROBE",
    "SUCCESS",
    "TargetRef",
    "ValidationResult",
    "quote_identifier",
]
