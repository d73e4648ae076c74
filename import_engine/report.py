"""
import_engine.report - Structured result of an import batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from db.models import JobStatus

CREATED = "created"
REJECTED = "rejected"


@dataclass
class RowResult:
    row: int
    status: str
    record_id: int | None = None
    reason: str = ""
    errors: list[dict] = field(default_factory=list)   # [{field, reason}]


@dataclass
class ImportSummary:
    total_rows: int = 0
    created: int = 0
    rejected: int = 0
    rejections: list[dict] = field(default_factory=list)   # [{row, reason, errors}]
    results: list[RowResult] = field(default_factory=list)
    finished: bool = False

    def add_created(self, row: int, record_id: int):
        self._add(RowResult(row=row, status=CREATED, record_id=record_id))
        self.created += 1

    def add_rejection(self, row: int, reason: str, errors: list[dict] | None = None):
        result = RowResult(row=row, status=REJECTED, reason=reason, errors=errors or [])
        self._add(result)
        self.rejections.append({"row": row, "reason": reason, "errors": result.errors})
        self.rejected += 1

    def finish(self) -> "ImportSummary":
        """Freeze the summary; rejections are reported in file order."""
        self.rejections.sort(key=lambda r: r["row"])
        self.results.sort(key=lambda r: r.row)
        self.finished = True
        return self

    @property
    def status(self) -> str:
        return JobStatus.COMPLETED_WITH_REJECTIONS if self.rejected else JobStatus.COMPLETED

    def _add(self, result: RowResult):
        if self.finished:
            raise RuntimeError("ImportSummary is finished and can no longer change")
        self.results.append(result)
        self.total_rows += 1
