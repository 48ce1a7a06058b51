"""Ingestion run report data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.models.enums import SourceStatus


@dataclass
class SourceOutcome:
    """Result of ingesting a single source path."""

    path: str
    status: SourceStatus
    chunk_count: int = 0
    message: str | None = None

    def __post_init__(self):
        if not isinstance(self.status, SourceStatus):
            self.status = SourceStatus(self.status)
        if self.chunk_count < 0:
            raise ValueError("chunk_count must be >= 0")

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "status": self.status.value,
            "chunk_count": self.chunk_count,
            "message": self.message,
        }


@dataclass
class IngestionReport:
    """Summary of a full-refresh ingestion run."""

    outcomes: list[SourceOutcome] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    def record(self, outcome: SourceOutcome) -> None:
        self.outcomes.append(outcome)

    def finish(self) -> None:
        self.completed_at = datetime.now(timezone.utc)

    @property
    def total_chunks(self) -> int:
        return sum(o.chunk_count for o in self.outcomes if o.status == SourceStatus.SUCCESS)

    @property
    def succeeded(self) -> list[SourceOutcome]:
        return [o for o in self.outcomes if o.status == SourceStatus.SUCCESS]

    @property
    def failed(self) -> list[SourceOutcome]:
        return [o for o in self.outcomes if o.status == SourceStatus.FAILED]

    @property
    def skipped(self) -> list[SourceOutcome]:
        return [o for o in self.outcomes if o.status == SourceStatus.SKIPPED]

    def to_dict(self) -> dict:
        return {
            "total_chunks": self.total_chunks,
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "skipped": len(self.skipped),
            "sources": [o.to_dict() for o in self.outcomes],
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
