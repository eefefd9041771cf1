"""
Batch Job domain model.
Represents one uploaded catalog file and its ingestion progress.
"""
from datetime import datetime
from typing import List, Optional, Set

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"

TERMINAL_STATUSES = {STATUS_COMPLETED, STATUS_FAILED}


class RowError:
    """A single row-level failure recorded on a batch job."""

    def __init__(self, row: int, error: str):
        self.row = row
        self.error = error

    def to_dict(self) -> dict:
        return {"row": self.row, "error": self.error}

    def __eq__(self, other):
        return isinstance(other, RowError) and (self.row, self.error) == (other.row, other.error)

    def __repr__(self):
        return f"RowError(row={self.row}, error={self.error!r})"


class ChunkProgress:
    """Chunk counters returned by an atomic counter update."""

    def __init__(self, total_chunks: int, chunks_completed: int, chunks_failed: int):
        self.total_chunks = total_chunks
        self.chunks_completed = chunks_completed
        self.chunks_failed = chunks_failed

    @property
    def settled(self) -> int:
        return self.chunks_completed + self.chunks_failed

    @property
    def is_complete(self) -> bool:
        return self.total_chunks > 0 and self.settled >= self.total_chunks

    def __repr__(self):
        return (f"ChunkProgress(completed={self.chunks_completed}, failed={self.chunks_failed}, "
                f"total={self.total_chunks})")


class BatchJob:
    """Domain model for batch job tracking."""

    def __init__(
        self,
        job_id: str,
        seller_id: str,
        status: str,
        file_name: str,
        object_key: Optional[str],
        created_at: datetime,
        updated_at: Optional[datetime] = None,
        total_rows: int = 0,
        processed_rows: int = 0,
        created_count: int = 0,
        error_count: int = 0,
        total_chunks: int = 0,
        chunks_completed: int = 0,
        chunks_failed: int = 0,
        retry_count: int = 0,
        max_retries: int = 3,
        errors: Optional[List[RowError]] = None,
        settled_chunks: Optional[Set[int]] = None
    ):
        self.job_id = job_id
        self.seller_id = seller_id
        self.status = status
        self.file_name = file_name
        self.object_key = object_key
        self.created_at = created_at
        self.updated_at = updated_at or created_at
        self.total_rows = total_rows
        self.processed_rows = processed_rows
        self.created_count = created_count
        self.error_count = error_count
        self.total_chunks = total_chunks
        self.chunks_completed = chunks_completed
        self.chunks_failed = chunks_failed
        self.retry_count = retry_count
        self.max_retries = max_retries
        self.errors = errors or []
        self.settled_chunks = settled_chunks or set()

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def chunk_progress(self) -> ChunkProgress:
        return ChunkProgress(self.total_chunks, self.chunks_completed, self.chunks_failed)

    def __repr__(self):
        return f"BatchJob(job_id={self.job_id}, status={self.status}, file_name={self.file_name})"
