"""Shared data type definitions (Chunk, UploadResult, UploadSummary)."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Chunk:
    """
    One contiguous slice of a source file.
    """
    index: int
    total: int
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def position(self) -> int:
        """1-based position used in progress output."""
        return self.index + 1


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of delivering one chunk to the webhook.
    """
    chunk_index: int
    status_code: int
    attempts: int
    accepted: bool


@dataclass
class UploadSummary:
    """
    Per-run tally of uploaded and failed chunks.
    """
    batch_id: str
    total_chunks: int
    uploaded: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def succeeded(self) -> bool:
        return not self.failed and len(self.uploaded) == self.total_chunks
