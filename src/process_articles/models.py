"""Data models for process_articles pipeline stage."""

from dataclasses import dataclass, field


@dataclass
class ProcessingResult:
    """Counts and ids of one processing batch."""
    processed: int = 0
    failed: int = 0
    skipped: int = 0
    processed_ids: list[int] = field(default_factory=list)
    failed_ids: list[int] = field(default_factory=list)
    skipped_ids: list[int] = field(default_factory=list)
    stale_claim_ids: list[int] = field(default_factory=list)
