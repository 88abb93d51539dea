"""Data models for ingest_articles pipeline stage."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class FeedEntry:
    """Feed entry that passed URL, date and recency checks."""
    url: str
    title: Optional[str]
    raw_text: str
    publication_date: datetime


@dataclass
class SourceIngestResult:
    """Outcome of ingesting one source."""
    source_id: int
    source_name: str
    status: str
    ingested: int = 0
    duplicates: int = 0
    rejected: int = 0
    ingested_urls: list[str] = field(default_factory=list)
