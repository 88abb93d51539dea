"""SQLAlchemy ORM models for the content pipeline tables."""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Enum, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from common.errors import InvalidStatusTransition


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class SourceType(str, enum.Enum):
    API = "API"
    RSS = "RSS"
    SCRAPE = "SCRAPE"


class ArticleStatus(str, enum.Enum):
    """Raw article lifecycle. Moves only forward."""

    PENDING_PROCESSING = "pending_processing"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ArticleStatus.PROCESSED, ArticleStatus.FAILED)

    def can_transition_to(self, target: ArticleStatus) -> bool:
        return target in _TRANSITIONS[self]

    def transition_to(self, target: ArticleStatus) -> ArticleStatus:
        if not self.can_transition_to(target):
            raise InvalidStatusTransition(self, target)
        return target


_TRANSITIONS: dict[ArticleStatus, frozenset[ArticleStatus]] = {
    ArticleStatus.PENDING_PROCESSING: frozenset({ArticleStatus.PROCESSING}),
    ArticleStatus.PROCESSING: frozenset({ArticleStatus.PROCESSED, ArticleStatus.FAILED}),
    ArticleStatus.PROCESSED: frozenset(),
    ArticleStatus.FAILED: frozenset(),
}


class Source(Base):
    __tablename__ = "sources"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    url: Mapped[str] = mapped_column(String(2048))
    type: Mapped[SourceType] = mapped_column(
        Enum(SourceType, name="source_type", native_enum=False), default=SourceType.RSS
    )
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    credibility_score: Mapped[float | None] = mapped_column(Float)
    specific_config: Mapped[dict | None] = mapped_column(JSON)
    last_fetched_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    raw_articles: Mapped[list[RawArticle]] = relationship(back_populates="source")


class RawArticle(Base):
    __tablename__ = "raw_articles"
    __table_args__ = (Index("ix_raw_articles_status_fetched_at", "status", "fetched_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    source_id: Mapped[int | None] = mapped_column(ForeignKey("sources.id"))
    source_url: Mapped[str] = mapped_column(String(2048), unique=True)
    title: Mapped[str | None] = mapped_column(Text)
    raw_text: Mapped[str | None] = mapped_column(Text)
    publication_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    status: Mapped[ArticleStatus] = mapped_column(
        Enum(
            ArticleStatus,
            name="article_status",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=ArticleStatus.PENDING_PROCESSING,
    )
    processing_error: Mapped[str | None] = mapped_column(Text)
    claimed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now)

    source: Mapped[Source | None] = relationship(back_populates="raw_articles")
    processed: Mapped[ProcessedArticle | None] = relationship(back_populates="raw_article")


class ProcessedArticle(Base):
    __tablename__ = "processed_articles"
    __table_args__ = (
        Index("ix_processed_articles_created_at", "created_at"),
        Index("ix_processed_articles_publication_date", "publication_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    raw_article_id: Mapped[int] = mapped_column(ForeignKey("raw_articles.id"), unique=True)
    original_url: Mapped[str | None] = mapped_column(String(2048))
    title: Mapped[str] = mapped_column(Text, default="Untitled")
    source_name: Mapped[str | None] = mapped_column(String(255))
    publication_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    summary_executive: Mapped[str | None] = mapped_column(Text)
    summary_technical: Mapped[str | None] = mapped_column(Text)
    summary_simple: Mapped[str | None] = mapped_column(Text)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    pulse_keywords: Mapped[list[str]] = mapped_column(JSON, default=list)

    source_credibility_score: Mapped[float] = mapped_column(Float, default=0.0)
    freshness_score: Mapped[float] = mapped_column(Float, default=0.0)
    keyword_relevance_score: Mapped[float] = mapped_column(Float, default=0.0)
    trend_contribution_score: Mapped[float] = mapped_column(Float, default=0.0)
    initial_score: Mapped[float] = mapped_column(Float, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now)

    raw_article: Mapped[RawArticle] = relationship(back_populates="processed")


class TrendingTopic(Base):
    __tablename__ = "trending_topics"

    id: Mapped[int] = mapped_column(primary_key=True)
    topic_text: Mapped[str] = mapped_column(String(255), unique=True)
    buzz_score: Mapped[float] = mapped_column(Float)
    source_count: Mapped[int] = mapped_column(Integer, default=0)
    last_updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now)


class OnboardingSuggestedInterest(Base):
    __tablename__ = "onboarding_suggested_interests"

    id: Mapped[int] = mapped_column(primary_key=True)
    interest_text: Mapped[str] = mapped_column(String(255))
    rank: Mapped[int] = mapped_column(Integer)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now)


class ConfigSynonym(Base):
    __tablename__ = "config_synonyms"

    id: Mapped[int] = mapped_column(primary_key=True)
    synonym: Mapped[str] = mapped_column(String(255), unique=True)
    canonical_term: Mapped[str] = mapped_column(String(255))
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True)


class ConfigGenericTerm(Base):
    __tablename__ = "config_generic_terms"

    id: Mapped[int] = mapped_column(primary_key=True)
    term: Mapped[str] = mapped_column(String(255), unique=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True)


class Profile(Base):
    """User profile owned by the onboarding flow. Read-only here."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_type: Mapped[str | None] = mapped_column(String(32))
    ai_interests: Mapped[list[str] | None] = mapped_column(JSON, default=list)
    content_preferences: Mapped[dict | None] = mapped_column(JSON, default=dict)
