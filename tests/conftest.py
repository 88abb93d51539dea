"""Shared fixtures: an in-memory SQLite store and row factories."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from common.config import PulseConfig, reset_config, set_config
from pulse_store.models import (
    ArticleStatus,
    Base,
    ConfigGenericTerm,
    ConfigSynonym,
    ProcessedArticle,
    RawArticle,
    Source,
    SourceType,
)

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    session = factory()
    yield session
    session.close()


@pytest.fixture
def pulse_config():
    config = PulseConfig()
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def make_source(session):
    def _make(name="Example AI", url=None, type=SourceType.RSS, credibility_score=0.8, is_enabled=True):
        source = Source(
            name=name,
            url=url or f"https://{name.lower().replace(' ', '-')}.example.com/feed.xml",
            type=type,
            credibility_score=credibility_score,
            is_enabled=is_enabled,
        )
        session.add(source)
        session.commit()
        return source

    return _make


@pytest.fixture
def make_raw_article(session):
    counter = {"n": 0}

    def _make(source=None, status=ArticleStatus.PENDING_PROCESSING, fetched_at=None, **values):
        counter["n"] += 1
        article = RawArticle(
            source_id=source.id if source is not None else None,
            source_url=values.pop("source_url", f"https://news.example.com/articles/{counter['n']}"),
            title=values.pop("title", f"Article {counter['n']}"),
            raw_text=values.pop("raw_text", "Text " * 30),
            publication_date=values.pop("publication_date", NOW),
            status=status,
            fetched_at=fetched_at or NOW,
            **values,
        )
        session.add(article)
        session.commit()
        return article

    return _make


@pytest.fixture
def make_processed_article(session, make_raw_article):
    def _make(tags=None, created_at=None, initial_score=0.5, **values):
        raw = make_raw_article(status=ArticleStatus.PROCESSED)
        article = ProcessedArticle(
            raw_article_id=raw.id,
            original_url=raw.source_url,
            title=values.pop("title", raw.title),
            source_name=values.pop("source_name", "Example AI"),
            publication_date=values.pop("publication_date", raw.publication_date),
            summary_executive=values.pop("summary_executive", "Executive summary"),
            summary_technical=values.pop("summary_technical", "Technical summary"),
            summary_simple=values.pop("summary_simple", "Simple summary"),
            tags=tags if tags is not None else [],
            pulse_keywords=values.pop("pulse_keywords", []),
            initial_score=initial_score,
            created_at=created_at or NOW,
            **values,
        )
        session.add(article)
        session.commit()
        return article

    return _make


@pytest.fixture
def seed_trend_config(session):
    def _seed(synonyms=None, generic_terms=None, disabled_synonyms=None):
        for synonym, canonical in (synonyms or {}).items():
            session.add(ConfigSynonym(synonym=synonym, canonical_term=canonical))
        for synonym, canonical in (disabled_synonyms or {}).items():
            session.add(ConfigSynonym(synonym=synonym, canonical_term=canonical, is_enabled=False))
        for term in generic_terms or []:
            session.add(ConfigGenericTerm(term=term))
        session.commit()

    return _seed
