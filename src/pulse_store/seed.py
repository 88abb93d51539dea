"""Idempotent loading of sources and trend configuration from seed data."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from pulse_store.models import ConfigGenericTerm, ConfigSynonym, Source, SourceType

logger = logging.getLogger(__name__)


def seed_sources(session: Session, sources: list[dict[str, Any]]) -> int:
    """Insert or update sources matched by url."""
    existing = {source.url: source for source in session.scalars(select(Source))}
    for item in sources:
        source = existing.get(item["url"])
        if source is None:
            source = Source(url=item["url"])
            session.add(source)
            existing[source.url] = source
        source.name = item["name"]
        source.type = SourceType(item.get("type", SourceType.RSS.value))
        source.is_enabled = item.get("is_enabled", True)
        source.credibility_score = item.get("credibility_score")
        source.specific_config = item.get("specific_config")
    return len(sources)


def seed_synonyms(session: Session, synonyms: dict[str, str]) -> int:
    existing = {row.synonym: row for row in session.scalars(select(ConfigSynonym))}
    for synonym, canonical in synonyms.items():
        key = synonym.strip().lower()
        row = existing.get(key)
        if row is None:
            row = ConfigSynonym(synonym=key)
            session.add(row)
            existing[key] = row
        row.canonical_term = canonical.strip().lower()
        row.is_enabled = True
    return len(synonyms)


def seed_generic_terms(session: Session, terms: list[str]) -> int:
    existing = {row.term: row for row in session.scalars(select(ConfigGenericTerm))}
    for term in terms:
        key = term.strip().lower()
        row = existing.get(key)
        if row is None:
            row = ConfigGenericTerm(term=key)
            session.add(row)
            existing[key] = row
        row.is_enabled = True
    return len(terms)


def seed_configuration(session: Session, data: dict[str, Any]) -> dict[str, int]:
    """Load the sources, synonyms and generic_terms sections of seed data and commit."""
    counts = {
        "sources": seed_sources(session, data.get("sources") or []),
        "synonyms": seed_synonyms(session, data.get("synonyms") or {}),
        "generic_terms": seed_generic_terms(session, data.get("generic_terms") or []),
    }
    session.commit()
    logger.info(
        "Seeded %d sources, %d synonyms and %d generic terms",
        counts["sources"],
        counts["synonyms"],
        counts["generic_terms"],
    )
    return counts
