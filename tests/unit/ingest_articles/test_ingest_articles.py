"""Tests for ingest_articles.ingest_articles against in-memory SQLite."""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import feedparser
from sqlalchemy import select

from common.datetime import ensure_utc
from common.errors import FeedFetchError
from ingest_articles.ingest_articles import ingest_sources, run_ingestion
from pulse_store.models import ArticleStatus, RawArticle, Source, SourceType

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def _rfc822(dt: datetime) -> str:
    return dt.strftime("%a, %d %b %Y %H:%M:%S GMT")


def _item(url: str | None, published: datetime | None, title: str = "Item", description: str = "Feed text") -> str:
    link = f"<link>{url}</link>" if url else "<guid isPermaLink=\"false\">not-a-url</guid>"
    date = f"<pubDate>{_rfc822(published)}</pubDate>" if published else ""
    return f"<item><title>{title}</title>{link}{date}<description>{description}</description></item>"


def _feed(*items: str):
    return feedparser.parse(
        '<?xml version="1.0"?><rss version="2.0"><channel><title>Feed</title>'
        + "".join(items)
        + "</channel></rss>"
    )


def _feeds_by_url(mapping):
    def fetch(url):
        value = mapping[url]
        if isinstance(value, Exception):
            raise value
        return value

    return fetch


def _rows(session):
    return session.scalars(select(RawArticle).order_by(RawArticle.id)).all()


class TestIngestSources:
    def test_ingests_recent_entries_as_pending(self, session, make_source) -> None:
        source = make_source(name="Alpha")
        feed = _feed(
            _item("https://alpha.example.com/1", NOW - timedelta(days=1), title="One"),
            _item("https://alpha.example.com/2", NOW - timedelta(days=40), title="Two"),
        )

        count = ingest_sources(session, [source], now=NOW, fetch_feed=lambda url: feed)

        assert count == 2
        rows = _rows(session)
        assert [r.source_url for r in rows] == ["https://alpha.example.com/1", "https://alpha.example.com/2"]
        assert all(r.status == ArticleStatus.PENDING_PROCESSING for r in rows)
        assert rows[0].source_id == source.id
        assert rows[0].title == "One"
        assert rows[0].raw_text == "Feed text"

    def test_rejects_old_undated_and_url_less_entries(self, session, make_source) -> None:
        source = make_source()
        feed = _feed(
            _item("https://alpha.example.com/old", NOW - timedelta(days=120)),
            _item("https://alpha.example.com/undated", None),
            _item(None, NOW),
            _item("https://alpha.example.com/ok", NOW),
        )

        results = run_ingestion(session, [source], now=NOW, fetch_feed=lambda url: feed)

        assert results[0].ingested == 1
        assert results[0].rejected == 3
        assert [r.source_url for r in _rows(session)] == ["https://alpha.example.com/ok"]

    def test_rerun_creates_no_duplicates(self, session, make_source) -> None:
        source = make_source()
        feed = _feed(_item("https://alpha.example.com/1", NOW))

        assert ingest_sources(session, [source], now=NOW, fetch_feed=lambda url: feed) == 1
        assert ingest_sources(session, [source], now=NOW, fetch_feed=lambda url: feed) == 0
        assert len(_rows(session)) == 1

    def test_same_url_in_two_sources_stored_once(self, session, make_source) -> None:
        alpha = make_source(name="Alpha")
        beta = make_source(name="Beta")
        feed = _feed(_item("https://shared.example.com/1", NOW))

        assert ingest_sources(session, [alpha, beta], now=NOW, fetch_feed=lambda url: feed) == 1

    def test_failed_source_is_skipped_and_not_stamped(self, session, make_source) -> None:
        broken = make_source(name="Broken")
        working = make_source(name="Working")
        fetch = _feeds_by_url(
            {
                broken.url: FeedFetchError("503"),
                working.url: _feed(_item("https://working.example.com/1", NOW)),
            }
        )

        count = ingest_sources(session, [broken, working], now=NOW, fetch_feed=fetch)

        assert count == 1
        session.refresh(broken)
        session.refresh(working)
        assert broken.last_fetched_at is None
        assert ensure_utc(working.last_fetched_at) == NOW

    def test_api_and_scrape_sources_are_skipped_but_stamped(self, session, make_source) -> None:
        api = make_source(name="Api", type=SourceType.API)
        fetch = Mock()

        results = run_ingestion(session, [api], now=NOW, fetch_feed=fetch)

        assert results[0].status == "skipped"
        fetch.assert_not_called()
        session.refresh(api)
        assert ensure_utc(api.last_fetched_at) == NOW

    def test_full_text_fetched_for_short_feed_text(self, session, make_source) -> None:
        source = make_source()
        feed = _feed(_item("https://alpha.example.com/1", NOW, description="Short"))
        fetch_full_text = Mock(return_value="Full article body " * 20)

        ingest_sources(
            session,
            [source],
            now=NOW,
            fetch_feed=lambda url: feed,
            fetch_full_text=fetch_full_text,
            full_text_min_chars=100,
        )

        fetch_full_text.assert_called_once_with("https://alpha.example.com/1")
        assert _rows(session)[0].raw_text.startswith("Full article body")

    def test_full_text_not_fetched_when_feed_text_long_enough(self, session, make_source) -> None:
        source = make_source()
        feed = _feed(_item("https://alpha.example.com/1", NOW, description="Long enough " * 20))
        fetch_full_text = Mock()

        ingest_sources(
            session,
            [source],
            now=NOW,
            fetch_feed=lambda url: feed,
            fetch_full_text=fetch_full_text,
            full_text_min_chars=100,
        )

        fetch_full_text.assert_not_called()

    def test_recency_window_is_configurable(self, session, make_source) -> None:
        source = make_source()
        feed = _feed(_item("https://alpha.example.com/1", NOW - timedelta(days=45)))

        assert ingest_sources(session, [source], now=NOW, recency_months=1, fetch_feed=lambda url: feed) == 0
