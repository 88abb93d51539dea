"""RSS feed fetching and entry parsing."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import feedparser
import requests
from dateutil.parser import parse as parse_date

from common.errors import FeedFetchError
from ingest_articles.clean_articles.clean import clean_text
from ingest_articles.fetch_articles.fetch_article_text import DEFAULT_USER_AGENT
from ingest_articles.models import FeedEntry

logger = logging.getLogger(__name__)

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}


def fetch_feed(
    feed_url: str,
    timeout: int = 30,
    user_agent: str = DEFAULT_USER_AGENT,
) -> feedparser.FeedParserDict:
    """
    Download and parse a feed.

    Raises:
        FeedFetchError: On HTTP or network errors, or when the document is
            malformed and yielded no entries.
    """
    try:
        response = requests.get(feed_url, timeout=timeout, headers={"User-Agent": user_agent})
        response.raise_for_status()
    except requests.RequestException as e:
        raise FeedFetchError(f"Failed to fetch feed {feed_url}: {e}") from e

    feed = feedparser.parse(response.content)
    if feed.get("bozo") and not feed.entries:
        raise FeedFetchError(f"Failed to parse feed {feed_url}: {feed.get('bozo_exception')}")
    return feed


def resolve_entry_url(entry: Any) -> Optional[str]:
    """First link href, else link, else the entry id. Only absolute http(s) URLs are kept."""
    url = None
    links = entry.get("links") or []
    if links:
        url = links[0].get("href")
    url = url or entry.get("link") or entry.get("id")

    if not url or not isinstance(url, str):
        return None
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        return None
    return url


def parse_published_date(entry: Any) -> Optional[datetime]:
    """Extract and parse the published (or updated) date of a feed entry."""
    published = entry.get("published") or entry.get("updated")
    if not published:
        return None

    try:
        dt = parse_date(published, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def entry_raw_text(entry: Any) -> str:
    """Description/summary of the entry, else its first content block, cleaned."""
    text = entry.get("description") or entry.get("summary")
    if not text:
        contents = entry.get("content") or []
        if contents:
            text = contents[0].get("value")
    return clean_text(text) or ""


def parse_entry(entry: Any, since: datetime) -> Optional[FeedEntry]:
    """Parse one feed entry; None when it has no usable URL or date, or is too old."""
    url = resolve_entry_url(entry)
    if url is None:
        logger.warning("Skipping entry with invalid or missing URL: %s", entry.get("title"))
        return None

    published_at = parse_published_date(entry)
    if published_at is None:
        logger.warning("Skipping entry with missing or invalid publication date: %s", url)
        return None

    if published_at < since:
        return None

    return FeedEntry(
        url=url,
        title=clean_text(entry.get("title")),
        raw_text=entry_raw_text(entry),
        publication_date=published_at,
    )
