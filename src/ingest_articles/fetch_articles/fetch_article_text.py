"""Full article text for feeds that only carry a teaser."""

import logging
from typing import Optional

import requests
import trafilatura
from lxml import html as lxml_html
from readability import Document

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "ai-pulse-ingest/1.0 (RSS reader)"


def download_html(url: str, timeout: int = 10, user_agent: str = DEFAULT_USER_AGENT) -> Optional[str]:
    """Article page HTML, or None when the request fails."""
    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": user_agent})
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Could not download %s: %s", url, e)
        return None
    return response.text or None


def extract_with_trafilatura(page_html: str, url: Optional[str] = None) -> Optional[str]:
    return trafilatura.extract(page_html, url=url, include_comments=False)


def extract_with_readability(page_html: str) -> Optional[str]:
    doc = Document(page_html)
    tree = lxml_html.fromstring(doc.summary())
    lines = [line.strip() for line in tree.text_content().splitlines() if line.strip()]
    return "\n".join(lines) if lines else None


def fetch_article_text(
    url: str,
    timeout: int = 10,
    user_agent: str = DEFAULT_USER_AGENT,
) -> Optional[str]:
    """
    Download the article page once and extract its main text.

    Order:
    1. trafilatura
    2. readability-lxml

    Returns None when the page cannot be downloaded or neither extractor
    finds any text.
    """
    page_html = download_html(url, timeout=timeout, user_agent=user_agent)
    if page_html is None:
        return None

    try:
        text = extract_with_trafilatura(page_html, url=url)
        if text:
            return text
    except Exception as e:
        logger.warning("trafilatura failed for %s: %s", url, e)

    try:
        text = extract_with_readability(page_html)
        if text:
            return text
    except Exception as e:
        logger.warning("readability failed for %s: %s", url, e)

    logger.info("No article text extracted from %s", url)
    return None
