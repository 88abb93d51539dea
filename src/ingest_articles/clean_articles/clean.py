"""Text cleaning for feed content."""

import html
import re
from typing import Optional

# Blocks whose content is never article text
_NON_TEXT_BLOCKS = re.compile(r"<(script|style|noscript)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_COMMENTS = re.compile(r"<!--.*?-->", re.DOTALL)
_CDATA = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAGS = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def strip_html(text: str) -> str:
    """Drop markup, keeping text content separated by spaces."""
    text = _CDATA.sub(r"\1", text)
    text = _COMMENTS.sub(" ", text)
    text = _NON_TEXT_BLOCKS.sub(" ", text)
    return _TAGS.sub(" ", text)


def clean_text(text: Optional[str]) -> Optional[str]:
    """Strip HTML, unescape entities, and collapse whitespace. None when nothing is left."""
    if not text:
        return None
    text = html.unescape(strip_html(text))
    # Remove escaped quotes
    text = text.replace('\\"', '"')
    text = _WHITESPACE.sub(" ", text).strip()
    return text or None
