"""Keyword lemmatization used to match pulse keywords against trending topics."""

from __future__ import annotations

import logging

import spacy

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

_nlp_cache: dict[str, spacy.Language] = {}


def _get_nlp(language: str = DEFAULT_LANGUAGE) -> spacy.Language:
    """Get or build a blank pipeline with the lookup lemmatizer."""
    if language not in _nlp_cache:
        logger.info("Building spaCy lookup lemmatizer for language: %s", language)
        nlp = spacy.blank(language)
        nlp.add_pipe("lemmatizer", config={"mode": "lookup"})
        nlp.initialize()
        _nlp_cache[language] = nlp
    return _nlp_cache[language]


def lemmatize(text: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Lower-case text and replace every token with its lemma, keeping whitespace."""
    if not text or not text.strip():
        return ""
    doc = _get_nlp(language)(text.strip().lower())
    return "".join((token.lemma_ or token.text) + token.whitespace_ for token in doc)
