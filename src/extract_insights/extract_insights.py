"""LLM insight extraction for a single article."""

from __future__ import annotations

import json
import logging
import math
from typing import Any

import openai
from openai import OpenAI

from common.config import LLMConfig, require_env
from common.errors import InsightExtractionError
from extract_insights.instructions import EXTRACT_INSIGHTS_INSTRUCTIONS
from extract_insights.models import MAX_KEYWORDS, MAX_TAGS, ArticleInsights, default_insights

logger = logging.getLogger(__name__)


def _coerce_summary(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _coerce_string_list(value: Any, limit: int) -> list[str]:
    if not isinstance(value, list):
        return []
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items[:limit]


def _coerce_relevance(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    score = float(value)
    if math.isnan(score) or not 0.0 <= score <= 1.0:
        return 0.0
    return score


def _coerce_insights(data: Any) -> ArticleInsights:
    """Build insights from the model's JSON, falling back to defaults field by field."""
    defaults = default_insights()
    if not isinstance(data, dict):
        logger.warning("Model returned non-object JSON (%s), using default insights", type(data).__name__)
        return defaults

    return ArticleInsights(
        executive_summary=_coerce_summary(data.get("executive_summary"), defaults.executive_summary),
        technical_summary=_coerce_summary(data.get("technical_summary"), defaults.technical_summary),
        simple_summary=_coerce_summary(data.get("simple_summary"), defaults.simple_summary),
        extracted_keywords=_coerce_string_list(data.get("extracted_keywords"), MAX_KEYWORDS),
        ai_relevance_score=_coerce_relevance(data.get("ai_relevance_score")),
        generated_tags=_coerce_string_list(data.get("generated_tags"), MAX_TAGS),
    )


class InsightExtractor:
    """Turns article text into ArticleInsights using an OpenAI chat model."""

    def __init__(
        self,
        client: Any,
        model: str = "gpt-4o-mini",
        temperature: float = 0.5,
        max_output_tokens: int = 1000,
        max_input_chars: int = 15000,
        min_input_chars: int = 50,
    ) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.max_input_chars = max_input_chars
        self.min_input_chars = min_input_chars

    def extract(self, text: str | None) -> ArticleInsights:
        """
        Extract insights from article text.

        Empty or short input returns default insights without calling the
        model. Malformed model output degrades to defaults per field.

        Raises:
            InsightExtractionError: If the service times out, cannot be
                reached, or answers with an error status.
        """
        if not text or len(text.strip()) < self.min_input_chars:
            logger.warning("Text to analyze is too short, returning default insights")
            return default_insights()

        truncated = text[: self.max_input_chars]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": EXTRACT_INSIGHTS_INSTRUCTIONS},
                    {"role": "user", "content": f'Text to analyze:\n"""\n{truncated}\n"""'},
                ],
                response_format={"type": "json_object"},
                temperature=self.temperature,
                max_tokens=self.max_output_tokens,
            )
        except openai.APIError as e:
            raise InsightExtractionError(f"Insight extraction failed ({type(e).__name__}): {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.warning("Model response had no content, using default insights")
            return default_insights()

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse model JSON (%s), using default insights", e)
            return default_insights()

        return _coerce_insights(data)


def build_insight_extractor(config: LLMConfig) -> InsightExtractor:
    """
    Create an extractor backed by the OpenAI API.

    Raises:
        ConfigurationError: If OPENAI_API_KEY is not set.
    """
    api_key = require_env("OPENAI_API_KEY")
    client = OpenAI(
        api_key=api_key,
        timeout=config.timeout_seconds,
        max_retries=config.max_retries,
    )
    return InsightExtractor(
        client=client,
        model=config.model,
        temperature=config.temperature,
        max_output_tokens=config.max_output_tokens,
        max_input_chars=config.max_input_chars,
        min_input_chars=config.min_input_chars,
    )
