"""Tests for calculate_trends.calculate_trends."""

from collections import Counter
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from calculate_trends.calculate_trends import (
    build_onboarding_interests,
    build_trending_topics,
    calculate_trends,
    consolidate_synonyms,
    count_tags,
    drop_generic_terms,
    rank_tags,
)
from pulse_store.models import OnboardingSuggestedInterest, TrendingTopic

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class TestCountTags:
    def test_normalizes_case_and_whitespace(self) -> None:
        counts = count_tags([["LLMs", " llms "], ["Robotics"]])
        assert counts == Counter({"llms": 2, "robotics": 1})

    def test_skips_empty_and_non_string_tags(self) -> None:
        counts = count_tags([None, [], ["", "  ", 42, None, "agents"]])
        assert counts == Counter({"agents": 1})


class TestConsolidateSynonyms:
    def test_folds_counts_into_canonical_term(self) -> None:
        counts = Counter({"llm": 2, "large language models": 3, "robotics": 1})
        synonyms = {"llm": "large language models"}

        assert consolidate_synonyms(counts, synonyms) == Counter({"large language models": 5, "robotics": 1})

    def test_no_synonyms(self) -> None:
        counts = Counter({"agents": 2})
        assert consolidate_synonyms(counts, {}) == counts


class TestDropGenericTerms:
    def test_removes_generic_terms(self) -> None:
        counts = Counter({"ai": 9, "agents": 2})
        assert drop_generic_terms(counts, {"ai"}) == Counter({"agents": 2})


class TestRankTags:
    def test_count_descending_then_text(self) -> None:
        counts = Counter({"robotics": 2, "agents": 2, "vision": 5})
        assert rank_tags(counts) == [("vision", 5), ("agents", 2), ("robotics", 2)]


class TestBuildTrendingTopics:
    def test_buzz_relative_to_top_count(self) -> None:
        topics = build_trending_topics([("a", 4), ("b", 2), ("c", 1)], top_n=10, now=NOW)

        assert [(t.topic_text, t.buzz_score, t.source_count) for t in topics] == [
            ("a", 1.0, 4),
            ("b", 0.6, 2),
            ("c", 0.4, 1),
        ]
        assert all(t.last_updated_at == NOW for t in topics)

    def test_keeps_top_n(self) -> None:
        topics = build_trending_topics([("a", 3), ("b", 2), ("c", 1)], top_n=2, now=NOW)
        assert [t.topic_text for t in topics] == ["a", "b"]

    def test_empty(self) -> None:
        assert build_trending_topics([], top_n=10, now=NOW) == []


class TestBuildOnboardingInterests:
    def test_ranks_start_at_one(self) -> None:
        interests = build_onboarding_interests([("a", 3), ("b", 2), ("c", 1)], top_m=2)
        assert [(i.interest_text, i.rank) for i in interests] == [("a", 1), ("b", 2)]


def _topics(session):
    session.expire_all()
    rows = session.scalars(select(TrendingTopic).order_by(TrendingTopic.buzz_score.desc(), TrendingTopic.topic_text))
    return {row.topic_text: (row.buzz_score, row.source_count) for row in rows}


def _interests(session):
    session.expire_all()
    rows = session.scalars(select(OnboardingSuggestedInterest).order_by(OnboardingSuggestedInterest.rank))
    return [row.interest_text for row in rows]


class TestCalculateTrends:
    def test_aggregates_recent_tags(self, session, make_processed_article, seed_trend_config) -> None:
        seed_trend_config(synonyms={"llm": "large language models"}, generic_terms=["ai"])
        make_processed_article(tags=["LLM", "AI", "Robotics"], created_at=NOW - timedelta(hours=1))
        make_processed_article(tags=["Large Language Models", "AI"], created_at=NOW - timedelta(hours=2))
        make_processed_article(tags=["large language models", "Agents"], created_at=NOW - timedelta(hours=3))

        result = calculate_trends(session, now=NOW)

        assert result.articles_considered == 3
        assert _topics(session) == {
            "large language models": (1.0, 3),
            "agents": (0.47, 1),
            "robotics": (0.47, 1),
        }
        assert _interests(session) == ["large language models", "agents", "robotics"]

    def test_ignores_articles_outside_lookback(self, session, make_processed_article) -> None:
        make_processed_article(tags=["Agents"], created_at=NOW - timedelta(hours=1))
        make_processed_article(tags=["Robotics"], created_at=NOW - timedelta(hours=72))

        result = calculate_trends(session, lookback_hours=48, now=NOW)

        assert result.articles_considered == 1
        assert set(_topics(session)) == {"agents"}

    def test_disabled_synonyms_are_ignored(self, session, make_processed_article, seed_trend_config) -> None:
        seed_trend_config(disabled_synonyms={"llm": "large language models"})
        make_processed_article(tags=["LLM"])

        calculate_trends(session, now=NOW)

        assert set(_topics(session)) == {"llm"}

    def test_no_recent_articles_leaves_tables_untouched(self, session) -> None:
        session.add(TrendingTopic(topic_text="agents", buzz_score=0.8, source_count=4, last_updated_at=NOW))
        session.add(OnboardingSuggestedInterest(interest_text="agents", rank=1, last_updated=NOW))
        session.commit()

        result = calculate_trends(session, now=NOW)

        assert result.trending_topics == []
        assert _topics(session) == {"agents": (0.8, 4)}
        assert _interests(session) == ["agents"]

    def test_only_generic_tags_leaves_tables_untouched(
        self, session, make_processed_article, seed_trend_config
    ) -> None:
        seed_trend_config(generic_terms=["ai"])
        session.add(TrendingTopic(topic_text="agents", buzz_score=0.8, source_count=4, last_updated_at=NOW))
        session.commit()
        make_processed_article(tags=["AI"])

        result = calculate_trends(session, now=NOW)

        assert result.articles_considered == 1
        assert result.trending_topics == []
        assert _topics(session) == {"agents": (0.8, 4)}

    def test_stale_topics_are_pruned_and_interests_replaced(self, session, make_processed_article) -> None:
        session.add(TrendingTopic(topic_text="old topic", buzz_score=0.9, source_count=9, last_updated_at=NOW))
        session.add(OnboardingSuggestedInterest(interest_text="old topic", rank=1, last_updated=NOW))
        session.commit()
        make_processed_article(tags=["Agents"])

        calculate_trends(session, now=NOW)

        assert set(_topics(session)) == {"agents"}
        assert _interests(session) == ["agents"]

    def test_keep_stale_topics(self, session, make_processed_article) -> None:
        session.add(TrendingTopic(topic_text="old topic", buzz_score=0.9, source_count=9, last_updated_at=NOW))
        session.commit()
        make_processed_article(tags=["Agents"])

        calculate_trends(session, now=NOW, prune_stale_topics=False)

        assert set(_topics(session)) == {"agents", "old topic"}

    def test_existing_topic_is_updated_in_place(self, session, make_processed_article) -> None:
        session.add(TrendingTopic(topic_text="agents", buzz_score=0.3, source_count=1, last_updated_at=NOW))
        session.commit()
        make_processed_article(tags=["Agents"])
        make_processed_article(tags=["Agents"])

        calculate_trends(session, now=NOW)

        assert _topics(session) == {"agents": (1.0, 2)}
        assert session.query(TrendingTopic).count() == 1

    def test_limits(self, session, make_processed_article) -> None:
        make_processed_article(tags=["a", "b", "c"])
        make_processed_article(tags=["a", "b"])
        make_processed_article(tags=["a"])

        result = calculate_trends(session, top_trending=2, top_onboarding=1, now=NOW)

        assert [t.topic_text for t in result.trending_topics] == ["a", "b"]
        assert _interests(session) == ["a"]
