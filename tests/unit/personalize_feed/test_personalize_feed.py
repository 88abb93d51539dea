"""Tests for personalize_feed.personalize_feed."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from personalize_feed.models import ContentPreferences, UserProfile, default_profile
from personalize_feed.personalize_feed import (
    SUMMARY_NOT_AVAILABLE,
    get_personalized_feed,
    load_user_profile,
    personalized_score,
    profile_from_row,
    rank_feed,
    select_display_summary,
)
from pulse_store.models import Profile

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
LONG_SUMMARY = "A long enough summary that clearly exceeds fifty characters in total."


def _article(id=1, initial_score=0.5, tags=None, **values):
    article = {
        "id": id,
        "title": f"Article {id}",
        "source_name": "Example AI",
        "publication_date": NOW,
        "original_url": f"https://news.example.com/{id}",
        "tags": tags or [],
        "initial_score": initial_score,
        "summary_executive": "Executive",
        "summary_technical": "Technical",
        "summary_simple": "Simple",
    }
    article.update(values)
    return article


def _profile(user_type=None, interests=None, style="simple"):
    return UserProfile(
        user_id="user-1",
        user_type=user_type,
        ai_interests=interests or [],
        content_preferences=ContentPreferences(summary_style=style),
    )


class TestPersonalizedScore:
    def test_default_profile_keeps_initial_score(self) -> None:
        assert personalized_score(_article(initial_score=0.62), _profile()) == 0.62

    def test_interest_boost_per_matching_tag(self) -> None:
        article = _article(initial_score=0.5, tags=["Robotics", "Agents"])
        profile = _profile(interests=["robotics", "agents", "vision"])

        assert personalized_score(article, profile) == pytest.approx(0.7)

    def test_interest_match_is_exact(self) -> None:
        article = _article(initial_score=0.5, tags=["Robotics Startups"])
        assert personalized_score(article, _profile(interests=["robotics"])) == 0.5

    def test_user_type_bonus_needs_long_matching_summary(self) -> None:
        long_technical = _article(initial_score=0.5, summary_technical=LONG_SUMMARY)
        short_technical = _article(initial_score=0.5)

        assert personalized_score(long_technical, _profile(user_type="technical")) == pytest.approx(0.55)
        assert personalized_score(short_technical, _profile(user_type="technical")) == 0.5
        assert personalized_score(long_technical, _profile(user_type="executive")) == 0.5

    def test_unknown_user_type_gets_no_bonus(self) -> None:
        article = _article(initial_score=0.5, summary_technical=LONG_SUMMARY, summary_executive=LONG_SUMMARY)
        assert personalized_score(article, _profile(user_type="student")) == 0.5

    def test_clamped_to_one(self) -> None:
        article = _article(initial_score=0.95, tags=["a", "b"])
        assert personalized_score(article, _profile(interests=["a", "b"])) == 1.0

    def test_custom_boosts(self) -> None:
        article = _article(initial_score=0.5, tags=["a"], summary_executive=LONG_SUMMARY)
        profile = _profile(user_type="executive", interests=["a"])

        score = personalized_score(article, profile, interest_boost=0.2, user_type_bonus=0.1)

        assert score == pytest.approx(0.8)


class TestSelectDisplaySummary:
    @pytest.mark.parametrize(
        "style,expected",
        [
            ("executive", "Executive"),
            ("technical", "Technical"),
            ("simple", "Simple"),
            ("brief", "Executive"),
            ("detailed", "Technical"),
        ],
    )
    def test_style_mapping(self, style, expected) -> None:
        assert select_display_summary(_article(), style) == expected

    def test_unknown_style_uses_simple(self) -> None:
        assert select_display_summary(_article(), "poetic") == "Simple"

    def test_falls_back_when_preferred_is_blank(self) -> None:
        article = _article(summary_technical="  ", summary_executive=None)
        assert select_display_summary(article, "technical") == "Simple"

    def test_no_summaries(self) -> None:
        article = _article(summary_executive=None, summary_technical="", summary_simple=None)
        assert select_display_summary(article, "simple") == SUMMARY_NOT_AVAILABLE


class TestRankFeed:
    def test_sorted_by_personalized_score(self) -> None:
        articles = [
            _article(id=1, initial_score=0.55),
            _article(id=2, initial_score=0.5, tags=["Robotics"]),
            _article(id=3, initial_score=0.4),
        ]

        feed = rank_feed(articles, _profile(interests=["robotics"]))

        assert [a.id for a in feed] == [2, 1, 3]
        assert feed[0].personalized_score == pytest.approx(0.6)
        assert feed[0].initial_score == 0.5

    def test_ties_keep_input_order(self) -> None:
        articles = [_article(id=i, initial_score=0.5) for i in (3, 1, 2)]
        assert [a.id for a in rank_feed(articles, _profile())] == [3, 1, 2]

    def test_limit(self) -> None:
        articles = [_article(id=i, initial_score=i / 10) for i in range(1, 6)]
        assert [a.id for a in rank_feed(articles, _profile(), feed_limit=2)] == [5, 4]

    def test_display_summary_follows_profile_style(self) -> None:
        [item] = rank_feed([_article()], _profile(style="executive"))
        assert item.display_summary == "Executive"


class TestProfileFromRow:
    def test_reads_preferences(self) -> None:
        row = Profile(
            id="user-1",
            user_type="technical",
            ai_interests=["Agents", "", 3],
            content_preferences={"summary_style": "technical", "show_technical_details": True},
        )

        profile = profile_from_row(row)

        assert profile.user_type == "technical"
        assert profile.ai_interests == ["Agents"]
        assert profile.content_preferences.summary_style == "technical"
        assert profile.content_preferences.show_technical_details is True

    def test_malformed_columns_use_defaults(self) -> None:
        row = Profile(id="user-1", ai_interests="agents", content_preferences=["simple"])

        profile = profile_from_row(row, default_style="executive")

        assert profile.ai_interests == []
        assert profile.content_preferences.summary_style == "executive"


class TestLoadUserProfile:
    def test_missing_profile_uses_default(self, session) -> None:
        assert load_user_profile(session, "nobody") == default_profile("nobody")

    def test_store_error_uses_default(self, session) -> None:
        error = OperationalError("SELECT", {}, Exception("down"))
        with patch("personalize_feed.personalize_feed.load_profile", side_effect=error):
            profile = load_user_profile(session, "user-1", default_style="executive")

        assert profile == default_profile("user-1", "executive")

    def test_loads_only_own_profile(self, session) -> None:
        session.add_all(
            [
                Profile(id="user-1", user_type="executive", ai_interests=["Agents"]),
                Profile(id="user-2", user_type="technical", ai_interests=["Robotics"]),
            ]
        )
        session.commit()

        profile = load_user_profile(session, "user-2")

        assert profile.user_id == "user-2"
        assert profile.ai_interests == ["Robotics"]


class TestGetPersonalizedFeed:
    def test_interest_reorders_recent_articles(self, session, make_processed_article) -> None:
        make_processed_article(title="Generic", initial_score=0.6, publication_date=NOW)
        make_processed_article(
            title="Robots", initial_score=0.55, tags=["Robotics"], publication_date=NOW - timedelta(hours=1)
        )
        session.add(Profile(id="user-1", ai_interests=["robotics"], content_preferences={"summary_style": "executive"}))
        session.commit()

        feed = get_personalized_feed(session, "user-1")

        assert [a.title for a in feed] == ["Robots", "Generic"]
        assert feed[0].display_summary == "Executive summary"

    def test_no_profile_ranks_by_initial_score(self, session, make_processed_article) -> None:
        make_processed_article(title="Low", initial_score=0.3)
        make_processed_article(title="High", initial_score=0.9)

        feed = get_personalized_feed(session, "anonymous")

        assert [a.title for a in feed] == ["High", "Low"]
        assert feed[0].display_summary == "Simple summary"

    def test_candidates_are_most_recent(self, session, make_processed_article) -> None:
        make_processed_article(title="Old but strong", initial_score=0.99, publication_date=NOW - timedelta(days=10))
        make_processed_article(title="Recent", initial_score=0.2, publication_date=NOW)

        feed = get_personalized_feed(session, "anonymous", candidate_limit=1)

        assert [a.title for a in feed] == ["Recent"]

    def test_no_articles(self, session) -> None:
        assert get_personalized_feed(session, "user-1") == []
