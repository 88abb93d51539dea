"""Tests for common.datetime module."""

from datetime import datetime, timedelta, timezone

from common.datetime import ensure_utc, utc_now


class TestEnsureUtc:
    def test_naive_gets_utc(self) -> None:
        assert ensure_utc(datetime(2024, 1, 1)).tzinfo == timezone.utc

    def test_aware_is_converted(self) -> None:
        dt = datetime(2024, 1, 1, 7, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert ensure_utc(dt).hour == 12


def test_utc_now_is_aware() -> None:
    assert utc_now().tzinfo == timezone.utc
