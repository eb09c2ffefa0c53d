"""Unit tests for dashboard statistics."""

from datetime import date, datetime, timezone
from types import SimpleNamespace

from evalboard.engine.stats import score_bucket, summarize


def _row(score, latency_ms, created_at, flags=(), pii=0):
    return SimpleNamespace(
        score=score,
        latency_ms=latency_ms,
        flags=list(flags),
        pii_tokens_redacted=pii,
        created_at=created_at,
    )


def test_empty_rows():
    """No rows gives zeros and a zero-filled daily series."""
    stats = summarize([], date(2026, 3, 14), days=7)
    assert stats["total"] == 0
    assert stats["avg_score"] == 0.0
    assert len(stats["daily"]) == 7
    assert stats["daily"][0]["date"] == "2026-03-08"
    assert stats["daily"][-1]["date"] == "2026-03-14"
    assert all(d["count"] == 0 for d in stats["daily"])


def test_totals_and_averages():
    rows = [
        _row(0.9, 100, datetime(2026, 3, 14, 9, tzinfo=timezone.utc), flags=["bias_detected"], pii=2),
        _row(0.5, 300, datetime(2026, 3, 14, 10, tzinfo=timezone.utc)),
        _row(0.1, 200, datetime(2026, 3, 13, 23, 59, tzinfo=timezone.utc), pii=1),
    ]
    stats = summarize(rows, date(2026, 3, 14), days=7)
    assert stats["total"] == 3
    assert abs(stats["avg_score"] - 0.5) < 1e-9
    assert stats["avg_latency_ms"] == 200
    assert stats["pii_tokens_redacted"] == 3
    assert stats["flagged"] == 1

    today, yesterday = stats["daily"][-1], stats["daily"][-2]
    assert today["count"] == 2
    assert abs(today["avg_score"] - 0.7) < 1e-9
    assert today["avg_latency_ms"] == 200
    assert yesterday["count"] == 1


def test_rows_outside_window_only_in_totals():
    rows = [_row(0.8, 50, datetime(2025, 1, 1, tzinfo=timezone.utc))]
    stats = summarize(rows, date(2026, 3, 14), days=30)
    assert stats["total"] == 1
    assert sum(d["count"] for d in stats["daily"]) == 0


def test_score_buckets_upper_inclusive():
    assert score_bucket(0.0) == "0-0.2"
    assert score_bucket(0.2) == "0-0.2"
    assert score_bucket(0.21) == "0.2-0.4"
    assert score_bucket(0.8) == "0.6-0.8"
    assert score_bucket(1.0) == "0.8-1.0"


def test_distribution_counts():
    now = datetime(2026, 3, 14, tzinfo=timezone.utc)
    rows = [_row(s, 10, now) for s in (0.05, 0.3, 0.3, 0.95)]
    dist = {b["range"]: b["count"] for b in summarize(rows, now.date())["distribution"]}
    assert dist == {"0-0.2": 1, "0.2-0.4": 2, "0.4-0.6": 0, "0.6-0.8": 0, "0.8-1.0": 1}
