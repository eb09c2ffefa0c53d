"""Dashboard statistics over evaluation rows."""

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Any

from evalboard.engine.quota import as_utc

SCORE_BUCKETS = [
    ("0-0.2", 0.2),
    ("0.2-0.4", 0.4),
    ("0.4-0.6", 0.6),
    ("0.6-0.8", 0.8),
    ("0.8-1.0", 1.0),
]


def _avg(total: float, n: int) -> float:
    return total / n if n else 0.0


def score_bucket(score: float) -> str:
    """Upper bound inclusive: 0.2 belongs to "0-0.2"."""
    for label, upper in SCORE_BUCKETS:
        if score <= upper:
            return label
    return SCORE_BUCKETS[-1][0]


def summarize(rows: Iterable[Any], today: date, days: int = 30) -> dict:
    """
    Aggregate rows exposing score, latency_ms, flags, pii_tokens_redacted
    and created_at.

    The daily series covers the `days` UTC dates ending at `today`, oldest
    first, with empty days reported as zeros.
    """
    first_day = today - timedelta(days=days - 1)
    daily = {
        first_day + timedelta(days=i): {"count": 0, "score": 0.0, "latency": 0}
        for i in range(days)
    }
    distribution = {label: 0 for label, _ in SCORE_BUCKETS}

    total = flagged = redacted = latency_sum = 0
    score_sum = 0.0
    for row in rows:
        total += 1
        score_sum += row.score
        latency_sum += row.latency_ms
        redacted += row.pii_tokens_redacted
        if row.flags:
            flagged += 1
        distribution[score_bucket(row.score)] += 1

        bucket = daily.get(_utc_date(row.created_at))
        if bucket is not None:
            bucket["count"] += 1
            bucket["score"] += row.score
            bucket["latency"] += row.latency_ms

    return {
        "total": total,
        "avg_score": _avg(score_sum, total),
        "avg_latency_ms": _avg(latency_sum, total),
        "pii_tokens_redacted": redacted,
        "flagged": flagged,
        "daily": [
            {
                "date": day.isoformat(),
                "count": b["count"],
                "avg_score": _avg(b["score"], b["count"]),
                "avg_latency_ms": _avg(b["latency"], b["count"]),
            }
            for day, b in daily.items()
        ],
        "distribution": [{"range": label, "count": distribution[label]} for label, _ in SCORE_BUCKETS],
    }


def _utc_date(moment: datetime) -> date:
    return as_utc(moment).date()
