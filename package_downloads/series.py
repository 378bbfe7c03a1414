from __future__ import annotations

import datetime
from typing import Dict, Iterable, List, Sequence, TypeVar

from .data import DAILY, MONTHLY, WEEKLY, Period, Sample

T = TypeVar("T")

DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30


def week_start(day: datetime.date) -> datetime.date:
    """Return the Monday on or before ``day``."""
    # weekday() is 0 for Monday and 6 for Sunday
    return day - datetime.timedelta(days=day.weekday())


def bucket_key(day: datetime.date, granularity: str) -> str:
    if granularity == DAILY:
        return day.isoformat()
    if granularity == WEEKLY:
        return week_start(day).isoformat()
    if granularity == MONTHLY:
        return f"{day.year:04d}-{day.month:02d}"
    raise ValueError(f"Unknown granularity: {granularity!r}")


def resample(samples: Iterable[Sample], granularity: str) -> List[Period]:
    """Aggregate daily samples into periods of the requested granularity.

    Daily samples pass through one-to-one. Weekly buckets are keyed by the
    ISO week's Monday and monthly buckets by ``YYYY-MM``; values sharing a key
    are summed. Periods come back sorted by key, which is chronological since
    the keys are zero-padded.
    """
    if granularity == DAILY:
        return [Period(key=sample.date.isoformat(), value=sample.value) for sample in samples]

    buckets: Dict[str, int] = {}
    for sample in samples:
        key = bucket_key(sample.date, granularity)
        buckets[key] = buckets.get(key, 0) + sample.value
    return [Period(key=key, value=buckets[key]) for key in sorted(buckets)]


def window(series: Sequence[T], count: int) -> List[T]:
    """Keep the most recent ``count`` entries of ``series``."""
    if count <= 0:
        return []
    return list(series[-count:])


def lookback_start(today: datetime.date, granularity: str, num_points: int) -> datetime.date:
    """First day to request so that ``num_points`` periods can be filled."""
    if granularity == DAILY:
        days = num_points
    elif granularity == WEEKLY:
        days = num_points * DAYS_PER_WEEK
    elif granularity == MONTHLY:
        days = num_points * DAYS_PER_MONTH
    else:
        raise ValueError(f"Unknown granularity: {granularity!r}")
    return today - datetime.timedelta(days=max(days, 0))
