"""
Calendar slicing and bucket coordinates for label time tracking.

A tracked interval is cut at local midnights of the owner's timezone; every
slice then lands in three buckets at once:

- DAY:   bucket_year = calendar year, bucket_value = YYYYMMDD
- WEEK:  bucket_year = ISO week-year, bucket_value = ISO week (1..53)
- MONTH: bucket_year = calendar year, bucket_value = month (1..12)

The ISO week-year differs from the calendar year around New Year:
2018-12-31 is week 1 of 2019, 2021-01-03 is week 53 of 2020.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

BUCKET_DAY = "DAY"
BUCKET_WEEK = "WEEK"
BUCKET_MONTH = "MONTH"
VALID_BUCKET_TYPES = frozenset({BUCKET_DAY, BUCKET_WEEK, BUCKET_MONTH})

DATE_YEAR_MULTIPLIER = 10000
DATE_MONTH_MULTIPLIER = 100


@dataclass(frozen=True)
class BucketKey:
    bucket_type: str
    bucket_year: int
    bucket_value: int


@dataclass(frozen=True)
class BucketKeys:
    day: BucketKey
    week: BucketKey
    month: BucketKey

    def __iter__(self):
        return iter((self.day, self.week, self.month))


@dataclass(frozen=True)
class TimeSlice:
    local_date: date
    minutes: int


def day_value(d: date) -> int:
    """2025-03-09 -> 20250309"""
    return d.year * DATE_YEAR_MULTIPLIER + d.month * DATE_MONTH_MULTIPLIER + d.day


def day_key(d: date) -> BucketKey:
    return BucketKey(BUCKET_DAY, d.year, day_value(d))


def week_key(d: date) -> BucketKey:
    iso_year, iso_week, _ = d.isocalendar()
    return BucketKey(BUCKET_WEEK, iso_year, iso_week)


def month_key(d: date) -> BucketKey:
    return BucketKey(BUCKET_MONTH, d.year, d.month)


def previous_month_key(d: date) -> BucketKey:
    if d.month == 1:
        return BucketKey(BUCKET_MONTH, d.year - 1, 12)
    return BucketKey(BUCKET_MONTH, d.year, d.month - 1)


def resolve_bucket_keys(local_date: date) -> BucketKeys:
    """Map a local calendar date to its DAY / WEEK / MONTH coordinates."""
    return BucketKeys(
        day=day_key(local_date),
        week=week_key(local_date),
        month=month_key(local_date),
    )


def local_midnight(d: date, tz: ZoneInfo) -> datetime:
    """
    First instant of local day *d*, as an aware UTC datetime.

    If midnight does not exist (DST gap at 00:00) zoneinfo applies the
    pre-transition offset, which lands on the first valid instant of the day.
    """
    return datetime.combine(d, time.min, tzinfo=tz).astimezone(timezone.utc)


def split_by_day(start: datetime, duration_minutes: int, tz: ZoneInfo) -> list[TimeSlice]:
    """
    Split [start, start + duration) into per-local-day minute contributions.

    Boundaries are local midnights in *tz*; lengths are measured on the UTC
    timeline, so a DST day contributes 23 or 25 hours. Minutes come from
    cumulative elapsed time, so the slices always sum to *duration_minutes*
    even when *start* has a sub-minute offset.

    Zero or negative durations produce no slices.
    """
    if start.tzinfo is None:
        raise ValueError("start must be timezone-aware")
    if duration_minutes <= 0:
        return []

    start_utc = start.astimezone(timezone.utc)
    end_utc = start_utc + timedelta(minutes=duration_minutes)

    slices: list[TimeSlice] = []
    cursor = start_utc
    counted = 0
    while cursor < end_utc:
        local_date = cursor.astimezone(tz).date()
        next_midnight = local_midnight(local_date + timedelta(days=1), tz)
        segment_end = min(next_midnight, end_utc)

        elapsed = int((segment_end - start_utc).total_seconds() // 60)
        if segment_end == end_utc:
            elapsed = duration_minutes
        minutes = elapsed - counted
        if minutes > 0:
            slices.append(TimeSlice(local_date=local_date, minutes=minutes))
            counted = elapsed
        cursor = segment_end

    return slices
