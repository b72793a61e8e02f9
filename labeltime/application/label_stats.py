"""
Label stats read service: today / this week / last week / this month /
last month / all-time minutes for a set of labels.

"now" is always passed in, already converted to the owner's timezone;
nothing here reads the system clock.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable

from sqlalchemy.orm import Session

from labeltime.domain.time_bucket import (
    BUCKET_MONTH, BucketKey, day_key, week_key, month_key, previous_month_key,
)
from labeltime.domain.time_stats import LabelMonthStats, TimeStats
from labeltime.infrastructure.buckets.repository import LabelRepository, LabelTimeBucketRepository

logger = logging.getLogger(__name__)


class LabelStatsService:
    def __init__(
        self,
        db: Session,
        bucket_repo: LabelTimeBucketRepository | None = None,
        label_repo: LabelRepository | None = None,
    ):
        self.db = db
        self.bucket_repo = bucket_repo or LabelTimeBucketRepository(db)
        self.label_repo = label_repo or LabelRepository(db)

    def compute_stats(self, label_ids: Iterable[int], user_id: int, now: datetime) -> TimeStats:
        """
        Sum tracked minutes of *label_ids* per time window.

        Weeks are ISO weeks, so "this week" and "last week" can carry
        different bucket years in early January. Overlapping label sets
        are not deduplicated.

        all_time sums every bucket row of the labels, whatever its type.
        """
        label_ids = sorted(set(label_ids))
        if not label_ids:
            return TimeStats()

        today = now.date()
        coordinates = {
            "today": day_key(today),
            "this_week": week_key(today),
            "last_week": week_key(today - timedelta(days=7)),
            "this_month": month_key(today),
            "last_month": previous_month_key(today),
        }
        totals = {
            window: self.bucket_repo.sum_minutes(user_id, label_ids, key)
            for window, key in coordinates.items()
        }
        totals["all_time"] = self.bucket_repo.sum_minutes(user_id, label_ids)

        stats = TimeStats(**totals)
        logger.info(
            "Label stats: user=%s labels=%d today=%d this_week=%d all_time=%d",
            user_id, len(label_ids), stats.today, stats.this_week, stats.all_time,
        )
        return stats

    def compute_stats_for_label(self, label_id: int, user_id: int, now: datetime) -> TimeStats:
        return self.compute_stats([label_id], user_id, now)

    def get_month_stats(self, user_id: int, label_id: int, year: int, month: int) -> LabelMonthStats:
        """
        Minutes in one calendar month for one label (0 if nothing tracked).

        Raises:
            ValueError: month outside 1..12
            LabelNotFoundError: no label with this id
        """
        if not 1 <= month <= 12:
            raise ValueError(f"month must be 1..12, got {month}")
        label = self.label_repo.get_label(label_id)
        key = BucketKey(BUCKET_MONTH, year, month)
        bucket = self.bucket_repo.find_bucket(user_id, label_id, key)
        return LabelMonthStats(
            label_id=label_id,
            label_name=label.name,
            year=year,
            month=month,
            total_minutes=bucket.duration_minutes if bucket else 0,
        )
