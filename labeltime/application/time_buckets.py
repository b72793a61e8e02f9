"""
Bucket adjuster: apply / revert tracked intervals against label time buckets.

apply and revert are exact mirrors: both compute the same delta map and
differ only in sign, so revert(apply(x)) restores every touched row.
"""
from __future__ import annotations

import logging
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from labeltime.domain.event_change import TrackedInterval
from labeltime.domain.time_bucket import BucketKey, split_by_day, resolve_bucket_keys
from labeltime.infrastructure.buckets.repository import LabelRepository, LabelTimeBucketRepository

logger = logging.getLogger(__name__)

APPLY = 1
REVERT = -1


def clamp_bucket_minutes(total: int) -> int:
    """
    Policy for a bucket total after a delta is added.

    Negative totals (over-revert) are kept as is; return max(total, 0)
    here to make buckets non-negative.
    """
    return total


def compute_deltas(interval: TrackedInterval, tz: ZoneInfo) -> dict[BucketKey, int]:
    """
    Minutes per bucket for one interval.

    Every day slice is added to its DAY, WEEK and MONTH key; slices that
    share a week or month collapse into a single entry.
    """
    deltas: dict[BucketKey, int] = {}
    for time_slice in split_by_day(interval.start, interval.duration_minutes, tz):
        for key in resolve_bucket_keys(time_slice.local_date):
            deltas[key] = deltas.get(key, 0) + time_slice.minutes
    return deltas


class BucketAdjuster:
    def __init__(
        self,
        db: Session,
        bucket_repo: LabelTimeBucketRepository | None = None,
        label_repo: LabelRepository | None = None,
    ):
        self.db = db
        self.bucket_repo = bucket_repo or LabelTimeBucketRepository(db)
        self.label_repo = label_repo or LabelRepository(db)

    def apply(
        self,
        user_id: int,
        label_id: int,
        deltas: dict[BucketKey, int],
        label_name: str | None = None,
    ) -> int:
        """Add *deltas* to the label's buckets. Returns number of rows saved."""
        return self._adjust(user_id, label_id, deltas, label_name, APPLY)

    def revert(
        self,
        user_id: int,
        label_id: int,
        deltas: dict[BucketKey, int],
        label_name: str | None = None,
    ) -> int:
        """Subtract *deltas* from the label's buckets. Returns number of rows saved."""
        return self._adjust(user_id, label_id, deltas, label_name, REVERT)

    def apply_interval(
        self,
        user_id: int,
        label_id: int,
        interval: TrackedInterval,
        tz: ZoneInfo,
        label_name: str | None = None,
    ) -> int:
        return self.apply(user_id, label_id, compute_deltas(interval, tz), label_name)

    def revert_interval(
        self,
        user_id: int,
        label_id: int,
        interval: TrackedInterval,
        tz: ZoneInfo,
        label_name: str | None = None,
    ) -> int:
        return self.revert(user_id, label_id, compute_deltas(interval, tz), label_name)

    def _adjust(
        self,
        user_id: int,
        label_id: int,
        deltas: dict[BucketKey, int],
        label_name: str | None,
        direction: int,
    ) -> int:
        action = "apply" if direction == APPLY else "revert"
        if not deltas:
            logger.debug("Bucket %s skipped: no minutes for user=%s label=%s", action, user_id, label_id)
            return 0

        if label_name is None:
            label_name = self.label_repo.get_label(label_id).name

        rows = self.bucket_repo.get_or_default_many(user_id, label_id, deltas.keys(), label_name)
        for key, row in rows.items():
            row.duration_minutes = clamp_bucket_minutes(row.duration_minutes + direction * deltas[key])
            row.label_name = label_name

        self.bucket_repo.save_all(list(rows.values()))
        logger.info(
            "Bucket %s: user=%s label=%s rows=%d",
            action, user_id, label_id, len(rows),
        )
        return len(rows)
