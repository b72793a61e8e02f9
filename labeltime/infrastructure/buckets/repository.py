"""
Label time bucket repository + label lookup.

Neither repository commits: writes are flushed into the caller's session
so they succeed or roll back together with the event change that caused
them.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from labeltime.domain.time_bucket import VALID_BUCKET_TYPES, BucketKey
from labeltime.infrastructure.db.models import Label, LabelTimeBucket


class LabelNotFoundError(LookupError):
    pass


@dataclass(frozen=True)
class LabelInfo:
    id: int
    name: str


class LabelRepository:
    """Read-only access to labels (label CRUD lives elsewhere)."""

    def __init__(self, db: Session):
        self.db = db

    def get_label(self, label_id: int) -> LabelInfo:
        """
        Raises:
            LabelNotFoundError: if no label has this id
        """
        label = self.db.query(Label).filter(Label.id == label_id).first()
        if label is None:
            raise LabelNotFoundError(f"label {label_id} not found")
        return LabelInfo(id=label.id, name=label.name)


class LabelTimeBucketRepository:
    """
    Repository for label_time_buckets rows.

    Lookups are batched: one query per call no matter how many keys or
    labels are asked for.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_bucket(self, user_id: int, label_id: int, key: BucketKey) -> Optional[LabelTimeBucket]:
        return self.db.query(LabelTimeBucket).filter(
            LabelTimeBucket.user_id == user_id,
            LabelTimeBucket.label_id == label_id,
            LabelTimeBucket.bucket_type == key.bucket_type,
            LabelTimeBucket.bucket_year == key.bucket_year,
            LabelTimeBucket.bucket_value == key.bucket_value,
        ).first()

    def get_or_default_many(
        self,
        user_id: int,
        label_id: int,
        keys: Iterable[BucketKey],
        label_name: str = "",
    ) -> dict[BucketKey, LabelTimeBucket]:
        """
        Load every requested bucket in one query; keys without a row get a
        fresh zero row (not added to the session until save_all).

        Returns:
            {key: row} in the order of *keys*
        """
        keys = list(dict.fromkeys(keys))
        if not keys:
            return {}

        conditions = [
            and_(
                LabelTimeBucket.bucket_type == k.bucket_type,
                LabelTimeBucket.bucket_year == k.bucket_year,
                LabelTimeBucket.bucket_value == k.bucket_value,
            )
            for k in keys
        ]
        rows = self.db.query(LabelTimeBucket).filter(
            LabelTimeBucket.user_id == user_id,
            LabelTimeBucket.label_id == label_id,
            or_(*conditions),
        ).all()
        existing = {
            BucketKey(r.bucket_type, r.bucket_year, r.bucket_value): r
            for r in rows
        }

        result: dict[BucketKey, LabelTimeBucket] = {}
        for key in keys:
            row = existing.get(key)
            if row is None:
                row = LabelTimeBucket(
                    user_id=user_id,
                    label_id=label_id,
                    label_name=label_name,
                    bucket_type=key.bucket_type,
                    bucket_year=key.bucket_year,
                    bucket_value=key.bucket_value,
                    duration_minutes=0,
                )
            result[key] = row
        return result

    def save_all(self, rows: List[LabelTimeBucket]) -> None:
        """Batched upsert: new rows are inserted, loaded rows updated, one flush."""
        self.db.add_all(rows)
        self.db.flush()

    def sum_minutes(
        self,
        user_id: int,
        label_ids: Iterable[int],
        key: Optional[BucketKey] = None,
    ) -> int:
        """
        Sum duration_minutes across *label_ids* at one coordinate.

        With key=None every row of the label set is summed regardless of
        bucket type (all-time total). Labels without a row contribute 0.
        """
        query = self.db.query(
            func.coalesce(func.sum(LabelTimeBucket.duration_minutes), 0)
        ).filter(
            LabelTimeBucket.user_id == user_id,
            LabelTimeBucket.label_id.in_(list(label_ids)),
        )
        if key is not None:
            query = query.filter(
                LabelTimeBucket.bucket_type == key.bucket_type,
                LabelTimeBucket.bucket_year == key.bucket_year,
                LabelTimeBucket.bucket_value == key.bucket_value,
            )
        return int(query.scalar())

    def list_buckets(
        self,
        user_id: int,
        label_id: int,
        bucket_type: Optional[str] = None,
    ) -> List[LabelTimeBucket]:
        """
        Rows of one label, grouped by bucket type, newest period first.

        Raises:
            ValueError: bucket_type is not DAY, WEEK or MONTH
        """
        if bucket_type is not None and bucket_type not in VALID_BUCKET_TYPES:
            raise ValueError(f"unknown bucket type: {bucket_type}")
        query = self.db.query(LabelTimeBucket).filter(
            LabelTimeBucket.user_id == user_id,
            LabelTimeBucket.label_id == label_id,
        )
        if bucket_type is not None:
            query = query.filter(LabelTimeBucket.bucket_type == bucket_type)
        return query.order_by(
            LabelTimeBucket.bucket_type,
            LabelTimeBucket.bucket_year.desc(),
            LabelTimeBucket.bucket_value.desc(),
        ).all()
