"""
Label time stats API endpoints (read-only)
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from labeltime.api.deps import get_db, get_current_user, get_clock
from labeltime.application.clock import ClockProvider
from labeltime.application.label_stats import LabelStatsService
from labeltime.infrastructure.buckets.repository import LabelNotFoundError, LabelTimeBucketRepository
from labeltime.infrastructure.db.models import User


router = APIRouter(prefix="/api/v1/labels", tags=["labels"])


# === Response models ===

class TimeStatsResponse(BaseModel):
    today: int
    this_week: int
    last_week: int
    this_month: int
    last_month: int
    all_time: int


class BucketResponse(BaseModel):
    label_name: str
    bucket_type: str
    bucket_year: int
    bucket_value: int
    duration_minutes: int


class MonthStatsResponse(BaseModel):
    label_id: int
    label_name: str
    year: int
    month: int
    total_minutes: int


# === Endpoints ===

@router.get("/stats", response_model=TimeStatsResponse)
def label_stats(
    label_ids: list[int] = Query(default=[]),
    user: User = Depends(get_current_user),
    clock: ClockProvider = Depends(get_clock),
    db: Session = Depends(get_db),
):
    """Tracked minutes per window for a group of labels"""
    now = clock.now_for_user(user)
    stats = LabelStatsService(db).compute_stats(label_ids, user.id, now)
    return TimeStatsResponse(**stats.as_dict())


@router.get("/{label_id}/months/{year}/{month}", response_model=MonthStatsResponse)
def label_month_stats(
    label_id: int,
    year: int,
    month: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Tracked minutes of one label in one calendar month"""
    try:
        stats = LabelStatsService(db).get_month_stats(user.id, label_id, year, month)
    except LabelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MonthStatsResponse(
        label_id=stats.label_id,
        label_name=stats.label_name,
        year=stats.year,
        month=stats.month,
        total_minutes=stats.total_minutes,
    )


@router.get("/{label_id}/buckets", response_model=list[BucketResponse])
def label_buckets(
    label_id: int,
    bucket_type: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Raw bucket rows of one label (DAY / WEEK / MONTH), newest first"""
    try:
        rows = LabelTimeBucketRepository(db).list_buckets(user.id, label_id, bucket_type)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return [
        BucketResponse(
            label_name=r.label_name,
            bucket_type=r.bucket_type,
            bucket_year=r.bucket_year,
            bucket_value=r.bucket_value,
            duration_minutes=r.duration_minutes,
        )
        for r in rows
    ]
