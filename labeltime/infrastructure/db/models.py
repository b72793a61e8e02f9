"""
SQLAlchemy ORM models (collaborator tables + label time buckets)
"""
from sqlalchemy import String, DateTime, Integer, TIMESTAMP, ForeignKey, func, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from labeltime.infrastructure.db.session import Base


class User(Base):
    """
    User (owned by the accounts module; read here for the timezone)
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    # IANA zone, e.g. "Europe/Moscow"; None falls back to settings.TIMEZONE
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class Label(Base):
    """
    Label (owned by label CRUD; only id and name are read here)
    """
    __tablename__ = "labels"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class LabelTimeBucket(Base):
    """
    Read model: tracked minutes per (user, label, granularity, period).

    bucket_type / bucket_year / bucket_value:
      DAY   -> calendar year, YYYYMMDD
      WEEK  -> ISO week-year, ISO week 1..53
      MONTH -> calendar year, month 1..12

    duration_minutes is signed: an over-revert can drive it below zero.
    label_name is a denormalized copy for listing without a join; never
    used for lookup.
    """
    __tablename__ = "label_time_buckets"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    label_id: Mapped[int] = mapped_column(Integer, nullable=False)
    label_name: Mapped[str] = mapped_column(String(255), nullable=False, server_default="")
    bucket_type: Mapped[str] = mapped_column(String(10), nullable=False)  # DAY, WEEK, MONTH
    bucket_year: Mapped[int] = mapped_column(Integer, nullable=False)
    bucket_value: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    updated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id", "label_id", "bucket_type", "bucket_year", "bucket_value",
            name="uq_label_time_bucket_period",
        ),
        Index("ix_label_time_buckets_user_label", "user_id", "label_id"),
    )
