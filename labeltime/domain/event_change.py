"""
Event change snapshot consumed by the bucket reconciler.

The event layer builds one EventChange after any create / update / delete
that can affect completion, label or timing of an event. "old_*" fields
describe the event before the change, "new_*" fields after it.
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TrackedInterval:
    """Active time of an event: [start, start + duration_minutes)."""
    start: datetime  # timezone-aware
    duration_minutes: int


@dataclass(frozen=True)
class EventChange:
    owner_id: int
    timezone: str  # owner's IANA zone at the time of the change
    was_completed: bool
    is_completed: bool
    old_label_id: int | None = None
    new_label_id: int | None = None
    old_interval: TrackedInterval | None = None
    new_interval: TrackedInterval | None = None
