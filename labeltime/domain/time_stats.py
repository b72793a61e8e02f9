"""
Time statistics value objects returned to label / badge presentation.
"""
from dataclasses import dataclass, asdict

# Time windows (match the keys of TimeStats.as_dict())
WINDOW_TODAY = "today"
WINDOW_THIS_WEEK = "this_week"
WINDOW_LAST_WEEK = "last_week"
WINDOW_THIS_MONTH = "this_month"
WINDOW_LAST_MONTH = "last_month"
WINDOW_ALL_TIME = "all_time"
TIME_WINDOWS = (
    WINDOW_TODAY,
    WINDOW_THIS_WEEK,
    WINDOW_LAST_WEEK,
    WINDOW_THIS_MONTH,
    WINDOW_LAST_MONTH,
    WINDOW_ALL_TIME,
)


@dataclass(frozen=True)
class TimeStats:
    """Tracked minutes per window for a set of labels."""
    today: int = 0
    this_week: int = 0
    last_week: int = 0
    this_month: int = 0
    last_month: int = 0
    all_time: int = 0

    def get(self, window: str) -> int:
        if window not in TIME_WINDOWS:
            raise ValueError(f"unknown time window: {window}")
        return getattr(self, window)

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class LabelMonthStats:
    label_id: int
    label_name: str
    year: int
    month: int
    total_minutes: int
