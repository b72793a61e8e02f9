"""
Clock provider: the single place that reads the system clock.

Services take "now" as an argument; the API edge asks this provider for it
in the user's zone. Tests pass a fixed base clock.
"""
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

from labeltime.config import get_settings


def system_clock() -> datetime:
    return datetime.now(timezone.utc)


class ClockProvider:
    def __init__(self, base_clock: Callable[[], datetime] = system_clock):
        self.base_clock = base_clock

    def now_in_zone(self, zone_name: str) -> datetime:
        return self.base_clock().astimezone(ZoneInfo(zone_name))

    def now_for_user(self, user) -> datetime:
        """Now in the user's configured zone (settings.TIMEZONE if unset)."""
        return self.now_in_zone(user.timezone or get_settings().TIMEZONE)
