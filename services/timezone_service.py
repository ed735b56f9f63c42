"""Timezone conversion between local wall-clock slots and UTC instants."""

import logging
from datetime import date, datetime, time
from typing import Optional

import pytz

from services.time_utils import parse_time

logger = logging.getLogger(__name__)


class TimezoneService:
    """Converts local date + HH:MM in a named zone to UTC ISO instants and back."""

    def __init__(self, today: Optional[date] = None):
        """
        Initialize timezone service.

        Args:
            today: Date substituted for slots with no date (defaults to the current day)
        """
        self._today = today

    def resolve_date(self, slot_date: Optional[str]) -> str:
        """Return the slot date, falling back to today when it is missing."""
        if slot_date:
            return slot_date
        fallback = (self._today or date.today()).isoformat()
        logger.warning("Slot has no date; falling back to %s", fallback)
        return fallback

    def to_utc_iso(self, slot_date: Optional[str], start_time: str, timezone: str) -> str:
        """
        Convert a local date and time to a UTC ISO-8601 instant.

        Args:
            slot_date: YYYY-MM-DD in the given zone (today if missing)
            start_time: HH:MM in the given zone
            timezone: IANA zone name, e.g. "America/New_York"

        Returns:
            e.g. "2024-01-10T14:30:00.000Z"

        Raises:
            pytz.UnknownTimeZoneError: for an unrecognised zone name
        """
        tz = pytz.timezone(timezone)
        clock = parse_time(start_time)
        local_date = date.fromisoformat(self.resolve_date(slot_date))
        local_dt = tz.localize(datetime.combine(local_date, time(clock.hours, clock.minutes)))
        utc_dt = local_dt.astimezone(pytz.UTC)
        return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_dt.microsecond // 1000:03d}Z"

    def from_utc_iso(self, instant: str, timezone: str) -> datetime:
        """Convert a UTC ISO-8601 instant to an aware datetime in the given zone."""
        tz = pytz.timezone(timezone)
        parsed = datetime.fromisoformat(instant.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = pytz.UTC.localize(parsed)
        return parsed.astimezone(tz)

    def format_local(self, instant: str, timezone: str) -> str:
        """Human-readable local rendering of a UTC instant."""
        local = self.from_utc_iso(instant, timezone)
        return local.strftime('%A, %B %d, %Y at %I:%M %p %Z')
