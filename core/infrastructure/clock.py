"""
Canonical clock.

Every expiry decision reads "now" from one Clock so that the whole engine
agrees on a single fixed time zone. Expiry dates are date-only; timestamps
are compared after flooring them to their date in that zone.
"""

import logging
from datetime import date, datetime, timedelta, timezone as dt_timezone, tzinfo
from functools import lru_cache
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from core.domain.exceptions import InvalidDateError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_TIME_ZONE = "Asia/Seoul"

# Used when the host has no tz database
_FIXED_OFFSETS = {
    "Asia/Seoul": dt_timezone(timedelta(hours=9), "KST"),
    "UTC": dt_timezone.utc,
}


@lru_cache(maxsize=None)
def load_time_zone(name: str) -> tzinfo:
    """Resolve a zone name, falling back to a fixed offset for known zones."""
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        if name in _FIXED_OFFSETS:
            logger.warning("Time zone %s not found, using fixed offset", name)
            return _FIXED_OFFSETS[name]
        raise


class Clock:
    """
    Source of the current time in the canonical license time zone.

    Args:
        time_zone: Zone name; defaults to settings.LICENSE_TIME_ZONE
        now_func: Callable returning an aware datetime; defaults to
            django.utils.timezone.now. Tests pass a fixed value here.
    """

    def __init__(
        self,
        time_zone: Optional[str] = None,
        now_func: Optional[Callable[[], datetime]] = None,
    ):
        self._time_zone = time_zone
        self._now_func = now_func or timezone.now

    @property
    def tz(self) -> tzinfo:
        return load_time_zone(
            self._time_zone or getattr(settings, "LICENSE_TIME_ZONE", DEFAULT_TIME_ZONE)
        )

    def now(self) -> datetime:
        """Current time in the canonical zone, second granularity."""
        return self.localize(self._now_func()).replace(microsecond=0)

    def today(self) -> date:
        return self.now().date()

    def unix(self) -> int:
        return int(self.now().timestamp())

    def localize(self, value: datetime) -> datetime:
        """Convert to the canonical zone; naive values are taken as already in it."""
        if timezone.is_naive(value):
            return value.replace(tzinfo=self.tz)
        return value.astimezone(self.tz)

    def to_date(self, value: Union[date, datetime]) -> date:
        """Floor a timestamp to its calendar date in the canonical zone."""
        if isinstance(value, datetime):
            return self.localize(value).date()
        return value

    def days_ago(self, days: int) -> datetime:
        return self.now() - timedelta(days=days)

    def parse_date(self, value: Union[str, date, datetime]) -> date:
        """
        Parse user input into an expiry date.

        Accepts YYYY-MM-DD, an RFC3339 timestamp, or a date/datetime object.

        Raises:
            InvalidDateError: If the value cannot be parsed
        """
        if isinstance(value, (date, datetime)):
            return self.to_date(value)
        text = str(value or "").strip()
        try:
            parsed_date = parse_date(text)
            if parsed_date is not None:
                return parsed_date
            parsed = parse_datetime(text)
        except ValueError:
            parsed = None
        if parsed is None:
            raise InvalidDateError(text)
        return self.to_date(parsed)

    @staticmethod
    def format_date(value: date) -> str:
        return value.strftime(DATE_FORMAT)

    def format_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        return self.localize(value).strftime(TIMESTAMP_FORMAT)


# Shared default clock
system_clock = Clock()
