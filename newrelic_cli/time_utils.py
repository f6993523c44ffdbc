"""
Time parsing utilities for the New Relic CLI.

Supports human-friendly expressions for ``--since``/``--until`` such as
'now', 'yesterday', '7 days ago' and absolute dates, plus the narrower
parser used on timestamps returned by the deployments API.
"""

import calendar
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional, TypeVar

from .exceptions import TimeValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Records whose timestamp cannot be parsed stay in filtered output.
KEEP_UNPARSEABLE_TIMESTAMPS = True


def _add_months(value: datetime, months: int) -> datetime:
    """Calendar month arithmetic; overflowing days roll into the next month.

    March 31 minus one month is "February 31", which normalizes to early March.
    """
    total = value.year * 12 + (value.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    first = value.replace(year=year, month=month, day=1)
    return first + timedelta(days=value.day - 1)


class TimeParser:
    """Utility class for parsing time expressions."""

    RELATIVE_TIME_PATTERN = re.compile(
        r'^(\d+)\s+(second|minute|hour|day|week|month|year)s?\s+ago$', re.IGNORECASE
    )

    # Absolute formats, tried in order. Zoneless results are UTC.
    TIME_FORMATS = [
        '%Y-%m-%dT%H:%M:%S%z',        # RFC3339
        '%Y-%m-%dT%H:%M:%S.%f%z',     # RFC3339 with fractional seconds
        '%Y-%m-%dT%H:%M:%SZ',
        '%Y-%m-%dT%H:%M:%S',
        '%Y-%m-%d %H:%M:%S',
        '%Y-%m-%d',
        '%m/%d/%Y',
        '%b %d, %Y',
    ]

    _RFC3339_SHAPE = re.compile(r'^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$')
    _FRACTION = re.compile(r'\.(\d+)')

    @classmethod
    def parse_time(cls, time_str: str, base_time: Optional[datetime] = None) -> datetime:
        """Parse a flexible time expression into an aware datetime.

        Strategies, first match wins:
        - 'now', 'today', 'yesterday' (case-insensitive, local time)
        - Relative: '30 seconds ago', '2 hours ago', '7 days ago', '1 month ago'
        - Absolute: RFC3339, 'YYYY-MM-DDTHH:MM:SS[Z]', 'YYYY-MM-DD HH:MM:SS',
          'YYYY-MM-DD', 'MM/DD/YYYY', 'Jan 2, 2006'

        Args:
            time_str: Time string to parse
            base_time: Naive local "now" for keyword and relative calculations

        Returns:
            Parsed timezone-aware datetime

        Raises:
            TimeValidationError: If the string is empty or matches no strategy
        """
        original = (time_str or "").strip()
        if not original:
            raise TimeValidationError("empty time string", time_str or "")

        lower = original.lower()
        now = base_time if base_time is not None else datetime.now()

        if lower == 'now':
            return now.astimezone()
        if lower == 'today':
            return now.replace(hour=0, minute=0, second=0, microsecond=0).astimezone()
        if lower == 'yesterday':
            yesterday = now - timedelta(days=1)
            return yesterday.replace(hour=0, minute=0, second=0, microsecond=0).astimezone()

        match = cls.RELATIVE_TIME_PATTERN.match(lower)
        if match:
            amount = int(match.group(1))
            try:
                return cls._parse_relative_time(now, amount, match.group(2))
            except (ValueError, OverflowError) as e:
                # Offset lands outside the datetime range
                raise TimeValidationError(f"unable to parse time: {original}", original) from e

        # Original casing matters from here on: the 'Z' suffix is case-sensitive
        parsed = cls._parse_absolute(original)
        if parsed is not None:
            return parsed

        raise TimeValidationError(f"unable to parse time: {original}", original)

    @classmethod
    def _parse_relative_time(cls, now: datetime, amount: int, unit: str) -> datetime:
        """Subtract ``amount`` units from ``now``.

        Seconds, minutes and hours are exact durations. Days, weeks, months
        and years are calendar steps on the local wall clock.
        """
        if unit in ('second', 'minute', 'hour'):
            return now.astimezone() - timedelta(**{unit + 's': amount})
        if unit == 'day':
            return (now - timedelta(days=amount)).astimezone()
        if unit == 'week':
            return (now - timedelta(days=7 * amount)).astimezone()
        if unit == 'month':
            return _add_months(now, -amount).astimezone()
        if unit == 'year':
            return _add_months(now, -12 * amount).astimezone()
        raise TimeValidationError(f"unknown time unit: {unit}", unit)

    @classmethod
    def _parse_absolute(cls, value: str) -> Optional[datetime]:
        """Try each fixed format in order; None when none parses."""
        for fmt in cls.TIME_FORMATS:
            candidate = value
            if '%z' in fmt:
                if not cls._RFC3339_SHAPE.match(value):
                    continue
                # strptime only takes microseconds, RFC3339 allows nanoseconds
                candidate = cls._FRACTION.sub(lambda m: '.' + m.group(1)[:6], value)
            try:
                parsed = datetime.strptime(candidate, fmt)
            except ValueError:
                continue
            # Numeric fields must be zero-padded ('2024-1-5' is rejected)
            if '%z' not in fmt and '%b' not in fmt and parsed.strftime(fmt) != candidate:
                continue
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
        return None

    @classmethod
    def parse_deployment_timestamp(cls, value: str) -> datetime:
        """Parse a server-returned timestamp using only the absolute formats.

        Raises:
            TimeValidationError: If the timestamp format is not supported
        """
        parsed = cls._parse_absolute(value)
        if parsed is None:
            raise TimeValidationError(f"unable to parse deployment timestamp: {value}", value)
        return parsed

    @classmethod
    def filter_by_time(
        cls,
        records: Iterable[T],
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        timestamp: Callable[[T], str] = lambda record: record.timestamp,
    ) -> List[T]:
        """Keep records whose timestamp falls within ``[since, until]``.

        Both bounds are inclusive and either may be None. With no bounds at all
        the input passes through without any parsing. Records with an
        unparseable timestamp are kept.
        """
        records = list(records)
        if since is None and until is None:
            return records

        since = cls._aware(since)
        until = cls._aware(until)

        filtered = []
        for record in records:
            try:
                ts = cls.parse_deployment_timestamp(timestamp(record))
            except TimeValidationError:
                if KEEP_UNPARSEABLE_TIMESTAMPS:
                    filtered.append(record)
                continue

            if since is not None and ts < since:
                continue
            if until is not None and ts > until:
                continue
            filtered.append(record)

        logger.debug(
            "Filtered records by time",
            extra={"total": len(records), "kept": len(filtered)}
        )
        return filtered

    @staticmethod
    def _aware(value: Optional[datetime]) -> Optional[datetime]:
        if value is None or value.tzinfo is not None:
            return value
        return value.astimezone()

    @staticmethod
    def to_epoch_seconds(dt: datetime) -> int:
        """Convert a datetime to Unix seconds for NRQL SINCE/UNTIL clauses."""
        if dt.tzinfo is None:
            dt = dt.astimezone()
        return calendar.timegm(dt.utctimetuple())


# Module-level aliases used throughout the package
parse_flexible_time = TimeParser.parse_time
parse_deployment_timestamp = TimeParser.parse_deployment_timestamp
filter_by_time = TimeParser.filter_by_time
