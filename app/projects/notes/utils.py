from datetime import timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import dateutil.parser


def parse_utc_instant(value):
    """
    Parse an ISO-8601 instant into a naive UTC datetime.

    The value must carry 'Z' or an explicit offset; offsets are converted to
    UTC. Raises ValueError for anything else, including bare dates and times
    that fall outside the representable range once converted.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("expected an ISO-8601 timestamp")
    try:
        dt = dateutil.parser.isoparse(value.strip())
        if dt.tzinfo is None:
            raise ValueError("timestamp must include 'Z' or a UTC offset")
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    except OverflowError:
        raise ValueError("timestamp is out of range")


def local_to_utc(local_date_time, time_zone):
    """
    Convert a wall-clock time in a named zone ('2025-11-03T09:00:00',
    'America/Los_Angeles') to a naive UTC datetime.
    """
    if not isinstance(local_date_time, str) or not isinstance(time_zone, str):
        raise ValueError("Invalid date time or timezone")
    try:
        zone = ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError("Invalid date time or timezone")
    try:
        local_dt = dateutil.parser.isoparse(local_date_time.strip())
        if local_dt.tzinfo is not None:
            raise ValueError("localDateTime must not carry an offset")
        return local_dt.replace(tzinfo=zone).astimezone(timezone.utc).replace(tzinfo=None)
    except OverflowError:
        raise ValueError("Invalid date time or timezone")


def is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)
