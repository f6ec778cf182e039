# backend/agenda/services/timezones.py
"""
Timestamps are stored as naive business-local wall-clock time.

Aware datetimes coming from clients are converted to the business
timezone at the API boundary; naive ones are taken as already local.
"""

from datetime import datetime

import pytz


def is_valid_timezone(name: str) -> bool:
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return False
    return True


def to_business_local(value: datetime, tz_name: str) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.timezone(tz_name)).replace(tzinfo=None)
