import re
import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import phonenumbers
import pytz

from config.settings import SOCIETY_TIMEZONE

logger = logging.getLogger(__name__)

# Use proper timezone for society-local day boundaries
SOCIETY_TZ = pytz.timezone(SOCIETY_TIMEZONE)


def normalize_phone(phone_val: str, default_region: str = "IN") -> Optional[str]:
    """
    Normalize a phone number to E.164 using libphonenumber.
    Returns None when the number is not valid.
    """
    if phone_val is None:
        return None

    raw_phone = str(phone_val).strip()
    cleaned = re.sub(r"[^\d+]", "", raw_phone)
    if not cleaned:
        return None

    try:
        number = phonenumbers.parse(cleaned, None if cleaned.startswith("+") else default_region)
    except phonenumbers.NumberParseException:
        return None

    if not phonenumbers.is_valid_number(number):
        return None
    return phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.E164)


def get_society_now() -> datetime:
    """Current time in the society timezone"""
    return datetime.now(SOCIETY_TZ)


def society_day_bounds(day: Optional[date] = None) -> Tuple[datetime, datetime]:
    """
    Naive UTC [start, end) bounds of a society-local calendar day.
    Timestamps are stored as naive UTC, so the bounds are converted back.
    """
    day = day or get_society_now().date()
    local_start = SOCIETY_TZ.localize(datetime.combine(day, time.min))
    start = local_start.astimezone(pytz.utc).replace(tzinfo=None)
    return start, start + timedelta(days=1)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC; convert aware datetimes on the way in"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(pytz.utc).replace(tzinfo=None)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp for outbound WebSocket frames"""
    return datetime.utcnow().isoformat() + "Z"
