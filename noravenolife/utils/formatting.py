"""
Date and price formatting helpers shared by services and templates
"""

from datetime import datetime, timezone
from typing import Optional, Union


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to naive UTC, the form stored in SQL and memory"""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO 8601 string (a trailing Z is accepted) to naive UTC"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    return to_naive_utc(datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")))


def format_event_time(value: Optional[datetime], with_time: bool = True) -> str:
    """Render e.g. 'Sat, Jun 15 at 9:30 PM'"""
    if value is None:
        return "Invalid date"
    hour = value.hour % 12 or 12
    date_part = f"{value.strftime('%a, %b')} {value.day}"
    if not with_time:
        return f"{date_part}, {value.year}"
    return f"{date_part} at {hour}:{value.strftime('%M %p')}"


def format_distance_to_now(value: datetime, now: Optional[datetime] = None) -> str:
    """Strict relative distance with suffix, e.g. 'in 3 days' or '2 hours ago'"""
    now = now or datetime.utcnow()
    seconds = int((to_naive_utc(value) - now).total_seconds())
    future = seconds >= 0
    seconds = abs(seconds)

    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            amount = seconds // size
            break
    else:
        unit, amount = "second", seconds

    label = f"{amount} {unit}{'' if amount == 1 else 's'}"
    return f"in {label}" if future else f"{label} ago"


def format_price(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    if value == 0:
        return "Free"
    return f"${value:,.2f}"
