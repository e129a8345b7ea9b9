# peluqueria/timefmt.py
"""Time and timestamp helpers.

Appointment times travel as 12-hour display strings with a Spanish day-period
marker ("09:09 a. m.", "03:30 p. m."). The edit form works with 24-hour values
("09:09", "15:30"). Timestamps are stored as naive UTC datetimes.
"""

import re
from datetime import date, datetime, time, timezone
from typing import Optional, Union

AM = "a. m."
PM = "p. m."

_TIME_24 = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")
_TIME_12 = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*([ap])\.?\s*m\.?\s*$", re.IGNORECASE)


def _clean(value: str) -> str:
    # toLocaleTimeString('es-ES') separates the marker with (narrow) no-break spaces
    return value.replace("\u00a0", " ").replace("\u202f", " ")


def parse_time(value: Optional[str]) -> Optional[time]:
    """Parse a 12-hour or 24-hour time string. Returns None when unparseable."""
    if not value or not isinstance(value, str):
        return None
    value = _clean(value)

    match = _TIME_12.match(value)
    if match:
        hour, minute, period = int(match.group(1)), int(match.group(2)), match.group(3).lower()
        if not 1 <= hour <= 12 or minute > 59:
            return None
        if period == "a":
            hour = 0 if hour == 12 else hour
        else:
            hour = 12 if hour == 12 else hour + 12
        return time(hour, minute)

    match = _TIME_24.match(value)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            return None
        return time(hour, minute)

    return None


def to_12h(value: str) -> str:
    """'09:09' -> '09:09 a. m.'; '15:30' -> '03:30 p. m.'. Already 12-hour input is normalized."""
    parsed = parse_time(value)
    if parsed is None:
        raise ValueError(f"Hora inválida: {value!r}")
    period = AM if parsed.hour < 12 else PM
    hour = parsed.hour % 12 or 12
    return f"{hour:02d}:{parsed.minute:02d} {period}"


def to_24h(value: str) -> str:
    """'09:09 a. m.' -> '09:09'; '12:15 a. m.' -> '00:15'. 24-hour input passes through."""
    parsed = parse_time(value)
    if parsed is None:
        raise ValueError(f"Hora inválida: {value!r}")
    return parsed.strftime("%H:%M")


def to_utc(value: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are taken as UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_timestamp(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """Parse an ISO date or datetime (``Z`` suffix allowed) into a naive UTC datetime.

    Returns None for empty or invalid input, and for the zero date that some
    clients send for "not set".
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.year <= 1:
        return None
    return to_utc(parsed)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def date_portion(value) -> Optional[str]:
    """'2025-11-10T16:33:25Z' -> '2025-11-10'."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.date().isoformat()


def format_display_date(value) -> str:
    """dd/mm/yyyy, the es-ES short date. '-' when missing."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return "-"
    return parsed.strftime("%d/%m/%Y")
