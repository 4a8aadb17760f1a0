from datetime import date, datetime
from typing import Union

from app.core.exceptions import ValidationError


def to_day(value: Union[str, date, datetime]) -> date:
    """Truncate a date, datetime or ISO string to a calendar day.

    Aware datetimes are converted to the server's local timezone first, so the
    day boundary is whatever the local clock says it is. Naive datetimes keep
    their own date.
    """
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValueError("Date must not be empty")
        try:
            return date.fromisoformat(raw)
        except ValueError:
            pass
        try:
            value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"Invalid date: {raw!r}")

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value

    raise ValueError(f"Invalid date: {value!r}")


def parse_day(value: str, field: str = "date") -> date:
    """to_day for query and path parameters, failures become a 400."""
    try:
        return to_day(value)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value!r}")
