"""Week keys and short ids for goal documents."""

from __future__ import annotations

import random
import re
import string
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from goaltally.config import settings

_BASE36 = string.digits + string.ascii_lowercase
_WEEK_KEY = re.compile(r"\d{4}-\d{2}-\d{2}")


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def week_start(day: date) -> date:
    """Monday of the week containing `day` (Sunday belongs to the previous week)."""
    return day - timedelta(days=day.weekday())


def current_week_key(today: date | None = None, tz_name: str | None = None) -> str:
    """ISO date of the Monday of the current week, e.g. "2024-03-18"."""
    if today is None:
        today = datetime.now(ZoneInfo(tz_name or settings.default_tz)).date()
    return week_start(today).isoformat()


def is_week_key(value: str) -> bool:
    """True for a real calendar date written as YYYY-MM-DD."""
    if not _WEEK_KEY.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def generate_id(now: datetime | None = None, rng: random.Random | None = None) -> str:
    """Short sortable id: base36 millisecond timestamp plus 3 random chars.

    Format "timestamp-random", e.g. "lrz5hj4-k7m".
    """
    now = now or datetime.now(timezone.utc)
    rng = rng or random
    millis = int(now.timestamp() * 1000)
    suffix = "".join(rng.choice(_BASE36) for _ in range(3))
    return f"{_to_base36(millis)}-{suffix}"
