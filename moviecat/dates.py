# moviecat/dates.py
from __future__ import annotations
import logging
import re
import warnings
from datetime import date, datetime
from typing import Optional, Union

from moviecat.errors import DateParseWarning

logger = logging.getLogger(__name__)

# Leading Y-M-D, Monat/Tag auch ohne führende Null ("2024-3-5")
DATE_PREFIX_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)")

DateInput = Union[date, datetime, str, None]


def parse_calendar_date(value: DateInput, *, warn: bool = False) -> Optional[date]:
    """
    Lenient date parsing.
    - date/datetime -> calendar date (time dropped)
    - "YYYY-MM-DD", "YYYY-M-D" or "YYYY-MM-DD HH:MM:SS" -> leading date part
    - None, blank or garbage -> None
    With warn=True a malformed value emits a DateParseWarning.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    if not raw:
        return None

    m = DATE_PREFIX_RE.match(raw)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            pass

    logger.debug("Unparsable date %r treated as absent", value)
    if warn:
        warnings.warn(f"Unparsable date {value!r} stored as NULL", DateParseWarning, stacklevel=2)
    return None


def years_before(day: date, years: int) -> date:
    """Same calendar day `years` earlier; Feb 29 falls back to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)
