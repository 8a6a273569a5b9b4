# moviecat/services/staleness_service.py
from __future__ import annotations
from datetime import date
from typing import Iterable, List, Optional

from moviecat.dates import parse_calendar_date, years_before
from moviecat.records import MovieRecord
from moviecat.services.query_service import parse_rating

STALE_RATING_BELOW = 6.0
STALE_AFTER_YEARS = 2


def stale_cutoff(as_of: Optional[date] = None) -> date:
    # datetime -> date, sonst scheitert der Vergleich mit last_viewed
    as_of = parse_calendar_date(as_of) or date.today()
    return years_before(as_of, STALE_AFTER_YEARS)


def is_stale(movie: MovieRecord, cutoff: date) -> bool:
    rating = parse_rating(movie.personal_rating)
    if rating is None or rating >= STALE_RATING_BELOW:
        return False
    last = parse_calendar_date(movie.last_viewed)
    cutoff = parse_calendar_date(cutoff)
    # ohne (gültiges) Datum: zu wenig Information, nie "alt"
    return last is not None and cutoff is not None and last < cutoff


def find_stale(movies: Iterable[MovieRecord], as_of: Optional[date] = None) -> List[MovieRecord]:
    """
    Low-rated movies not watched for more than two years.
    Advisory only; nothing is deleted.
    """
    cutoff = stale_cutoff(as_of)
    return [m for m in movies if is_stale(m, cutoff)]
