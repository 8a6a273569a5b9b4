# moviecat/services/query_service.py
# Reine Filterfunktionen über bereits geladene Filme (kein I/O)
from __future__ import annotations
import math
from typing import Iterable, List, Optional, Union

from moviecat.records import MovieRecord

RatingInput = Union[int, float, str, None]


def parse_rating(raw: RatingInput) -> Optional[float]:
    """
    Lenient number parsing; accepts "7,5" as well as "7.5".
    Returns None for None, blanks and garbage.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return None if math.isnan(raw) else float(raw)
    text = str(raw).strip().replace(",", ".")
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return None if math.isnan(value) else value


def _matches(movie: MovieRecord, needle: str) -> bool:
    title = (movie.title or "").lower()
    return needle in title or needle in movie.categories_as_string.lower()


def search(movies: Iterable[MovieRecord], query: Optional[str]) -> List[MovieRecord]:
    """Case-insensitive substring match on title or category names."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(movies)
    return [m for m in movies if _matches(m, needle)]


def filter_by_minimum_rating(movies: Iterable[MovieRecord], threshold: RatingInput) -> List[MovieRecord]:
    minimum = parse_rating(threshold)
    if minimum is None:
        return list(movies)
    kept = []
    for m in movies:
        rating = parse_rating(m.imdb_rating)
        if rating is not None and rating >= minimum:
            kept.append(m)
    return kept


def apply_filters(
    movies: Iterable[MovieRecord],
    query: Optional[str] = None,
    min_rating: RatingInput = None,
) -> List[MovieRecord]:
    """All active filters must match."""
    return filter_by_minimum_rating(search(movies, query), min_rating)


def summarize(visible: int, total: int) -> str:
    return f"Showing {visible} / {total}"
