# moviecat/services/movie_service.py
from __future__ import annotations
import logging
import math
from datetime import date
from typing import Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from moviecat.db import SessionProvider
from moviecat.errors import NotFoundError, PersistenceError, ValidationError
from moviecat.models.movie import Movie
from moviecat.records import MovieRecord
from moviecat.services.category_service import to_record as category_record
from moviecat.services.relation_service import link, unlink

logger = logging.getLogger(__name__)

MIN_RATING = 0.0
MAX_RATING = 10.0


def to_record(m: Movie) -> MovieRecord:
    return MovieRecord(
        id=m.id,
        title=m.title,
        personal_rating=m.personal_rating,
        imdb_rating=m.imdb_rating,
        file_link=m.file_link,
        last_viewed=m.last_viewed,
        categories=[category_record(c) for c in m.categories],
    )


def validate_movie(movie: MovieRecord) -> None:
    if not (movie.title or "").strip():
        raise ValidationError("Movie title required")
    for label, value in (("personal_rating", movie.personal_rating), ("imdb_rating", movie.imdb_rating)):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
            raise ValidationError(f"{label} must be a number")
        if not MIN_RATING <= value <= MAX_RATING:
            raise ValidationError(f"{label} must be between {MIN_RATING:g} and {MAX_RATING:g}")


def _apply_fields(row: Movie, movie: MovieRecord, keep_last_viewed: bool = False) -> None:
    row.title = movie.title.strip()
    row.personal_rating = float(movie.personal_rating)
    row.imdb_rating = float(movie.imdb_rating)
    row.file_link = (movie.file_link or "").strip()
    if not keep_last_viewed:
        row.last_viewed = movie.last_viewed


def _load(db: Session, movie_id: int) -> Movie:
    row = db.execute(
        select(Movie)
        .where(Movie.id == movie_id)
        .options(selectinload(Movie.categories))
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if row is None:
        raise NotFoundError("Movie", movie_id)
    return row


class MovieStore:
    """
    CRUD over movies and their category links.

    Every write runs in one transaction: the movie row and its relation rows
    become visible together or not at all.
    """

    def __init__(self, provider: SessionProvider):
        self.provider = provider

    # ===== Lesen =====

    def list_all(self) -> List[MovieRecord]:
        stmt = (
            select(Movie)
            .options(selectinload(Movie.categories))   # Kategorien in einer Query nachladen
            .order_by(Movie.id.asc())
        )
        with self.provider.scope() as db:
            return [to_record(m) for m in db.execute(stmt).scalars().all()]

    def get(self, movie_id: int) -> MovieRecord:
        with self.provider.scope() as db:
            return to_record(_load(db, movie_id))

    # ===== Schreiben =====

    def create(self, movie: MovieRecord, category_ids: Iterable[int] = ()) -> MovieRecord:
        validate_movie(movie)
        with self.provider.scope() as db:
            row = Movie()
            _apply_fields(row, movie)
            db.add(row)
            db.flush()
            if row.id is None:
                raise PersistenceError("Movie created but no generated id was returned")

            link(db, row.id, category_ids)
            db.flush()
            record = to_record(_load(db, row.id))
        logger.info("Movie %s created with %d categories", record.id, len(record.categories))
        return record

    def update(
        self,
        movie: MovieRecord,
        category_ids: Iterable[int] = (),
        keep_last_viewed: bool = False,
    ) -> MovieRecord:
        """
        Overwrites scalar fields and replaces the whole category set.
        With keep_last_viewed the stored last_viewed stays as it is.
        """
        if movie.id is None:
            raise ValidationError("Movie id required for update")
        validate_movie(movie)
        with self.provider.scope() as db:
            row = db.get(Movie, movie.id)
            if row is None:
                raise NotFoundError("Movie", movie.id)
            _apply_fields(row, movie, keep_last_viewed)
            db.flush()

            unlink(db, row.id)
            link(db, row.id, category_ids)
            db.flush()
            record = to_record(_load(db, row.id))
        logger.info("Movie %s updated (%d categories)", record.id, len(record.categories))
        return record

    def delete(self, movie_id: int) -> None:
        with self.provider.scope() as db:
            row = db.get(Movie, movie_id)
            if row is None:
                raise NotFoundError("Movie", movie_id)
            removed = unlink(db, movie_id)
            db.delete(row)
            db.flush()
        logger.info("Movie %s deleted (%d relation rows removed)", movie_id, removed)

    def touch_last_viewed(self, movie_id: int, day: Optional[date] = None) -> MovieRecord:
        day = day or date.today()
        with self.provider.scope() as db:
            row = db.get(Movie, movie_id)
            if row is None:
                raise NotFoundError("Movie", movie_id)
            row.last_viewed = day
            db.flush()
            record = to_record(row)
        logger.info("Movie %s last viewed %s", movie_id, record.last_viewed)
        return record
