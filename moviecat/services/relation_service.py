# moviecat/services/relation_service.py
"""
Movie <-> Category junction rows.

Every function works inside the caller's open session and never commits;
the calling store owns the transaction boundary.
"""
from __future__ import annotations
from typing import Iterable, List, Optional
from sqlalchemy import select, insert, delete, func
from sqlalchemy.orm import Session

from moviecat.errors import NotFoundError, ValidationError
from moviecat.models.category import Category, categ_movie
from moviecat.models.movie import Movie


def _unique_ids(category_ids: Iterable[int]) -> List[int]:
    ids = list(category_ids)
    for c in ids:
        if isinstance(c, bool) or not isinstance(c, int):
            raise ValidationError(f"Category id must be an integer, got {c!r}")
    return list(dict.fromkeys(ids))


def link(db: Session, movie_id: int, category_ids: Iterable[int]) -> int:
    """Inserts one row per category id. Returns the number of rows written."""
    ids = _unique_ids(category_ids or [])
    if not ids:
        return 0

    if db.get(Movie, movie_id) is None:
        raise NotFoundError("Movie", movie_id)

    existing = set(db.scalars(select(Category.id).where(Category.id.in_(ids))).all())
    missing = [c for c in ids if c not in existing]
    if missing:
        raise NotFoundError("Category", missing[0])

    db.execute(
        insert(categ_movie),
        [{"movie_id": movie_id, "category_id": c} for c in ids],
    )
    return len(ids)


def unlink(db: Session, movie_id: int) -> int:
    res = db.execute(delete(categ_movie).where(categ_movie.c.movie_id == movie_id))
    return res.rowcount or 0


def unlink_by_category(db: Session, category_id: int) -> int:
    res = db.execute(delete(categ_movie).where(categ_movie.c.category_id == category_id))
    return res.rowcount or 0


def count_links(db: Session, movie_id: Optional[int] = None, category_id: Optional[int] = None) -> int:
    q = select(func.count()).select_from(categ_movie)
    if movie_id is not None:
        q = q.where(categ_movie.c.movie_id == movie_id)
    if category_id is not None:
        q = q.where(categ_movie.c.category_id == category_id)
    return db.scalar(q) or 0
