# moviecat/models/movie.py
from __future__ import annotations
from datetime import date
from sqlalchemy import Integer, String, Float, Text, Date
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from moviecat.dates import parse_calendar_date
from moviecat.models.base import Base
from moviecat.models.category import categ_movie, Category


class CalendarDate(TypeDecorator):
    """
    DATE column that never fails on bad input.
    Writes: blank/unparsable -> NULL, datetime -> date part.
    Reads: text longer than YYYY-MM-DD keeps only the leading date.
    SQLite has no native DATE, values are kept as ISO text there.
    """
    impl = Date
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(32))
        return dialect.type_descriptor(Date())

    def process_bind_param(self, value, dialect: Dialect):
        day = parse_calendar_date(value, warn=True)
        if day is None:
            return None
        return day.isoformat() if dialect.name == "sqlite" else day

    def process_result_value(self, value, dialect: Dialect):
        return parse_calendar_date(value)


class Movie(Base):
    __tablename__ = "movie"

    id:              Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title:           Mapped[str] = mapped_column(String(255))
    personal_rating: Mapped[float] = mapped_column(Float, default=0.0)
    imdb_rating:     Mapped[float] = mapped_column(Float, default=0.0)
    file_link:       Mapped[str] = mapped_column(Text, default="")
    last_viewed:     Mapped[date | None] = mapped_column(CalendarDate, nullable=True)

    # Relationen werden über relation_service geschrieben, hier nur gelesen
    categories: Mapped[list[Category]] = relationship(
        Category,
        secondary=categ_movie,
        lazy="selectin",
        viewonly=True,
        order_by=Category.id,
    )

    def __repr__(self) -> str:
        return f"<Movie {self.id}:{self.title}>"
