# moviecat/models/category.py
from __future__ import annotations
from sqlalchemy import Table, Column, Integer, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from moviecat.models.base import Base

# Join-Tabelle: viele-zu-vielen zwischen Movie und Category.
# Kein ON DELETE CASCADE: die Stores räumen Relationen selbst auf.
categ_movie = Table(
    "categ_movie",
    Base.metadata,
    Column("movie_id",    ForeignKey("movie.id"),    primary_key=True),
    Column("category_id", ForeignKey("category.id"), primary_key=True),
)


class Category(Base):
    __tablename__ = "category"

    id:   Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(96))

    def __repr__(self) -> str:
        return f"<Category {self.id}:{self.name}>"
