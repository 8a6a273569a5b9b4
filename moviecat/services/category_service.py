# moviecat/services/category_service.py
from __future__ import annotations
import logging
from typing import List
from sqlalchemy import select

from moviecat.db import SessionProvider
from moviecat.errors import NotFoundError, ValidationError
from moviecat.models.category import Category
from moviecat.records import CategoryRecord
from moviecat.services.relation_service import unlink_by_category

logger = logging.getLogger(__name__)


def to_record(c: Category) -> CategoryRecord:
    return CategoryRecord(id=c.id, name=c.name)


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name required")
    return name


class CategoryStore:
    """CRUD over categories. Duplicate names are allowed."""

    def __init__(self, provider: SessionProvider):
        self.provider = provider

    def list_all(self) -> List[CategoryRecord]:
        with self.provider.scope() as db:
            rows = db.execute(select(Category).order_by(Category.id.asc())).scalars().all()
            return [to_record(c) for c in rows]

    def create(self, name: str) -> CategoryRecord:
        name = _clean_name(name)
        with self.provider.scope() as db:
            c = Category(name=name)
            db.add(c)
            db.flush()
            record = to_record(c)
        logger.info("Category %s created (%s)", record.id, record.name)
        return record

    def rename(self, category_id: int, new_name: str) -> CategoryRecord:
        new_name = _clean_name(new_name)
        with self.provider.scope() as db:
            c = db.get(Category, category_id)
            if not c:
                raise NotFoundError("Category", category_id)
            c.name = new_name
            record = to_record(c)
        logger.info("Category %s renamed to %s", category_id, new_name)
        return record

    def delete(self, category_id: int) -> None:
        """Removes the category's relation rows, then the category. Movies stay."""
        with self.provider.scope() as db:
            c = db.get(Category, category_id)
            if not c:
                raise NotFoundError("Category", category_id)
            removed = unlink_by_category(db, category_id)
            db.delete(c)
            db.flush()
        logger.info("Category %s deleted (%d relation rows removed)", category_id, removed)
