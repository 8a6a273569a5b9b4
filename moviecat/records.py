# moviecat/records.py
# Plain records handed to callers (no session attached)
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union


@dataclass(slots=True)
class CategoryRecord:
    id: Optional[int]
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(slots=True)
class MovieRecord:
    title: str
    personal_rating: float = 0.0
    imdb_rating: float = 0.0
    file_link: str = ""
    # Loaded records always carry a date or None; drafts may pass raw text.
    last_viewed: Union[date, str, None] = None
    categories: List[CategoryRecord] = field(default_factory=list)
    id: Optional[int] = None

    @property
    def categories_as_string(self) -> str:
        return ", ".join(c.name for c in self.categories)

    @property
    def category_ids(self) -> List[int]:
        return [c.id for c in self.categories if c.id is not None]

    def to_dict(self) -> Dict[str, Any]:
        last = self.last_viewed.isoformat() if isinstance(self.last_viewed, date) else self.last_viewed
        return {
            "id": self.id,
            "title": self.title,
            "personal_rating": self.personal_rating,
            "imdb_rating": self.imdb_rating,
            "file_link": self.file_link,
            "last_viewed": last,
            "categories": [c.to_dict() for c in self.categories],
            "categories_as_string": self.categories_as_string,
        }
