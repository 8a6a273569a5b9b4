from moviecat.models.base import Base

__all__ = ["Base"]
