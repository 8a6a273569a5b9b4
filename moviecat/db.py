# moviecat/db.py
from __future__ import annotations
import logging
from pathlib import Path
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from moviecat.errors import PersistenceError
from moviecat.models.base import Base

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------
# Pfad: data/moviecat.db
# --------------------------------------------------------------------
DEFAULT_DB_PATH = Path(__file__).resolve().parents[1] / "data" / "moviecat.db"
DEFAULT_DATABASE_URL = f"sqlite:///{DEFAULT_DB_PATH}"


def make_engine(url: str, echo: bool = False) -> Engine:
    u = make_url(url)
    if u.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, future=True, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if not u.database or u.database == ":memory:":
        # In-Memory-DB existiert nur auf genau einer Verbindung
        return create_engine(url, echo=echo, future=True, connect_args=connect_args, poolclass=StaticPool)

    Path(u.database).resolve().parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, echo=echo, future=True, connect_args=connect_args)


# --------------------------------------------------------------------
# Sessions
# --------------------------------------------------------------------
class SessionProvider:
    """
    Hands out transactional handles (SQLAlchemy sessions) for one engine.

    Stores get one of these injected instead of reaching for a module-level
    engine, so tests and the app can point them at different databases.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._factory = sessionmaker(
            bind=engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "SessionProvider":
        return cls(make_engine(url, echo=echo))

    def acquire(self) -> Session:
        """
        Returns a *new* session.
        Caller is responsible for commit()/rollback()/close().
        """
        return self._factory()

    @contextmanager
    def scope(self) -> Iterator[Session]:
        """
        One transaction:
          with provider.scope() as db:
              ...
        Commits on success, rolls back on any error, always closes.
        SQLAlchemy errors surface as PersistenceError.
        """
        db = self.acquire()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Storage failure, transaction rolled back")
            raise PersistenceError(f"Database operation failed: {e}") from e
        except Exception as e:
            db.rollback()
            logger.warning("Transaction rolled back: %s", e)
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


# --------------------------------------------------------------------
# Init DB / Healthcheck
# --------------------------------------------------------------------
def init_db(provider: SessionProvider) -> None:
    """
    Legt fehlende Tabellen an. Keine Migrationen.
    """
    # Modelle importieren, damit ihre Tabellen bei Base registriert werden
    from moviecat.models import category, movie  # noqa: F401

    Base.metadata.create_all(bind=provider.engine)
    logger.info("Database ready at %s", provider.engine.url.render_as_string(hide_password=True))


def ping(provider: SessionProvider) -> bool:
    try:
        with provider.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning("Database ping failed: %s", e)
        return False
