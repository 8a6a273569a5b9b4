import pytest

from moviecat import create_app
from moviecat.db import SessionProvider, init_db
from moviecat.records import MovieRecord
from moviecat.services.category_service import CategoryStore
from moviecat.services.movie_service import MovieStore


@pytest.fixture
def provider(tmp_path):
    p = SessionProvider.from_url(f"sqlite:///{tmp_path / 'catalog.db'}")
    init_db(p)
    yield p
    p.dispose()


@pytest.fixture
def categories(provider):
    return CategoryStore(provider)


@pytest.fixture
def movies(provider):
    return MovieStore(provider)


@pytest.fixture
def draft():
    def _draft(title="Heat", personal=7.0, imdb=8.3, link="/films/heat.mp4", last_viewed=None):
        return MovieRecord(
            title=title,
            personal_rating=personal,
            imdb_rating=imdb,
            file_link=link,
            last_viewed=last_viewed,
        )
    return _draft


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "DATABASE_URL": f"sqlite:///{tmp_path / 'api.db'}",
    })
    yield app
    app.extensions["moviecat"]["provider"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()
