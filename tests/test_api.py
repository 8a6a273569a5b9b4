from datetime import date

import pytest


def _category(client, name):
    resp = client.post("/api/categories", json={"name": name})
    assert resp.status_code == 201
    return resp.get_json()["category"]["id"]


def _movie(client, title="Heat", category_ids=(), **extra):
    payload = {
        "title": title,
        "imdb_rating": "8,3",
        "personal_rating": 7,
        "file_link": f"/films/{title.lower()}.mp4",
        "category_ids": list(category_ids),
    }
    payload.update(extra)
    return client.post("/api/movies", json=payload)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "database": "ok"}


def test_create_and_list_movies(client):
    action = _category(client, "Action")
    resp = _movie(client, "Heat", [action])
    assert resp.status_code == 201
    movie = resp.get_json()["movie"]
    assert movie["imdb_rating"] == 8.3
    assert movie["categories_as_string"] == "Action"

    body = client.get("/api/movies").get_json()
    assert body["ok"] is True
    assert body["total"] == 1
    assert body["summary"] == "Showing 1 / 1"
    assert [m["title"] for m in body["movies"]] == ["Heat"]


def test_list_applies_query_and_minimum_rating(client):
    action = _category(client, "Action")
    _movie(client, "Heat", [action])
    _movie(client, "Cats", imdb_rating="2.8")

    body = client.get("/api/movies", query_string={"q": "action", "min_imdb": "5"}).get_json()
    assert [m["title"] for m in body["movies"]] == ["Heat"]
    assert body["visible"] == 1
    assert body["total"] == 2

    body = client.get("/api/movies", query_string={"min_imdb": "not a number"}).get_json()
    assert body["visible"] == 2


@pytest.mark.parametrize("extra", [
    {"title": ""},
    {"imdb_rating": "eight"},
    {"personal_rating": 11},
    {"file_link": "/films/heat.avi"},
    {"file_link": ""},
    {"category_ids": ["1"]},
])
def test_create_rejects_bad_payload(client, extra):
    resp = _movie(client, **extra)
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False


def test_urls_are_accepted_as_file_links(client):
    resp = _movie(client, file_link="https://example.org/stream/heat")
    assert resp.status_code == 201


def test_unknown_category_is_404_and_nothing_is_stored(client):
    resp = _movie(client, category_ids=[99])
    assert resp.status_code == 404
    assert client.get("/api/movies").get_json()["total"] == 0


def test_update_replaces_categories_and_keeps_last_viewed(client):
    action = _category(client, "Action")
    crime = _category(client, "Crime")
    movie_id = _movie(client, "Heat", [action], last_viewed="2023-01-02").get_json()["movie"]["id"]

    resp = client.put(f"/api/movies/{movie_id}", json={
        "title": "Heat",
        "imdb_rating": 8.3,
        "personal_rating": "8.5",
        "file_link": "/films/heat.mp4",
        "category_ids": [crime],
    })
    assert resp.status_code == 200
    movie = resp.get_json()["movie"]
    assert [c["name"] for c in movie["categories"]] == ["Crime"]
    assert movie["personal_rating"] == 8.5
    assert movie["last_viewed"] == "2023-01-02"


def test_update_missing_movie_is_404(client):
    resp = client.put("/api/movies/41", json={
        "title": "Ghost", "imdb_rating": 1, "personal_rating": 1, "file_link": "/films/ghost.mp4",
    })
    assert resp.status_code == 404


def test_delete_movie(client):
    movie_id = _movie(client).get_json()["movie"]["id"]
    assert client.delete(f"/api/movies/{movie_id}").status_code == 200
    assert client.get(f"/api/movies/{movie_id}").status_code == 404
    assert client.delete(f"/api/movies/{movie_id}").status_code == 404


def test_mark_viewed(client):
    movie_id = _movie(client).get_json()["movie"]["id"]

    resp = client.post(f"/api/movies/{movie_id}/viewed", json={"date": "2025-05-01"})
    assert resp.get_json()["movie"]["last_viewed"] == "2025-05-01"

    resp = client.post(f"/api/movies/{movie_id}/viewed")
    assert resp.get_json()["movie"]["last_viewed"] == date.today().isoformat()

    resp = client.post(f"/api/movies/{movie_id}/viewed", json={"date": "soon"})
    assert resp.status_code == 400


def test_stale_movies(client):
    _movie(client, "Cats", personal_rating=3, last_viewed="2020-01-01")
    _movie(client, "Heat", personal_rating=9, last_viewed="2020-01-01")
    _movie(client, "Fresh", personal_rating=3, last_viewed="2026-01-01")

    body = client.get("/api/movies/stale", query_string={"as_of": "2026-10-18"}).get_json()
    assert body["cutoff"] == "2024-10-18"
    assert [m["title"] for m in body["movies"]] == ["Cats"]

    assert client.get("/api/movies/stale", query_string={"as_of": "someday"}).status_code == 400


def test_category_lifecycle(client):
    action = _category(client, "Action")
    _category(client, "Action")
    movie_id = _movie(client, "Heat", [action]).get_json()["movie"]["id"]

    resp = client.patch(f"/api/categories/{action}", json={"name": "Thriller"})
    assert resp.get_json()["category"]["name"] == "Thriller"

    names = [c["name"] for c in client.get("/api/categories").get_json()["categories"]]
    assert names == ["Thriller", "Action"]

    assert client.delete(f"/api/categories/{action}").status_code == 200
    assert client.get(f"/api/movies/{movie_id}").get_json()["movie"]["categories"] == []
    assert client.delete(f"/api/categories/{action}").status_code == 404


def test_create_category_requires_name(client):
    assert client.post("/api/categories", json={"name": "  "}).status_code == 400
