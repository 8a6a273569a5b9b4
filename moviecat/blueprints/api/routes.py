# moviecat/blueprints/api/routes.py
from __future__ import annotations
from typing import Any, Dict, List, Tuple
from flask import Blueprint, current_app, jsonify, request

from moviecat.dates import parse_calendar_date
from moviecat.errors import ValidationError
from moviecat.records import MovieRecord
from moviecat.services.category_service import CategoryStore
from moviecat.services.movie_service import MovieStore
from moviecat.services.query_service import apply_filters, parse_rating, summarize
from moviecat.services.staleness_service import find_stale, stale_cutoff

api_bp = Blueprint("api", __name__)

URL_PREFIXES = ("http://", "https://")

# -----------------------
# Helpers
# -----------------------
def _movies() -> MovieStore:
    return current_app.extensions["moviecat"]["movies"]

def _categories() -> CategoryStore:
    return current_app.extensions["moviecat"]["categories"]

def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def _is_id_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(x, int) and not isinstance(x, bool) for x in value)

def _check_file_link(link: str) -> None:
    if not link:
        raise ValidationError("file_link required")
    lower = link.lower()
    if lower.startswith(URL_PREFIXES):
        return
    allowed = current_app.config.get("ALLOWED_VIDEO_EXTENSIONS", ())
    if allowed and not lower.endswith(tuple(allowed)):
        raise ValidationError(f"Only {', '.join(allowed)} files are allowed")

def _parse_movie_payload(data: Dict[str, Any]) -> Tuple[MovieRecord, List[int]]:
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("title required")

    imdb = parse_rating(data.get("imdb_rating"))
    personal = parse_rating(data.get("personal_rating"))
    if imdb is None or personal is None:
        raise ValidationError("Ratings must be numbers (e.g. 8.5)")

    file_link = str(data.get("file_link") or "").strip()
    _check_file_link(file_link)

    category_ids = data.get("category_ids") or []
    if not _is_id_list(category_ids):
        raise ValidationError("payload 'category_ids' must be a list of int")

    movie = MovieRecord(
        title=title.strip(),
        imdb_rating=imdb,
        personal_rating=personal,
        file_link=file_link,
        last_viewed=data.get("last_viewed"),
    )
    return movie, category_ids

def _date_arg(raw: Any, label: str):
    """None when absent; 400 when present but not a date."""
    if raw is None or not str(raw).strip():
        return None
    day = parse_calendar_date(raw)
    if day is None:
        raise ValidationError(f"'{label}' must be YYYY-MM-DD")
    return day

# -----------------------
# Filme
# -----------------------
@api_bp.get("/movies")
def api_list_movies():
    movies = _movies().list_all()
    visible = apply_filters(movies, request.args.get("q"), request.args.get("min_imdb"))
    return jsonify({
        "ok": True,
        "movies": [m.to_dict() for m in visible],
        "total": len(movies),
        "visible": len(visible),
        "summary": summarize(len(visible), len(movies)),
    })

@api_bp.get("/movies/stale")
def api_stale_movies():
    as_of = _date_arg(request.args.get("as_of"), "as_of")
    stale = find_stale(_movies().list_all(), as_of)
    return jsonify({
        "ok": True,
        "cutoff": stale_cutoff(as_of).isoformat(),
        "movies": [m.to_dict() for m in stale],
    })

@api_bp.get("/movies/<int:movie_id>")
def api_get_movie(movie_id: int):
    return jsonify({"ok": True, "movie": _movies().get(movie_id).to_dict()})

@api_bp.post("/movies")
def api_create_movie():
    movie, category_ids = _parse_movie_payload(_payload())
    created = _movies().create(movie, category_ids)
    return jsonify({"ok": True, "movie": created.to_dict()}), 201

@api_bp.put("/movies/<int:movie_id>")
def api_update_movie(movie_id: int):
    data = _payload()
    movie, category_ids = _parse_movie_payload(data)
    movie.id = movie_id
    updated = _movies().update(movie, category_ids, keep_last_viewed="last_viewed" not in data)
    return jsonify({"ok": True, "movie": updated.to_dict()})

@api_bp.delete("/movies/<int:movie_id>")
def api_delete_movie(movie_id: int):
    _movies().delete(movie_id)
    return jsonify({"ok": True, "changed": True})

@api_bp.post("/movies/<int:movie_id>/viewed")
def api_movie_viewed(movie_id: int):
    day = _date_arg(_payload().get("date"), "date")
    movie = _movies().touch_last_viewed(movie_id, day)
    return jsonify({"ok": True, "movie": movie.to_dict()})

# -----------------------
# Kategorien
# -----------------------
@api_bp.get("/categories")
def api_list_categories():
    return jsonify({"ok": True, "categories": [c.to_dict() for c in _categories().list_all()]})

@api_bp.post("/categories")
def api_create_category():
    name = _payload().get("name")
    if not isinstance(name, str) or not name.strip():
        return jsonify({"ok": False, "error": "name required"}), 400
    c = _categories().create(name)
    return jsonify({"ok": True, "category": c.to_dict()}), 201

@api_bp.patch("/categories/<int:category_id>")
def api_rename_category(category_id: int):
    name = _payload().get("name")
    if not isinstance(name, str) or not name.strip():
        return jsonify({"ok": False, "error": "name required"}), 400
    c = _categories().rename(category_id, name)
    return jsonify({"ok": True, "category": c.to_dict()})

@api_bp.delete("/categories/<int:category_id>")
def api_delete_category(category_id: int):
    _categories().delete(category_id)
    return jsonify({"ok": True, "changed": True})
