from flask import Blueprint, current_app, jsonify

from moviecat.db import ping

meta_bp = Blueprint("meta", __name__, url_prefix="")

@meta_bp.get("/health")
def health():
    provider = current_app.extensions["moviecat"]["provider"]
    if not ping(provider):
        return jsonify({"status": "degraded", "database": "error"}), 503
    return jsonify({"status": "ok", "database": "ok"}), 200
