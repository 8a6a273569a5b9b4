from flask import Flask

from moviecat.blueprints.meta.routes import meta_bp
from moviecat.blueprints.api.routes import api_bp


def register_blueprints(app: Flask) -> None:
    app.register_blueprint(meta_bp)                      # /health
    app.register_blueprint(api_bp, url_prefix="/api")
