"""
Flask Application Factory - Sales Dashboard API

Month-scoped listing, statistics and chart data over a transactions table.
All aggregation runs in SQL; the API is public (no authentication).
"""

import logging
import os

from flask import Flask
from flask_cors import CORS
from flask_migrate import Migrate

from config import Config
from models.database import db

# Initialize Flask-Migrate (will be initialized in create_app)
migrate = Migrate()

logger = logging.getLogger(__name__)


def _configure_logging(level_name):
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)


def _is_production():
    env = (os.environ.get("ENV") or os.environ.get("FLASK_ENV") or os.environ.get("APP_ENV") or "").lower()
    return env in {"prod", "production"}


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    _configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Flask-CORS handles all CORS headers automatically, including on error responses
    CORS(app,
         resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}},
         methods=["GET", "POST", "OPTIONS"],
         allow_headers=["Content-Type", "X-Request-ID"],
         expose_headers=["X-Request-ID"],
         supports_credentials=False,
         send_wildcard=True)  # Send '*' instead of echoing Origin when origins is '*'

    # === API MIDDLEWARE ===
    # Request ID injection for request correlation and debugging
    from api.middleware import setup_request_id_middleware
    setup_request_id_middleware(app)

    # Request usage logging (sampling + watchlist)
    from api.middleware import setup_request_logging_middleware
    setup_request_logging_middleware(app)

    # Standardized error envelope for HTTP errors and unhandled exceptions
    from api.middleware import setup_error_handlers
    setup_error_handlers(app)

    # Initialize SQLAlchemy
    db.init_app(app)

    # Initialize Flask-Migrate for database migrations
    migrate.init_app(app, db)

    with app.app_context():
        # Import models before create_all to ensure tables are created
        from models.transaction import Transaction  # noqa: F401

        allow_create = app.config.get("TESTING") or not _is_production()
        if allow_create:
            db.create_all()
            logger.info("Database initialized (%s)", db.engine.url.render_as_string(hide_password=True))
        else:
            logger.info("Database ready (schema creation disabled in production)")

    # Register routes
    # Analytics routes (PUBLIC - no authentication required)
    from routes.analytics import analytics_bp
    app.register_blueprint(analytics_bp, url_prefix='/api')

    return app


def run_app():
    """Main entry point for local development - starts server with Flask's dev server."""
    app = create_app()

    with app.app_context():
        from models.transaction import Transaction
        from sqlalchemy import func, select

        count = db.session.execute(select(func.count(Transaction.row_id))).scalar()
        logger.info("Transactions loaded: %s", f"{count:,}")
        if not count:
            logger.info("No data yet. Seed with: python cli.py seed  (or GET /api/seed)")

    port = int(os.environ.get("PORT", "5000"))
    app.run(debug=app.config.get("DEBUG", False), host="0.0.0.0", port=port)


if __name__ == "__main__":
    run_app()
