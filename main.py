"""
Tripline – main application entry point

* Flask app serving the trip planner JSON API under ``/travel``.
* Itinerary state lives in the signed session cookie; nothing is persisted
  server side.
"""

import os
import logging

from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

# --------------------------------------------------------------------------- #
# Environment & logging
# --------------------------------------------------------------------------- #
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config=None):
    """Build the Flask application.

    Args:
        config: Optional mapping applied on top of the defaults (tests use
            this to set ``TESTING`` and a fixed secret key)
    """
    from tripline.api.config import get_stops_per_day
    from tripline.routes.travel import create_travel_blueprint

    # Raises ConfigurationError on a bad TRIPLINE_STOPS_PER_DAY
    stops_per_day = get_stops_per_day()

    app = Flask(__name__)

    flask_secret_key = os.getenv("FLASK_SECRET_KEY") or os.urandom(32).hex()
    if "FLASK_SECRET_KEY" not in os.environ:
        logger.warning("No FLASK_SECRET_KEY found. Generated a temporary key.")
    app.secret_key = flask_secret_key

    app.config.update(
        SESSION_COOKIE_SECURE=False,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        PERMANENT_SESSION_LIFETIME=86400,
    )
    if config:
        app.config.update(config)

    # CORS for local dev / cross‑origin front‑end requests
    CORS(app, origins="*", supports_credentials=True)

    app.register_blueprint(create_travel_blueprint())
    logger.info(f"Travel blueprint registered ({stops_per_day} stop(s) per day by default)")

    @app.route("/debug")
    def debug():
        """Simple JSON health endpoint."""
        return {
            "status": "ok",
            "endpoints": {
                "health": "/travel/health",
                "route": "/travel/api/route",
                "segments": "/travel/api/segments",
            },
        }

    return app


app = create_app()

# --------------------------------------------------------------------------- #
# Local development runner ( `python main.py` )
# --------------------------------------------------------------------------- #
if __name__ == "__main__":
    from tripline.api.config import get_port

    port = get_port()
    logger.info("Starting travel app on http://localhost:%d", port)
    app.run(host="0.0.0.0", port=port, debug=False)

__all__ = ["app", "create_app"]
