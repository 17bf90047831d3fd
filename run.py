"""Application entry point.

Starts the Flask development server or is used by gunicorn in production.

Usage:
    Development:  python run.py
    Production:   gunicorn --bind 0.0.0.0:4000 --workers 2 run:app
"""
import structlog

from medi8_relay import create_app
from medi8_relay.config import get_settings

app = create_app()

if __name__ == "__main__":
    settings = get_settings()
    structlog.get_logger(__name__).info("server_listening", port=settings.PORT)
    app.run(host="0.0.0.0", port=settings.PORT, debug=settings.FLASK_DEBUG)
