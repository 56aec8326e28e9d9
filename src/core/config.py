"""
Configuration for the games core.

Everything can be overridden through environment variables, defaults are fine for local play.
"""

import logging
import os

# Where the shared game records live
DATABASE_URL = os.environ.get("GAMES_DATABASE_URL", "sqlite:///games.db")
DB_ECHO = os.environ.get("GAMES_DB_ECHO", "0").lower() in ("1", "true", "yes")

# Seconds between two fetches of the opponent's game record
POLL_INTERVAL_SECONDS = float(os.environ.get("GAMES_POLL_INTERVAL_SECONDS", "5"))

LOG_LEVEL = os.environ.get("GAMES_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Set up root logging once, at application start."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
