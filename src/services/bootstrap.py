"""Wiring: build a ready-to-use GameService for one player."""

from typing import Optional

from sqlalchemy.orm import Session

from src.core.config import POLL_INTERVAL_SECONDS
from src.core.models import PlayerId
from src.db.database import SessionLocal, init_db
from src.db.repository import GameStore
from src.db.sql_repository import SQLGameStore
from src.services.game_service import GameService
from src.services.notifications import LoggingNotifier, Notifier
from src.services.remote_client import RemoteGameClient
from src.services.sync_scheduler import SyncScheduler


def open_sql_store(db_session: Optional[Session] = None) -> SQLGameStore:
    """Store on the configured database, unless a session is handed in."""
    if db_session is None:
        init_db()
        db_session = SessionLocal()
    return SQLGameStore(db_session)


def create_game_service(
    caller: PlayerId,
    store: GameStore,
    notifier: Optional[Notifier] = None,
    interval: float = POLL_INTERVAL_SECONDS,
) -> GameService:
    notifier = notifier or LoggingNotifier()
    client = RemoteGameClient(store, caller)
    scheduler = SyncScheduler(client, interval=interval)
    return GameService(client, scheduler, notifier)
