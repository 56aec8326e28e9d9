"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/mocks required for testing multiple layers.
"""

import asyncio
from typing import Generator, Optional

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.exceptions import RepositoryError
from src.core.models import Challenge, PlayerId, RemoteGameRecord
from src.core.shared_types import GameType
from src.db.schema import Base
from src.db.sql_repository import pair_key

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of the store independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


# --- MOCK DEPENDENCIES ----
class MockStore:
    """Mock the GameStore using dictionaries. Set `failing = True` to make every call fail like a dropped connection."""

    def __init__(self) -> None:
        self.challenges: dict[tuple[PlayerId, PlayerId], Challenge] = {}
        self.records: dict[str, RemoteGameRecord] = {}
        self.calls: list[str] = []
        self.failing = False

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.failing:
            raise ConnectionError(f"{name}: connection reset")

    async def create_challenge(
        self, challenger: PlayerId, opponent: PlayerId, game_type: GameType
    ) -> None:
        self._enter("create_challenge")
        self.challenges[(challenger, opponent)] = Challenge(challenger, opponent, game_type)

    async def get_challenge(
        self, challenger: PlayerId, opponent: PlayerId
    ) -> Challenge | None:
        self._enter("get_challenge")
        return self.challenges.get((challenger, opponent))

    async def pending_challenges(self, opponent: PlayerId) -> list[Challenge]:
        self._enter("pending_challenges")
        return [c for c in self.challenges.values() if c.opponent == opponent]

    async def accept_challenge(
        self, accepter: PlayerId, challenger: PlayerId, initial_state: str
    ) -> None:
        self._enter("accept_challenge")
        challenge = self.challenges.pop((challenger, accepter), None)
        if challenge is None:
            raise RepositoryError("no such challenge")
        self.records[pair_key(challenger, accepter)] = RemoteGameRecord(
            game_type=challenge.game_type,
            state=initial_state,
            current_turn=challenger,
            player1=challenger,
            player2=accepter,
        )

    async def query_state(
        self, caller: PlayerId, opponent: PlayerId
    ) -> RemoteGameRecord | None:
        self._enter("query_state")
        await asyncio.sleep(0)
        return self.records.get(pair_key(caller, opponent))

    async def update_state(
        self, caller: PlayerId, opponent: PlayerId, new_state: str
    ) -> None:
        self._enter("update_state")
        key = pair_key(caller, opponent)
        if key not in self.records:
            raise RepositoryError("no such game")
        old = self.records[key]
        self.records[key] = RemoteGameRecord(
            old.game_type, new_state, old.current_turn, old.player1, old.player2, old.winner
        )

    async def set_winner(
        self, caller: PlayerId, opponent: PlayerId, winner: Optional[PlayerId]
    ) -> None:
        self._enter("set_winner")
        key = pair_key(caller, opponent)
        old = self.records[key]
        self.records[key] = RemoteGameRecord(
            old.game_type, old.state, old.current_turn, old.player1, old.player2, winner
        )


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def mock_store() -> MockStore:
    return MockStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
