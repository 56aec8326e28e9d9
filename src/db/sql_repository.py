"""Implementation of GameStore using SQLAlchemy"""

import asyncio
import json
import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import Challenge, PlayerId, RemoteGameRecord
from src.core.shared_types import GameType
from src.db.schema import DBChallenge, DBGameRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def pair_key(player: PlayerId, other: PlayerId) -> str:
    """Same key for (a, b) and (b, a). JSON-encoded, so no identity can fake the boundary between the two."""
    return json.dumps(sorted((player, other)))


class SQLGameStore:
    """
    Data stored using SQL / methods implemented using SQLAlchemy
    ---

    The session is synchronous: every call runs in a worker thread, one at a time.
    """

    def __init__(self, db_session: Session) -> None:
        self.db = db_session
        self._lock = asyncio.Lock()

    # -- GameStore protocol ---
    async def create_challenge(
        self, challenger: PlayerId, opponent: PlayerId, game_type: GameType
    ) -> None:
        await self._run(self._create_challenge, challenger, opponent, game_type)

    async def get_challenge(
        self, challenger: PlayerId, opponent: PlayerId
    ) -> Challenge | None:
        return await self._run(self._get_challenge, challenger, opponent)

    async def pending_challenges(self, opponent: PlayerId) -> list[Challenge]:
        return await self._run(self._pending_challenges, opponent)

    async def accept_challenge(
        self, accepter: PlayerId, challenger: PlayerId, initial_state: str
    ) -> None:
        await self._run(self._accept_challenge, accepter, challenger, initial_state)

    async def query_state(
        self, caller: PlayerId, opponent: PlayerId
    ) -> RemoteGameRecord | None:
        return await self._run(self._query_state, caller, opponent)

    async def update_state(
        self, caller: PlayerId, opponent: PlayerId, new_state: str
    ) -> None:
        await self._run(self._update_state, caller, opponent, new_state)

    async def set_winner(
        self, caller: PlayerId, opponent: PlayerId, winner: Optional[PlayerId]
    ) -> None:
        await self._run(self._set_winner, caller, opponent, winner)

    # -- Internal helpers --
    async def _run(self, fn: Callable[..., T], *args) -> T:
        async with self._lock:
            return await asyncio.to_thread(fn, *args)

    def _create_challenge(
        self, challenger: PlayerId, opponent: PlayerId, game_type: GameType
    ) -> None:
        challenge_db = self._fetch_challenge(challenger, opponent)
        if challenge_db:
            challenge_db.game_type = game_type
        else:
            challenge_db = DBChallenge(
                challenger=challenger, opponent=opponent, game_type=game_type
            )
            self.db.add(challenge_db)
        self.db.commit()
        logger.info(f"Challenge {challenger} -> {opponent} ({game_type}) stored")

    def _get_challenge(
        self, challenger: PlayerId, opponent: PlayerId
    ) -> Challenge | None:
        challenge_db = self._fetch_challenge(challenger, opponent)
        if challenge_db:
            return self._to_challenge(challenge_db)
        return None

    def _pending_challenges(self, opponent: PlayerId) -> list[Challenge]:
        query = (
            select(DBChallenge)
            .where(DBChallenge.opponent == opponent)
            .order_by(DBChallenge.created_at, DBChallenge.id)
        )
        return [self._to_challenge(row) for row in self.db.scalars(query)]

    def _accept_challenge(
        self, accepter: PlayerId, challenger: PlayerId, initial_state: str
    ) -> None:
        challenge_db = self._fetch_challenge(challenger, accepter)
        if not challenge_db:
            raise RepositoryError(f"No pending challenge from {challenger!r} to {accepter!r}.")

        key = pair_key(challenger, accepter)
        record_db = self._fetch_record(key)
        if record_db is None:
            record_db = DBGameRecord(pair_key=key)
            self.db.add(record_db)

        # Accepting always starts over, whatever game the pair played before
        record_db.game_type = challenge_db.game_type
        record_db.state = initial_state
        record_db.current_turn = challenger
        record_db.player1 = challenger
        record_db.player2 = accepter
        record_db.winner = None

        self.db.delete(challenge_db)
        self.db.commit()
        logger.info(f"Challenge {challenger} -> {accepter} accepted")

    def _query_state(
        self, caller: PlayerId, opponent: PlayerId
    ) -> RemoteGameRecord | None:
        record_db = self._fetch_record(pair_key(caller, opponent))
        if record_db:
            return self._to_record(record_db)
        return None

    def _update_state(self, caller: PlayerId, opponent: PlayerId, new_state: str) -> None:
        record_db = self._fetch_record(pair_key(caller, opponent))
        if not record_db:
            raise RepositoryError(f"No game between {caller!r} and {opponent!r}.")
        record_db.state = new_state
        self.db.commit()

    def _set_winner(
        self, caller: PlayerId, opponent: PlayerId, winner: Optional[PlayerId]
    ) -> None:
        record_db = self._fetch_record(pair_key(caller, opponent))
        if not record_db:
            raise RepositoryError(f"No game between {caller!r} and {opponent!r}.")
        record_db.winner = winner
        self.db.commit()

    def _fetch_challenge(
        self, challenger: PlayerId, opponent: PlayerId
    ) -> DBChallenge | None:
        query = select(DBChallenge).where(
            DBChallenge.challenger == challenger, DBChallenge.opponent == opponent
        )
        return self.db.scalar(query)

    def _fetch_record(self, key: str) -> DBGameRecord | None:
        query = select(DBGameRecord).where(DBGameRecord.pair_key == key)
        return self.db.scalar(query)

    def _to_challenge(self, challenge_db: DBChallenge) -> Challenge:
        return Challenge(
            challenger=challenge_db.challenger,
            opponent=challenge_db.opponent,
            game_type=GameType(challenge_db.game_type),
        )

    def _to_record(self, record_db: DBGameRecord) -> RemoteGameRecord:
        """Convert SQLAlchemy model to data transfer model."""
        return RemoteGameRecord(
            game_type=GameType(record_db.game_type),
            state=record_db.state,
            current_turn=record_db.current_turn,
            player1=record_db.player1,
            player2=record_db.player2,
            winner=record_db.winner,
        )
