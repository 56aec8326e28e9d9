"""
Client side of the remote store, bound to the identity of the caller.

Any failure of a remote call comes out of here as a `TransportError`.
"""

import logging
from typing import Awaitable, Optional, TypeVar

from src.core.exceptions import TransportError
from src.core.models import Challenge, PlayerId, RemoteGameRecord
from src.core.shared_types import GameType
from src.db.repository import GameStore
from src.games.codec import get_codec
from src.games.engine import get_engine

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RemoteGameClient:
    """Remote game operations as seen by one player."""

    def __init__(self, store: GameStore, caller: PlayerId) -> None:
        self.store = store
        self.caller = caller

    async def create_challenge(self, opponent: PlayerId, game_type: GameType) -> None:
        await self._call(
            "create challenge",
            self.store.create_challenge(self.caller, opponent, game_type),
        )

    async def accept_challenge(self, challenger: PlayerId) -> None:
        """Accept and seed the new game with a fresh initial state of the challenged game type."""
        challenge = await self._call(
            "find challenge", self.store.get_challenge(challenger, self.caller)
        )
        if challenge is None:
            raise TransportError(f"No pending challenge from {challenger}.")

        initial = get_engine(challenge.game_type).create_initial()
        initial_state = get_codec(challenge.game_type).serialize(initial)
        await self._call(
            "accept challenge",
            self.store.accept_challenge(self.caller, challenger, initial_state),
        )

    async def pending_challenges(self) -> list[Challenge]:
        return await self._call(
            "list challenges", self.store.pending_challenges(self.caller)
        )

    async def query_state(self, opponent: PlayerId) -> RemoteGameRecord | None:
        return await self._call(
            "fetch game", self.store.query_state(self.caller, opponent)
        )

    async def update_state(self, opponent: PlayerId, new_state: str) -> None:
        await self._call(
            "update game", self.store.update_state(self.caller, opponent, new_state)
        )

    async def set_winner(self, opponent: PlayerId, winner: Optional[PlayerId]) -> None:
        await self._call(
            "set winner", self.store.set_winner(self.caller, opponent, winner)
        )

    async def _call(self, action: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except TransportError:
            raise
        except Exception as err:
            # Anything the store raises is a failed round trip from the player's point of view
            logger.warning(f"Failed to {action} for {self.caller}: {err!r}")
            raise TransportError(f"Failed to {action}: {err}") from err
