"""Protocol for the remote store that holds challenges and shared game records."""

from typing import Optional, Protocol

from src.core.models import Challenge, PlayerId, RemoteGameRecord
from src.core.shared_types import GameType


class GameStore(Protocol):
    """
    Passive keyed slot for the game between two players.
    ---

    The store does not know any game rules: it never checks whose turn it is or whether a move is legal.
    Every call is a network round trip, hence async.
    """

    async def create_challenge(
        self, challenger: PlayerId, opponent: PlayerId, game_type: GameType
    ) -> None:
        """Open (or replace) a pending challenge from `challenger` to `opponent`."""
        ...

    async def get_challenge(
        self, challenger: PlayerId, opponent: PlayerId
    ) -> Challenge | None:
        """Pending challenge between the two players, if any."""
        ...

    async def pending_challenges(self, opponent: PlayerId) -> list[Challenge]:
        """All challenges waiting for `opponent` to accept."""
        ...

    async def accept_challenge(
        self, accepter: PlayerId, challenger: PlayerId, initial_state: str
    ) -> None:
        """Turn the pending challenge into an active game record seeded with `initial_state`."""
        ...

    async def query_state(
        self, caller: PlayerId, opponent: PlayerId
    ) -> RemoteGameRecord | None:
        """Game record shared by the two players, if any."""
        ...

    async def update_state(
        self, caller: PlayerId, opponent: PlayerId, new_state: str
    ) -> None:
        """Overwrite the serialized state. Unconditional: last writer wins."""
        ...

    async def set_winner(
        self, caller: PlayerId, opponent: PlayerId, winner: Optional[PlayerId]
    ) -> None:
        """Record the identity of the winner. None clears it, for a game that starts over."""
        ...
