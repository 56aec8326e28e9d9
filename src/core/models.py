"""
Boundary layer data model(s).

These objects travel between the store, the remote client and the services.
The `state` of a record is the serialized game state: only the codec in src/games/codec.py reads it.
"""

from dataclasses import dataclass
from typing import Optional

from src.core.shared_types import GameType

# Type alias to make the models easier to read
PlayerId = str


@dataclass(frozen=True)
class Challenge:
    """Pending proposal to play a game. Not a game yet."""

    challenger: PlayerId
    opponent: PlayerId
    game_type: GameType


@dataclass(frozen=True)
class RemoteGameRecord:
    """Remote representation of an active game between two players."""

    game_type: GameType
    state: str
    current_turn: PlayerId
    player1: PlayerId
    player2: PlayerId
    winner: Optional[PlayerId] = None

    def other_player(self, player: PlayerId) -> PlayerId:
        return self.player2 if player == self.player1 else self.player1
