"""Entry point into the domain layer: find the rules that belong to a game type."""

from typing import Any, Protocol

from src.core.exceptions import GameStateError
from src.core.shared_types import GameType
from src.games.connect_four import ConnectFourEngine
from src.games.state import GameState
from src.games.tictactoe import TicTacToeEngine


class GameEngine(Protocol):
    """Pure state transitions. Implementations never mutate the state they receive."""

    def create_initial(self) -> GameState:
        """Fresh game: empty board, nobody has moved yet."""
        ...

    def apply_move(self, state: Any, position: int) -> GameState:
        """New state after the move, or the same `state` object if the move is invalid."""
        ...


ENGINES: dict[GameType, GameEngine] = {
    GameType.TICTACTOE: TicTacToeEngine(),
    GameType.CONNECT_FOUR: ConnectFourEngine(),
}


def get_engine(game_type: GameType) -> GameEngine:
    try:
        return ENGINES[game_type]
    except KeyError:
        raise GameStateError(f"No rules available for game type {game_type!r}.")
