"""
Immutable game state values.

Every move produces a new value, nothing in here is mutated after creation.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from src.core.shared_types import Disc, GameStatus, GameType, Mark

# Tic-Tac-Toe is a flat 3x3 grid, index = row * 3 + col
TICTACTOE_SIZE = 9

# Connect Four is 6 rows by 7 columns. Row 0 is the TOP row, discs fall towards the last row.
CONNECT_FOUR_ROWS = 6
CONNECT_FOUR_COLS = 7

TicTacToeBoard = tuple[Optional[Mark], ...]
ConnectFourBoard = tuple[tuple[Optional[Disc], ...], ...]


@dataclass(frozen=True)
class TicTacToeState:
    game_type: ClassVar[GameType] = GameType.TICTACTOE

    board: TicTacToeBoard
    current_player: Mark
    status: GameStatus = GameStatus.PLAYING
    winner: Optional[Mark] = None
    move_history: tuple[int, ...] = ()

    def occupied_count(self) -> int:
        return sum(cell is not None for cell in self.board)


@dataclass(frozen=True)
class ConnectFourState:
    game_type: ClassVar[GameType] = GameType.CONNECT_FOUR

    board: ConnectFourBoard
    current_player: Disc
    status: GameStatus = GameStatus.PLAYING
    winner: Optional[Disc] = None
    move_history: tuple[int, ...] = ()

    def occupied_count(self) -> int:
        return sum(cell is not None for row in self.board for cell in row)


GameState = TicTacToeState | ConnectFourState
