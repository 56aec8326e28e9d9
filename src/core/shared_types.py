"""
Type definitions used across layers
"""

from enum import StrEnum


class GameType(StrEnum):
    TICTACTOE = "TicTacToe"
    CONNECT_FOUR = "ConnectFour"


class GameStatus(StrEnum):
    PLAYING = "playing"
    WON = "won"
    DRAW = "draw"


# --- Player symbols. The first member of each enum always moves first.


class Mark(StrEnum):
    """Tic-Tac-Toe"""

    X = "X"
    O = "O"  # noqa: E741


class Disc(StrEnum):
    """Connect Four"""

    RED = "Red"
    YELLOW = "Yellow"
