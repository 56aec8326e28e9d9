"""Tic-Tac-Toe rules"""

import logging

from src.core.shared_types import GameStatus, Mark
from src.games.state import TICTACTOE_SIZE, TicTacToeState

logger = logging.getLogger(__name__)

WINNING_LINES: tuple[tuple[int, int, int], ...] = (
    # rows
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # columns
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # diagonals
    (0, 4, 8),
    (2, 4, 6),
)


class TicTacToeEngine:
    """Pure state transitions for Tic-Tac-Toe. X always opens."""

    def create_initial(self) -> TicTacToeState:
        return TicTacToeState(
            board=(None,) * TICTACTOE_SIZE,
            current_player=Mark.X,
        )

    def apply_move(self, state: TicTacToeState, position: int) -> TicTacToeState:
        """
        Place the current player's mark on `position`.
        ----

        Returns the very same `state` object if the move is not allowed:
        * the game has already ended
        * position outside of the board
        * the cell is already taken
        """
        if state.status != GameStatus.PLAYING:
            logger.debug(f"Ignoring move {position}: game already {state.status}")
            return state

        if not 0 <= position < TICTACTOE_SIZE or state.board[position] is not None:
            logger.debug(f"Ignoring move {position}: not an empty cell")
            return state

        board = list(state.board)
        board[position] = state.current_player
        new_board = tuple(board)

        winner = self._winner_through(new_board, position)
        # Win check always comes first: a full board can still be a win
        is_draw = winner is None and all(cell is not None for cell in new_board)

        if winner is not None:
            status = GameStatus.WON
        elif is_draw:
            status = GameStatus.DRAW
        else:
            status = GameStatus.PLAYING

        return TicTacToeState(
            board=new_board,
            current_player=self._other(state.current_player),
            status=status,
            winner=winner,
            move_history=state.move_history + (position,),
        )

    def _winner_through(
        self, board: tuple[Mark | None, ...], position: int
    ) -> Mark | None:
        """Only the lines that pass through the newly placed mark can produce a winner."""
        player = board[position]
        for line in WINNING_LINES:
            if position not in line:
                continue
            if all(board[idx] == player for idx in line):
                return player
        return None

    @staticmethod
    def _other(player: Mark) -> Mark:
        return Mark.O if player == Mark.X else Mark.X
