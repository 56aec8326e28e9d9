"""Connect Four rules"""

import logging

from src.core.shared_types import Disc, GameStatus
from src.games.state import (
    CONNECT_FOUR_COLS,
    CONNECT_FOUR_ROWS,
    ConnectFourBoard,
    ConnectFourState,
)

logger = logging.getLogger(__name__)

CONNECT = 4

# (row step, column step): horizontal, vertical and both diagonals.
# Every axis is walked in both directions starting from the last disc.
AXES: tuple[tuple[int, int], ...] = ((0, 1), (1, 0), (1, 1), (1, -1))


class ConnectFourEngine:
    """Pure state transitions for Connect Four. Red always opens."""

    def create_initial(self) -> ConnectFourState:
        empty_row = (None,) * CONNECT_FOUR_COLS
        return ConnectFourState(
            board=(empty_row,) * CONNECT_FOUR_ROWS,
            current_player=Disc.RED,
        )

    def apply_move(self, state: ConnectFourState, position: int) -> ConnectFourState:
        """
        Drop a disc of the current player into column `position`.
        ----

        Returns the very same `state` object if the move is not allowed:
        * the game has already ended
        * column outside of the board
        * column is full (the top row is occupied)
        """
        if state.status != GameStatus.PLAYING:
            logger.debug(f"Ignoring drop in column {position}: game already {state.status}")
            return state

        if not 0 <= position < CONNECT_FOUR_COLS:
            logger.debug(f"Ignoring drop in column {position}: no such column")
            return state

        row = self._landing_row(state.board, position)
        if row is None:
            logger.debug(f"Ignoring drop in column {position}: column is full")
            return state

        board = [list(r) for r in state.board]
        board[row][position] = state.current_player
        new_board = tuple(tuple(r) for r in board)

        winner = self._winner_through(new_board, row, position)
        # Board is full once the top row is full
        is_draw = winner is None and all(cell is not None for cell in new_board[0])

        if winner is not None:
            status = GameStatus.WON
        elif is_draw:
            status = GameStatus.DRAW
        else:
            status = GameStatus.PLAYING

        return ConnectFourState(
            board=new_board,
            current_player=self._other(state.current_player),
            status=status,
            winner=winner,
            move_history=state.move_history + (position,),
        )

    def _landing_row(self, board: ConnectFourBoard, column: int) -> int | None:
        """Lowest empty row in the column, None if the column is full."""
        for row in range(CONNECT_FOUR_ROWS - 1, -1, -1):
            if board[row][column] is None:
                return row
        return None

    def _winner_through(
        self, board: ConnectFourBoard, row: int, column: int
    ) -> Disc | None:
        """
        Count contiguous discs of the same color along each axis through (row, column).
        ---

        NOTE only runs through the last placed disc are considered.
        """
        player = board[row][column]
        if player is None:
            return None

        for d_row, d_col in AXES:
            run = 1
            run += self._count_direction(board, row, column, d_row, d_col, player)
            run += self._count_direction(board, row, column, -d_row, -d_col, player)
            if run >= CONNECT:
                return player
        return None

    def _count_direction(
        self,
        board: ConnectFourBoard,
        row: int,
        column: int,
        d_row: int,
        d_col: int,
        player: Disc,
    ) -> int:
        count = 0
        r, c = row + d_row, column + d_col
        while (
            0 <= r < CONNECT_FOUR_ROWS
            and 0 <= c < CONNECT_FOUR_COLS
            and board[r][c] == player
        ):
            count += 1
            r += d_row
            c += d_col
        return count

    @staticmethod
    def _other(player: Disc) -> Disc:
        return Disc.YELLOW if player == Disc.RED else Disc.RED
