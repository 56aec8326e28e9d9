"""
Serialization of game states into the opaque string stored on the remote record.

Decoding goes through a pydantic schema: nothing fetched from the store is trusted before it is validated.
A payload that does not validate decodes to the `INVALID` sentinel instead of raising.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Annotated, Generic, Literal, Optional, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.core.exceptions import GameStateError
from src.core.shared_types import Disc, GameStatus, GameType, Mark
from src.games.state import (
    CONNECT_FOUR_COLS,
    CONNECT_FOUR_ROWS,
    TICTACTOE_SIZE,
    ConnectFourState,
    GameState,
    TicTacToeState,
)

logger = logging.getLogger(__name__)


class InvalidState(Enum):
    """Result of decoding a payload that is not a usable game state."""

    INVALID = "invalid"


INVALID = InvalidState.INVALID

MoveIndex = Annotated[int, Field(strict=True, ge=0)]


# --- WIRE SCHEMA ---
class _StatePayload(BaseModel, ABC):
    """Fields shared by every game type. Keys on the wire are camelCase. Only the per-game payloads can be built."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    status: GameStatus
    move_history: list[MoveIndex] = Field(alias="moveHistory")

    @abstractmethod
    def occupied_count(self) -> int: ...

    @abstractmethod
    def max_move_index(self) -> int: ...

    @model_validator(mode="after")
    def check_consistency(self) -> Self:
        if (getattr(self, "winner", None) is not None) != (self.status == GameStatus.WON):
            raise ValueError("winner must be set if and only if the game is won")
        if len(self.move_history) != self.occupied_count():
            raise ValueError("move history does not match the number of occupied cells")
        if any(move > self.max_move_index() for move in self.move_history):
            raise ValueError("move history contains a position outside of the board")
        return self


class TicTacToePayload(_StatePayload):
    board: list[Optional[Mark]] = Field(
        min_length=TICTACTOE_SIZE, max_length=TICTACTOE_SIZE
    )
    current_player: Mark = Field(alias="currentPlayer")
    winner: Optional[Mark] = None

    @classmethod
    def from_state(cls, state: TicTacToeState) -> Self:
        return cls(
            board=list(state.board),
            current_player=state.current_player,
            status=state.status,
            winner=state.winner,
            move_history=list(state.move_history),
        )

    def to_state(self) -> TicTacToeState:
        return TicTacToeState(
            board=tuple(self.board),
            current_player=self.current_player,
            status=self.status,
            winner=self.winner,
            move_history=tuple(self.move_history),
        )

    def occupied_count(self) -> int:
        return sum(cell is not None for cell in self.board)

    def max_move_index(self) -> int:
        return TICTACTOE_SIZE - 1


ConnectFourRow = Annotated[
    list[Optional[Disc]],
    Field(min_length=CONNECT_FOUR_COLS, max_length=CONNECT_FOUR_COLS),
]


class ConnectFourPayload(_StatePayload):
    board: list[ConnectFourRow] = Field(
        min_length=CONNECT_FOUR_ROWS, max_length=CONNECT_FOUR_ROWS
    )
    current_player: Disc = Field(alias="currentPlayer")
    winner: Optional[Disc] = None

    @classmethod
    def from_state(cls, state: ConnectFourState) -> Self:
        return cls(
            board=[list(row) for row in state.board],
            current_player=state.current_player,
            status=state.status,
            winner=state.winner,
            move_history=list(state.move_history),
        )

    def to_state(self) -> ConnectFourState:
        return ConnectFourState(
            board=tuple(tuple(row) for row in self.board),
            current_player=self.current_player,
            status=self.status,
            winner=self.winner,
            move_history=tuple(self.move_history),
        )

    def occupied_count(self) -> int:
        return sum(cell is not None for row in self.board for cell in row)

    def max_move_index(self) -> int:
        return CONNECT_FOUR_COLS - 1


# --- CODEC ---
PayloadT = TypeVar("PayloadT", TicTacToePayload, ConnectFourPayload)


class GameStateCodec(Generic[PayloadT]):
    """Turns a game state into the remote `state` string and back."""

    def __init__(self, game_type: GameType, payload_model: type[PayloadT]) -> None:
        self.game_type = game_type
        self.payload_model = payload_model

    def serialize(self, state: GameState) -> str:
        """Deterministic JSON encoding of the full state."""
        if state.game_type != self.game_type:
            raise GameStateError(
                f"Cannot encode a {state.game_type} state with the {self.game_type} codec."
            )
        payload = self.payload_model.from_state(state)  # type: ignore[arg-type]
        return payload.model_dump_json(by_alias=True)

    def deserialize(self, payload: str) -> GameState | Literal[InvalidState.INVALID]:
        """Decode a remote `state` string. Never raises: anything unusable becomes `INVALID`."""
        try:
            parsed = self.payload_model.model_validate_json(payload)
        except (ValueError, TypeError) as err:
            # pydantic's ValidationError is a ValueError
            logger.warning(f"Could not decode {self.game_type} state: {_summary(err)}")
            return INVALID
        return parsed.to_state()


def _summary(err: Exception) -> str:
    if isinstance(err, ValidationError):
        return f"{err.error_count()} validation error(s), first: {err.errors()[0]['msg']}"
    return str(err)


TICTACTOE_CODEC = GameStateCodec(GameType.TICTACTOE, TicTacToePayload)
CONNECT_FOUR_CODEC = GameStateCodec(GameType.CONNECT_FOUR, ConnectFourPayload)

CODECS: dict[GameType, GameStateCodec] = {
    GameType.TICTACTOE: TICTACTOE_CODEC,
    GameType.CONNECT_FOUR: CONNECT_FOUR_CODEC,
}


def get_codec(game_type: GameType) -> GameStateCodec:
    try:
        return CODECS[game_type]
    except KeyError:
        raise GameStateError(f"No codec available for game type {game_type!r}.")
