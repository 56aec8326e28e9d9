"""Request models: what a player can ask the game service to do."""

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import GameType

PlayerId = str


def _require_identity(value: str) -> str:
    identity = value.strip()
    if not identity:
        raise InvalidRequestError("A player identity cannot be empty.")
    return identity


class CreateChallengeRequest(BaseModel):
    opponent: PlayerId
    game_type: GameType

    @field_validator("opponent")
    @classmethod
    def validate_opponent(cls, value: str) -> str:
        return _require_identity(value)


class AcceptChallengeRequest(BaseModel):
    challenger: PlayerId

    @field_validator("challenger")
    @classmethod
    def validate_challenger(cls, value: str) -> str:
        return _require_identity(value)


class MoveRequest(BaseModel):
    """
    Cell index for Tic-Tac-Toe (0-8), column index for Connect Four (0-6).
    ---

    Out of range positions are accepted here: the rules ignore them.
    """

    position: int
