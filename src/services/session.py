"""
Session state of one player's game view.

The session is an immutable value. It only changes through `reduce(state, action)`.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from src.core.models import PlayerId, RemoteGameRecord
from src.games.codec import INVALID, get_codec
from src.games.engine import get_engine
from src.games.state import GameState

logger = logging.getLogger(__name__)

CORRUPTED_NOTICE = "The game data could not be read. Showing a new board instead."


@dataclass(frozen=True)
class GameView:
    """What gets rendered: the remote record plus its decoded state."""

    record: RemoteGameRecord
    state: GameState
    # True when the remote payload was unreadable and `state` is a fresh initial state
    degraded: bool = False


@dataclass(frozen=True)
class SessionState:
    caller: PlayerId
    opponent: Optional[PlayerId] = None
    view: Optional[GameView] = None
    notice: Optional[str] = None


# --- ACTIONS ---
@dataclass(frozen=True)
class PeerSelected:
    opponent: PlayerId


@dataclass(frozen=True)
class PeerCleared:
    pass


@dataclass(frozen=True)
class RecordReceived:
    opponent: PlayerId
    record: Optional[RemoteGameRecord]


@dataclass(frozen=True)
class RequestFailed:
    message: str


@dataclass(frozen=True)
class NoticeDismissed:
    pass


Action = Union[PeerSelected, PeerCleared, RecordReceived, RequestFailed, NoticeDismissed]


def reduce(state: SessionState, action: Action) -> SessionState:
    if isinstance(action, PeerSelected):
        if action.opponent == state.opponent:
            return state
        # Nothing from the previous opponent may leak into the new view
        return replace(state, opponent=action.opponent, view=None, notice=None)

    if isinstance(action, PeerCleared):
        return replace(state, opponent=None, view=None)

    if isinstance(action, RecordReceived):
        if action.opponent != state.opponent:
            logger.debug(f"Discarding record for {action.opponent}: not the selected opponent")
            return state
        if action.record is None:
            return replace(state, view=None)
        view = decode_view(action.record)
        notice = state.notice
        if view.degraded and not _already_degraded(state.view, action.record):
            notice = CORRUPTED_NOTICE
        return replace(state, view=view, notice=notice)

    if isinstance(action, RequestFailed):
        return replace(state, notice=action.message)

    if isinstance(action, NoticeDismissed):
        return replace(state, notice=None)

    raise TypeError(f"Unknown session action: {action!r}")


def decode_view(record: RemoteGameRecord) -> GameView:
    """
    Decode the record's state.
    ---

    An unreadable payload is never fatal: it is replaced by a fresh initial state of the same game type.
    """
    decoded = get_codec(record.game_type).deserialize(record.state)
    if decoded is INVALID:
        logger.warning(
            f"Unreadable {record.game_type} state between {record.player1} and {record.player2}"
        )
        return GameView(
            record=record,
            state=get_engine(record.game_type).create_initial(),
            degraded=True,
        )
    return GameView(record=record, state=decoded)


def _already_degraded(view: Optional[GameView], record: RemoteGameRecord) -> bool:
    """Same unreadable payload as before: the player has been told already."""
    return view is not None and view.degraded and view.record.state == record.state
