"""Unit tests for src/services/session.py"""

import pytest

from src.core.models import RemoteGameRecord
from src.core.shared_types import GameType, Mark
from src.games.codec import TICTACTOE_CODEC
from src.games.tictactoe import TicTacToeEngine
from src.services.session import (
    CORRUPTED_NOTICE,
    NoticeDismissed,
    PeerCleared,
    PeerSelected,
    RecordReceived,
    RequestFailed,
    SessionState,
    decode_view,
    reduce,
)

ALICE = "alice"
BOB = "bob"


def make_record(state: str) -> RemoteGameRecord:
    return RemoteGameRecord(
        game_type=GameType.TICTACTOE,
        state=state,
        current_turn=ALICE,
        player1=ALICE,
        player2=BOB,
    )


@pytest.fixture
def valid_record() -> RemoteGameRecord:
    engine = TicTacToeEngine()
    return make_record(TICTACTOE_CODEC.serialize(engine.apply_move(engine.create_initial(), 4)))


def test_select_peer() -> None:
    session = reduce(SessionState(caller=ALICE), PeerSelected(BOB))
    assert session.opponent == BOB
    assert session.view is None


def test_record_for_selected_peer_is_decoded(valid_record: RemoteGameRecord) -> None:
    session = reduce(SessionState(caller=ALICE), PeerSelected(BOB))
    session = reduce(session, RecordReceived(BOB, valid_record))

    assert session.view is not None
    assert session.view.record == valid_record
    assert session.view.state.board[4] == Mark.X
    assert not session.view.degraded
    assert session.notice is None


def test_record_for_other_peer_is_dropped(valid_record: RemoteGameRecord) -> None:
    session = reduce(SessionState(caller=ALICE), PeerSelected("carol"))
    after = reduce(session, RecordReceived(BOB, valid_record))
    assert after is session


def test_missing_record_clears_view(valid_record: RemoteGameRecord) -> None:
    session = reduce(SessionState(caller=ALICE), PeerSelected(BOB))
    session = reduce(session, RecordReceived(BOB, valid_record))
    session = reduce(session, RecordReceived(BOB, None))
    assert session.view is None


def test_switching_peer_drops_previous_view(valid_record: RemoteGameRecord) -> None:
    session = reduce(SessionState(caller=ALICE), PeerSelected(BOB))
    session = reduce(session, RecordReceived(BOB, valid_record))
    session = reduce(session, PeerSelected("carol"))
    assert session.opponent == "carol"
    assert session.view is None

    session = reduce(session, PeerCleared())
    assert session.opponent is None


def test_corrupted_record_degrades_to_initial_state() -> None:
    session = reduce(SessionState(caller=ALICE), PeerSelected(BOB))
    session = reduce(session, RecordReceived(BOB, make_record("not json")))

    assert session.view is not None
    assert session.view.degraded
    assert session.view.state == TicTacToeEngine().create_initial()
    assert session.notice == CORRUPTED_NOTICE


def test_same_corrupted_record_does_not_renotify() -> None:
    session = reduce(SessionState(caller=ALICE), PeerSelected(BOB))
    session = reduce(session, RecordReceived(BOB, make_record("{}")))
    session = reduce(session, NoticeDismissed())
    session = reduce(session, RecordReceived(BOB, make_record("{}")))
    assert session.notice is None


def test_request_failed_sets_notice() -> None:
    session = reduce(SessionState(caller=ALICE), RequestFailed("Failed to make move"))
    assert session.notice == "Failed to make move"
    assert reduce(session, NoticeDismissed()).notice is None


def test_reduce_never_mutates(valid_record: RemoteGameRecord) -> None:
    session = SessionState(caller=ALICE)
    reduce(session, PeerSelected(BOB))
    assert session == SessionState(caller=ALICE)


def test_unknown_action() -> None:
    with pytest.raises(TypeError):
        reduce(SessionState(caller=ALICE), "jump")  # type: ignore[arg-type]


def test_decode_view_for_connect_four() -> None:
    record = RemoteGameRecord(
        game_type=GameType.CONNECT_FOUR,
        state="",
        current_turn=ALICE,
        player1=ALICE,
        player2=BOB,
    )
    view = decode_view(record)
    assert view.degraded
    assert view.state.game_type == GameType.CONNECT_FOUR
