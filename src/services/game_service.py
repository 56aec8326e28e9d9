"""Orchestration between the player's actions, the game rules, the codec and the remote store."""

import logging
from typing import Optional

from src.api.models import AcceptChallengeRequest, CreateChallengeRequest, MoveRequest
from src.core.exceptions import TransportError
from src.core.models import Challenge, PlayerId, RemoteGameRecord
from src.core.shared_types import Disc, GameStatus, Mark
from src.games.codec import get_codec
from src.games.engine import get_engine
from src.games.state import GameState
from src.services.notifications import Notifier
from src.services.remote_client import RemoteGameClient
from src.services.session import (
    Action,
    NoticeDismissed,
    PeerCleared,
    PeerSelected,
    RecordReceived,
    RequestFailed,
    SessionState,
    reduce,
)
from src.services.sync_scheduler import SyncScheduler

logger = logging.getLogger(__name__)

# player1 (the challenger) always plays the symbol that opens the game
FIRST_SYMBOLS = (Mark.X, Disc.RED)


def player_for_symbol(record: RemoteGameRecord, symbol: Mark | Disc) -> PlayerId:
    return record.player1 if symbol in FIRST_SYMBOLS else record.player2


class GameService:
    """
    Everything a player can do in the games view.
    ----

    No method raises on a failed remote call: failures end up as a notice on the session
    (and in the notifier) and the player can simply try again.

    NOTE the store overwrites unconditionally. Nothing here checks `current_turn`,
    so two clients writing at the same time resolve as last-writer-wins.
    """

    def __init__(
        self,
        client: RemoteGameClient,
        scheduler: SyncScheduler,
        notifier: Notifier,
    ) -> None:
        self.client = client
        self.scheduler = scheduler
        self.notifier = notifier
        self.session = SessionState(caller=client.caller)
        self.scheduler.subscribe(self._on_record)
        self.scheduler.subscribe_failures(self._on_poll_failure)

    def dispatch(self, action: Action) -> SessionState:
        previous = self.session
        self.session = reduce(previous, action)
        is_new_notice = self.session.notice and self.session.notice != previous.notice
        if isinstance(action, RequestFailed) or is_new_notice:
            self.notifier.notify(self.session.notice)
        return self.session

    # -- View lifecycle --
    async def select_opponent(self, opponent: PlayerId) -> SessionState:
        """Open the game view for `opponent`: fetch once right away, then keep polling."""
        self.dispatch(PeerSelected(opponent))
        self.scheduler.watch(opponent)
        await self._refetch(opponent)
        return self.session

    def close_view(self) -> SessionState:
        """Stop polling. Results of calls still in flight will be dropped."""
        self.scheduler.unwatch()
        return self.dispatch(PeerCleared())

    def dismiss_notice(self) -> SessionState:
        return self.dispatch(NoticeDismissed())

    def current_state(self) -> Optional[GameState]:
        view = self.session.view
        return view.state if view else None

    # -- Challenges --
    async def create_challenge(self, request: CreateChallengeRequest) -> bool:
        try:
            await self.client.create_challenge(request.opponent, request.game_type)
        except TransportError as err:
            self._fail("Failed to start game", err)
            return False
        logger.info(f"{self.client.caller} challenged {request.opponent} to {request.game_type}")
        await self._refetch_if_selected(request.opponent)
        return True

    async def accept_challenge(self, request: AcceptChallengeRequest) -> bool:
        try:
            await self.client.accept_challenge(request.challenger)
        except TransportError as err:
            self._fail("Failed to accept challenge", err)
            return False
        logger.info(f"{self.client.caller} accepted the challenge of {request.challenger}")
        await self._refetch_if_selected(request.challenger)
        return True

    async def pending_challenges(self) -> list[Challenge]:
        try:
            return await self.client.pending_challenges()
        except TransportError as err:
            self._fail("Failed to load challenges", err)
            return []

    # -- Playing --
    async def play(self, request: MoveRequest) -> Optional[GameState]:
        """
        Play a move in the active game.
        ----

        1. apply the move locally. An invalid move changes nothing and is not sent anywhere.
        2. overwrite the remote state with the new state
        3. if the move won the game, record the winner
        4. refetch our own record right away (read-your-own-write)

        Returns the state after the move, the unchanged state if it was invalid or the write failed,
        or None if there is no active game or the view got closed while the write was in flight.
        """
        opponent = self.session.opponent
        view = self.session.view
        if opponent is None or view is None:
            return None

        engine = get_engine(view.record.game_type)
        new_state = engine.apply_move(view.state, request.position)
        if new_state is view.state:
            return view.state

        token = self.scheduler.token
        try:
            await self.client.update_state(
                opponent, get_codec(view.record.game_type).serialize(new_state)
            )
        except TransportError as err:
            self._fail("Failed to make move", err)
            return view.state
        logger.info(f"{self.client.caller} played {request.position} against {opponent}")

        if new_state.status == GameStatus.WON and new_state.winner is not None:
            winner = player_for_symbol(view.record, new_state.winner)
            try:
                await self.client.set_winner(opponent, winner)
            except TransportError as err:
                self._fail("Failed to record the winner", err)

        if token is None or token.cancelled:
            # The write itself stands, only the view is gone
            logger.debug(f"Game view for {opponent} closed during the move, result dropped")
            return None

        await self._refetch(opponent)
        return new_state

    async def reset(self) -> Optional[GameState]:
        """Play again: fresh initial state of the same game type, and no winner on the record."""
        opponent = self.session.opponent
        view = self.session.view
        if opponent is None or view is None:
            return None

        game_type = view.record.game_type
        initial = get_engine(game_type).create_initial()
        token = self.scheduler.token
        try:
            await self.client.update_state(opponent, get_codec(game_type).serialize(initial))
        except TransportError as err:
            self._fail("Failed to reset game", err)
            return view.state
        logger.info(f"{self.client.caller} reset the {game_type} game against {opponent}")

        try:
            await self.client.set_winner(opponent, None)
        except TransportError as err:
            self._fail("Failed to clear the previous winner", err)

        if token is None or token.cancelled:
            return None

        await self._refetch(opponent)
        return initial

    # -- Internal helpers --
    def _on_record(self, opponent: PlayerId, record: Optional[RemoteGameRecord]) -> None:
        self.dispatch(RecordReceived(opponent, record))

    def _on_poll_failure(self, opponent: PlayerId, err: TransportError) -> None:
        if opponent == self.session.opponent:
            self._fail("Failed to load game state", err)

    async def _refetch(self, opponent: PlayerId) -> None:
        try:
            await self.scheduler.invalidate_and_refetch(opponent)
        except TransportError as err:
            self._fail("Failed to load game state", err)

    async def _refetch_if_selected(self, opponent: PlayerId) -> None:
        if opponent == self.session.opponent:
            await self._refetch(opponent)

    def _fail(self, what: str, err: TransportError) -> None:
        logger.warning(f"{what}: {err}")
        self.dispatch(RequestFailed(f"{what}. Please try again."))
