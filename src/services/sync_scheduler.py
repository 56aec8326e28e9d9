"""
Keeps the local copy of a game record in sync with the remote store.

There is no push channel: the watched record gets polled on a fixed interval.
Local writes are followed by `invalidate_and_refetch`, so a player always reads their own writes.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from src.core.config import POLL_INTERVAL_SECONDS
from src.core.exceptions import TransportError
from src.core.models import PlayerId, RemoteGameRecord
from src.services.remote_client import RemoteGameClient

logger = logging.getLogger(__name__)

RecordListener = Callable[[PlayerId, Optional[RemoteGameRecord]], None]
FailureListener = Callable[[PlayerId, TransportError], None]


@dataclass
class WatchToken:
    """Cancellation token for one watch session. Results arriving after cancellation are dropped."""

    opponent: PlayerId
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class SyncScheduler:
    """Polling loop plus a per-opponent cache of the last fetched record."""

    def __init__(
        self,
        client: RemoteGameClient,
        interval: float = POLL_INTERVAL_SECONDS,
    ) -> None:
        self.client = client
        self.interval = interval
        self._cache: dict[PlayerId, Optional[RemoteGameRecord]] = {}
        self._listeners: list[RecordListener] = []
        self._failure_listeners: list[FailureListener] = []
        # True while polls keep failing, so one outage is reported once
        self._outage = False
        self._token: Optional[WatchToken] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def token(self) -> Optional[WatchToken]:
        return self._token

    @property
    def watching(self) -> Optional[PlayerId]:
        return self._token.opponent if self._token else None

    def subscribe(self, listener: RecordListener) -> None:
        """`listener` gets called every time a fresh record lands in the cache."""
        self._listeners.append(listener)

    def subscribe_failures(self, listener: FailureListener) -> None:
        """`listener` gets called once when polling starts failing, not on every failed tick."""
        self._failure_listeners.append(listener)

    # -- Lifecycle --
    def watch(self, opponent: PlayerId) -> WatchToken:
        """
        Start polling the game with `opponent`. Stops any previous watch first.
        ----

        Needs a running event loop. The first poll happens after one interval:
        callers wanting data right away call `refresh` themselves.
        """
        self.unwatch()
        token = WatchToken(opponent)
        self._token = token
        self._outage = False
        self._task = asyncio.get_running_loop().create_task(self._poll(token))
        logger.info(f"Polling game with {opponent} every {self.interval}s")
        return token

    def unwatch(self) -> None:
        """Stop polling and forget the cached record of the watched opponent."""
        if self._token is None:
            return
        self._token.cancel()
        self._cache.pop(self._token.opponent, None)
        if self._task is not None:
            self._task.cancel()
        logger.info(f"Stopped polling game with {self._token.opponent}")
        self._token = None
        self._task = None

    async def close(self) -> None:
        """Stop polling and wait for the polling task to wind down."""
        task = self._task
        self.unwatch()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    # -- Cache --
    def cached(self, opponent: PlayerId) -> Optional[RemoteGameRecord]:
        return self._cache.get(opponent)

    def is_cached(self, opponent: PlayerId) -> bool:
        return opponent in self._cache

    def invalidate(self, opponent: PlayerId) -> None:
        self._cache.pop(opponent, None)

    async def refresh(self, opponent: PlayerId) -> Optional[RemoteGameRecord]:
        """
        Fetch the record and store it, unless the watch ended while the call was in flight.
        ----

        Raises TransportError if the fetch fails.
        """
        token = self._token
        record = await self.client.query_state(opponent)
        if token is None or token.cancelled or token.opponent != opponent:
            logger.debug(f"Discarding fetched record for {opponent}: no longer watched")
            return record

        self._cache[opponent] = record
        self._outage = False
        for listener in self._listeners:
            listener(opponent, record)
        return record

    async def invalidate_and_refetch(
        self, opponent: PlayerId
    ) -> Optional[RemoteGameRecord]:
        """Called right after a local write, without waiting for the next poll."""
        self.invalidate(opponent)
        return await self.refresh(opponent)

    async def _poll(self, token: WatchToken) -> None:
        while not token.cancelled:
            await asyncio.sleep(self.interval)
            if token.cancelled:
                break
            try:
                await self.refresh(token.opponent)
            except TransportError as err:
                # No retry beyond the next tick
                logger.warning(f"Polling game with {token.opponent} failed: {err}")
                if self._outage:
                    continue
                self._outage = True
                for listener in self._failure_listeners:
                    listener(token.opponent, err)
