# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
Auth notifier.

Hands successful authorizations from the HTTP handlers to the user callback
through a queue that holds a single pending result. A producer that finds the
slot taken waits until the consumer drains it, so results are never dropped
and are dispatched in the order they were accepted.
"""

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

from slackauth.logging_config import get_logger
from slackauth.models import OAuthResult


logger = get_logger(__name__)

# Callbacks may be plain functions or coroutine functions
AuthCallback = Callable[[OAuthResult], Union[None, Awaitable[None]]]


class AuthNotifier:
    """
    Single-slot hand-off from request handlers to the registered callback.

    The callback reference has a single writer by convention: it is expected
    to be registered once at startup, and the last registration wins.
    """

    def __init__(self, capacity: int = 1):
        """
        Initialize the notifier.

        Args:
            capacity: Number of results that can wait for dispatch
        """
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        self.callback: Optional[AuthCallback] = None
        self._worker: Optional[asyncio.Task] = None

    def on_auth(self, callback: Optional[AuthCallback]) -> None:
        """
        Register the callback invoked for every successful authorization.

        Replaces any previously registered callback.

        Args:
            callback: Function or coroutine function taking an OAuthResult
        """
        self.callback = callback

    async def push(self, result: OAuthResult) -> None:
        """Queue a result, waiting while the slot is occupied."""
        if self.queue.full():
            logger.debug("Auth notifier slot is full, waiting", extra={"team_id": result.team_id})
        await self.queue.put(result)

    async def join(self) -> None:
        """Wait until every queued result has been dispatched."""
        await self.queue.join()

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        """Start the background dispatch task."""
        if self.running:
            logger.warning("Auth notifier already running")
            return

        self._worker = asyncio.create_task(self._dispatch_loop())
        logger.debug("Auth notifier started")

    async def stop(self) -> None:
        """Cancel the dispatch task. Results still queued are not dispatched."""
        if not self.running:
            return

        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.debug("Auth notifier stopped")

    async def _dispatch_loop(self) -> None:
        while True:
            result = await self.queue.get()
            try:
                await self._dispatch(result)
            finally:
                self.queue.task_done()

    async def _dispatch(self, result: OAuthResult) -> None:
        callback = self.callback
        if callback is None:
            logger.warning("auth event triggered but there was no handler", extra={"team_id": result.team_id})
            return

        try:
            if inspect.iscoroutinefunction(callback):
                await callback(result)
            else:
                # Plain callables run in a worker thread so a blocking handler
                # does not stall request handling on the event loop
                outcome = await asyncio.to_thread(callback, result)
                if inspect.isawaitable(outcome):
                    await outcome
        except Exception as e:
            # A failing callback must not stop later dispatches
            logger.error(
                "Auth callback raised exception",
                extra={"team_id": result.team_id, "error": str(e)},
                exc_info=True,
            )
