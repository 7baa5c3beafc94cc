"""Polling of long-running Cloud API actions."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from hetzner_cli.constants import DEFAULT_ACTION_TIMEOUT, DEFAULT_POLL_INTERVAL
from hetzner_cli.errors import ActionCancelledError, ActionFailedError, ActionTimeoutError
from hetzner_cli.models.actions import Action

logger = logging.getLogger(__name__)

ActionFetcher = Callable[[int], Awaitable[Any]]


class ActionPoller:
    """Observe a server-side action until it succeeds, fails or the budget runs out.

    The poller keeps at most one request in flight and never mutates the
    action. ``clock`` and ``sleep`` exist so tests can drive simulated time.
    """

    def __init__(
        self,
        fetch: ActionFetcher,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._fetch = fetch
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    async def wait(
        self,
        action_id: int,
        *,
        timeout: float = DEFAULT_ACTION_TIMEOUT,
        cancel: asyncio.Event | None = None,
    ) -> Action:
        started = self._clock()
        attempt = 0

        while self._clock() - started < timeout:
            if cancel is not None and cancel.is_set():
                raise ActionCancelledError(action_id)

            attempt += 1
            payload = await self._fetch(action_id)
            action = Action.model_validate(payload.get("action", payload) if isinstance(payload, dict) else payload)
            logger.debug("action %s poll %d: %s (%s%%)", action_id, attempt, action.status, action.progress)

            if action.status == "success":
                return action
            if action.status == "error":
                error = action.error
                raise ActionFailedError(
                    action_id,
                    code=error.code if error else None,
                    message=error.message if error else None,
                )

            await self._pause(cancel)

        raise ActionTimeoutError(action_id, timeout)

    async def _pause(self, cancel: asyncio.Event | None) -> None:
        if cancel is None:
            await self._sleep(self.poll_interval)
            return

        sleeper = asyncio.ensure_future(self._sleep(self.poll_interval))
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, waiter):
                if not task.done():
                    task.cancel()
            await asyncio.gather(sleeper, waiter, return_exceptions=True)
        if not sleeper.cancelled():
            sleeper.result()
