from __future__ import annotations

import asyncio

from hetzner_cli.models.actions import Action
from hetzner_cli.services.base import CloudCollectionService


class ActionsService(CloudCollectionService[Action]):
    """Read access to Cloud actions, plus blocking until one finishes."""

    path = "/actions"
    list_key = "actions"
    item_key = "action"
    model = Action

    async def wait(
        self,
        action_id: int,
        *,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Action:
        return await self._client.wait_for_action(action_id, timeout=timeout, cancel=cancel)
