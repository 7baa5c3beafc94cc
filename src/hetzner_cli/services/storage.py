from __future__ import annotations

from collections.abc import Mapping

from hetzner_cli.models.actions import Action
from hetzner_cli.models.cloud import Image, Volume
from hetzner_cli.services.base import CloudResourceService, ProtectableMixin, parse_response


class VolumesService(ProtectableMixin, CloudResourceService[Volume]):
    path = "/volumes"
    list_key = "volumes"
    item_key = "volume"
    model = Volume

    async def create(
        self,
        *,
        name: str,
        size: int,
        location: str | None = None,
        server: int | None = None,
        format: str | None = None,
        automount: bool | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> tuple[Volume, Action | None, list[Action]]:
        data = await self._create(
            {
                "name": name,
                "size": size,
                "location": location,
                "server": server,
                "format": format,
                "automount": automount,
                "labels": dict(labels) if labels is not None else None,
            }
        )
        action = parse_response(Action, data, "action") if data.get("action") else None
        next_actions = [Action.model_validate(item) for item in data.get("next_actions", [])]
        return parse_response(Volume, data, "volume"), action, next_actions

    async def attach(self, volume_id: int, server_id: int, *, automount: bool | None = None) -> Action:
        return await self._action(volume_id, "attach", {"server": server_id, "automount": automount})

    async def detach(self, volume_id: int) -> Action:
        return await self._action(volume_id, "detach")

    async def resize(self, volume_id: int, size: int) -> Action:
        return await self._action(volume_id, "resize", {"size": size})


class ImagesService(ProtectableMixin, CloudResourceService[Image]):
    """Snapshots, backups and system images. New images come from ``servers.create_image``."""

    path = "/images"
    list_key = "images"
    item_key = "image"
    model = Image
