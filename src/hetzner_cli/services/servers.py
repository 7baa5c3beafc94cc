from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from pydantic import ValidationError

from hetzner_cli.errors import ResponseError
from hetzner_cli.models.actions import Action
from hetzner_cli.models.cloud import Image, Server, ServerCreateResult
from hetzner_cli.services.base import CloudResourceService, parse_response


class ServersService(CloudResourceService[Server]):
    """Cloud server lifecycle and power operations."""

    path = "/servers"
    list_key = "servers"
    item_key = "server"
    model = Server

    async def create(
        self,
        *,
        name: str,
        server_type: str,
        image: str,
        location: str | None = None,
        datacenter: str | None = None,
        ssh_keys: Sequence[str | int] | None = None,
        user_data: str | None = None,
        labels: Mapping[str, str] | None = None,
        automount: bool | None = None,
        volumes: Sequence[int] | None = None,
        networks: Sequence[int] | None = None,
        firewalls: Sequence[int] | None = None,
        placement_group: int | None = None,
        public_net: Mapping[str, Any] | None = None,
        start_after_create: bool | None = None,
    ) -> ServerCreateResult:
        data = await self._create(
            {
                "name": name,
                "server_type": server_type,
                "image": image,
                "location": location,
                "datacenter": datacenter,
                "ssh_keys": list(ssh_keys) if ssh_keys is not None else None,
                "user_data": user_data,
                "labels": dict(labels) if labels is not None else None,
                "automount": automount,
                "volumes": list(volumes) if volumes is not None else None,
                "networks": list(networks) if networks is not None else None,
                "firewalls": [{"firewall": fw} for fw in firewalls] if firewalls is not None else None,
                "placement_group": placement_group,
                "public_net": dict(public_net) if public_net is not None else None,
                "start_after_create": start_after_create,
            }
        )
        try:
            return ServerCreateResult.model_validate(data)
        except ValidationError as exc:
            raise ResponseError(f"unexpected create server response: {exc}") from exc

    async def power_on(self, server_id: int) -> Action:
        return await self._action(server_id, "poweron")

    async def power_off(self, server_id: int) -> Action:
        return await self._action(server_id, "poweroff")

    async def reboot(self, server_id: int) -> Action:
        return await self._action(server_id, "reboot")

    async def reset(self, server_id: int) -> Action:
        return await self._action(server_id, "reset")

    async def shutdown(self, server_id: int) -> Action:
        return await self._action(server_id, "shutdown")

    async def rebuild(self, server_id: int, image: str) -> tuple[Action, str | None]:
        data = await self._action_raw(server_id, "rebuild", {"image": image})
        return parse_response(Action, data, "action"), data.get("root_password")

    async def change_type(self, server_id: int, server_type: str, *, upgrade_disk: bool = False) -> Action:
        return await self._action(server_id, "change_type", {"server_type": server_type, "upgrade_disk": upgrade_disk})

    async def enable_rescue(
        self,
        server_id: int,
        *,
        rescue_type: str = "linux64",
        ssh_keys: Sequence[int] | None = None,
    ) -> tuple[Action, str | None]:
        payload = {"type": rescue_type, "ssh_keys": list(ssh_keys) if ssh_keys is not None else None}
        data = await self._action_raw(server_id, "enable_rescue", payload)
        return parse_response(Action, data, "action"), data.get("root_password")

    async def disable_rescue(self, server_id: int) -> Action:
        return await self._action(server_id, "disable_rescue")

    async def enable_backup(self, server_id: int) -> Action:
        return await self._action(server_id, "enable_backup")

    async def disable_backup(self, server_id: int) -> Action:
        return await self._action(server_id, "disable_backup")

    async def create_image(
        self,
        server_id: int,
        *,
        description: str | None = None,
        image_type: Literal["snapshot", "backup"] | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> tuple[Image, Action]:
        payload = {
            "description": description,
            "type": image_type,
            "labels": dict(labels) if labels is not None else None,
        }
        data = await self._action_raw(server_id, "create_image", payload)
        return parse_response(Image, data, "image"), parse_response(Action, data, "action")

    async def attach_iso(self, server_id: int, iso: str) -> Action:
        return await self._action(server_id, "attach_iso", {"iso": iso})

    async def detach_iso(self, server_id: int) -> Action:
        return await self._action(server_id, "detach_iso")

    async def reset_password(self, server_id: int) -> tuple[Action, str | None]:
        data = await self._action_raw(server_id, "reset_password")
        return parse_response(Action, data, "action"), data.get("root_password")

    async def change_dns_ptr(self, server_id: int, ip: str, dns_ptr: str | None) -> Action:
        # dns_ptr=None resets to the default and must be sent as JSON null.
        data = await self._client._request_json(
            "POST",
            f"{self.path}/{server_id}/actions/change_dns_ptr",
            json_data={"ip": ip, "dns_ptr": dns_ptr},
        )
        return parse_response(Action, data, "action")

    async def change_protection(
        self,
        server_id: int,
        *,
        delete: bool | None = None,
        rebuild: bool | None = None,
    ) -> Action:
        return await self._action(server_id, "change_protection", {"delete": delete, "rebuild": rebuild})

    async def request_console(self, server_id: int) -> dict[str, Any]:
        """Return ``wss_url``, ``password`` and the ``action`` for a VNC console session."""

        data = await self._action_raw(server_id, "request_console")
        return {
            "wss_url": data.get("wss_url"),
            "password": data.get("password"),
            "action": parse_response(Action, data, "action"),
        }

    async def attach_to_network(
        self,
        server_id: int,
        network: int,
        *,
        ip: str | None = None,
        alias_ips: Sequence[str] | None = None,
    ) -> Action:
        payload = {"network": network, "ip": ip, "alias_ips": list(alias_ips) if alias_ips is not None else None}
        return await self._action(server_id, "attach_to_network", payload)

    async def detach_from_network(self, server_id: int, network: int) -> Action:
        return await self._action(server_id, "detach_from_network", {"network": network})

    async def add_to_placement_group(self, server_id: int, placement_group: int) -> Action:
        return await self._action(server_id, "add_to_placement_group", {"placement_group": placement_group})

    async def remove_from_placement_group(self, server_id: int) -> Action:
        return await self._action(server_id, "remove_from_placement_group")

    async def metrics(self, server_id: int, *, metric_type: str, start: str, end: str, step: int | None = None) -> Any:
        return await self._client._request_json(
            "GET",
            f"{self.path}/{server_id}/metrics",
            params={"type": metric_type, "start": start, "end": end, "step": step},
        )
