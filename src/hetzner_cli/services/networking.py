from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from hetzner_cli.models.actions import Action
from hetzner_cli.models.cloud import Firewall, FloatingIP, LoadBalancer, Network, PrimaryIP
from hetzner_cli.services.base import CloudResourceService, ProtectableMixin, parse_response

IPType = Literal["ipv4", "ipv6"]
FirewallTarget = Mapping[str, Any]


def _labels(labels: Mapping[str, str] | None) -> dict[str, str] | None:
    return dict(labels) if labels is not None else None


class NetworksService(ProtectableMixin, CloudResourceService[Network]):
    path = "/networks"
    list_key = "networks"
    item_key = "network"
    model = Network

    async def create(
        self,
        *,
        name: str,
        ip_range: str,
        subnets: Sequence[Mapping[str, Any]] | None = None,
        routes: Sequence[Mapping[str, Any]] | None = None,
        labels: Mapping[str, str] | None = None,
        expose_routes_to_vswitch: bool | None = None,
    ) -> Network:
        data = await self._create(
            {
                "name": name,
                "ip_range": ip_range,
                "subnets": [dict(item) for item in subnets] if subnets is not None else None,
                "routes": [dict(item) for item in routes] if routes is not None else None,
                "labels": _labels(labels),
                "expose_routes_to_vswitch": expose_routes_to_vswitch,
            }
        )
        return parse_response(Network, data, "network")

    async def add_subnet(
        self,
        network_id: int,
        *,
        network_zone: str,
        subnet_type: str = "cloud",
        ip_range: str | None = None,
        vswitch_id: int | None = None,
    ) -> Action:
        payload = {"type": subnet_type, "network_zone": network_zone, "ip_range": ip_range, "vswitch_id": vswitch_id}
        return await self._action(network_id, "add_subnet", payload)

    async def delete_subnet(self, network_id: int, ip_range: str) -> Action:
        return await self._action(network_id, "delete_subnet", {"ip_range": ip_range})

    async def add_route(self, network_id: int, *, destination: str, gateway: str) -> Action:
        return await self._action(network_id, "add_route", {"destination": destination, "gateway": gateway})

    async def delete_route(self, network_id: int, *, destination: str, gateway: str) -> Action:
        return await self._action(network_id, "delete_route", {"destination": destination, "gateway": gateway})

    async def change_ip_range(self, network_id: int, ip_range: str) -> Action:
        return await self._action(network_id, "change_ip_range", {"ip_range": ip_range})


class FirewallsService(CloudResourceService[Firewall]):
    path = "/firewalls"
    list_key = "firewalls"
    item_key = "firewall"
    model = Firewall

    async def create(
        self,
        *,
        name: str,
        rules: Sequence[Mapping[str, Any]] | None = None,
        apply_to: Sequence[FirewallTarget] | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> tuple[Firewall, list[Action]]:
        data = await self._create(
            {
                "name": name,
                "rules": [dict(rule) for rule in rules] if rules is not None else None,
                "apply_to": [dict(target) for target in apply_to] if apply_to is not None else None,
                "labels": _labels(labels),
            }
        )
        actions = [Action.model_validate(item) for item in data.get("actions", [])]
        return parse_response(Firewall, data, "firewall"), actions

    async def set_rules(self, firewall_id: int, rules: Sequence[Mapping[str, Any]]) -> list[Action]:
        return await self._actions(firewall_id, "set_rules", {"rules": [dict(rule) for rule in rules]})

    async def apply_to_resources(self, firewall_id: int, targets: Sequence[FirewallTarget]) -> list[Action]:
        return await self._actions(firewall_id, "apply_to_resources", {"apply_to": [dict(t) for t in targets]})

    async def remove_from_resources(self, firewall_id: int, targets: Sequence[FirewallTarget]) -> list[Action]:
        return await self._actions(firewall_id, "remove_from_resources", {"remove_from": [dict(t) for t in targets]})


class _DnsPtrMixin:
    async def change_dns_ptr(self: Any, resource_id: int, ip: str, dns_ptr: str | None) -> Action:
        data = await self._client._request_json(
            "POST",
            f"{self.path}/{resource_id}/actions/change_dns_ptr",
            json_data={"ip": ip, "dns_ptr": dns_ptr},
        )
        return parse_response(Action, data, "action")


class FloatingIPsService(ProtectableMixin, _DnsPtrMixin, CloudResourceService[FloatingIP]):
    path = "/floating_ips"
    list_key = "floating_ips"
    item_key = "floating_ip"
    model = FloatingIP

    async def create(
        self,
        *,
        ip_type: IPType,
        name: str | None = None,
        description: str | None = None,
        home_location: str | None = None,
        server: int | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> tuple[FloatingIP, Action | None]:
        data = await self._create(
            {
                "type": ip_type,
                "name": name,
                "description": description,
                "home_location": home_location,
                "server": server,
                "labels": _labels(labels),
            }
        )
        action = parse_response(Action, data, "action") if data.get("action") else None
        return parse_response(FloatingIP, data, "floating_ip"), action

    async def assign(self, floating_ip_id: int, server_id: int) -> Action:
        return await self._action(floating_ip_id, "assign", {"server": server_id})

    async def unassign(self, floating_ip_id: int) -> Action:
        return await self._action(floating_ip_id, "unassign")


class PrimaryIPsService(ProtectableMixin, _DnsPtrMixin, CloudResourceService[PrimaryIP]):
    path = "/primary_ips"
    list_key = "primary_ips"
    item_key = "primary_ip"
    model = PrimaryIP

    async def create(
        self,
        *,
        ip_type: IPType,
        name: str,
        assignee_type: str = "server",
        assignee_id: int | None = None,
        datacenter: str | None = None,
        auto_delete: bool | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> tuple[PrimaryIP, Action | None]:
        data = await self._create(
            {
                "type": ip_type,
                "name": name,
                "assignee_type": assignee_type,
                "assignee_id": assignee_id,
                "datacenter": datacenter,
                "auto_delete": auto_delete,
                "labels": _labels(labels),
            }
        )
        action = parse_response(Action, data, "action") if data.get("action") else None
        return parse_response(PrimaryIP, data, "primary_ip"), action

    async def assign(self, primary_ip_id: int, assignee_id: int, *, assignee_type: str = "server") -> Action:
        return await self._action(primary_ip_id, "assign", {"assignee_id": assignee_id, "assignee_type": assignee_type})

    async def unassign(self, primary_ip_id: int) -> Action:
        return await self._action(primary_ip_id, "unassign")


class LoadBalancersService(ProtectableMixin, CloudResourceService[LoadBalancer]):
    path = "/load_balancers"
    list_key = "load_balancers"
    item_key = "load_balancer"
    model = LoadBalancer

    async def create(
        self,
        *,
        name: str,
        load_balancer_type: str,
        location: str | None = None,
        network_zone: str | None = None,
        algorithm: str | None = None,
        services: Sequence[Mapping[str, Any]] | None = None,
        targets: Sequence[Mapping[str, Any]] | None = None,
        labels: Mapping[str, str] | None = None,
        network: int | None = None,
        public_interface: bool | None = None,
    ) -> tuple[LoadBalancer, Action | None]:
        data = await self._create(
            {
                "name": name,
                "load_balancer_type": load_balancer_type,
                "location": location,
                "network_zone": network_zone,
                "algorithm": {"type": algorithm} if algorithm is not None else None,
                "services": [dict(item) for item in services] if services is not None else None,
                "targets": [dict(item) for item in targets] if targets is not None else None,
                "labels": _labels(labels),
                "network": network,
                "public_interface": public_interface,
            }
        )
        action = parse_response(Action, data, "action") if data.get("action") else None
        return parse_response(LoadBalancer, data, "load_balancer"), action

    async def add_target(self, load_balancer_id: int, target: Mapping[str, Any]) -> Action:
        return await self._action(load_balancer_id, "add_target", dict(target))

    async def remove_target(self, load_balancer_id: int, target: Mapping[str, Any]) -> Action:
        return await self._action(load_balancer_id, "remove_target", dict(target))

    async def add_service(self, load_balancer_id: int, service: Mapping[str, Any]) -> Action:
        return await self._action(load_balancer_id, "add_service", dict(service))

    async def update_service(self, load_balancer_id: int, service: Mapping[str, Any]) -> Action:
        return await self._action(load_balancer_id, "update_service", dict(service))

    async def delete_service(self, load_balancer_id: int, listen_port: int) -> Action:
        return await self._action(load_balancer_id, "delete_service", {"listen_port": listen_port})

    async def change_algorithm(self, load_balancer_id: int, algorithm: str) -> Action:
        return await self._action(load_balancer_id, "change_algorithm", {"type": algorithm})

    async def change_type(self, load_balancer_id: int, load_balancer_type: str) -> Action:
        return await self._action(load_balancer_id, "change_type", {"load_balancer_type": load_balancer_type})

    async def attach_to_network(self, load_balancer_id: int, network: int, *, ip: str | None = None) -> Action:
        return await self._action(load_balancer_id, "attach_to_network", {"network": network, "ip": ip})

    async def detach_from_network(self, load_balancer_id: int, network: int) -> Action:
        return await self._action(load_balancer_id, "detach_from_network", {"network": network})

    async def enable_public_interface(self, load_balancer_id: int) -> Action:
        return await self._action(load_balancer_id, "enable_public_interface")

    async def disable_public_interface(self, load_balancer_id: int) -> Action:
        return await self._action(load_balancer_id, "disable_public_interface")
