from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal, TypeVar

from hetzner_cli.models.common import HetznerModel
from hetzner_cli.models.robot import (
    BootConfig,
    BootOption,
    Cancellation,
    Failover,
    FirewallTemplate,
    Mac,
    MarketProduct,
    Rdns,
    Reset,
    ResetType,
    RobotFirewall,
    RobotIP,
    RobotServer,
    RobotSSHKey,
    RobotSubnet,
    ServerProduct,
    StorageBox,
    StorageBoxSnapshot,
    StorageBoxSnapshotPlan,
    StorageBoxSubaccount,
    Traffic,
    Transaction,
    VSwitch,
    Wol,
)
from hetzner_cli.services.base import ServiceBase, parse_response

ModelT = TypeVar("ModelT", bound=HetznerModel)
ServerRef = str | int


class RobotServiceBase(ServiceBase):
    """Robot responses wrap every object in a single-key envelope, lists included."""

    async def _fetch(self, method: str, path: str, form: Mapping[str, Any] | None = None) -> Any:
        return await self._client._request_form(method, path, form=form)

    async def _one(
        self,
        model: type[ModelT],
        key: str,
        method: str,
        path: str,
        form: Mapping[str, Any] | None = None,
    ) -> ModelT:
        data = await self._fetch(method, path, form)
        return parse_response(model, data, key)

    async def _many(self, model: type[ModelT], key: str, path: str) -> list[ModelT]:
        data = await self._fetch("GET", path)
        return [parse_response(model, entry, key) for entry in data or []]


class RobotServersService(RobotServiceBase):
    """Dedicated servers and their cancellation state."""

    async def list(self) -> list[RobotServer]:
        return await self._many(RobotServer, "server", "/server")

    async def get(self, server: ServerRef) -> RobotServer:
        return await self._one(RobotServer, "server", "GET", f"/server/{server}")

    async def rename(self, server: ServerRef, name: str) -> RobotServer:
        return await self._one(RobotServer, "server", "POST", f"/server/{server}", {"server_name": name})

    async def get_cancellation(self, server: ServerRef) -> Cancellation:
        return await self._one(Cancellation, "cancellation", "GET", f"/server/{server}/cancellation")

    async def cancel(
        self,
        server: ServerRef,
        *,
        cancellation_date: str | None = None,
        reasons: Sequence[str] | None = None,
    ) -> Cancellation:
        form = {
            "cancellation_date": cancellation_date or None,
            "cancellation_reason": list(reasons) if reasons else None,
        }
        return await self._one(Cancellation, "cancellation", "POST", f"/server/{server}/cancellation", form)

    async def revoke_cancellation(self, server: ServerRef) -> None:
        await self._fetch("DELETE", f"/server/{server}/cancellation")


class RobotResetService(RobotServiceBase):
    async def list(self) -> list[Reset]:
        return await self._many(Reset, "reset", "/reset")

    async def get(self, server: ServerRef) -> Reset:
        return await self._one(Reset, "reset", "GET", f"/reset/{server}")

    async def execute(self, server: ServerRef, reset_type: ResetType = "sw") -> Reset:
        return await self._one(Reset, "reset", "POST", f"/reset/{server}", {"type": reset_type})


class RobotBootService(RobotServiceBase):
    """Rescue system and Linux installation boot configurations."""

    async def config(self, server: ServerRef) -> BootConfig:
        return await self._one(BootConfig, "boot", "GET", f"/boot/{server}")

    async def rescue(self, server: ServerRef) -> BootOption:
        return await self._one(BootOption, "rescue", "GET", f"/boot/{server}/rescue")

    async def activate_rescue(
        self,
        server: ServerRef,
        *,
        os: str = "linux",
        arch: int | None = None,
        authorized_keys: Sequence[str] | None = None,
    ) -> BootOption:
        form = {"os": os, "arch": arch or None, "authorized_key": list(authorized_keys) if authorized_keys else None}
        return await self._one(BootOption, "rescue", "POST", f"/boot/{server}/rescue", form)

    async def deactivate_rescue(self, server: ServerRef) -> BootOption:
        return await self._one(BootOption, "rescue", "DELETE", f"/boot/{server}/rescue")

    async def last_rescue(self, server: ServerRef) -> BootOption:
        return await self._one(BootOption, "rescue", "GET", f"/boot/{server}/rescue/last")

    async def linux(self, server: ServerRef) -> BootOption:
        return await self._one(BootOption, "linux", "GET", f"/boot/{server}/linux")

    async def activate_linux(
        self,
        server: ServerRef,
        *,
        dist: str,
        arch: int | None = None,
        lang: str | None = None,
        authorized_keys: Sequence[str] | None = None,
    ) -> BootOption:
        form = {
            "dist": dist,
            "arch": arch or None,
            "lang": lang or None,
            "authorized_key": list(authorized_keys) if authorized_keys else None,
        }
        return await self._one(BootOption, "linux", "POST", f"/boot/{server}/linux", form)

    async def deactivate_linux(self, server: ServerRef) -> BootOption:
        return await self._one(BootOption, "linux", "DELETE", f"/boot/{server}/linux")

    async def last_linux(self, server: ServerRef) -> BootOption:
        return await self._one(BootOption, "linux", "GET", f"/boot/{server}/linux/last")


def _traffic_form(
    warnings: bool | None,
    hourly: int | None,
    daily: int | None,
    monthly: int | None,
) -> dict[str, Any]:
    return {
        "traffic_warnings": warnings,
        "traffic_hourly": hourly,
        "traffic_daily": daily,
        "traffic_monthly": monthly,
    }


class _AddressService(RobotServiceBase):
    """Shared shape of ``/ip`` and ``/subnet``: list, get, traffic warnings and separate MACs."""

    prefix: str
    key: str
    model: type[HetznerModel]

    async def list(self) -> list[Any]:
        return await self._many(self.model, self.key, f"/{self.prefix}")

    async def get(self, address: str) -> Any:
        return await self._one(self.model, self.key, "GET", f"/{self.prefix}/{address}")

    async def update(
        self,
        address: str,
        *,
        traffic_warnings: bool | None = None,
        traffic_hourly: int | None = None,
        traffic_daily: int | None = None,
        traffic_monthly: int | None = None,
    ) -> Any:
        form = _traffic_form(traffic_warnings, traffic_hourly, traffic_daily, traffic_monthly)
        return await self._one(self.model, self.key, "POST", f"/{self.prefix}/{address}", form)

    async def get_mac(self, address: str) -> Mac:
        return await self._one(Mac, "mac", "GET", f"/{self.prefix}/{address}/mac")

    async def generate_mac(self, address: str) -> Mac:
        return await self._one(Mac, "mac", "PUT", f"/{self.prefix}/{address}/mac")

    async def delete_mac(self, address: str) -> None:
        await self._fetch("DELETE", f"/{self.prefix}/{address}/mac")


class RobotIPsService(_AddressService):
    prefix = "ip"
    key = "ip"
    model = RobotIP


class RobotSubnetsService(_AddressService):
    prefix = "subnet"
    key = "subnet"
    model = RobotSubnet


class FailoverService(RobotServiceBase):
    async def list(self) -> list[Failover]:
        return await self._many(Failover, "failover", "/failover")

    async def get(self, failover_ip: str) -> Failover:
        return await self._one(Failover, "failover", "GET", f"/failover/{failover_ip}")

    async def switch(self, failover_ip: str, active_server_ip: str) -> Failover:
        form = {"active_server_ip": active_server_ip}
        return await self._one(Failover, "failover", "POST", f"/failover/{failover_ip}", form)

    async def delete_routing(self, failover_ip: str) -> None:
        await self._fetch("DELETE", f"/failover/{failover_ip}")


class RdnsService(RobotServiceBase):
    async def list(self) -> list[Rdns]:
        return await self._many(Rdns, "rdns", "/rdns")

    async def get(self, ip: str) -> Rdns:
        return await self._one(Rdns, "rdns", "GET", f"/rdns/{ip}")

    async def create(self, ip: str, ptr: str) -> Rdns:
        return await self._one(Rdns, "rdns", "PUT", f"/rdns/{ip}", {"ptr": ptr})

    async def update(self, ip: str, ptr: str) -> Rdns:
        return await self._one(Rdns, "rdns", "POST", f"/rdns/{ip}", {"ptr": ptr})

    async def delete(self, ip: str) -> None:
        await self._fetch("DELETE", f"/rdns/{ip}")


class RobotKeysService(RobotServiceBase):
    async def list(self) -> list[RobotSSHKey]:
        return await self._many(RobotSSHKey, "key", "/key")

    async def get(self, fingerprint: str) -> RobotSSHKey:
        return await self._one(RobotSSHKey, "key", "GET", f"/key/{fingerprint}")

    async def create(self, name: str, data: str) -> RobotSSHKey:
        return await self._one(RobotSSHKey, "key", "POST", "/key", {"name": name, "data": data})

    async def rename(self, fingerprint: str, name: str) -> RobotSSHKey:
        return await self._one(RobotSSHKey, "key", "POST", f"/key/{fingerprint}", {"name": name})

    async def delete(self, fingerprint: str) -> None:
        await self._fetch("DELETE", f"/key/{fingerprint}")


def firewall_rule_form(rules: Sequence[Mapping[str, Any]], direction: str = "input") -> dict[str, Any]:
    """Flatten firewall rules into ``rules[input][0][name]=...`` form fields."""

    form: dict[str, Any] = {}
    for index, rule in enumerate(rules):
        for field, value in rule.items():
            form[f"rules[{direction}][{index}][{field}]"] = value
    return form


class RobotFirewallService(RobotServiceBase):
    async def get(self, server: ServerRef) -> RobotFirewall:
        return await self._one(RobotFirewall, "firewall", "GET", f"/firewall/{server}")

    async def update(
        self,
        server: ServerRef,
        *,
        status: Literal["active", "disabled"],
        rules: Sequence[Mapping[str, Any]] | None = None,
        filter_ipv6: bool | None = None,
        whitelist_hos: bool | None = None,
    ) -> RobotFirewall:
        form: dict[str, Any] = {"status": status, "filter_ipv6": filter_ipv6, "whitelist_hos": whitelist_hos}
        if rules is not None:
            form.update(firewall_rule_form(rules))
        return await self._one(RobotFirewall, "firewall", "POST", f"/firewall/{server}", form)

    async def delete(self, server: ServerRef) -> None:
        await self._fetch("DELETE", f"/firewall/{server}")

    async def list_templates(self) -> list[FirewallTemplate]:
        return await self._many(FirewallTemplate, "firewall_template", "/firewall/template")

    async def get_template(self, template_id: int) -> FirewallTemplate:
        return await self._one(FirewallTemplate, "firewall_template", "GET", f"/firewall/template/{template_id}")

    async def delete_template(self, template_id: int) -> None:
        await self._fetch("DELETE", f"/firewall/template/{template_id}")


class VSwitchService(RobotServiceBase):
    async def list(self) -> list[VSwitch]:
        return await self._many(VSwitch, "vswitch", "/vswitch")

    async def get(self, vswitch_id: int) -> VSwitch:
        # The detail endpoint returns the object without an envelope.
        data = await self._fetch("GET", f"/vswitch/{vswitch_id}")
        return VSwitch.model_validate(data.get("vswitch", data))

    async def create(self, name: str, vlan: int) -> VSwitch:
        data = await self._fetch("POST", "/vswitch", {"name": name, "vlan": vlan})
        return VSwitch.model_validate(data.get("vswitch", data))

    async def update(self, vswitch_id: int, *, name: str | None = None, vlan: int | None = None) -> VSwitch:
        data = await self._fetch("POST", f"/vswitch/{vswitch_id}", {"name": name or None, "vlan": vlan})
        return VSwitch.model_validate(data.get("vswitch", data))

    async def delete(self, vswitch_id: int, *, cancellation_date: str = "now") -> None:
        await self._fetch("DELETE", f"/vswitch/{vswitch_id}", {"cancellation_date": cancellation_date})

    async def add_server(self, vswitch_id: int, server: ServerRef) -> None:
        await self._fetch("POST", f"/vswitch/{vswitch_id}/server", {"server": str(server)})

    async def remove_server(self, vswitch_id: int, server: ServerRef) -> None:
        await self._fetch("DELETE", f"/vswitch/{vswitch_id}/server", {"server": str(server)})


class StorageBoxService(RobotServiceBase):
    """Storage boxes with their snapshots, snapshot plan and sub-accounts."""

    async def list(self) -> list[StorageBox]:
        return await self._many(StorageBox, "storagebox", "/storagebox")

    async def get(self, box_id: int) -> StorageBox:
        return await self._one(StorageBox, "storagebox", "GET", f"/storagebox/{box_id}")

    async def update(
        self,
        box_id: int,
        *,
        name: str | None = None,
        webdav: bool | None = None,
        samba: bool | None = None,
        ssh: bool | None = None,
        external_reachability: bool | None = None,
        zfs: bool | None = None,
    ) -> StorageBox:
        form = {
            "storagebox_name": name or None,
            "webdav": webdav,
            "samba": samba,
            "ssh": ssh,
            "external_reachability": external_reachability,
            "zfs": zfs,
        }
        return await self._one(StorageBox, "storagebox", "POST", f"/storagebox/{box_id}", form)

    async def reset_password(self, box_id: int) -> str:
        data = await self._fetch("POST", f"/storagebox/{box_id}/password")
        return str(data["password"])

    async def list_snapshots(self, box_id: int) -> list[StorageBoxSnapshot]:
        return await self._many(StorageBoxSnapshot, "snapshot", f"/storagebox/{box_id}/snapshot")

    async def create_snapshot(self, box_id: int) -> StorageBoxSnapshot:
        return await self._one(StorageBoxSnapshot, "snapshot", "POST", f"/storagebox/{box_id}/snapshot")

    async def delete_snapshot(self, box_id: int, name: str) -> None:
        await self._fetch("DELETE", f"/storagebox/{box_id}/snapshot/{name}")

    async def revert_snapshot(self, box_id: int, name: str) -> None:
        await self._fetch("POST", f"/storagebox/{box_id}/snapshot/{name}/revert")

    async def get_snapshot_plan(self, box_id: int) -> StorageBoxSnapshotPlan:
        return await self._one(StorageBoxSnapshotPlan, "snapshotplan", "GET", f"/storagebox/{box_id}/snapshotplan")

    async def update_snapshot_plan(
        self,
        box_id: int,
        *,
        status: Literal["enabled", "disabled"],
        minute: int | None = None,
        hour: int | None = None,
        day_of_week: int | None = None,
        day_of_month: int | None = None,
        max_snapshots: int | None = None,
    ) -> StorageBoxSnapshotPlan:
        form = {
            "status": status,
            "minute": minute,
            "hour": hour,
            "day_of_week": day_of_week,
            "day_of_month": day_of_month,
            "max_snapshots": max_snapshots,
        }
        return await self._one(
            StorageBoxSnapshotPlan, "snapshotplan", "POST", f"/storagebox/{box_id}/snapshotplan", form
        )

    async def list_subaccounts(self, box_id: int) -> list[StorageBoxSubaccount]:
        return await self._many(StorageBoxSubaccount, "subaccount", f"/storagebox/{box_id}/subaccount")

    async def create_subaccount(
        self,
        box_id: int,
        *,
        homedirectory: str,
        samba: bool | None = None,
        ssh: bool | None = None,
        external_reachability: bool | None = None,
        webdav: bool | None = None,
        readonly: bool | None = None,
        comment: str | None = None,
    ) -> StorageBoxSubaccount:
        form = {
            "homedirectory": homedirectory,
            "samba": samba,
            "ssh": ssh,
            "external_reachability": external_reachability,
            "webdav": webdav,
            "readonly": readonly,
            "comment": comment or None,
        }
        return await self._one(StorageBoxSubaccount, "subaccount", "POST", f"/storagebox/{box_id}/subaccount", form)

    async def update_subaccount(
        self,
        box_id: int,
        username: str,
        *,
        homedirectory: str | None = None,
        samba: bool | None = None,
        ssh: bool | None = None,
        external_reachability: bool | None = None,
        webdav: bool | None = None,
        readonly: bool | None = None,
        comment: str | None = None,
    ) -> None:
        form = {
            "homedirectory": homedirectory,
            "samba": samba,
            "ssh": ssh,
            "external_reachability": external_reachability,
            "webdav": webdav,
            "readonly": readonly,
            "comment": comment,
        }
        await self._fetch("PUT", f"/storagebox/{box_id}/subaccount/{username}", form)

    async def delete_subaccount(self, box_id: int, username: str) -> None:
        await self._fetch("DELETE", f"/storagebox/{box_id}/subaccount/{username}")

    async def reset_subaccount_password(self, box_id: int, username: str) -> str:
        data = await self._fetch("POST", f"/storagebox/{box_id}/subaccount/{username}/password")
        return str(data["password"])


class TrafficService(RobotServiceBase):
    async def query(
        self,
        *,
        date_from: str,
        date_to: str,
        ips: Sequence[str] = (),
        subnets: Sequence[str] = (),
        traffic_type: Literal["day", "month", "year"] = "month",
    ) -> Traffic:
        form = {
            "type": traffic_type,
            "from": date_from,
            "to": date_to,
            "ip": list(ips) or None,
            "subnet": list(subnets) or None,
        }
        return await self._one(Traffic, "traffic", "POST", "/traffic", form)


class WolService(RobotServiceBase):
    async def get(self, server: ServerRef) -> Wol:
        return await self._one(Wol, "wol", "GET", f"/wol/{server}")

    async def send(self, server: ServerRef) -> Wol:
        return await self._one(Wol, "wol", "POST", f"/wol/{server}")


def _order_form(
    product_id: str | int,
    *,
    authorized_keys: Sequence[str] | None,
    password: str | None,
    dist: str | None,
    arch: int | None,
    lang: str | None,
    addons: Sequence[str] | None,
    test: bool | None,
) -> dict[str, Any]:
    return {
        "product_id": product_id,
        "authorized_key": list(authorized_keys) if authorized_keys else None,
        "password": password or None,
        "dist": dist or None,
        "arch": arch or None,
        "lang": lang or None,
        "addon": list(addons) if addons else None,
        "test": test,
    }


class OrderingService(RobotServiceBase):
    """Server products, Server Market products and order transactions."""

    async def products(self) -> list[ServerProduct]:
        return await self._many(ServerProduct, "product", "/order/server/product")

    async def market_products(self) -> list[MarketProduct]:
        return await self._many(MarketProduct, "product", "/order/server_market/product")

    async def transactions(self) -> list[Transaction]:
        return await self._many(Transaction, "transaction", "/order/server/transaction")

    async def transaction(self, transaction_id: str) -> Transaction:
        return await self._one(Transaction, "transaction", "GET", f"/order/server/transaction/{transaction_id}")

    async def order_server(
        self,
        product_id: str,
        *,
        authorized_keys: Sequence[str] | None = None,
        password: str | None = None,
        dist: str | None = None,
        arch: int | None = None,
        lang: str | None = None,
        location: str | None = None,
        addons: Sequence[str] | None = None,
        test: bool | None = None,
    ) -> Transaction:
        form = _order_form(
            product_id,
            authorized_keys=authorized_keys,
            password=password,
            dist=dist,
            arch=arch,
            lang=lang,
            addons=addons,
            test=test,
        )
        form["location"] = location or None
        return await self._one(Transaction, "transaction", "POST", "/order/server/transaction", form)

    async def order_market_server(
        self,
        product_id: int,
        *,
        authorized_keys: Sequence[str] | None = None,
        password: str | None = None,
        dist: str | None = None,
        arch: int | None = None,
        lang: str | None = None,
        addons: Sequence[str] | None = None,
        test: bool | None = None,
    ) -> Transaction:
        form = _order_form(
            product_id,
            authorized_keys=authorized_keys,
            password=password,
            dist=dist,
            arch=arch,
            lang=lang,
            addons=addons,
            test=test,
        )
        return await self._one(Transaction, "transaction", "POST", "/order/server_market/transaction", form)
