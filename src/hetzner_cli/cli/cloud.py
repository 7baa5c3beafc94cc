"""``hetzner cloud``: contexts plus one command group per Cloud resource."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from hetzner_cli.cli.common import (
    _emit,
    _parse_json,
    _parse_key_values,
    _state,
    confirm,
    finish,
    finish_all,
    handle_errors,
    manager,
    with_cloud,
)
from hetzner_cli.client import AsyncCloudClient

cloud_app = typer.Typer(no_args_is_help=True, help="Hetzner Cloud API")
context_app = typer.Typer(no_args_is_help=True, help="Manage named Cloud contexts")
cloud_app.add_typer(context_app, name="context")

IdArg = Annotated[int, typer.Argument(help="Resource id")]
WaitOpt = Annotated[bool, typer.Option("--wait", "-w", help="Wait for the returned action to finish")]
YesOpt = Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")]
LabelsOpt = Annotated[list[str] | None, typer.Option("--label", "-l", help="Label as key=value (repeatable)")]
ColumnsOpt = Annotated[str | None, typer.Option("--columns", help="Comma separated table columns")]

DEFAULT_COLUMNS = {
    "datacenters": "id,name,description,location.name",
    "locations": "id,name,city,country,network_zone",
    "server_types": "id,name,cores,memory,disk,cpu_type,architecture",
    "load_balancer_types": "id,name,max_connections,max_services,max_targets",
    "isos": "id,name,type,architecture",
    "servers": "id,name,status,server_type.name,public_net.ipv4.ip,datacenter.name",
    "networks": "id,name,ip_range",
    "firewalls": "id,name",
    "floating_ips": "id,name,type,ip,server,home_location.name",
    "primary_ips": "id,name,type,ip,assignee_id,datacenter.name",
    "volumes": "id,name,size,server,status,location.name",
    "load_balancers": "id,name,load_balancer_type.name,location.name",
    "images": "id,name,type,status,os_flavor,description",
    "ssh_keys": "id,name,fingerprint",
    "certificates": "id,name,type,domain_names",
    "placement_groups": "id,name,type,servers",
    "actions": "id,command,status,progress,started",
}


@cloud_app.callback()
def cloud_main(
    ctx: typer.Context,
    token: Annotated[str | None, typer.Option("--token", help="Cloud API token")] = None,
    context: Annotated[str | None, typer.Option("--context", help="Context to use instead of the active one")] = None,
) -> None:
    state = _state(ctx)
    state.token = token
    state.context = context


@context_app.command("create")
def context_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Context name")],
    token: Annotated[str, typer.Option(prompt="Cloud API token", hide_input=True, help="Cloud API token")],
) -> None:
    state = _state(ctx)
    with handle_errors():
        manager(state).create_context(name, token)
        _emit(manager(state).list_contexts(), state=state)


@context_app.command("list")
def context_list(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    state = _state(ctx)
    with handle_errors():
        _emit(manager(state).list_contexts(), state=state, columns=columns)


@context_app.command("use")
def context_use(ctx: typer.Context, name: Annotated[str, typer.Argument(help="Context name")]) -> None:
    state = _state(ctx)
    with handle_errors():
        cfg = manager(state).use_context(name)
    typer.echo(f"Switched to context '{cfg.active_context}'.")


@context_app.command("delete")
def context_delete(ctx: typer.Context, name: Annotated[str, typer.Argument(help="Context name")], yes: YesOpt = False) -> None:
    state = _state(ctx)
    confirm(f"Delete context '{name}'?", yes)
    with handle_errors():
        cfg = manager(state).delete_context(name)
    typer.echo(f"Deleted context '{name}'. Active context: {cfg.active_context or '-'}")


def _group(name: str, help_text: str) -> typer.Typer:
    group = typer.Typer(no_args_is_help=True, help=help_text)
    cloud_app.add_typer(group, name=name)
    return group


def _register_collection(group: typer.Typer, attr: str, *, labels: bool = True) -> None:
    """Add ``list`` and ``get`` commands backed by ``client.<attr>``."""

    if labels:

        @group.command("list")
        def list_cmd(
            ctx: typer.Context,
            name: Annotated[str | None, typer.Option("--name", help="Filter by name")] = None,
            label_selector: Annotated[str | None, typer.Option("--selector", help="Label selector")] = None,
            columns: ColumnsOpt = None,
        ) -> None:
            state = _state(ctx)

            async def run(client: AsyncCloudClient) -> Any:
                return await getattr(client, attr).list(name=name, label_selector=label_selector)

            _emit(with_cloud(state, run), state=state, columns=columns or DEFAULT_COLUMNS[attr])

    else:

        @group.command("list")
        def list_plain(
            ctx: typer.Context,
            name: Annotated[str | None, typer.Option("--name", help="Filter by name")] = None,
            columns: ColumnsOpt = None,
        ) -> None:
            state = _state(ctx)

            async def run(client: AsyncCloudClient) -> Any:
                return await getattr(client, attr).list(name=name)

            _emit(with_cloud(state, run), state=state, columns=columns or DEFAULT_COLUMNS[attr])

    @group.command("get")
    def get_cmd(ctx: typer.Context, resource_id: IdArg) -> None:
        state = _state(ctx)

        async def run(client: AsyncCloudClient) -> Any:
            return await getattr(client, attr).get(resource_id)

        _emit(with_cloud(state, run), state=state)


def _register_resource(group: typer.Typer, attr: str, noun: str, *, protectable: bool = True) -> None:
    """Add list/get/update/delete (and ``protect``) for a mutable resource."""

    _register_collection(group, attr)

    @group.command("update")
    def update_cmd(
        ctx: typer.Context,
        resource_id: IdArg,
        name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
        label: LabelsOpt = None,
    ) -> None:
        state = _state(ctx)

        async def run(client: AsyncCloudClient) -> Any:
            return await getattr(client, attr).update(resource_id, name=name, labels=_parse_key_values(label))

        _emit(with_cloud(state, run), state=state)

    @group.command("delete")
    def delete_cmd(ctx: typer.Context, resource_id: IdArg, yes: YesOpt = False, wait: WaitOpt = False) -> None:
        state = _state(ctx)
        confirm(f"Delete {noun} {resource_id}?", yes)

        async def run(client: AsyncCloudClient) -> Any:
            action = await getattr(client, attr).delete(resource_id)
            return await finish(client, action, wait)

        result = with_cloud(state, run)
        if result is None:
            typer.echo(f"Deleted {noun} {resource_id}.")
        else:
            _emit(result, state=state)

    if protectable:

        @group.command("protect")
        def protect_cmd(
            ctx: typer.Context,
            resource_id: IdArg,
            delete: Annotated[bool, typer.Option("--delete/--no-delete", help="Delete protection")] = True,
            wait: WaitOpt = False,
        ) -> None:
            state = _state(ctx)

            async def run(client: AsyncCloudClient) -> Any:
                action = await getattr(client, attr).change_protection(resource_id, delete=delete)
                return await finish(client, action, wait)

            _emit(with_cloud(state, run), state=state)


def _register_action(group: typer.Typer, command: str, attr: str, method: str, help_text: str) -> None:
    """Add ``<command> ID [--wait]`` calling ``client.<attr>.<method>(id)``."""

    @group.command(command, help=help_text)
    def action_cmd(ctx: typer.Context, resource_id: IdArg, wait: WaitOpt = False) -> None:
        state = _state(ctx)

        async def run(client: AsyncCloudClient) -> Any:
            action = await getattr(getattr(client, attr), method)(resource_id)
            return await finish(client, action, wait)

        _emit(with_cloud(state, run), state=state)


for _attr, _name, _help in (
    ("datacenters", "datacenter", "Datacenters"),
    ("locations", "location", "Locations"),
    ("server_types", "server-type", "Server types"),
    ("load_balancer_types", "load-balancer-type", "Load Balancer types"),
    ("isos", "iso", "ISO images"),
):
    _register_collection(_group(_name, _help), _attr, labels=False)


# servers

server_app = _group("server", "Servers")
_register_resource(server_app, "servers", "server", protectable=False)
for _command, _method, _help in (
    ("poweron", "power_on", "Start a server"),
    ("poweroff", "power_off", "Cut power to a server"),
    ("reboot", "reboot", "Soft-reboot a server (ACPI)"),
    ("reset", "reset", "Hard-reset a server"),
    ("shutdown", "shutdown", "Shut a server down gracefully (ACPI)"),
    ("disable-rescue", "disable_rescue", "Disable the rescue system"),
    ("enable-backup", "enable_backup", "Enable automatic backups"),
    ("disable-backup", "disable_backup", "Disable automatic backups"),
    ("detach-iso", "detach_iso", "Detach the mounted ISO"),
    ("remove-from-placement-group", "remove_from_placement_group", "Leave the placement group"),
):
    _register_action(server_app, _command, "servers", _method, _help)


@server_app.command("create")
def server_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name", help="Server name")],
    server_type: Annotated[str, typer.Option("--type", help="Server type, e.g. cx22")],
    image: Annotated[str, typer.Option("--image", help="Image name or id")],
    location: Annotated[str | None, typer.Option("--location")] = None,
    datacenter: Annotated[str | None, typer.Option("--datacenter")] = None,
    ssh_key: Annotated[list[str] | None, typer.Option("--ssh-key", help="SSH key name or id (repeatable)")] = None,
    network: Annotated[list[int] | None, typer.Option("--network", help="Network id (repeatable)")] = None,
    firewall: Annotated[list[int] | None, typer.Option("--firewall", help="Firewall id (repeatable)")] = None,
    volume: Annotated[list[int] | None, typer.Option("--volume", help="Volume id (repeatable)")] = None,
    placement_group: Annotated[int | None, typer.Option("--placement-group")] = None,
    user_data_file: Annotated[Path | None, typer.Option("--user-data-from-file", help="cloud-init file")] = None,
    start: Annotated[bool, typer.Option("--start/--no-start")] = True,
    label: LabelsOpt = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    user_data = user_data_file.read_text(encoding="utf-8") if user_data_file else None

    async def run(client: AsyncCloudClient) -> Any:
        result = await client.servers.create(
            name=name,
            server_type=server_type,
            image=image,
            location=location,
            datacenter=datacenter,
            ssh_keys=ssh_key,
            user_data=user_data,
            labels=_parse_key_values(label),
            volumes=volume,
            networks=network,
            firewalls=firewall,
            placement_group=placement_group,
            start_after_create=start,
        )
        if wait:
            result.action = await finish(client, result.action, wait)
            result.next_actions = await finish_all(client, result.next_actions, wait)
            result.server = await client.servers.get(result.server.id)
        return result

    _emit(with_cloud(state, run), state=state)


@server_app.command("rebuild")
def server_rebuild(
    ctx: typer.Context,
    resource_id: IdArg,
    image: Annotated[str, typer.Option("--image", help="Image name or id")],
    yes: YesOpt = False,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    confirm(f"Rebuild server {resource_id} from {image}? All data on it will be lost.", yes)

    async def run(client: AsyncCloudClient) -> Any:
        action, root_password = await client.servers.rebuild(resource_id, image)
        return {"action": await finish(client, action, wait), "root_password": root_password}

    _emit(with_cloud(state, run), state=state)


@server_app.command("change-type")
def server_change_type(
    ctx: typer.Context,
    resource_id: IdArg,
    server_type: Annotated[str, typer.Option("--type", help="Target server type")],
    upgrade_disk: Annotated[bool, typer.Option("--upgrade-disk/--keep-disk")] = False,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        action = await client.servers.change_type(resource_id, server_type, upgrade_disk=upgrade_disk)
        return await finish(client, action, wait)

    _emit(with_cloud(state, run), state=state)


@server_app.command("enable-rescue")
def server_enable_rescue(
    ctx: typer.Context,
    resource_id: IdArg,
    rescue_type: Annotated[str, typer.Option("--type")] = "linux64",
    ssh_key: Annotated[list[int] | None, typer.Option("--ssh-key", help="SSH key id (repeatable)")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        action, root_password = await client.servers.enable_rescue(resource_id, rescue_type=rescue_type, ssh_keys=ssh_key)
        return {"action": await finish(client, action, wait), "root_password": root_password}

    _emit(with_cloud(state, run), state=state)


@server_app.command("reset-password")
def server_reset_password(ctx: typer.Context, resource_id: IdArg, wait: WaitOpt = False) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        action, root_password = await client.servers.reset_password(resource_id)
        return {"action": await finish(client, action, wait), "root_password": root_password}

    _emit(with_cloud(state, run), state=state)


@server_app.command("create-image")
def server_create_image(
    ctx: typer.Context,
    resource_id: IdArg,
    description: Annotated[str | None, typer.Option("--description")] = None,
    image_type: Annotated[str, typer.Option("--type", help="snapshot or backup")] = "snapshot",
    label: LabelsOpt = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    if image_type not in ("snapshot", "backup"):
        raise typer.BadParameter("--type must be snapshot or backup")

    async def run(client: AsyncCloudClient) -> Any:
        image, action = await client.servers.create_image(
            resource_id,
            description=description,
            image_type=image_type,  # type: ignore[arg-type]
            labels=_parse_key_values(label),
        )
        return {"image": image, "action": await finish(client, action, wait)}

    _emit(with_cloud(state, run), state=state)


@server_app.command("attach-iso")
def server_attach_iso(
    ctx: typer.Context,
    resource_id: IdArg,
    iso: Annotated[str, typer.Argument(help="ISO name or id")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.servers.attach_iso(resource_id, iso), wait)

    _emit(with_cloud(state, run), state=state)


@server_app.command("set-rdns")
def server_set_rdns(
    ctx: typer.Context,
    resource_id: IdArg,
    ip: Annotated[str, typer.Option("--ip", help="Public IP of the server")],
    hostname: Annotated[str | None, typer.Option("--hostname", help="PTR value; omit to reset")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.servers.change_dns_ptr(resource_id, ip, hostname), wait)

    _emit(with_cloud(state, run), state=state)


@server_app.command("protect")
def server_protect(
    ctx: typer.Context,
    resource_id: IdArg,
    delete: Annotated[bool | None, typer.Option("--delete/--no-delete")] = None,
    rebuild: Annotated[bool | None, typer.Option("--rebuild/--no-rebuild")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        action = await client.servers.change_protection(resource_id, delete=delete, rebuild=rebuild)
        return await finish(client, action, wait)

    _emit(with_cloud(state, run), state=state)


@server_app.command("request-console")
def server_request_console(ctx: typer.Context, resource_id: IdArg) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await client.servers.request_console(resource_id)

    _emit(with_cloud(state, run), state=state)


@server_app.command("attach-network")
def server_attach_network(
    ctx: typer.Context,
    resource_id: IdArg,
    network: Annotated[int, typer.Option("--network", help="Network id")],
    ip: Annotated[str | None, typer.Option("--ip")] = None,
    alias_ip: Annotated[list[str] | None, typer.Option("--alias-ip")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        action = await client.servers.attach_to_network(resource_id, network, ip=ip, alias_ips=alias_ip)
        return await finish(client, action, wait)

    _emit(with_cloud(state, run), state=state)


@server_app.command("detach-network")
def server_detach_network(
    ctx: typer.Context,
    resource_id: IdArg,
    network: Annotated[int, typer.Option("--network", help="Network id")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.servers.detach_from_network(resource_id, network), wait)

    _emit(with_cloud(state, run), state=state)


@server_app.command("add-to-placement-group")
def server_add_to_placement_group(
    ctx: typer.Context,
    resource_id: IdArg,
    placement_group: Annotated[int, typer.Option("--placement-group")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.servers.add_to_placement_group(resource_id, placement_group), wait)

    _emit(with_cloud(state, run), state=state)


@server_app.command("metrics")
def server_metrics(
    ctx: typer.Context,
    resource_id: IdArg,
    metric_type: Annotated[str, typer.Option("--type", help="cpu, disk or network")],
    start: Annotated[str, typer.Option("--start", help="ISO-8601 timestamp")],
    end: Annotated[str, typer.Option("--end", help="ISO-8601 timestamp")],
    step: Annotated[int | None, typer.Option("--step", help="Seconds per sample")] = None,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await client.servers.metrics(resource_id, metric_type=metric_type, start=start, end=end, step=step)

    _emit(with_cloud(state, run), state=state)


# networks

network_app = _group("network", "Private networks")
_register_resource(network_app, "networks", "network")


@network_app.command("create")
def network_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name")],
    ip_range: Annotated[str, typer.Option("--ip-range", help="e.g. 10.0.0.0/16")],
    label: LabelsOpt = None,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await client.networks.create(name=name, ip_range=ip_range, labels=_parse_key_values(label))

    _emit(with_cloud(state, run), state=state)


@network_app.command("add-subnet")
def network_add_subnet(
    ctx: typer.Context,
    resource_id: IdArg,
    network_zone: Annotated[str, typer.Option("--network-zone", help="e.g. eu-central")],
    subnet_type: Annotated[str, typer.Option("--type", help="cloud, server or vswitch")] = "cloud",
    ip_range: Annotated[str | None, typer.Option("--ip-range")] = None,
    vswitch_id: Annotated[int | None, typer.Option("--vswitch-id")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        action = await client.networks.add_subnet(
            resource_id,
            network_zone=network_zone,
            subnet_type=subnet_type,
            ip_range=ip_range,
            vswitch_id=vswitch_id,
        )
        return await finish(client, action, wait)

    _emit(with_cloud(state, run), state=state)


@network_app.command("delete-subnet")
def network_delete_subnet(
    ctx: typer.Context,
    resource_id: IdArg,
    ip_range: Annotated[str, typer.Option("--ip-range")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.networks.delete_subnet(resource_id, ip_range), wait)

    _emit(with_cloud(state, run), state=state)


@network_app.command("add-route")
def network_add_route(
    ctx: typer.Context,
    resource_id: IdArg,
    destination: Annotated[str, typer.Option("--destination")],
    gateway: Annotated[str, typer.Option("--gateway")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        action = await client.networks.add_route(resource_id, destination=destination, gateway=gateway)
        return await finish(client, action, wait)

    _emit(with_cloud(state, run), state=state)


@network_app.command("delete-route")
def network_delete_route(
    ctx: typer.Context,
    resource_id: IdArg,
    destination: Annotated[str, typer.Option("--destination")],
    gateway: Annotated[str, typer.Option("--gateway")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        action = await client.networks.delete_route(resource_id, destination=destination, gateway=gateway)
        return await finish(client, action, wait)

    _emit(with_cloud(state, run), state=state)


@network_app.command("change-ip-range")
def network_change_ip_range(
    ctx: typer.Context,
    resource_id: IdArg,
    ip_range: Annotated[str, typer.Option("--ip-range")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.networks.change_ip_range(resource_id, ip_range), wait)

    _emit(with_cloud(state, run), state=state)


# firewalls

firewall_app = _group("firewall", "Firewalls")
_register_resource(firewall_app, "firewalls", "firewall", protectable=False)


def _firewall_targets(servers: list[int] | None, selectors: list[str] | None) -> list[dict[str, Any]]:
    targets: list[dict[str, Any]] = [{"type": "server", "server": {"id": sid}} for sid in servers or []]
    targets += [{"type": "label_selector", "label_selector": {"selector": sel}} for sel in selectors or []]
    if not targets:
        raise typer.BadParameter("give at least one --server or --selector")
    return targets


@firewall_app.command("create")
def firewall_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name")],
    rules_json: Annotated[str | None, typer.Option("--rules-json", help="JSON array of rules")] = None,
    label: LabelsOpt = None,
) -> None:
    state = _state(ctx)
    rules = _parse_json(rules_json, "--rules-json", expect=list)

    async def run(client: AsyncCloudClient) -> Any:
        firewall, actions = await client.firewalls.create(name=name, rules=rules, labels=_parse_key_values(label))
        return {"firewall": firewall, "actions": actions}

    _emit(with_cloud(state, run), state=state)


@firewall_app.command("set-rules")
def firewall_set_rules(
    ctx: typer.Context,
    resource_id: IdArg,
    rules_json: Annotated[str, typer.Option("--rules-json", help="JSON array of rules; [] clears them")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    rules = _parse_json(rules_json, "--rules-json", expect=list)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish_all(client, await client.firewalls.set_rules(resource_id, rules), wait)

    _emit(with_cloud(state, run), state=state)


@firewall_app.command("apply")
def firewall_apply(
    ctx: typer.Context,
    resource_id: IdArg,
    server: Annotated[list[int] | None, typer.Option("--server", help="Server id (repeatable)")] = None,
    selector: Annotated[list[str] | None, typer.Option("--selector", help="Label selector (repeatable)")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    targets = _firewall_targets(server, selector)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish_all(client, await client.firewalls.apply_to_resources(resource_id, targets), wait)

    _emit(with_cloud(state, run), state=state)


@firewall_app.command("remove")
def firewall_remove(
    ctx: typer.Context,
    resource_id: IdArg,
    server: Annotated[list[int] | None, typer.Option("--server", help="Server id (repeatable)")] = None,
    selector: Annotated[list[str] | None, typer.Option("--selector", help="Label selector (repeatable)")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    targets = _firewall_targets(server, selector)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish_all(client, await client.firewalls.remove_from_resources(resource_id, targets), wait)

    _emit(with_cloud(state, run), state=state)


# floating and primary IPs

floating_ip_app = _group("floating-ip", "Floating IPs")
_register_resource(floating_ip_app, "floating_ips", "floating IP")
_register_action(floating_ip_app, "unassign", "floating_ips", "unassign", "Unassign from its server")

primary_ip_app = _group("primary-ip", "Primary IPs")
_register_resource(primary_ip_app, "primary_ips", "primary IP")
_register_action(primary_ip_app, "unassign", "primary_ips", "unassign", "Unassign from its server")


@floating_ip_app.command("create")
def floating_ip_create(
    ctx: typer.Context,
    ip_type: Annotated[str, typer.Option("--type", help="ipv4 or ipv6")],
    name: Annotated[str | None, typer.Option("--name")] = None,
    description: Annotated[str | None, typer.Option("--description")] = None,
    home_location: Annotated[str | None, typer.Option("--home-location")] = None,
    server: Annotated[int | None, typer.Option("--server")] = None,
    label: LabelsOpt = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        ip, action = await client.floating_ips.create(
            ip_type=ip_type,  # type: ignore[arg-type]
            name=name,
            description=description,
            home_location=home_location,
            server=server,
            labels=_parse_key_values(label),
        )
        return {"floating_ip": ip, "action": await finish(client, action, wait)}

    _emit(with_cloud(state, run), state=state)


@primary_ip_app.command("create")
def primary_ip_create(
    ctx: typer.Context,
    ip_type: Annotated[str, typer.Option("--type", help="ipv4 or ipv6")],
    name: Annotated[str, typer.Option("--name")],
    assignee_id: Annotated[int | None, typer.Option("--assignee-id", help="Server id")] = None,
    datacenter: Annotated[str | None, typer.Option("--datacenter")] = None,
    auto_delete: Annotated[bool | None, typer.Option("--auto-delete/--no-auto-delete")] = None,
    label: LabelsOpt = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        ip, action = await client.primary_ips.create(
            ip_type=ip_type,  # type: ignore[arg-type]
            name=name,
            assignee_id=assignee_id,
            datacenter=datacenter,
            auto_delete=auto_delete,
            labels=_parse_key_values(label),
        )
        return {"primary_ip": ip, "action": await finish(client, action, wait)}

    _emit(with_cloud(state, run), state=state)


def _register_ip_commands(group: typer.Typer, attr: str) -> None:
    @group.command("assign")
    def assign_cmd(
        ctx: typer.Context,
        resource_id: IdArg,
        server: Annotated[int, typer.Option("--server", help="Server id")],
        wait: WaitOpt = False,
    ) -> None:
        state = _state(ctx)

        async def run(client: AsyncCloudClient) -> Any:
            return await finish(client, await getattr(client, attr).assign(resource_id, server), wait)

        _emit(with_cloud(state, run), state=state)

    @group.command("set-rdns")
    def set_rdns_cmd(
        ctx: typer.Context,
        resource_id: IdArg,
        ip: Annotated[str, typer.Option("--ip")],
        hostname: Annotated[str | None, typer.Option("--hostname", help="PTR value; omit to reset")] = None,
        wait: WaitOpt = False,
    ) -> None:
        state = _state(ctx)

        async def run(client: AsyncCloudClient) -> Any:
            return await finish(client, await getattr(client, attr).change_dns_ptr(resource_id, ip, hostname), wait)

        _emit(with_cloud(state, run), state=state)


for _ip_app, _ip_attr in ((floating_ip_app, "floating_ips"), (primary_ip_app, "primary_ips")):
    _register_ip_commands(_ip_app, _ip_attr)


# volumes

volume_app = _group("volume", "Block storage volumes")
_register_resource(volume_app, "volumes", "volume")
_register_action(volume_app, "detach", "volumes", "detach", "Detach from its server")


@volume_app.command("create")
def volume_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name")],
    size: Annotated[int, typer.Option("--size", help="Size in GB")],
    location: Annotated[str | None, typer.Option("--location")] = None,
    server: Annotated[int | None, typer.Option("--server")] = None,
    fs_format: Annotated[str | None, typer.Option("--format", help="ext4 or xfs")] = None,
    automount: Annotated[bool | None, typer.Option("--automount/--no-automount")] = None,
    label: LabelsOpt = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        volume, action, next_actions = await client.volumes.create(
            name=name,
            size=size,
            location=location,
            server=server,
            format=fs_format,
            automount=automount,
            labels=_parse_key_values(label),
        )
        return {
            "volume": volume,
            "action": await finish(client, action, wait),
            "next_actions": await finish_all(client, next_actions, wait),
        }

    _emit(with_cloud(state, run), state=state)


@volume_app.command("attach")
def volume_attach(
    ctx: typer.Context,
    resource_id: IdArg,
    server: Annotated[int, typer.Option("--server")],
    automount: Annotated[bool | None, typer.Option("--automount/--no-automount")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.volumes.attach(resource_id, server, automount=automount), wait)

    _emit(with_cloud(state, run), state=state)


@volume_app.command("resize")
def volume_resize(
    ctx: typer.Context,
    resource_id: IdArg,
    size: Annotated[int, typer.Option("--size", help="New size in GB; volumes only grow")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.volumes.resize(resource_id, size), wait)

    _emit(with_cloud(state, run), state=state)


# load balancers

load_balancer_app = _group("load-balancer", "Load Balancers")
_register_resource(load_balancer_app, "load_balancers", "load balancer")
for _command, _method, _help in (
    ("enable-public-interface", "enable_public_interface", "Enable the public interface"),
    ("disable-public-interface", "disable_public_interface", "Disable the public interface"),
):
    _register_action(load_balancer_app, _command, "load_balancers", _method, _help)


def _lb_target(server: int | None, selector: str | None, ip: str | None, use_private_ip: bool) -> dict[str, Any]:
    if server is not None:
        return {"type": "server", "server": {"id": server}, "use_private_ip": use_private_ip}
    if selector is not None:
        return {"type": "label_selector", "label_selector": {"selector": selector}, "use_private_ip": use_private_ip}
    if ip is not None:
        return {"type": "ip", "ip": {"ip": ip}}
    raise typer.BadParameter("give one of --server, --selector or --ip")


@load_balancer_app.command("create")
def load_balancer_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name")],
    load_balancer_type: Annotated[str, typer.Option("--type", help="e.g. lb11")],
    location: Annotated[str | None, typer.Option("--location")] = None,
    network_zone: Annotated[str | None, typer.Option("--network-zone")] = None,
    algorithm: Annotated[str | None, typer.Option("--algorithm", help="round_robin or least_connections")] = None,
    network: Annotated[int | None, typer.Option("--network")] = None,
    public_interface: Annotated[bool | None, typer.Option("--public-interface/--no-public-interface")] = None,
    label: LabelsOpt = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        lb, action = await client.load_balancers.create(
            name=name,
            load_balancer_type=load_balancer_type,
            location=location,
            network_zone=network_zone,
            algorithm=algorithm,
            labels=_parse_key_values(label),
            network=network,
            public_interface=public_interface,
        )
        return {"load_balancer": lb, "action": await finish(client, action, wait)}

    _emit(with_cloud(state, run), state=state)


@load_balancer_app.command("add-target")
def load_balancer_add_target(
    ctx: typer.Context,
    resource_id: IdArg,
    server: Annotated[int | None, typer.Option("--server")] = None,
    selector: Annotated[str | None, typer.Option("--selector")] = None,
    ip: Annotated[str | None, typer.Option("--ip")] = None,
    use_private_ip: Annotated[bool, typer.Option("--use-private-ip")] = False,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    target = _lb_target(server, selector, ip, use_private_ip)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.load_balancers.add_target(resource_id, target), wait)

    _emit(with_cloud(state, run), state=state)


@load_balancer_app.command("remove-target")
def load_balancer_remove_target(
    ctx: typer.Context,
    resource_id: IdArg,
    server: Annotated[int | None, typer.Option("--server")] = None,
    selector: Annotated[str | None, typer.Option("--selector")] = None,
    ip: Annotated[str | None, typer.Option("--ip")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    target = _lb_target(server, selector, ip, False)
    target.pop("use_private_ip", None)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.load_balancers.remove_target(resource_id, target), wait)

    _emit(with_cloud(state, run), state=state)


def _lb_service(protocol: str, listen_port: int | None, destination_port: int | None, proxyprotocol: bool | None) -> dict[str, Any]:
    service: dict[str, Any] = {"protocol": protocol}
    if listen_port is not None:
        service["listen_port"] = listen_port
    if destination_port is not None:
        service["destination_port"] = destination_port
    if proxyprotocol is not None:
        service["proxyprotocol"] = proxyprotocol
    return service


@load_balancer_app.command("add-service")
def load_balancer_add_service(
    ctx: typer.Context,
    resource_id: IdArg,
    protocol: Annotated[str, typer.Option("--protocol", help="tcp, http or https")],
    listen_port: Annotated[int | None, typer.Option("--listen-port")] = None,
    destination_port: Annotated[int | None, typer.Option("--destination-port")] = None,
    proxyprotocol: Annotated[bool | None, typer.Option("--proxy-protocol/--no-proxy-protocol")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    service = _lb_service(protocol, listen_port, destination_port, proxyprotocol)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.load_balancers.add_service(resource_id, service), wait)

    _emit(with_cloud(state, run), state=state)


@load_balancer_app.command("update-service")
def load_balancer_update_service(
    ctx: typer.Context,
    resource_id: IdArg,
    listen_port: Annotated[int, typer.Option("--listen-port", help="Port identifying the service")],
    protocol: Annotated[str | None, typer.Option("--protocol")] = None,
    destination_port: Annotated[int | None, typer.Option("--destination-port")] = None,
    proxyprotocol: Annotated[bool | None, typer.Option("--proxy-protocol/--no-proxy-protocol")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    service = _lb_service(protocol or "", listen_port, destination_port, proxyprotocol)
    if not protocol:
        service.pop("protocol")

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.load_balancers.update_service(resource_id, service), wait)

    _emit(with_cloud(state, run), state=state)


@load_balancer_app.command("delete-service")
def load_balancer_delete_service(
    ctx: typer.Context,
    resource_id: IdArg,
    listen_port: Annotated[int, typer.Option("--listen-port")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.load_balancers.delete_service(resource_id, listen_port), wait)

    _emit(with_cloud(state, run), state=state)


@load_balancer_app.command("change-algorithm")
def load_balancer_change_algorithm(
    ctx: typer.Context,
    resource_id: IdArg,
    algorithm: Annotated[str, typer.Option("--algorithm", help="round_robin or least_connections")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.load_balancers.change_algorithm(resource_id, algorithm), wait)

    _emit(with_cloud(state, run), state=state)


@load_balancer_app.command("change-type")
def load_balancer_change_type(
    ctx: typer.Context,
    resource_id: IdArg,
    load_balancer_type: Annotated[str, typer.Option("--type")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.load_balancers.change_type(resource_id, load_balancer_type), wait)

    _emit(with_cloud(state, run), state=state)


@load_balancer_app.command("attach-network")
def load_balancer_attach_network(
    ctx: typer.Context,
    resource_id: IdArg,
    network: Annotated[int, typer.Option("--network")],
    ip: Annotated[str | None, typer.Option("--ip")] = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.load_balancers.attach_to_network(resource_id, network, ip=ip), wait)

    _emit(with_cloud(state, run), state=state)


@load_balancer_app.command("detach-network")
def load_balancer_detach_network(
    ctx: typer.Context,
    resource_id: IdArg,
    network: Annotated[int, typer.Option("--network")],
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await finish(client, await client.load_balancers.detach_from_network(resource_id, network), wait)

    _emit(with_cloud(state, run), state=state)


# images, keys, certificates, placement groups

image_app = _group("image", "Images, snapshots and backups")
_register_resource(image_app, "images", "image")

ssh_key_app = _group("ssh-key", "SSH keys")
_register_resource(ssh_key_app, "ssh_keys", "SSH key", protectable=False)


@ssh_key_app.command("create")
def ssh_key_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name")],
    public_key: Annotated[str | None, typer.Option("--public-key")] = None,
    public_key_file: Annotated[Path | None, typer.Option("--public-key-from-file")] = None,
    label: LabelsOpt = None,
) -> None:
    state = _state(ctx)
    if public_key_file is not None:
        public_key = public_key_file.read_text(encoding="utf-8").strip()
    if not public_key:
        raise typer.BadParameter("give --public-key or --public-key-from-file")

    async def run(client: AsyncCloudClient) -> Any:
        return await client.ssh_keys.create(name=name, public_key=public_key, labels=_parse_key_values(label))

    _emit(with_cloud(state, run), state=state)


certificate_app = _group("certificate", "TLS certificates")
_register_resource(certificate_app, "certificates", "certificate", protectable=False)


@certificate_app.command("create")
def certificate_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name")],
    certificate_type: Annotated[str, typer.Option("--type", help="uploaded or managed")] = "uploaded",
    cert_file: Annotated[Path | None, typer.Option("--cert-file", help="PEM certificate (uploaded)")] = None,
    key_file: Annotated[Path | None, typer.Option("--key-file", help="PEM private key (uploaded)")] = None,
    domain: Annotated[list[str] | None, typer.Option("--domain", help="Domain name (managed, repeatable)")] = None,
    label: LabelsOpt = None,
    wait: WaitOpt = False,
) -> None:
    state = _state(ctx)
    if certificate_type == "uploaded" and (cert_file is None or key_file is None):
        raise typer.BadParameter("uploaded certificates need --cert-file and --key-file")
    if certificate_type == "managed" and not domain:
        raise typer.BadParameter("managed certificates need at least one --domain")
    certificate = cert_file.read_text(encoding="utf-8") if cert_file else None
    private_key = key_file.read_text(encoding="utf-8") if key_file else None

    async def run(client: AsyncCloudClient) -> Any:
        cert, action = await client.certificates.create(
            name=name,
            certificate_type=certificate_type,  # type: ignore[arg-type]
            certificate=certificate,
            private_key=private_key,
            domain_names=domain,
            labels=_parse_key_values(label),
        )
        return {"certificate": cert, "action": await finish(client, action, wait)}

    _emit(with_cloud(state, run), state=state)


placement_group_app = _group("placement-group", "Placement groups")
_register_resource(placement_group_app, "placement_groups", "placement group", protectable=False)


@placement_group_app.command("create")
def placement_group_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name")],
    label: LabelsOpt = None,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await client.placement_groups.create(name=name, labels=_parse_key_values(label))

    _emit(with_cloud(state, run), state=state)


# actions

action_app = _group("action", "Asynchronous actions")


@action_app.command("list")
def action_list(
    ctx: typer.Context,
    status: Annotated[str | None, typer.Option("--status", help="running, success or error")] = None,
    columns: ColumnsOpt = None,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await client.actions.list(status=status)

    _emit(with_cloud(state, run), state=state, columns=columns or DEFAULT_COLUMNS["actions"])


@action_app.command("get")
def action_get(ctx: typer.Context, resource_id: IdArg) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await client.actions.get(resource_id)

    _emit(with_cloud(state, run), state=state)


@action_app.command("wait")
def action_wait(
    ctx: typer.Context,
    resource_id: IdArg,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Seconds before giving up")] = None,
) -> None:
    state = _state(ctx)

    async def run(client: AsyncCloudClient) -> Any:
        return await client.actions.wait(resource_id, timeout=timeout)

    _emit(with_cloud(state, run), state=state)
