"""``hetzner robot``: credentials plus the dedicated-server (Robot) API."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from hetzner_cli.cli.common import (
    _emit,
    _parse_json,
    _state,
    confirm,
    err_console,
    handle_errors,
    manager,
    prompt_robot_login,
    with_robot,
)
from hetzner_cli.client import AsyncRobotClient
from hetzner_cli.credentials import read_password_from_stdin, stored_robot_credentials

robot_app = typer.Typer(no_args_is_help=True, help="Hetzner Robot API (dedicated servers)")

ServerArg = Annotated[str, typer.Argument(help="Server number or main IP")]
YesOpt = Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")]
ColumnsOpt = Annotated[str | None, typer.Option("--columns", help="Comma separated table columns")]
KeyOpt = Annotated[list[str] | None, typer.Option("--key", help="SSH key fingerprint (repeatable)")]


def _group(name: str, help_text: str) -> typer.Typer:
    group = typer.Typer(no_args_is_help=True, help=help_text)
    robot_app.add_typer(group, name=name)
    return group


def _emit_robot(ctx: typer.Context, call: Any, *, columns: str | None = None, done: str | None = None) -> None:
    state = _state(ctx)
    result = with_robot(state, call)
    if result is None and done:
        typer.echo(done)
        return
    _emit(result, state=state, columns=columns)


@robot_app.callback()
def robot_main(
    ctx: typer.Context,
    user: Annotated[str | None, typer.Option("--user", "-u", help="Robot web service user")] = None,
    password: Annotated[
        str | None,
        typer.Option("--password", "-p", help="Robot web service password; '-' reads it from stdin"),
    ] = None,
) -> None:
    state = _state(ctx)
    state.user = user
    state.password = password


@robot_app.command("login")
def robot_login(ctx: typer.Context) -> None:
    """Store Robot credentials in the keychain (or the config file)."""

    state = _state(ctx)
    store = manager(state)
    with handle_errors():
        if state.user and state.password:
            password = read_password_from_stdin() if state.password == "-" else state.password
            where = store.save_robot_credentials(state.user, password)
            typer.echo(f"Credentials for {state.user} saved to {where}.")
            return
        user, _ = prompt_robot_login(store)
    typer.echo(f"Authentication configured for {user}.")


@robot_app.command("logout")
def robot_logout(ctx: typer.Context) -> None:
    state = _state(ctx)
    with handle_errors():
        manager(state).clear_robot_credentials()
    typer.echo("Credentials cleared.")


@robot_app.command("whoami")
def robot_whoami(
    ctx: typer.Context,
    check: Annotated[bool, typer.Option("--check", help="Call the API to verify the credentials")] = False,
) -> None:
    state = _state(ctx)
    with handle_errors():
        stored = stored_robot_credentials(manager=manager(state))
    if stored is None:
        err_console.print("Not authenticated. Run: hetzner robot login")
        raise typer.Exit(code=1)
    user, _, source = stored
    info: dict[str, Any] = {"user": user, "source": source}
    if check:

        async def run(client: AsyncRobotClient) -> Any:
            return await client.servers.list()

        info["servers"] = len(with_robot(state, run))
    _emit(info, state=state)


# servers and cancellation

server_app = _group("server", "Dedicated servers")


@server_app.command("list")
def server_list(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.servers.list()

    _emit_robot(ctx, run, columns=columns or "server_number,server_name,server_ip,product,dc,status,paid_until")


@server_app.command("get")
def server_get(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.servers.get(server)

    _emit_robot(ctx, run)


@server_app.command("rename")
def server_rename(ctx: typer.Context, server: ServerArg, name: Annotated[str, typer.Argument()]) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.servers.rename(server, name)

    _emit_robot(ctx, run)


@server_app.command("cancellation")
def server_cancellation(ctx: typer.Context, server: ServerArg) -> None:
    """Show cancellation status and the earliest possible date."""

    async def run(client: AsyncRobotClient) -> Any:
        return await client.servers.get_cancellation(server)

    _emit_robot(ctx, run)


@server_app.command("cancel")
def server_cancel(
    ctx: typer.Context,
    server: ServerArg,
    date: Annotated[str | None, typer.Option("--date", help="yyyy-mm-dd or 'now'; default is the earliest date")] = None,
    reason: Annotated[list[str] | None, typer.Option("--reason")] = None,
    yes: YesOpt = False,
) -> None:
    confirm(f"Cancel server {server}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.servers.cancel(server, cancellation_date=date, reasons=reason)

    _emit_robot(ctx, run)


@server_app.command("revoke-cancellation")
def server_revoke_cancellation(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.servers.revoke_cancellation(server)

    _emit_robot(ctx, run, done=f"Cancellation of server {server} revoked.")


# reset

reset_app = _group("reset", "Hardware and software resets")


@reset_app.command("list")
def reset_list(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.reset.list()

    _emit_robot(ctx, run, columns=columns or "server_number,server_ip,type,operating_status")


@reset_app.command("get")
def reset_get(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.reset.get(server)

    _emit_robot(ctx, run)


@reset_app.command("execute")
def reset_execute(
    ctx: typer.Context,
    server: ServerArg,
    reset_type: Annotated[str, typer.Option("--type", help="sw, hw, man or power")] = "sw",
    yes: YesOpt = False,
) -> None:
    if reset_type not in ("sw", "hw", "man", "power"):
        raise typer.BadParameter("--type must be one of sw, hw, man, power")
    confirm(f"Execute {reset_type} reset on server {server}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.reset.execute(server, reset_type)  # type: ignore[arg-type]

    _emit_robot(ctx, run)


# boot configuration

boot_app = _group("boot", "Rescue system and Linux installation")


@boot_app.command("show")
def boot_show(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.boot.config(server)

    _emit_robot(ctx, run)


@boot_app.command("rescue")
def boot_rescue(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.boot.rescue(server)

    _emit_robot(ctx, run)


@boot_app.command("rescue-activate")
def boot_rescue_activate(
    ctx: typer.Context,
    server: ServerArg,
    os: Annotated[str, typer.Option("--os")] = "linux",
    arch: Annotated[int | None, typer.Option("--arch", help="32 or 64")] = None,
    key: KeyOpt = None,
) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.boot.activate_rescue(server, os=os, arch=arch, authorized_keys=key)

    _emit_robot(ctx, run)


@boot_app.command("rescue-deactivate")
def boot_rescue_deactivate(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.boot.deactivate_rescue(server)

    _emit_robot(ctx, run)


@boot_app.command("rescue-last")
def boot_rescue_last(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.boot.last_rescue(server)

    _emit_robot(ctx, run)


@boot_app.command("linux")
def boot_linux(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.boot.linux(server)

    _emit_robot(ctx, run)


@boot_app.command("linux-activate")
def boot_linux_activate(
    ctx: typer.Context,
    server: ServerArg,
    dist: Annotated[str, typer.Option("--dist", help="Distribution name as listed by 'boot linux'")],
    arch: Annotated[int | None, typer.Option("--arch")] = None,
    lang: Annotated[str | None, typer.Option("--lang")] = None,
    key: KeyOpt = None,
) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.boot.activate_linux(server, dist=dist, arch=arch, lang=lang, authorized_keys=key)

    _emit_robot(ctx, run)


@boot_app.command("linux-deactivate")
def boot_linux_deactivate(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.boot.deactivate_linux(server)

    _emit_robot(ctx, run)


@boot_app.command("linux-last")
def boot_linux_last(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.boot.last_linux(server)

    _emit_robot(ctx, run)


# IPs and subnets share one command shape


def _register_addresses(group: typer.Typer, attr: str, columns: str) -> None:
    @group.command("list")
    def list_cmd(ctx: typer.Context, columns_opt: ColumnsOpt = None) -> None:
        async def run(client: AsyncRobotClient) -> Any:
            return await getattr(client, attr).list()

        _emit_robot(ctx, run, columns=columns_opt or columns)

    @group.command("get")
    def get_cmd(ctx: typer.Context, address: Annotated[str, typer.Argument()]) -> None:
        async def run(client: AsyncRobotClient) -> Any:
            return await getattr(client, attr).get(address)

        _emit_robot(ctx, run)

    @group.command("update")
    def update_cmd(
        ctx: typer.Context,
        address: Annotated[str, typer.Argument()],
        warnings: Annotated[bool | None, typer.Option("--traffic-warnings/--no-traffic-warnings")] = None,
        hourly: Annotated[int | None, typer.Option("--hourly", help="Hourly limit in MB")] = None,
        daily: Annotated[int | None, typer.Option("--daily", help="Daily limit in MB")] = None,
        monthly: Annotated[int | None, typer.Option("--monthly", help="Monthly limit in GB")] = None,
    ) -> None:
        async def run(client: AsyncRobotClient) -> Any:
            return await getattr(client, attr).update(
                address,
                traffic_warnings=warnings,
                traffic_hourly=hourly,
                traffic_daily=daily,
                traffic_monthly=monthly,
            )

        _emit_robot(ctx, run)

    @group.command("mac")
    def mac_cmd(ctx: typer.Context, address: Annotated[str, typer.Argument()]) -> None:
        async def run(client: AsyncRobotClient) -> Any:
            return await getattr(client, attr).get_mac(address)

        _emit_robot(ctx, run)

    @group.command("mac-generate")
    def mac_generate_cmd(ctx: typer.Context, address: Annotated[str, typer.Argument()]) -> None:
        async def run(client: AsyncRobotClient) -> Any:
            return await getattr(client, attr).generate_mac(address)

        _emit_robot(ctx, run)

    @group.command("mac-delete")
    def mac_delete_cmd(ctx: typer.Context, address: Annotated[str, typer.Argument()], yes: YesOpt = False) -> None:
        confirm(f"Remove the separate MAC of {address}?", yes)

        async def run(client: AsyncRobotClient) -> Any:
            return await getattr(client, attr).delete_mac(address)

        _emit_robot(ctx, run, done=f"Separate MAC of {address} removed.")


_register_addresses(_group("ip", "Single IP addresses"), "ips", "ip,server_number,server_ip,locked,traffic_warnings")
_register_addresses(_group("subnet", "Subnets"), "subnets", "ip,mask,gateway,server_number,server_ip")


# failover

failover_app = _group("failover", "Failover IPs")


@failover_app.command("list")
def failover_list(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.failover.list()

    _emit_robot(ctx, run, columns=columns or "ip,netmask,server_number,server_ip,active_server_ip")


@failover_app.command("get")
def failover_get(ctx: typer.Context, ip: Annotated[str, typer.Argument()]) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.failover.get(ip)

    _emit_robot(ctx, run)


@failover_app.command("switch")
def failover_switch(
    ctx: typer.Context,
    ip: Annotated[str, typer.Argument(help="Failover IP")],
    target: Annotated[str, typer.Argument(help="Main IP of the server to route to")],
    yes: YesOpt = False,
) -> None:
    confirm(f"Route {ip} to {target}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.failover.switch(ip, target)

    _emit_robot(ctx, run)


@failover_app.command("delete")
def failover_delete(ctx: typer.Context, ip: Annotated[str, typer.Argument()], yes: YesOpt = False) -> None:
    confirm(f"Delete the routing of {ip}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.failover.delete_routing(ip)

    _emit_robot(ctx, run, done=f"Routing of {ip} deleted.")


# reverse DNS

rdns_app = _group("rdns", "Reverse DNS")


@rdns_app.command("list")
def rdns_list(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.rdns.list()

    _emit_robot(ctx, run, columns=columns or "ip,ptr")


@rdns_app.command("get")
def rdns_get(ctx: typer.Context, ip: Annotated[str, typer.Argument()]) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.rdns.get(ip)

    _emit_robot(ctx, run)


@rdns_app.command("set")
def rdns_set(
    ctx: typer.Context,
    ip: Annotated[str, typer.Argument()],
    ptr: Annotated[str, typer.Argument()],
    create: Annotated[bool, typer.Option("--create", help="Create a new entry instead of updating")] = False,
) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        if create:
            return await client.rdns.create(ip, ptr)
        return await client.rdns.update(ip, ptr)

    _emit_robot(ctx, run)


@rdns_app.command("delete")
def rdns_delete(ctx: typer.Context, ip: Annotated[str, typer.Argument()], yes: YesOpt = False) -> None:
    confirm(f"Delete reverse DNS entry of {ip}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.rdns.delete(ip)

    _emit_robot(ctx, run, done=f"Reverse DNS entry of {ip} deleted.")


# SSH keys

key_app = _group("key", "SSH keys")


@key_app.command("list")
def key_list(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.keys.list()

    _emit_robot(ctx, run, columns=columns or "name,fingerprint,type,size")


@key_app.command("get")
def key_get(ctx: typer.Context, fingerprint: Annotated[str, typer.Argument()]) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.keys.get(fingerprint)

    _emit_robot(ctx, run)


@key_app.command("create")
def key_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name")],
    data: Annotated[str | None, typer.Option("--data", help="Public key in OpenSSH format")] = None,
    data_file: Annotated[Path | None, typer.Option("--data-from-file")] = None,
) -> None:
    if data_file is not None:
        data = data_file.read_text(encoding="utf-8").strip()
    if not data:
        raise typer.BadParameter("give --data or --data-from-file")

    async def run(client: AsyncRobotClient) -> Any:
        return await client.keys.create(name, data)

    _emit_robot(ctx, run)


@key_app.command("rename")
def key_rename(
    ctx: typer.Context,
    fingerprint: Annotated[str, typer.Argument()],
    name: Annotated[str, typer.Argument()],
) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.keys.rename(fingerprint, name)

    _emit_robot(ctx, run)


@key_app.command("delete")
def key_delete(ctx: typer.Context, fingerprint: Annotated[str, typer.Argument()], yes: YesOpt = False) -> None:
    confirm(f"Delete SSH key {fingerprint}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.keys.delete(fingerprint)

    _emit_robot(ctx, run, done=f"SSH key {fingerprint} deleted.")


# firewall

firewall_app = _group("firewall", "Server firewalls and templates")


@firewall_app.command("get")
def firewall_get(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.firewall.get(server)

    _emit_robot(ctx, run)


@firewall_app.command("update")
def firewall_update(
    ctx: typer.Context,
    server: ServerArg,
    status: Annotated[str, typer.Option("--status", help="active or disabled")] = "active",
    rules_json: Annotated[str | None, typer.Option("--rules-json", help="JSON array of input rules")] = None,
    filter_ipv6: Annotated[bool | None, typer.Option("--filter-ipv6/--no-filter-ipv6")] = None,
    whitelist_hos: Annotated[bool | None, typer.Option("--whitelist-hos/--no-whitelist-hos")] = None,
) -> None:
    if status not in ("active", "disabled"):
        raise typer.BadParameter("--status must be active or disabled")
    rules = _parse_json(rules_json, "--rules-json", expect=list)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.firewall.update(
            server,
            status=status,  # type: ignore[arg-type]
            rules=rules,
            filter_ipv6=filter_ipv6,
            whitelist_hos=whitelist_hos,
        )

    _emit_robot(ctx, run)


@firewall_app.command("delete")
def firewall_delete(ctx: typer.Context, server: ServerArg, yes: YesOpt = False) -> None:
    confirm(f"Delete the firewall of server {server}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.firewall.delete(server)

    _emit_robot(ctx, run, done=f"Firewall of server {server} deleted.")


@firewall_app.command("templates")
def firewall_templates(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.firewall.list_templates()

    _emit_robot(ctx, run, columns=columns or "id,name,filter_ipv6,whitelist_hos,is_default")


@firewall_app.command("template")
def firewall_template(ctx: typer.Context, template_id: Annotated[int, typer.Argument()]) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.firewall.get_template(template_id)

    _emit_robot(ctx, run)


@firewall_app.command("template-delete")
def firewall_template_delete(ctx: typer.Context, template_id: Annotated[int, typer.Argument()], yes: YesOpt = False) -> None:
    confirm(f"Delete firewall template {template_id}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.firewall.delete_template(template_id)

    _emit_robot(ctx, run, done=f"Firewall template {template_id} deleted.")


# vSwitch

vswitch_app = _group("vswitch", "vSwitches")
VSwitchArg = Annotated[int, typer.Argument(help="vSwitch id")]


@vswitch_app.command("list")
def vswitch_list(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.vswitch.list()

    _emit_robot(ctx, run, columns=columns or "id,name,vlan,cancelled")


@vswitch_app.command("get")
def vswitch_get(ctx: typer.Context, vswitch_id: VSwitchArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.vswitch.get(vswitch_id)

    _emit_robot(ctx, run)


@vswitch_app.command("create")
def vswitch_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name")],
    vlan: Annotated[int, typer.Option("--vlan", help="VLAN id, 4000-4091")],
) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.vswitch.create(name, vlan)

    _emit_robot(ctx, run)


@vswitch_app.command("update")
def vswitch_update(
    ctx: typer.Context,
    vswitch_id: VSwitchArg,
    name: Annotated[str | None, typer.Option("--name")] = None,
    vlan: Annotated[int | None, typer.Option("--vlan")] = None,
) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.vswitch.update(vswitch_id, name=name, vlan=vlan)

    _emit_robot(ctx, run)


@vswitch_app.command("delete")
def vswitch_delete(
    ctx: typer.Context,
    vswitch_id: VSwitchArg,
    date: Annotated[str, typer.Option("--date", help="Cancellation date, yyyy-mm-dd or 'now'")] = "now",
    yes: YesOpt = False,
) -> None:
    confirm(f"Cancel vSwitch {vswitch_id}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.vswitch.delete(vswitch_id, cancellation_date=date)

    _emit_robot(ctx, run, done=f"vSwitch {vswitch_id} cancelled.")


@vswitch_app.command("add-server")
def vswitch_add_server(ctx: typer.Context, vswitch_id: VSwitchArg, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.vswitch.add_server(vswitch_id, server)

    _emit_robot(ctx, run, done=f"Server {server} added to vSwitch {vswitch_id}.")


@vswitch_app.command("remove-server")
def vswitch_remove_server(ctx: typer.Context, vswitch_id: VSwitchArg, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.vswitch.remove_server(vswitch_id, server)

    _emit_robot(ctx, run, done=f"Server {server} removed from vSwitch {vswitch_id}.")


# storage boxes

storagebox_app = _group("storagebox", "Storage boxes, snapshots and sub-accounts")
BoxArg = Annotated[int, typer.Argument(help="Storage box id")]


@storagebox_app.command("list")
def storagebox_list(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.list()

    _emit_robot(ctx, run, columns=columns or "id,login,name,product,location,cancelled")


@storagebox_app.command("get")
def storagebox_get(ctx: typer.Context, box_id: BoxArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.get(box_id)

    _emit_robot(ctx, run)


@storagebox_app.command("update")
def storagebox_update(
    ctx: typer.Context,
    box_id: BoxArg,
    name: Annotated[str | None, typer.Option("--name")] = None,
    webdav: Annotated[bool | None, typer.Option("--webdav/--no-webdav")] = None,
    samba: Annotated[bool | None, typer.Option("--samba/--no-samba")] = None,
    ssh: Annotated[bool | None, typer.Option("--ssh/--no-ssh")] = None,
    external: Annotated[bool | None, typer.Option("--external-reachability/--no-external-reachability")] = None,
    zfs: Annotated[bool | None, typer.Option("--zfs/--no-zfs")] = None,
) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.update(
            box_id,
            name=name,
            webdav=webdav,
            samba=samba,
            ssh=ssh,
            external_reachability=external,
            zfs=zfs,
        )

    _emit_robot(ctx, run)


@storagebox_app.command("reset-password")
def storagebox_reset_password(ctx: typer.Context, box_id: BoxArg, yes: YesOpt = False) -> None:
    confirm(f"Reset the password of storage box {box_id}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return {"password": await client.storagebox.reset_password(box_id)}

    _emit_robot(ctx, run)


@storagebox_app.command("snapshots")
def storagebox_snapshots(ctx: typer.Context, box_id: BoxArg, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.list_snapshots(box_id)

    _emit_robot(ctx, run, columns=columns or "name,timestamp,size_formatted,comment")


@storagebox_app.command("snapshot-create")
def storagebox_snapshot_create(ctx: typer.Context, box_id: BoxArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.create_snapshot(box_id)

    _emit_robot(ctx, run)


@storagebox_app.command("snapshot-delete")
def storagebox_snapshot_delete(
    ctx: typer.Context,
    box_id: BoxArg,
    name: Annotated[str, typer.Argument(help="Snapshot name")],
    yes: YesOpt = False,
) -> None:
    confirm(f"Delete snapshot {name}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.delete_snapshot(box_id, name)

    _emit_robot(ctx, run, done=f"Snapshot {name} deleted.")


@storagebox_app.command("snapshot-revert")
def storagebox_snapshot_revert(
    ctx: typer.Context,
    box_id: BoxArg,
    name: Annotated[str, typer.Argument(help="Snapshot name")],
    yes: YesOpt = False,
) -> None:
    confirm(f"Revert storage box {box_id} to snapshot {name}? Newer data is lost.", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.revert_snapshot(box_id, name)

    _emit_robot(ctx, run, done=f"Storage box {box_id} reverted to {name}.")


@storagebox_app.command("snapshot-plan")
def storagebox_snapshot_plan(
    ctx: typer.Context,
    box_id: BoxArg,
    status: Annotated[str | None, typer.Option("--status", help="enabled or disabled; omit to show")] = None,
    minute: Annotated[int | None, typer.Option("--minute")] = None,
    hour: Annotated[int | None, typer.Option("--hour")] = None,
    day_of_week: Annotated[int | None, typer.Option("--day-of-week")] = None,
    day_of_month: Annotated[int | None, typer.Option("--day-of-month")] = None,
    max_snapshots: Annotated[int | None, typer.Option("--max-snapshots")] = None,
) -> None:
    if status is not None and status not in ("enabled", "disabled"):
        raise typer.BadParameter("--status must be enabled or disabled")

    async def run(client: AsyncRobotClient) -> Any:
        if status is None:
            return await client.storagebox.get_snapshot_plan(box_id)
        return await client.storagebox.update_snapshot_plan(
            box_id,
            status=status,  # type: ignore[arg-type]
            minute=minute,
            hour=hour,
            day_of_week=day_of_week,
            day_of_month=day_of_month,
            max_snapshots=max_snapshots,
        )

    _emit_robot(ctx, run)


@storagebox_app.command("subaccounts")
def storagebox_subaccounts(ctx: typer.Context, box_id: BoxArg, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.list_subaccounts(box_id)

    _emit_robot(ctx, run, columns=columns or "username,homedirectory,ssh,samba,webdav,readonly,comment")


def _subaccount_flags(
    samba: bool | None,
    ssh: bool | None,
    external: bool | None,
    webdav: bool | None,
    readonly: bool | None,
    comment: str | None,
) -> dict[str, Any]:
    return {
        "samba": samba,
        "ssh": ssh,
        "external_reachability": external,
        "webdav": webdav,
        "readonly": readonly,
        "comment": comment,
    }


@storagebox_app.command("subaccount-create")
def storagebox_subaccount_create(
    ctx: typer.Context,
    box_id: BoxArg,
    homedirectory: Annotated[str, typer.Option("--home", help="Home directory inside the box")],
    samba: Annotated[bool | None, typer.Option("--samba/--no-samba")] = None,
    ssh: Annotated[bool | None, typer.Option("--ssh/--no-ssh")] = None,
    external: Annotated[bool | None, typer.Option("--external-reachability/--no-external-reachability")] = None,
    webdav: Annotated[bool | None, typer.Option("--webdav/--no-webdav")] = None,
    readonly: Annotated[bool | None, typer.Option("--readonly/--writable")] = None,
    comment: Annotated[str | None, typer.Option("--comment")] = None,
) -> None:
    flags = _subaccount_flags(samba, ssh, external, webdav, readonly, comment)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.create_subaccount(box_id, homedirectory=homedirectory, **flags)

    _emit_robot(ctx, run)


@storagebox_app.command("subaccount-update")
def storagebox_subaccount_update(
    ctx: typer.Context,
    box_id: BoxArg,
    username: Annotated[str, typer.Argument()],
    homedirectory: Annotated[str | None, typer.Option("--home")] = None,
    samba: Annotated[bool | None, typer.Option("--samba/--no-samba")] = None,
    ssh: Annotated[bool | None, typer.Option("--ssh/--no-ssh")] = None,
    external: Annotated[bool | None, typer.Option("--external-reachability/--no-external-reachability")] = None,
    webdav: Annotated[bool | None, typer.Option("--webdav/--no-webdav")] = None,
    readonly: Annotated[bool | None, typer.Option("--readonly/--writable")] = None,
    comment: Annotated[str | None, typer.Option("--comment")] = None,
) -> None:
    flags = _subaccount_flags(samba, ssh, external, webdav, readonly, comment)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.update_subaccount(box_id, username, homedirectory=homedirectory, **flags)

    _emit_robot(ctx, run, done=f"Sub-account {username} updated.")


@storagebox_app.command("subaccount-delete")
def storagebox_subaccount_delete(
    ctx: typer.Context,
    box_id: BoxArg,
    username: Annotated[str, typer.Argument()],
    yes: YesOpt = False,
) -> None:
    confirm(f"Delete sub-account {username}?", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.storagebox.delete_subaccount(box_id, username)

    _emit_robot(ctx, run, done=f"Sub-account {username} deleted.")


@storagebox_app.command("subaccount-reset-password")
def storagebox_subaccount_reset_password(
    ctx: typer.Context,
    box_id: BoxArg,
    username: Annotated[str, typer.Argument()],
) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return {"password": await client.storagebox.reset_subaccount_password(box_id, username)}

    _emit_robot(ctx, run)


# traffic and wake-on-LAN


@robot_app.command("traffic")
def traffic_query(
    ctx: typer.Context,
    date_from: Annotated[str, typer.Option("--from", help="Start, e.g. 2024-01-01 or 2024-01-01T00")],
    date_to: Annotated[str, typer.Option("--to", help="End, same format as --from")],
    ip: Annotated[list[str] | None, typer.Option("--ip", help="IP address (repeatable)")] = None,
    subnet: Annotated[list[str] | None, typer.Option("--subnet", help="Subnet (repeatable)")] = None,
    traffic_type: Annotated[str, typer.Option("--type", help="day, month or year")] = "month",
) -> None:
    """Query traffic statistics for IPs and subnets."""

    if traffic_type not in ("day", "month", "year"):
        raise typer.BadParameter("--type must be day, month or year")
    if not ip and not subnet:
        raise typer.BadParameter("give at least one --ip or --subnet")

    async def run(client: AsyncRobotClient) -> Any:
        return await client.traffic.query(
            date_from=date_from,
            date_to=date_to,
            ips=ip or (),
            subnets=subnet or (),
            traffic_type=traffic_type,  # type: ignore[arg-type]
        )

    _emit_robot(ctx, run)


wol_app = _group("wol", "Wake on LAN")


@wol_app.command("status")
def wol_status(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.wol.get(server)

    _emit_robot(ctx, run)


@wol_app.command("send")
def wol_send(ctx: typer.Context, server: ServerArg) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.wol.send(server)

    _emit_robot(ctx, run)


# ordering

order_app = _group("order", "Server products, Server Market and transactions")


@order_app.command("products")
def order_products(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.ordering.products()

    _emit_robot(ctx, run, columns=columns or "id,name,traffic,dist,location")


@order_app.command("market")
def order_market(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.ordering.market_products()

    _emit_robot(ctx, run, columns=columns or "id,name,cpu,memory_size,hdd_text,datacenter,price")


@order_app.command("transactions")
def order_transactions(ctx: typer.Context, columns: ColumnsOpt = None) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.ordering.transactions()

    _emit_robot(ctx, run, columns=columns or "id,date,status,server_number,server_ip")


@order_app.command("transaction")
def order_transaction(ctx: typer.Context, transaction_id: Annotated[str, typer.Argument()]) -> None:
    async def run(client: AsyncRobotClient) -> Any:
        return await client.ordering.transaction(transaction_id)

    _emit_robot(ctx, run)


@order_app.command("server")
def order_server(
    ctx: typer.Context,
    product_id: Annotated[str, typer.Argument(help="Product id, e.g. EX44")],
    key: KeyOpt = None,
    dist: Annotated[str | None, typer.Option("--dist")] = None,
    location: Annotated[str | None, typer.Option("--location")] = None,
    lang: Annotated[str | None, typer.Option("--lang")] = None,
    addon: Annotated[list[str] | None, typer.Option("--addon")] = None,
    test: Annotated[bool, typer.Option("--test", help="Validate the order without placing it")] = False,
    yes: YesOpt = False,
) -> None:
    if not test:
        confirm(f"Order server product {product_id}? This is billed.", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.ordering.order_server(
            product_id,
            authorized_keys=key,
            dist=dist,
            lang=lang,
            location=location,
            addons=addon,
            test=test or None,
        )

    _emit_robot(ctx, run)


@order_app.command("market-server")
def order_market_server(
    ctx: typer.Context,
    product_id: Annotated[int, typer.Argument(help="Server Market product id")],
    key: KeyOpt = None,
    dist: Annotated[str | None, typer.Option("--dist")] = None,
    lang: Annotated[str | None, typer.Option("--lang")] = None,
    addon: Annotated[list[str] | None, typer.Option("--addon")] = None,
    test: Annotated[bool, typer.Option("--test", help="Validate the order without placing it")] = False,
    yes: YesOpt = False,
) -> None:
    if not test:
        confirm(f"Order Server Market product {product_id}? This is billed.", yes)

    async def run(client: AsyncRobotClient) -> Any:
        return await client.ordering.order_market_server(
            product_id,
            authorized_keys=key,
            dist=dist,
            lang=lang,
            addons=addon,
            test=test or None,
        )

    _emit_robot(ctx, run)
