from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated, Any

import typer

from hetzner_cli import __version__
from hetzner_cli.cli import common
from hetzner_cli.cli.cloud import cloud_app
from hetzner_cli.cli.common import (
    CLIState,
    _emit,
    _parse_json,
    _run,
    _state,
    configure_logging,
    print_error,
    with_cloud,
    with_robot,
)
from hetzner_cli.cli.robot import robot_app
from hetzner_cli.client import AsyncCloudClient, AsyncRobotClient
from hetzner_cli.errors import HetznerError
from hetzner_cli.models.auction import AuctionFilter
from hetzner_cli.services.auction import SORT_FIELDS, filter_servers, sort_servers
from hetzner_cli.utils.output import OutputFormat

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Hetzner Cloud, Robot and Server Auction CLI")
auction_app = typer.Typer(no_args_is_help=True, help="Server Auction (no credentials needed)")
raw_app = typer.Typer(no_args_is_help=True, help="Send arbitrary API requests")

app.add_typer(cloud_app, name="cloud")
app.add_typer(robot_app, name="robot")
app.add_typer(auction_app, name="auction")
app.add_typer(raw_app, name="raw")

AUCTION_COLUMNS = "id,cpu,ram_size,hdd_hr,datacenter,price,setup_price,next_reduce_hr"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hetzner {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[
        Path | None,
        typer.Option("--config-file", "-c", help="Path to the config file"),
    ] = None,
    output: Annotated[
        OutputFormat | None,
        typer.Option("--output", "-o", help="Output format (json by default, table for auction)"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log requests and polling to stderr")] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    _ = version
    configure_logging(verbose)
    if output is None:
        output = "table" if ctx.invoked_subcommand == "auction" else "json"
    state = CLIState(config_file=config_file, output=output, verbose=verbose)
    ctx.obj = state


@auction_app.command("list")
def auction_list(
    ctx: typer.Context,
    currency: Annotated[str, typer.Option("--currency", help="EUR or USD")] = "EUR",
    min_price: Annotated[float | None, typer.Option("--min-price")] = None,
    max_price: Annotated[float | None, typer.Option("--max-price")] = None,
    max_hourly_price: Annotated[float | None, typer.Option("--max-hourly-price")] = None,
    max_setup_price: Annotated[float | None, typer.Option("--max-setup-price")] = None,
    min_ram: Annotated[int | None, typer.Option("--min-ram", help="GB")] = None,
    max_ram: Annotated[int | None, typer.Option("--max-ram", help="GB")] = None,
    cpu: Annotated[str | None, typer.Option("--cpu", help="Substring of the CPU model")] = None,
    min_cpu_count: Annotated[int | None, typer.Option("--min-cpu-count")] = None,
    max_cpu_count: Annotated[int | None, typer.Option("--max-cpu-count")] = None,
    datacenter: Annotated[str | None, typer.Option("--datacenter", help="Substring, e.g. FSN1")] = None,
    min_disk_size: Annotated[int | None, typer.Option("--min-disk-size", help="Total GB")] = None,
    max_disk_size: Annotated[int | None, typer.Option("--max-disk-size", help="Total GB")] = None,
    min_disk_count: Annotated[int | None, typer.Option("--min-disk-count")] = None,
    max_disk_count: Annotated[int | None, typer.Option("--max-disk-count")] = None,
    disk_type: Annotated[str | None, typer.Option("--disk-type", help="nvme, sata or hdd")] = None,
    ecc: Annotated[bool | None, typer.Option("--ecc/--no-ecc")] = None,
    gpu: Annotated[bool | None, typer.Option("--gpu/--no-gpu")] = None,
    inic: Annotated[bool | None, typer.Option("--inic/--no-inic")] = None,
    highio: Annotated[bool | None, typer.Option("--highio/--no-highio")] = None,
    fixed_price: Annotated[bool | None, typer.Option("--fixed-price/--auction-price")] = None,
    specials: Annotated[str | None, typer.Option("--specials", help="Substring of a special feature")] = None,
    min_bandwidth: Annotated[int | None, typer.Option("--min-bandwidth", help="Mbit/s")] = None,
    text: Annotated[str | None, typer.Option("--search", help="Free text over the description")] = None,
    sort: Annotated[str, typer.Option("--sort", help=f"One of: {', '.join(SORT_FIELDS)}")] = "price",
    desc: Annotated[bool, typer.Option("--desc", help="Sort descending")] = False,
    limit: Annotated[int | None, typer.Option("--limit", min=1)] = None,
    columns: Annotated[str | None, typer.Option("--columns", help="Comma separated table columns")] = None,
) -> None:
    """List Server Auction offers, filtered and sorted locally."""

    state = _state(ctx)
    currency = currency.upper()
    if currency not in ("EUR", "USD"):
        raise typer.BadParameter("--currency must be EUR or USD")
    if disk_type is not None and disk_type not in ("nvme", "sata", "hdd"):
        raise typer.BadParameter("--disk-type must be nvme, sata or hdd")
    filters = AuctionFilter(
        min_price=min_price,
        max_price=max_price,
        max_hourly_price=max_hourly_price,
        max_setup_price=max_setup_price,
        min_ram=min_ram,
        max_ram=max_ram,
        cpu=cpu,
        min_cpu_count=min_cpu_count,
        max_cpu_count=max_cpu_count,
        datacenter=datacenter,
        min_disk_size=min_disk_size,
        max_disk_size=max_disk_size,
        min_disk_count=min_disk_count,
        max_disk_count=max_disk_count,
        disk_type=disk_type,
        ecc=ecc,
        gpu=gpu,
        inic=inic,
        highio=highio,
        fixed_price=fixed_price,
        specials=specials,
        min_bandwidth=min_bandwidth,
        text=text,
    )

    async def run() -> Any:
        async with common._make_auction_client(state) as client:
            return await client.auction.fetch(currency)  # type: ignore[arg-type]

    response = _run(run())
    servers = sort_servers(filter_servers(response.server, filters), sort, descending=desc)
    if limit is not None:
        servers = servers[:limit]
    _emit(servers, state=state, columns=columns or AUCTION_COLUMNS)


@auction_app.command("get")
def auction_get(
    ctx: typer.Context,
    server_id: Annotated[int, typer.Argument(help="Auction offer id")],
    currency: Annotated[str, typer.Option("--currency")] = "EUR",
) -> None:
    state = _state(ctx)

    async def run() -> Any:
        async with common._make_auction_client(state) as client:
            return await client.auction.fetch(currency.upper())  # type: ignore[arg-type]

    response = _run(run())
    match = next((server for server in response.server if server.id == server_id), None)
    if match is None:
        common.err_console.print(f"error: auction offer {server_id} not found", markup=False)
        raise typer.Exit(code=1)
    _emit(match, state=state)


@raw_app.command("cloud")
def raw_cloud(
    ctx: typer.Context,
    method: Annotated[str, typer.Argument(help="HTTP method")],
    path: Annotated[str, typer.Argument(help="API path, e.g. /servers")],
    params_json: Annotated[str | None, typer.Option(help="JSON object query params")] = None,
    body_json: Annotated[str | None, typer.Option(help="JSON request body")] = None,
) -> None:
    state = _state(ctx)
    params = _parse_json(params_json, "--params-json")
    body = _parse_json(body_json, "--body-json", expect=(dict, list))

    async def run(client: AsyncCloudClient) -> Any:
        return await client.request_json(method.upper(), path, params=params, json_data=body)

    _emit(with_cloud(state, run), state=state)


@raw_app.command("robot")
def raw_robot(
    ctx: typer.Context,
    method: Annotated[str, typer.Argument(help="HTTP method")],
    path: Annotated[str, typer.Argument(help="API path, e.g. /server")],
    params_json: Annotated[str | None, typer.Option(help="JSON object query params")] = None,
    form_json: Annotated[str | None, typer.Option(help="JSON object sent form-encoded")] = None,
) -> None:
    state = _state(ctx)
    params = _parse_json(params_json, "--params-json")
    form = _parse_json(form_json, "--form-json")

    async def run(client: AsyncRobotClient) -> Any:
        return await client.request_json(method.upper(), path, params=params, form=form)

    _emit(with_robot(state, run), state=state)


def run() -> None:
    try:
        app()
    except HetznerError as exc:
        print_error(exc)
        sys.exit(1)
