from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from hetzner_cli import __version__
from hetzner_cli.cli import app
from hetzner_cli.cli import common as cli_common
from hetzner_cli.errors import APIError
from hetzner_cli.models.actions import Action
from hetzner_cli.models.auction import AuctionResponse
from hetzner_cli.models.cloud import Server
from hetzner_cli.models.robot import RobotServer

runner = CliRunner()


def _action(action_id: int, status: str = "running") -> Action:
    return Action.model_validate({"id": action_id, "command": "start_server", "status": status, "progress": 0})


class _FakeServers:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.error: Exception | None = None

    async def list(self, **filters: Any) -> list[Server]:
        self.calls.append(("list", filters))
        if self.error is not None:
            raise self.error
        return [
            Server.model_validate({"id": 1, "name": "web-1", "status": "running"}),
            Server.model_validate({"id": 2, "name": "web-2", "status": "off"}),
        ]

    async def power_on(self, server_id: int) -> Action:
        self.calls.append(("power_on", server_id))
        return _action(10)

    async def update(self, server_id: int, **fields: Any) -> Server:
        self.calls.append(("update", fields))
        return Server.model_validate({"id": server_id, "name": fields.get("name") or "web", "status": "running"})

    async def delete(self, server_id: int) -> Action | None:
        self.calls.append(("delete", server_id))
        return None


class _FakeCloudClient:
    def __init__(self) -> None:
        self.servers = _FakeServers()
        self.waited: list[int] = []
        self.raw: list[tuple[str, str, Any, Any]] = []

    async def wait_for_action(self, action_id: int, **kwargs: Any) -> Action:
        self.waited.append(action_id)
        return _action(action_id, status="success")

    async def request_json(self, method: str, path: str, *, params: Any = None, json_data: Any = None) -> Any:
        self.raw.append((method, path, params, json_data))
        return {"ok": True}

    async def __aenter__(self) -> _FakeCloudClient:
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: Any) -> None:
        return None


class _FakeRobotServers:
    async def list(self) -> list[RobotServer]:
        return [RobotServer.model_validate({"server_number": 321, "server_name": "db1", "server_ip": "192.0.2.10"})]


class _FakeRobotClient:
    def __init__(self) -> None:
        self.servers = _FakeRobotServers()

    async def __aenter__(self) -> _FakeRobotClient:
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: Any) -> None:
        return None


class _FakeAuction:
    async def fetch(self, currency: str = "EUR") -> AuctionResponse:
        return AuctionResponse.model_validate(
            {
                "server": [
                    {"id": 1, "cpu": "Intel Core i7", "price": 45.0, "datacenter": "FSN1-DC1", "ram_size": 64},
                    {"id": 2, "cpu": "AMD Ryzen 7", "price": 30.0, "datacenter": "HEL1-DC2", "ram_size": 64},
                    {"id": 3, "cpu": "Intel Xeon", "price": 80.0, "datacenter": "NBG1-DC3", "ram_size": 256},
                ]
            }
        )


class _FakeAuctionClient:
    def __init__(self) -> None:
        self.auction = _FakeAuction()

    async def __aenter__(self) -> _FakeAuctionClient:
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: Any) -> None:
        return None


@pytest.fixture
def cloud(monkeypatch: pytest.MonkeyPatch) -> _FakeCloudClient:
    fake = _FakeCloudClient()
    monkeypatch.setattr(cli_common, "_make_cloud_client", lambda state: fake)
    return fake


@pytest.fixture
def auction(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_common, "_make_auction_client", lambda state: _FakeAuctionClient())


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"hetzner {__version__}"


def test_server_list_json_passes_filters(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["cloud", "server", "list", "--selector", "env=prod"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [item["id"] for item in payload] == [1, 2]
    assert cloud.servers.calls == [("list", {"name": None, "label_selector": "env=prod"})]


def test_server_list_table(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["-o", "table", "cloud", "server", "list", "--columns", "id,name,status"])

    assert result.exit_code == 0, result.output
    assert "web-1" in result.output
    assert "off" in result.output


def test_action_command_waits(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["cloud", "server", "poweron", "5", "--wait"])

    assert result.exit_code == 0, result.output
    assert cloud.servers.calls == [("power_on", 5)]
    assert cloud.waited == [10]
    assert json.loads(result.stdout)["status"] == "success"


def test_action_command_without_wait_returns_running(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["cloud", "server", "poweron", "5"])

    assert result.exit_code == 0, result.output
    assert cloud.waited == []
    assert json.loads(result.stdout)["status"] == "running"


def test_delete_with_yes(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["cloud", "server", "delete", "7", "--yes"])

    assert result.exit_code == 0, result.output
    assert "Deleted server 7." in result.output
    assert cloud.servers.calls == [("delete", 7)]


def test_delete_declined_does_nothing(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["cloud", "server", "delete", "7"], input="n\n")

    assert result.exit_code == 1
    assert cloud.servers.calls == []


def test_api_error_prints_and_exits_nonzero(cloud: _FakeCloudClient) -> None:
    cloud.servers.error = APIError(status_code=401, code="unauthorized", message="unable to authenticate", structured=True)

    result = runner.invoke(app, ["cloud", "server", "list"])

    assert result.exit_code == 1
    assert "error: unauthorized: unable to authenticate" in result.output


def test_update_parses_labels(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["cloud", "server", "update", "1", "--name", "db", "-l", "env=prod", "-l", "tier = data"])

    assert result.exit_code == 0, result.output
    assert cloud.servers.calls == [("update", {"name": "db", "labels": {"env": "prod", "tier": "data"}})]


def test_bad_label_is_usage_error(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["cloud", "server", "update", "1", "--label", "novalue"])

    assert result.exit_code == 2
    assert "key=value" in result.output


def test_raw_cloud_request(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["raw", "cloud", "get", "/servers", "--params-json", '{"name": "web"}'])

    assert result.exit_code == 0, result.output
    assert cloud.raw == [("GET", "/servers", {"name": "web"}, None)]
    assert json.loads(result.stdout) == {"ok": True}


def test_raw_rejects_non_object_params(cloud: _FakeCloudClient) -> None:
    result = runner.invoke(app, ["raw", "cloud", "GET", "/servers", "--params-json", "[1]"])

    assert result.exit_code == 2
    assert cloud.raw == []


def test_context_commands(tmp_path: Path) -> None:
    config = tmp_path / "config.yml"

    created = runner.invoke(app, ["-c", str(config), "cloud", "context", "create", "prod", "--token", "abc"])
    assert created.exit_code == 0, created.output
    assert json.loads(created.stdout) == [{"name": "prod", "active": True}]

    runner.invoke(app, ["-c", str(config), "cloud", "context", "create", "dev", "--token", "def"])
    switched = runner.invoke(app, ["-c", str(config), "cloud", "context", "use", "dev"])
    assert switched.exit_code == 0
    assert "Switched to context 'dev'." in switched.output

    listed = runner.invoke(app, ["-c", str(config), "cloud", "context", "list"])
    assert json.loads(listed.stdout) == [{"name": "prod", "active": False}, {"name": "dev", "active": True}]

    missing = runner.invoke(app, ["-c", str(config), "cloud", "context", "use", "staging"])
    assert missing.exit_code == 1
    assert "error: Context 'staging' not found" in missing.output


def test_robot_server_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_common, "_make_robot_client", lambda state: _FakeRobotClient())

    result = runner.invoke(app, ["robot", "server", "list"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)[0]["server_number"] == 321


def test_robot_whoami_without_credentials() -> None:
    result = runner.invoke(app, ["robot", "whoami"])

    assert result.exit_code == 1
    assert "Not authenticated" in result.output


def test_robot_login_with_flags_then_whoami(tmp_path: Path) -> None:
    config = tmp_path / "config.yml"

    login = runner.invoke(app, ["-c", str(config), "robot", "-u", "ws-user", "-p", "ws-pass", "login"])
    assert login.exit_code == 0, login.output
    assert "saved to file" in login.output

    whoami = runner.invoke(app, ["-c", str(config), "robot", "whoami"])
    assert whoami.exit_code == 0, whoami.output
    assert json.loads(whoami.stdout) == {"user": "ws-user", "source": "file"}

    logout = runner.invoke(app, ["-c", str(config), "robot", "logout"])
    assert "Credentials cleared." in logout.output
    assert runner.invoke(app, ["-c", str(config), "robot", "whoami"]).exit_code == 1


def test_auction_list_filters_and_sorts(auction: None) -> None:
    result = runner.invoke(app, ["-o", "json", "auction", "list", "--max-price", "50"])

    assert result.exit_code == 0, result.output
    assert [item["id"] for item in json.loads(result.stdout)] == [2, 1]


def test_auction_list_defaults_to_table(auction: None) -> None:
    result = runner.invoke(app, ["auction", "list", "--sort", "ram", "--desc", "--limit", "1", "--columns", "id,datacenter"])

    assert result.exit_code == 0, result.output
    assert not result.output.lstrip().startswith("[")
    assert "NBG1" in result.output


def test_auction_honours_explicit_output(auction: None) -> None:
    result = runner.invoke(app, ["-o", "yaml", "auction", "get", "2"])

    assert result.exit_code == 0, result.output
    assert "datacenter: HEL1-DC2" in result.stdout


def test_auction_get_unknown_offer(auction: None) -> None:
    result = runner.invoke(app, ["auction", "get", "99"])

    assert result.exit_code == 1
    assert "auction offer 99 not found" in result.output
