from __future__ import annotations

import asyncio
from typing import Any

import pytest

from hetzner_cli.errors import ActionCancelledError, ActionFailedError, ActionTimeoutError
from hetzner_cli.http import ActionPoller


class _FakeTime:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class _Responses:
    def __init__(self, *statuses: str, error: dict[str, str] | None = None) -> None:
        self.statuses = list(statuses)
        self.error = error
        self.calls = 0

    async def __call__(self, action_id: int) -> dict[str, Any]:
        self.calls += 1
        status = self.statuses[min(self.calls, len(self.statuses)) - 1]
        action: dict[str, Any] = {"id": action_id, "command": "start_server", "status": status, "progress": 0}
        if status == "error":
            action["error"] = self.error
        return {"action": action}


def _poller(fetch: Any, clock: _FakeTime) -> ActionPoller:
    return ActionPoller(fetch, poll_interval=1.0, clock=clock.clock, sleep=clock.sleep)


@pytest.mark.asyncio
async def test_returns_when_action_succeeds() -> None:
    clock = _FakeTime()
    fetch = _Responses("running", "running", "success")

    action = await _poller(fetch, clock).wait(7, timeout=60)

    assert action.status == "success"
    assert fetch.calls == 3
    assert clock.sleeps == [1.0, 1.0]


@pytest.mark.asyncio
async def test_error_status_raises_failed() -> None:
    clock = _FakeTime()
    fetch = _Responses("running", "error", error={"code": "disk_full", "message": "disk full"})

    with pytest.raises(ActionFailedError) as info:
        await _poller(fetch, clock).wait(7, timeout=60)

    assert str(info.value) == "Action 7 failed: disk full"
    assert info.value.code == "disk_full"


@pytest.mark.asyncio
async def test_error_without_detail_uses_unknown_reason() -> None:
    fetch = _Responses("error")

    with pytest.raises(ActionFailedError, match="Action 9 failed: Unknown error"):
        await _poller(fetch, _FakeTime()).wait(9, timeout=60)


@pytest.mark.asyncio
async def test_times_out_after_budget() -> None:
    clock = _FakeTime()
    fetch = _Responses("running")

    with pytest.raises(ActionTimeoutError) as info:
        await _poller(fetch, clock).wait(7, timeout=3)

    assert str(info.value) == "Action 7 timed out after 3000ms"
    assert fetch.calls == 3


@pytest.mark.asyncio
async def test_pre_cancelled_wait_never_fetches() -> None:
    cancel = asyncio.Event()
    cancel.set()
    fetch = _Responses("running")

    with pytest.raises(ActionCancelledError, match="Action 7 wait cancelled"):
        await _poller(fetch, _FakeTime()).wait(7, timeout=60, cancel=cancel)

    assert fetch.calls == 0


@pytest.mark.asyncio
async def test_cancel_during_pause_stops_polling() -> None:
    cancel = asyncio.Event()
    fetch = _Responses("running")

    async def fetch_then_cancel(action_id: int) -> dict[str, Any]:
        payload = await fetch(action_id)
        cancel.set()
        return payload

    with pytest.raises(ActionCancelledError):
        await _poller(fetch_then_cancel, _FakeTime()).wait(7, timeout=60, cancel=cancel)

    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_cancel_token_still_uses_injected_sleep_and_times_out() -> None:
    clock = _FakeTime()
    fetch = _Responses("running")

    with pytest.raises(ActionTimeoutError):
        await asyncio.wait_for(
            _poller(fetch, clock).wait(7, timeout=3, cancel=asyncio.Event()),
            timeout=5,
        )

    assert clock.sleeps == [1.0, 1.0, 1.0]
    assert fetch.calls == 3


@pytest.mark.asyncio
async def test_accepts_bare_action_payload() -> None:
    async def bare(action_id: int) -> dict[str, Any]:
        return {"id": action_id, "status": "success", "progress": 100}

    action = await _poller(bare, _FakeTime()).wait(4, timeout=10)

    assert action.id == 4
    assert action.progress == 100


@pytest.mark.asyncio
async def test_first_poll_success_issues_one_request() -> None:
    clock = _FakeTime()
    fetch = _Responses("success")

    await _poller(fetch, clock).wait(1, timeout=60)

    assert fetch.calls == 1
    assert clock.sleeps == []
