from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from hetzner_cli.models.common import HetznerModel

ActionStatus = Literal["running", "success", "error"]


class ActionResource(HetznerModel):
    id: int
    type: str


class ActionErrorDetail(HetznerModel):
    code: str | None = None
    message: str | None = None


class Action(HetznerModel):
    """A server-tracked asynchronous operation.

    Status moves from ``running`` to ``success`` or ``error`` on the server
    side only; clients merely observe it.
    """

    id: int
    command: str | None = None
    status: ActionStatus
    progress: int = Field(default=0, ge=0, le=100)
    started: datetime | None = None
    finished: datetime | None = None
    resources: list[ActionResource] = Field(default_factory=list)
    error: ActionErrorDetail | None = None


class Pagination(HetznerModel):
    page: int = 1
    per_page: int | None = None
    previous_page: int | None = None
    next_page: int | None = None
    last_page: int | None = None
    total_entries: int | None = None


class PaginationMeta(HetznerModel):
    pagination: Pagination | None = None
