from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import ValidationError

from hetzner_cli.errors import ResponseError
from hetzner_cli.models.actions import Action
from hetzner_cli.models.common import HetznerModel

ModelT = TypeVar("ModelT", bound=HetznerModel)


def drop_none(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def parse_response(model: type[ModelT], data: Any, key: str) -> ModelT:
    """Validate the object under ``key`` in a response body."""

    try:
        return model.model_validate(data[key])
    except (KeyError, TypeError, ValidationError) as exc:
        raise ResponseError(f"unexpected {model.__name__} response: {exc}") from exc


class ServiceBase:
    """Base type for service classes bound to a client instance."""

    def __init__(self, client: Any) -> None:
        self._client = client


class CloudCollectionService(ServiceBase, Generic[ModelT]):
    """List and get for a Cloud API collection such as ``/servers``.

    Subclasses only declare the collection path, the envelope keys and the model.
    """

    path: ClassVar[str]
    list_key: ClassVar[str]
    item_key: ClassVar[str]
    model: ClassVar[type[HetznerModel]]

    async def list(self, **filters: str | int | bool | None) -> list[ModelT]:
        items = await self._client.list_all(self.path, self.list_key, filters)
        return [self.model.model_validate(item) for item in items]  # type: ignore[misc]

    async def get(self, resource_id: int) -> ModelT:
        data = await self._client._request_json("GET", f"{self.path}/{resource_id}")
        return parse_response(self.model, data, self.item_key)  # type: ignore[return-value]


class CloudResourceService(CloudCollectionService[ModelT]):
    """Mutable collections: update, delete, create and ``/actions/<command>`` helpers."""

    async def update(
        self,
        resource_id: int,
        *,
        name: str | None = None,
        labels: Mapping[str, str] | None = None,
        **fields: Any,
    ) -> ModelT:
        payload = drop_none({"name": name, "labels": dict(labels) if labels is not None else None, **fields})
        data = await self._client._request_json("PUT", f"{self.path}/{resource_id}", json_data=payload)
        return parse_response(self.model, data, self.item_key)  # type: ignore[return-value]

    async def delete(self, resource_id: int) -> Action | None:
        """Delete the resource. Servers answer with an action; most others with an empty body."""

        data = await self._client._request_json("DELETE", f"{self.path}/{resource_id}")
        return _optional_action(data)

    async def _create(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        return await self._client._request_json("POST", self.path, json_data=drop_none(payload))

    async def _action(self, resource_id: int, command: str, payload: Mapping[str, Any] | None = None) -> Action:
        data = await self._action_raw(resource_id, command, payload)
        return parse_response(Action, data, "action")

    async def _actions(self, resource_id: int, command: str, payload: Mapping[str, Any] | None = None) -> list[Action]:
        data = await self._action_raw(resource_id, command, payload)
        return [Action.model_validate(item) for item in data.get("actions", [])]

    async def _action_raw(
        self,
        resource_id: int,
        command: str,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self._client._request_json(
            "POST",
            f"{self.path}/{resource_id}/actions/{command}",
            json_data=drop_none(payload) if payload is not None else None,
        )


class ProtectableMixin:
    async def change_protection(self: Any, resource_id: int, *, delete: bool) -> Action:
        return await self._action(resource_id, "change_protection", {"delete": delete})


def _optional_action(data: Any) -> Action | None:
    if isinstance(data, dict) and isinstance(data.get("action"), dict):
        return parse_response(Action, data, "action")
    return None
