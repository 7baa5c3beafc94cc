from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, field_serializer, model_validator

from hetzner_cli.constants import (
    DEFAULT_ACTION_TIMEOUT,
    DEFAULT_CONFIG_FILE,
    DEFAULT_PER_PAGE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    MAX_PER_PAGE,
)


def _reveal(value: SecretStr | None) -> str | None:
    return value.get_secret_value() if value is not None else None


class CloudContext(BaseModel):
    """A named Cloud API project. ``token`` is only kept here when the keychain is unavailable."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    token: SecretStr | None = None

    @field_serializer("token", when_used="json")
    def _dump_token(self, value: SecretStr | None) -> str | None:
        return _reveal(value)


class RobotCredentials(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    user: str | None = Field(default=None, validation_alias=AliasChoices("user", "username"))
    password: SecretStr | None = None

    @field_serializer("password", when_used="json")
    def _dump_password(self, value: SecretStr | None) -> str | None:
        return _reveal(value)


class PollingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    interval_seconds: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    timeout_seconds: float = Field(default=DEFAULT_ACTION_TIMEOUT, gt=0)


class SDKConfig(BaseModel):
    """Root configuration model, accepting both current and legacy file shapes."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str = "1"
    active_context: str | None = Field(
        default=None,
        validation_alias=AliasChoices("active_context", "activeContext", "active"),
    )
    contexts: dict[str, CloudContext] = Field(default_factory=dict)
    robot: RobotCredentials | None = None
    polling: PollingConfig = Field(default_factory=PollingConfig)
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        validation_alias=AliasChoices("request_timeout_seconds", "requestTimeoutSeconds"),
    )
    per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE)

    @model_validator(mode="before")
    @classmethod
    def normalize_legacy_schema(cls, data: object) -> object:
        if not isinstance(data, Mapping):
            return data

        data_dict = dict(data)

        # ~/.hetzner-cli/config.json stored robot credentials at the top level.
        if "robot" not in data_dict and ("user" in data_dict or "password" in data_dict):
            data_dict["robot"] = {
                "user": data_dict.pop("user", None),
                "password": data_dict.pop("password", None),
            }

        # cloud-contexts.json entries carry their own name; older ones may not.
        contexts = data_dict.get("contexts")
        if isinstance(contexts, Mapping):
            normalized: dict[str, Any] = {}
            for name, entry in contexts.items():
                if isinstance(entry, Mapping):
                    normalized[name] = {"name": name, **entry}
                else:
                    normalized[name] = entry
            data_dict["contexts"] = normalized

        return data_dict


class ResolvedConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source: str
    path: Path | None = None
    data: SDKConfig


ConfigInput = SDKConfig | dict[str, Any]
