from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from hetzner_cli.constants import AUCTION_BASE_URL, CLOUD_BASE_URL, DEFAULT_CONFIG_FILE, MAX_PER_PAGE, ROBOT_BASE_URL


class RuntimeSettings(BaseSettings):
    """Environment-driven overrides for credential and context resolution."""

    model_config = SettingsConfigDict(
        env_prefix="HETZNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        case_sensitive=False,
    )

    config_file: Path = Field(
        default=Path(DEFAULT_CONFIG_FILE).expanduser(),
        validation_alias=AliasChoices("HETZNER_CONFIG", "HETZNER_CONFIG_FILE"),
    )
    context: str | None = Field(
        default=None,
        validation_alias=AliasChoices("HETZNER_CONTEXT", "HCLOUD_CONTEXT"),
    )

    cloud_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("HETZNER_CLOUD_TOKEN", "HCLOUD_TOKEN"),
    )
    robot_user: str | None = Field(
        default=None,
        validation_alias=AliasChoices("HETZNER_ROBOT_USER"),
    )
    robot_password: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("HETZNER_ROBOT_PASSWORD"),
    )

    cloud_url: str | None = Field(default=None, validation_alias=AliasChoices("HETZNER_CLOUD_URL"))
    robot_url: str | None = Field(default=None, validation_alias=AliasChoices("HETZNER_ROBOT_URL"))
    auction_url: str | None = Field(default=None, validation_alias=AliasChoices("HETZNER_AUCTION_URL"))

    request_timeout_seconds: float | None = Field(
        default=None,
        validation_alias=AliasChoices("HETZNER_REQUEST_TIMEOUT", "HETZNER_REQUEST_TIMEOUT_SECONDS"),
    )
    per_page: int | None = Field(
        default=None,
        ge=1,
        le=MAX_PER_PAGE,
        validation_alias=AliasChoices("HETZNER_PER_PAGE"),
    )
    poll_interval_seconds: float | None = Field(
        default=None,
        validation_alias=AliasChoices("HETZNER_POLL_INTERVAL"),
    )
    action_timeout_seconds: float | None = Field(
        default=None,
        validation_alias=AliasChoices("HETZNER_ACTION_TIMEOUT"),
    )

    @property
    def fallback_cloud_url(self) -> str:
        return self.cloud_url or CLOUD_BASE_URL

    @property
    def fallback_robot_url(self) -> str:
        return self.robot_url or ROBOT_BASE_URL

    @property
    def fallback_auction_url(self) -> str:
        return self.auction_url or AUCTION_BASE_URL
