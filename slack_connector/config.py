"""Connector settings loaded from environment variables."""

import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from slack_connector.utils.errors import ConfigurationError


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


class SlackSettings(BaseModel):
    """Slack connector settings.

    A static ``bot_token`` selects single-workspace mode and disables the
    OAuth endpoint. Without it, ``client_id`` and ``client_secret`` are
    required so that workspaces can install the app through OAuth.
    """
    bot_token: Optional[str] = Field(None, description="Static bot token (single-workspace mode)")
    client_id: Optional[str] = Field(None, description="Slack app client ID (OAuth mode)")
    client_secret: Optional[str] = Field(None, description="Slack app client secret (OAuth mode)")
    api_timeout_seconds: int = Field(default=30, ge=1, description="Timeout for Slack Web API calls")
    page_size: int = Field(default=200, ge=1, le=1000, description="Page size for list endpoints")

    @classmethod
    def from_env(cls) -> "SlackSettings":
        """Build settings from the process environment.

        Raises ConfigurationError for values that are not valid settings.
        """
        try:
            return cls(
                bot_token=os.environ.get("SLACK_BOT_TOKEN", "").strip() or None,
                client_id=os.environ.get("SLACK_CLIENT_ID", "").strip() or None,
                client_secret=os.environ.get("SLACK_CLIENT_SECRET", "").strip() or None,
                api_timeout_seconds=_env_int("SLACK_API_TIMEOUT_SECONDS", 30),
                page_size=_env_int("SLACK_CONVERSATIONS_PAGE_SIZE", 200),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid Slack connector settings: {e}") from e

    @property
    def oauth_enabled(self) -> bool:
        return not self.bot_token

    def validate_mode(self) -> None:
        """Raise ConfigurationError if neither mode is fully configured."""
        if self.bot_token:
            return
        if not self.client_id:
            raise ConfigurationError(
                "SLACK_CLIENT_ID must be set when SLACK_BOT_TOKEN is not provided (OAuth mode)"
            )
        if not self.client_secret:
            raise ConfigurationError(
                "SLACK_CLIENT_SECRET must be set when SLACK_BOT_TOKEN is not provided (OAuth mode)"
            )
