"""Error handling utilities."""

from typing import Optional


class SlackConnectorError(Exception):
    """Base exception for the Slack workspace connector."""
    pass


class ConfigurationError(SlackConnectorError):
    """Settings are missing or inconsistent (fatal at startup)."""
    pass


class NotInstalledError(SlackConnectorError):
    """The workspace has no registered credential."""

    def __init__(self, workspace_id: str, message: Optional[str] = None):
        self.workspace_id = workspace_id
        super().__init__(
            message
            or f"Unknown workspace {workspace_id}, please ensure that the bot is installed in this workspace"
        )


class ChannelNotFoundError(SlackConnectorError):
    """A channel name or ID could not be resolved, even after a reload."""

    def __init__(self, workspace_id: str, channel: str):
        self.workspace_id = workspace_id
        self.channel = channel
        super().__init__(
            f"Cannot find the channel {channel} in workspace {workspace_id}, please ensure that the "
            "provided channel is either a valid channel ID, name, or a valid user name, real name, "
            "or display name"
        )


class ProviderCallError(SlackConnectorError):
    """A call to the Slack Web API failed (transport or API-level)."""

    def __init__(self, method: str, message: str):
        self.method = method
        super().__init__(f"Slack API call {method} failed: {message}")


class MalformedOAuthResponseError(SlackConnectorError):
    """The OAuth exchange succeeded but the response is missing required fields."""
    pass
