"""Slack platform: workspace installation and channel/user resolution."""

import threading
from typing import Any, Iterable, Optional

from slack_connector.config import SlackSettings
from slack_connector.services.channel_cache import ChannelCache
from slack_connector.services.installation import InstallationHandler
from slack_connector.services.sessions import (
    InMemorySessionStore,
    InstallationListener,
    SessionStore,
    session_key,
)
from slack_connector.services.slack_provider import SlackProvider, SlackWebProvider
from slack_connector.services.workspace_registry import WorkspaceRegistry
from slack_connector.utils.errors import ChannelNotFoundError, NotInstalledError
from slack_connector.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class SlackPlatform:
    """Entry point for the bot runtime.

    Resolution calls consult the channel cache and, on a miss, reload the
    workspace's channels once before giving up.
    """

    def __init__(
        self,
        settings: SlackSettings,
        provider: Optional[SlackProvider] = None,
        session_store: Optional[SessionStore] = None,
        listeners: Iterable[InstallationListener] = (),
    ):
        self.settings = settings
        if provider is None:
            provider = SlackWebProvider(
                timeout=settings.api_timeout_seconds,
                page_size=settings.page_size,
            )
        self.provider = provider
        self.session_store = session_store if session_store is not None else InMemorySessionStore()
        self.registry = WorkspaceRegistry()
        self.channel_cache = ChannelCache(self.registry, self.provider)
        self.installer = InstallationHandler(
            self.registry, self.channel_cache, self.provider, settings, listeners
        )
        self.started = False

    @property
    def mode(self) -> str:
        if not self.started:
            return "stopped"
        return "oauth" if self.settings.oauth_enabled else "static"

    def start(self) -> None:
        """
        Select the installation mode and, with a static token, install it.

        Raises ConfigurationError if OAuth mode lacks client credentials and
        ProviderCallError if the static token cannot be validated.
        """
        self.settings.validate_mode()
        if self.settings.bot_token:
            self.installer.install_token(self.settings.bot_token)
        else:
            logger.info("No Slack token configured, starting in OAuth mode")
        self.started = True

    def add_listener(self, listener: InstallationListener) -> None:
        self.installer.add_listener(listener)

    def handle_oauth_redirect(self, code: Optional[str]) -> dict:
        return self.installer.handle_oauth_redirect(code)

    def get_slack_token(self, workspace_id: str) -> Optional[str]:
        return self.registry.lookup(workspace_id)

    def get_channel_id(self, workspace_id: str, channel: str) -> str:
        """
        Resolve a channel ID, channel name, or user name/real name/display name
        to a channel ID.

        Raises NotInstalledError for unknown workspaces and
        ChannelNotFoundError if the name is still unknown after one reload.
        """
        channel_id = self.registry.channels(workspace_id).resolve(channel)
        if channel_id is None:
            logger.info(
                "Channel not cached, reloading workspace channels",
                workspace_id=workspace_id,
                channel=channel,
            )
            channel_id = self.channel_cache.reload(workspace_id).resolve(channel)
            if channel_id is None:
                raise ChannelNotFoundError(workspace_id, channel)
        return channel_id

    def is_group_channel(self, workspace_id: str, channel_id: str) -> bool:
        """
        Return True for group channels, False for direct ones.

        Channels unknown even after a reload are reported as not-a-group.
        """
        snapshot = self.registry.channels(workspace_id)
        if channel_id in snapshot.direct:
            return False
        if channel_id in snapshot.group:
            return True
        return channel_id in self.channel_cache.reload(workspace_id).group

    def get_user_id(self, workspace_id: str, username: str) -> Optional[str]:
        """Find a user by ID, login name or real name (live users.list, not cached)."""
        credential = self.registry.lookup(workspace_id)
        if credential is None:
            raise NotInstalledError(workspace_id)
        for user in self.provider.list_users(credential):
            if username in (user.id, user.name, user.real_name):
                return user.id
        return None

    def create_session_from_channel(self, workspace_id: str, channel: str) -> Any:
        key = session_key(workspace_id, self.get_channel_id(workspace_id, channel))
        return self.session_store.get_or_create_context(key)

    def is_online(self, workspace_id: str, username: str) -> bool:
        user_id = self.get_user_id(workspace_id, username)
        if user_id is None:
            logger.warning("Cannot check presence of unknown user", workspace_id=workspace_id, username=username)
            return False
        presence = self.provider.get_presence(self.registry.get(workspace_id).credential, user_id)
        return presence == "active"

    def post_message(
        self, workspace_id: str, channel: str, text: str, thread_ts: Optional[str] = None
    ) -> str:
        """Post plain text to a channel (any resolvable name); returns the message ts."""
        channel_id = self.get_channel_id(workspace_id, channel)
        credential = self.registry.get(workspace_id).credential
        return self.provider.post_message(credential, channel_id, text, thread_ts)


# Global platform instance (singleton pattern)
_platform: Optional[SlackPlatform] = None
_platform_lock = threading.Lock()


def get_slack_platform() -> SlackPlatform:
    """Get or create and start the platform singleton from environment settings."""
    global _platform

    with _platform_lock:
        if _platform is None:
            platform = SlackPlatform(SlackSettings.from_env())
            platform.start()
            _platform = platform
            logger.info("Slack platform initialized", mode=platform.mode)

    return _platform


def reset_slack_platform() -> None:
    """Drop the platform singleton (workspaces must reinstall)."""
    global _platform
    _platform = None
