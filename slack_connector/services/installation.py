"""Workspace installation: static token at startup or OAuth redirect at runtime."""

from typing import Iterable, Optional

from slack_connector.config import SlackSettings
from slack_connector.services.channel_cache import ChannelCache
from slack_connector.services.sessions import InstallationListener
from slack_connector.services.slack_provider import SlackProvider
from slack_connector.services.workspace_registry import WorkspaceRegistry
from slack_connector.utils.errors import (
    ConfigurationError,
    MalformedOAuthResponseError,
    ProviderCallError,
)
from slack_connector.utils.logging import get_structured_logger, mask_credential

logger = get_structured_logger(__name__)

INSTALLED_MESSAGE = "Installed!"


class InstallationHandler:
    """Registers credentials, loads channels and notifies listeners."""

    def __init__(
        self,
        registry: WorkspaceRegistry,
        channel_cache: ChannelCache,
        provider: SlackProvider,
        settings: SlackSettings,
        listeners: Iterable[InstallationListener] = (),
    ):
        self.registry = registry
        self.channel_cache = channel_cache
        self.provider = provider
        self.settings = settings
        self.listeners: list[InstallationListener] = list(listeners)

    def add_listener(self, listener: InstallationListener) -> None:
        self.listeners.append(listener)

    def install_token(self, credential: str) -> str:
        """
        Install a preconfigured bot token.

        The workspace ID is obtained with auth.test. Provider failures are
        raised: a static token that cannot be validated is a startup error.
        """
        identity = self.provider.identity_check(credential)
        logger.info(
            "Validated static Slack token",
            workspace_id=identity.team_id,
            credential=mask_credential(credential),
        )
        self._complete_installation(identity.team_id, credential)
        return identity.team_id

    def exchange_code(self, code: str) -> str:
        """
        Exchange an OAuth code and install the resulting bot token.

        Raises ConfigurationError when OAuth is disabled, ProviderCallError on
        API failure and MalformedOAuthResponseError when the response lacks
        the team ID or bot token. The registry is untouched on failure.
        """
        if not self.settings.oauth_enabled:
            raise ConfigurationError("OAuth installation is disabled, a static Slack token is configured")

        access = self.provider.exchange_oauth_code(
            self.settings.client_id, self.settings.client_secret, code
        )
        if not access.team_id:
            raise MalformedOAuthResponseError("The Slack API response does not contain a team identifier")
        if not access.bot_token:
            raise MalformedOAuthResponseError("The Slack API response does not contain a bot access token")

        logger.info(
            "Adding installation mapping",
            workspace_id=access.team_id,
            credential=mask_credential(access.bot_token),
        )
        self._complete_installation(access.team_id, access.bot_token)
        return access.team_id

    def handle_oauth_redirect(self, code: Optional[str]) -> dict:
        """Run the OAuth exchange and report the outcome as a JSON-ready body."""
        if not code:
            return {"Error": "The OAuth redirect does not contain a 'code' parameter"}
        try:
            workspace_id = self.exchange_code(code)
        except (ConfigurationError, MalformedOAuthResponseError) as e:
            logger.warning("OAuth installation rejected", error=str(e))
            return {"Error": str(e)}
        except ProviderCallError as e:
            logger.exception("OAuth code exchange failed", error=str(e))
            return {"Error": str(e)}
        logger.info("Workspace installed through OAuth", workspace_id=workspace_id)
        return {"Message": INSTALLED_MESSAGE}

    def _complete_installation(self, workspace_id: str, credential: str) -> None:
        self.registry.register(workspace_id, credential)
        self.channel_cache.reload(workspace_id)
        self._notify_new_installation(workspace_id, credential)

    def _notify_new_installation(self, workspace_id: str, credential: str) -> None:
        for listener in list(self.listeners):
            try:
                listener.on_new_installation(workspace_id, credential)
            except Exception as e:
                logger.exception(
                    "Installation listener failed",
                    workspace_id=workspace_id,
                    listener=type(listener).__name__,
                    error=str(e),
                )
