"""Per-workspace channel cache.

Maps every name a conversation can be addressed by (its ID, channel name,
or the counterpart's user name, real name and display name for direct
messages) to the conversation ID, and classifies each conversation as
direct or group.
"""

from slack_connector.models.slack_api import CHANNEL_CACHE_TYPES
from slack_connector.models.workspace import ChannelSnapshot, ChannelSnapshotBuilder
from slack_connector.services.slack_provider import SlackProvider
from slack_connector.services.workspace_registry import WorkspaceRegistry
from slack_connector.utils.errors import NotInstalledError, ProviderCallError
from slack_connector.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)


class ChannelCache:
    """Loads channel snapshots into the workspace registry."""

    def __init__(self, registry: WorkspaceRegistry, provider: SlackProvider):
        self.registry = registry
        self.provider = provider

    def reload(self, workspace_id: str) -> ChannelSnapshot:
        """
        Rebuild the workspace's channel snapshot from Slack and publish it.

        Best effort: a provider failure stops the reload, and whatever was
        collected up to that point is published (marked incomplete) and logged.
        Raises NotInstalledError if the workspace has no credential.
        """
        credential = self.registry.lookup(workspace_id)
        if credential is None:
            raise NotInstalledError(
                workspace_id,
                f"Cannot load the channels for workspace {workspace_id}, the bot is not installed in this workspace",
            )

        builder = ChannelSnapshotBuilder()
        complete = True
        with log_timing("reload_channels", logger=logger, workspace_id=workspace_id):
            try:
                conversations = self.provider.list_conversations(credential, CHANNEL_CACHE_TYPES)
                for conversation in conversations:
                    if conversation.name:
                        builder.add_group(conversation.id, conversation.name)
                        logger.debug(
                            "Cached group conversation",
                            workspace_id=workspace_id,
                            channel_id=conversation.id,
                            channel_name=conversation.name,
                        )
                    elif conversation.user:
                        user = self.provider.get_user(credential, conversation.user)
                        builder.add_direct(conversation.id, user.lookup_names)
                        logger.debug(
                            "Cached direct conversation",
                            workspace_id=workspace_id,
                            channel_id=conversation.id,
                            slack_user_id=user.id,
                        )
                    else:
                        builder.add_direct(conversation.id, [])
            except ProviderCallError as e:
                complete = False
                logger.error(
                    "Channel reload failed, keeping partial cache",
                    workspace_id=workspace_id,
                    error=str(e),
                    cached_names=len(builder.names),
                )

        snapshot = builder.build(complete=complete)
        self.registry.swap_channels(workspace_id, snapshot)
        logger.info(
            "Channels loaded",
            workspace_id=workspace_id,
            group_channels=len(snapshot.group),
            direct_channels=len(snapshot.direct),
            complete=complete,
        )
        return snapshot
