"""Per-workspace state held by the workspace registry."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ChannelKind(str, Enum):
    """Channel classification."""
    DIRECT = "DIRECT"
    GROUP = "GROUP"


class ChannelSnapshot(BaseModel):
    """Immutable view of a workspace's channels as of one reload."""
    model_config = ConfigDict(frozen=True)

    names: dict[str, str] = Field(default_factory=dict, description="Name or ID -> channel ID")
    direct: frozenset[str] = Field(default_factory=frozenset, description="Direct channel IDs")
    group: frozenset[str] = Field(default_factory=frozenset, description="Group channel IDs")
    loaded_at: Optional[datetime] = Field(None, description="When the reload finished, None if never loaded")
    complete: bool = Field(default=True, description="False if the reload stopped on a provider error")

    def resolve(self, name_or_id: str) -> Optional[str]:
        return self.names.get(name_or_id)

    def kind_of(self, channel_id: str) -> Optional[ChannelKind]:
        if channel_id in self.direct:
            return ChannelKind.DIRECT
        if channel_id in self.group:
            return ChannelKind.GROUP
        return None


class ChannelSnapshotBuilder:
    """Accumulates a reload's results before they are published."""

    def __init__(self):
        self.names: dict[str, str] = {}
        self.kinds: dict[str, ChannelKind] = {}

    def add_group(self, channel_id: str, name: str) -> None:
        self.names[channel_id] = channel_id
        self.names[name] = channel_id
        self.kinds[channel_id] = ChannelKind.GROUP

    def add_direct(self, channel_id: str, user_names: list[str]) -> None:
        self.names[channel_id] = channel_id
        for user_name in user_names:
            self.names[user_name] = channel_id
        # a channel already seen with a name stays a group
        self.kinds.setdefault(channel_id, ChannelKind.DIRECT)

    def build(self, complete: bool = True) -> ChannelSnapshot:
        return ChannelSnapshot(
            names=dict(self.names),
            direct=frozenset(c for c, k in self.kinds.items() if k is ChannelKind.DIRECT),
            group=frozenset(c for c, k in self.kinds.items() if k is ChannelKind.GROUP),
            loaded_at=datetime.now(timezone.utc),
            complete=complete,
        )


class WorkspaceRecord(BaseModel):
    """Credential plus channel snapshot for one installed workspace."""
    model_config = ConfigDict(frozen=True)

    workspace_id: str = Field(..., description="Slack team ID")
    credential: str = Field(..., description="Bot access token")
    channels: ChannelSnapshot = Field(default_factory=ChannelSnapshot, description="Current channel snapshot")
