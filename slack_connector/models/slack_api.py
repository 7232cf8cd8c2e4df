"""Slack Web API payload models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ConversationType(str, Enum):
    """Conversation kinds requested from conversations.list.

    Private channels are deliberately absent: the cache only covers public
    channels, direct messages and multi-person direct messages.
    """
    PUBLIC_CHANNEL = "public_channel"
    IM = "im"
    MPIM = "mpim"


CHANNEL_CACHE_TYPES = (ConversationType.PUBLIC_CHANNEL, ConversationType.IM, ConversationType.MPIM)


class AuthIdentity(BaseModel):
    """Result of auth.test for a token."""
    team_id: str = Field(..., description="Workspace (team) ID the token belongs to")
    user_id: Optional[str] = Field(None, description="Bot user ID")
    team: Optional[str] = Field(None, description="Workspace name")


class OAuthAccess(BaseModel):
    """Result of an OAuth code exchange. Either field may be missing."""
    team_id: Optional[str] = Field(None, description="Installing workspace ID")
    bot_token: Optional[str] = Field(None, description="Bot access token")

    @classmethod
    def from_api(cls, data: dict) -> "OAuthAccess":
        team = data.get("team") or {}
        team_id = team.get("id") if isinstance(team, dict) else None
        bot_token = data.get("access_token") if data.get("token_type", "bot") == "bot" else None
        return cls(team_id=team_id or data.get("team_id"), bot_token=bot_token)


class Conversation(BaseModel):
    """A conversation returned by conversations.list."""
    id: str = Field(..., description="Conversation ID")
    name: Optional[str] = Field(None, description="Channel name, absent for direct messages")
    user: Optional[str] = Field(None, description="Counterpart user ID for direct messages")

    @classmethod
    def from_api(cls, data: dict) -> "Conversation":
        return cls(id=data["id"], name=data.get("name") or None, user=data.get("user"))


class SlackUser(BaseModel):
    """A workspace member as returned by users.info / users.list."""
    id: str = Field(..., description="User ID")
    name: Optional[str] = Field(None, description="Login name")
    real_name: Optional[str] = Field(None, description="Real name")
    display_name: Optional[str] = Field(None, description="Profile display name")

    @classmethod
    def from_api(cls, data: dict) -> "SlackUser":
        profile = data.get("profile") or {}
        return cls(
            id=data["id"],
            name=data.get("name"),
            real_name=data.get("real_name") or profile.get("real_name"),
            display_name=profile.get("display_name"),
        )

    @property
    def lookup_names(self) -> list[str]:
        """Names a direct conversation with this user can be addressed by."""
        return [n for n in (self.name, self.real_name, self.display_name) if n]
