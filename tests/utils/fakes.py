"""In-memory test double for the Slack provider capability."""

from collections import Counter
from typing import Iterable, Optional

from slack_connector.models.slack_api import (
    AuthIdentity,
    Conversation,
    ConversationType,
    OAuthAccess,
    SlackUser,
)
from slack_connector.utils.errors import ProviderCallError


class FakeSlackProvider:
    """SlackProvider that serves canned workspace state and counts calls.

    ``conversations`` maps a token to the conversation list it sees. Use
    ``queue_conversations`` to return a different list on the next calls.
    """

    def __init__(self):
        self.tokens: dict[str, str] = {}  # token -> team_id
        self.conversations: dict[str, list[Conversation]] = {}
        self.queued: dict[str, list[list[Conversation]]] = {}
        self.users: dict[str, dict[str, SlackUser]] = {}
        self.presence: dict[str, str] = {}
        self.oauth_codes: dict[str, OAuthAccess] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: Counter = Counter()
        self.requested_kinds: list[tuple[ConversationType, ...]] = []
        self.posted: list[dict] = []

    def add_workspace(self, team_id: str, token: str, conversations=(), users=()) -> None:
        self.tokens[token] = team_id
        self.conversations[token] = list(conversations)
        self.users[token] = {user.id: user for user in users}

    def queue_conversations(self, token: str, *snapshots: list[Conversation]) -> None:
        self.queued.setdefault(token, []).extend(list(s) for s in snapshots)

    def fail(self, method: str, message: str = "internal_error") -> None:
        self.failures[method] = ProviderCallError(method, message)

    def _check(self, method: str) -> None:
        self.calls[method] += 1
        if method in self.failures:
            raise self.failures[method]

    def identity_check(self, credential: str) -> AuthIdentity:
        self._check("identity_check")
        if credential not in self.tokens:
            raise ProviderCallError("auth_test", "invalid_auth")
        return AuthIdentity(team_id=self.tokens[credential])

    def exchange_oauth_code(self, client_id: str, client_secret: str, code: str) -> OAuthAccess:
        self._check("exchange_oauth_code")
        if code not in self.oauth_codes:
            raise ProviderCallError("oauth_v2_access", "invalid_code")
        return self.oauth_codes[code]

    def list_conversations(self, credential: str, kinds: Iterable[ConversationType]) -> list[Conversation]:
        self._check("list_conversations")
        self.requested_kinds.append(tuple(kinds))
        if self.queued.get(credential):
            self.conversations[credential] = self.queued[credential].pop(0)
        return list(self.conversations.get(credential, []))

    def get_user(self, credential: str, user_id: str) -> SlackUser:
        self._check("get_user")
        try:
            return self.users[credential][user_id]
        except KeyError:
            raise ProviderCallError("users_info", "user_not_found")

    def list_users(self, credential: str) -> list[SlackUser]:
        self._check("list_users")
        return list(self.users.get(credential, {}).values())

    def get_presence(self, credential: str, user_id: str) -> str:
        self._check("get_presence")
        return self.presence.get(user_id, "away")

    def post_message(self, credential: str, channel_id: str, text: str, thread_ts: Optional[str] = None) -> str:
        self._check("post_message")
        self.posted.append({"credential": credential, "channel": channel_id, "text": text, "thread_ts": thread_ts})
        return f"1700000000.{len(self.posted):06d}"

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())
