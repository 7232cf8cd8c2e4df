"""Slack Web API capability used by the workspace registry and channel cache."""

import json
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Protocol

from pydantic import ValidationError
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError
from slack_sdk.web import SlackResponse

from slack_connector.models.slack_api import (
    AuthIdentity,
    Conversation,
    ConversationType,
    OAuthAccess,
    SlackUser,
)
from slack_connector.utils.errors import ProviderCallError
from slack_connector.utils.logging import get_structured_logger, mask_sensitive_data

logger = get_structured_logger(__name__)


class SlackProvider(Protocol):
    """The narrow set of Slack calls the connector depends on."""

    def identity_check(self, credential: str) -> AuthIdentity: ...

    def exchange_oauth_code(self, client_id: str, client_secret: str, code: str) -> OAuthAccess: ...

    def list_conversations(
        self, credential: str, kinds: Iterable[ConversationType]
    ) -> list[Conversation]: ...

    def get_user(self, credential: str, user_id: str) -> SlackUser: ...

    def list_users(self, credential: str) -> list[SlackUser]: ...

    def get_presence(self, credential: str, user_id: str) -> str: ...

    def post_message(
        self, credential: str, channel_id: str, text: str, thread_ts: Optional[str] = None
    ) -> str: ...


def log_slack_response(method: str, response: SlackResponse) -> None:
    """Log a Slack API response before it is interpreted.

    The method and outcome go out at INFO; the masked payload at DEBUG.
    """
    logger.info(
        "Slack API response",
        slack_method=method,
        ok=response.get("ok"),
        slack_error=response.get("error"),
        status_code=response.status_code,
    )
    try:
        payload = json.dumps(response.data, default=str)
    except (TypeError, ValueError):
        payload = str(response.data)
    logger.debug(
        "Slack API response payload",
        slack_method=method,
        payload=mask_sensitive_data(payload[:2000]),
    )


@contextmanager
def parsing_response(method: str):
    """Turn a malformed response into ProviderCallError."""
    try:
        yield
    except (KeyError, AttributeError, TypeError, ValidationError) as e:
        logger.error("Malformed Slack API response", slack_method=method, error=str(e))
        raise ProviderCallError(method, f"malformed response: {e}") from e


class SlackWebProvider:
    """SlackProvider backed by slack_sdk's WebClient.

    A client is created per call because every workspace has its own token.
    Failures of any kind, including responses that cannot be parsed, are
    raised as ProviderCallError with the cause chained.
    """

    def __init__(self, timeout: int = 30, page_size: int = 200):
        self.timeout = timeout
        self.page_size = page_size

    def _client(self, token: Optional[str] = None) -> WebClient:
        return WebClient(token=token, timeout=self.timeout)

    def _call(self, method: str, token: Optional[str] = None, **kwargs) -> SlackResponse:
        client = self._client(token)
        try:
            response = getattr(client, method)(**kwargs)
        except SlackApiError as e:
            log_slack_response(method, e.response)
            raise ProviderCallError(method, str(e.response.get("error", e))) from e
        except (SlackClientError, OSError) as e:
            logger.error("Slack API transport error", slack_method=method, error=str(e))
            raise ProviderCallError(method, str(e)) from e
        log_slack_response(method, response)
        return response

    def _paginate(self, method: str, token: str, key: str, **kwargs) -> Iterator[dict]:
        cursor = None
        while True:
            params = dict(kwargs, limit=self.page_size)
            if cursor:
                params["cursor"] = cursor
            response = self._call(method, token, **params)
            yield from response.get(key) or []
            cursor = (response.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                break

    def identity_check(self, credential: str) -> AuthIdentity:
        response = self._call("auth_test", credential)
        with parsing_response("auth_test"):
            return AuthIdentity(
                team_id=response["team_id"],
                user_id=response.get("user_id"),
                team=response.get("team"),
            )

    def exchange_oauth_code(self, client_id: str, client_secret: str, code: str) -> OAuthAccess:
        response = self._call(
            "oauth_v2_access",
            client_id=client_id,
            client_secret=client_secret,
            code=code,
        )
        with parsing_response("oauth_v2_access"):
            return OAuthAccess.from_api(response.data)

    def list_conversations(
        self, credential: str, kinds: Iterable[ConversationType]
    ) -> list[Conversation]:
        types = ",".join(kind.value for kind in kinds)
        with parsing_response("conversations_list"):
            return [
                Conversation.from_api(channel)
                for channel in self._paginate("conversations_list", credential, "channels", types=types)
            ]

    def get_user(self, credential: str, user_id: str) -> SlackUser:
        response = self._call("users_info", credential, user=user_id)
        with parsing_response("users_info"):
            return SlackUser.from_api(response["user"])

    def list_users(self, credential: str) -> list[SlackUser]:
        with parsing_response("users_list"):
            return [
                SlackUser.from_api(member)
                for member in self._paginate("users_list", credential, "members")
            ]

    def get_presence(self, credential: str, user_id: str) -> str:
        response = self._call("users_getPresence", credential, user=user_id)
        return response.get("presence", "away")

    def post_message(
        self, credential: str, channel_id: str, text: str, thread_ts: Optional[str] = None
    ) -> str:
        params = {"channel": channel_id, "text": text}
        if thread_ts:
            params["thread_ts"] = thread_ts
        response = self._call("chat_postMessage", credential, **params)
        with parsing_response("chat_postMessage"):
            return response["ts"]
