"""Collaborator interfaces: installation listeners and the session store."""

import threading
from typing import Any, Protocol

SESSION_KEY_SEPARATOR = "@"


class InstallationListener(Protocol):
    """Anything that must start serving a workspace once it is installed."""

    def on_new_installation(self, workspace_id: str, credential: str) -> None: ...


class SessionStore(Protocol):
    """The bot runtime's session/context store."""

    def get_or_create_context(self, session_key: str) -> Any: ...


def session_key(workspace_id: str, channel_id: str) -> str:
    return f"{workspace_id}{SESSION_KEY_SEPARATOR}{channel_id}"


class InMemorySessionStore:
    """Minimal SessionStore keeping one dict per session key."""

    def __init__(self):
        self._contexts: dict[str, dict] = {}
        self._lock = threading.Lock()

    def get_or_create_context(self, session_key: str) -> dict:
        with self._lock:
            return self._contexts.setdefault(session_key, {"session_id": session_key})

    def __len__(self) -> int:
        return len(self._contexts)
