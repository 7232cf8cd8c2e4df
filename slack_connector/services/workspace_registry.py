"""In-memory registry of installed workspaces.

Holds one immutable WorkspaceRecord per workspace: its credential and the
latest channel snapshot. Records are replaced wholesale under a lock and
never mutated, so a reader that fetched a record keeps a consistent view
while a reload publishes the next one.
"""

import threading
from typing import Optional

from slack_connector.models.workspace import ChannelSnapshot, WorkspaceRecord
from slack_connector.utils.errors import NotInstalledError
from slack_connector.utils.logging import get_structured_logger, mask_credential

logger = get_structured_logger(__name__)


class WorkspaceRegistry:
    """Workspace ID -> credential and channel snapshot."""

    def __init__(self):
        self._records: dict[str, WorkspaceRecord] = {}
        self._lock = threading.Lock()

    def register(self, workspace_id: str, credential: str) -> None:
        """Insert or overwrite the credential for a workspace.

        The existing channel snapshot is kept until the caller reloads it.
        """
        with self._lock:
            previous = self._records.get(workspace_id)
            channels = previous.channels if previous else ChannelSnapshot()
            self._records[workspace_id] = WorkspaceRecord(
                workspace_id=workspace_id,
                credential=credential,
                channels=channels,
            )
        logger.info(
            "Registered workspace credential",
            workspace_id=workspace_id,
            credential=mask_credential(credential),
            reinstall=previous is not None,
        )

    def lookup(self, workspace_id: str) -> Optional[str]:
        record = self._records.get(workspace_id)
        return record.credential if record else None

    def is_installed(self, workspace_id: str) -> bool:
        return workspace_id in self._records

    def get(self, workspace_id: str) -> WorkspaceRecord:
        """Return the workspace's current record or raise NotInstalledError."""
        record = self._records.get(workspace_id)
        if record is None:
            raise NotInstalledError(workspace_id)
        return record

    def channels(self, workspace_id: str) -> ChannelSnapshot:
        return self.get(workspace_id).channels

    def swap_channels(self, workspace_id: str, snapshot: ChannelSnapshot) -> None:
        """Publish a freshly built snapshot, discarding the previous one."""
        with self._lock:
            record = self._records.get(workspace_id)
            if record is None:
                raise NotInstalledError(workspace_id)
            self._records[workspace_id] = record.model_copy(update={"channels": snapshot})

    def workspace_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._records)
