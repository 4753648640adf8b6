"""Script execution on local and remote hosts."""

from pubsync.integrations.executor.abc import CommandResult, RemoteExecutor
from pubsync.integrations.executor.fake import FakeExecutor

__all__ = ["CommandResult", "FakeExecutor", "RemoteExecutor"]
