"""Host file and process operations."""

from pubsync.integrations.host.abc import HostOps
from pubsync.integrations.host.fake import FakeHostOps

__all__ = ["FakeHostOps", "HostOps"]
