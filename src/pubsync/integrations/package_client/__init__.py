"""Package client integration."""

from pubsync.integrations.package_client.abc import PackageClient
from pubsync.integrations.package_client.fake import FakePackageClient

__all__ = ["FakePackageClient", "PackageClient"]
