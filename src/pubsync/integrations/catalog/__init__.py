"""Published-application catalog integration."""

from pubsync.integrations.catalog.abc import CatalogClient
from pubsync.integrations.catalog.fake import FakeCatalogClient

__all__ = ["CatalogClient", "FakeCatalogClient"]
