"""Credential prompt integration."""

from pubsync.integrations.prompt.abc import CredentialPrompt
from pubsync.integrations.prompt.fake import FakeCredentialPrompt

__all__ = ["CredentialPrompt", "FakeCredentialPrompt"]
