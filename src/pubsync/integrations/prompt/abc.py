"""Abstract interface for obtaining credentials interactively."""

from abc import ABC, abstractmethod

from pubsync.core.types import Credentials


class CredentialPrompt(ABC):
    @abstractmethod
    def ask(self, identity_hint: str | None) -> Credentials | None:
        """Ask for an identity and secret.

        Args:
            identity_hint: Identity to offer as the default, if known

        Returns:
            Credentials, or None if the user cancelled
        """
        ...
