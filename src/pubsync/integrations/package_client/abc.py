"""Abstract base class for package client operations."""

from abc import ABC, abstractmethod

from pubsync.core.types import ClientResult, RuntimeHandle, SubscriptionResult


class PackageClient(ABC):
    """Abstract interface to the package client installed on a host.

    All implementations (real and fake) must implement this interface. Every
    operation addresses the client located by the Bootstrapper.
    """

    @abstractmethod
    def current_user(self, runtime: RuntimeHandle) -> str | None:
        """Identity of the session currently logged in on the host, or None."""
        ...

    @abstractmethod
    def login(
        self, runtime: RuntimeHandle, identity: str, secret: str, *, all_users: bool
    ) -> ClientResult:
        """Log in with an identity and secret.

        Returns:
            ClientResult; success=False for rejected credentials
        """
        ...

    @abstractmethod
    def login_with_api_key(
        self, runtime: RuntimeHandle, api_key: str, *, all_users: bool
    ) -> ClientResult:
        """Log in with a static API key."""
        ...

    @abstractmethod
    def subscribe(
        self, runtime: RuntimeHandle, subscription: str, *, all_users: bool
    ) -> SubscriptionResult:
        """Subscribe the host to a subscription and report the resulting changes.

        Returns:
            SubscriptionResult whose `success` is the client's overall status
            and whose events list every install, uninstall and error
        """
        ...

    @abstractmethod
    def unsubscribe(
        self, runtime: RuntimeHandle, subscription: str, *, all_users: bool
    ) -> SubscriptionResult:
        """Unsubscribe the host and report the resulting changes."""
        ...

    @abstractmethod
    def cache_warm(self, runtime: RuntimeHandle, subscription: str) -> ClientResult:
        """Pre-download the subscription's application content to the host."""
        ...
