"""Exception taxonomy for the reconciliation pipeline.

Stage failures (bootstrap, authenticate, subscribe) are fatal for the host
they occur on. Per-entry publish failures are values (PublishFailure), not
exceptions, so they never abort sibling entries.
"""


class PubsyncError(Exception):
    """Base class for expected pipeline failures."""


class IntegrationError(RuntimeError):
    """Raised by real integrations when a command fails or returns bad output."""


class ShortcutNotFoundError(IntegrationError):
    """Raised when no shortcut exists for an installed application."""

    def __init__(self, host: str, app_name: str) -> None:
        self.host = host
        self.app_name = app_name
        super().__init__(f"No shortcut found for '{app_name}' on {host}")


class DownloadFailedError(PubsyncError):
    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download installer from {url}: {reason}")


class InstallFailedError(PubsyncError):
    def __init__(self, host: str, reason: str) -> None:
        self.host = host
        self.reason = reason
        super().__init__(f"Failed to install package client on {host}: {reason}")


class AuthenticationError(PubsyncError):
    """Base class for session failures."""


class InvalidApiKeyError(AuthenticationError):
    def __init__(self, host: str, message: str) -> None:
        self.host = host
        self.message = message
        text = f"API key login rejected on {host}"
        if message:
            text += f": {message}"
        super().__init__(text)


class LoginCancelledError(AuthenticationError):
    def __init__(self, host: str) -> None:
        self.host = host
        super().__init__(f"Login cancelled for {host}")


class LoginAttemptsExhaustedError(AuthenticationError):
    def __init__(self, host: str, attempts: int) -> None:
        self.host = host
        self.attempts = attempts
        super().__init__(f"Login failed on {host} after {attempts} attempt(s)")


class SubscriptionFailedError(PubsyncError):
    """Raised when the package client reports a non-success subscription status.

    Carries every error message from the event stream.
    """

    def __init__(self, subscription: str, messages: list[str]) -> None:
        self.subscription = subscription
        self.messages = messages
        detail = "; ".join(messages) if messages else "no error details reported"
        super().__init__(f"Subscription '{subscription}' failed: {detail}")


class GroupDiscoveryFailedError(PubsyncError):
    def __init__(self, group: str, reason: str) -> None:
        self.group = group
        self.reason = reason
        super().__init__(f"Could not discover hosts of group '{group}': {reason}")
