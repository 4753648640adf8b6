"""Ensure an authenticated package client session on a host."""

import logging

from pubsync.core.errors import (
    InvalidApiKeyError,
    LoginAttemptsExhaustedError,
    LoginCancelledError,
)
from pubsync.core.types import Credentials, RuntimeHandle
from pubsync.core.user_feedback import UserFeedback
from pubsync.integrations.package_client.abc import PackageClient
from pubsync.integrations.prompt.abc import CredentialPrompt

logger = logging.getLogger(__name__)


class SessionAuthenticator:
    """Logs the package client in, prompting for credentials when needed.

    With an API key there is exactly one login attempt. Otherwise an existing
    session is kept unless it belongs to a different identity than the one
    requested, and the login loop runs until it succeeds, the prompt is
    cancelled, or `max_attempts` failed attempts have been made.
    """

    def __init__(
        self,
        package_client: PackageClient,
        prompt: CredentialPrompt,
        feedback: UserFeedback,
        *,
        max_attempts: int | None,
    ) -> None:
        self._package_client = package_client
        self._prompt = prompt
        self._feedback = feedback
        self._max_attempts = max_attempts

    def ensure_session(
        self,
        runtime: RuntimeHandle,
        *,
        identity: str | None = None,
        secret: str | None = None,
        api_key: str | None = None,
    ) -> Credentials | None:
        """Make sure the client on `runtime.host` is logged in.

        Returns:
            The credentials a password login succeeded with, or None when an
            API key was used or the existing session was kept

        Raises:
            InvalidApiKeyError: If the API key is rejected
            LoginCancelledError: If the user cancels the credential prompt
            LoginAttemptsExhaustedError: If the attempt cap is reached
        """
        host = runtime.host.name

        if api_key is not None:
            result = self._package_client.login_with_api_key(runtime, api_key, all_users=True)
            if not result.success:
                raise InvalidApiKeyError(host, result.message)
            logger.debug("Logged in on %s with API key", host)
            return None

        current = self._package_client.current_user(runtime)
        if current is not None:
            if identity is None or current.casefold() == identity.casefold():
                logger.debug("Keeping existing session for %s on %s", current, host)
                return None
            self._feedback.info(f"{host} is logged in as {current}, logging in as {identity}")

        attempts = 0
        while True:
            if not identity or not secret:
                answer = self._prompt.ask(identity)
                if answer is None:
                    raise LoginCancelledError(host)
                identity, secret = answer.identity, answer.secret

            attempts += 1
            result = self._package_client.login(runtime, identity, secret, all_users=True)
            if result.success:
                logger.debug("Logged in on %s as %s after %d attempt(s)", host, identity, attempts)
                return Credentials(identity=identity, secret=secret)

            # A rejected secret is never sent again.
            secret = None
            detail = f": {result.message}" if result.message else ""
            self._feedback.warning(f"Login as {identity} failed on {host}{detail}")
            if self._max_attempts is not None and attempts >= self._max_attempts:
                raise LoginAttemptsExhaustedError(host, attempts)
