"""Fake CredentialPrompt for testing."""

from pubsync.core.types import Credentials
from pubsync.integrations.prompt.abc import CredentialPrompt


class FakeCredentialPrompt(CredentialPrompt):
    """Answers with pre-configured credentials in order, then cancels.

    This class has NO public setup methods.
    """

    def __init__(self, *, answers: list[Credentials | None] | None = None) -> None:
        """Create FakeCredentialPrompt.

        Args:
            answers: Responses for successive ask() calls; None means cancelled.
                Once exhausted, every ask() is cancelled.
        """
        self._answers = list(answers or [])
        self._asked: list[str | None] = []

    def ask(self, identity_hint: str | None) -> Credentials | None:
        self._asked.append(identity_hint)
        if not self._answers:
            return None
        return self._answers.pop(0)

    @property
    def asked(self) -> list[str | None]:
        """Identity hints passed to ask(), in call order. For test assertions only."""
        return self._asked.copy()
