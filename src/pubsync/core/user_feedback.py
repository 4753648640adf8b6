"""User-facing diagnostic output with mode awareness."""

from abc import ABC, abstractmethod

import click

from pubsync.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing progress output that's mode-aware.

    Pipeline components call ctx.feedback methods instead of printing, so the
    same code runs quietly under --json and silently in tests.

    Mode behavior:
        Interactive mode:
            - info() → outputs to stderr
            - success() → outputs to stderr with green styling
            - warning() → outputs to stderr with yellow styling
            - error() → outputs to stderr with red styling

        Suppressed mode (--json):
            - info(), success(), warning() → suppressed
            - error() → still outputs to stderr with red styling
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message (suppressed in JSON mode)."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message (suppressed in JSON mode)."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show a non-fatal problem (suppressed in JSON mode)."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message (always shown)."""


class InteractiveFeedback(UserFeedback):
    """Feedback shown in interactive mode (all messages)."""

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))


class SuppressedFeedback(UserFeedback):
    """Feedback suppressed when stdout carries JSON (only errors shown)."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))


class FakeFeedback(UserFeedback):
    """Captures messages for test assertions instead of printing them."""

    def __init__(self) -> None:
        self._messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self._messages.append(("info", message))

    def success(self, message: str) -> None:
        self._messages.append(("success", message))

    def warning(self, message: str) -> None:
        self._messages.append(("warning", message))

    def error(self, message: str) -> None:
        self._messages.append(("error", message))

    @property
    def messages(self) -> list[tuple[str, str]]:
        """(level, message) pairs in emission order. For test assertions only."""
        return self._messages.copy()

    def of_level(self, level: str) -> list[str]:
        return [message for lvl, message in self._messages if lvl == level]
