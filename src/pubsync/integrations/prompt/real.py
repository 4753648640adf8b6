"""Terminal credential prompt built on click."""

import click

from pubsync.core.types import Credentials
from pubsync.integrations.prompt.abc import CredentialPrompt


class ClickCredentialPrompt(CredentialPrompt):
    """Prompts on the controlling terminal; Ctrl-C or EOF cancels."""

    def ask(self, identity_hint: str | None) -> Credentials | None:
        try:
            identity = click.prompt("Username", default=identity_hint, err=True)
            secret = click.prompt("Password", hide_input=True, err=True)
        except click.Abort:
            return None
        if not identity or not secret:
            return None
        return Credentials(identity=str(identity), secret=str(secret))


class NonInteractivePrompt(CredentialPrompt):
    """Prompt used with --json or no TTY: every request counts as cancelled."""

    def ask(self, identity_hint: str | None) -> Credentials | None:
        return None
