"""Parsing of the package client's `--format=json` output.

The client prints one JSON document per command:

    {
      "result": {
        "exitCode": 0,
        "user": {"login": "svc-citrix"},
        "events": [
          {"event": "install", "name": "Acme Viewer"},
          {"event": "uninstall", "name": "Old Tool"},
          {"event": "error", "name": "Broken App", "message": "checksum mismatch"}
        ]
      },
      "error": {"message": "subscription not found"}
    }

`result.exitCode` and the process exit code both have to be zero for the
command to count as successful. A top-level `error` is reported as an
additional ERROR event.
"""

import json
import logging
from typing import Any

from pubsync.core.errors import IntegrationError
from pubsync.core.types import ClientResult, EventKind, SubscriptionEvent, SubscriptionResult

logger = logging.getLogger(__name__)

_EVENT_KINDS = {
    "install": EventKind.INSTALL,
    "uninstall": EventKind.UNINSTALL,
    "error": EventKind.ERROR,
}


def _load(stdout: str) -> dict[str, Any] | None:
    text = stdout.strip()
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    return data


def _result_section(data: dict[str, Any]) -> dict[str, Any]:
    result = data.get("result")
    if isinstance(result, dict):
        return result
    return {}


def _error_message(data: dict[str, Any]) -> str | None:
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return str(message) if message else None
    if isinstance(error, str) and error:
        return error
    return None


def _succeeded(returncode: int, data: dict[str, Any]) -> bool:
    if returncode != 0:
        return False
    exit_code = _result_section(data).get("exitCode", 0)
    return exit_code == 0


def _fallback_message(stdout: str, stderr: str) -> str:
    for text in (stderr, stdout):
        stripped = text.strip()
        if stripped:
            return stripped
    return "package client returned no output"


def parse_event(raw: Any) -> SubscriptionEvent | None:
    """Convert one raw event object; unknown event kinds return None."""
    if not isinstance(raw, dict):
        return None
    kind = _EVENT_KINDS.get(str(raw.get("event", "")).lower())
    if kind is None:
        logger.debug("Ignoring package client event %r", raw)
        return None
    name = str(raw.get("name", ""))
    if kind == EventKind.ERROR:
        message = raw.get("message")
        return SubscriptionEvent(name=name, kind=kind, message=str(message) if message else name)
    return SubscriptionEvent(name=name, kind=kind)


def parse_subscription_output(returncode: int, stdout: str, stderr: str) -> SubscriptionResult:
    """Build a SubscriptionResult from a subscribe/unsubscribe invocation.

    Raises:
        IntegrationError: If the process succeeded but printed no parseable JSON
    """
    data = _load(stdout)
    if data is None:
        if returncode == 0:
            raise IntegrationError(
                f"Package client returned unparseable subscription output: {stdout.strip()[:500]}"
            )
        message = _fallback_message(stdout, stderr)
        return SubscriptionResult(
            success=False,
            events=[SubscriptionEvent(name="", kind=EventKind.ERROR, message=message)],
        )

    events: list[SubscriptionEvent] = []
    raw_events = _result_section(data).get("events") or []
    if isinstance(raw_events, list):
        for raw in raw_events:
            event = parse_event(raw)
            if event is not None:
                events.append(event)

    error = _error_message(data)
    if error is not None:
        events.append(SubscriptionEvent(name="", kind=EventKind.ERROR, message=error))

    return SubscriptionResult(success=_succeeded(returncode, data), events=events)


def parse_client_result(returncode: int, stdout: str, stderr: str) -> ClientResult:
    """Build a ClientResult for commands without an event stream (login, cache)."""
    data = _load(stdout)
    if data is None:
        if returncode == 0:
            return ClientResult(success=True)
        return ClientResult(success=False, message=_fallback_message(stdout, stderr))
    success = _succeeded(returncode, data)
    message = _error_message(data) or ""
    if not success and not message:
        message = _fallback_message("", stderr) if stderr.strip() else "command failed"
    return ClientResult(success=success, message=message)


def parse_current_user(stdout: str) -> str | None:
    """Extract `result.user.login`; None when no session is active."""
    data = _load(stdout)
    if data is None:
        return None
    user = _result_section(data).get("user")
    if not isinstance(user, dict):
        return None
    login = user.get("login")
    if not login:
        return None
    return str(login)
