"""PowerShell script helpers with rich error context.

Scripts are handed to powershell.exe through -EncodedCommand so that no
quoting layer (local argv, ssh remote shell) can mangle them.
"""

import base64
import json
import logging
from typing import Any

from pubsync.core.errors import IntegrationError
from pubsync.core.types import TargetHost
from pubsync.integrations.executor.abc import CommandResult, RemoteExecutor

logger = logging.getLogger(__name__)


def ps_quote(value: str) -> str:
    """Quote a value as a single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"


def ps_array(values: list[str]) -> str:
    """Render a list as a PowerShell array literal of quoted strings."""
    return "@(" + ", ".join(ps_quote(v) for v in values) + ")"


def encode_command(script: str) -> str:
    """Encode a script for powershell.exe -EncodedCommand (base64 of UTF-16LE)."""
    return base64.b64encode(script.encode("utf-16-le")).decode("ascii")


# Forces UTF-8 on stdout so JSON output decodes the same on every host.
UTF8_PREAMBLE = "[Console]::OutputEncoding = [System.Text.Encoding]::UTF8\n"


def powershell_argv(powershell_exe: str, script: str) -> list[str]:
    return [
        powershell_exe,
        "-NonInteractive",
        "-NoProfile",
        "-ExecutionPolicy",
        "Bypass",
        "-EncodedCommand",
        encode_command(UTF8_PREAMBLE + script),
    ]


def run_checked(
    executor: RemoteExecutor,
    host: TargetHost,
    script: str,
    operation_context: str,
    *,
    timeout: float | None,
) -> CommandResult:
    """Run a script and raise IntegrationError with context on non-zero exit.

    Args:
        executor: Executor to run the script through
        host: Target host
        script: PowerShell script text (never logged; may contain secrets)
        operation_context: Human-readable description of the operation
        timeout: Seconds before the call is abandoned

    Returns:
        CommandResult of the successful execution

    Raises:
        IntegrationError: If the script exits non-zero
    """
    logger.debug("Running '%s' on %s", operation_context, host.name)
    result = executor.run(host, script, timeout=timeout)
    return check_result(result, host, operation_context)


def check_result(result: CommandResult, host: TargetHost, operation_context: str) -> CommandResult:
    """Return `result` unchanged if it succeeded, else raise IntegrationError.

    The error message carries operation context, exit code, stdout and stderr.
    """
    if result.ok:
        return result

    error_msg = f"Failed to {operation_context} on {host.name}"
    error_msg += f"\nExit code: {result.returncode}"
    stdout_stripped = result.stdout.strip()
    if stdout_stripped:
        error_msg += f"\nstdout: {stdout_stripped}"
    stderr_stripped = result.stderr.strip()
    if stderr_stripped:
        error_msg += f"\nstderr: {stderr_stripped}"
    raise IntegrationError(error_msg)


def parse_json_output(stdout: str, operation_context: str) -> Any:
    """Parse ConvertTo-Json output; empty output parses as None."""
    text = stdout.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise IntegrationError(
            f"Could not parse output of '{operation_context}' as JSON: {e}\noutput: {text[:500]}"
        ) from e


def as_list(value: Any) -> list[Any]:
    """Normalize ConvertTo-Json output, which collapses one-element arrays."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
