"""Production package client driving the client executable through the executor."""

from pubsync.core.types import ClientResult, RuntimeHandle, SubscriptionResult
from pubsync.integrations.executor.abc import CommandResult, RemoteExecutor
from pubsync.integrations.executor.commands import ps_quote
from pubsync.integrations.package_client.abc import PackageClient
from pubsync.integrations.package_client.parsing import (
    parse_client_result,
    parse_current_user,
    parse_subscription_output,
)


class RealPackageClient(PackageClient):
    """Production implementation invoking the client CLI on the target host.

    Every command is run with `--format=json` and its exit code is propagated
    out of PowerShell so parsing sees both.
    """

    def __init__(self, executor: RemoteExecutor, *, timeout: float | None) -> None:
        self._executor = executor
        self._timeout = timeout

    def _invoke(self, runtime: RuntimeHandle, args: list[str]) -> CommandResult:
        rendered = " ".join(ps_quote(arg) for arg in [*args, "--format=json"])
        script = f"& {ps_quote(runtime.executable)} {rendered}\nexit $LASTEXITCODE\n"
        return self._executor.run(runtime.host, script, timeout=self._timeout)

    def current_user(self, runtime: RuntimeHandle) -> str | None:
        result = self._invoke(runtime, ["config"])
        if not result.ok:
            return None
        return parse_current_user(result.stdout)

    def login(
        self, runtime: RuntimeHandle, identity: str, secret: str, *, all_users: bool
    ) -> ClientResult:
        args = ["login", identity, secret]
        if all_users:
            args.append("--all-users")
        result = self._invoke(runtime, args)
        return parse_client_result(result.returncode, result.stdout, result.stderr)

    def login_with_api_key(
        self, runtime: RuntimeHandle, api_key: str, *, all_users: bool
    ) -> ClientResult:
        args = ["login", f"--api-key={api_key}"]
        if all_users:
            args.append("--all-users")
        result = self._invoke(runtime, args)
        return parse_client_result(result.returncode, result.stdout, result.stderr)

    def subscribe(
        self, runtime: RuntimeHandle, subscription: str, *, all_users: bool
    ) -> SubscriptionResult:
        args = ["subscribe", subscription]
        if all_users:
            args.append("--all-users")
        result = self._invoke(runtime, args)
        return parse_subscription_output(result.returncode, result.stdout, result.stderr)

    def unsubscribe(
        self, runtime: RuntimeHandle, subscription: str, *, all_users: bool
    ) -> SubscriptionResult:
        args = ["unsubscribe", subscription]
        if all_users:
            args.append("--all-users")
        result = self._invoke(runtime, args)
        return parse_subscription_output(result.returncode, result.stdout, result.stderr)

    def cache_warm(self, runtime: RuntimeHandle, subscription: str) -> ClientResult:
        result = self._invoke(runtime, ["subscription", subscription, "--cache"])
        return parse_client_result(result.returncode, result.stdout, result.stderr)
