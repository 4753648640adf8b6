"""Application context with dependency injection."""

from dataclasses import dataclass, replace

import click

from pubsync.cli.output import user_output
from pubsync.core.config import ConfigStore, PubsyncConfig, RealConfigStore
from pubsync.core.locks import ScopeLocks
from pubsync.core.types import TargetHost
from pubsync.core.user_feedback import InteractiveFeedback, SuppressedFeedback, UserFeedback
from pubsync.integrations.catalog.abc import CatalogClient
from pubsync.integrations.catalog.broker import BrokerCatalogClient
from pubsync.integrations.catalog.dry_run import DryRunCatalogClient
from pubsync.integrations.catalog.xenapp65 import XenApp65CatalogClient
from pubsync.integrations.executor.abc import RemoteExecutor
from pubsync.integrations.executor.local import LocalExecutor
from pubsync.integrations.executor.routing import RoutingExecutor
from pubsync.integrations.executor.ssh import SshExecutor
from pubsync.integrations.host.abc import HostOps
from pubsync.integrations.host.real import RealHostOps
from pubsync.integrations.package_client.abc import PackageClient
from pubsync.integrations.package_client.real import RealPackageClient
from pubsync.integrations.prompt.abc import CredentialPrompt
from pubsync.integrations.prompt.real import ClickCredentialPrompt, NonInteractivePrompt
from pubsync.integrations.shortcuts.abc import ShortcutInspector
from pubsync.integrations.shortcuts.real import RealShortcutInspector

SSH_CONNECT_TIMEOUT_SECONDS = 15


@dataclass(frozen=True)
class PubsyncContext:
    """Immutable context holding all dependencies for pubsync operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    executor: RemoteExecutor
    package_client: PackageClient
    shortcuts: ShortcutInspector
    catalog: CatalogClient
    host_ops: HostOps
    prompt: CredentialPrompt
    feedback: UserFeedback
    config_store: ConfigStore
    config: PubsyncConfig
    locks: ScopeLocks
    dry_run: bool

    def with_modes(self, *, dry_run: bool, json_mode: bool) -> "PubsyncContext":
        """Return a context adjusted for per-command --dry-run and --json flags.

        JSON mode silences progress output and disables interactive prompting,
        since stdout must carry nothing but the JSON document.
        """
        ctx = self
        if json_mode:
            ctx = replace(ctx, feedback=SuppressedFeedback(), prompt=NonInteractivePrompt())
        if dry_run and not ctx.dry_run:
            ctx = replace(
                ctx, catalog=DryRunCatalogClient(ctx.catalog, ctx.feedback), dry_run=True
            )
        return ctx

    @staticmethod
    def for_test(
        executor: RemoteExecutor | None = None,
        package_client: PackageClient | None = None,
        shortcuts: ShortcutInspector | None = None,
        catalog: CatalogClient | None = None,
        host_ops: HostOps | None = None,
        prompt: CredentialPrompt | None = None,
        feedback: UserFeedback | None = None,
        config_store: ConfigStore | None = None,
        config: PubsyncConfig | None = None,
        locks: ScopeLocks | None = None,
        dry_run: bool = False,
    ) -> "PubsyncContext":
        """Create test context with optional pre-configured integration classes.

        Unspecified integrations default to empty fakes. The default host ops
        report the first configured install path as present, so the package
        client counts as installed unless a test passes its own FakeHostOps.

        Args:
            executor: If None, creates an empty FakeExecutor.
            package_client: If None, creates an empty FakePackageClient.
            shortcuts: If None, creates a FakeShortcutInspector that synthesizes
                shortcuts for every app.
            catalog: If None, creates an empty FakeCatalogClient.
            host_ops: If None, creates FakeHostOps with the client installed.
            prompt: If None, creates a FakeCredentialPrompt that always cancels.
            feedback: If None, creates FakeFeedback.
            config_store: If None, creates FakeConfigStore holding `config`.
            config: If None, uses PubsyncConfig defaults.
            locks: If None, creates fresh ScopeLocks.
            dry_run: Whether to wrap the catalog in DryRunCatalogClient.
        """
        from pubsync.core.user_feedback import FakeFeedback
        from pubsync.integrations.catalog.fake import FakeCatalogClient
        from pubsync.integrations.executor.fake import FakeExecutor
        from pubsync.integrations.host.fake import FakeHostOps
        from pubsync.integrations.package_client.fake import FakePackageClient
        from pubsync.integrations.prompt.fake import FakeCredentialPrompt
        from pubsync.integrations.shortcuts.fake import FakeShortcutInspector

        if config is None:
            config = PubsyncConfig()
        if config_store is None:
            from pubsync.core.config import FakeConfigStore

            config_store = FakeConfigStore(config=config)
        if executor is None:
            executor = FakeExecutor()
        if package_client is None:
            package_client = FakePackageClient()
        if shortcuts is None:
            shortcuts = FakeShortcutInspector()
        if catalog is None:
            catalog = FakeCatalogClient()
        if host_ops is None:
            host_ops = FakeHostOps(files_everywhere=config.client_install_paths[:1])
        if prompt is None:
            prompt = FakeCredentialPrompt()
        if feedback is None:
            feedback = FakeFeedback()
        if locks is None:
            locks = ScopeLocks()

        # Apply dry-run wrapper if needed (matching production behavior)
        if dry_run:
            catalog = DryRunCatalogClient(catalog, feedback)

        return PubsyncContext(
            executor=executor,
            package_client=package_client,
            shortcuts=shortcuts,
            catalog=catalog,
            host_ops=host_ops,
            prompt=prompt,
            feedback=feedback,
            config_store=config_store,
            config=config,
            locks=locks,
            dry_run=dry_run,
        )


def build_catalog(executor: RemoteExecutor, config: PubsyncConfig) -> CatalogClient:
    """Choose the catalog implementation matching the configured Citrix generation."""
    if config.citrix_version == "6.5":
        return XenApp65CatalogClient(
            executor,
            management_host=TargetHost(name=config.broker_host),
            accounts=config.publish_accounts,
            timeout=config.command_timeout_seconds,
        )
    return BrokerCatalogClient(
        executor,
        management_host=TargetHost(name=config.broker_host),
        timeout=config.command_timeout_seconds,
    )


def create_context(*, dry_run: bool, json_mode: bool = False) -> PubsyncContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        dry_run: If True, wrap the catalog so writes are reported, not executed
        json_mode: If True, suppress progress output and never prompt

    Returns:
        PubsyncContext with real implementations
    """
    # 1. Load config (missing file = defaults)
    config_store = RealConfigStore()
    try:
        config = config_store.load()
    except ValueError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    # 2. Transport: local PowerShell for this machine, ssh for everything else
    executor: RemoteExecutor = RoutingExecutor(
        local=LocalExecutor(config.powershell_exe),
        remote=SshExecutor(
            user=config.ssh_user,
            port=config.ssh_port,
            connect_timeout=SSH_CONNECT_TIMEOUT_SECONDS,
            powershell_exe=config.powershell_exe,
        ),
    )

    # 3. Integrations over the transport
    timeout = config.command_timeout_seconds
    ctx = PubsyncContext(
        executor=executor,
        package_client=RealPackageClient(executor, timeout=timeout),
        shortcuts=RealShortcutInspector(executor, timeout=timeout),
        catalog=build_catalog(executor, config),
        host_ops=RealHostOps(executor, timeout=timeout),
        prompt=ClickCredentialPrompt(),
        feedback=InteractiveFeedback(),
        config_store=config_store,
        config=config,
        locks=ScopeLocks(),
        dry_run=False,
    )

    # 4. Mode adjustments (dry-run wrapper, JSON quieting)
    return ctx.with_modes(dry_run=dry_run, json_mode=json_mode)
