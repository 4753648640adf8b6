"""Data types shared by the reconciliation engine and its integrations."""

from dataclasses import dataclass, field
from enum import Enum

LOCAL_HOST_NAMES = frozenset({"localhost", "."})


class EventKind(str, Enum):
    """Kind of change reported by the package client for one application."""

    INSTALL = "install"
    UNINSTALL = "uninstall"
    ERROR = "error"


class SubscriptionMode(str, Enum):
    """Direction of a reconciliation run."""

    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"


class Stage(str, Enum):
    """Pipeline stage a host reached before stopping."""

    BOOTSTRAP = "bootstrap"
    AUTHENTICATE = "authenticate"
    SUBSCRIBE = "subscribe"
    PUBLISH = "publish"
    COMPLETE = "complete"


@dataclass(frozen=True)
class TargetHost:
    """A machine the pipeline runs against."""

    name: str

    @property
    def is_local(self) -> bool:
        return self.name.lower() in LOCAL_HOST_NAMES

    @staticmethod
    def local() -> "TargetHost":
        return TargetHost(name="localhost")


@dataclass(frozen=True)
class RuntimeHandle:
    """Located package client executable on a host."""

    host: TargetHost
    executable: str


@dataclass(frozen=True)
class Credentials:
    identity: str
    secret: str


@dataclass(frozen=True)
class ClientResult:
    """Outcome of a package client command without an event stream."""

    success: bool
    message: str = ""


@dataclass(frozen=True)
class SubscriptionEvent:
    """One change reported by a subscribe or unsubscribe operation.

    `message` is only populated for EventKind.ERROR events.
    """

    name: str
    kind: EventKind
    message: str | None = None


@dataclass(frozen=True)
class SubscriptionResult:
    """Overall status plus the ordered event stream of a subscription call.

    `success` reflects the client's own status and is independent of
    whether individual ERROR events were reported.
    """

    success: bool
    events: list[SubscriptionEvent]

    @property
    def installed(self) -> list[str]:
        return [e.name for e in self.events if e.kind == EventKind.INSTALL]

    @property
    def removed(self) -> list[str]:
        return [e.name for e in self.events if e.kind == EventKind.UNINSTALL]

    @property
    def errors(self) -> list[str]:
        return [e.message or e.name for e in self.events if e.kind == EventKind.ERROR]


@dataclass(frozen=True)
class IconSource:
    """Icon resource identified by a file path and a resource index."""

    path: str
    index: int


@dataclass(frozen=True)
class AppShortcutInfo:
    """Launch metadata read from the shortcut an install created."""

    name: str
    target_path: str
    arguments: str
    icon_source: IconSource
    working_directory: str = ""


@dataclass(frozen=True)
class CatalogEntry:
    """A published application record in one group of the catalog."""

    canonical_name: str
    command_line: str
    command_arguments: str
    group: str
    icon_handle: str | None = None
    working_directory: str = ""
    uid: str | None = None


@dataclass(frozen=True)
class PublishFailure:
    name: str
    reason: str


@dataclass(frozen=True)
class ReconcileResult:
    """Catalog changes made for one host's subscription call."""

    host: TargetHost
    subscription: str
    mode: SubscriptionMode
    installed: list[str] = field(default_factory=list)
    uninstalled: list[str] = field(default_factory=list)
    published: list[str] = field(default_factory=list)
    already_published: list[str] = field(default_factory=list)
    unpublished: list[str] = field(default_factory=list)
    already_absent: list[str] = field(default_factory=list)
    publish_failures: list[PublishFailure] = field(default_factory=list)
    unpublish_failures: list[PublishFailure] = field(default_factory=list)
    cache_warm_error: str | None = None

    @property
    def success(self) -> bool:
        return not self.publish_failures

    @property
    def failed_names(self) -> list[str]:
        return [f.name for f in self.publish_failures]


@dataclass(frozen=True)
class HostOutcome:
    """Result of running the full pipeline against one host."""

    host: TargetHost
    stage: Stage
    error: str | None = None
    result: ReconcileResult | None = None

    @property
    def success(self) -> bool:
        if self.error is not None:
            return False
        return self.result is not None and self.result.success


@dataclass(frozen=True)
class DeploymentOutcome:
    """Aggregate result of one reconciliation run across its hosts."""

    subscription: str
    mode: SubscriptionMode
    hosts: list[HostOutcome]
    discovery_error: str | None = None

    @property
    def success(self) -> bool:
        if self.discovery_error is not None:
            return False
        if not self.hosts:
            return False
        return all(h.success for h in self.hosts)


@dataclass(frozen=True)
class RequestSpec:
    """Everything one reconciliation run needs from its caller.

    Exactly one of `host` or `discover_hosts=True` selects the target scope.
    `delivery_group` is the catalog scope entries are published into, and the
    group whose members are discovered when `discover_hosts` is set.
    """

    subscription: str
    mode: SubscriptionMode
    delivery_group: str
    host: TargetHost | None = None
    discover_hosts: bool = False
    identity: str | None = None
    secret: str | None = None
    api_key: str | None = None
    cache_locally: bool = False
