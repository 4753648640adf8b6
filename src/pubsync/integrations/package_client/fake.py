"""In-memory fake implementation of PackageClient for testing."""

from pubsync.core.types import ClientResult, RuntimeHandle, SubscriptionResult
from pubsync.integrations.package_client.abc import PackageClient


class FakePackageClient(PackageClient):
    """In-memory fake implementation for testing.

    All state is provided via constructor using keyword arguments.
    This class has NO public setup methods.

    Login succeeds when the identity/secret pair is in `valid_credentials`
    (or the key is in `valid_api_keys`); a successful login becomes the
    host's current user.
    """

    def __init__(
        self,
        *,
        current_users: dict[str, str] | None = None,
        valid_credentials: dict[str, str] | None = None,
        valid_api_keys: dict[str, str] | None = None,
        subscribe_results: dict[str, SubscriptionResult] | None = None,
        unsubscribe_results: dict[str, SubscriptionResult] | None = None,
        cache_warm_result: ClientResult | None = None,
    ) -> None:
        """Create FakePackageClient.

        Args:
            current_users: Mapping of host name -> identity already logged in
            valid_credentials: Mapping of identity -> accepted secret
            valid_api_keys: Mapping of accepted API key -> identity it logs in as
            subscribe_results: Mapping of "host/subscription" or "subscription"
                -> result of subscribe(); host-specific keys win
            unsubscribe_results: Same as subscribe_results, for unsubscribe()
            cache_warm_result: Result of cache_warm() (defaults to success)
        """
        self._current_users = dict(current_users or {})
        self._valid_credentials = valid_credentials or {}
        self._valid_api_keys = valid_api_keys or {}
        self._subscribe_results = subscribe_results or {}
        self._unsubscribe_results = unsubscribe_results or {}
        self._cache_warm_result = cache_warm_result or ClientResult(success=True)
        self._login_calls: list[tuple[str, str, str]] = []
        self._api_key_calls: list[tuple[str, str]] = []
        self._subscribe_calls: list[tuple[str, str, bool]] = []
        self._unsubscribe_calls: list[tuple[str, str, bool]] = []
        self._cache_warm_calls: list[tuple[str, str]] = []

    @staticmethod
    def _lookup(
        results: dict[str, SubscriptionResult], host: str, subscription: str
    ) -> SubscriptionResult:
        result = results.get(f"{host}/{subscription}")
        if result is None:
            result = results.get(subscription)
        if result is None:
            return SubscriptionResult(success=True, events=[])
        return result

    def current_user(self, runtime: RuntimeHandle) -> str | None:
        return self._current_users.get(runtime.host.name)

    def login(
        self, runtime: RuntimeHandle, identity: str, secret: str, *, all_users: bool
    ) -> ClientResult:
        self._login_calls.append((runtime.host.name, identity, secret))
        if self._valid_credentials.get(identity) == secret:
            self._current_users[runtime.host.name] = identity
            return ClientResult(success=True)
        return ClientResult(success=False, message="invalid username or password")

    def login_with_api_key(
        self, runtime: RuntimeHandle, api_key: str, *, all_users: bool
    ) -> ClientResult:
        self._api_key_calls.append((runtime.host.name, api_key))
        identity = self._valid_api_keys.get(api_key)
        if identity is None:
            return ClientResult(success=False, message="invalid api key")
        self._current_users[runtime.host.name] = identity
        return ClientResult(success=True)

    def subscribe(
        self, runtime: RuntimeHandle, subscription: str, *, all_users: bool
    ) -> SubscriptionResult:
        self._subscribe_calls.append((runtime.host.name, subscription, all_users))
        return self._lookup(self._subscribe_results, runtime.host.name, subscription)

    def unsubscribe(
        self, runtime: RuntimeHandle, subscription: str, *, all_users: bool
    ) -> SubscriptionResult:
        self._unsubscribe_calls.append((runtime.host.name, subscription, all_users))
        return self._lookup(self._unsubscribe_results, runtime.host.name, subscription)

    def cache_warm(self, runtime: RuntimeHandle, subscription: str) -> ClientResult:
        self._cache_warm_calls.append((runtime.host.name, subscription))
        return self._cache_warm_result

    @property
    def login_calls(self) -> list[tuple[str, str, str]]:
        """(host, identity, secret) for every login() call. For test assertions only."""
        return self._login_calls.copy()

    @property
    def api_key_calls(self) -> list[tuple[str, str]]:
        """(host, api_key) for every login_with_api_key() call."""
        return self._api_key_calls.copy()

    @property
    def subscribe_calls(self) -> list[tuple[str, str, bool]]:
        """(host, subscription, all_users) for every subscribe() call."""
        return self._subscribe_calls.copy()

    @property
    def unsubscribe_calls(self) -> list[tuple[str, str, bool]]:
        """(host, subscription, all_users) for every unsubscribe() call."""
        return self._unsubscribe_calls.copy()

    @property
    def cache_warm_calls(self) -> list[tuple[str, str]]:
        """(host, subscription) for every cache_warm() call."""
        return self._cache_warm_calls.copy()
