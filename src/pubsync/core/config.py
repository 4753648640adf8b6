"""Configuration data structures, loading and saving.

Provides immutable configuration loaded from ~/.pubsync/config.toml
(or the file named by PUBSYNC_CONFIG). A missing file means defaults.
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import tomlkit

CONFIG_ENV_VAR = "PUBSYNC_CONFIG"

DEFAULT_CLIENT_INSTALL_PATHS = [
    "C:\\Program Files (x86)\\Turbo\\Cmd\\turbo.exe",
    "C:\\Program Files\\Turbo\\Cmd\\turbo.exe",
]

CITRIX_VERSIONS = ("7", "6.5")


@dataclass(frozen=True)
class PubsyncConfig:
    """Immutable configuration data.

    Loaded once at CLI entry point and stored in PubsyncContext.
    All fields are read-only after construction.
    """

    client_install_paths: list[str] = field(
        default_factory=lambda: list(DEFAULT_CLIENT_INSTALL_PATHS)
    )
    installer_url: str = ""
    installer_arguments: list[str] = field(default_factory=lambda: ["--all-users", "--silent"])
    citrix_version: str = "7"
    broker_host: str = "localhost"
    default_delivery_group: str | None = None
    publish_accounts: list[str] = field(default_factory=list)
    ssh_user: str | None = None
    ssh_port: int = 22
    powershell_exe: str = "powershell.exe"
    command_timeout_seconds: float | None = 300.0
    install_timeout_seconds: float | None = None
    max_login_attempts: int | None = None
    stop_on_host_failure: bool = False


CONFIG_KEYS = tuple(f.name for f in fields(PubsyncConfig))

_LIST_KEYS = {"client_install_paths", "installer_arguments", "publish_accounts"}
_OPTIONAL_STR_KEYS = {"default_delivery_group", "ssh_user"}
_INT_KEYS = {"ssh_port"}
_OPTIONAL_INT_KEYS = {"max_login_attempts"}
_OPTIONAL_FLOAT_KEYS = {"command_timeout_seconds", "install_timeout_seconds"}
_BOOL_KEYS = {"stop_on_host_failure"}


def _parse_bool(value: str, key: str) -> bool:
    if value.lower() not in ("true", "false"):
        raise ValueError(f"Invalid boolean value for {key}: {value}")
    return value.lower() == "true"


def _parse_number(value: str, key: str, kind: type) -> Any:
    try:
        number = kind(value)
    except ValueError:
        raise ValueError(f"Invalid {kind.__name__} value for {key}: {value}") from None
    if number <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return number


def parse_config_value(key: str, value: str) -> Any:
    """Convert a command-line string into the typed value for `key`.

    Lists are comma-separated. "none" (any case) clears optional keys.

    Raises:
        ValueError: If the key is unknown or the value is invalid for it
    """
    if key not in CONFIG_KEYS:
        raise ValueError(f"Unknown config key: {key}")

    is_optional = key in _OPTIONAL_STR_KEYS | _OPTIONAL_INT_KEYS | _OPTIONAL_FLOAT_KEYS
    if is_optional and value.lower() == "none":
        return None

    if key in _LIST_KEYS:
        return [item.strip() for item in value.split(",") if item.strip()]
    if key in _BOOL_KEYS:
        return _parse_bool(value, key)
    if key in _INT_KEYS or key in _OPTIONAL_INT_KEYS:
        return _parse_number(value, key, int)
    if key in _OPTIONAL_FLOAT_KEYS:
        return _parse_number(value, key, float)
    if key == "citrix_version" and value not in CITRIX_VERSIONS:
        raise ValueError(f"citrix_version must be one of {', '.join(CITRIX_VERSIONS)}")
    return value


def with_value(config: PubsyncConfig, key: str, value: str) -> PubsyncConfig:
    """Return a new PubsyncConfig with one key updated from its string form."""
    return replace(config, **{key: parse_config_value(key, value)})


def format_config_value(value: Any) -> str:
    if value is None:
        return "none"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return str(value)


def _file_number(raw: Any, key: str, source: Path, kind: type) -> Any:
    accepted = (int, float) if kind is float else (int,)
    noun = "number" if kind is float else "whole number"
    if isinstance(raw, bool) or not isinstance(raw, accepted):
        raise ValueError(f"'{key}' in {source} must be a {noun}")
    if raw <= 0:
        raise ValueError(f"'{key}' in {source} must be positive, got {raw}")
    return kind(raw)


def config_from_mapping(data: dict[str, Any], source: Path) -> PubsyncConfig:
    """Build a PubsyncConfig from parsed TOML, defaulting absent keys.

    Raises:
        ValueError: If a key is unknown or has the wrong type
    """
    defaults = PubsyncConfig()
    values: dict[str, Any] = {}
    for key, raw in data.items():
        if key not in CONFIG_KEYS:
            raise ValueError(f"Unknown key '{key}' in {source}")
        expected = getattr(defaults, key)
        if key in _LIST_KEYS:
            if not isinstance(raw, list):
                raise ValueError(f"'{key}' in {source} must be a list")
            values[key] = [str(item) for item in raw]
        elif key in _BOOL_KEYS:
            if not isinstance(raw, bool):
                raise ValueError(f"'{key}' in {source} must be true or false")
            values[key] = raw
        elif key in _OPTIONAL_FLOAT_KEYS:
            values[key] = _file_number(raw, key, source, float)
        elif key in _INT_KEYS or key in _OPTIONAL_INT_KEYS:
            values[key] = _file_number(raw, key, source, int)
        elif isinstance(expected, str) or key in _OPTIONAL_STR_KEYS:
            values[key] = str(raw)
        else:
            values[key] = raw
    if values.get("citrix_version", defaults.citrix_version) not in CITRIX_VERSIONS:
        raise ValueError(f"citrix_version in {source} must be one of {', '.join(CITRIX_VERSIONS)}")
    return replace(defaults, **values)


class ConfigStore(ABC):
    """Abstract interface for configuration persistence.

    Provides dependency injection for config access, enabling in-memory
    implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if a config file exists."""
        ...

    @abstractmethod
    def load(self) -> PubsyncConfig:
        """Load config, returning defaults when no file exists.

        Raises:
            ValueError: If the config file is malformed
        """
        ...

    @abstractmethod
    def save(self, config: PubsyncConfig) -> None:
        """Persist config."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the config file (for messages and debugging)."""
        ...


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".pubsync" / "config.toml"


class RealConfigStore(ConfigStore):
    """Production implementation reading and writing a TOML file."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._path = config_path if config_path is not None else default_config_path()

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> PubsyncConfig:
        if not self._path.exists():
            return PubsyncConfig()
        try:
            data = tomllib.loads(self._path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {self._path}: {e}") from e
        return config_from_mapping(data, self._path)

    def save(self, config: PubsyncConfig) -> None:
        """Write config, omitting unset optional keys (TOML has no null)."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        doc = tomlkit.document()
        doc.add(tomlkit.comment("pubsync configuration"))
        for key in CONFIG_KEYS:
            value = getattr(config, key)
            if value is None:
                continue
            doc[key] = value
        self._path.write_text(tomlkit.dumps(doc), encoding="utf-8")

    def path(self) -> Path:
        return self._path


class FakeConfigStore(ConfigStore):
    """In-memory config store for tests."""

    def __init__(self, config: PubsyncConfig | None = None) -> None:
        self._config = config
        self._saved: list[PubsyncConfig] = []

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> PubsyncConfig:
        if self._config is None:
            return PubsyncConfig()
        return self._config

    def save(self, config: PubsyncConfig) -> None:
        self._config = config
        self._saved.append(config)

    def path(self) -> Path:
        return Path("/test/pubsync/config.toml")

    @property
    def saved(self) -> list[PubsyncConfig]:
        """Configs passed to save(), in call order. For test assertions only."""
        return self._saved.copy()
