import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from usersapi.exceptions import ConfigurationException

DEFAULTS_PATH = Path(__file__).parent / "defaults.yml"
DEFAULT_SOURCE = "default configuration"
ENV_PREFIX = "USERS_API_"
PROFILE_ENV = "USERS_API_PROFILE"

# Environment variables that always win over configuration files.
ENV_OVERRIDES = {
    "database.url": "DATABASE_URL",
}

_MISSING = object()
_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}


class ConfigurationProperties:
    """
    Layered application configuration.

    Values are loaded from the packaged defaults.yml, then application.yml and
    application-{profile}.yml from the working directory, then the explicit
    environment overrides (DATABASE_URL). Keys that no file defines fall back to
    USERS_API_* environment variables. The source of every value is tracked.
    """

    def __init__(self, profile: Optional[str] = None, base_dir: Optional[str] = None):
        self._config: Dict[str, Any] = {}
        self._sources: Dict[str, str] = {}
        self.profile = profile if profile is not None else os.environ.get(PROFILE_ENV)

        self.load_from_file(DEFAULTS_PATH, source=DEFAULT_SOURCE)

        directory = Path(base_dir) if base_dir else Path.cwd()
        self._load_optional(directory / "application.yml")
        if self.profile:
            self._load_optional(directory / f"application-{self.profile}.yml")

        self._apply_env_overrides()

    def load_from_file(self, path, source: Optional[str] = None):
        """Merge a YAML file into the configuration."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationException(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationException(f"Top level of {path} must be a mapping")

        self._merge(self._config, data, source or path.name, prefix="")

    def _load_optional(self, path: Path):
        if path.exists():
            self.load_from_file(path)

    def _merge(self, target: Dict[str, Any], data: Dict[str, Any], source: str, prefix: str):
        for key, value in data.items():
            full_key = f"{prefix}{key}"
            if isinstance(value, dict):
                child = target.get(key)
                if not isinstance(child, dict):
                    child = {}
                    target[key] = child
                self._merge(child, value, source, prefix=f"{full_key}.")
            else:
                target[key] = value
                self._sources[full_key] = source

    def _apply_env_overrides(self):
        for key, env_name in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                self.set(key, value, source=f"environment variable ({env_name})")

    def set(self, key: str, value: Any, source: str = "programmatic"):
        """Set a value by dotted key."""
        parts = key.split(".")
        node = self._config
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
        self._sources[key] = source

    def _lookup(self, key: str) -> Any:
        node: Any = self._config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a value by dotted key, e.g. "database.connect.max_attempts".

        Falls back to the USERS_API_<KEY> environment variable when no file
        defines the key, and to default when neither does.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        env_name = ENV_PREFIX + key.upper().replace(".", "_")
        if env_name in os.environ:
            self._sources[key] = f"environment variable ({env_name})"
            return os.environ[env_name]

        return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if value is None:
            return default
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ConfigurationException(f"Invalid boolean for {key}: {value!r}")

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self.get(key, default)
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationException(f"Invalid integer for {key}: {value!r}") from e

    def get_float(self, key: str, default: Optional[float] = None) -> Optional[float]:
        value = self.get(key, default)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationException(f"Invalid number for {key}: {value!r}") from e

    def get_config_sources(self) -> Dict[str, str]:
        """Return a key -> source mapping, sorted by key."""
        return dict(sorted(self._sources.items()))


def log_config_sources(config: ConfigurationProperties, logger, max_cols: int = 3):
    """Log configuration keys grouped by the source that provided them."""
    groups: Dict[str, List[str]] = {}
    for key, source in config.get_config_sources().items():
        groups.setdefault(source, []).append(key)

    logger.info("Configuration sources:")
    for source, keys in groups.items():
        logger.info(f"[{source}]")
        for line in _format_table(keys, max_cols):
            logger.info(line)


def _format_table(keys: List[str], max_cols: int) -> List[str]:
    max_cols = max(1, max_cols)
    width = max(len(key) for key in keys)
    rows = [keys[i : i + max_cols] for i in range(0, len(keys), max_cols)]
    inner = max_cols * width + (max_cols - 1) * 2

    lines = ["┌" + "─" * (inner + 2) + "┐"]
    for row in rows:
        cells = "  ".join(key.ljust(width) for key in row)
        lines.append("│ " + cells.ljust(inner) + " │")
    lines.append("└" + "─" * (inner + 2) + "┘")
    return lines


_config: Optional[ConfigurationProperties] = None


def get_config() -> ConfigurationProperties:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = ConfigurationProperties()
    return _config
