"""
Configuration — patch engine settings resolved from CLI overrides,
``PATCHSMITH_*`` environment variables, a ``.patchsmith.yaml`` file and
built-in defaults, highest priority first.

Example ``.patchsmith.yaml``::

    context_lines: 5
    search_window: 20
    fuzzy: false
    backup_suffix: .orig
"""

import logging
import os

import yaml

logger = logging.getLogger(__name__)

_CONFIG_FILENAMES = (".patchsmith.yaml", ".patchsmith.yml")

_TRUTHY = ("1", "true", "yes", "on")


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


# attribute, yaml key, env var, default, cast
_SETTINGS = (
    ("CONTEXT_LINES", "context_lines", "PATCHSMITH_CONTEXT_LINES", 3, int),
    ("SEARCH_WINDOW", "search_window", "PATCHSMITH_SEARCH_WINDOW", 50, int),
    ("FUZZY", "fuzzy", "PATCHSMITH_FUZZY", True, _as_bool),
    ("BACKUP", "backup", "PATCHSMITH_BACKUP", True, _as_bool),
    ("BACKUP_SUFFIX", "backup_suffix", "PATCHSMITH_BACKUP_SUFFIX", ".bak", str),
    ("VALIDATE_SYNTAX", "validate_syntax", "PATCHSMITH_VALIDATE_SYNTAX", False, _as_bool),
    ("LOG_DIR", "log_dir", "PATCHSMITH_LOG_DIR", ".patchsmith/logs", str),
    ("METRICS_ENABLED", "metrics", "PATCHSMITH_METRICS", True, _as_bool),
    ("METRICS_DIR", "metrics_dir", "PATCHSMITH_METRICS_DIR", ".patchsmith", str),
    ("COLOR", "color", "PATCHSMITH_COLOR", True, _as_bool),
)

_DEFAULTS = {attr: default for attr, _, _, default, _ in _SETTINGS}

_NON_NEGATIVE = ("CONTEXT_LINES", "SEARCH_WINDOW")


def find_config_file(explicit_path: str | None = None) -> str | None:
    """Locate the YAML config: *explicit_path*, else the CWD, else home."""
    if explicit_path:
        return explicit_path if os.path.isfile(explicit_path) else None

    for directory in (os.getcwd(), os.path.expanduser("~")):
        for filename in _CONFIG_FILENAMES:
            candidate = os.path.join(directory, filename)
            if os.path.isfile(candidate):
                return candidate
    return None


def read_yaml_config(path: str) -> dict:
    """Return the mapping stored in *path*; unreadable files give ``{}``."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("[Config] Ignoring %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("[Config] Ignoring %s: top level is not a mapping", path)
        return {}
    return data


class Config:
    """Settings shared by the tools and the CLI.

    A ``Config`` is built once and passed to whatever needs it; nothing
    reads configuration from module-level state. Values that fail to
    convert, and negative context or window sizes, fall back to the
    default.
    """

    def __init__(self, yaml_data: dict | None = None):
        data = yaml_data or {}
        for attr, key, env_var, default, cast in _SETTINGS:
            setattr(self, attr, self._resolve(data, key, env_var, default, cast))

        for attr in _NON_NEGATIVE:
            if getattr(self, attr) < 0:
                setattr(self, attr, _DEFAULTS[attr])

    @staticmethod
    def _resolve(data: dict, key: str, env_var: str, default, cast):
        raw = os.getenv(env_var)
        source = env_var
        if raw is None:
            raw = data.get(key)
            source = key
        if raw is None:
            return default
        try:
            return cast(raw)
        except (TypeError, ValueError):
            logger.warning("[Config] Invalid value %r for %s, using %r",
                           raw, source, default)
            return default

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Build a Config from the YAML file (if any) plus the environment."""
        path = find_config_file(config_path)
        if path:
            logger.debug("[Config] Loading %s", path)
        return cls(read_yaml_config(path) if path else {})
