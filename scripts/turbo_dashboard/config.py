"""
config.py – Dashboard settings loaded from YAML and environment variables.

Precedence, lowest first: built-in ``default_config.yaml``, the file given
with ``--config`` (or ``TURBO_DASHBOARD_CONFIG``), then environment variables:

    TURBO_API_BASE_URL     – backend base URL
    TURBO_SESSION_FILE     – where the session marker is stored
    TURBO_REFRESH_DELAY    – seconds to wait before re-fetching after a write
    TURBO_API_TIMEOUT      – HTTP timeout in seconds
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_FILE = Path(__file__).parent / "default_config.yaml"

_ENV_VARS = {
    "api_base_url": "TURBO_API_BASE_URL",
    "session_file": "TURBO_SESSION_FILE",
    "refresh_delay": "TURBO_REFRESH_DELAY",
    "timeout": "TURBO_API_TIMEOUT",
}


@dataclass
class Settings:
    api_base_url: str = "https://turbo-backend-henna.vercel.app/api"
    session_file: str = "~/.turbo_dashboard/session.json"
    session_max_age_hours: float = 24.0
    session_warning_hours: float = 23.0
    refresh_delay: float = 1.0
    timeout: float = 15.0

    @property
    def session_path(self) -> Path:
        return Path(self.session_file).expanduser()


def _read_yaml(file_path: Path) -> dict:
    try:
        with open(file_path) as fh:
            raw = yaml.safe_load(fh) or {}
    except FileNotFoundError:
        logger.error("Config file not found: %s", file_path)
        raise SystemExit(f"ERROR: config file not found: {file_path}")
    except yaml.YAMLError as exc:
        logger.error("Failed to parse config %s: %s", file_path, exc)
        raise SystemExit(f"ERROR: failed to parse YAML in {file_path}: {exc}")
    if not isinstance(raw, dict):
        raise SystemExit(f"ERROR: {file_path} must contain a mapping, got {type(raw).__name__!r}")
    return raw


def _coerce(name: str, value, default, source):
    """Convert *value* to the type of the field's *default*."""
    try:
        if isinstance(default, float):
            value = float(value)
            if value < 0:
                raise ValueError("must not be negative")
            return value
        return str(value)
    except (TypeError, ValueError) as exc:
        raise SystemExit(f"ERROR: invalid value for '{name}' in {source}: {value!r} ({exc})")


def load_config(path: Optional[str] = None) -> Settings:
    """Build Settings from the default file, an optional user file and the environment.

    Raises ``SystemExit`` with a descriptive message when a file cannot be read,
    contains an unknown key, or holds a value of the wrong type.
    """
    settings = Settings()
    known = {f.name: f.default for f in fields(Settings)}

    sources = [_DEFAULT_CONFIG_FILE]
    path = path or os.environ.get("TURBO_DASHBOARD_CONFIG")
    if path:
        sources.append(Path(path).expanduser())

    for file_path in sources:
        if file_path == _DEFAULT_CONFIG_FILE and not file_path.exists():
            continue
        for key, value in _read_yaml(file_path).items():
            if key not in known:
                raise SystemExit(f"ERROR: unknown setting '{key}' in {file_path}")
            setattr(settings, key, _coerce(key, value, known[key], file_path))
        logger.debug("Loaded settings from %s", file_path)

    for name, env_var in _ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            setattr(settings, name, _coerce(name, value, known[name], env_var))

    settings.api_base_url = settings.api_base_url.rstrip("/")
    return settings
