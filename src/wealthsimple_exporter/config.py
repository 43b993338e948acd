"""
Runtime settings loader.

Purpose:
- Centralize the tuning knobs (API base, metrics port, poll interval, logging).
- Keep tracing simple: defaults -> optional YAML -> environment -> settings.

Sources:
- exporter YAML file (optional): path passed to load_settings() or named by
  WEALTHSIMPLE_EXPORTER_CONFIG. Keys mirror ExporterSettings field names.
- environment variables (.env is recommended, gitignored): override YAML.

Notes:
- Credentials are never read from here. They are prompted for at startup
  and only live in memory (see prompts.py).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any
import os

import yaml

DEFAULT_API_BASE_URL = "https://api.production.wealthsimple.com/v1"
DEFAULT_USER_AGENT = "curl/7.64.1"
DEFAULT_METRICS_HOST = "0.0.0.0"
DEFAULT_METRICS_PORT = 8080
DEFAULT_METRICS_PATH = "/metrics"
DEFAULT_POLL_INTERVAL_SECONDS = 300.0
CONFIG_PATH_ENV = "WEALTHSIMPLE_EXPORTER_CONFIG"
_ENV_LOADED = False


@dataclass(frozen=True)
class ExporterSettings:
    """
    Resolved runtime settings for one exporter process.
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    metrics_host: str = DEFAULT_METRICS_HOST
    metrics_port: int = DEFAULT_METRICS_PORT
    metrics_path: str = DEFAULT_METRICS_PATH
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    request_timeout_seconds: int = 30
    log_level: str = "INFO"
    json_logs: bool = False
    debug_http: bool = False


# Field name -> environment variable.
ENV_VARS = {
    "api_base_url": "WEALTHSIMPLE_API_BASE",
    "metrics_host": "WEALTHSIMPLE_METRICS_HOST",
    "metrics_port": "WEALTHSIMPLE_METRICS_PORT",
    "metrics_path": "WEALTHSIMPLE_METRICS_PATH",
    "poll_interval_seconds": "WEALTHSIMPLE_POLL_INTERVAL_SECONDS",
    "request_timeout_seconds": "WEALTHSIMPLE_REQUEST_TIMEOUT_SECONDS",
    "log_level": "WEALTHSIMPLE_LOG_LEVEL",
    "json_logs": "WEALTHSIMPLE_JSON_LOGS",
    "debug_http": "WEALTHSIMPLE_DEBUG_HTTP",
}


def _coerce(name: str, kind: Any, value: Any) -> Any:
    # Dataclass annotations are strings under postponed evaluation.
    try:
        if kind in {"bool", bool}:
            if isinstance(value, bool):
                return value
            return str(value).strip().lower() in {"1", "true", "yes", "on"}
        if kind in {"int", int}:
            return int(value)
        if kind in {"float", float}:
            return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for '{name}': {value!r}") from exc
    return str(value)


def _load_env_file(path: str = ".env") -> None:
    # Minimal .env loader; existing variables always win.
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    if not os.path.exists(path):
        _ENV_LOADED = True
        return

    with open(path, "r", encoding="utf-8") as handle:
        for raw_line in handle:
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip("'\"")
            if key and value and key not in os.environ:
                os.environ[key] = value

    _ENV_LOADED = True


def load_config_file(path: str) -> dict[str, Any]:
    """
    Read an exporter YAML file into a plain mapping.

    Inputs:
    - path: YAML file with top-level keys named after ExporterSettings fields.

    Outputs:
    - Dict of recognised keys. Unknown keys raise ValueError so typos surface.
    """

    with open(path, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a top-level mapping.")

    known = {f.name for f in fields(ExporterSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"{path} has unknown keys: {', '.join(unknown)}")
    return raw


def load_settings(path: str | None = None) -> ExporterSettings:
    """
    Resolve ExporterSettings from defaults, optional YAML and environment.

    Inputs:
    - path: optional YAML path; falls back to $WEALTHSIMPLE_EXPORTER_CONFIG.

    Outputs:
    - Frozen ExporterSettings.

    Next:
    - validation.validate_settings() before wiring clients.
    """

    _load_env_file()

    path = path or os.getenv(CONFIG_PATH_ENV) or None
    file_values = load_config_file(path) if path else {}

    values: dict[str, Any] = {}
    for field in fields(ExporterSettings):
        env_value = os.getenv(ENV_VARS[field.name])
        if env_value is not None and env_value != "":
            values[field.name] = _coerce(field.name, field.type, env_value)
        elif field.name in file_values:
            values[field.name] = _coerce(field.name, field.type, file_values[field.name])
    return ExporterSettings(**values)
