"""
Settings loader for the push receiver.

Purpose:
- Centralize how runtime settings are assembled.
- Keep tracing simple: YAML -> environment overrides -> DecoderSettings.

Sources:
- decoder.yaml (optional, path from argument or MUNIC_CONFIG).
- environment variables (.env is supported, gitignored): per-key overrides.

Logic flow (high level):
1) _load_env_file() pulls a local .env into os.environ once.
2) _parse_settings() reads the YAML "decoder" mapping over the defaults.
3) load_settings() applies MUNIC_* environment overrides on top.

Tracing notes:
- Errors name the source (YAML key or env var) so the caller knows which
  one is wrong.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any
import os

import yaml

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_PATH = "/"
DEFAULT_MAX_BODY_BYTES = 1024 * 1024
_ENV_LOADED = False


@dataclass(frozen=True)
class DecoderSettings:
    """
    Runtime knobs for logging and the HTTP receiver.

    Fields map 1:1 to keys under "decoder:" in decoder.yaml.
    """

    log_level: str = "INFO"
    json_logs: bool = False
    log_documents: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    path: str = DEFAULT_PATH
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES


_ENV_KEYS = {
    "log_level": "MUNIC_LOG_LEVEL",
    "json_logs": "MUNIC_JSON_LOGS",
    "log_documents": "MUNIC_LOG_DOCUMENTS",
    "host": "MUNIC_HOST",
    "port": "MUNIC_PORT",
    "path": "MUNIC_PATH",
    "max_body_bytes": "MUNIC_MAX_BODY_BYTES",
}


def _to_bool(value: Any, source: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    raise ValueError(f"{source} must be a boolean, got {value!r}.")


def _to_int(value: Any, source: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{source} must be an integer, got {value!r}.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{source} must be an integer, got {value!r}.") from exc


def _coerce(name: str, value: Any, source: str) -> Any:
    if name in {"json_logs", "log_documents"}:
        return _to_bool(value, source)
    if name in {"port", "max_body_bytes"}:
        return _to_int(value, source)
    return str(value)


def _load_env_file(path: str = ".env") -> None:
    # Minimal .env loader to avoid external dependencies.
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


def _parse_settings(raw: Any) -> DecoderSettings:
    if not raw:
        return DecoderSettings()
    if not isinstance(raw, dict) or "decoder" not in raw:
        raise ValueError("decoder.yaml must contain a top-level 'decoder' mapping.")

    section = raw["decoder"] or {}
    if not isinstance(section, dict):
        raise ValueError("'decoder' must be a mapping of setting names to values.")

    known = {f.name for f in fields(DecoderSettings)}
    unknown = sorted(str(key) for key in section if key not in known)
    if unknown:
        raise ValueError(f"Unknown keys under 'decoder': {', '.join(unknown)}.")

    values = {
        name: _coerce(name, value, f"decoder.{name}")
        for name, value in section.items()
    }
    return DecoderSettings(**values)


def _apply_env(settings: DecoderSettings) -> DecoderSettings:
    overrides: dict[str, Any] = {}
    for name, var_name in _ENV_KEYS.items():
        value = os.getenv(var_name)
        if value is None or value == "":
            continue
        overrides[name] = _coerce(name, value, var_name)
    return replace(settings, **overrides) if overrides else settings


def load_settings(path: str | None = None, *, env_file: str = ".env") -> DecoderSettings:
    """
    Load settings from an optional YAML file plus environment overrides.

    Inputs:
    - path: decoder.yaml location; falls back to MUNIC_CONFIG, then defaults.
    - env_file: local .env file loaded once per process.

    Outputs:
    - DecoderSettings ready for setup_logging() and create_app().
    """

    _load_env_file(env_file)

    path = path or os.getenv("MUNIC_CONFIG")
    raw: Any = None
    if path:
        with open(path, "r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle)
    settings = _apply_env(_parse_settings(raw))

    if not 0 < settings.port < 65536:
        raise ValueError(f"port must be in 1..65535, got {settings.port}.")
    return settings
