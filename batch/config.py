"""Settings for the batch runner: settings.yaml, .env secrets, defaults."""

from __future__ import annotations

import copy
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

DEFAULTS: dict = {
    "tracker": {
        "base_url": "http://localhost:5000/api",
        "page_size": 100,
        "timeout_seconds": 30,
    },
    "storage": {
        "history_db": "data/history.db",
        "log_file": None,
    },
}


class ConfigError(ValueError):
    """Raised when settings.yaml holds a value the runner cannot use."""


def _merge_defaults(loaded: dict) -> dict:
    cfg = copy.deepcopy(DEFAULTS)
    for key, value in loaded.items():
        if value is None and key in cfg:
            continue
        if isinstance(value, dict) and isinstance(cfg.get(key), dict):
            cfg[key].update(value)
        else:
            cfg[key] = value
    return cfg


def _validate(cfg: dict) -> None:
    tracker = cfg["tracker"]
    if not str(tracker["base_url"]).startswith(("http://", "https://")):
        raise ConfigError(f"tracker.base_url must be an http(s) URL, got {tracker['base_url']!r}")

    try:
        page_size = int(tracker["page_size"])
        timeout = float(tracker["timeout_seconds"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"tracker settings must be numeric: {e}") from e
    if page_size < 1:
        raise ConfigError(f"tracker.page_size must be at least 1, got {page_size}")
    if timeout <= 0:
        raise ConfigError(f"tracker.timeout_seconds must be positive, got {timeout}")
    tracker["page_size"] = page_size
    tracker["timeout_seconds"] = timeout

    if not cfg["storage"].get("history_db"):
        raise ConfigError("storage.history_db must be set")


def load_config(
    config_dir: str | Path | None = None,
) -> dict:
    """Load settings.yaml over the defaults, validate it, and attach .env secrets."""
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent / "config"
    config_dir = Path(config_dir)

    # Missing .env is fine; the key may already be in the environment
    load_dotenv(config_dir / ".env")

    settings_path = config_dir / "settings.yaml"
    if not settings_path.exists():
        raise FileNotFoundError(f"Config not found: {settings_path}")

    with open(settings_path, encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{settings_path} must contain a mapping")

    cfg = _merge_defaults(loaded)
    _validate(cfg)

    cfg["_secrets"] = {
        "tracker_api_key": os.getenv("TRACKER_API_KEY", ""),
    }
    return cfg
