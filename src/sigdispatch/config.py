"""TOML configuration management."""

from __future__ import annotations

import os
import signal
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from sigdispatch import constants

CONFIG_DIR = Path(os.environ.get("SIGDISPATCH_CONFIG_DIR", "~/.config/sigdispatch")).expanduser()
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# sigdispatch configuration

[signals]
# Signals the watcher subscribes to (names, with or without the SIG prefix)
handle = [{handle}]

[logging]
# DEBUG also logs every handler registration
level = "{level}"

[watch]
# Seconds between idle wake-ups of the watcher
poll_interval = {poll_interval}
""".format(
    handle=", ".join(f'"{sig.name}"' for sig in constants.DEFAULT_SIGNALS),
    level=constants.DEFAULT_LOG_LEVEL,
    poll_interval=constants.POLL_INTERVAL_SECONDS,
)


def init_config(force: bool = False) -> Path:
    """Create default config file. Returns path to config file."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    if CONFIG_FILE.exists() and not force:
        raise FileExistsError(f"Config already exists: {CONFIG_FILE}")
    CONFIG_FILE.write_text(DEFAULT_CONFIG)
    return CONFIG_FILE


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into *base*, returning a new dict."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config() -> dict[str, Any]:
    """Load config from TOML file, merged on top of built-in defaults."""
    defaults = tomllib.loads(DEFAULT_CONFIG)
    if CONFIG_FILE.exists():
        on_disk = tomllib.loads(CONFIG_FILE.read_text())
        return _deep_merge(defaults, on_disk)
    return defaults


def get(section: str, key: str, default: Any = None) -> Any:
    """Get a config value by section and key."""
    cfg = load_config()
    return cfg.get(section, {}).get(key, default)


def data_dir() -> Path:
    """Return the data directory (same as config dir for simplicity)."""
    d = CONFIG_DIR
    d.mkdir(parents=True, exist_ok=True)
    return d


def parse_signal(name: str | int) -> signal.Signals:
    """Resolve ``"hup"``, ``"SIGHUP"``, ``"1"`` or ``1`` to a signal."""
    if isinstance(name, int):
        return signal.Signals(name)
    v = name.strip().upper()
    if v.isdigit():
        return signal.Signals(int(v))
    if not v.startswith("SIG"):
        v = "SIG" + v
    try:
        return signal.Signals[v]
    except KeyError:
        raise ValueError(f"Unknown signal: {name!r}") from None


def handled_signals(cfg: dict[str, Any] | None = None) -> list[signal.Signals]:
    """Signals the watcher subscribes to, from ``[signals] handle``."""
    cfg = cfg if cfg is not None else load_config()
    names = cfg.get("signals", {}).get("handle", [])
    return [parse_signal(n) for n in names]
