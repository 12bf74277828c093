"""
Configuration helpers for the storage navigator.

Design overview
---------------
This module centralizes decisions about where storages and the saved
login session live on disk, and which sync server the storages are
pushed to.

By default the local files are stored under a per-user "bootstrap"
directory:

    ~/.storage_navigator/

Inside that directory we keep a small JSON configuration file
(``config.json``) that records the data directory and the sync server
URL. A typical layout looks like::

    ~/.storage_navigator/config.json

    /path/to/data_dir/
        storages.json
        identity.json

The data directory defaults to ``~/.storage_navigator/data`` but can be
pointed at any other location (e.g. a cloud-synced folder). The rest of
the application should always obtain paths via the helpers in this
module rather than hard-coding them.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Paths and constants
# ---------------------------------------------------------------------------

# Name of the per-user "bootstrap" directory under the home directory.
APP_DIR_NAME = ".storage_navigator"

# Name of the JSON configuration file inside the bootstrap directory.
CONFIG_FILENAME = "config.json"

# Default name of the data directory inside the bootstrap directory.
DEFAULT_DATA_DIR_NAME = "data"

# Names of the data files inside the data directory.
STORAGES_FILENAME = "storages.json"
IDENTITY_FILENAME = "identity.json"

# Version written into every data file. Currently written but ignored on
# load.
FILE_FORMAT_VERSION = 1

# Seconds to wait for the sync server before giving up.
DEFAULT_SYNC_TIMEOUT = 30


# ---------------------------------------------------------------------------
# Low-level helpers for bootstrap directory and config.json
# ---------------------------------------------------------------------------


def get_bootstrap_dir() -> Path:
    """Return the per-user bootstrap directory (``~/.storage_navigator``)."""

    return Path.home() / APP_DIR_NAME


def get_config_path() -> Path:
    """Return the full path to ``config.json`` inside the bootstrap directory."""

    return get_bootstrap_dir() / CONFIG_FILENAME


def _load_raw_config() -> Dict[str, Any]:
    """Load the raw configuration dictionary from disk.

    If the file does not exist or cannot be parsed, an empty dictionary
    is returned. Higher-level helpers are responsible for applying
    defaults.

    Returns:
        Parsed configuration dictionary, or an empty dict on error.
    """

    path = get_config_path()
    if not path.exists():
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}
    if not isinstance(raw, dict):
        return {}
    return raw


def _save_raw_config(cfg: Dict[str, Any]) -> None:
    """Atomically write the given configuration dictionary to disk."""

    bootstrap = get_bootstrap_dir()
    bootstrap.mkdir(parents=True, exist_ok=True)

    path = get_config_path()
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(cfg, indent=2, sort_keys=True), encoding="utf-8")
    tmp.replace(path)


# ---------------------------------------------------------------------------
# High-level configuration model
# ---------------------------------------------------------------------------


def _ensure_default_config(raw: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Layer defaults on top of a possibly empty configuration.

    Returns:
        A configuration dictionary with at least the keys ``data_dir``,
        ``sync_base_url`` and ``sync_timeout``.
    """

    cfg = dict(raw) if raw is not None else {}

    if not cfg.get("data_dir"):
        cfg["data_dir"] = str(get_bootstrap_dir() / DEFAULT_DATA_DIR_NAME)

    # No default server: sync stays disabled until one is configured.
    if not cfg.get("sync_base_url"):
        cfg["sync_base_url"] = None

    timeout = cfg.get("sync_timeout")
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        cfg["sync_timeout"] = DEFAULT_SYNC_TIMEOUT

    return cfg


def load_config() -> Dict[str, Any]:
    """Load the application configuration, applying defaults as needed.

    If the defaulting logic added or modified keys, the result is written
    back so that subsequent runs see a consistent view.
    """

    raw = _load_raw_config()
    cfg = _ensure_default_config(raw)
    if cfg != raw:
        _save_raw_config(cfg)
    return cfg


def get_data_dir() -> Path:
    """Return the data directory, creating it if needed."""

    data_dir = Path(load_config()["data_dir"]).expanduser()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def set_data_dir(path: Path) -> None:
    """Point the configuration at a new data directory."""
    cfg = load_config()
    cfg["data_dir"] = str(path)
    _save_raw_config(cfg)


def get_storages_path() -> Path:
    """Return the full path to the storages JSON file."""

    return get_data_dir() / STORAGES_FILENAME


def get_identity_path() -> Path:
    """Return the full path to the saved login session."""

    return get_data_dir() / IDENTITY_FILENAME


def get_sync_base_url() -> Optional[str]:
    """Return the sync server base URL, or None if sync is not configured."""
    url = load_config().get("sync_base_url")
    if not url:
        return None
    return str(url).strip().rstrip("/") or None


def set_sync_base_url(url: Optional[str]) -> None:
    """Set (or clear, with None) the sync server base URL."""
    cfg = load_config()
    cfg["sync_base_url"] = url
    _save_raw_config(cfg)


def get_sync_timeout() -> float:
    return float(load_config()["sync_timeout"])
