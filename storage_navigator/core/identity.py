"""
Saved login session.

The sync action is only offered to a logged-in user. The session is a
tiny JSON file in the data directory (``identity.json``):

.. code-block:: json

    {
      "display_name": "Ada",
      "token": "d0c1...",
      "version": 1
    }

A missing, unreadable or malformed file means "nobody is logged in".
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from storage_navigator.core import config
from storage_navigator.core.models import Identity

logger = logging.getLogger(__name__)


def _identity_path(path: Optional[Union[str, Path]] = None) -> Path:
    if path is not None:
        return Path(path)
    return config.get_identity_path()


def _identity_from_dict(data: Mapping) -> Optional[Identity]:
    name = data.get("display_name")
    if not isinstance(name, str) or not name:
        return None
    token = data.get("token")
    if not isinstance(token, str) or not token:
        token = None
    return Identity(display_name=name, token=token)


def load_identity(path: Optional[Path] = None) -> Optional[Identity]:
    """Return the saved identity, or None if nobody is logged in."""
    identity_path = _identity_path(path)
    if not identity_path.exists():
        return None

    try:
        with identity_path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable identity file %s: %s", identity_path, exc)
        return None

    if not isinstance(raw, Mapping):
        return None
    return _identity_from_dict(raw)


def save_identity(identity: Identity, path: Optional[Path] = None) -> None:
    """Persist ``identity`` as the current login session."""
    identity_path = _identity_path(path)
    identity_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "version": config.FILE_FORMAT_VERSION,
        "display_name": identity.display_name,
        "token": identity.token,
    }
    tmp = identity_path.with_suffix(identity_path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")
    tmp.replace(identity_path)


def clear_identity(path: Optional[Path] = None) -> None:
    """Log out by removing the saved session, if any."""
    identity_path = _identity_path(path)
    try:
        identity_path.unlink()
    except FileNotFoundError:
        pass


class FileIdentityProvider:
    """Identity provider that re-reads the session file on every call.

    Reading on demand means a login or logout made elsewhere (another
    window, another machine sharing the data directory) is picked up the
    next time the sync button is pressed.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path

    def current_identity(self) -> Optional[Identity]:
        return load_identity(self._path)
