"""
Push a storage snapshot to the sync server.

This is the network half of the reference store's ``sync_storage``. It
sends the storage's name and folder list as JSON to

    <sync_base_url>/api/storages/<storage_id>/sync

authenticated with the current identity's token. Anything beyond a
single push (merging, conflict resolution, pulling remote changes) is
the server's business.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from storage_navigator.core import config
from storage_navigator.core.errors import (
    IdentityRequiredError,
    SyncError,
    SyncNotConfiguredError,
)
from storage_navigator.core.models import Identity, Storage

logger = logging.getLogger(__name__)


def sync_url(base_url: str, storage_id: str) -> str:
    return f"{base_url.rstrip('/')}/api/storages/{storage_id}/sync"


def push_storage(
    storage: Storage,
    identity: Optional[Identity],
    base_url: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> None:
    """Push ``storage`` to the sync server on behalf of ``identity``.

    Args:
        storage: Snapshot to push.
        identity: The logged-in user; required.
        base_url: Server base URL; defaults to the configured one.
        session: Optional ``requests.Session`` to reuse connections.
        timeout: Request timeout in seconds; defaults to the configured one.

    Raises:
        IdentityRequiredError: if ``identity`` is None.
        SyncNotConfiguredError: if no server URL is known.
        requests.exceptions.RequestException: on transport or HTTP errors.
    """
    if identity is None:
        raise IdentityRequiredError("Please login first to sync the storage.")

    if base_url is None:
        base_url = config.get_sync_base_url()
    if not base_url:
        raise SyncNotConfiguredError("No sync server is configured.")
    if timeout is None:
        timeout = config.get_sync_timeout()

    headers = {}
    if identity.token:
        headers["Authorization"] = f"Bearer {identity.token}"

    payload = {
        "name": storage.name,
        "folders": list(storage.folders),
        "version": config.FILE_FORMAT_VERSION,
    }

    http = session if session is not None else requests
    url = sync_url(base_url, storage.id)
    logger.info("Pushing storage %s to %s", storage.id, url)
    response = http.post(url, json=payload, headers=headers, timeout=timeout)
    response.raise_for_status()


def describe_sync_error(exc: BaseException) -> str:
    """Return a user-facing sentence explaining why a sync failed.

    The classification follows ``requests``' exception hierarchy:
    connection errors are the most specific case (no internet, DNS
    failure, server unreachable); other request exceptions are treated
    as generic network errors.
    """
    if isinstance(exc, requests.exceptions.ConnectionError):
        return (
            "Sync failed due to a connection error. "
            "Check your internet connection and try again."
        )
    if isinstance(exc, requests.exceptions.RequestException):
        return (
            "Sync failed due to a network error. "
            "The sync server may be temporarily unavailable."
        )
    if isinstance(exc, (SyncError, IdentityRequiredError)):
        return str(exc)
    return "Sync failed due to an unexpected error."
