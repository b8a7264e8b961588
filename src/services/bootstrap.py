# src/services/bootstrap.py

"""Wires a Store to its collaborators from Settings."""

import logging
from pathlib import Path

from src.config.settings import Settings
from src.models.identity import Identity
from src.remote.base_catalog import RemoteCatalog
from src.remote.http_catalog import HttpRemoteCatalog
from src.remote.memory_catalog import MemoryRemoteCatalog
from src.services.store import Store
from src.storage.local_storage import LocalStorage

logger = logging.getLogger("umars_hands.bootstrap")


def build_remote_catalog(offline: bool = False) -> RemoteCatalog:
    """Pick the HTTP catalog when configured, else the in-memory one."""
    if offline or not Settings.CATALOG_API_URL:
        logger.warning(
            "No remote catalog configured, using the in-memory catalog"
        )
        return MemoryRemoteCatalog()
    logger.info("Using remote catalog at %s", Settings.CATALOG_API_URL)
    return HttpRemoteCatalog()


def build_store(
    identity: Identity | None = None,
    storage_path: Path | None = None,
    offline: bool = False,
) -> Store:
    """Create a session Store backed by local storage and the remote."""
    return Store(
        remote=build_remote_catalog(offline),
        storage=LocalStorage(storage_path),
        identity=identity,
    )
