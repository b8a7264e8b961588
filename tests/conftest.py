# tests/conftest.py

"""Shared pytest fixtures for all storefront tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path: Path) -> Generator[None, None, None]:
    """Point local storage and logs at a per-test temp directory."""
    with patch.object(
        Settings, "STORAGE_PATH", tmp_path / "local_storage.db"
    ), patch.object(Settings, "LOGS_DIR", tmp_path / "logs"):
        yield
