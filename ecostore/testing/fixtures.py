"""Pytest fixtures for EcoStore."""

from __future__ import annotations

from pathlib import Path

import pytest

from ..app import Economy
from ..config import EcoStoreConfig, StorageConfig


@pytest.fixture()
def json_economy(tmp_path: Path) -> Economy:
    return json_economy_at(tmp_path / "storage.json")


def json_economy_at(path: str | Path, **kwargs) -> Economy:
    """Helper for ad-hoc tests where pytest is not available."""
    config = EcoStoreConfig(storage=StorageConfig(backend="json", path=str(path)), **kwargs)
    return Economy(config)
