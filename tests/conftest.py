"""Pytest fixtures for rfml-sync tests.

This module provides fixtures for a temporary spec-file root, a config
directory and a stand-in for the remote client.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rfsync.core.http_client import RemoteClient
from rfsync.core.models import RemoteTest


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create temporary config directory for tests.

    Args:
        tmp_path: pytest temporary directory fixture

    Returns:
        Path to temporary config directory.
    """
    config_dir = tmp_path / "rfsync_config"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


@pytest.fixture
def spec_folder(tmp_path: Path) -> Path:
    """Create an empty spec-file root inside a temporary directory."""
    folder = tmp_path / "spec" / "rainforest"
    folder.mkdir(parents=True)
    return folder


@pytest.fixture
def remote_client() -> MagicMock:
    """Create a stand-in for RemoteClient with no remote tests.

    create() assigns remote id 1000; update() echoes the id it was given.
    """
    client = MagicMock(spec=RemoteClient)
    client.list_tests.return_value = []
    client.create.side_effect = lambda payload: RemoteTest(id=1000, title=payload["title"])
    client.update.side_effect = lambda test_id, payload: RemoteTest(
        id=test_id, title=payload["title"]
    )
    return client
