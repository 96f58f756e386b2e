# tests/conftest.py

"""Shared pytest fixtures for all storefront tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def isolated_logs_dir(tmp_path: Path) -> Generator[None, None, None]:
    """Point LOGS_DIR at a temp directory so runs never write to logs/."""
    with patch(
        "src.config.settings.Settings.LOGS_DIR", tmp_path / "logs"
    ):
        yield
