# tests/conftest.py

"""Shared pytest fixtures for all pricescout tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from pricescout.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_logs_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[Path, None, None]:
    """Point per-run log files at a temp ``logs/`` directory."""
    logs_dir = tmp_path / "logs"
    monkeypatch.setattr(Settings, "LOGS_DIR", logs_dir)
    yield logs_dir
