"""Shared fixtures for the bidsubset test-suite."""

from pathlib import Path

import pytest

from .utils import DATASET_FILES, write_files


@pytest.fixture
def bids_ds(tmp_path: Path) -> Path:
    """Return the root of a dataset with sessioned and session-less subjects."""
    return write_files(tmp_path / "ds", DATASET_FILES)
