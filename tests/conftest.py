"""Pytest configuration and shared fixtures.

Ensure the project root is on sys.path so tests can import `textstore_lib`
without an editable install.
"""
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def memory_backend():
    from textstore_lib.storage.memory_backend import MemoryBlobBackend

    return MemoryBlobBackend()
