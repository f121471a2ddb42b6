"""Shared fixtures for the gorder tests."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixture_bytes():
    """Read a file from tests/fixtures by relative path."""
    def read(name: str) -> bytes:
        return (FIXTURES / name).read_bytes()
    return read
