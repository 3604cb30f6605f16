"""Shared fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Make the fixtures directory importable as plain modules
sys.path.insert(0, str(Path(__file__).parent / "fixtures"))


@pytest.fixture
def fixed_now() -> datetime:
    """A Monday afternoon in UTC."""
    return datetime(2024, 1, 15, 13, 27, 44, 123456, tzinfo=timezone.utc)


@pytest.fixture
def mock_engine():
    """Engine double that hands out sequential commit ids."""
    engine = MagicMock()
    counter = {"n": 0}

    def write_commit_object(request):
        counter["n"] += 1
        return f"{counter['n']:040x}"

    engine.write_commit_object.side_effect = write_commit_object
    engine.read_commit_payload.side_effect = lambda commit_id: f"commit {commit_id}".encode("ascii")
    engine.read_default_tree.return_value = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
    engine.resolve_author_identity.return_value = ("Test User", "test@example.com")
    return engine
