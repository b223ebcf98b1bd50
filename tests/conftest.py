"""Shared test fixtures for all test modules."""

import pytest

from blockfence.models.block import Block
from blockfence.services.mode_controller import ModeTransitionController, ScratchHost


@pytest.fixture
def write_config(tmp_path):
    """Write YAML text to a config file under tmp_path and return its path."""
    def _write(content: str, name: str = "config.yaml"):
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def scratch_host():
    """In-memory overlay host with default editing rules."""
    return ScratchHost()


@pytest.fixture
def make_controller(scratch_host):
    """Create a controller for a fresh block with the given source."""
    def _make(content: str) -> ModeTransitionController:
        return ModeTransitionController(Block(content=content), scratch_host)

    return _make
