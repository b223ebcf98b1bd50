"""Shared fixtures for UI tests."""

import pytest

from blockfence.tui.session import open_session as _open_session


@pytest.fixture
def open_session():
    """Factory for headless editing sessions.

    The app must run inside the test's own task, so tests enter the
    session themselves:

        async with open_session("```\\n```") as session:
            ...
    """
    return _open_session
