"""
Pytest configuration and shared fixtures for badge consensus tests.

Testing Standards:
- Async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

import pytest

from badge_consensus.bootstrap.consensus import reset_consensus_dependencies


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from badge_consensus import __version__

    return __version__


@pytest.fixture(autouse=True)
def _reset_consensus_singletons():
    """Drop bootstrap singletons so tests never share approval state."""
    reset_consensus_dependencies()
    yield
    reset_consensus_dependencies()
