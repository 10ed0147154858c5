"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session, user_id=1)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


# =============================================================================
# Model Stand-ins
# =============================================================================


def make_note(**overrides) -> SimpleNamespace:
    """Build an object shaped like a Note row."""
    fields = {
        "id": 1,
        "user_id": 1,
        "title": "Note",
        "content": "",
        "preview": "",
        "notebook": "Personal",
        "status": "draft",
        "is_pinned": False,
        "is_trashed": False,
        "trashed_at": None,
        "tags": [],
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def note_factory():
    """Provide ``make_note`` to tests."""
    return make_note


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.get_logger", return_value=mock_logger):
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
