"""
Test configuration and fixtures for MediaParser tests.

This module provides:
- Temporary SQLite pattern store
- Parser, learner and matcher fixtures wired to the test database
- Mock objects for the AI text completion capability
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mediaparser.core.interfaces.adapters import ITextCompletion  # noqa: E402
from tests.fixtures.test_data import AI_RESPONSE_VALID  # noqa: E402


# ==================== Database Fixtures ====================

@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary test database path."""
    return tmp_path / 'db' / 'test_mediaparser.db'


@pytest.fixture
def test_db_session(test_db_path):
    """Create a test database session manager."""
    from mediaparser.infrastructure.database.session import DatabaseSessionManager

    db_manager = DatabaseSessionManager(db_path=str(test_db_path))
    db_manager.init_db()

    yield db_manager

    db_manager.dispose()


@pytest.fixture
def mapping_repo(test_db_session):
    """Create filename mapping repository with test database."""
    from mediaparser.infrastructure.repositories.filename_mapping_repository import (
        FilenameMappingRepository,
    )
    return FilenameMappingRepository(test_db_session)


# ==================== Service Fixtures ====================

@pytest.fixture
def rule_parser():
    from mediaparser.services.parser.rule_parser import RuleBasedParser
    return RuleBasedParser()


@pytest.fixture
def pattern_extractor(rule_parser):
    from mediaparser.services.learning.pattern_extractor import PatternExtractor
    return PatternExtractor(rule_parser)


@pytest.fixture
def pattern_matcher(mapping_repo, pattern_extractor):
    from mediaparser.services.learning.pattern_matcher import PatternMatcher
    return PatternMatcher(mapping_repo, pattern_extractor)


@pytest.fixture
def learning_service(mapping_repo, pattern_extractor, pattern_matcher):
    from mediaparser.services.learning.learning_service import LearningService
    return LearningService(mapping_repo, pattern_extractor, pattern_matcher)


@pytest.fixture
def retry_queue():
    from mediaparser.infrastructure.queue.retry_queue import InMemoryRetryQueue
    return InMemoryRetryQueue()


# ==================== Mock Fixtures ====================

@pytest.fixture
def mock_completion():
    """Mock AI text completion returning a valid JSON response."""
    mock = MagicMock(spec=ITextCompletion)
    mock.is_configured = True
    mock.complete.return_value = AI_RESPONSE_VALID
    return mock


@pytest.fixture
def ai_parser(mock_completion):
    from mediaparser.infrastructure.ai.filename_parser import AIFilenameParser
    return AIFilenameParser(mock_completion)


@pytest.fixture
def progress_sink():
    """Mock progress sink recording emitted events."""
    return MagicMock()
