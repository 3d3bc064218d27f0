"""
Unit tests for LearningService and build_learn_target.
"""

from unittest.mock import MagicMock

import pytest

from mediaparser.core.domain.entities import FilenameMapping
from mediaparser.core.domain.value_objects import LearnTarget, MetadataType, PatternType
from mediaparser.core.exceptions import (
    DuplicateRecordError,
    RecordNotFoundError,
    ValidationError,
)
from mediaparser.services.learning.learning_service import (
    LearningService,
    build_learn_target,
)
from tests.fixtures.test_data import (
    FANSUB_SUBSPLEASE_EP1,
    FANSUB_SUBSPLEASE_EP2,
    FANSUB_SUBSPLEASE_EP13,
    LOW_CONFIDENCE_NAME,
    MOVIE_INCEPTION,
)

SERIES_TARGET = LearnTarget(MetadataType.SERIES, 'series-1', 85937)


class TestBuildLearnTarget:
    """Tests for request validation of learn targets."""

    def test_valid_target(self):
        target = build_learn_target('Series', ' s-1 ', '123')

        assert target.metadata_type == MetadataType.SERIES
        assert target.metadata_id == 's-1'
        assert target.tmdb_id == 123

    @pytest.mark.parametrize('metadata_type,metadata_id,tmdb_id', [
        ('series', '', None),
        ('series', None, None),
        ('anime', 's-1', None),
        (None, 's-1', None),
        ('movie', 'm-1', 'abc'),
    ])
    def test_invalid_target(self, metadata_type, metadata_id, tmdb_id):
        with pytest.raises(ValidationError):
            build_learn_target(metadata_type, metadata_id, tmdb_id)


class TestLearningService:
    """Test suite for LearningService."""

    def test_learn_creates_mapping(self, learning_service):
        mapping = learning_service.learn(FANSUB_SUBSPLEASE_EP1, SERIES_TARGET)

        assert mapping.pattern == '[SubsPlease] Kimetsu no Yaiba'
        assert mapping.pattern_type == PatternType.FANSUB
        assert mapping.metadata_type == MetadataType.SERIES
        assert mapping.metadata_id == 'series-1'
        assert mapping.tmdb_id == 85937
        assert mapping.confidence == 1.0
        assert mapping.use_count == 0

    def test_learn_is_idempotent_across_episodes(self, learning_service, mapping_repo):
        first = learning_service.learn(FANSUB_SUBSPLEASE_EP1, SERIES_TARGET)
        second = learning_service.learn(FANSUB_SUBSPLEASE_EP2, SERIES_TARGET)
        third = learning_service.learn(FANSUB_SUBSPLEASE_EP13, SERIES_TARGET)

        assert first.id == second.id == third.id
        assert mapping_repo.count() == 1

    def test_learn_exact_is_idempotent(self, learning_service, mapping_repo):
        target = LearnTarget(MetadataType.MOVIE, 'movie-1')

        first = learning_service.learn(LOW_CONFIDENCE_NAME, target)
        second = learning_service.learn(LOW_CONFIDENCE_NAME, target)

        assert first.pattern_type == PatternType.EXACT
        assert first.id == second.id
        assert mapping_repo.count() == 1

    def test_learn_empty_filename(self, learning_service):
        with pytest.raises(ValidationError):
            learning_service.learn('  ', SERIES_TARGET)

    def test_learn_unknown_metadata(self, mapping_repo, pattern_extractor, pattern_matcher):
        metadata_store = MagicMock()
        metadata_store.exists.return_value = False
        service = LearningService(
            mapping_repo, pattern_extractor, pattern_matcher, metadata_store=metadata_store
        )

        with pytest.raises(ValidationError):
            service.learn(FANSUB_SUBSPLEASE_EP1, SERIES_TARGET)

        metadata_store.exists.assert_called_once_with('series', 'series-1')
        assert mapping_repo.count() == 0

    def test_concurrent_duplicate_returns_existing(self, pattern_extractor, pattern_matcher):
        existing = FilenameMapping(
            pattern='[SubsPlease] Kimetsu no Yaiba',
            pattern_type=PatternType.FANSUB,
            metadata_type=MetadataType.SERIES,
            metadata_id='series-1',
        )
        repo = MagicMock()
        repo.find_by_group_and_title.return_value = None
        repo.save.side_effect = DuplicateRecordError('duplicate')
        repo.get_by_learning_key.return_value = existing
        service = LearningService(repo, pattern_extractor, pattern_matcher)

        assert service.learn(FANSUB_SUBSPLEASE_EP1, SERIES_TARGET) is existing
        repo.get_by_learning_key.assert_called_once_with(
            'title:subsplease\x00kimetsu no yaiba'
        )

    def test_racing_learners_differing_in_case_share_one_mapping(
        self, learning_service, mapping_repo, monkeypatch
    ):
        # 两个并发学习者在写入前都看不到对方的记录
        monkeypatch.setattr(mapping_repo, 'find_by_group_and_title', lambda group, title: None)

        first = learning_service.learn('[SubsPlease] Spy x Family - 01', SERIES_TARGET)
        second = learning_service.learn('[subsplease] SPY X FAMILY - 02', SERIES_TARGET)

        assert first.id == second.id
        assert second.pattern == '[SubsPlease] Spy x Family'
        assert mapping_repo.count() == 1

    @pytest.mark.parametrize('filename', ['.mkv', ' .mp4 ', '...'])
    def test_learn_filename_without_name_part(self, learning_service, mapping_repo, filename):
        with pytest.raises(ValidationError):
            learning_service.learn(filename, SERIES_TARGET)

        assert mapping_repo.count() == 0

    def test_get_and_delete_pattern(self, learning_service):
        mapping = learning_service.learn(MOVIE_INCEPTION, LearnTarget(MetadataType.MOVIE, 'm-1'))

        assert learning_service.get_pattern(mapping.id).id == mapping.id

        learning_service.delete_pattern(mapping.id)

        with pytest.raises(RecordNotFoundError):
            learning_service.get_pattern(mapping.id)
        with pytest.raises(RecordNotFoundError):
            learning_service.delete_pattern(mapping.id)

    def test_apply_pattern(self, learning_service):
        mapping = learning_service.learn(FANSUB_SUBSPLEASE_EP1, SERIES_TARGET)

        applied = learning_service.apply_pattern(mapping.id)

        assert applied.use_count == 1
        with pytest.raises(RecordNotFoundError):
            learning_service.apply_pattern('missing')

    def test_stats(self, learning_service):
        assert learning_service.get_stats().to_dict() == {
            'totalPatterns': 0,
            'totalApplied': 0,
            'mostUsedPattern': None,
            'mostUsedCount': None,
        }

        learning_service.learn(FANSUB_SUBSPLEASE_EP1, SERIES_TARGET)
        learning_service.learn(MOVIE_INCEPTION, LearnTarget(MetadataType.MOVIE, 'm-1'))
        learning_service.find_match(FANSUB_SUBSPLEASE_EP2)
        learning_service.find_match(FANSUB_SUBSPLEASE_EP13)

        stats = learning_service.get_stats()
        assert stats.total_patterns == 2
        assert stats.total_applied == 2
        assert stats.most_used_pattern == '[SubsPlease] Kimetsu no Yaiba'
        assert stats.most_used_count == 2

    def test_list_patterns_ordered_by_use(self, learning_service):
        learning_service.learn(MOVIE_INCEPTION, LearnTarget(MetadataType.MOVIE, 'm-1'))
        series = learning_service.learn(FANSUB_SUBSPLEASE_EP1, SERIES_TARGET)
        learning_service.find_match(FANSUB_SUBSPLEASE_EP2)

        assert learning_service.list_patterns()[0].id == series.id

    def test_deleted_pattern_no_longer_matches(self, learning_service):
        mapping = learning_service.learn(FANSUB_SUBSPLEASE_EP1, SERIES_TARGET)

        learning_service.delete_pattern(mapping.id)

        assert learning_service.find_match(FANSUB_SUBSPLEASE_EP2) is None
        assert learning_service.list_patterns() == []
