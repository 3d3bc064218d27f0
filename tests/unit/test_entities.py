"""
Unit tests for domain entities and value objects.
"""

import pytest

from mediaparser.core.domain.entities import (
    FilenameMapping,
    MatchResult,
    ParseResult,
    PatternStats,
)
from mediaparser.core.domain.value_objects import (
    LearnTarget,
    MatchType,
    MediaType,
    MetadataSource,
    MetadataType,
    ParseStatus,
    PatternType,
)


class TestParseResult:
    """Tests for ParseResult invariants and serialization."""

    def test_confidence_out_of_range(self):
        with pytest.raises(ValueError):
            ParseResult(original_filename='x.mkv', confidence=1.2)

    def test_episode_end_before_episode(self):
        with pytest.raises(ValueError):
            ParseResult(original_filename='x.mkv', episode=5, episode_end=3)

    def test_success_requires_title(self):
        with pytest.raises(ValueError):
            ParseResult(original_filename='x.mkv', status=ParseStatus.SUCCESS)

    def test_failed_without_title_is_allowed(self):
        result = ParseResult(original_filename='x.mkv', status=ParseStatus.FAILED)

        assert not result.is_success
        assert not result.needs_ai

    def test_evolve_revalidates(self):
        result = ParseResult(original_filename='x.mkv', title='X')

        assert result.evolve(status=ParseStatus.SUCCESS).is_success
        with pytest.raises(ValueError):
            result.evolve(confidence=-0.1)

    def test_to_dict(self):
        result = ParseResult(
            original_filename='[G] X - 01.mkv',
            status=ParseStatus.SUCCESS,
            media_type=MediaType.TV,
            title='X',
            episode=1,
            release_group='G',
            confidence=0.75,
            metadata_source=MetadataSource.REGEX,
        )
        data = result.to_dict()

        assert data['status'] == 'success'
        assert data['media_type'] == 'tv'
        assert data['metadata_source'] == 'regex'
        assert data['fansub_group'] == 'G'
        assert data['release_group'] == 'G'
        assert data['episode'] == 1


class TestFilenameMapping:
    """Tests for FilenameMapping invariants and serialization."""

    def test_exact_mapping_rejects_regex(self):
        with pytest.raises(ValueError):
            FilenameMapping(
                pattern='Some File',
                pattern_type=PatternType.EXACT,
                pattern_regex='^Some.*$',
                metadata_type=MetadataType.MOVIE,
                metadata_id='m-1',
            )

    def test_empty_pattern(self):
        with pytest.raises(ValueError):
            FilenameMapping(
                pattern='',
                pattern_type=PatternType.STANDARD,
                metadata_type=MetadataType.MOVIE,
                metadata_id='m-1',
            )

    def test_negative_use_count(self):
        with pytest.raises(ValueError):
            FilenameMapping(
                pattern='X',
                pattern_type=PatternType.STANDARD,
                metadata_type=MetadataType.MOVIE,
                metadata_id='m-1',
                use_count=-1,
            )

    def test_to_dict_is_camel_case(self):
        mapping = FilenameMapping(
            pattern='[SubsPlease] Kimetsu no Yaiba',
            pattern_type=PatternType.FANSUB,
            pattern_regex='(?i)^.*$',
            fansub_group='SubsPlease',
            title_pattern='Kimetsu no Yaiba',
            metadata_type=MetadataType.SERIES,
            metadata_id='s-1',
            tmdb_id=85937,
        )
        data = mapping.to_dict()

        assert data['id'] == mapping.id
        assert data['patternType'] == 'fansub'
        assert data['fansubGroup'] == 'SubsPlease'
        assert data['metadataType'] == 'series'
        assert data['tmdbId'] == 85937
        assert data['useCount'] == 0
        assert data['createdAt'].endswith('+00:00') or data['createdAt'].endswith('Z')
        assert data['lastUsedAt'] is None

    def test_match_result_to_dict(self):
        mapping = FilenameMapping(
            pattern='X',
            pattern_type=PatternType.STANDARD,
            metadata_type=MetadataType.MOVIE,
            metadata_id='m-1',
        )
        data = MatchResult(mapping, 0.912345, MatchType.FUZZY).to_dict()

        assert data['matchType'] == 'fuzzy'
        assert data['confidence'] == 0.9123
        assert data['mapping']['pattern'] == 'X'


class TestValueObjects:
    """Tests for value objects."""

    def test_metadata_type_media_type(self):
        assert MetadataType.SERIES.media_type == MediaType.TV
        assert MetadataType.MOVIE.media_type == MediaType.MOVIE

    def test_learn_target_requires_id(self):
        with pytest.raises(ValueError):
            LearnTarget(metadata_type=MetadataType.MOVIE, metadata_id='  ')

    def test_pattern_stats_to_dict(self):
        stats = PatternStats(total_patterns=2, total_applied=5,
                             most_used_pattern='X', most_used_count=4)

        assert stats.to_dict() == {
            'totalPatterns': 2,
            'totalApplied': 5,
            'mostUsedPattern': 'X',
            'mostUsedCount': 4,
        }
