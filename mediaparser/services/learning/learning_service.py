"""
Learning service module.

Turns confirmed (filename, metadata) pairs into deduplicated filename
mappings and exposes the pattern management operations.
"""

import logging
from typing import List, Optional

from mediaparser.core.domain.entities import FilenameMapping, MatchResult, PatternStats
from mediaparser.core.domain.value_objects import LearnTarget, MetadataType, PatternType
from mediaparser.core.exceptions import (
    DuplicateRecordError,
    RecordNotFoundError,
    ValidationError,
)
from mediaparser.core.interfaces.adapters import IMetadataStore
from mediaparser.core.interfaces.repositories import IFilenameMappingRepository
from mediaparser.services.learning.pattern_extractor import PatternExtractor
from mediaparser.services.learning.pattern_matcher import PatternMatcher
from mediaparser.services.parser.tokens import normalize_filename

logger = logging.getLogger(__name__)

TABLE_NAME = 'filename_mappings'


def build_learn_target(
    metadata_type: Optional[str],
    metadata_id: Optional[str],
    tmdb_id: Optional[int] = None
) -> LearnTarget:
    """
    校验并构建学习目标。

    Raises:
        ValidationError: metadata_id 为空，或 metadata_type 不是 movie / series。
    """
    if metadata_id is None or not str(metadata_id).strip():
        raise ValidationError('metadataId is required', field_name='metadataId')
    try:
        parsed_type = MetadataType(str(metadata_type or '').strip().lower())
    except ValueError as e:
        raise ValidationError(
            f'metadataType must be "movie" or "series", got {metadata_type!r}',
            field_name='metadataType'
        ) from e
    if tmdb_id is not None:
        try:
            tmdb_id = int(tmdb_id)
        except (TypeError, ValueError) as e:
            raise ValidationError('tmdbId must be an integer', field_name='tmdbId') from e
    return LearnTarget(
        metadata_type=parsed_type,
        metadata_id=str(metadata_id).strip(),
        tmdb_id=tmdb_id
    )


class LearningService:
    """
    模式学习服务。

    learn() is idempotent: filenames sharing the same group and title
    resolve to the same mapping.
    """

    def __init__(
        self,
        repository: IFilenameMappingRepository,
        extractor: PatternExtractor,
        matcher: PatternMatcher,
        metadata_store: Optional[IMetadataStore] = None
    ):
        self._repository = repository
        self._extractor = extractor
        self._matcher = matcher
        self._metadata_store = metadata_store

    def learn(self, filename: str, target: LearnTarget) -> FilenameMapping:
        """
        Learn a filename -> metadata mapping.

        Args:
            filename: Confirmed filename.
            target: Metadata the filename belongs to.

        Returns:
            The new mapping, or the existing one for the same group + title.

        Raises:
            ValidationError: Empty filename or unknown metadata target.
        """
        if not filename or not filename.strip():
            raise ValidationError('filename is required', field_name='filename')
        filename = filename.strip()
        if not normalize_filename(filename):
            raise ValidationError(
                f'filename has no name part: {filename!r}', field_name='filename'
            )

        if self._metadata_store and not self._metadata_store.exists(
            target.metadata_type.value, target.metadata_id
        ):
            raise ValidationError(
                f'Metadata {target.metadata_type.value}/{target.metadata_id} does not exist',
                field_name='metadataId'
            )

        extracted = self._extractor.extract(filename)

        if extracted.pattern_type == PatternType.EXACT:
            existing = self._repository.get_by_pattern(extracted.pattern)
        else:
            existing = self._repository.find_by_group_and_title(
                extracted.fansub_group, extracted.title_pattern
            )
        if existing:
            logger.info(f'♻️ 模式已存在，直接返回: {existing.pattern} ({existing.id})')
            return existing

        mapping = FilenameMapping(
            pattern=extracted.pattern,
            pattern_type=extracted.pattern_type,
            pattern_regex=extracted.pattern_regex,
            fansub_group=extracted.fansub_group,
            title_pattern=extracted.title_pattern,
            metadata_type=target.metadata_type,
            metadata_id=target.metadata_id,
            tmdb_id=target.tmdb_id,
            confidence=1.0,
            use_count=0,
        )

        try:
            saved = self._repository.save(mapping)
        except DuplicateRecordError:
            # 并发学习同一模式：按去重键读取已写入的记录
            existing = (
                self._repository.get_by_learning_key(mapping.learning_key)
                or self._repository.get_by_pattern(mapping.pattern)
            )
            if existing is None:
                raise
            logger.info(f'♻️ 并发写入冲突，返回已有模式: {existing.pattern}')
            return existing

        logger.info(
            f'📚 学习新模式: {saved.pattern} -> '
            f'{saved.metadata_type.value}/{saved.metadata_id}'
        )
        return saved

    def find_match(self, filename: str) -> Optional[MatchResult]:
        return self._matcher.match(filename)

    def list_patterns(self) -> List[FilenameMapping]:
        return self._repository.list_all()

    def get_pattern(self, mapping_id: str) -> FilenameMapping:
        mapping = self._repository.get_by_id(mapping_id)
        if mapping is None:
            raise RecordNotFoundError(
                f'Pattern not found: {mapping_id}',
                table_name=TABLE_NAME,
                record_id=mapping_id
            )
        return mapping

    def delete_pattern(self, mapping_id: str) -> None:
        """
        删除学习模式。

        Raises:
            RecordNotFoundError: ID 不存在。
        """
        if not self._repository.delete(mapping_id):
            raise RecordNotFoundError(
                f'Pattern not found: {mapping_id}',
                table_name=TABLE_NAME,
                record_id=mapping_id
            )

    def apply_pattern(self, mapping_id: str) -> FilenameMapping:
        """手动应用模式（增加使用次数）"""
        if not self._repository.increment_use_count(mapping_id):
            raise RecordNotFoundError(
                f'Pattern not found: {mapping_id}',
                table_name=TABLE_NAME,
                record_id=mapping_id
            )
        return self.get_pattern(mapping_id)

    def get_stats(self) -> PatternStats:
        mappings = self._repository.list_all()
        stats = PatternStats(
            total_patterns=len(mappings),
            total_applied=sum(m.use_count for m in mappings),
        )
        if mappings:
            most_used = max(mappings, key=lambda m: m.use_count)
            stats.most_used_pattern = most_used.pattern
            stats.most_used_count = most_used.use_count
        return stats
