"""
Pattern matcher module.

Matches a filename against learned mappings: exact key, group + title,
scoped regex, then fuzzy title similarity. Never creates or deletes mappings.
"""

import logging
import re
from dataclasses import replace
from difflib import SequenceMatcher
from functools import lru_cache
from typing import Optional

from mediaparser.core.domain.entities import FilenameMapping, MatchResult
from mediaparser.core.domain.value_objects import MatchType
from mediaparser.core.exceptions import DatabaseError, ValidationError
from mediaparser.core.interfaces.repositories import IFilenameMappingRepository
from mediaparser.core.utils.timezone_utils import get_utc_now
from mediaparser.services.learning.pattern_extractor import PatternExtractor
from mediaparser.services.parser.tokens import normalize_filename

logger = logging.getLogger(__name__)

EXACT_CONFIDENCE = 1.0
PATTERN_CONFIDENCE = 0.95
REGEX_CONFIDENCE = 0.9


@lru_cache(maxsize=1024)
def _compile(pattern_regex: str) -> Optional[re.Pattern]:
    """编译并缓存学习到的正则，非法正则返回 None"""
    try:
        return re.compile(pattern_regex)
    except re.error as e:
        logger.warning(f'⚠️ 无效的学习正则 {pattern_regex!r}: {e}')
        return None


class PatternMatcher:
    """
    学习模式匹配器。

    Lookups run in order and the first hit wins:
        1. exact: cleaned filename equals a stored pattern key (1.0)
        2. pattern: same group and title (0.95)
        3. regex: stored regexes scoped to the detected group (0.9)
        4. fuzzy: title similarity within the same group scope
    """

    def __init__(
        self,
        repository: IFilenameMappingRepository,
        extractor: PatternExtractor,
        fuzzy_enabled: bool = True,
        fuzzy_threshold: float = 0.85
    ):
        self._repository = repository
        self._extractor = extractor
        self._fuzzy_enabled = fuzzy_enabled
        self._fuzzy_threshold = fuzzy_threshold

    def match(self, filename: str, record_use: bool = True) -> Optional[MatchResult]:
        """
        Find the learned mapping for a filename.

        Args:
            filename: The raw filename.
            record_use: Bump the mapping's use counter on a hit (best-effort,
                the returned mapping reflects it). Callers that may still
                reject the match pass False and call ``record_use`` later.

        Returns:
            MatchResult, or None when nothing matches.

        Raises:
            ValidationError: If the filename is empty.
        """
        if not filename or not filename.strip():
            raise ValidationError('Filename cannot be empty', field_name='filename')
        filename = filename.strip()

        result = self._find(filename)
        if result is None:
            logger.debug(f'🔍 未匹配到学习模式: {filename}')
            return None

        logger.info(
            f'🎯 匹配学习模式: {filename} -> {result.mapping.pattern} '
            f'({result.match_type.value}, {result.confidence:.2f})'
        )
        if record_use:
            result.mapping = self.record_use(result.mapping)
        return result

    def _find(self, filename: str) -> Optional[MatchResult]:
        mapping = self._repository.get_by_pattern(normalize_filename(filename))
        if mapping:
            return MatchResult(mapping, EXACT_CONFIDENCE, MatchType.EXACT)

        ctx = self._extractor.analyze(filename)

        if ctx.title:
            mapping = self._repository.find_by_group_and_title(ctx.group, ctx.title)
            if mapping:
                return MatchResult(mapping, PATTERN_CONFIDENCE, MatchType.PATTERN)

        for candidate in self._repository.list_with_regex(ctx.group):
            compiled = _compile(candidate.pattern_regex)
            if compiled and compiled.match(filename):
                return MatchResult(candidate, REGEX_CONFIDENCE, MatchType.REGEX)

        if self._fuzzy_enabled and ctx.title:
            return self._fuzzy_match(ctx.group, ctx.title)
        return None

    def _fuzzy_match(self, fansub_group: Optional[str], title: str) -> Optional[MatchResult]:
        """同一字幕组范围内按标题相似度匹配"""
        best: Optional[FilenameMapping] = None
        best_ratio = 0.0
        for candidate in self._repository.list_by_group(fansub_group):
            if not candidate.title_pattern:
                continue
            ratio = SequenceMatcher(
                None, title.lower(), candidate.title_pattern.lower()
            ).ratio()
            if ratio > best_ratio:
                best, best_ratio = candidate, ratio

        if best is not None and best_ratio >= self._fuzzy_threshold:
            return MatchResult(best, round(best_ratio, 4), MatchType.FUZZY)
        return None

    def record_use(self, mapping: FilenameMapping) -> FilenameMapping:
        """更新使用次数；失败只记录警告，不影响匹配结果"""
        try:
            updated = self._repository.increment_use_count(mapping.id)
        except DatabaseError as e:
            logger.warning(f'⚠️ 更新模式使用次数失败: {mapping.id} - {e}')
            return mapping
        if not updated:
            return mapping
        return replace(
            mapping,
            use_count=mapping.use_count + 1,
            last_used_at=get_utc_now()
        )
