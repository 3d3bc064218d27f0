"""
Rule-based parser module.

Runs the ordered extraction rules over a filename and scores the result.
"""

import logging
import time
from typing import List, Optional

from mediaparser.core.domain.entities import ParseResult
from mediaparser.core.domain.value_objects import (
    ConfidenceWeights,
    MediaType,
    MetadataSource,
    ParseStatus,
)
from mediaparser.core.exceptions import ValidationError
from mediaparser.services.parser.rules import DEFAULT_RULES, ExtractionContext, Rule

logger = logging.getLogger(__name__)


class RuleBasedParser:
    """
    规则解析器。

    Each rule fills fields on a shared context. Confidence is the sum of the
    weights of the fields found present and unambiguous. Below the threshold,
    or without a title, the result is marked needs_ai so the caller can fall
    back to AI or manual review.
    """

    def __init__(
        self,
        confidence_threshold: float = 0.5,
        weights: Optional[ConfidenceWeights] = None,
        rules: Optional[List[Rule]] = None
    ):
        """
        Initialize the rule parser.

        Args:
            confidence_threshold: Minimum confidence for a success status.
            weights: Per-field confidence weights.
            rules: Ordered extraction rules, defaults to DEFAULT_RULES.
        """
        if not 0.0 <= confidence_threshold <= 1.0:
            raise ValueError(
                f'confidence_threshold must be within [0, 1], got {confidence_threshold}'
            )
        self.confidence_threshold = confidence_threshold
        self.weights = weights or ConfidenceWeights()
        self._rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def analyze(self, filename: str) -> ExtractionContext:
        """
        Run all rules and return the raw extraction context.

        The context keeps the spans of every marker, which the pattern
        learner uses to synthesize regexes.
        """
        if not filename or not filename.strip():
            raise ValidationError('Filename cannot be empty', field_name='filename')
        ctx = ExtractionContext(filename=filename.strip())
        for rule in self._rules:
            rule(ctx)
        return ctx

    def parse(self, filename: str) -> ParseResult:
        """
        Parse a filename into a ParseResult.

        Args:
            filename: The raw filename, extension optional.

        Returns:
            ParseResult with status success or needs_ai.

        Raises:
            ValidationError: If the filename is empty.
        """
        start = time.perf_counter()
        ctx = self.analyze(filename)
        confidence = self.score(ctx)

        media_type = (
            MediaType.TV if ctx.episode is not None or ctx.season is not None
            else MediaType.MOVIE
        )
        needs_ai = not ctx.title or confidence < self.confidence_threshold
        error_message = None
        if not ctx.title:
            error_message = 'No title could be extracted'
        elif needs_ai:
            error_message = (
                f'Confidence {confidence:.2f} below threshold {self.confidence_threshold:.2f}'
            )

        result = ParseResult(
            original_filename=filename,
            status=ParseStatus.NEEDS_AI if needs_ai else ParseStatus.SUCCESS,
            media_type=media_type,
            title=ctx.title,
            year=ctx.year,
            season=ctx.season,
            episode=ctx.episode,
            episode_end=ctx.episode_end,
            quality=ctx.first('quality'),
            source=ctx.first('source'),
            video_codec=ctx.first('video_codec'),
            audio_codec=ctx.first('audio_codec'),
            release_group=ctx.group,
            language=self._merge_language(ctx.values('language')),
            confidence=confidence,
            metadata_source=MetadataSource.REGEX,
            error_message=error_message,
            parse_duration_ms=int((time.perf_counter() - start) * 1000),
        )
        logger.debug(
            f'🔍 规则解析: {filename} -> {result.title!r} '
            f'({result.status.value}, {confidence:.2f})'
        )
        return result

    def score(self, ctx: ExtractionContext) -> float:
        """按字段权重计算置信度，结果限制在 [0, 1]"""
        w = self.weights
        total = 0.0
        if ctx.title:
            total += w.title
        if ctx.episode is not None:
            total += w.episode
        if ctx.year is not None:
            total += w.year
        if ctx.group:
            total += w.group
        if ctx.is_unambiguous('quality'):
            total += w.quality
        if ctx.is_unambiguous('source'):
            total += w.source
        if ctx.values('video_codec'):
            if ctx.is_unambiguous('video_codec'):
                total += w.codec
        elif ctx.values('audio_codec'):
            total += w.codec
        return round(max(0.0, min(1.0, total)), 4)

    @staticmethod
    def _merge_language(values: List[str]) -> Optional[str]:
        """合并多个语言标记，如 简体 + 繁體 -> zh-Hans,zh-Hant"""
        codes: List[str] = []
        for value in values:
            for code in value.split(','):
                if code not in codes:
                    codes.append(code)
        return ','.join(sorted(codes)) if codes else None
