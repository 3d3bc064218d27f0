"""
Pattern extractor module.

Derives the reusable part of a confirmed filename: group, cleaned title,
pattern type, pattern key and a regex that also matches sibling episodes.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from mediaparser.core.domain.value_objects import PatternType
from mediaparser.services.parser.rule_parser import RuleBasedParser
from mediaparser.services.parser.rules import ExtractionContext
from mediaparser.services.parser.tokens import normalize_filename

logger = logging.getLogger(__name__)

SEPARATOR_RUN = r'[\s._-]+'
EPISODE_DIGITS = r'\d{1,4}'

_SPLIT_RE = re.compile(r'([\s._-]+)')


@dataclass
class ExtractedPattern:
    """
    Learner output before persistence.

    Attributes:
        pattern: Unique key, "[group] title", title, or the cleaned filename.
        pattern_type: exact / fansub / standard.
        pattern_regex: Synthesized regex, None for exact patterns.
        fansub_group: Detected group.
        title_pattern: Cleaned title.
    """
    pattern: str
    pattern_type: PatternType
    pattern_regex: Optional[str] = None
    fansub_group: Optional[str] = None
    title_pattern: Optional[str] = None


def build_pattern_key(fansub_group: Optional[str], title: str) -> str:
    """模式键："[字幕组] 标题" 或 "标题" """
    if fansub_group:
        return f'[{fansub_group}] {title}'
    return title


def literal_to_regex(text: str) -> str:
    """把字面文本转换为正则：分隔符序列泛化，其余转义"""
    parts: List[str] = []
    for token in _SPLIT_RE.split(text):
        if not token:
            continue
        if _SPLIT_RE.fullmatch(token):
            parts.append(SEPARATOR_RUN)
        else:
            parts.append(re.escape(token))
    return ''.join(parts)


class PatternExtractor:
    """
    模式提取器。

    Example:
        >>> extractor = PatternExtractor(RuleBasedParser())
        >>> p = extractor.extract('[SubsPlease] Kimetsu no Yaiba - 01 (1080p).mkv')
        >>> p.pattern
        '[SubsPlease] Kimetsu no Yaiba'
        >>> bool(re.match(p.pattern_regex, '[SubsPlease] Kimetsu no Yaiba - 02 (1080p).mkv'))
        True
    """

    def __init__(self, rule_parser: RuleBasedParser):
        self._rule_parser = rule_parser

    def analyze(self, filename: str) -> ExtractionContext:
        return self._rule_parser.analyze(filename)

    def extract(self, filename: str) -> ExtractedPattern:
        """
        Extract the learnable pattern of a filename.

        Raises:
            ValidationError: If the filename is empty.
        """
        ctx = self.analyze(filename)

        if ctx.title and ctx.group:
            pattern_type = PatternType.FANSUB
        elif ctx.title and ctx.has_markers:
            pattern_type = PatternType.STANDARD
        else:
            key = normalize_filename(filename)
            return ExtractedPattern(
                pattern=key,
                pattern_type=PatternType.EXACT,
                title_pattern=ctx.title or key,
            )

        regex = self.synthesize_regex(ctx)
        if regex and not re.match(regex, ctx.filename):
            logger.warning(f'⚠️ 生成的正则无法匹配原文件名，放弃正则: {regex}')
            regex = None

        return ExtractedPattern(
            pattern=build_pattern_key(ctx.group, ctx.title),
            pattern_type=pattern_type,
            pattern_regex=regex,
            fansub_group=ctx.group,
            title_pattern=ctx.title,
        )

    @staticmethod
    def synthesize_regex(ctx: ExtractionContext) -> Optional[str]:
        """
        根据单个样本生成正则。

        字幕组括号兼容 [] 与 【】，集数数字泛化为 \\d{1,4}，分隔符序列泛化，
        集数（电影为标题/年份）之后的部分用 .* 代替。
        """
        stem = ctx.stem
        ends = [e for e in (
            ctx.title_end,
            ctx.year_span[1] if ctx.year_span else None,
            ctx.episode_span[1] if ctx.episode_span else None,
        ) if e is not None]
        if not ends:
            return None
        end = max(ends)

        parts = ['(?i)^']
        pos = 0
        if ctx.group_style == 'bracket' and ctx.group_span:
            parts.append(r'[\[【]\s*' + re.escape(ctx.group.strip()) + r'\s*[\]】]')
            pos = ctx.group_span[1]

        volatile: List[Tuple[int, int]] = []
        if ctx.episode_span and pos <= ctx.episode_span[0] < end:
            volatile.append(ctx.episode_span)

        for start, stop in volatile:
            parts.append(literal_to_regex(stem[pos:start]))
            parts.append(EPISODE_DIGITS)
            pos = stop
        parts.append(literal_to_regex(stem[pos:end]))
        parts.append('.*$')
        return ''.join(parts)
