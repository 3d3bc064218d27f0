"""
Extraction rules module.

Each rule is an independent matcher that reads and updates a shared
ExtractionContext. Rules run in a fixed order; the title rule runs last
because it cuts the title at the markers found by the others.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from mediaparser.services.parser.tokens import (
    AUDIO_CODEC_RE,
    LANGUAGE_RE,
    QUALITY_RE,
    RESOLUTION_RE,
    SOURCE_RE,
    TAG_RE,
    VIDEO_CODEC_RE,
    clean_title,
    height_to_quality,
    is_tech_token,
    kanji_to_number,
    normalize_audio_codec,
    normalize_language,
    normalize_quality,
    normalize_source,
    normalize_video_codec,
    strip_extension,
)

logger = logging.getLogger(__name__)

Span = Tuple[int, int]

BRACKET_RE = re.compile(r'\[([^\[\]]*)\]|【([^【】]*)】')
BRACKET_CHARS_RE = re.compile(r'[\[\]【】()（）]')

SUFFIX_GROUP_RE = re.compile(r'-([A-Za-z0-9]+)$')
NOT_A_GROUP_RE = re.compile(r'^(?:E\d{1,4}|S\d{1,2}(?:E\d{1,4})?|\d{3,4}p|v\d)$', re.IGNORECASE)

YEAR_RE = re.compile(r'(?<![A-Za-z0-9])((?:19|20)\d{2})(?![A-Za-z0-9])')

SXXEXX_RE = re.compile(
    r'(?<![A-Za-z0-9])S(\d{1,2})[\s.]?E(\d{1,4})(?:(?:-?E|-)(\d{1,4})(?![A-Za-z0-9]))?',
    re.IGNORECASE
)
NXNN_RE = re.compile(r'(?<![A-Za-z0-9])(\d{1,2})x(\d{2,3})(?![A-Za-z0-9])', re.IGNORECASE)
CJK_EPISODE_RE = re.compile(r'第\s*(\d{1,4})(?:\s*[-~～]\s*(\d{1,4}))?\s*[話话集]')
EP_RE = re.compile(
    r'(?<![A-Za-z])(?:episode|ep)[\s._]?(\d{1,4})(?:\s?-\s?(\d{1,4}))?(?![\dA-Za-z])',
    re.IGNORECASE
)
DASH_EPISODE_RE = re.compile(r'\s-\s(\d{1,4})(?:v\d)?(?:[-~](\d{1,4}))?(?![\dA-Za-z])')
BRACKET_EPISODE_RE = re.compile(
    r'[\[【](\d{1,4})(?:v\d)?(?:[-~](\d{1,4}))?(?:\s?END)?[\]】]', re.IGNORECASE
)

CJK_SEASON_RE = re.compile(r'第\s*(\d{1,2}|[一二三四五六七八九十]{1,3})\s*[季期]')
SEASON_WORD_RE = re.compile(r'(?<![A-Za-z])season[\s._]?(\d{1,2})(?!\d)', re.IGNORECASE)
SEASON_SHORT_RE = re.compile(r'(?<![A-Za-z0-9])S(\d{1,2})(?![A-Za-z0-9])', re.IGNORECASE)

CRC_RE = re.compile(r'^[0-9A-F]{8}$', re.IGNORECASE)

TECH_FIELDS = ('quality', 'source', 'video_codec', 'audio_codec', 'language')


@dataclass
class Candidate:
    """A normalized field value found at a position of the stem."""
    value: str
    start: int
    masked: bool


@dataclass
class ExtractionContext:
    """
    Shared state of one rule-parser run.

    ``stem`` is the filename without extension. ``plain`` is the stem with
    bracket characters blanked, ``work`` additionally blanks every ``[...]``
    and ``【...】`` segment. All three share the same indices, so spans found
    in one are valid in the others.
    """
    filename: str
    stem: str = ''
    plain: str = ''
    work: str = ''
    brackets: List[Tuple[Span, str]] = field(default_factory=list)

    group: Optional[str] = None
    group_span: Optional[Span] = None
    group_style: Optional[str] = None  # bracket / suffix

    year: Optional[int] = None
    year_span: Optional[Span] = None

    season: Optional[int] = None
    season_span: Optional[Span] = None
    episode: Optional[int] = None
    episode_end: Optional[int] = None
    episode_span: Optional[Span] = None  # 集数数字本身
    episode_marker_span: Optional[Span] = None  # 整个集数标记

    candidates: Dict[str, List[Candidate]] = field(default_factory=dict)

    title: str = ''
    title_end: Optional[int] = None
    title_from_bracket: bool = False

    def __post_init__(self) -> None:
        self.stem = strip_extension(self.filename)
        self.plain = BRACKET_CHARS_RE.sub(' ', self.stem)
        work = list(self.plain)
        for match in BRACKET_RE.finditer(self.stem):
            content = match.group(1) if match.group(1) is not None else match.group(2)
            self.brackets.append((match.span(), content.strip()))
            for i in range(match.start(), match.end()):
                work[i] = ' '
        self.work = ''.join(work)

    def is_masked(self, pos: int) -> bool:
        """位置是否位于方括号内"""
        return any(start <= pos < end for (start, end), _ in self.brackets)

    def add(self, name: str, value: Optional[str], start: int) -> None:
        if value:
            self.candidates.setdefault(name, []).append(
                Candidate(value, start, self.is_masked(start))
            )

    def values(self, name: str) -> List[str]:
        """去重后的候选值，按出现顺序"""
        seen: List[str] = []
        for candidate in self.candidates.get(name, []):
            if candidate.value not in seen:
                seen.append(candidate.value)
        return seen

    def first(self, name: str) -> Optional[str]:
        values = self.values(name)
        return values[0] if values else None

    def is_unambiguous(self, name: str) -> bool:
        return len(self.values(name)) == 1

    @property
    def has_markers(self) -> bool:
        """是否包含集数或年份标记"""
        return self.episode is not None or self.season is not None or self.year is not None

    def overlaps_claimed(self, span: Span) -> bool:
        for claimed in (self.group_span, self.year_span):
            if claimed and span[0] < claimed[1] and claimed[0] < span[1]:
                return True
        return False


Rule = Callable[[ExtractionContext], None]


def extract_group(ctx: ExtractionContext) -> None:
    """字幕组：开头的 [] / 【】，否则结尾的 -GROUP"""
    if ctx.brackets:
        (start, end), content = ctx.brackets[0]
        leading = ctx.stem[:start].strip() == ''
        if leading and content and not is_tech_token(content) and not content.isdigit():
            # 字幕组保留括号内原文（含首尾空白）
            ctx.group = ctx.stem[start + 1:end - 1]
            ctx.group_span = (start, end)
            ctx.group_style = 'bracket'
            return

    stripped = ctx.stem.rstrip()
    match = SUFFIX_GROUP_RE.search(stripped)
    if not match:
        return
    token = match.group(1)
    if token.isdigit() or is_tech_token(token) or NOT_A_GROUP_RE.match(token):
        return
    # WEB-DL 的 DL 不是发布组
    if stripped[:match.start()].lower().endswith('web'):
        return
    ctx.group = token
    ctx.group_span = match.span()
    ctx.group_style = 'suffix'


def extract_year(ctx: ExtractionContext) -> None:
    """发行年份：取最后一个不在标题开头的候选"""
    chosen = None
    for match in YEAR_RE.finditer(ctx.plain):
        start = match.start(1)
        if not ctx.is_masked(start) and ctx.work[:start].strip() == '':
            # 标题本身就是年份，如 1917.2019
            continue
        if ctx.group_span and ctx.group_span[0] <= start < ctx.group_span[1]:
            continue
        chosen = match
    if chosen:
        ctx.year = int(chosen.group(1))
        ctx.year_span = chosen.span(1)


def _set_episode(ctx: ExtractionContext, match: re.Match, episode_group: int,
                 end_group: Optional[int]) -> None:
    ctx.episode = int(match.group(episode_group))
    ctx.episode_span = match.span(episode_group)
    ctx.episode_marker_span = match.span()
    if end_group and match.group(end_group):
        episode_end = int(match.group(end_group))
        if episode_end > ctx.episode:
            ctx.episode_end = episode_end


def extract_season_episode(ctx: ExtractionContext) -> None:
    """季/集：SxxExx、1x05、第01話、EP01、- 01、[01]，以及 第二季 / Season 2"""
    match = SXXEXX_RE.search(ctx.plain)
    if match:
        ctx.season = int(match.group(1))
        ctx.season_span = match.span()
        _set_episode(ctx, match, 2, 3)
    else:
        match = NXNN_RE.search(ctx.plain)
        if match:
            ctx.season = int(match.group(1))
            ctx.season_span = match.span()
            _set_episode(ctx, match, 2, None)

    if ctx.episode is None:
        for pattern in (CJK_EPISODE_RE, EP_RE, DASH_EPISODE_RE):
            found = next(
                (m for m in pattern.finditer(ctx.plain) if not ctx.overlaps_claimed(m.span(1))),
                None
            )
            if found:
                _set_episode(ctx, found, 1, 2)
                break

    if ctx.episode is None:
        for match in BRACKET_EPISODE_RE.finditer(ctx.stem):
            digits = match.group(1)
            if ctx.overlaps_claimed(match.span()):
                continue
            if len(digits) == 4 and digits[:2] in ('19', '20'):
                continue
            _set_episode(ctx, match, 1, 2)
            break

    if ctx.season is None:
        for pattern in (CJK_SEASON_RE, SEASON_WORD_RE, SEASON_SHORT_RE):
            match = pattern.search(ctx.plain)
            if match:
                season = kanji_to_number(match.group(1))
                if season is not None:
                    ctx.season = season
                    ctx.season_span = match.span()
                    break


def extract_quality(ctx: ExtractionContext) -> None:
    for match in QUALITY_RE.finditer(ctx.plain):
        ctx.add('quality', normalize_quality(match.group(1)), match.start())
    for match in RESOLUTION_RE.finditer(ctx.plain):
        ctx.add('quality', height_to_quality(int(match.group(2))), match.start())
    ctx.candidates.get('quality', []).sort(key=lambda c: c.start)


def extract_source(ctx: ExtractionContext) -> None:
    for match in SOURCE_RE.finditer(ctx.plain):
        ctx.add('source', normalize_source(match.group(1)), match.start())


def extract_codec(ctx: ExtractionContext) -> None:
    for match in VIDEO_CODEC_RE.finditer(ctx.plain):
        ctx.add('video_codec', normalize_video_codec(match.group(1)), match.start())
    for match in AUDIO_CODEC_RE.finditer(ctx.plain):
        ctx.add('audio_codec', normalize_audio_codec(match.group(1)), match.start())


def extract_language(ctx: ExtractionContext) -> None:
    for match in LANGUAGE_RE.finditer(ctx.plain):
        ctx.add('language', normalize_language(match.group(1)), match.start())


def _bracket_title(ctx: ExtractionContext) -> Optional[Tuple[Span, str]]:
    """标题被方括号包裹时（如 [Group][Title][01]），取第一个像标题的方括号"""
    for span, content in ctx.brackets:
        if span == ctx.group_span or not content:
            continue
        if is_tech_token(content) or CRC_RE.match(content) or TAG_RE.search(content):
            continue
        if re.fullmatch(r'[\d\s.\-~v]+(?:END)?', content, re.IGNORECASE):
            continue
        if (QUALITY_RE.search(content) or SOURCE_RE.search(content)
                or VIDEO_CODEC_RE.search(content) or LANGUAGE_RE.search(content)):
            continue
        return span, content
    return None


def extract_title(ctx: ExtractionContext) -> None:
    """
    标题：在第一个年份/季/集标记处截断（方括号外）。

    没有这些标记时在第一个技术标记或 -GROUP 处截断。
    截断点之前的技术候选视为标题的一部分并丢弃。
    """
    primary = [
        span[0] for span in (ctx.year_span, ctx.season_span, ctx.episode_marker_span)
        if span and not ctx.is_masked(span[0])
    ]
    if primary:
        cut = min(primary)
        for name in TECH_FIELDS:
            if name in ctx.candidates:
                ctx.candidates[name] = [
                    c for c in ctx.candidates[name] if c.masked or c.start >= cut
                ]
    else:
        secondary = [
            c.start for name in TECH_FIELDS for c in ctx.candidates.get(name, [])
            if not c.masked
        ]
        if ctx.group_style == 'suffix':
            secondary.append(ctx.group_span[0])
        cut = min(secondary) if secondary else len(ctx.work)

    region = ctx.work[:cut]
    for pattern in (QUALITY_RE, RESOLUTION_RE, VIDEO_CODEC_RE, LANGUAGE_RE):
        region = pattern.sub(lambda m: ' ' * len(m.group(0)), region)
    title = clean_title(region)

    if title:
        ctx.title = title
        ctx.title_end = cut
        return

    bracket = _bracket_title(ctx)
    if bracket:
        span, content = bracket
        ctx.title = clean_title(content)
        ctx.title_end = span[1]
        ctx.title_from_bracket = True


DEFAULT_RULES: List[Rule] = [
    extract_group,
    extract_year,
    extract_season_episode,
    extract_quality,
    extract_source,
    extract_codec,
    extract_language,
    extract_title,
]
