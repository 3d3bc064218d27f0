"""
Entities module.

Contains the parse result shared by every resolution layer and the learned
filename mapping persisted in the pattern store.
"""

import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional

from mediaparser.core.domain.value_objects import (
    MatchType,
    MediaType,
    MetadataSource,
    MetadataType,
    ParseStatus,
    PatternType,
)
from mediaparser.core.utils.timezone_utils import format_datetime_iso, get_utc_now


@dataclass
class ParseResult:
    """
    Structured metadata extracted from one media filename.

    Produced by the rule parser, the AI fallback or a learned pattern; callers
    tell them apart through ``metadata_source``. Optional fields are None when
    the filename carries no such information.

    Attributes:
        original_filename: The filename exactly as given.
        status: success / needs_ai / failed.
        media_type: movie or tv.
        title: Cleaned title, empty only when status is not success.
        release_group: Release or fansub group (``fansub_group`` is an alias).
        confidence: Score in [0, 1].
    """
    original_filename: str
    status: ParseStatus = ParseStatus.NEEDS_AI
    media_type: MediaType = MediaType.MOVIE
    title: str = ''
    title_romanized: Optional[str] = None
    year: Optional[int] = None
    season: Optional[int] = None
    episode: Optional[int] = None
    episode_end: Optional[int] = None
    quality: Optional[str] = None
    source: Optional[str] = None
    video_codec: Optional[str] = None
    audio_codec: Optional[str] = None
    release_group: Optional[str] = None
    language: Optional[str] = None
    confidence: float = 0.0
    metadata_source: Optional[MetadataSource] = None
    error_message: Optional[str] = None
    learned_pattern_id: Optional[str] = None
    learned_metadata_id: Optional[str] = None
    learned_tmdb_id: Optional[int] = None
    parse_duration_ms: int = 0

    def __post_init__(self) -> None:
        """Validate result invariants on initialization."""
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f'Confidence must be within [0, 1], got {self.confidence}')
        if (
            self.episode is not None
            and self.episode_end is not None
            and self.episode_end < self.episode
        ):
            raise ValueError(
                f'episode_end ({self.episode_end}) cannot be lower than '
                f'episode ({self.episode})'
            )
        if self.status == ParseStatus.SUCCESS and not self.title:
            raise ValueError('A successful parse result must have a title')

    @property
    def fansub_group(self) -> Optional[str]:
        """Alias of release_group used by fansub naming conventions."""
        return self.release_group

    @property
    def is_success(self) -> bool:
        return self.status == ParseStatus.SUCCESS

    @property
    def needs_ai(self) -> bool:
        return self.status == ParseStatus.NEEDS_AI

    def evolve(self, **changes: Any) -> 'ParseResult':
        """Return a copy with the given fields replaced (re-validated)."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data = asdict(self)
        data['status'] = self.status.value
        data['media_type'] = self.media_type.value
        data['metadata_source'] = (
            self.metadata_source.value if self.metadata_source else None
        )
        data['fansub_group'] = self.release_group
        return data


def build_learning_key(
    pattern_type: PatternType,
    pattern: str,
    fansub_group: Optional[str],
    title_pattern: Optional[str]
) -> str:
    """构建学习去重键（exact 按 pattern，其余按字幕组 + 标题，不区分大小写）"""
    if pattern_type == PatternType.EXACT:
        return f'exact:{pattern}'
    return f'title:{(fansub_group or "").lower()}\x00{(title_pattern or "").lower()}'


@dataclass
class FilenameMapping:
    """
    Learned filename pattern pointing at a confirmed metadata record.

    Created once by the learner. Afterwards only ``use_count`` and
    ``last_used_at`` change, until the mapping is deleted.

    Attributes:
        id: UUID string.
        pattern: Unique key, "[group] title" or the cleaned filename.
        pattern_type: exact / fansub / standard.
        pattern_regex: Synthesized regex, None for exact mappings.
        fansub_group: Group detected when learning.
        title_pattern: Cleaned title detected when learning.
        metadata_type: movie or series.
        metadata_id: Target metadata identifier.
        tmdb_id: Optional TMDb identifier.
        confidence: 1.0 for learned mappings.
        use_count: Number of times the mapping was applied.
    """
    pattern: str
    pattern_type: PatternType
    metadata_type: MetadataType
    metadata_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    pattern_regex: Optional[str] = None
    fansub_group: Optional[str] = None
    title_pattern: Optional[str] = None
    tmdb_id: Optional[int] = None
    confidence: float = 1.0
    use_count: int = 0
    created_at: datetime = field(default_factory=get_utc_now)
    last_used_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate mapping invariants on initialization."""
        if not self.pattern:
            raise ValueError('pattern cannot be empty')
        if self.pattern_type == PatternType.EXACT and self.pattern_regex:
            raise ValueError('exact mappings do not carry a regex')
        if self.use_count < 0:
            raise ValueError(f'use_count cannot be negative: {self.use_count}')

    @property
    def learning_key(self) -> str:
        """
        Deduplication key of the mapping.

        Exact mappings are keyed by their pattern. Fansub and standard
        mappings share one key space: lower-cased group and title.
        """
        return build_learning_key(
            self.pattern_type, self.pattern, self.fansub_group, self.title_pattern
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase dictionary used by the management API."""
        return {
            'id': self.id,
            'pattern': self.pattern,
            'patternType': self.pattern_type.value,
            'patternRegex': self.pattern_regex,
            'fansubGroup': self.fansub_group,
            'titlePattern': self.title_pattern,
            'metadataType': self.metadata_type.value,
            'metadataId': self.metadata_id,
            'tmdbId': self.tmdb_id,
            'confidence': self.confidence,
            'useCount': self.use_count,
            'createdAt': format_datetime_iso(self.created_at),
            'lastUsedAt': format_datetime_iso(self.last_used_at),
        }


@dataclass
class MatchResult:
    """A learned mapping that matched a filename."""
    mapping: FilenameMapping
    confidence: float
    match_type: MatchType

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mapping': self.mapping.to_dict(),
            'confidence': round(self.confidence, 4),
            'matchType': self.match_type.value,
        }


@dataclass
class PatternStats:
    """Aggregate usage statistics over all learned mappings."""
    total_patterns: int = 0
    total_applied: int = 0
    most_used_pattern: Optional[str] = None
    most_used_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalPatterns': self.total_patterns,
            'totalApplied': self.total_applied,
            'mostUsedPattern': self.most_used_pattern,
            'mostUsedCount': self.most_used_count,
        }
