"""
Value objects module.

Contains immutable value objects representing domain concepts without identity.
Value objects are compared by their attributes, not by identity.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ParseStatus(Enum):
    """Parse status enumeration."""
    SUCCESS = 'success'
    NEEDS_AI = 'needs_ai'
    FAILED = 'failed'


class MediaType(Enum):
    """Media type of a parsed filename."""
    MOVIE = 'movie'
    TV = 'tv'


class MetadataType(Enum):
    """Metadata record type a learned pattern points to."""
    MOVIE = 'movie'
    SERIES = 'series'

    @property
    def media_type(self) -> MediaType:
        """Return the media type a parsed file of this metadata type has."""
        return MediaType.TV if self is MetadataType.SERIES else MediaType.MOVIE


class PatternType(Enum):
    """Learned pattern type enumeration."""
    EXACT = 'exact'
    FANSUB = 'fansub'
    STANDARD = 'standard'


class MatchType(Enum):
    """How a filename matched a learned pattern."""
    EXACT = 'exact'
    PATTERN = 'pattern'
    REGEX = 'regex'
    FUZZY = 'fuzzy'


class MetadataSource(Enum):
    """Which resolution layer produced a parse result."""
    REGEX = 'regex'
    AI = 'ai'
    LEARNED = 'learned'


@dataclass(frozen=True)
class LearnTarget:
    """
    Confirmed metadata target for a learned filename.

    Attributes:
        metadata_type: 'movie' or 'series'.
        metadata_id: Identifier of the metadata record.
        tmdb_id: Optional external TMDb identifier.
    """
    metadata_type: MetadataType
    metadata_id: str
    tmdb_id: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate target on initialization."""
        if not self.metadata_id or not str(self.metadata_id).strip():
            raise ValueError('metadata_id cannot be empty')


@dataclass(frozen=True)
class ConfidenceWeights:
    """
    Per-field weights used by the rule parser confidence score.

    The sum of all weights is expected to be 1.0, the score is clamped
    regardless.
    """
    title: float = 0.30
    episode: float = 0.25
    year: float = 0.15
    quality: float = 0.10
    group: float = 0.10
    source: float = 0.05
    codec: float = 0.05
