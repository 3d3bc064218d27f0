"""
Domain layer module.

Contains value objects and entities that represent the core business concepts.
"""

from mediaparser.core.domain.entities import (
    FilenameMapping,
    MatchResult,
    ParseResult,
    PatternStats,
)
from mediaparser.core.domain.value_objects import (
    ConfidenceWeights,
    LearnTarget,
    MatchType,
    MediaType,
    MetadataSource,
    MetadataType,
    ParseStatus,
    PatternType,
)

__all__ = [
    # Entities
    'ParseResult',
    'FilenameMapping',
    'MatchResult',
    'PatternStats',
    # Value objects
    'ConfidenceWeights',
    'LearnTarget',
    'MatchType',
    'MediaType',
    'MetadataSource',
    'MetadataType',
    'ParseStatus',
    'PatternType',
]
