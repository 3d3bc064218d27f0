"""
Pattern learning module.

Learns filename mappings from confirmed matches and matches new filenames
against them.
"""

from mediaparser.services.learning.learning_service import LearningService, build_learn_target
from mediaparser.services.learning.pattern_extractor import ExtractedPattern, PatternExtractor
from mediaparser.services.learning.pattern_matcher import PatternMatcher

__all__ = [
    'LearningService',
    'build_learn_target',
    'PatternExtractor',
    'ExtractedPattern',
    'PatternMatcher',
]
