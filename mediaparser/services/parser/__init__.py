"""
Rule-based parser module.

Ordered extraction rules over a shared context, scored by field weights.
"""

from mediaparser.services.parser.rule_parser import RuleBasedParser
from mediaparser.services.parser.rules import DEFAULT_RULES, ExtractionContext

__all__ = [
    'RuleBasedParser',
    'ExtractionContext',
    'DEFAULT_RULES',
]
