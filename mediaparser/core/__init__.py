"""
Core layer module.

Contains domain models, interfaces, and exception definitions.
"""

from mediaparser.core.exceptions import (
    AICallError,
    AIError,
    ConfigError,
    ConfigValidationError,
    DatabaseError,
    DuplicateRecordError,
    MalformedAIResponse,
    MediaParserError,
    RecordNotFoundError,
    ValidationError,
)

__all__ = [
    # Exceptions
    'MediaParserError',
    'ValidationError',
    'AIError',
    'AICallError',
    'MalformedAIResponse',
    'ConfigError',
    'ConfigValidationError',
    'DatabaseError',
    'DuplicateRecordError',
    'RecordNotFoundError',
]
