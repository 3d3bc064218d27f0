"""
Exceptions module.

Contains the exception hierarchy for the MediaParser application.
All custom exceptions inherit from MediaParserError for consistent handling.
"""

from typing import Any, Dict, Optional


class MediaParserError(Exception):
    """
    Base exception for all MediaParser errors.

    All custom exceptions in the application should inherit from this class
    to enable consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
        context: Additional context information for debugging.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or 'UNKNOWN_ERROR'
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.context:
            return f'[{self.code}] {self.message} - Context: {self.context}'
        return f'[{self.code}] {self.message}'


# Input validation

class ValidationError(MediaParserError, ValueError):
    """
    Exception raised when caller input is rejected.

    Inherits ValueError so the web layer reports it as a 400.

    Attributes:
        field_name: Name of the rejected field.
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if field_name:
            ctx['field_name'] = field_name
        super().__init__(message, 'VALIDATION_ERROR', ctx)
        self.field_name = field_name


# AI-related exceptions

class AIError(MediaParserError):
    """Base exception for AI service errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'AI_ERROR', context)


class AICallError(AIError):
    """
    Exception raised when the AI capability cannot be reached.

    Covers timeouts, transport failures and non-success HTTP responses.
    The filename stays in needs_ai and is handed to the retry queue.

    Attributes:
        status_code: HTTP status code, if a response was received.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if status_code is not None:
            ctx['status_code'] = status_code
        super().__init__(message, 'AI_CALL_FAILED', ctx)
        self.status_code = status_code


class MalformedAIResponse(AIError):
    """
    Exception raised when AI response cannot be parsed.

    Attributes:
        raw_response: The raw response that failed to parse.
    """

    def __init__(
        self,
        message: str,
        raw_response: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if raw_response:
            ctx['raw_response'] = raw_response[:500]  # Truncate for logging
        super().__init__(message, 'AI_PARSE_ERROR', ctx)
        self.raw_response = raw_response


# Configuration exceptions

class ConfigError(MediaParserError):
    """Base exception for configuration errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'CONFIG_ERROR', context)


class ConfigValidationError(ConfigError):
    """
    Exception raised when configuration validation fails.

    Attributes:
        field_name: Name of the field that failed validation.
        field_value: The invalid value.
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if field_name:
            ctx['field_name'] = field_name
        if field_value is not None:
            ctx['field_value'] = str(field_value)
        super().__init__(message, 'CONFIG_VALIDATION_ERROR', ctx)
        self.field_name = field_name
        self.field_value = field_value


# Database exceptions

class DatabaseError(MediaParserError):
    """Base exception for database errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'DATABASE_ERROR', context)


class DuplicateRecordError(DatabaseError):
    """Exception raised when a unique constraint rejects an insert."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, 'DUPLICATE_RECORD', context)


class RecordNotFoundError(DatabaseError):
    """
    Exception raised when a database record cannot be found.

    Attributes:
        table_name: Name of the table.
        record_id: ID of the record that was not found.
    """

    def __init__(
        self,
        message: str,
        table_name: Optional[str] = None,
        record_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if table_name:
            ctx['table_name'] = table_name
        if record_id is not None:
            ctx['record_id'] = str(record_id)
        super().__init__(message, 'RECORD_NOT_FOUND', ctx)
        self.table_name = table_name
        self.record_id = record_id
