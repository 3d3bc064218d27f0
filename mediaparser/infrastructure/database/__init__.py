"""
Database infrastructure module.

Provides database session management and ORM models.
"""

from mediaparser.infrastructure.database.models import Base, FilenameMappingModel
from mediaparser.infrastructure.database.session import DatabaseSessionManager

__all__ = [
    # Models
    'Base',
    'FilenameMappingModel',
    # Session
    'DatabaseSessionManager',
]
