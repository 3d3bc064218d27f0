"""
Repositories module.

Provides data access layer implementations.
"""

from mediaparser.infrastructure.repositories.filename_mapping_repository import (
    FilenameMappingRepository,
)

__all__ = [
    'FilenameMappingRepository',
]
