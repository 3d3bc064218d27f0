"""
Interfaces module.

Contains abstract base classes for repositories and external collaborators.
"""

from mediaparser.core.interfaces.adapters import (
    IMetadataStore,
    IProgressSink,
    IRetryQueue,
    ITextCompletion,
)
from mediaparser.core.interfaces.repositories import IFilenameMappingRepository

__all__ = [
    'IFilenameMappingRepository',
    'ITextCompletion',
    'IMetadataStore',
    'IRetryQueue',
    'IProgressSink',
]
