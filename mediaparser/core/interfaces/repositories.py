"""
Repository interfaces module.

Contains abstract base classes defining contracts for data access operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from mediaparser.core.domain.entities import FilenameMapping


class IFilenameMappingRepository(ABC):
    """
    Pattern store interface.

    Defines the contract for learned filename mapping persistence.
    """

    @abstractmethod
    def save(self, mapping: FilenameMapping) -> FilenameMapping:
        """
        Insert a new mapping.

        Args:
            mapping: The mapping to persist.

        Returns:
            The persisted mapping.

        Raises:
            DuplicateRecordError: If a mapping with the same pattern or
                learning key exists.
        """
        pass

    @abstractmethod
    def get_by_id(self, mapping_id: str) -> FilenameMapping | None:
        """Get a mapping by its ID."""
        pass

    @abstractmethod
    def get_by_pattern(self, pattern: str) -> FilenameMapping | None:
        """Get a mapping by its unique pattern key."""
        pass

    @abstractmethod
    def get_by_learning_key(self, learning_key: str) -> FilenameMapping | None:
        """Get a mapping by its normalized deduplication key."""
        pass

    @abstractmethod
    def find_by_group_and_title(
        self,
        fansub_group: str | None,
        title: str
    ) -> FilenameMapping | None:
        """
        Find a mapping by group and title pattern.

        The title comparison is case-insensitive. A None group only matches
        mappings learned without a group.
        """
        pass

    @abstractmethod
    def list_with_regex(self, fansub_group: str | None) -> List[FilenameMapping]:
        """
        List mappings carrying a regex, scoped to a group.

        Ordered by use_count descending, then last_used_at descending.
        """
        pass

    @abstractmethod
    def list_by_group(self, fansub_group: str | None) -> List[FilenameMapping]:
        """List fansub/standard mappings scoped to a group."""
        pass

    @abstractmethod
    def list_all(self) -> List[FilenameMapping]:
        """List all mappings, most used first."""
        pass

    @abstractmethod
    def delete(self, mapping_id: str) -> bool:
        """
        Delete a mapping.

        Returns:
            True if a row was deleted, False if the ID was unknown.
        """
        pass

    @abstractmethod
    def increment_use_count(self, mapping_id: str) -> bool:
        """Atomically bump use_count and set last_used_at."""
        pass

    @abstractmethod
    def count(self) -> int:
        pass
