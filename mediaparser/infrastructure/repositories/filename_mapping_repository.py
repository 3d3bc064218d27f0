"""
Filename mapping repository module.

Contains the FilenameMappingRepository class, the SQLite-backed pattern store
for learned filename mappings.
"""

import logging
from typing import List

from sqlalchemy import func

from mediaparser.core.domain.entities import FilenameMapping
from mediaparser.core.domain.value_objects import MetadataType, PatternType
from mediaparser.core.interfaces.repositories import IFilenameMappingRepository
from mediaparser.core.utils.timezone_utils import get_utc_now, to_utc
from mediaparser.infrastructure.database.models import FilenameMappingModel
from mediaparser.infrastructure.database.session import DatabaseSessionManager

logger = logging.getLogger(__name__)


class FilenameMappingRepository(IFilenameMappingRepository):
    """文件名学习模式仓库"""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db = db_manager

    def _to_entity(self, row: FilenameMappingModel) -> FilenameMapping:
        """将数据库行转换为实体"""
        return FilenameMapping(
            id=row.id,
            pattern=row.pattern,
            pattern_type=PatternType(row.pattern_type),
            pattern_regex=row.pattern_regex or None,
            fansub_group=row.fansub_group or None,
            title_pattern=row.title_pattern or None,
            metadata_type=MetadataType(row.metadata_type),
            metadata_id=row.metadata_id,
            tmdb_id=row.tmdb_id,
            confidence=row.confidence if row.confidence is not None else 1.0,
            use_count=row.use_count or 0,
            created_at=to_utc(row.created_at),
            last_used_at=to_utc(row.last_used_at),
        )

    @staticmethod
    def _group_filter(query, fansub_group: str | None):
        """按字幕组过滤，None 只匹配无字幕组的记录"""
        if fansub_group:
            return query.filter(
                func.lower(FilenameMappingModel.fansub_group) == fansub_group.lower()
            )
        return query.filter(
            (FilenameMappingModel.fansub_group.is_(None))
            | (FilenameMappingModel.fansub_group == '')
        )

    def save(self, mapping: FilenameMapping) -> FilenameMapping:
        """保存新的映射，pattern 或去重键冲突时抛出 DuplicateRecordError"""
        with self._db.session() as session:
            row = FilenameMappingModel(
                id=mapping.id,
                pattern=mapping.pattern,
                learning_key=mapping.learning_key,
                pattern_type=mapping.pattern_type.value,
                pattern_regex=mapping.pattern_regex,
                fansub_group=mapping.fansub_group,
                title_pattern=mapping.title_pattern,
                metadata_type=mapping.metadata_type.value,
                metadata_id=mapping.metadata_id,
                tmdb_id=mapping.tmdb_id,
                confidence=mapping.confidence,
                use_count=mapping.use_count,
                created_at=mapping.created_at,
                last_used_at=mapping.last_used_at,
            )
            session.add(row)
            session.flush()
            logger.info(f'✅ 保存学习模式: {mapping.pattern} ({mapping.pattern_type.value})')
            return self._to_entity(row)

    def get_by_id(self, mapping_id: str) -> FilenameMapping | None:
        """根据ID获取映射"""
        with self._db.session() as session:
            row = session.query(FilenameMappingModel).filter_by(id=mapping_id).first()
            return self._to_entity(row) if row else None

    def get_by_pattern(self, pattern: str) -> FilenameMapping | None:
        """根据 pattern 键获取映射"""
        with self._db.session() as session:
            row = session.query(FilenameMappingModel).filter_by(pattern=pattern).first()
            return self._to_entity(row) if row else None

    def get_by_learning_key(self, learning_key: str) -> FilenameMapping | None:
        """根据规范化去重键获取映射"""
        with self._db.session() as session:
            row = session.query(FilenameMappingModel).filter_by(
                learning_key=learning_key
            ).first()
            return self._to_entity(row) if row else None

    def find_by_group_and_title(
        self,
        fansub_group: str | None,
        title: str
    ) -> FilenameMapping | None:
        """根据字幕组和标题查找（标题不区分大小写）"""
        if not title:
            return None
        with self._db.session() as session:
            query = session.query(FilenameMappingModel).filter(
                func.lower(FilenameMappingModel.title_pattern) == title.lower(),
                FilenameMappingModel.pattern_type != PatternType.EXACT.value,
            )
            row = self._group_filter(query, fansub_group).order_by(
                FilenameMappingModel.use_count.desc()
            ).first()
            return self._to_entity(row) if row else None

    def list_with_regex(self, fansub_group: str | None) -> List[FilenameMapping]:
        """获取指定字幕组范围内带正则的映射"""
        with self._db.session() as session:
            query = session.query(FilenameMappingModel).filter(
                FilenameMappingModel.pattern_regex.isnot(None),
                FilenameMappingModel.pattern_regex != '',
            )
            rows = self._group_filter(query, fansub_group).order_by(
                FilenameMappingModel.use_count.desc(),
                FilenameMappingModel.last_used_at.desc(),
            ).all()
            return [self._to_entity(r) for r in rows]

    def list_by_group(self, fansub_group: str | None) -> List[FilenameMapping]:
        """获取指定字幕组范围内的非 exact 映射"""
        with self._db.session() as session:
            query = session.query(FilenameMappingModel).filter(
                FilenameMappingModel.pattern_type != PatternType.EXACT.value,
            )
            rows = self._group_filter(query, fansub_group).order_by(
                FilenameMappingModel.use_count.desc()
            ).all()
            return [self._to_entity(r) for r in rows]

    def list_all(self) -> List[FilenameMapping]:
        """获取全部映射，按使用次数和创建时间倒序"""
        with self._db.session() as session:
            rows = session.query(FilenameMappingModel).order_by(
                FilenameMappingModel.use_count.desc(),
                FilenameMappingModel.created_at.desc(),
            ).all()
            return [self._to_entity(r) for r in rows]

    def delete(self, mapping_id: str) -> bool:
        """删除映射"""
        with self._db.session() as session:
            deleted = session.query(FilenameMappingModel).filter_by(
                id=mapping_id
            ).delete(synchronize_session=False)
            if deleted:
                logger.info(f'🗑️ 删除学习模式: {mapping_id}')
            return deleted > 0

    def increment_use_count(self, mapping_id: str) -> bool:
        """原子地增加使用次数并更新最后使用时间"""
        with self._db.session() as session:
            updated = session.query(FilenameMappingModel).filter_by(
                id=mapping_id
            ).update(
                {
                    FilenameMappingModel.use_count: FilenameMappingModel.use_count + 1,
                    FilenameMappingModel.last_used_at: get_utc_now(),
                },
                synchronize_session=False
            )
            return updated > 0

    def count(self) -> int:
        with self._db.session() as session:
            return session.query(func.count(FilenameMappingModel.id)).scalar() or 0
