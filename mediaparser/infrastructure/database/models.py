"""
Database models module.

Contains SQLAlchemy ORM models for the MediaParser application.
"""

from sqlalchemy import (
    Column, Float, Index, Integer, Text, TIMESTAMP, UniqueConstraint
)
from sqlalchemy.orm import declarative_base

from mediaparser.core.utils.timezone_utils import get_utc_now

Base = declarative_base()


class FilenameMappingModel(Base):
    """文件名学习模式表"""

    __tablename__ = 'filename_mappings'

    id = Column(Text, primary_key=True)  # UUID
    pattern = Column(Text, nullable=False)
    learning_key = Column(Text, nullable=False)  # 规范化去重键
    pattern_type = Column(Text, nullable=False)  # exact / fansub / standard
    pattern_regex = Column(Text)
    fansub_group = Column(Text)
    title_pattern = Column(Text)
    metadata_type = Column(Text, nullable=False)  # movie / series
    metadata_id = Column(Text, nullable=False)
    tmdb_id = Column(Integer)
    confidence = Column(Float, nullable=False, default=1.0)
    use_count = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP, default=get_utc_now)
    last_used_at = Column(TIMESTAMP)

    __table_args__ = (
        UniqueConstraint('pattern', name='uq_filename_mappings_pattern'),
        UniqueConstraint('learning_key', name='uq_filename_mappings_learning_key'),
        Index('idx_filename_mappings_fansub_group', 'fansub_group'),
        Index('idx_filename_mappings_title_pattern', 'title_pattern'),
        Index('idx_filename_mappings_metadata', 'metadata_type', 'metadata_id'),
    )

    def __repr__(self):
        return (
            f"<FilenameMapping(id={self.id}, pattern='{self.pattern}', "
            f"type={self.pattern_type}, use_count={self.use_count})>"
        )
