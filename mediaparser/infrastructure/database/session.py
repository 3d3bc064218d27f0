"""
Database session management module.

Contains the DatabaseSessionManager class for handling database connections
and session management using SQLAlchemy.
"""

import logging
import os
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from mediaparser.core.exceptions import DatabaseError, DuplicateRecordError
from mediaparser.infrastructure.database.models import Base

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """数据库会话管理器"""

    def __init__(self, db_path: str = None):
        """
        Initialize the database session manager.

        Args:
            db_path: Path to the SQLite database file.
                     If not provided, uses DB_PATH env var or defaults to 'mediaparser.db'.
        """
        self.db_path = db_path or os.getenv('DB_PATH', 'mediaparser.db')

        # 确保数据库目录存在
        db_dir = os.path.dirname(self.db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        self.engine = create_engine(
            f'sqlite:///{self.db_path}',
            echo=False,
            pool_pre_ping=True,
            connect_args={'check_same_thread': False}
        )
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        self.Session = scoped_session(self.session_factory)

    def init_db(self):
        """初始化数据库表结构"""
        try:
            Base.metadata.create_all(self.engine)
            logger.info('✅ 数据库表初始化完成')
        except SQLAlchemyError as e:
            raise DatabaseError(
                f'数据库初始化失败: {str(e)}',
                context={'original_exception': str(e)}
            ) from e

    def dispose(self):
        """释放连接池"""
        self.Session.remove()
        self.engine.dispose()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        获取数据库会话上下文。

        正常退出时提交；唯一约束冲突转换为 DuplicateRecordError，
        其他 SQLAlchemy 错误转换为 DatabaseError。
        """
        session = self.Session()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.warning(f'⚠️ 数据完整性错误: {e.orig}')
            raise DuplicateRecordError(
                '数据完整性错误',
                context={'original_exception': str(e.orig)}
            ) from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f'❌ 数据库操作错误: {e}')
            raise DatabaseError(
                '数据库操作错误',
                context={'original_exception': str(e)}
            ) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
