"""
Dependency Injection Container module.

Contains the Container class for managing application dependencies.
"""

from dependency_injector import containers, providers

from mediaparser.core.config import config

# AI Components
from mediaparser.infrastructure.ai.api_client import OpenAIClient
from mediaparser.infrastructure.ai.filename_parser import AIFilenameParser, OpenAITextCompletion

# Database
from mediaparser.infrastructure.database.session import DatabaseSessionManager

# Collaborators
from mediaparser.infrastructure.queue.progress_sink import LoggingProgressSink
from mediaparser.infrastructure.queue.retry_queue import InMemoryRetryQueue

# Repositories
from mediaparser.infrastructure.repositories.filename_mapping_repository import (
    FilenameMappingRepository,
)

# Learning Services
from mediaparser.services.learning.learning_service import LearningService
from mediaparser.services.learning.pattern_extractor import PatternExtractor
from mediaparser.services.learning.pattern_matcher import PatternMatcher

# Parser Services
from mediaparser.services.parser.rule_parser import RuleBasedParser
from mediaparser.services.parser_service import ParserService


class Container(containers.DeclarativeContainer):
    """
    依赖注入容器。

    服务层次结构:
    1. Database & Repositories (模式存储)
    2. Rule Parser (规则解析)
    3. AI Components (AI 回退)
    4. Learning (模式学习与匹配)
    5. Orchestrator (解析服务)
    """

    wiring_config = containers.WiringConfiguration(modules=[
        'mediaparser.interface.web.controllers.learning',
        'mediaparser.interface.web.controllers.parser',
    ])

    # ===== Database =====
    db_manager = providers.Singleton(
        DatabaseSessionManager,
        db_path=config.database_path
    )

    # ===== Repositories =====
    mapping_repo = providers.Singleton(
        FilenameMappingRepository,
        db_manager=db_manager
    )

    # ===== Rule Parser =====
    rule_parser = providers.Singleton(
        RuleBasedParser,
        confidence_threshold=config.parser.confidence_threshold,
        weights=config.parser.weights.to_weights()
    )

    # ===== AI Components =====
    ai_api_client = providers.Singleton(
        OpenAIClient,
        timeout=config.ai.timeout
    )
    text_completion = providers.Singleton(
        OpenAITextCompletion,
        ai_config=config.ai,
        api_client=ai_api_client
    )
    ai_parser = providers.Singleton(
        AIFilenameParser,
        completion=text_completion
    )

    # ===== Collaborators =====
    # 元数据存储由 CRUD 层提供，默认不校验
    metadata_store = providers.Object(None)
    retry_queue = providers.Singleton(InMemoryRetryQueue)
    progress_sink = providers.Singleton(LoggingProgressSink)

    # ===== Learning =====
    pattern_extractor = providers.Singleton(
        PatternExtractor,
        rule_parser=rule_parser
    )
    pattern_matcher = providers.Singleton(
        PatternMatcher,
        repository=mapping_repo,
        extractor=pattern_extractor,
        fuzzy_enabled=config.learning.fuzzy_match_enabled,
        fuzzy_threshold=config.learning.fuzzy_threshold
    )
    learning_service = providers.Singleton(
        LearningService,
        repository=mapping_repo,
        extractor=pattern_extractor,
        matcher=pattern_matcher,
        metadata_store=metadata_store
    )

    # ===== Orchestrator =====
    parser_service = providers.Singleton(
        ParserService,
        rule_parser=rule_parser,
        matcher=pattern_matcher,
        ai_parser=ai_parser,
        retry_queue=retry_queue,
        progress_sink=progress_sink,
        min_apply_confidence=config.learning.min_apply_confidence,
        max_workers=config.batch.max_workers,
        max_batch_size=config.batch.max_batch_size
    )


# 全局容器实例
container = Container()
