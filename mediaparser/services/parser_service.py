"""
Parser service module.

Orchestrates the resolution layers for each filename: learned pattern,
rule-based parser, then AI fallback. Batch parsing runs items in a bounded
thread pool and keeps the input order.
"""

import logging
import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Dict, List, Optional

from mediaparser.core.domain.entities import MatchResult, ParseResult
from mediaparser.core.domain.value_objects import (
    MetadataSource,
    ParseStatus,
    PatternType,
)
from mediaparser.core.exceptions import (
    AICallError,
    DatabaseError,
    MalformedAIResponse,
    ValidationError,
)
from mediaparser.core.interfaces.adapters import IProgressSink, IRetryQueue
from mediaparser.infrastructure.ai.filename_parser import AIFilenameParser
from mediaparser.services.learning.pattern_matcher import PatternMatcher
from mediaparser.services.parser.rule_parser import RuleBasedParser

logger = logging.getLogger(__name__)

AI_RETRY_TASK = 'ai_parse'
CANCEL_POLL_INTERVAL = 0.05  # seconds


class ParserService:
    """
    文件名解析服务。

    Example:
        >>> service = ParserService(rule_parser, matcher)
        >>> service.parse('Breaking.Bad.S01E01.720p.BluRay.mkv').episode
        1
    """

    def __init__(
        self,
        rule_parser: RuleBasedParser,
        matcher: Optional[PatternMatcher] = None,
        ai_parser: Optional[AIFilenameParser] = None,
        retry_queue: Optional[IRetryQueue] = None,
        progress_sink: Optional[IProgressSink] = None,
        min_apply_confidence: float = 0.8,
        max_workers: int = 4,
        max_batch_size: int = 500
    ):
        self._rule_parser = rule_parser
        self._matcher = matcher
        self._ai_parser = ai_parser
        self._retry_queue = retry_queue
        self._progress_sink = progress_sink
        self._min_apply_confidence = min_apply_confidence
        self._max_workers = max(1, max_workers)
        self._max_batch_size = max_batch_size
        # 可取消的 AI 调用在独立线程中执行
        self._ai_executor = ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix='ai-call'
        )

    @property
    def ai_available(self) -> bool:
        return self._ai_parser is not None and self._ai_parser.is_available

    def parse(
        self,
        filename: str,
        cancel_event: Optional[threading.Event] = None
    ) -> ParseResult:
        """
        Parse one filename.

        Args:
            filename: The raw filename.
            cancel_event: When set, no AI call is started and no learned
                pattern is touched; the rule result is returned. Setting it
                while an AI call is running stops waiting for that call.

        Raises:
            ValidationError: If the filename is empty.
        """
        if not filename or not filename.strip():
            raise ValidationError('Filename cannot be empty', field_name='filename')
        filename = filename.strip()

        start = time.perf_counter()
        self._emit('parse_started', {'filename': filename})

        result = self._resolve(filename, cancel_event)
        result.parse_duration_ms = int((time.perf_counter() - start) * 1000)

        if result.status == ParseStatus.FAILED:
            self._emit('parse_failed', {'filename': filename, 'error': result.error_message})
        else:
            self._emit('parse_completed', {
                'filename': filename,
                'status': result.status.value,
                'source': result.metadata_source.value if result.metadata_source else None,
                'confidence': result.confidence,
            })
        return result

    def parse_batch(
        self,
        filenames: List[str],
        cancel_event: Optional[threading.Event] = None
    ) -> List[ParseResult]:
        """
        Parse many filenames independently.

        Results keep the input order. One failing item never affects its
        siblings; it comes back with status failed.

        Raises:
            ValidationError: Empty batch or more than max_batch_size items.
        """
        if not filenames:
            raise ValidationError('Batch cannot be empty', field_name='filenames')
        if len(filenames) > self._max_batch_size:
            raise ValidationError(
                f'Batch too large: {len(filenames)} > {self._max_batch_size}',
                field_name='filenames'
            )

        batch_id = str(uuid.uuid4())[:8]
        total = len(filenames)
        results: List[Optional[ParseResult]] = [None] * total
        logger.info(f'📦 [{batch_id}] 批量解析开始: {total} 个文件')
        self._emit('batch_started', {'batch_id': batch_id, 'total': total})

        workers = min(self._max_workers, total)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='parse') as executor:
            future_to_index = {
                executor.submit(self._parse_item, filename, cancel_event): index
                for index, filename in enumerate(filenames)
            }
            completed = 0
            for future in as_completed(future_to_index):
                index = future_to_index[future]
                results[index] = future.result()
                completed += 1
                self._emit('progress_update', {
                    'batch_id': batch_id,
                    'completed': completed,
                    'total': total,
                })

        summary = self._summarize(results)
        logger.info(f'✅ [{batch_id}] 批量解析完成: {summary}')
        self._emit('batch_completed', {'batch_id': batch_id, 'total': total, **summary})
        return results

    def _parse_item(
        self,
        filename: Any,
        cancel_event: Optional[threading.Event]
    ) -> ParseResult:
        """批量中的单项解析，异常转换为 failed 结果"""
        original = filename if isinstance(filename, str) else str(filename)
        try:
            if not isinstance(filename, str):
                raise ValidationError('Filename must be a string', field_name='filename')
            return self.parse(filename, cancel_event)
        except ValidationError as e:
            return ParseResult(
                original_filename=original,
                status=ParseStatus.FAILED,
                error_message=e.message,
            )
        except Exception as e:
            logger.exception(f'❌ 解析异常: {original} - {e}')
            return ParseResult(
                original_filename=original,
                status=ParseStatus.FAILED,
                error_message=f'Unexpected error: {e}',
            )

    def _resolve(
        self,
        filename: str,
        cancel_event: Optional[threading.Event]
    ) -> ParseResult:
        cancelled = cancel_event is not None and cancel_event.is_set()
        rule_result = self._rule_parser.parse(filename)

        if self._matcher is not None and not cancelled:
            match = self._find_learned(filename)
            if match is not None:
                if match.confidence >= self._min_apply_confidence:
                    match.mapping = self._matcher.record_use(match.mapping)
                    return self._apply_learned(rule_result, match)
                logger.debug(
                    f'🔍 学习模式置信度不足: {match.confidence:.2f} < '
                    f'{self._min_apply_confidence:.2f}'
                )

        if rule_result.status != ParseStatus.NEEDS_AI:
            return rule_result

        if cancelled or not self.ai_available:
            return rule_result

        return self._parse_with_ai(filename, rule_result, cancel_event)

    def _find_learned(self, filename: str) -> Optional[MatchResult]:
        try:
            return self._matcher.match(filename, record_use=False)
        except DatabaseError as e:
            logger.warning(f'⚠️ 学习模式查询失败，跳过: {e}')
            return None

    @staticmethod
    def _apply_learned(rule_result: ParseResult, match: MatchResult) -> ParseResult:
        """用学习到的模式覆盖标题/字幕组/类型，其余字段沿用规则解析结果"""
        mapping = match.mapping
        if mapping.pattern_type == PatternType.EXACT:
            title = rule_result.title or mapping.title_pattern or mapping.pattern
        else:
            title = mapping.title_pattern or rule_result.title or mapping.pattern
        return rule_result.evolve(
            status=ParseStatus.SUCCESS,
            title=title,
            media_type=mapping.metadata_type.media_type,
            release_group=mapping.fansub_group or rule_result.release_group,
            confidence=match.confidence,
            metadata_source=MetadataSource.LEARNED,
            error_message=None,
            learned_pattern_id=mapping.id,
            learned_metadata_id=mapping.metadata_id,
            learned_tmdb_id=mapping.tmdb_id,
        )

    def _call_ai(
        self,
        filename: str,
        cancel_event: Optional[threading.Event]
    ) -> Optional[ParseResult]:
        """
        调用 AI 解析，可被 cancel_event 中断。

        Returns:
            AI result, or None when the caller cancelled while waiting. The
            abandoned call finishes in the background and its result is
            discarded.
        """
        if cancel_event is None:
            return self._ai_parser.parse(filename)

        future = self._ai_executor.submit(self._ai_parser.parse, filename)
        while True:
            try:
                return future.result(timeout=CANCEL_POLL_INTERVAL)
            except FutureTimeoutError:
                if cancel_event.is_set():
                    future.cancel()
                    return None

    def _parse_with_ai(
        self,
        filename: str,
        rule_result: ParseResult,
        cancel_event: Optional[threading.Event] = None
    ) -> ParseResult:
        try:
            ai_result = self._call_ai(filename, cancel_event)
        except MalformedAIResponse as e:
            logger.warning(f'⚠️ AI 响应格式错误: {filename} - {e.message}')
            return rule_result.evolve(
                status=ParseStatus.FAILED,
                metadata_source=MetadataSource.AI,
                error_message=f'Malformed AI response: {e.message}',
            )
        except AICallError as e:
            logger.warning(f'⚠️ AI 调用失败，转入重试队列: {filename} - {e.message}')
            if self._retry_queue is not None:
                self._retry_queue.enqueue(
                    AI_RETRY_TASK,
                    {'filename': filename},
                    reason=e.message
                )
            return rule_result.evolve(error_message=f'AI call failed: {e.message}')

        if ai_result is None:
            logger.info(f'⏹️ AI 解析已取消: {filename}')
            return rule_result.evolve(error_message='AI call cancelled')

        if ai_result.audio_codec is None and rule_result.audio_codec:
            ai_result.audio_codec = rule_result.audio_codec
        return ai_result

    def _emit(self, event: str, payload: Dict[str, Any]) -> None:
        if self._progress_sink is not None:
            self._progress_sink.emit(event, payload)

    @staticmethod
    def _summarize(results: List[Optional[ParseResult]]) -> Dict[str, int]:
        summary = {status.value: 0 for status in ParseStatus}
        for result in results:
            if result is not None:
                summary[result.status.value] += 1
        return summary
