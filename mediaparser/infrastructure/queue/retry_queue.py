"""
In-memory retry queue module.

Holds deferred tasks (e.g. AI calls that timed out) for an external worker
to re-run with backoff. The queue only stores tasks; it does not execute them.
"""

import logging
import queue
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from mediaparser.core.interfaces.adapters import IRetryQueue
from mediaparser.core.utils.timezone_utils import format_datetime_iso, get_utc_now

logger = logging.getLogger(__name__)


@dataclass
class DeferredTask:
    """
    Deferred task data class.

    Attributes:
        task_id: Unique identifier for the task.
        task_type: Type identifier, e.g. 'ai_parse'.
        payload: Task data.
        reason: Why the task was deferred.
        enqueued_at: UTC timestamp when the task was enqueued.
    """
    task_type: str
    payload: Dict[str, Any]
    reason: Optional[str] = None
    task_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    enqueued_at: datetime = field(default_factory=get_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'task_id': self.task_id,
            'task_type': self.task_type,
            'payload': self.payload,
            'reason': self.reason,
            'enqueued_at_utc': format_datetime_iso(self.enqueued_at),
        }


class InMemoryRetryQueue(IRetryQueue):
    """线程安全的内存重试队列"""

    def __init__(self, max_size: int = 0):
        self._queue: queue.Queue[DeferredTask] = queue.Queue(maxsize=max_size)
        self._lock = threading.Lock()
        self._total_enqueued = 0

    def enqueue(
        self,
        task_type: str,
        payload: Dict[str, Any],
        reason: Optional[str] = None
    ) -> str:
        task = DeferredTask(task_type=task_type, payload=dict(payload), reason=reason)
        try:
            self._queue.put_nowait(task)
        except queue.Full:
            logger.warning(f'⚠️ 重试队列已满，丢弃任务: {task_type} {payload}')
            return task.task_id
        with self._lock:
            self._total_enqueued += 1
        logger.info(f'📥 [{task.task_id}] 加入重试队列: {task_type} ({reason or "-"})')
        return task.task_id

    def drain(self) -> List[DeferredTask]:
        """取出所有待处理任务"""
        tasks: List[DeferredTask] = []
        while True:
            try:
                tasks.append(self._queue.get_nowait())
            except queue.Empty:
                return tasks

    def size(self) -> int:
        return self._queue.qsize()

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                'pending': self._queue.qsize(),
                'total_enqueued': self._total_enqueued,
            }
