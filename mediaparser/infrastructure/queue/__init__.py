"""
Queue infrastructure module.

In-process retry queue and progress sink collaborators.
"""

from mediaparser.infrastructure.queue.progress_sink import LoggingProgressSink
from mediaparser.infrastructure.queue.retry_queue import DeferredTask, InMemoryRetryQueue

__all__ = [
    'DeferredTask',
    'InMemoryRetryQueue',
    'LoggingProgressSink',
]
