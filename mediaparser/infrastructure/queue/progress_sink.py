"""
Progress sink module.

Default progress-event sink: writes batch progress events to the log.
"""

import logging
from typing import Any, Dict

from mediaparser.core.interfaces.adapters import IProgressSink

logger = logging.getLogger(__name__)


class LoggingProgressSink(IProgressSink):
    """将解析进度事件写入日志"""

    def emit(self, event: str, payload: Dict[str, Any]) -> None:
        if event == 'progress_update':
            logger.debug(
                f'📊 [{payload.get("batch_id")}] 进度 '
                f'{payload.get("completed")}/{payload.get("total")}'
            )
        elif event == 'parse_failed':
            logger.warning(f'⚠️ 解析失败: {payload.get("filename")} - {payload.get("error")}')
        else:
            logger.debug(f'📡 {event}: {payload}')
