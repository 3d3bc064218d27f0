"""
AI 文件名解析器模块。

规则解析置信度不足时的回退：构建提示词，调用文本补全能力，解析 JSON 响应。
单次调用，不包含重试；失败的调用由上层交给重试队列。
"""

import json
import logging
import time
from typing import Any, Dict, Optional

from mediaparser.core.config import AIConfig
from mediaparser.core.domain.entities import ParseResult
from mediaparser.core.exceptions import AICallError
from mediaparser.core.interfaces.adapters import ITextCompletion

from .api_client import OpenAIClient
from .prompts import build_filename_parse_prompt
from .response_parser import parse_response
from .schemas import FILENAME_PARSE_RESPONSE_FORMAT

logger = logging.getLogger(__name__)


class OpenAITextCompletion(ITextCompletion):
    """
    基于 OpenAI 兼容接口的文本补全能力。

    把 APIResponse 的失败结果转换为 AICallError。
    """

    def __init__(self, ai_config: AIConfig, api_client: Optional[OpenAIClient] = None):
        self._config = ai_config
        self._api_client = api_client or OpenAIClient(timeout=ai_config.timeout)

    @property
    def is_configured(self) -> bool:
        return self._config.enabled and bool(self._config.api_key)

    def complete(self, prompt: str) -> str:
        if not self.is_configured:
            raise AICallError('AI fallback is not configured')

        response = self._api_client.call(
            base_url=self._config.base_url,
            api_key=self._config.api_key,
            model=self._config.model,
            messages=[{'role': 'user', 'content': prompt}],
            response_format=(
                FILENAME_PARSE_RESPONSE_FORMAT if self._config.use_json_schema else None
            ),
            extra_params=self._parse_extra_body(self._config.extra_body)
        )
        if not response.success:
            raise AICallError(
                response.error_message or 'Unknown AI error',
                status_code=response.error_code,
                context={'model': self._config.model,
                         'response_time_ms': response.response_time_ms}
            )
        return response.content or ''

    @staticmethod
    def _parse_extra_body(extra_body: str) -> Optional[Dict[str, Any]]:
        """解析 extra_body JSON 字符串，为空或非法时返回 None"""
        if not extra_body or not extra_body.strip():
            return None
        try:
            parsed = json.loads(extra_body)
        except json.JSONDecodeError as e:
            logger.warning(f'⚠️ extra_body JSON 解析失败: {e}')
            return None
        if isinstance(parsed, dict) and parsed:
            logger.debug(f'🔧 使用 extra_body 参数: {list(parsed.keys())}')
            return parsed
        return None


class AIFilenameParser:
    """
    AI 文件名解析器。

    Example:
        >>> parser = AIFilenameParser(completion)
        >>> result = parser.parse('【幻櫻字幕組】我的英雄學院 第01話 1080P.mp4')
        >>> result.metadata_source.value
        'ai'
    """

    def __init__(self, completion: ITextCompletion):
        self._completion = completion

    @property
    def is_available(self) -> bool:
        return self._completion.is_configured

    @staticmethod
    def build_prompt(filename: str) -> str:
        return build_filename_parse_prompt(filename)

    @staticmethod
    def parse_response(content: str, filename: str) -> ParseResult:
        return parse_response(content, filename)

    def parse(self, filename: str) -> ParseResult:
        """
        调用 AI 解析文件名。

        Raises:
            AICallError: 调用失败（超时、网络、HTTP 错误）
            MalformedAIResponse: 响应不是合法 JSON 或缺少必填字段
        """
        start = time.perf_counter()
        logger.info(f'🤖 AI 解析文件名: {filename[:80]}')

        content = self._completion.complete(self.build_prompt(filename))
        result = self.parse_response(content, filename)
        result.parse_duration_ms = int((time.perf_counter() - start) * 1000)

        logger.info(
            f'✅ AI 解析成功: {result.title} '
            f'(confidence={result.confidence:.2f}, {result.parse_duration_ms}ms)'
        )
        return result
