"""
OpenAI API 客户端模块。

提供 OpenAI 兼容接口 (/chat/completions) 的 HTTP 通信功能。
只负责网络请求，不包含重试和业务逻辑。
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass
class APIResponse:
    """
    API 响应数据类。

    Attributes:
        success: 请求是否成功
        content: 响应内容（成功时）
        error_code: HTTP 错误代码（失败时）
        error_message: 错误消息（失败时）
        response_time_ms: 响应时间（毫秒）
    """
    success: bool
    content: Optional[str] = None
    error_code: Optional[int] = None
    error_message: Optional[str] = None
    response_time_ms: int = 0


class OpenAIClient:
    """
    OpenAI API 客户端。

    Example:
        >>> client = OpenAIClient(timeout=30)
        >>> response = client.call(
        ...     base_url='https://api.openai.com/v1',
        ...     api_key='sk-xxx',
        ...     model='gpt-4o-mini',
        ...     messages=[{'role': 'user', 'content': 'Hello'}]
        ... )
        >>> if response.success:
        ...     print(response.content)
    """

    def __init__(self, timeout: int = 60, session: Optional[requests.Session] = None):
        """
        初始化客户端。

        Args:
            timeout: 请求超时时间（秒）
            session: 可选的 requests.Session（复用连接）
        """
        self._timeout = timeout
        self._http = session or requests.Session()

    @property
    def timeout(self) -> int:
        return self._timeout

    def call(
        self,
        base_url: str,
        api_key: str,
        model: str,
        messages: List[Dict[str, str]],
        response_format: Optional[Dict[str, Any]] = None,
        extra_params: Optional[Dict[str, Any]] = None
    ) -> APIResponse:
        """
        发送 chat completions 请求。

        Args:
            base_url: API 基础 URL（如 https://api.openai.com/v1）
            api_key: API Key
            model: 模型名称
            messages: 消息列表
            response_format: 响应格式设置（如 json_schema）
            extra_params: 额外的请求参数

        Returns:
            APIResponse: 响应数据，网络错误同样以 success=False 返回
        """
        start_time = time.time()

        payload: Dict[str, Any] = {
            'model': model,
            'messages': messages,
            'temperature': 0.1
        }
        if response_format:
            payload['response_format'] = response_format
        if extra_params:
            payload.update(extra_params)

        url = f'{base_url.rstrip("/")}/chat/completions'

        def elapsed() -> int:
            return int((time.time() - start_time) * 1000)

        try:
            response = self._http.post(
                url,
                headers={
                    'Authorization': f'Bearer {api_key}',
                    'Content-Type': 'application/json'
                },
                json=payload,
                timeout=self._timeout
            )
        except requests.Timeout:
            logger.error(f'❌ API 请求超时: {self._timeout}s')
            return APIResponse(
                success=False,
                error_message=f'Request timeout after {self._timeout}s',
                response_time_ms=elapsed()
            )
        except requests.ConnectionError as e:
            logger.error(f'❌ API 连接错误: {e}')
            return APIResponse(
                success=False,
                error_message=f'Connection error: {e}',
                response_time_ms=elapsed()
            )
        except requests.RequestException as e:
            logger.error(f'❌ API 请求异常: {e}')
            return APIResponse(
                success=False,
                error_message=f'Request error: {e}',
                response_time_ms=elapsed()
            )

        if response.status_code != 200:
            error_message = self._extract_error_message(response)
            logger.warning(f'⚠️ API 请求失败: {response.status_code}, {error_message[:100]}')
            return APIResponse(
                success=False,
                error_code=response.status_code,
                error_message=error_message,
                response_time_ms=elapsed()
            )

        try:
            content = response.json()['choices'][0]['message']['content'] or ''
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f'❌ API 响应结构异常: {e}')
            return APIResponse(
                success=False,
                error_code=response.status_code,
                error_message=f'Unexpected response structure: {e}',
                response_time_ms=elapsed()
            )

        logger.debug(f'🤖 API 请求成功: {model}, 响应时间: {elapsed()}ms')
        return APIResponse(success=True, content=content.strip(), response_time_ms=elapsed())

    @staticmethod
    def _extract_error_message(response: requests.Response) -> str:
        """从响应中提取错误消息"""
        try:
            error_data = response.json()
        except ValueError:
            return response.text[:500] if response.text else f'HTTP {response.status_code}'
        error = error_data.get('error') if isinstance(error_data, dict) else None
        if isinstance(error, dict):
            return error.get('message', str(error))
        if error:
            return str(error)
        return response.text[:500]
