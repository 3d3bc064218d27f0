"""
AI 服务模块。

提供 OpenAI 兼容接口集成功能，包括：
- API 客户端（HTTP 通信）
- 文件名解析提示词与响应格式
- 响应解析器（严格 JSON 校验）
- AI 文件名解析器（规则解析的回退）
"""

from mediaparser.infrastructure.ai.api_client import APIResponse, OpenAIClient
from mediaparser.infrastructure.ai.filename_parser import AIFilenameParser, OpenAITextCompletion
from mediaparser.infrastructure.ai.prompts import build_filename_parse_prompt
from mediaparser.infrastructure.ai.response_parser import parse_response

__all__ = [
    'OpenAIClient',
    'APIResponse',
    'OpenAITextCompletion',
    'AIFilenameParser',
    'build_filename_parse_prompt',
    'parse_response',
]
