"""
AI 响应解析模块。

将模型返回的 JSON 文本转换为 ParseResult。
必填字段缺失或不是合法 JSON 时抛出 MalformedAIResponse，不做部分结果容错。
"""

import json
import logging
import math
import re
from typing import Any, Dict, Optional

from mediaparser.core.domain.entities import ParseResult
from mediaparser.core.domain.value_objects import MediaType, MetadataSource, ParseStatus
from mediaparser.core.exceptions import MalformedAIResponse
from mediaparser.services.parser.tokens import (
    normalize_language,
    normalize_quality,
    normalize_source,
    normalize_video_codec,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r'^```[a-zA-Z]*\s*(.*?)\s*```$', re.DOTALL)


def strip_code_fence(content: str) -> str:
    """去掉包裹整个响应的 markdown 代码块"""
    cleaned = content.strip()
    match = _FENCE_RE.match(cleaned)
    if match:
        return match.group(1).strip()
    return cleaned


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        return None
    return number if number >= 0 else None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in ('null', 'none', 'unknown'):
        return None
    return text


def parse_response(content: str, filename: str) -> ParseResult:
    """
    解析 AI 响应。

    Args:
        content: 模型返回的原始文本
        filename: 被解析的原始文件名

    Returns:
        status 为 success、metadata_source 为 ai 的 ParseResult

    Raises:
        MalformedAIResponse: 非 JSON 对象，或缺少 title / media_type / confidence
    """
    if not content or not content.strip():
        raise MalformedAIResponse('Empty AI response', raw_response=content)

    try:
        data = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as e:
        logger.error(f'❌ JSON 解析失败: {e}')
        raise MalformedAIResponse(
            f'AI response is not valid JSON: {e.msg}', raw_response=content
        ) from e

    if not isinstance(data, dict):
        raise MalformedAIResponse(
            'AI response is not a JSON object', raw_response=content
        )

    _require_fields(data, content)

    title = data['title'].strip()
    media_type = MediaType(data['media_type'].strip().lower())
    confidence = max(0.0, min(1.0, float(data['confidence'])))

    season = _optional_int(data.get('season'))
    episode = _optional_int(data.get('episode'))

    return ParseResult(
        original_filename=filename,
        status=ParseStatus.SUCCESS,
        media_type=media_type,
        title=title,
        title_romanized=_optional_str(data.get('title_romanized')),
        year=_optional_int(data.get('year')),
        season=season,
        episode=episode,
        quality=normalize_quality(_optional_str(data.get('quality'))),
        source=normalize_source(_optional_str(data.get('source'))),
        video_codec=normalize_video_codec(_optional_str(data.get('codec'))),
        release_group=_optional_str(data.get('fansub_group')),
        language=normalize_language(_optional_str(data.get('language'))),
        confidence=round(confidence, 4),
        metadata_source=MetadataSource.AI,
    )


def _require_fields(data: Dict[str, Any], raw: str) -> None:
    """校验必填字段 title / media_type / confidence"""
    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        raise MalformedAIResponse(
            'AI response is missing a non-empty "title"', raw_response=raw
        )

    media_type = data.get('media_type')
    if not isinstance(media_type, str) or media_type.strip().lower() not in ('tv', 'movie'):
        raise MalformedAIResponse(
            f'AI response has invalid "media_type": {media_type!r}', raw_response=raw
        )

    confidence = data.get('confidence')
    if (
        isinstance(confidence, bool)
        or not isinstance(confidence, (int, float))
        or math.isnan(confidence)
    ):
        raise MalformedAIResponse(
            f'AI response has invalid "confidence": {confidence!r}', raw_response=raw
        )
