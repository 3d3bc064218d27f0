"""
AI 响应 JSON Schema 模块。

定义用于 AI API 调用的响应格式 Schema。
"""

from typing import Any, Dict

ResponseFormat = Dict[str, Any]


def _integer_or_null(description: str) -> Dict[str, Any]:
    """Helper to describe integer fields that may be null."""
    return {
        'description': description,
        'anyOf': [
            {'type': 'integer', 'minimum': 0},
            {'type': 'null'}
        ]
    }


def _string_or_null(description: str) -> Dict[str, Any]:
    """Helper to describe optional string fields."""
    return {
        'description': description,
        'anyOf': [
            {'type': 'string'},
            {'type': 'null'}
        ]
    }


# 文件名解析响应格式
FILENAME_PARSE_RESPONSE_FORMAT: ResponseFormat = {
    'type': 'json_schema',
    'json_schema': {
        'name': 'media_filename_parse_result',
        'strict': True,
        'schema': {
            'type': 'object',
            'additionalProperties': False,
            'required': [
                'title',
                'title_romanized',
                'episode',
                'season',
                'year',
                'quality',
                'source',
                'codec',
                'fansub_group',
                'language',
                'media_type',
                'confidence'
            ],
            'properties': {
                'title': {
                    'type': 'string',
                    'description': 'Cleaned title in its original language'
                },
                'title_romanized': _string_or_null('Romanized title for CJK titles'),
                'episode': _integer_or_null('Episode number, null if unknown'),
                'season': _integer_or_null('Season number, null if unknown'),
                'year': _integer_or_null('Release year, null if unknown'),
                'quality': _string_or_null('Normalized resolution such as 1080p'),
                'source': _string_or_null('Release source such as BluRay or WEB-DL'),
                'codec': _string_or_null('Video codec such as x264 or x265'),
                'fansub_group': _string_or_null('Fansub or release group without brackets'),
                'language': _string_or_null('Subtitle language code such as zh-Hant'),
                'media_type': {
                    'type': 'string',
                    'description': 'tv when an episode or season is present',
                    'enum': ['tv', 'movie']
                },
                'confidence': {
                    'type': 'number',
                    'minimum': 0,
                    'maximum': 1,
                    'description': 'Overall certainty, 1.0 fully certain, 0.0 no signal'
                }
            }
        }
    }
}
