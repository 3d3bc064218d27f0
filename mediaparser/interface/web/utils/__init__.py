"""
Web工具模块
"""
from .api_response import APIResponse
from .decorators import handle_api_errors, log_api_call, validate_json

__all__ = [
    'APIResponse',
    'handle_api_errors',
    'log_api_call',
    'validate_json',
]
