"""
Web控制器装饰器

提供统一的异常处理、验证等装饰器功能
"""
import functools
import logging
from typing import Any, Callable

from flask import request

from mediaparser.core.exceptions import (
    DatabaseError,
    MediaParserError,
    RecordNotFoundError,
    ValidationError,
)

from .api_response import APIResponse

logger = logging.getLogger(__name__)


def handle_api_errors(f: Callable) -> Callable:
    """
    统一处理API异常的装饰器

    自动捕获常见异常并返回标准化的错误响应：
    - ValidationError / ValueError -> 400 参数错误
    - RecordNotFoundError -> 404 资源未找到
    - DatabaseError / 其他应用异常 -> 500
    - Exception -> 500 服务器错误
    """
    @functools.wraps(f)
    def decorated_function(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except ValidationError as e:
            logger.warning(f"⚠️ 参数验证失败 [{request.path}]: {e.message}")
            return APIResponse.bad_request(e.message, error_code=e.code)
        except RecordNotFoundError as e:
            logger.info(f"🔍 资源未找到 [{request.path}]: {e.message}")
            return APIResponse.not_found(e.message)
        except ValueError as e:
            logger.warning(f"⚠️ 参数验证失败 [{request.path}]: {str(e)}")
            return APIResponse.bad_request(f"参数错误: {str(e)}")
        except DatabaseError as e:
            logger.error(f"❌ 数据库错误 [{request.path}]: {e}")
            return APIResponse.internal_error(f"数据库错误: {e.message}")
        except MediaParserError as e:
            logger.error(f"❌ 应用错误 [{request.path}]: {e}")
            return APIResponse.internal_error(e.message)
        except Exception as e:
            logger.error(f"❌ API错误 [{request.path}]: {str(e)}", exc_info=True)
            return APIResponse.internal_error(f"服务器错误: {str(e)}")

    return decorated_function


def validate_json(*required_fields: str) -> Callable:
    """
    验证JSON请求体的装饰器

    检查请求是否为JSON对象，并验证必需字段存在且不为空

    Example:
        >>> @parser_bp.route('/api/parser/parse', methods=['POST'])
        >>> @validate_json('filename')
        >>> def parse():
        >>>     data = request.get_json()
    """
    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def decorated_function(*args: Any, **kwargs: Any) -> Any:
            if not request.is_json:
                logger.warning(f"⚠️ 非JSON请求 [{request.path}]")
                return APIResponse.bad_request("请求必须是JSON格式")

            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                logger.warning(f"⚠️ JSON解析失败 [{request.path}]")
                return APIResponse.bad_request("无法解析JSON数据")

            missing = [field for field in required_fields if not data.get(field)]
            if missing:
                logger.warning(
                    f"⚠️ 缺少必要字段 [{request.path}]: {', '.join(missing)}"
                )
                return APIResponse.bad_request(
                    f"缺少必要字段: {', '.join(missing)}"
                )

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def log_api_call(f: Callable) -> Callable:
    """记录API调用的装饰器"""
    @functools.wraps(f)
    def decorated_function(*args: Any, **kwargs: Any) -> Any:
        logger.debug(f"🚀 API请求: {request.method} {request.path}")
        result = f(*args, **kwargs)
        if isinstance(result, tuple) and len(result) == 2:
            status_code = result[1]
            if 200 <= status_code < 300:
                logger.debug(f"✅ API成功: {request.path} [{status_code}]")
            else:
                logger.warning(f"⚠️ API错误: {request.path} [{status_code}]")
        return result
    return decorated_function
