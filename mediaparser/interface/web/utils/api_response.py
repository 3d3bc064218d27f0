"""
统一的API响应工具类

提供标准化的API响应格式，确保前后端接口一致性
"""
from typing import Any, Tuple

from flask import jsonify


class APIResponse:
    """标准化API响应格式"""

    @staticmethod
    def success(
        data: Any = None,
        message: str = "操作成功",
        **kwargs
    ) -> Tuple[Any, int]:
        """
        成功响应

        Example:
            >>> return APIResponse.success(data=result.to_dict(), message='解析完成')
        """
        response = {
            "success": True,
            "message": message
        }
        if data is not None:
            response["data"] = data
        response.update(kwargs)
        return jsonify(response), 200

    @staticmethod
    def error(
        message: str,
        code: int = 500,
        **kwargs
    ) -> Tuple[Any, int]:
        """
        错误响应

        Args:
            message: 错误消息
            code: HTTP状态码（400=客户端错误, 404=未找到, 500=服务器错误）
        """
        response = {
            "success": False,
            "error": message
        }
        response.update(kwargs)
        return jsonify(response), code

    @staticmethod
    def created(
        data: Any = None,
        message: str = "创建成功",
        **kwargs
    ) -> Tuple[Any, int]:
        """创建成功响应 (HTTP 201)"""
        response = {
            "success": True,
            "message": message
        }
        if data is not None:
            response["data"] = data
        response.update(kwargs)
        return jsonify(response), 201

    @staticmethod
    def no_content() -> Tuple[str, int]:
        """无内容响应 (HTTP 204)，用于删除成功"""
        return '', 204

    @staticmethod
    def bad_request(message: str = "请求参数错误", **kwargs) -> Tuple[Any, int]:
        return APIResponse.error(message, code=400, **kwargs)

    @staticmethod
    def not_found(message: str = "资源不存在", **kwargs) -> Tuple[Any, int]:
        return APIResponse.error(message, code=404, **kwargs)

    @staticmethod
    def internal_error(message: str = "服务器内部错误") -> Tuple[Any, int]:
        return APIResponse.error(message, code=500)
