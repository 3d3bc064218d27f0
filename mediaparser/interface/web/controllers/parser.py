"""
文件名解析控制器

提供单个与批量文件名解析接口
"""
import logging

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request

from mediaparser.container import Container
from mediaparser.interface.web.utils import (
    APIResponse,
    handle_api_errors,
    log_api_call,
    validate_json,
)
from mediaparser.services.parser_service import ParserService

parser_bp = Blueprint('parser', __name__)
logger = logging.getLogger(__name__)


@parser_bp.route('/api/parser/parse', methods=['POST'])
@inject
@handle_api_errors
@log_api_call
@validate_json('filename')
def parse_filename(
    parser_service: ParserService = Provide[Container.parser_service]
):
    """解析单个文件名"""
    data = request.get_json()
    filename = data.get('filename')
    if not isinstance(filename, str) or not filename.strip():
        return APIResponse.bad_request('filename 必须是非空字符串')

    result = parser_service.parse(filename)
    return APIResponse.success(data=result.to_dict(), message='解析完成')


@parser_bp.route('/api/parser/parse-batch', methods=['POST'])
@inject
@handle_api_errors
@log_api_call
@validate_json('filenames')
def parse_batch(
    parser_service: ParserService = Provide[Container.parser_service]
):
    """
    批量解析文件名

    结果顺序与请求顺序一致；单项失败以 status=failed 返回，不影响其他项。
    """
    data = request.get_json()
    filenames = data.get('filenames')
    if not isinstance(filenames, list):
        return APIResponse.bad_request('filenames 必须是数组')
    if not all(isinstance(name, str) for name in filenames):
        return APIResponse.bad_request('filenames 只能包含字符串')

    results = parser_service.parse_batch(filenames)
    return APIResponse.success(
        data=[result.to_dict() for result in results],
        message=f'已解析 {len(results)} 个文件'
    )
