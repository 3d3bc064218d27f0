"""
模式学习控制器

学习文件名模式、查询/删除已学习模式、统计与匹配测试
"""
import logging

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request

from mediaparser.container import Container
from mediaparser.interface.web.utils import (
    APIResponse,
    handle_api_errors,
    validate_json,
)
from mediaparser.services.learning.learning_service import (
    LearningService,
    build_learn_target,
)

learning_bp = Blueprint('learning', __name__)
logger = logging.getLogger(__name__)


@learning_bp.route('/api/learning/patterns', methods=['POST'])
@inject
@handle_api_errors
@validate_json('filename', 'metadataId', 'metadataType')
def learn_pattern(
    learning_service: LearningService = Provide[Container.learning_service]
):
    """从已确认的文件名学习模式"""
    data = request.get_json()
    filename = data.get('filename')
    if not isinstance(filename, str):
        return APIResponse.bad_request('filename 必须是字符串')

    target = build_learn_target(
        data.get('metadataType'),
        data.get('metadataId'),
        data.get('tmdbId')
    )
    mapping = learning_service.learn(filename, target)
    return APIResponse.created(data=mapping.to_dict(), message='模式学习成功')


@learning_bp.route('/api/learning/patterns', methods=['GET'])
@inject
@handle_api_errors
def list_patterns(
    learning_service: LearningService = Provide[Container.learning_service]
):
    """列出所有已学习模式（按使用次数排序）"""
    patterns = learning_service.list_patterns()
    stats = learning_service.get_stats()
    return APIResponse.success(data={
        'patterns': [p.to_dict() for p in patterns],
        'totalCount': len(patterns),
        'stats': stats.to_dict(),
    })


@learning_bp.route('/api/learning/stats', methods=['GET'])
@inject
@handle_api_errors
def get_stats(
    learning_service: LearningService = Provide[Container.learning_service]
):
    stats = learning_service.get_stats()
    return APIResponse.success(data=stats.to_dict())


@learning_bp.route('/api/learning/patterns/<pattern_id>', methods=['GET'])
@inject
@handle_api_errors
def get_pattern(
    pattern_id: str,
    learning_service: LearningService = Provide[Container.learning_service]
):
    mapping = learning_service.get_pattern(pattern_id)
    return APIResponse.success(data=mapping.to_dict())


@learning_bp.route('/api/learning/patterns/<pattern_id>', methods=['DELETE'])
@inject
@handle_api_errors
def delete_pattern(
    pattern_id: str,
    learning_service: LearningService = Provide[Container.learning_service]
):
    """删除学习模式，不存在时返回 404"""
    learning_service.delete_pattern(pattern_id)
    logger.info(f'🗑️ 已删除学习模式: {pattern_id}')
    return APIResponse.no_content()


@learning_bp.route('/api/learning/match', methods=['POST'])
@inject
@handle_api_errors
@validate_json('filename')
def match_filename(
    learning_service: LearningService = Provide[Container.learning_service]
):
    """测试文件名是否命中已学习模式"""
    data = request.get_json()
    filename = data.get('filename')
    if not isinstance(filename, str):
        return APIResponse.bad_request('filename 必须是字符串')

    result = learning_service.find_match(filename)
    if result is None:
        return APIResponse.not_found('未匹配到学习模式')
    return APIResponse.success(data=result.to_dict(), message='匹配成功')
