"""
Flask 应用工厂

创建和配置 Flask 应用实例
"""
from datetime import UTC, datetime
from enum import Enum

from flask import Flask
from flask.json.provider import DefaultJSONProvider

from mediaparser.container import Container
from mediaparser.interface.web.controllers.learning import learning_bp
from mediaparser.interface.web.controllers.parser import parser_bp


class CustomJSONProvider(DefaultJSONProvider):
    """自定义JSON序列化器，datetime 以 UTC ISO 格式返回，枚举返回其值"""

    def default(self, obj):
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                obj = obj.replace(tzinfo=UTC)
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def create_app(container: Container) -> Flask:
    """
    创建 Flask 应用

    Args:
        container: 依赖注入容器

    Returns:
        配置完成的 Flask 应用实例
    """
    app = Flask(__name__)
    app.json = CustomJSONProvider(app)
    app.json.ensure_ascii = False

    app.container = container

    app.register_blueprint(parser_bp)
    app.register_blueprint(learning_bp)

    container.wire(modules=[
        "mediaparser.interface.web.controllers.learning",
        "mediaparser.interface.web.controllers.parser",
    ])

    @app.route('/health')
    def health():
        return {'status': 'ok'}

    return app
