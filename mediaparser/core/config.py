"""
Configuration module.

Contains Pydantic-based configuration classes for the MediaParser application.
"""

import json
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings

from mediaparser.core.domain.value_objects import ConfidenceWeights
from mediaparser.core.exceptions import ConfigValidationError


class WeightsConfig(BaseModel):
    """规则解析器各字段的置信度权重"""

    title: float = Field(default=0.30, ge=0.0, le=1.0)
    episode: float = Field(default=0.25, ge=0.0, le=1.0)
    year: float = Field(default=0.15, ge=0.0, le=1.0)
    quality: float = Field(default=0.10, ge=0.0, le=1.0)
    group: float = Field(default=0.10, ge=0.0, le=1.0)
    source: float = Field(default=0.05, ge=0.0, le=1.0)
    codec: float = Field(default=0.05, ge=0.0, le=1.0)

    def to_weights(self) -> ConfidenceWeights:
        return ConfidenceWeights(**self.model_dump())


class ParserConfig(BaseModel):
    """规则解析配置"""

    model_config = ConfigDict(validate_assignment=True)

    # 低于该值时结果标记为 needs_ai
    confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    weights: WeightsConfig = Field(default_factory=WeightsConfig)


class AIConfig(BaseModel):
    """AI 回退解析配置（OpenAI 兼容接口）"""

    enabled: bool = False
    api_key: str = ''
    base_url: str = 'https://api.openai.com/v1'
    model: str = 'gpt-4o-mini'
    extra_body: str = ''  # JSON格式的额外参数
    timeout: int = Field(default=60, ge=10, le=600)  # API 超时时间（秒）
    use_json_schema: bool = True  # 是否发送 response_format


class LearningConfig(BaseModel):
    """模式学习与匹配配置"""

    fuzzy_match_enabled: bool = True
    fuzzy_threshold: float = Field(default=0.85, gt=0.0, le=1.0)
    # 匹配置信度达到该值时才直接采用学习结果
    min_apply_confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class BatchConfig(BaseModel):
    """批量解析配置"""

    max_workers: int = Field(default=4, ge=1, le=32)
    max_batch_size: int = Field(default=500, gt=0, le=5000)


class DatabaseConfig(BaseModel):
    """数据库配置"""

    path: str = 'data/mediaparser.db'


class WebUIConfig(BaseModel):
    """Web UI 配置"""

    host: str = '0.0.0.0'
    port: int = Field(default=8081, ge=1, le=65535)


class AppConfig(BaseSettings):
    """主应用配置"""

    parser: ParserConfig = Field(default_factory=ParserConfig)
    ai: AIConfig = Field(default_factory=AIConfig)
    learning: LearningConfig = Field(default_factory=LearningConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    webui: WebUIConfig = Field(default_factory=WebUIConfig)

    model_config = ConfigDict(
        env_prefix='MEDIAPARSER_',
        env_nested_delimiter='__'
    )

    @model_validator(mode='after')
    def check_ai_settings(self) -> 'AppConfig':
        """启用 AI 时 extra_body 必须是合法 JSON"""
        if self.ai.enabled and self.ai.extra_body.strip():
            try:
                json.loads(self.ai.extra_body)
            except json.JSONDecodeError as e:
                raise ValueError(f'ai.extra_body is not valid JSON: {e}') from e
        return self

    def get(self, key: str, default=None):
        """获取配置值，支持点分隔的嵌套键"""
        value = self
        for k in key.split('.'):
            if not hasattr(value, k):
                return default
            value = getattr(value, k)
        return value

    def set(self, key: str, value) -> bool:
        """设置配置值，支持点分隔的嵌套键"""
        keys = key.split('.')
        obj = self
        for k in keys[:-1]:
            if not hasattr(obj, k):
                return False
            obj = getattr(obj, k)
        if not hasattr(obj, keys[-1]):
            return False
        setattr(obj, keys[-1], value)
        return True

    @property
    def database_path(self) -> str:
        """数据库路径，环境变量 DB_PATH 优先"""
        return os.getenv('DB_PATH') or self.database.path

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> 'AppConfig':
        """
        加载配置。

        配置文件不存在时返回默认配置（环境变量仍然生效），不会写入文件。

        Raises:
            ConfigValidationError: 配置文件内容不合法。
        """
        if config_path is None:
            config_path = os.getenv('CONFIG_PATH', 'config.json')

        try:
            if os.path.exists(config_path):
                with open(config_path, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)
                return cls(**config_data)
            return cls()
        except json.JSONDecodeError as e:
            raise ConfigValidationError(
                f'Config file is not valid JSON: {config_path}',
                context={'error': str(e)}
            ) from e
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            raise ConfigValidationError(
                f'Invalid configuration in {config_path}',
                field_name='.'.join(str(p) for p in first.get('loc', ())),
                field_value=first.get('input'),
            ) from e

    def save(self, config_path: Optional[str] = None):
        """保存配置"""
        if config_path is None:
            config_path = os.getenv('CONFIG_PATH', 'config.json')

        directory = os.path.dirname(config_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write(self.model_dump_json(indent=2))


# 全局配置实例
config = AppConfig.load()
