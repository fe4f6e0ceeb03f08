"""配置模块

提供统一的配置接口，支持：
- 默认配置 (DEFAULT_CONFIG)
- YAML 文件加载 (load_config)
- 配置验证 (validate_config)
- 参数存储 (坐标系持久化)

使用示例:
    from mav_setpoint.config import load_config

    config = load_config('setpoint.yaml', overrides={'input_source': 'listener'})
"""
from .default_config import (
    DEFAULT_CONFIG,
    CONFIG_VALIDATION_RULES,
    validate_config,
    get_config_value,
    ConfigValidationError,
)
from .validation import ValidationSeverity, validate_logical_consistency
from .loader import load_config, deep_merge, read_yaml
from .param_store import DictParamStore, YamlParamStore, create_param_store

__all__ = [
    'DEFAULT_CONFIG',
    'CONFIG_VALIDATION_RULES',
    'validate_config',
    'get_config_value',
    'ConfigValidationError',
    'ValidationSeverity',
    'validate_logical_consistency',
    'load_config',
    'deep_merge',
    'read_yaml',
    'DictParamStore',
    'YamlParamStore',
    'create_param_store',
]
