"""默认配置

本模块合并所有配置子模块，提供统一的配置接口。

配置结构:
- setpoint_config.py: 输入源、监听参数、初始坐标系
- system_config.py: MAVLink 连接、日志、参数存储
- validation.py: 配置验证

使用示例:
    from mav_setpoint.config import DEFAULT_CONFIG
    import copy

    config = copy.deepcopy(DEFAULT_CONFIG)
    config['input_source'] = 'listener'
"""
from typing import Any, Dict

from .setpoint_config import (
    INPUT_SOURCE,
    LISTENER_CONFIG,
    DIRECT_CONFIG,
    INITIAL_FRAME_MODE,
    SETPOINT_VALIDATION_RULES,
)
from .system_config import (
    MAVLINK_CONFIG,
    LOGGING_CONFIG,
    PARAM_STORE_CONFIG,
    SYSTEM_VALIDATION_RULES,
)
from .validation import (
    ConfigValidationError,
    get_config_value,
    validate_full_config,
)


# =============================================================================
# 合并所有配置
# =============================================================================
DEFAULT_CONFIG: Dict[str, Any] = {
    'input_source': INPUT_SOURCE,
    'listener': LISTENER_CONFIG.copy(),
    'direct': DIRECT_CONFIG.copy(),
    'initial_frame_mode': INITIAL_FRAME_MODE,
    'mavlink': MAVLINK_CONFIG.copy(),
    'logging': LOGGING_CONFIG.copy(),
    'param_store': PARAM_STORE_CONFIG.copy(),
}


# =============================================================================
# 合并所有验证规则
# =============================================================================
CONFIG_VALIDATION_RULES: Dict[str, tuple] = {}
CONFIG_VALIDATION_RULES.update(SETPOINT_VALIDATION_RULES)
CONFIG_VALIDATION_RULES.update(SYSTEM_VALIDATION_RULES)


def validate_config(config: Dict[str, Any], raise_on_error: bool = True) -> list:
    """
    验证完整配置

    Returns:
        错误列表，每个元素为 (key_path, error_message, severity)

    Raises:
        ConfigValidationError: 当 raise_on_error=True 且发现 FATAL/ERROR 级别错误时
    """
    return validate_full_config(config, CONFIG_VALIDATION_RULES, raise_on_error)


__all__ = [
    'DEFAULT_CONFIG',
    'CONFIG_VALIDATION_RULES',
    'validate_config',
    'get_config_value',
    'ConfigValidationError',
    'LISTENER_CONFIG',
    'DIRECT_CONFIG',
    'MAVLINK_CONFIG',
    'LOGGING_CONFIG',
    'PARAM_STORE_CONFIG',
]
