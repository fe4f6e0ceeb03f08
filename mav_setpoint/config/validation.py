"""配置验证模块

提供配置参数的验证功能：
- 范围检查
- 类型检查
- 逻辑一致性检查
- 错误严重级别分类

错误严重级别:
- FATAL: 致命错误，必须阻止启动（如 input_source 无法识别）
- ERROR: 严重错误，默认阻止启动
- WARNING: 警告，记录但不阻止启动
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.enums import InputSourceType, MavFrame
from ..core.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """验证错误严重级别"""
    FATAL = 'fatal'
    ERROR = 'error'
    WARNING = 'warning'


def get_config_value(
    config: Dict[str, Any],
    key_path: str,
    default: Any = None,
    fallback_config: Optional[Dict[str, Any]] = None
) -> Any:
    """
    从配置字典中获取值，支持点分隔的路径

    Args:
        config: 配置字典
        key_path: 点分隔的键路径，如 'listener.rate_ceiling_hz'
        default: 默认值
        fallback_config: 备选配置字典，当 config 中找不到时从此获取

    Example:
        >>> get_config_value({'listener': {'rate_ceiling_hz': 50.0}}, 'listener.rate_ceiling_hz')
        50.0
    """
    keys = key_path.split('.')
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            if fallback_config is not None:
                return get_config_value(fallback_config, key_path, default, None)
            return default
    return value


def _is_numeric(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(
    config: Dict[str, Any],
    validation_rules: Dict[str, Tuple],
    raise_on_error: bool = True
) -> List[Tuple[str, str]]:
    """
    范围与类型检查

    Args:
        config: 配置字典
        validation_rules: {key_path: (min, max, description)}
        raise_on_error: 是否在发现错误时抛出异常

    Returns:
        错误列表，每个元素为 (key_path, error_message)

    Raises:
        ConfigValidationError: 当 raise_on_error=True 且发现错误时
    """
    errors = []

    for key_path, (min_val, max_val, description) in validation_rules.items():
        value = get_config_value(config, key_path)

        if value is None:
            continue  # 使用默认值，跳过验证

        if not _is_numeric(value):
            errors.append((key_path, f'{description} 类型错误，期望数值，实际为 {type(value).__name__}'))
            continue

        if min_val is not None and value < min_val:
            errors.append((key_path, f'{description} 值 {value} 小于最小值 {min_val}'))
        elif max_val is not None and value > max_val:
            errors.append((key_path, f'{description} 值 {value} 大于最大值 {max_val}'))

    if errors and raise_on_error:
        error_messages = '\n'.join([f'  - {key}: {msg}' for key, msg in errors])
        raise ConfigValidationError(f'配置验证失败:\n{error_messages}', errors)

    return errors


def validate_logical_consistency(config: Dict[str, Any]) -> List[Tuple[str, str, ValidationSeverity]]:
    """
    验证配置的逻辑一致性

    Returns:
        错误列表，每个元素为 (key_path, error_message, severity)
    """
    errors = []

    def add_error(key: str, msg: str, severity: ValidationSeverity = ValidationSeverity.ERROR):
        errors.append((key, msg, severity))

    # ==========================================================================
    # 致命错误 (FATAL 级别)
    # ==========================================================================

    input_source = get_config_value(config, 'input_source')
    valid_sources = [s.value for s in InputSourceType]
    if str(input_source).strip().lower() not in valid_sources:
        add_error('input_source',
                  f"输入源 ({input_source!r}) 必须是 {valid_sources} 之一",
                  ValidationSeverity.FATAL)
        source_type = None
    else:
        source_type = InputSourceType(str(input_source).strip().lower())

    rate = get_config_value(config, 'listener.rate_ceiling_hz')
    if source_type is InputSourceType.LISTENER and _is_numeric(rate) and rate <= 0:
        add_error('listener.rate_ceiling_hz',
                  f'采样频率上限 ({rate}) 必须大于 0',
                  ValidationSeverity.FATAL)

    # ==========================================================================
    # 严重错误 (ERROR 级别)
    # ==========================================================================

    if source_type is InputSourceType.LISTENER:
        source_frame = get_config_value(config, 'listener.source_frame')
        target_frame = get_config_value(config, 'listener.target_frame')
        if not source_frame:
            add_error('listener.source_frame', '父坐标系不能为空')
        if not target_frame:
            add_error('listener.target_frame', '子坐标系不能为空')
        if source_frame and source_frame == target_frame:
            add_error('listener.target_frame',
                      f'父子坐标系相同 ({source_frame})，变换恒为单位变换')

    if source_type is InputSourceType.DIRECT:
        topic = get_config_value(config, 'direct.topic')
        if not topic:
            add_error('direct.topic', '位姿话题不能为空')

    # ==========================================================================
    # 警告 (WARNING 级别)
    # ==========================================================================

    initial_mode = get_config_value(config, 'initial_frame_mode')
    if initial_mode is not None:
        parsed = MavFrame.parse(initial_mode)
        if parsed is None:
            add_error('initial_frame_mode',
                      f"无法识别的坐标系 ({initial_mode!r})，将使用 LOCAL_NED",
                      ValidationSeverity.WARNING)
        elif not parsed.is_known:
            add_error('initial_frame_mode',
                      f"未知的坐标系代码 ({initial_mode!r})，将按惯性系转换",
                      ValidationSeverity.WARNING)

    level = get_config_value(config, 'logging.level')
    if level is not None and not isinstance(level, int):
        if not isinstance(logging.getLevelName(str(level).upper()), int):
            add_error('logging.level',
                      f"无法识别的日志级别 ({level!r})，将使用 INFO",
                      ValidationSeverity.WARNING)

    return errors


def validate_full_config(
    config: Dict[str, Any],
    validation_rules: Dict[str, Tuple],
    raise_on_error: bool = True
) -> List[Tuple[str, str, ValidationSeverity]]:
    """
    完整配置验证（范围检查 + 逻辑一致性检查）

    Raises:
        ConfigValidationError: 当 raise_on_error=True 且发现 FATAL/ERROR 级别错误时
    """
    range_errors = validate_config(config, validation_rules, raise_on_error=False)
    errors = [(key, msg, ValidationSeverity.ERROR) for key, msg in range_errors]
    errors.extend(validate_logical_consistency(config))

    fatal_errors = [(k, m, s) for k, m, s in errors if s == ValidationSeverity.FATAL]
    error_errors = [(k, m, s) for k, m, s in errors if s == ValidationSeverity.ERROR]
    warning_errors = [(k, m, s) for k, m, s in errors if s == ValidationSeverity.WARNING]

    for key, msg, _ in warning_errors:
        logger.warning(f"配置警告 [{key}]: {msg}")

    if raise_on_error:
        if fatal_errors:
            fatal_msgs = '\n'.join([f'  - [FATAL] {key}: {msg}' for key, msg, _ in fatal_errors])
            raise ConfigValidationError(f'配置存在致命错误，无法启动:\n{fatal_msgs}',
                                        [(k, m) for k, m, _ in fatal_errors])
        if error_errors:
            error_msgs = '\n'.join([f'  - [ERROR] {key}: {msg}' for key, msg, _ in error_errors])
            raise ConfigValidationError(f'配置验证失败:\n{error_msgs}',
                                        [(k, m) for k, m, _ in error_errors])

    return errors
