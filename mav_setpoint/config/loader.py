"""
配置加载器

以 DEFAULT_CONFIG 为模板:
1. 深拷贝 DEFAULT_CONFIG 作为基础配置
2. 读取 YAML 文件 (可选)，递归覆盖对应键
3. 应用点分隔路径的覆盖项 (命令行等)
4. 验证配置

未知键保留并记录警告，便于发现拼写错误。
"""
import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml

from ..core.exceptions import ConfigurationError
from .default_config import DEFAULT_CONFIG, validate_config

logger = logging.getLogger(__name__)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any], path: str = '') -> Dict[str, Any]:
    """
    把 override 递归合并到 base (原地修改并返回 base)

    override 中值为 None 的已知键保留 base 的默认值 (YAML 中留空的键)。
    """
    for key, value in override.items():
        key_path = f'{path}.{key}' if path else str(key)
        if value is None and key in base:
            continue
        if key not in base:
            logger.warning(f"Unknown config key '{key_path}'")
            base[key] = copy.deepcopy(value)
        elif isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value, key_path)
        else:
            base[key] = copy.deepcopy(value)
    return base


def set_by_path(config: Dict[str, Any], key_path: str, value: Any) -> None:
    """按点分隔路径设置值，中间层不存在时创建"""
    keys = key_path.split('.')
    node = config
    for key in keys[:-1]:
        node = node.setdefault(key, {})
    node[keys[-1]] = value


def read_yaml(path: str) -> Dict[str, Any]:
    """
    读取 YAML 配置文件

    Raises:
        ConfigurationError: 文件不存在、无法解析或顶层不是映射
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_config(path: Optional[str] = None,
                overrides: Optional[Dict[str, Any]] = None,
                validate: bool = True) -> Dict[str, Any]:
    """
    加载配置

    Args:
        path: YAML 配置文件路径，None 表示只使用默认配置
        overrides: {'listener.rate_ceiling_hz': 20.0, ...}
        validate: 是否验证

    Raises:
        ConfigurationError: 文件错误
        ConfigValidationError: 验证失败
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is not None:
        deep_merge(config, read_yaml(path))
        logger.info(f"Loaded config from {path}")
    for key_path, value in (overrides or {}).items():
        set_by_path(config, key_path, value)
    if validate:
        validate_config(config)
    return config
