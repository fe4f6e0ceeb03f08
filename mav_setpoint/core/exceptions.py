"""
自定义异常类

异常层次结构:
=============

SetpointError (基类)
├── ConfigurationError
│   └── ConfigValidationError
├── ComponentError
│   └── InitializationError
└── ChannelError

使用指南:
=========

1. 配置错误 (ConfigurationError)
   - 在启动时抛出，应阻止启动

2. 组件错误 (ComponentError)
   - 输入源接线失败等，阻止分发器进入运行状态

3. 通道错误 (ChannelError)
   - 出站通道打开失败时抛出
   - 发送失败由通道自身记录，不传播到分发器

注意:
=====

- 位姿处理路径上不抛出异常，坏输入只会产生退化的指令
"""


class SetpointError(Exception):
    """设定点错误基类"""
    pass


# =============================================================================
# 配置错误
# =============================================================================

class ConfigurationError(SetpointError):
    """配置错误基类"""
    pass


class ConfigValidationError(ConfigurationError):
    """
    配置验证错误

    Attributes:
        errors: 错误列表，每个元素为 (key_path, error_message)
    """

    def __init__(self, message: str, errors: list = None):
        super().__init__(message)
        self.errors = errors or []


# =============================================================================
# 组件错误
# =============================================================================

class ComponentError(SetpointError):
    """组件错误基类"""
    pass


class InitializationError(ComponentError):
    """组件初始化错误"""
    pass


# =============================================================================
# 通道错误
# =============================================================================

class ChannelError(SetpointError):
    """出站通道错误"""
    pass


__all__ = [
    'SetpointError',
    'ConfigurationError',
    'ConfigValidationError',
    'ComponentError',
    'InitializationError',
    'ChannelError',
]
