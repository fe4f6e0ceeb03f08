"""
接口定义

外部协作方 (传输层、位姿/变换生产者、参数服务器) 只通过这些窄接口接入，
每个接口在 io/ 与 config/ 中至少有一个进程内实现。
"""
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Callable, Dict, Optional

from .data_types import PoseStamped, SetpointCommand, TransformStamped


class LifecycleState(Enum):
    """
    生命周期状态枚举

    - UNINITIALIZED: 组件已创建但未初始化
    - RUNNING: 组件正在运行
    - SHUTDOWN: 组件已关闭，资源已释放
    """
    UNINITIALIZED = auto()
    RUNNING = auto()
    SHUTDOWN = auto()


class ILifecycleComponent(ABC):
    """
    统一生命周期组件接口

    核心方法 (必须实现):
    - reset(): 重置内部状态，保留资源

    可选方法 (有默认实现):
    - shutdown(): 释放所有资源，对象不应再使用
    - get_health_status(): 获取组件健康状态
    """

    @abstractmethod
    def reset(self) -> None:
        """重置组件内部状态，应是幂等的"""
        pass

    def shutdown(self) -> None:
        """关闭组件并释放资源，应是幂等的，不应抛出异常"""
        pass

    def get_health_status(self) -> Optional[Dict[str, Any]]:
        """
        获取组件健康状态

        Returns:
            健康状态字典 (至少包含 'healthy', 'state', 'message')，
            或 None 表示不支持
        """
        return None


class ICommandChannel(ABC):
    """出站指令通道 (发往飞控链路)"""

    @abstractmethod
    def send(self, cmd: SetpointCommand) -> None:
        """
        发送一条设定点指令

        发送即忘: 失败由通道自身处理和记录，不应向调用方抛出。
        """
        pass

    def close(self) -> None:
        pass


class ITransformFeed(ABC):
    """坐标变换更新源"""

    @abstractmethod
    def subscribe_transform(self, source_frame: str, target_frame: str,
                            callback: Callable[[TransformStamped], None]) -> Any:
        """
        订阅 source_frame -> target_frame 的变换更新

        Returns:
            订阅句柄，用于 unsubscribe
        """
        pass

    @abstractmethod
    def unsubscribe(self, handle: Any) -> None:
        pass


class IPoseFeed(ABC):
    """位姿消息源"""

    @abstractmethod
    def subscribe_pose(self, topic: str,
                       callback: Callable[[PoseStamped], None]) -> Any:
        """订阅位姿话题，返回订阅句柄"""
        pass

    @abstractmethod
    def unsubscribe(self, handle: Any) -> None:
        pass


class IParamStore(ABC):
    """参数存储 (模式持久化)"""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """写入参数；失败时抛出异常，由调用方决定是否忽略"""
        pass
