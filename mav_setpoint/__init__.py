"""
位置设定点分发器 (mav_setpoint)

版本: v1.0.0

把外部位姿 (ENU / base_link 约定) 转换为 MAVLink SET_POSITION_TARGET_LOCAL_NED
设定点指令并发往飞控。

特性:
- 两种输入源: 限速采样坐标变换 或 直接订阅位姿消息 (初始化时二选一)
- 惯性系 ENU -> NED，机体系 base_link -> aircraft
- 只控制位置与偏航，固定忽略掩码
- 运行时切换 MAV_FRAME，尽力持久化到参数存储
- 独立运行: 进程内话题/变换缓存 + pymavlink 出站通道

使用示例:
    from mav_setpoint import SetpointDispatcher, load_config
    from mav_setpoint.io import PoseTopic, RecordingCommandChannel

    config = load_config()
    topic = PoseTopic()
    dispatcher = SetpointDispatcher(config, RecordingCommandChannel())
    dispatcher.initialize(pose_feed=topic)
    dispatcher.set_mode(MavFrame.BODY_NED)
"""

__version__ = "1.0.0"

from .dispatcher import SetpointDispatcher, CommandPacker
from .config import DEFAULT_CONFIG, load_config, get_config_value
from .core.enums import MavFrame, InputSourceType
from .core.data_types import (
    PoseSample, SetpointCommand, TransformListenerSource, DirectPoseSource,
    Header, Vector3, Point, Quaternion, Transform, TransformStamped, Pose, PoseStamped,
)
from .core.interfaces import ICommandChannel, ITransformFeed, IPoseFeed, IParamStore
from .core.exceptions import (
    SetpointError, ConfigurationError, ConfigValidationError,
    InitializationError, ChannelError,
)
from .transform.frame_converter import convert

__all__ = [
    '__version__',
    # 分发器
    'SetpointDispatcher', 'CommandPacker', 'convert',
    # 配置
    'DEFAULT_CONFIG', 'load_config', 'get_config_value',
    # 类型
    'MavFrame', 'InputSourceType',
    'PoseSample', 'SetpointCommand', 'TransformListenerSource', 'DirectPoseSource',
    'Header', 'Vector3', 'Point', 'Quaternion', 'Transform', 'TransformStamped',
    'Pose', 'PoseStamped',
    # 接口
    'ICommandChannel', 'ITransformFeed', 'IPoseFeed', 'IParamStore',
    # 异常
    'SetpointError', 'ConfigurationError', 'ConfigValidationError',
    'InitializationError', 'ChannelError',
]
