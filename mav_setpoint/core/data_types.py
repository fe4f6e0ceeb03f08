"""
数据类型定义

坐标系说明:
===========

输入 (外部约定):
   - 惯性系: ENU (x=东, y=北, z=上)
   - 机体系: base_link (x=前, y=左, z=上)

输出 (MAVLink SET_POSITION_TARGET_LOCAL_NED):
   - 惯性系: NED (x=北, y=东, z=下)
   - 机体系: aircraft (x=前, y=右, z=下)

数据流:
   TransformStamped / PoseStamped → PoseSample → 帧转换 → SetpointCommand

四元数统一按 (x, y, z, w) 顺序存储。
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Union
import numpy as np

from .constants import (
    IGNORE_ALL_EXCEPT_XYZ_Y, DEFAULT_SOURCE_FRAME, DEFAULT_TARGET_FRAME,
    DEFAULT_RATE_CEILING_HZ, DEFAULT_POSE_TOPIC, UINT64_MAX,
)
from .enums import MavFrame, InputSourceType
from .exceptions import ConfigurationError


# =============================================================================
# geometry_msgs 兼容类型
# =============================================================================

@dataclass
class Header:
    """消息头"""
    stamp: float = 0.0  # 时间戳 (秒)
    frame_id: str = ""
    seq: int = 0


@dataclass
class Vector3:
    """3D 向量 (兼容 geometry_msgs/Vector3)"""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


# geometry_msgs/Point 与 Vector3 字段相同
Point = Vector3


@dataclass
class Quaternion:
    """四元数 (兼容 geometry_msgs/Quaternion)"""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    def to_array(self) -> np.ndarray:
        """(x, y, z, w)"""
        return np.array([self.x, self.y, self.z, self.w], dtype=float)

    @classmethod
    def from_array(cls, q) -> 'Quaternion':
        return cls(float(q[0]), float(q[1]), float(q[2]), float(q[3]))


@dataclass
class Transform:
    """变换 (兼容 geometry_msgs/Transform)"""
    translation: Vector3 = field(default_factory=Vector3)
    rotation: Quaternion = field(default_factory=Quaternion)


@dataclass
class TransformStamped:
    """带时间戳的变换 (兼容 geometry_msgs/TransformStamped)"""
    header: Header = field(default_factory=Header)
    child_frame_id: str = ""
    transform: Transform = field(default_factory=Transform)


@dataclass
class Pose:
    """位姿 (兼容 geometry_msgs/Pose)"""
    position: Point = field(default_factory=Point)
    orientation: Quaternion = field(default_factory=Quaternion)


@dataclass
class PoseStamped:
    """带时间戳的位姿 (兼容 geometry_msgs/PoseStamped)"""
    header: Header = field(default_factory=Header)
    pose: Pose = field(default_factory=Pose)


# =============================================================================
# 分发器内部类型
# =============================================================================

@dataclass(frozen=True, eq=False)
class PoseSample:
    """
    单次分发周期的原始位姿

    Attributes:
        stamp: 时间戳 (秒)
        translation: 平移 [x, y, z]，外部约定 (ENU 或 base_link)
        rotation: 姿态四元数，外部约定
    """
    stamp: float
    translation: np.ndarray
    rotation: Quaternion

    def __post_init__(self):
        translation = np.array(self.translation, dtype=float).reshape(3)
        translation.setflags(write=False)
        object.__setattr__(self, 'translation', translation)

    @classmethod
    def from_transform(cls, msg: TransformStamped) -> 'PoseSample':
        tr = msg.transform
        return cls(stamp=msg.header.stamp,
                   translation=tr.translation.to_array(),
                   rotation=Quaternion(tr.rotation.x, tr.rotation.y,
                                       tr.rotation.z, tr.rotation.w))

    @classmethod
    def from_pose(cls, msg: PoseStamped) -> 'PoseSample':
        pose = msg.pose
        return cls(stamp=msg.header.stamp,
                   translation=pose.position.to_array(),
                   rotation=Quaternion(pose.orientation.x, pose.orientation.y,
                                       pose.orientation.z, pose.orientation.w))


def _zero_vector() -> np.ndarray:
    return np.zeros(3)


@dataclass(frozen=True, eq=False)
class SetpointCommand:
    """
    SET_POSITION_TARGET_LOCAL_NED 指令

    只有 position 与 yaw 有效，其余字段恒为 0 且被 type_mask 忽略。

    Attributes:
        time_boot_ms: 时间戳 (毫秒, uint64)
        coordinate_frame: 目标 MAVLink 坐标系
        type_mask: 忽略掩码 (uint16)，置位字段由接收端忽略
        position: 位置 [x, y, z] (m)，已转换到目标坐标系
        velocity: 速度 (恒为 0)
        acceleration: 加速度 (恒为 0)
        yaw: 偏航角 (rad)
        yaw_rate: 偏航角速度 (恒为 0)
    """
    time_boot_ms: int
    coordinate_frame: MavFrame
    position: np.ndarray
    yaw: float
    type_mask: int = IGNORE_ALL_EXCEPT_XYZ_Y
    velocity: np.ndarray = field(default_factory=_zero_vector)
    acceleration: np.ndarray = field(default_factory=_zero_vector)
    yaw_rate: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'time_boot_ms', int(self.time_boot_ms) & UINT64_MAX)
        object.__setattr__(self, 'position', np.array(self.position, dtype=float).reshape(3))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'time_boot_ms': self.time_boot_ms,
            'coordinate_frame': self.coordinate_frame.to_string(),
            'type_mask': self.type_mask,
            'position': self.position.tolist(),
            'velocity': self.velocity.tolist(),
            'acceleration': self.acceleration.tolist(),
            'yaw': float(self.yaw),
            'yaw_rate': float(self.yaw_rate),
        }


# =============================================================================
# 输入源选择 (初始化时确定，运行时不可切换)
# =============================================================================

@dataclass(frozen=True)
class TransformListenerSource:
    """周期采样 source_frame -> target_frame 坐标变换"""
    source_frame: str = DEFAULT_SOURCE_FRAME
    target_frame: str = DEFAULT_TARGET_FRAME
    rate_ceiling_hz: float = DEFAULT_RATE_CEILING_HZ
    kind: InputSourceType = field(default=InputSourceType.LISTENER, init=False)


@dataclass(frozen=True)
class DirectPoseSource:
    """直接订阅外部发布的位姿消息"""
    topic: str = DEFAULT_POSE_TOPIC
    kind: InputSourceType = field(default=InputSourceType.DIRECT, init=False)


InputSourceSelection = Union[TransformListenerSource, DirectPoseSource]


def _value_or(section: Dict[str, Any], key: str, default: Any) -> Any:
    """取配置值，缺失或为 None 时返回默认值"""
    value = section.get(key)
    return default if value is None else value


def input_source_from_config(config: Dict[str, Any]) -> InputSourceSelection:
    """
    从配置构造输入源选择

    Args:
        config: 完整配置字典，读取 input_source / listener.* / direct.*

    Raises:
        ConfigurationError: input_source 不是 listener 或 direct
    """
    raw = _value_or(config, 'input_source', InputSourceType.DIRECT.value)
    try:
        kind = InputSourceType(str(raw).strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"input_source 必须是 'listener' 或 'direct'，实际为 {raw!r}") from None

    if kind is InputSourceType.LISTENER:
        listener = config.get('listener') or {}
        return TransformListenerSource(
            source_frame=_value_or(listener, 'source_frame', DEFAULT_SOURCE_FRAME),
            target_frame=_value_or(listener, 'target_frame', DEFAULT_TARGET_FRAME),
            rate_ceiling_hz=float(_value_or(listener, 'rate_ceiling_hz', DEFAULT_RATE_CEILING_HZ)),
        )
    direct = config.get('direct') or {}
    return DirectPoseSource(topic=_value_or(direct, 'topic', DEFAULT_POSE_TOPIC))
