"""枚举定义"""
from enum import Enum, IntEnum
from typing import Optional


class MavFrame(IntEnum):
    """
    MAVLink 坐标系枚举 (与 MAV_FRAME 数值一致)

    未知数值不会被拒绝: MavFrame(99) 返回名为 UNKNOWN_99 的伪成员，
    其整数值保持不变，转换时按惯性系处理。
    """
    GLOBAL = 0
    LOCAL_NED = 1
    MISSION = 2
    GLOBAL_RELATIVE_ALT = 3
    LOCAL_ENU = 4
    GLOBAL_INT = 5
    GLOBAL_RELATIVE_ALT_INT = 6
    LOCAL_OFFSET_NED = 7
    BODY_NED = 8
    BODY_OFFSET_NED = 9
    GLOBAL_TERRAIN_ALT = 10
    GLOBAL_TERRAIN_ALT_INT = 11
    BODY_FRD = 12
    LOCAL_FRD = 20
    LOCAL_FLU = 21

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, int) or isinstance(value, bool):
            return None
        # 伪成员不进入 _value2member_map_，每次调用都重新构造
        member = int.__new__(cls, value)
        member._name_ = f'UNKNOWN_{value}'
        member._value_ = value
        return member

    @classmethod
    def from_code(cls, code: int) -> 'MavFrame':
        """数值 -> MavFrame，不做范围校验"""
        return cls(int(code))

    @classmethod
    def parse(cls, text) -> Optional['MavFrame']:
        """
        字符串 -> MavFrame，无法识别时返回 None

        接受成员名 (大小写不敏感，可带 MAV_FRAME_ 前缀) 或十进制数值。
        """
        if text is None:
            return None
        name = str(text).strip().upper()
        if name.startswith('MAV_FRAME_'):
            name = name[len('MAV_FRAME_'):]
        if name in cls.__members__:
            return cls.__members__[name]
        try:
            return cls.from_code(int(name))
        except ValueError:
            return None

    @classmethod
    def from_string(cls, text, default: 'MavFrame' = None) -> 'MavFrame':
        """字符串 -> MavFrame，无法识别时返回 default (默认 LOCAL_NED)"""
        frame = cls.parse(text)
        if frame is None:
            return cls.LOCAL_NED if default is None else default
        return frame

    @property
    def is_known(self) -> bool:
        return self._name_ in type(self).__members__

    def to_string(self) -> str:
        """持久化用的字符串表示；未知数值写为十进制"""
        if self.is_known:
            return self._name_
        return str(int(self))


class InputSourceType(Enum):
    """位姿输入源类型"""
    LISTENER = 'listener'   # 周期采样坐标变换
    DIRECT = 'direct'       # 直接订阅位姿消息
