"""
指令打包器

把转换后的位置与偏航角打包为 SET_POSITION_TARGET_LOCAL_NED 指令。
忽略掩码固定为 IGNORE_ALL_EXCEPT_XYZ_Y，速度、加速度、偏航角速度恒为 0。
"""
import numpy as np

from ..core.constants import IGNORE_ALL_EXCEPT_XYZ_Y
from ..core.data_types import SetpointCommand
from ..core.enums import MavFrame


def stamp_to_ms(stamp: float) -> int:
    """秒 -> 毫秒 (先取整到纳秒再整除，避免 1.001 * 1000 这类浮点截断误差)"""
    nsec = int(round(float(stamp) * 1e9))
    return max(nsec, 0) // 1000000


class CommandPacker:
    """设定点指令打包器"""

    type_mask = IGNORE_ALL_EXCEPT_XYZ_Y

    def pack(self, stamp: float, frame: MavFrame, position, yaw: float) -> SetpointCommand:
        """
        Args:
            stamp: 位姿时间戳 (秒)
            frame: 目标坐标系
            position: 目标坐标系下的位置 [x, y, z]
            yaw: 偏航角 (rad)
        """
        return SetpointCommand(
            time_boot_ms=stamp_to_ms(stamp),
            coordinate_frame=frame,
            position=np.asarray(position, dtype=float),
            yaw=float(yaw),
            type_mask=self.type_mask,
            velocity=np.zeros(3),
            acceleration=np.zeros(3),
            yaw_rate=0.0,
        )
