"""
帧转换器

把外部约定的位姿转换为 SET_POSITION_TARGET_LOCAL_NED 所需的位置与偏航角。

规则:
- 机体系 (BODY_NED / BODY_OFFSET_NED):
    位置 = base_link -> aircraft 轴重标，不做惯性到机体的旋转
    姿态 = base_link -> aircraft，偏航角取自重标后的四元数
- 其他所有坐标系 (含未知代码) 按惯性系处理:
    位置 = ENU -> NED
    姿态 = 先 base_link -> aircraft，再 ENU -> NED，偏航角取自最终四元数

纯函数，无副作用，不校验四元数。
"""
from typing import Tuple

import numpy as np

from ..core.data_types import PoseSample
from ..core.enums import MavFrame
from .frame_conversions import (
    transform_frame_baselink_aircraft,
    transform_frame_enu_ned,
    transform_orientation_baselink_aircraft,
    transform_orientation_enu_ned,
    quaternion_get_yaw,
)


def is_body_frame(mode: MavFrame) -> bool:
    return mode in (MavFrame.BODY_NED, MavFrame.BODY_OFFSET_NED)


def convert_position(translation, mode: MavFrame) -> np.ndarray:
    if is_body_frame(mode):
        return transform_frame_baselink_aircraft(translation)
    return transform_frame_enu_ned(translation)


def convert_orientation(q, mode: MavFrame) -> np.ndarray:
    q_aircraft = transform_orientation_baselink_aircraft(q)
    if is_body_frame(mode):
        return q_aircraft
    return transform_orientation_enu_ned(q_aircraft)


def convert(pose: PoseSample, mode: MavFrame) -> Tuple[np.ndarray, float]:
    """
    转换单个位姿

    Args:
        pose: 外部约定的位姿
        mode: 目标 MAVLink 坐标系

    Returns:
        (position, yaw): 目标坐标系下的位置 [x, y, z] 与偏航角 (rad, (-π, π])
    """
    position = convert_position(pose.translation, mode)
    q = convert_orientation(pose.rotation.to_array(), mode)
    return position, quaternion_get_yaw(q)
