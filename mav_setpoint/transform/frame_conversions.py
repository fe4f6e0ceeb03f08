"""
坐标系约定转换

外部约定 -> MAVLink 约定:
- 位置 (惯性): ENU -> NED，交换 x/y，z 取反
- 位置 (机体): base_link (前-左-上) -> aircraft (前-右-下)，绕 x 轴旋转 π
- 姿态 (惯性): q_ned = Q_NED_ENU ⊗ q_enu
- 姿态 (机体): q_aircraft = q_baselink ⊗ Q_AIRCRAFT_BASELINK

所有变换都是自逆的，反方向函数只是别名，便于调用处表达意图。

四元数一律 (x, y, z, w)。姿态组合使用普通 Hamilton 乘积，不做归一化:
退化输入 (零范数、NaN) 会得到退化输出，而不是抛出异常。
"""
import numpy as np
from scipy.spatial.transform import Rotation

from ..core.constants import (
    NED_ENU_REFLECTION_XY, NED_ENU_REFLECTION_Z, AIRCRAFT_BASELINK_MATRIX,
)

# Q_NED_ENU = rpy(π, 0, π/2)，与位置反射矩阵对应的真旋转
NED_ENU_R = Rotation.from_matrix(NED_ENU_REFLECTION_XY @ NED_ENU_REFLECTION_Z)
# Q_AIRCRAFT_BASELINK = rpy(π, 0, 0)
AIRCRAFT_BASELINK_R = Rotation.from_matrix(AIRCRAFT_BASELINK_MATRIX)

NED_ENU_Q = NED_ENU_R.as_quat()
AIRCRAFT_BASELINK_Q = AIRCRAFT_BASELINK_R.as_quat()


# =============================================================================
# 四元数工具
# =============================================================================

def quaternion_multiply(q1, q2) -> np.ndarray:
    """Hamilton 乘积 q1 ⊗ q2，(x, y, z, w)"""
    x1, y1, z1, w1 = q1
    x2, y2, z2, w2 = q2
    return np.array([
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
    ], dtype=float)


def quaternion_from_rpy(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """
    欧拉角 -> 四元数 (x, y, z, w)

    固定轴 x-y-z 顺序，即 q = Rz(yaw) · Ry(pitch) · Rx(roll)
    """
    return Rotation.from_euler('xyz', [roll, pitch, yaw]).as_quat()


def quaternion_get_yaw(q) -> float:
    """
    从四元数提取偏航角 (航空航天 ZYX 约定)

    Returns:
        偏航角 (rad)，范围 (-π, π]
    """
    x, y, z, w = q
    yaw = float(np.arctan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z)))
    # atan2 在负零处返回 -π
    if yaw == -np.pi:
        yaw = np.pi
    return yaw


# =============================================================================
# 位置 (3D 向量)
# =============================================================================

def transform_frame_enu_ned(v) -> np.ndarray:
    """ENU -> NED: (x, y, z) -> (y, x, -z)"""
    v = np.asarray(v, dtype=float)
    return NED_ENU_REFLECTION_XY @ (NED_ENU_REFLECTION_Z @ v)


def transform_frame_ned_enu(v) -> np.ndarray:
    """NED -> ENU: (x, y, z) -> (y, x, -z)"""
    return transform_frame_enu_ned(v)


def transform_frame_baselink_aircraft(v) -> np.ndarray:
    """base_link -> aircraft: (x, y, z) -> (x, -y, -z)"""
    v = np.asarray(v, dtype=float)
    return AIRCRAFT_BASELINK_MATRIX @ v


def transform_frame_aircraft_baselink(v) -> np.ndarray:
    """aircraft -> base_link: (x, y, z) -> (x, -y, -z)"""
    return transform_frame_baselink_aircraft(v)


# =============================================================================
# 姿态 (四元数)
# =============================================================================

def transform_orientation_enu_ned(q) -> np.ndarray:
    """ENU 惯性系姿态 -> NED 惯性系姿态"""
    return quaternion_multiply(NED_ENU_Q, q)


def transform_orientation_ned_enu(q) -> np.ndarray:
    """NED 惯性系姿态 -> ENU 惯性系姿态"""
    return quaternion_multiply(NED_ENU_Q, q)


def transform_orientation_baselink_aircraft(q) -> np.ndarray:
    """base_link 机体姿态 -> aircraft 机体姿态"""
    return quaternion_multiply(q, AIRCRAFT_BASELINK_Q)


def transform_orientation_aircraft_baselink(q) -> np.ndarray:
    """aircraft 机体姿态 -> base_link 机体姿态"""
    return quaternion_multiply(q, AIRCRAFT_BASELINK_Q)
