"""
通用常量

常量分类:
=========

1. SET_POSITION_TARGET_LOCAL_NED type_mask 位定义
   - MAVLink 文档从 bit 1 开始编号，这里按 bit 0 计
   - 置位表示接收端忽略对应字段

2. 帧转换旋转
   - 四元数均按 (x, y, z, w) 顺序存储

3. 默认值
"""

import numpy as np


# =============================================================================
# type_mask 位定义 (POSITION_TARGET_TYPEMASK)
# =============================================================================
TYPEMASK_X_IGNORE = 1 << 0
TYPEMASK_Y_IGNORE = 1 << 1
TYPEMASK_Z_IGNORE = 1 << 2
TYPEMASK_VX_IGNORE = 1 << 3
TYPEMASK_VY_IGNORE = 1 << 4
TYPEMASK_VZ_IGNORE = 1 << 5
TYPEMASK_AX_IGNORE = 1 << 6
TYPEMASK_AY_IGNORE = 1 << 7
TYPEMASK_AZ_IGNORE = 1 << 8
TYPEMASK_FORCE_SET = 1 << 9
TYPEMASK_YAW_IGNORE = 1 << 10
TYPEMASK_YAW_RATE_IGNORE = 1 << 11

# 只保留 xyz 与 yaw: 忽略速度、加速度、偏航角速度
# 旧版 PX4 固件对此掩码有已知问题，遇到时请先升级固件
IGNORE_ALL_EXCEPT_XYZ_Y = (1 << 11) | (7 << 6) | (7 << 3)

UINT16_MAX = 0xFFFF
UINT32_MAX = 0xFFFFFFFF
UINT64_MAX = 0xFFFFFFFFFFFFFFFF


# =============================================================================
# 帧转换常量
# =============================================================================

# ENU <-> NED 位置映射: 交换 x/y，z 取反
NED_ENU_REFLECTION_XY = np.array([[0.0, 1.0, 0.0],
                                  [1.0, 0.0, 0.0],
                                  [0.0, 0.0, 1.0]])
NED_ENU_REFLECTION_Z = np.array([[1.0, 0.0, 0.0],
                                 [0.0, 1.0, 0.0],
                                 [0.0, 0.0, -1.0]])

# base_link (前-左-上) <-> aircraft (前-右-下): 绕 x 轴旋转 π
AIRCRAFT_BASELINK_MATRIX = np.array([[1.0, 0.0, 0.0],
                                     [0.0, -1.0, 0.0],
                                     [0.0, 0.0, -1.0]])


# =============================================================================
# 默认值
# =============================================================================
DEFAULT_SOURCE_FRAME = 'map'
DEFAULT_TARGET_FRAME = 'target_position'
DEFAULT_RATE_CEILING_HZ = 50.0
DEFAULT_POSE_TOPIC = 'setpoint_position/local'
MAV_FRAME_PARAM = 'mav_frame'
