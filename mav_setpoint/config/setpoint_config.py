"""设定点配置

包含:
- 输入源选择 (listener / direct)
- 变换监听参数
- 直接位姿话题
- 初始坐标系
"""
from ..core.constants import (
    DEFAULT_SOURCE_FRAME, DEFAULT_TARGET_FRAME, DEFAULT_RATE_CEILING_HZ, DEFAULT_POSE_TOPIC,
)

# 输入源: 'listener' 采样坐标变换，'direct' 订阅位姿话题
# 初始化时确定，运行时不可切换
INPUT_SOURCE = 'direct'

# 变换监听配置 (input_source == 'listener' 时生效)
# 监听 source_frame -> target_frame，即 target_frame 在 source_frame 中的位姿
LISTENER_CONFIG = {
    'source_frame': DEFAULT_SOURCE_FRAME,       # 父坐标系
    'target_frame': DEFAULT_TARGET_FRAME,       # 子坐标系
    'rate_ceiling_hz': DEFAULT_RATE_CEILING_HZ, # 采样频率上限 (Hz)，超出部分丢弃
}

# 直接位姿配置 (input_source == 'direct' 时生效)
DIRECT_CONFIG = {
    'topic': DEFAULT_POSE_TOPIC,
}

# 初始坐标系 (MAV_FRAME 名称或数值字符串)
# None 表示 LOCAL_NED；参数存储中已持久化的值优先
INITIAL_FRAME_MODE = None

SETPOINT_VALIDATION_RULES = {
    'listener.rate_ceiling_hz': (0.1, 1000.0, '变换采样频率上限 (Hz)'),
}
