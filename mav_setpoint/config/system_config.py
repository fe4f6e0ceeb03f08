"""系统配置

包含:
- MAVLink 出站连接
- 日志
- 参数存储 (坐标系持久化)
"""

# MAVLink 连接配置
# target_system / target_component 为 None 时使用心跳握手得到的值
MAVLINK_CONFIG = {
    'url': 'udpout:127.0.0.1:14540',  # PX4 SITL 默认
    'source_system': 255,             # 本端系统 ID (GCS)
    'source_component': 0,
    'target_system': None,
    'target_component': None,
    'heartbeat_timeout_sec': 10.0,    # <= 0 表示不等待心跳
}

# 日志配置
LOGGING_CONFIG = {
    'level': 'INFO',
    'throttle_sec': 5.0,              # 高频警告的节流间隔 (秒)
}

# 参数存储配置
# path 为 None 时使用进程内存储，重启后丢失
PARAM_STORE_CONFIG = {
    'path': None,
}

SYSTEM_VALIDATION_RULES = {
    'mavlink.source_system': (1, 255, '本端系统 ID'),
    'mavlink.source_component': (0, 255, '本端组件 ID'),
    'mavlink.target_system': (0, 255, '目标系统 ID'),
    'mavlink.target_component': (0, 255, '目标组件 ID'),
    'mavlink.heartbeat_timeout_sec': (None, 600.0, '心跳等待超时 (秒)，<=0 不等待'),
    'logging.throttle_sec': (0.0, 3600.0, '日志节流间隔 (秒)'),
}
