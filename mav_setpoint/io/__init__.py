"""输入输出模块 (外部协作方的进程内实现与 MAVLink 出站通道)"""
from .command_channel import (
    MavlinkCommandChannel, RecordingCommandChannel, open_mavlink_connection,
)
from .pose_feed import PoseTopic, DirectPoseAdapter
from .mode_service import (
    ModeSwitchService, SetMavFrameRequest, SetMavFrameResponse, MODE_SERVICE_NAME,
)

__all__ = [
    'MavlinkCommandChannel', 'RecordingCommandChannel', 'open_mavlink_connection',
    'PoseTopic', 'DirectPoseAdapter',
    'ModeSwitchService', 'SetMavFrameRequest', 'SetMavFrameResponse', 'MODE_SERVICE_NAME',
]
