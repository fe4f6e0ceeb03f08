"""
出站指令通道

- MavlinkCommandChannel: 通过 pymavlink 发送 SET_POSITION_TARGET_LOCAL_NED
- RecordingCommandChannel: 进程内记录，用于演示和测试

发送即忘: send() 不向调用方抛出异常，失败只记录 (节流) 并计数。
"""
import logging
import threading
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from pymavlink import mavutil

from ..core.constants import UINT32_MAX
from ..core.data_types import SetpointCommand
from ..core.exceptions import ChannelError
from ..core.interfaces import ICommandChannel
from ..core.logging_config import ThrottledLogger

logger = logging.getLogger(__name__)


def open_mavlink_connection(url: str, heartbeat_timeout_sec: Optional[float] = 10.0,
                            source_system: int = 255, source_component: int = 0):
    """
    打开 MAVLink 连接

    url 示例:
      - "udpout:127.0.0.1:14540" (PX4 SITL)
      - "udp:0.0.0.0:14550"
      - "tcp:127.0.0.1:5760"
      - "/dev/ttyACM0" (串口，配合 baud)

    heartbeat_timeout_sec 为 None 或 <= 0 时不等待心跳。

    Raises:
        ChannelError: 连接无法打开或心跳超时
    """
    try:
        conn = mavutil.mavlink_connection(url, source_system=source_system,
                                          source_component=source_component)
    except (OSError, ValueError) as e:
        raise ChannelError(f"Cannot open MAVLink connection '{url}': {e}") from e

    if heartbeat_timeout_sec is not None and heartbeat_timeout_sec > 0:
        msg = conn.wait_heartbeat(timeout=heartbeat_timeout_sec)
        if msg is None:
            conn.close()
            raise ChannelError(f"No heartbeat from '{url}' within {heartbeat_timeout_sec}s")
        logger.info(f"Heartbeat from system {conn.target_system} component {conn.target_component}")
    return conn


class MavlinkCommandChannel(ICommandChannel):
    """
    pymavlink 出站通道

    Args:
        connection: mavutil.mavlink_connection() 返回的连接
        target_system: 目标系统 ID，None 表示使用连接握手得到的值
        target_component: 目标组件 ID，None 表示使用连接握手得到的值
        throttle_sec: 发送失败日志节流间隔
    """

    def __init__(self, connection: Any, target_system: Optional[int] = None,
                 target_component: Optional[int] = None, throttle_sec: float = 5.0):
        self._conn = connection
        self._target_system = target_system
        self._target_component = target_component
        self._throttled = ThrottledLogger(logger, min_interval=throttle_sec)
        self._sent = 0
        self._failed = 0

    @classmethod
    def from_config(cls, mavlink_config: Dict[str, Any],
                    throttle_sec: float = 5.0) -> 'MavlinkCommandChannel':
        """值为 None 的连接参数使用默认值；target_* 为 None 表示沿用握手结果"""
        def setting(key, default):
            value = mavlink_config.get(key)
            return default if value is None else value

        conn = open_mavlink_connection(
            setting('url', 'udpout:127.0.0.1:14540'),
            heartbeat_timeout_sec=setting('heartbeat_timeout_sec', 10.0),
            source_system=setting('source_system', 255),
            source_component=setting('source_component', 0),
        )
        return cls(conn,
                   target_system=mavlink_config.get('target_system'),
                   target_component=mavlink_config.get('target_component'),
                   throttle_sec=throttle_sec)

    def _targets(self):
        system = self._target_system
        component = self._target_component
        if system is None:
            system = getattr(self._conn, 'target_system', 1)
        if component is None:
            component = getattr(self._conn, 'target_component', 1)
        return system, component

    def send(self, cmd: SetpointCommand) -> None:
        target_system, target_component = self._targets()
        try:
            self._conn.mav.set_position_target_local_ned_send(
                cmd.time_boot_ms & UINT32_MAX,   # time_boot_ms 线上为 uint32
                target_system,
                target_component,
                int(cmd.coordinate_frame),
                cmd.type_mask,
                float(cmd.position[0]), float(cmd.position[1]), float(cmd.position[2]),
                float(cmd.velocity[0]), float(cmd.velocity[1]), float(cmd.velocity[2]),
                float(cmd.acceleration[0]), float(cmd.acceleration[1]), float(cmd.acceleration[2]),
                float(cmd.yaw),
                float(cmd.yaw_rate),
            )
            self._sent += 1
        except Exception as e:
            # 链路错误与 struct 打包错误都只记录，不影响下一条指令
            self._failed += 1
            self._throttled.warning(f"SET_POSITION_TARGET_LOCAL_NED send failed: {e!r}", key='send')

    def close(self) -> None:
        close = getattr(self._conn, 'close', None)
        if close is not None:
            close()

    def get_stats(self) -> Dict[str, int]:
        return {'sent': self._sent, 'failed': self._failed}


class RecordingCommandChannel(ICommandChannel):
    """
    进程内记录通道

    Args:
        maxlen: 最多保留的指令数，None 表示不限
    """

    def __init__(self, maxlen: Optional[int] = 1000):
        self._lock = threading.Lock()
        self._commands: Deque[SetpointCommand] = deque(maxlen=maxlen)
        self._sent = 0
        self.closed = False

    def send(self, cmd: SetpointCommand) -> None:
        with self._lock:
            self._commands.append(cmd)
            self._sent += 1

    def close(self) -> None:
        self.closed = True

    @property
    def commands(self) -> List[SetpointCommand]:
        with self._lock:
            return list(self._commands)

    @property
    def last(self) -> Optional[SetpointCommand]:
        with self._lock:
            return self._commands[-1] if self._commands else None

    def clear(self) -> None:
        with self._lock:
            self._commands.clear()

    def get_stats(self) -> Dict[str, int]:
        return {'sent': self._sent, 'failed': 0}
