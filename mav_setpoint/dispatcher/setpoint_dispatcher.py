"""
设定点分发器

接收位姿，转换到当前 MAVLink 坐标系，打包为 SET_POSITION_TARGET_LOCAL_NED
指令并发往飞控链路。

数据流:
    输入适配器 (TransformSampler | DirectPoseAdapter)
        ↓ PoseSample
    帧转换 (按处理时刻的当前坐标系)
        ↓ (position, yaw)
    CommandPacker
        ↓ SetpointCommand
    ICommandChannel.send (发送即忘)

输入源:
    初始化时由配置确定，只接一个适配器，运行时不可切换。

坐标系切换:
    set_mode() 是唯一修改当前坐标系的入口。内存中的赋值在锁内完成，
    持久化在锁外进行且失败不影响切换结果，慢速的参数存储不会阻塞分发。
"""
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from ..core.constants import MAV_FRAME_PARAM
from ..core.data_types import (
    DirectPoseSource, InputSourceSelection, PoseSample, SetpointCommand,
    TransformListenerSource, input_source_from_config,
)
from ..core.enums import MavFrame
from ..core.exceptions import InitializationError
from ..core.interfaces import (
    ICommandChannel, ILifecycleComponent, IParamStore, IPoseFeed, ITransformFeed,
    LifecycleState,
)
from ..core.logging_config import ThrottledLogger
from ..config.param_store import DictParamStore
from ..io.mode_service import ModeSwitchService
from ..io.pose_feed import DirectPoseAdapter
from ..transform.frame_converter import convert
from ..transform.transform_sampler import TransformSampler
from .command_packer import CommandPacker

logger = logging.getLogger(__name__)


class SetpointDispatcher(ILifecycleComponent):
    """
    设定点分发器

    线程安全性说明:
        - handle_pose() 可从任意线程调用，内部串行化，一次处理一个位姿
        - set_mode() 可与 handle_pose() 并发调用；下一个被处理的位姿
          一定使用新坐标系

    使用示例:
        dispatcher = SetpointDispatcher(config, channel, param_store)
        dispatcher.initialize(pose_feed=topic)
        dispatcher.set_mode(MavFrame.BODY_NED)
    """

    def __init__(self, config: Dict[str, Any], channel: ICommandChannel,
                 param_store: Optional[IParamStore] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            config: 配置字典
            channel: 出站指令通道
            param_store: 坐标系持久化存储，None 表示进程内存储
            clock: 单调时钟，用于变换采样限速
        """
        self.config = config
        self._channel = channel
        self._param_store = param_store if param_store is not None else DictParamStore()
        self._clock = clock

        self._source: InputSourceSelection = input_source_from_config(config)
        self._packer = CommandPacker()
        self._adapter: Optional[Any] = None
        self._mode_service = ModeSwitchService(self.set_mode)

        throttle_sec = (config.get('logging') or {}).get('throttle_sec')
        if throttle_sec is None:
            throttle_sec = 5.0
        self._throttled = ThrottledLogger(logger, min_interval=throttle_sec)

        self._mode_lock = threading.Lock()
        self._persist_lock = threading.Lock()
        self._dispatch_lock = threading.Lock()
        self._mode = self._load_initial_mode()

        self._state = LifecycleState.UNINITIALIZED
        self._processed = 0
        self._mode_switches = 0
        self._persist_failures = 0
        self._last_command: Optional[SetpointCommand] = None

    # ------------------------------------------------------------------
    # 初始化
    # ------------------------------------------------------------------

    def _load_initial_mode(self) -> MavFrame:
        """参数存储中的持久化值优先，其次 initial_frame_mode，最后 LOCAL_NED"""
        stored = None
        try:
            stored = self._param_store.get(MAV_FRAME_PARAM)
        except Exception as e:
            logger.warning(f"Cannot read persisted {MAV_FRAME_PARAM}: {e}")

        text = stored if stored is not None else self.config.get('initial_frame_mode')
        if text is None:
            return MavFrame.LOCAL_NED

        frame = MavFrame.parse(text)
        if frame is None:
            logger.warning(f"Unknown {MAV_FRAME_PARAM} '{text}', using LOCAL_NED")
            return MavFrame.LOCAL_NED
        logger.info(f"Initial MAV_FRAME: {frame.to_string()}")
        return frame

    def initialize(self, transform_feed: Optional[ITransformFeed] = None,
                   pose_feed: Optional[IPoseFeed] = None) -> None:
        """
        按输入源选择接入一个适配器

        Args:
            transform_feed: 变换更新源 (listener 输入源必需)
            pose_feed: 位姿消息源 (direct 输入源必需)

        Raises:
            InitializationError: 所需的输入源未提供，或重复初始化
        """
        if self._adapter is not None:
            raise InitializationError("SetpointDispatcher already initialized")

        if isinstance(self._source, TransformListenerSource):
            if transform_feed is None:
                raise InitializationError(
                    "input_source 'listener' requires a transform feed")
            self._adapter = TransformSampler(transform_feed, self._source,
                                             self.handle_pose, clock=self._clock)
        elif isinstance(self._source, DirectPoseSource):
            if pose_feed is None:
                raise InitializationError(
                    "input_source 'direct' requires a pose feed")
            self._adapter = DirectPoseAdapter(pose_feed, self._source, self.handle_pose)
        else:
            raise InitializationError(f"Unsupported input source: {self._source!r}")

        self._adapter.start()
        self._state = LifecycleState.RUNNING

    # ------------------------------------------------------------------
    # 位姿处理
    # ------------------------------------------------------------------

    def handle_pose(self, pose: PoseSample) -> SetpointCommand:
        """
        处理单个位姿: 转换 -> 打包 -> 发送

        坐标系在处理时刻读取，而不是在订阅时缓存。

        Returns:
            已发送的指令
        """
        with self._dispatch_lock:
            mode = self.get_mode()
            if not mode.is_known:
                self._throttled.warning(
                    f"Converting with unknown MAV_FRAME {int(mode)} as inertial",
                    key='unknown_frame')

            position, yaw = convert(pose, mode)
            cmd = self._packer.pack(pose.stamp, mode, position, yaw)
            self._channel.send(cmd)

            self._processed += 1
            self._last_command = cmd
            logger.debug(f"Setpoint {mode.to_string()}: pos={position.tolist()}, yaw={yaw:.3f}")
            return cmd

    # ------------------------------------------------------------------
    # 坐标系切换
    # ------------------------------------------------------------------

    def get_mode(self) -> MavFrame:
        with self._mode_lock:
            return self._mode

    def set_mode(self, code: int) -> bool:
        """
        切换当前坐标系

        任何整数都被接受，未知代码映射为 UNKNOWN_<code> 伪成员并按惯性系转换。
        持久化为尽力而为，失败只记录。

        Returns:
            恒为 True
        """
        frame = MavFrame.from_code(code)
        with self._mode_lock:
            previous = self._mode
            self._mode = frame
            self._mode_switches += 1

        if frame.is_known:
            logger.info(f"MAV_FRAME changed: {previous.to_string()} -> {frame.to_string()}")
        else:
            logger.warning(f"MAV_FRAME changed to unknown code {int(frame)} "
                           f"(previous {previous.to_string()})")

        self._persist_mode()
        return True

    def _persist_mode(self) -> None:
        """写入此刻的当前坐标系；多次写入串行执行"""
        with self._persist_lock:
            frame = self.get_mode()
            try:
                self._param_store.set(MAV_FRAME_PARAM, frame.to_string())
            except Exception as e:
                self._persist_failures += 1
                logger.warning(f"Cannot persist {MAV_FRAME_PARAM}={frame.to_string()}: {e}")

    @property
    def mode_service(self) -> ModeSwitchService:
        """坐标系切换服务 (SetMavFrame 请求/响应)"""
        return self._mode_service

    # ------------------------------------------------------------------
    # 查询与生命周期
    # ------------------------------------------------------------------

    @property
    def source(self) -> InputSourceSelection:
        return self._source

    @property
    def adapter(self) -> Optional[Any]:
        return self._adapter

    @property
    def last_command(self) -> Optional[SetpointCommand]:
        return self._last_command

    def get_health_status(self) -> Dict[str, Any]:
        adapter_stats = self._adapter.get_stats() if self._adapter is not None else {}
        return {
            'healthy': self._state == LifecycleState.RUNNING,
            'state': self._state.name,
            'message': f"{self._source.kind.value} -> {self.get_mode().to_string()}",
            'details': {
                'processed': self._processed,
                'mode_switches': self._mode_switches,
                'persist_failures': self._persist_failures,
                'received': adapter_stats.get('received', 0),
                'dropped': adapter_stats.get('dropped', 0),
            },
        }

    def reset(self) -> None:
        """重置计数器与采样状态，不改变当前坐标系"""
        with self._dispatch_lock:
            self._processed = 0
            self._mode_switches = 0
            self._persist_failures = 0
            self._last_command = None
        if self._adapter is not None:
            self._adapter.reset()

    def shutdown(self) -> None:
        if self._state == LifecycleState.SHUTDOWN:
            return
        if self._adapter is not None:
            self._adapter.shutdown()
        try:
            self._channel.close()
        except Exception as e:
            logger.warning(f"Error closing command channel: {e}")
        self._state = LifecycleState.SHUTDOWN
        logger.info("SetpointDispatcher shut down")
