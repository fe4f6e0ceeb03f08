"""
位姿话题与直接位姿输入适配器

PoseTopic 是独立运行模式下的进程内位姿发布/订阅实现；
DirectPoseAdapter 把每条位姿消息原样转换为 PoseSample，不限速。
"""
import itertools
import logging
import threading
from typing import Any, Callable, Dict, List, Tuple

from ..core.data_types import DirectPoseSource, PoseSample, PoseStamped
from ..core.interfaces import ILifecycleComponent, IPoseFeed, LifecycleState

logger = logging.getLogger(__name__)


class PoseTopic(IPoseFeed):
    """进程内位姿话题，publish 时同步调用该话题的所有订阅者"""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[int, Tuple[str, Callable[[PoseStamped], None]]] = {}
        self._handle_counter = itertools.count(1)

    def subscribe_pose(self, topic: str, callback: Callable[[PoseStamped], None]) -> Any:
        handle = next(self._handle_counter)
        with self._lock:
            self._subscribers[handle] = (topic, callback)
        return handle

    def unsubscribe(self, handle: Any) -> None:
        with self._lock:
            self._subscribers.pop(handle, None)

    def publish(self, topic: str, msg: PoseStamped) -> int:
        """发布位姿，返回收到消息的订阅者数量"""
        with self._lock:
            callbacks: List[Callable] = [cb for t, cb in self._subscribers.values() if t == topic]
        for callback in callbacks:
            callback(msg)
        return len(callbacks)


class DirectPoseAdapter(ILifecycleComponent):
    """
    直接位姿输入适配器

    Args:
        feed: 位姿消息源
        source: 话题参数
        callback: 每条消息转换为 PoseSample 后回调
    """

    def __init__(self, feed: IPoseFeed, source: DirectPoseSource,
                 callback: Callable[[PoseSample], None]):
        self._feed = feed
        self._source = source
        self._callback = callback
        self._handle: Any = None
        self._state = LifecycleState.UNINITIALIZED
        self._received = 0

    @property
    def source(self) -> DirectPoseSource:
        return self._source

    def start(self) -> None:
        if self._handle is not None:
            return
        self._handle = self._feed.subscribe_pose(self._source.topic, self.on_pose)
        self._state = LifecycleState.RUNNING
        logger.info(f"Subscribed to position setpoint topic '{self._source.topic}'")

    def stop(self) -> None:
        if self._handle is not None:
            self._feed.unsubscribe(self._handle)
            self._handle = None

    def on_pose(self, msg: PoseStamped) -> None:
        self._received += 1
        self._callback(PoseSample.from_pose(msg))

    def reset(self) -> None:
        self._received = 0

    def shutdown(self) -> None:
        self.stop()
        self._state = LifecycleState.SHUTDOWN

    def get_stats(self) -> Dict[str, int]:
        return {'received': self._received, 'accepted': self._received, 'dropped': 0}

    def get_health_status(self) -> Dict[str, Any]:
        return {
            'healthy': self._state == LifecycleState.RUNNING,
            'state': self._state.name,
            'message': self._source.topic,
            'details': self.get_stats(),
        }
