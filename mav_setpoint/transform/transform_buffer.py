"""
进程内坐标变换更新源

独立运行模式下的变换发布端: set_transform 时同步通知订阅了该
(parent, child) 的回调。不保存历史，不提供查找、求逆、链式变换。
"""
import itertools
import logging
import threading
from typing import Any, Callable, Dict, Tuple

from ..core.data_types import TransformStamped
from ..core.interfaces import ITransformFeed

logger = logging.getLogger(__name__)


class TransformBuffer(ITransformFeed):
    """
    变换更新订阅

    键为 (parent_frame, child_frame)，即 (header.frame_id, child_frame_id)。
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[int, Tuple[Tuple[str, str], Callable]] = {}
        self._handle_counter = itertools.count(1)

    def set_transform(self, transform: TransformStamped) -> int:
        """发布变换，返回收到更新的订阅者数量 (回调在锁外执行)"""
        key = (transform.header.frame_id, transform.child_frame_id)
        with self._lock:
            callbacks = [cb for sub_key, cb in self._subscribers.values() if sub_key == key]
        for callback in callbacks:
            callback(transform)
        return len(callbacks)

    def subscribe_transform(self, source_frame: str, target_frame: str,
                            callback: Callable[[TransformStamped], None]) -> Any:
        handle = next(self._handle_counter)
        with self._lock:
            self._subscribers[handle] = ((source_frame, target_frame), callback)
        logger.debug(f"Subscribed to transform {source_frame} -> {target_frame} (handle={handle})")
        return handle

    def unsubscribe(self, handle: Any) -> None:
        with self._lock:
            self._subscribers.pop(handle, None)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
