"""
坐标变换采样器

订阅 source_frame -> target_frame 的变换更新，按频率上限采样:
超出上限的更新直接丢弃 (不排队)，保证快速变化的外部变换不会堆积。
"""
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from ..core.data_types import PoseSample, TransformListenerSource, TransformStamped
from ..core.interfaces import ILifecycleComponent, ITransformFeed, LifecycleState

logger = logging.getLogger(__name__)

# 浮点时间戳比较容差
_PERIOD_TOLERANCE = 1e-9


class RateLimiter:
    """
    频率上限判定

    距上次放行不足 1/rate_hz 秒的请求被拒绝。rate_hz <= 0 表示不限速。
    时钟回退时直接放行并以新时间为基准。

    每个周期放行第一条请求；突发在窗口内结束时，其最后一条被丢弃，
    直到下一条请求到达才会再次放行。
    """

    def __init__(self, rate_hz: float, clock: Callable[[], float] = time.monotonic):
        self._period = 1.0 / rate_hz if rate_hz > 0 else 0.0
        self._clock = clock
        self._last_time: Optional[float] = None

    @property
    def period(self) -> float:
        return self._period

    def allow(self, now: Optional[float] = None) -> bool:
        if now is None:
            now = self._clock()
        last = self._last_time
        if last is None or now < last or now - last >= self._period - _PERIOD_TOLERANCE:
            self._last_time = now
            return True
        return False

    def reset(self) -> None:
        self._last_time = None


class TransformSampler(ILifecycleComponent):
    """
    变换监听输入适配器

    Args:
        feed: 变换更新源
        source: 监听参数 (坐标系对与频率上限)
        callback: 每个放行的更新转换为 PoseSample 后回调，时间戳取自变换
        clock: 单调时钟，用于频率判定
    """

    def __init__(self, feed: ITransformFeed, source: TransformListenerSource,
                 callback: Callable[[PoseSample], None],
                 clock: Callable[[], float] = time.monotonic):
        self._feed = feed
        self._source = source
        self._callback = callback
        self._limiter = RateLimiter(source.rate_ceiling_hz, clock)
        self._handle: Any = None
        self._lock = threading.Lock()
        self._state = LifecycleState.UNINITIALIZED

        self._received = 0
        self._accepted = 0
        self._dropped = 0

    @property
    def source(self) -> TransformListenerSource:
        return self._source

    def start(self) -> None:
        if self._handle is not None:
            return
        self._handle = self._feed.subscribe_transform(
            self._source.source_frame, self._source.target_frame, self.on_transform)
        self._state = LifecycleState.RUNNING
        logger.info(f"Listen to position setpoint transform "
                    f"{self._source.source_frame} -> {self._source.target_frame} "
                    f"(<= {self._source.rate_ceiling_hz} Hz)")

    def stop(self) -> None:
        if self._handle is not None:
            self._feed.unsubscribe(self._handle)
            self._handle = None

    def on_transform(self, msg: TransformStamped) -> None:
        """变换更新回调"""
        with self._lock:
            self._received += 1
            if not self._limiter.allow():
                self._dropped += 1
                return
            self._accepted += 1
        self._callback(PoseSample.from_transform(msg))

    def reset(self) -> None:
        with self._lock:
            self._limiter.reset()
            self._received = 0
            self._accepted = 0
            self._dropped = 0

    def shutdown(self) -> None:
        self.stop()
        self._state = LifecycleState.SHUTDOWN

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                'received': self._received,
                'accepted': self._accepted,
                'dropped': self._dropped,
            }

    def get_health_status(self) -> Dict[str, Any]:
        return {
            'healthy': self._state == LifecycleState.RUNNING,
            'state': self._state.name,
            'message': f"{self._source.source_frame} -> {self._source.target_frame}",
            'details': self.get_stats(),
        }
