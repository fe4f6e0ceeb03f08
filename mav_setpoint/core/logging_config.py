"""
日志配置

每个模块使用 logging.getLogger(__name__)；入口处调用 configure_logging()
配置根日志器。高频路径上的警告经 ThrottledLogger 按 key 节流。

日志级别规范:
    DEBUG:   每条位姿/指令的细节 (默认关闭)
    INFO:    输入源接线、模式切换、通道打开/关闭
    WARNING: 未知坐标系代码、持久化失败、发送失败
    ERROR:   初始化失败
"""
import logging
import sys
import time

DEFAULT_FORMAT = '[%(name)s] %(levelname)s: %(message)s'


def configure_logging(level=logging.INFO, format_str: str = DEFAULT_FORMAT) -> None:
    """
    配置全局日志设置

    Args:
        level: 日志级别 (int 或级别名，如 'debug')，无法识别时使用 INFO
        format_str: 日志格式字符串
    """
    if not isinstance(level, int):
        level = logging.getLevelName(str(level).upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )


class ThrottledLogger:
    """
    节流警告

    同一 key 在 min_interval 秒内最多记录一次。
    """

    def __init__(self, logger: logging.Logger, min_interval: float = 1.0):
        self._logger = logger
        self._min_interval = min_interval
        self._last_log_times: dict = {}

    def warning(self, msg: str, key: str) -> None:
        now = time.monotonic()
        last = self._last_log_times.get(key)
        if last is None or now - last >= self._min_interval:
            self._last_log_times[key] = now
            self._logger.warning(msg)
