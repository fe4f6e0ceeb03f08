"""
坐标系切换服务

请求/响应与 mavros_msgs/SetMavFrame 对应:
    request:  mav_frame (int)
    response: success (bool)
"""
from dataclasses import dataclass
from typing import Callable
import logging

logger = logging.getLogger(__name__)

MODE_SERVICE_NAME = 'mav_frame'


@dataclass
class SetMavFrameRequest:
    mav_frame: int = 1


@dataclass
class SetMavFrameResponse:
    success: bool = False


class ModeSwitchService:
    """
    坐标系切换服务处理器

    Args:
        set_mode_callback: 接收坐标系代码，返回是否成功
        name: 服务名
    """

    def __init__(self, set_mode_callback: Callable[[int], bool],
                 name: str = MODE_SERVICE_NAME):
        self._set_mode_callback = set_mode_callback
        self.name = name

    def handle(self, request: SetMavFrameRequest) -> SetMavFrameResponse:
        """处理切换请求"""
        response = SetMavFrameResponse()
        response.success = bool(self._set_mode_callback(int(request.mav_frame)))
        logger.debug(f"{self.name}: mav_frame={request.mav_frame} success={response.success}")
        return response

    __call__ = handle
