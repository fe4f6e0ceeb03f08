"""帧转换模块"""
from .frame_converter import convert, convert_position, convert_orientation, is_body_frame
from .frame_conversions import (
    quaternion_multiply, quaternion_from_rpy, quaternion_get_yaw,
    transform_frame_enu_ned, transform_frame_ned_enu,
    transform_frame_baselink_aircraft, transform_frame_aircraft_baselink,
    transform_orientation_enu_ned, transform_orientation_ned_enu,
    transform_orientation_baselink_aircraft, transform_orientation_aircraft_baselink,
)
from .transform_buffer import TransformBuffer
from .transform_sampler import TransformSampler, RateLimiter

__all__ = [
    'convert', 'convert_position', 'convert_orientation', 'is_body_frame',
    'quaternion_multiply', 'quaternion_from_rpy', 'quaternion_get_yaw',
    'transform_frame_enu_ned', 'transform_frame_ned_enu',
    'transform_frame_baselink_aircraft', 'transform_frame_aircraft_baselink',
    'transform_orientation_enu_ned', 'transform_orientation_ned_enu',
    'transform_orientation_baselink_aircraft', 'transform_orientation_aircraft_baselink',
    'TransformBuffer', 'TransformSampler', 'RateLimiter',
]
