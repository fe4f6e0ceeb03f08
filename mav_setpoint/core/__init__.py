"""核心模块"""
from .enums import MavFrame, InputSourceType
from .constants import (
    IGNORE_ALL_EXCEPT_XYZ_Y,
    DEFAULT_SOURCE_FRAME, DEFAULT_TARGET_FRAME, DEFAULT_RATE_CEILING_HZ,
    DEFAULT_POSE_TOPIC, MAV_FRAME_PARAM,
)
from .data_types import (
    Header, Vector3, Point, Quaternion, Transform, TransformStamped,
    Pose, PoseStamped, PoseSample, SetpointCommand,
    TransformListenerSource, DirectPoseSource, InputSourceSelection,
    input_source_from_config,
)
from .interfaces import (
    LifecycleState, ILifecycleComponent,
    ICommandChannel, ITransformFeed, IPoseFeed, IParamStore,
)
from .exceptions import (
    SetpointError, ConfigurationError, ConfigValidationError,
    ComponentError, InitializationError, ChannelError,
)
