"""
位置设定点分发器主入口

独立运行时没有外部位姿生产者，这里用进程内的位姿话题 / 变换缓存发布一条
圆形轨迹作为设定点源。

用法:
    python -m mav_setpoint.main --demo                  # 记录通道，打印指令
    python -m mav_setpoint.main --config setpoint.yaml  # 经 pymavlink 持续发送，Ctrl+C 退出
    python -m mav_setpoint.main --demo --frame 8        # 以 BODY_NED 发送

生产环境使用示例:
    from mav_setpoint import SetpointDispatcher, load_config
    from mav_setpoint.io import MavlinkCommandChannel

    config = load_config('setpoint.yaml')
    channel = MavlinkCommandChannel.from_config(config['mavlink'])
    dispatcher = SetpointDispatcher(config, channel)
    dispatcher.initialize(pose_feed=my_pose_feed)
"""
import argparse
import logging
import math
import sys
import time

from .config import load_config, create_param_store
from .core.data_types import (
    Header, Point, Pose, PoseStamped, Quaternion, Transform, TransformStamped,
    TransformListenerSource, Vector3,
)
from .core.exceptions import SetpointError
from .core.logging_config import configure_logging
from .dispatcher import SetpointDispatcher
from .io import MavlinkCommandChannel, PoseTopic, RecordingCommandChannel
from .transform import TransformBuffer, quaternion_from_rpy

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='mav_setpoint',
        description='Position setpoint dispatcher (SET_POSITION_TARGET_LOCAL_NED)')
    parser.add_argument('--config', default=None, help='YAML 配置文件')
    parser.add_argument('--demo', action='store_true',
                        help='使用记录通道，发布一圈位姿后打印指令并退出')
    parser.add_argument('--frame', type=int, default=None,
                        help='启动后切换到的 MAV_FRAME 代码')
    parser.add_argument('--rate', type=float, default=20.0,
                        help='圆形轨迹的发布频率 (Hz)')
    parser.add_argument('--radius', type=float, default=2.0,
                        help='圆形轨迹半径 (m)')
    parser.add_argument('--steps', type=int, default=36,
                        help='演示模式下一圈的位姿数')
    parser.add_argument('--log-level', default=None,
                        help='覆盖 logging.level')
    return parser.parse_args(argv)


def circle_pose(t: float, radius: float, altitude: float = 2.0, period: float = 10.0):
    """ENU 圆形轨迹上 t 时刻的位置与偏航四元数 (机头沿切向)"""
    angle = 2.0 * math.pi * t / period
    x = radius * math.cos(angle)
    y = radius * math.sin(angle)
    q = quaternion_from_rpy(0.0, 0.0, angle + math.pi / 2)
    return (x, y, altitude), Quaternion.from_array(q)


class SimClock:
    """演示用时钟，由发布循环推进"""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class CirclePublisher:
    """按输入源类型向进程内话题或变换缓存发布圆形轨迹"""

    def __init__(self, dispatcher: SetpointDispatcher, pose_topic: PoseTopic,
                 tf_buffer: TransformBuffer, radius: float):
        self._source = dispatcher.source
        self._pose_topic = pose_topic
        self._tf_buffer = tf_buffer
        self._radius = radius
        self._seq = 0

    def publish(self, t: float) -> None:
        (x, y, z), q = circle_pose(t, self._radius)
        self._seq += 1
        if isinstance(self._source, TransformListenerSource):
            self._tf_buffer.set_transform(TransformStamped(
                header=Header(stamp=t, frame_id=self._source.source_frame, seq=self._seq),
                child_frame_id=self._source.target_frame,
                transform=Transform(translation=Vector3(x, y, z), rotation=q),
            ))
        else:
            self._pose_topic.publish(self._source.topic, PoseStamped(
                header=Header(stamp=t, frame_id='map', seq=self._seq),
                pose=Pose(position=Point(x, y, z), orientation=q),
            ))


def run_demo(channel: RecordingCommandChannel, publisher: CirclePublisher,
             clock: SimClock, steps: int, rate: float) -> None:
    """发布一圈位姿，打印发出的指令"""
    dt = 1.0 / rate if rate > 0 else 0.05
    for i in range(steps):
        clock.now = i * dt
        publisher.publish(clock.now)

    print("-" * 72)
    for cmd in channel.commands:
        print(f"t={cmd.time_boot_ms:6d} ms  {cmd.coordinate_frame.to_string():<16s} "
              f"pos=({cmd.position[0]:6.2f}, {cmd.position[1]:6.2f}, {cmd.position[2]:6.2f})  "
              f"yaw={math.degrees(cmd.yaw):7.1f}°  mask=0x{cmd.type_mask:04x}")
    print("-" * 72)


def run_stream(publisher: CirclePublisher, rate: float) -> None:
    """按 rate 持续发布，直到 Ctrl+C"""
    period = 1.0 / rate if rate > 0 else 0.05
    start = time.monotonic()
    try:
        while True:
            publisher.publish(time.monotonic() - start)
            time.sleep(period)
    except KeyboardInterrupt:
        print("\n收到中断，停止发送")


def main(argv=None) -> int:
    """主函数"""
    args = parse_args(argv)

    overrides = {}
    if args.log_level is not None:
        overrides['logging.level'] = args.log_level
    try:
        config = load_config(args.config, overrides=overrides)
    except SetpointError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        return 2

    configure_logging(config['logging']['level'])

    print("=" * 72)
    print("位置设定点分发器 (mav_setpoint)")
    print("=" * 72)

    if args.demo:
        channel = RecordingCommandChannel(maxlen=None)
    else:
        try:
            channel = MavlinkCommandChannel.from_config(
                config['mavlink'], throttle_sec=config['logging']['throttle_sec'])
        except SetpointError as e:
            logger.error(f"Cannot open command channel: {e}")
            return 1

    pose_topic = PoseTopic()
    tf_buffer = TransformBuffer()
    # 演示时间轴由发布循环决定，采样限速跟随模拟时钟
    clock = SimClock() if args.demo else time.monotonic
    dispatcher = SetpointDispatcher(config, channel, create_param_store(config), clock=clock)
    try:
        dispatcher.initialize(transform_feed=tf_buffer, pose_feed=pose_topic)
    except SetpointError as e:
        logger.error(f"Initialization failed: {e}")
        dispatcher.shutdown()
        return 1

    if args.frame is not None:
        dispatcher.set_mode(args.frame)

    print(f"\n输入源: {dispatcher.source.kind.value}")
    print(f"坐标系: {dispatcher.get_mode().to_string()}")

    publisher = CirclePublisher(dispatcher, pose_topic, tf_buffer, args.radius)
    if args.demo:
        run_demo(channel, publisher, clock, args.steps, args.rate)
    else:
        run_stream(publisher, args.rate)

    health = dispatcher.get_health_status()
    print(f"\n已处理: {health['details']['processed']}，"
          f"丢弃: {health['details']['dropped']}")

    dispatcher.shutdown()
    print("\n分发器已关闭")
    return 0


if __name__ == "__main__":
    sys.exit(main())
