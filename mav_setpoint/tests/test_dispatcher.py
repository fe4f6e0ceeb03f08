"""
设定点分发器测试

覆盖:
- 两种输入源的接线与互斥
- 坐标系切换对下一条位姿生效
- 坐标系持久化 (成功 / 失败 / 重启后恢复)
- 并发切换与分发
"""
import sys
import os
import copy
import math
import threading
import time
import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from mav_setpoint.config import DEFAULT_CONFIG, DictParamStore, YamlParamStore
from mav_setpoint.core.constants import IGNORE_ALL_EXCEPT_XYZ_Y, MAV_FRAME_PARAM
from mav_setpoint.core.data_types import (
    DirectPoseSource, Header, Point, Pose, PoseStamped, Quaternion, Transform,
    TransformListenerSource, TransformStamped, Vector3,
)
from mav_setpoint.core.enums import MavFrame
from mav_setpoint.core.exceptions import InitializationError
from mav_setpoint.core.interfaces import IParamStore
from mav_setpoint.dispatcher import SetpointDispatcher
from mav_setpoint.io import PoseTopic, RecordingCommandChannel, SetMavFrameRequest
from mav_setpoint.transform import TransformBuffer


TOPIC = 'setpoint_position/local'


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FailingParamStore(IParamStore):
    """写入总是失败的参数存储"""

    def __init__(self):
        self.attempts = 0

    def get(self, key, default=None):
        return default

    def set(self, key, value):
        self.attempts += 1
        raise OSError("parameter server unreachable")


def make_config(**overrides):
    config = copy.deepcopy(DEFAULT_CONFIG)
    config.update(overrides)
    return config


def pose_msg(xyz=(1.0, 2.0, 3.0), stamp=1.5):
    return PoseStamped(header=Header(stamp=stamp, frame_id='map'),
                       pose=Pose(position=Point(*xyz), orientation=Quaternion()))


def transform_msg(xyz=(1.0, 2.0, 3.0), stamp=1.5, parent='map', child='target_position'):
    return TransformStamped(header=Header(stamp=stamp, frame_id=parent),
                            child_frame_id=child,
                            transform=Transform(translation=Vector3(*xyz), rotation=Quaternion()))


@pytest.fixture
def direct_setup():
    channel = RecordingCommandChannel()
    store = DictParamStore()
    topic = PoseTopic()
    dispatcher = SetpointDispatcher(make_config(input_source='direct'), channel, store)
    dispatcher.initialize(pose_feed=topic)
    yield dispatcher, channel, store, topic
    dispatcher.shutdown()


# =============================================================================
# 直接位姿输入
# =============================================================================

def test_direct_pose_inertial(direct_setup):
    dispatcher, channel, _, topic = direct_setup
    assert isinstance(dispatcher.source, DirectPoseSource)
    assert dispatcher.get_mode() is MavFrame.LOCAL_NED

    assert topic.publish(TOPIC, pose_msg()) == 1

    cmd = channel.last
    assert cmd.coordinate_frame is MavFrame.LOCAL_NED
    assert cmd.time_boot_ms == 1500
    assert cmd.type_mask == IGNORE_ALL_EXCEPT_XYZ_Y
    np.testing.assert_allclose(cmd.position, [2.0, 1.0, -3.0])
    assert math.isclose(cmd.yaw, math.pi / 2, abs_tol=1e-12)
    np.testing.assert_array_equal(cmd.velocity, np.zeros(3))
    np.testing.assert_array_equal(cmd.acceleration, np.zeros(3))
    assert cmd.yaw_rate == 0.0


def test_direct_pose_is_not_throttled(direct_setup):
    dispatcher, channel, _, topic = direct_setup
    for i in range(200):
        topic.publish(TOPIC, pose_msg(stamp=i * 0.005))
    assert len(channel.commands) == 200
    assert dispatcher.get_health_status()['details']['processed'] == 200


def test_mode_switch_applies_to_next_pose(direct_setup):
    dispatcher, channel, store, topic = direct_setup
    topic.publish(TOPIC, pose_msg())
    assert channel.last.coordinate_frame is MavFrame.LOCAL_NED

    assert dispatcher.set_mode(8) is True
    topic.publish(TOPIC, pose_msg())

    cmd = channel.last
    assert cmd.coordinate_frame is MavFrame.BODY_NED
    np.testing.assert_allclose(cmd.position, [1.0, -2.0, -3.0])
    assert math.isclose(cmd.yaw, 0.0, abs_tol=1e-12)
    assert cmd.type_mask == IGNORE_ALL_EXCEPT_XYZ_Y
    assert store.get(MAV_FRAME_PARAM) == 'BODY_NED'


def test_unknown_mode_is_accepted(direct_setup):
    dispatcher, channel, store, topic = direct_setup
    assert dispatcher.set_mode(99) is True
    assert int(dispatcher.get_mode()) == 99
    assert store.get(MAV_FRAME_PARAM) == '99'

    topic.publish(TOPIC, pose_msg())
    cmd = channel.last
    assert int(cmd.coordinate_frame) == 99
    # 未知坐标系按惯性系转换
    np.testing.assert_allclose(cmd.position, [2.0, 1.0, -3.0])


def test_mode_service(direct_setup):
    dispatcher, _, store, _ = direct_setup
    response = dispatcher.mode_service.handle(SetMavFrameRequest(mav_frame=9))
    assert response.success is True
    assert dispatcher.get_mode() is MavFrame.BODY_OFFSET_NED
    assert store.get(MAV_FRAME_PARAM) == 'BODY_OFFSET_NED'
    assert dispatcher.mode_service.name == 'mav_frame'


def test_persist_failure_still_switches():
    store = FailingParamStore()
    dispatcher = SetpointDispatcher(make_config(), RecordingCommandChannel(), store)
    dispatcher.initialize(pose_feed=PoseTopic())

    assert dispatcher.set_mode(8) is True
    assert dispatcher.get_mode() is MavFrame.BODY_NED
    assert store.attempts == 1
    assert dispatcher.get_health_status()['details']['persist_failures'] == 1


class BlockingParamStore(DictParamStore):
    """第一次写入阻塞，直到测试放行"""

    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()
        self.writes = []
        self._first = True

    def set(self, key, value):
        if self._first:
            self._first = False
            self.entered.set()
            assert self.release.wait(timeout=5.0)
        self.writes.append(value)
        super().set(key, value)


def test_overlapping_switches_persist_latest_mode():
    store = BlockingParamStore()
    dispatcher = SetpointDispatcher(make_config(), RecordingCommandChannel(), store)

    first = threading.Thread(target=dispatcher.set_mode, args=(8,))
    first.start()
    assert store.entered.wait(timeout=5.0)

    second = threading.Thread(target=dispatcher.set_mode, args=(1,))
    second.start()
    for _ in range(500):
        if dispatcher.get_mode() is MavFrame.LOCAL_NED:
            break
        time.sleep(0.01)
    assert dispatcher.get_mode() is MavFrame.LOCAL_NED

    store.release.set()
    first.join(timeout=5.0)
    second.join(timeout=5.0)
    assert not first.is_alive() and not second.is_alive()

    assert store.writes[-1] == 'LOCAL_NED'
    assert store.get(MAV_FRAME_PARAM) == dispatcher.get_mode().to_string()


def test_null_throttle_interval_uses_default():
    config = make_config()
    config['logging'] = dict(config['logging'], throttle_sec=None)
    channel = RecordingCommandChannel()
    topic = PoseTopic()
    dispatcher = SetpointDispatcher(config, channel)
    dispatcher.initialize(pose_feed=topic)
    dispatcher.set_mode(99)
    # 未知坐标系的节流警告连续触发
    topic.publish(TOPIC, pose_msg(stamp=1.0))
    topic.publish(TOPIC, pose_msg(stamp=2.0))
    assert [c.time_boot_ms for c in channel.commands] == [1000, 2000]
    dispatcher.shutdown()


# =============================================================================
# 初始坐标系
# =============================================================================

def test_initial_mode_from_param_store():
    store = DictParamStore({MAV_FRAME_PARAM: 'BODY_NED'})
    dispatcher = SetpointDispatcher(make_config(initial_frame_mode='LOCAL_OFFSET_NED'),
                                    RecordingCommandChannel(), store)
    assert dispatcher.get_mode() is MavFrame.BODY_NED


def test_initial_mode_from_config():
    dispatcher = SetpointDispatcher(make_config(initial_frame_mode='LOCAL_OFFSET_NED'),
                                    RecordingCommandChannel())
    assert dispatcher.get_mode() is MavFrame.LOCAL_OFFSET_NED


def test_initial_mode_unrecognised_falls_back():
    store = DictParamStore({MAV_FRAME_PARAM: 'sideways'})
    dispatcher = SetpointDispatcher(make_config(), RecordingCommandChannel(), store)
    assert dispatcher.get_mode() is MavFrame.LOCAL_NED


def test_mode_survives_restart(tmp_path):
    path = str(tmp_path / 'params.yaml')
    first = SetpointDispatcher(make_config(), RecordingCommandChannel(), YamlParamStore(path))
    first.set_mode(9)
    first.shutdown()

    second = SetpointDispatcher(make_config(), RecordingCommandChannel(), YamlParamStore(path))
    assert second.get_mode() is MavFrame.BODY_OFFSET_NED


# =============================================================================
# 变换监听输入
# =============================================================================

def test_listener_source_rate_limited():
    clock = FakeClock()
    buffer = TransformBuffer()
    channel = RecordingCommandChannel(maxlen=None)
    config = make_config(input_source='listener')
    dispatcher = SetpointDispatcher(config, channel, clock=clock)
    dispatcher.initialize(transform_feed=buffer)
    assert isinstance(dispatcher.source, TransformListenerSource)

    for i in range(200):
        clock.now = i * 0.005
        buffer.set_transform(transform_msg(stamp=i * 0.005))

    assert len(channel.commands) == 50
    for cmd in channel.commands:
        assert cmd.type_mask == IGNORE_ALL_EXCEPT_XYZ_Y
        np.testing.assert_allclose(cmd.position, [2.0, 1.0, -3.0])

    details = dispatcher.get_health_status()['details']
    assert details['received'] == 200
    assert details['dropped'] == 150
    assert details['processed'] == 50


def test_listener_ignores_pose_feed():
    buffer = TransformBuffer()
    topic = PoseTopic()
    channel = RecordingCommandChannel()
    dispatcher = SetpointDispatcher(make_config(input_source='listener'), channel, clock=FakeClock())
    dispatcher.initialize(transform_feed=buffer, pose_feed=topic)

    assert topic.publish(TOPIC, pose_msg()) == 0
    assert channel.commands == []
    buffer.set_transform(transform_msg())
    assert len(channel.commands) == 1


def test_direct_ignores_transform_feed():
    buffer = TransformBuffer()
    channel = RecordingCommandChannel()
    dispatcher = SetpointDispatcher(make_config(input_source='direct'), channel)
    dispatcher.initialize(transform_feed=buffer, pose_feed=PoseTopic())

    buffer.set_transform(transform_msg())
    assert buffer.subscriber_count() == 0
    assert channel.commands == []


def test_missing_feed_raises():
    with pytest.raises(InitializationError):
        SetpointDispatcher(make_config(input_source='direct'),
                           RecordingCommandChannel()).initialize(transform_feed=TransformBuffer())
    with pytest.raises(InitializationError):
        SetpointDispatcher(make_config(input_source='listener'),
                           RecordingCommandChannel()).initialize(pose_feed=PoseTopic())


def test_initialize_twice_raises(direct_setup):
    dispatcher = direct_setup[0]
    with pytest.raises(InitializationError):
        dispatcher.initialize(pose_feed=PoseTopic())


# =============================================================================
# 生命周期
# =============================================================================

def test_shutdown_unsubscribes_and_closes():
    topic = PoseTopic()
    channel = RecordingCommandChannel()
    dispatcher = SetpointDispatcher(make_config(), channel)
    dispatcher.initialize(pose_feed=topic)
    assert dispatcher.get_health_status()['healthy']

    dispatcher.shutdown()
    dispatcher.shutdown()
    assert channel.closed
    assert topic.publish(TOPIC, pose_msg()) == 0
    status = dispatcher.get_health_status()
    assert not status['healthy']
    assert status['state'] == 'SHUTDOWN'


def test_reset_keeps_mode(direct_setup):
    dispatcher, _, _, topic = direct_setup
    dispatcher.set_mode(8)
    topic.publish(TOPIC, pose_msg())
    dispatcher.reset()
    details = dispatcher.get_health_status()['details']
    assert details['processed'] == 0
    assert details['mode_switches'] == 0
    assert dispatcher.last_command is None
    assert dispatcher.get_mode() is MavFrame.BODY_NED


# =============================================================================
# 并发
# =============================================================================

def test_concurrent_switch_and_dispatch():
    """每条指令的位置都与它携带的坐标系一致"""
    topic = PoseTopic()
    channel = RecordingCommandChannel(maxlen=None)
    dispatcher = SetpointDispatcher(make_config(), channel)
    dispatcher.initialize(pose_feed=topic)

    def publish():
        for i in range(500):
            topic.publish(TOPIC, pose_msg(stamp=i * 0.001))

    def toggle():
        for i in range(500):
            dispatcher.set_mode(8 if i % 2 == 0 else 1)

    threads = [threading.Thread(target=publish), threading.Thread(target=publish),
               threading.Thread(target=toggle)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    commands = channel.commands
    assert len(commands) == 1000
    for cmd in commands:
        if cmd.coordinate_frame is MavFrame.BODY_NED:
            np.testing.assert_allclose(cmd.position, [1.0, -2.0, -3.0])
        else:
            assert cmd.coordinate_frame is MavFrame.LOCAL_NED
            np.testing.assert_allclose(cmd.position, [2.0, 1.0, -3.0])
    assert dispatcher.get_mode() is MavFrame.LOCAL_NED


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
