"""
变换缓存与限速采样测试
"""
import sys
import os
import math
import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from mav_setpoint.core.data_types import (
    Header, Quaternion, Transform, TransformListenerSource, TransformStamped, Vector3,
)
from mav_setpoint.transform.frame_conversions import quaternion_from_rpy
from mav_setpoint.transform.transform_buffer import TransformBuffer
from mav_setpoint.transform.transform_sampler import RateLimiter, TransformSampler


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now


def make_transform(parent='map', child='target_position', xyz=(0.0, 0.0, 0.0), yaw=0.0, stamp=0.0):
    return TransformStamped(
        header=Header(stamp=stamp, frame_id=parent),
        child_frame_id=child,
        transform=Transform(translation=Vector3(*xyz),
                            rotation=Quaternion.from_array(quaternion_from_rpy(0.0, 0.0, yaw))),
    )


# =============================================================================
# RateLimiter
# =============================================================================

def test_rate_limiter_200hz_input_yields_50():
    clock = FakeClock()
    limiter = RateLimiter(50.0, clock)
    accepted = 0
    for i in range(200):
        clock.now = i * 0.005
        if limiter.allow():
            accepted += 1
    assert accepted == 50


def test_rate_limiter_slow_input_passes_everything():
    limiter = RateLimiter(50.0)
    results = [limiter.allow(now=i * 0.1) for i in range(10)]
    assert all(results)


def test_rate_limiter_unlimited():
    limiter = RateLimiter(0.0)
    assert all(limiter.allow(now=1.0) for _ in range(5))


def test_rate_limiter_clock_goes_backwards():
    limiter = RateLimiter(10.0)
    assert limiter.allow(now=5.0)
    assert not limiter.allow(now=5.05)
    assert limiter.allow(now=1.0)
    assert not limiter.allow(now=1.05)


def test_rate_limiter_reset():
    limiter = RateLimiter(1.0)
    assert limiter.allow(now=0.0)
    assert not limiter.allow(now=0.5)
    limiter.reset()
    assert limiter.allow(now=0.5)


# =============================================================================
# TransformBuffer
# =============================================================================

def test_buffer_notifies_exact_pair_only():
    buffer = TransformBuffer()
    received = []
    handle = buffer.subscribe_transform('map', 'target_position', received.append)
    assert buffer.set_transform(make_transform()) == 1
    assert buffer.set_transform(make_transform(child='other')) == 0
    # 反向坐标系对不做求逆
    assert buffer.set_transform(make_transform(parent='target_position', child='map')) == 0
    assert len(received) == 1

    buffer.unsubscribe(handle)
    assert buffer.subscriber_count() == 0
    assert buffer.set_transform(make_transform()) == 0
    assert len(received) == 1


# =============================================================================
# TransformSampler
# =============================================================================

def test_sampler_drops_updates_above_ceiling():
    clock = FakeClock()
    buffer = TransformBuffer()
    samples = []
    sampler = TransformSampler(buffer, TransformListenerSource(rate_ceiling_hz=50.0),
                               samples.append, clock=clock)
    sampler.start()

    for i in range(200):
        clock.now = i * 0.005
        buffer.set_transform(make_transform(xyz=(i, 0.0, 0.0), stamp=i * 0.005))

    assert len(samples) == 50
    stats = sampler.get_stats()
    assert stats == {'received': 200, 'accepted': 50, 'dropped': 150}
    # 放行的是每个周期的第一条更新，不做合并
    np.testing.assert_allclose(samples[1].translation, [4.0, 0.0, 0.0])
    assert math.isclose(samples[1].stamp, 0.02)


def test_sampler_uses_configured_pair():
    buffer = TransformBuffer()
    samples = []
    source = TransformListenerSource(source_frame='odom', target_frame='goal', rate_ceiling_hz=10.0)
    sampler = TransformSampler(buffer, source, samples.append, clock=FakeClock())
    sampler.start()

    buffer.set_transform(make_transform())
    assert samples == []
    buffer.set_transform(make_transform(parent='odom', child='goal', xyz=(1.0, 1.0, 1.0)))
    assert len(samples) == 1


def test_sampler_drops_trailing_update_of_burst():
    """突发在限速窗口内结束时，最后一条 (最新) 更新被丢弃，直到下一条更新到达"""
    clock = FakeClock()
    buffer = TransformBuffer()
    samples = []
    sampler = TransformSampler(buffer, TransformListenerSource(rate_ceiling_hz=10.0),
                               samples.append, clock=clock)
    sampler.start()

    for i, t in enumerate([0.0, 0.03, 0.06]):
        clock.now = t
        buffer.set_transform(make_transform(xyz=(i, 0.0, 0.0), stamp=t))
    assert len(samples) == 1
    np.testing.assert_allclose(samples[-1].translation, [0.0, 0.0, 0.0])

    clock.now = 0.5
    buffer.set_transform(make_transform(xyz=(3.0, 0.0, 0.0), stamp=0.5))
    assert len(samples) == 2
    np.testing.assert_allclose(samples[-1].translation, [3.0, 0.0, 0.0])


def test_sampler_lifecycle():
    clock = FakeClock()
    buffer = TransformBuffer()
    samples = []
    sampler = TransformSampler(buffer, TransformListenerSource(), samples.append, clock=clock)
    assert not sampler.get_health_status()['healthy']

    sampler.start()
    sampler.start()
    assert buffer.subscriber_count() == 1
    assert sampler.get_health_status()['healthy']

    buffer.set_transform(make_transform())
    sampler.reset()
    assert sampler.get_stats()['received'] == 0

    sampler.shutdown()
    assert buffer.subscriber_count() == 0
    assert sampler.get_health_status()['state'] == 'SHUTDOWN'
    buffer.set_transform(make_transform())
    assert len(samples) == 1


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
