"""命令行入口测试 (演示模式，不打开 MAVLink 连接)"""
import sys
import os
import math
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from mav_setpoint.main import circle_pose, main


def test_demo_direct(capsys):
    assert main(['--demo', '--steps', '10']) == 0
    out = capsys.readouterr().out
    assert '输入源: direct' in out
    assert out.count('LOCAL_NED') >= 10
    assert 'mask=0x09f8' in out
    assert '已处理: 10' in out


def test_demo_listener_with_frame(tmp_path, capsys):
    path = tmp_path / 'listener.yaml'
    path.write_text("input_source: listener\n", encoding='utf-8')
    assert main(['--demo', '--config', str(path), '--frame', '8', '--steps', '12']) == 0
    out = capsys.readouterr().out
    assert '输入源: listener' in out
    assert '坐标系: BODY_NED' in out
    # 20 Hz 发布低于 50 Hz 上限，全部放行
    assert '已处理: 12，丢弃: 0' in out


def test_bad_config_returns_error(tmp_path, capsys):
    assert main(['--demo', '--config', str(tmp_path / 'missing.yaml')]) == 2
    assert '配置错误' in capsys.readouterr().err


def test_circle_pose_heading_is_tangent():
    (x, y, z), q = circle_pose(0.0, radius=2.0)
    assert math.isclose(x, 2.0) and math.isclose(y, 0.0, abs_tol=1e-12)
    assert z == 2.0
    # t=0 时切向为 ENU +y，偏航 90°
    assert math.isclose(q.z, math.sin(math.pi / 4))
    assert math.isclose(q.w, math.cos(math.pi / 4))


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
