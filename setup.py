#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
mav_setpoint 安装脚本

安装方法:
    # 可编辑安装 (推荐开发时使用)
    pip install -e .[test]

    # 普通安装
    pip install .
"""

from setuptools import setup, find_packages

setup(
    name='mav-setpoint',
    version='1.0.0',
    author='mav_setpoint Team',
    description='MAVLink 位置设定点分发器: ENU/base_link 位姿 -> SET_POSITION_TARGET_LOCAL_NED',

    # 自动查找包
    packages=find_packages(include=['mav_setpoint', 'mav_setpoint.*']),

    # 依赖
    install_requires=[
        'numpy>=1.20.0',
        'scipy>=1.7.0',
        'PyYAML>=5.4.0',
        'pymavlink>=2.4.30',
    ],
    extras_require={
        'test': ['pytest>=6.0'],
    },

    entry_points={
        'console_scripts': [
            'mav-setpoint=mav_setpoint.main:main',
        ],
    },

    # Python 版本要求
    python_requires='>=3.8',

    # 包含数据文件
    include_package_data=True,
    zip_safe=False,
)
