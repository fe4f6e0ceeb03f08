"""设定点分发模块"""
from .command_packer import CommandPacker, stamp_to_ms
from .setpoint_dispatcher import SetpointDispatcher

__all__ = ['CommandPacker', 'stamp_to_ms', 'SetpointDispatcher']
