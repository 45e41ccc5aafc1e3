"""Scan construction and invocation."""

from .data_structures import CommandLine, ScanConfig, ScanMode
from .command_builder import (
    build_command, build_posix_command, build_windows_command, select_builder
)
from .invoker import ScanInvoker, run_scan, validate_config

__all__ = [
    'CommandLine', 'ScanConfig', 'ScanMode',
    'build_command', 'build_posix_command', 'build_windows_command', 'select_builder',
    'ScanInvoker', 'run_scan', 'validate_config'
]
