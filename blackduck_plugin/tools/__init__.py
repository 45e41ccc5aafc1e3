"""Scanner process execution."""

from .base import ProcessRunner, ToolExecutionResult

__all__ = ['ProcessRunner', 'ToolExecutionResult']
