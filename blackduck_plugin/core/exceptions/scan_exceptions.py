"""Errors raised while running the Detect scan."""

from typing import Optional

from .base_exceptions import PluginError, add_details


class ScanError(PluginError):
    """Base class for failures of the scan itself, after configuration passed."""

    def __init__(self, message: str, project: Optional[str] = None, **kwargs):
        add_details(kwargs, project=project)
        kwargs.setdefault('error_code', 'SCAN_ERROR')
        super().__init__(message, **kwargs)

        self.project = project


class ScanExecutionError(ScanError):
    """Detect exited non-zero, or the shell could not be started at all.

    ``exit_code`` is None exactly when the process never started; the OS
    error is then kept in ``original_exception``.
    """

    def __init__(self, exit_code: Optional[int] = None, command: Optional[str] = None,
                 original_exception: Optional[BaseException] = None, **kwargs):
        if exit_code is not None:
            message = f"Scan command failed with exit code {exit_code}"
            kwargs.setdefault('suggestion', 'See the Detect output above for the failing step')
        else:
            message = f"Scan command failed to start: {original_exception}"
            kwargs.setdefault(
                'suggestion',
                'Check that the shell, java and the Detect jar exist on the build agent '
                '(PLUGIN_BLACKDUCK_JAVA_PATH, PLUGIN_BLACKDUCK_DETECT_JAR)'
            )

        add_details(
            kwargs,
            exit_code=exit_code,
            command=command,
            original_error=None if original_exception is None else str(original_exception),
        )
        kwargs['error_code'] = 'SCAN_EXECUTION_ERROR'
        super().__init__(message, **kwargs)

        self.exit_code = exit_code
        self.command = command
        self.original_exception = original_exception


class ScanCancelledError(ScanError):
    """The scan was stopped before Detect finished; its process tree is gone."""

    def __init__(self, message: str = "Scan command was cancelled", **kwargs):
        kwargs.setdefault('error_code', 'SCAN_CANCELLED')
        super().__init__(message, **kwargs)


class ScanTimeoutError(ScanCancelledError):
    """Detect ran longer than system.execution_timeout."""

    def __init__(self, timeout_seconds: float, **kwargs):
        add_details(kwargs, timeout_seconds=timeout_seconds)
        kwargs['error_code'] = 'SCAN_TIMEOUT'
        kwargs['suggestion'] = 'Raise PLUGIN_EXECUTION_TIMEOUT or narrow the scan scope'
        super().__init__(f"Scan command timed out after {timeout_seconds} seconds", **kwargs)

        self.timeout_seconds = timeout_seconds


class InvalidOptionWarning(UserWarning):
    """Non-fatal notice that an optional setting was ignored."""

    def __init__(self, option: str, value: str, reason: str):
        super().__init__(f"Ignoring {option}={value!r}: {reason}")
        self.option = option
        self.value = value
        self.reason = reason

    def __eq__(self, other):
        if not isinstance(other, InvalidOptionWarning):
            return NotImplemented
        return (self.option, self.value, self.reason) == (other.option, other.value, other.reason)

    def __hash__(self):
        return hash((self.option, self.value, self.reason))
