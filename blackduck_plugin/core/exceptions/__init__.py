"""Exception classes for the Black Duck plugin."""

from .base_exceptions import PluginException, PluginError
from .config_exceptions import (
    ConfigurationError, ConfigValidationError, ConfigFileNotFoundError,
    ConfigFileFormatError, MissingRequiredConfigError
)
from .scan_exceptions import (
    ScanError, ScanExecutionError, ScanCancelledError, ScanTimeoutError,
    InvalidOptionWarning
)

__all__ = [
    'PluginException', 'PluginError',
    'ConfigurationError', 'ConfigValidationError', 'ConfigFileNotFoundError',
    'ConfigFileFormatError', 'MissingRequiredConfigError',
    'ScanError', 'ScanExecutionError', 'ScanCancelledError', 'ScanTimeoutError',
    'InvalidOptionWarning'
]
