"""Black Duck Detect CI plugin.

Turns PLUGIN_BLACKDUCK_* settings into a single Synopsys Detect invocation,
streams the scanner output into the build log and reports the outcome
through the process exit code.
"""

__version__ = "1.0.0"
__description__ = "Black Duck Detect scan step for CI pipelines"
__license__ = "MIT"

from .core.exceptions import PluginException, PluginError
from .core.scanning import ScanConfig, ScanInvoker, build_command, run_scan

__all__ = [
    'ScanConfig',
    'ScanInvoker',
    'build_command',
    'run_scan',
    'PluginException',
    'PluginError',
    '__version__'
]
