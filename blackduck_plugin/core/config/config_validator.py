"""Configuration validator for the Black Duck plugin."""

from typing import Dict, Any, List

from ..scanning.data_structures import ScanMode
from .config_manager import FALSE_STRINGS, TRUE_STRINGS

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_FORMAT_TYPES = ['text', 'json']
BOOLEAN_STRINGS = TRUE_STRINGS + FALSE_STRINGS


class ConfigValidator:
    """Validates plugin configuration types and ranges.

    Empty credentials are not reported here; the scan invoker rejects them
    before anything runs.
    """

    BOOLEAN_KEYS = ('offline_mode', 'test_connection', 'offline_bdio', 'trust_certs')

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate(self) -> List[str]:
        """Validate complete configuration.

        Returns:
            List of validation error messages
        """
        self.errors = []
        self.warnings = []

        self._validate_blackduck_config()
        self._validate_system_config()
        self._validate_logging_config()

        return self.errors

    def _validate_blackduck_config(self) -> None:
        blackduck = self.config.get('blackduck', {})
        if not isinstance(blackduck, dict):
            self.errors.append("blackduck section must be a mapping")
            return

        for key in self.BOOLEAN_KEYS:
            value = blackduck.get(key)
            if value in (None, '') or isinstance(value, bool):
                continue
            if str(value).strip().lower() not in BOOLEAN_STRINGS:
                self.errors.append(f"blackduck.{key} must be a boolean")

        timeout = blackduck.get('timeout')
        if timeout not in (None, '') and (isinstance(timeout, bool) or not isinstance(timeout, int)):
            self.errors.append("blackduck.timeout must be an integer")

        url = blackduck.get('url')
        if url and not str(url).startswith(('http://', 'https://')):
            self.errors.append(f"blackduck.url must be an http(s) URL: {url}")

        scan_mode = blackduck.get('scan_mode')
        if scan_mode and ScanMode.parse(str(scan_mode)) is None:
            # Ignored at build time, so only a warning
            valid = ', '.join(m.value for m in ScanMode)
            self.warnings.append(f"blackduck.scan_mode {scan_mode!r} is not one of: {valid}")

    def _validate_system_config(self) -> None:
        system = self.config.get('system', {})

        timeout = system.get('execution_timeout', 0)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout < 0:
            self.errors.append("system.execution_timeout must be a non-negative number")

        grace = system.get('kill_grace_period', 5)
        if isinstance(grace, bool) or not isinstance(grace, (int, float)) or grace <= 0:
            self.errors.append("system.kill_grace_period must be a positive number")

    def _validate_logging_config(self) -> None:
        logging_config = self.config.get('logging', {})

        level = str(logging_config.get('level', 'INFO')).upper()
        if level not in VALID_LOG_LEVELS:
            self.errors.append(f"Log level must be one of: {VALID_LOG_LEVELS}")

        format_type = logging_config.get('format_type', 'text')
        if format_type not in VALID_FORMAT_TYPES:
            self.errors.append(f"logging.format_type must be one of: {VALID_FORMAT_TYPES}")

        backup_count = logging_config.get('backup_count', 5)
        if isinstance(backup_count, bool) or not isinstance(backup_count, int) or backup_count < 0:
            self.errors.append("logging.backup_count must be a non-negative integer")
