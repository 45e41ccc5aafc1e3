"""Audit logger for scan lifecycle events."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..exceptions import InvalidOptionWarning, PluginException
from .logger_manager import AUDIT_LOGGER


class ScanAuditLogger:
    """Records one event per scan lifecycle step on the audit logger."""

    def __init__(self, logger_manager=None):
        """Initialize scan audit logger.

        Args:
            logger_manager: LoggerManager instance; the plain audit logger
                is used when None
        """
        if logger_manager is not None:
            self.logger = logger_manager.get_logger('audit')
        else:
            self.logger = logging.getLogger(AUDIT_LOGGER)

    def _event(self, event_type: str, **fields) -> Dict[str, Any]:
        return {
            'event_type': event_type,
            'event_category': 'scan_audit',
            'event_timestamp': datetime.now(timezone.utc).isoformat(),
            **fields
        }

    def log_scan_start(self, project: str, service_url: str, platform: str,
                       command: str, scan_id: Optional[str] = None) -> None:
        """Log scan start event.

        Args:
            project: Black Duck project name
            service_url: Black Duck server URL
            platform: Host platform family
            command: Masked command line
            scan_id: Unique scan identifier
        """
        self.logger.info("Scan started", extra=self._event(
            'scan_start',
            project=project,
            service_url=service_url,
            platform=platform,
            command=command,
            scan_id=scan_id,
        ))

    def log_scan_complete(self, project: str, duration: float,
                          scan_id: Optional[str] = None) -> None:
        self.logger.info("Scan completed", extra=self._event(
            'scan_complete',
            project=project,
            duration_seconds=duration,
            scan_id=scan_id,
        ))

    def log_scan_failure(self, project: str, error: PluginException,
                         scan_id: Optional[str] = None) -> None:
        """Log a failed scan with the error's code and details."""
        self.logger.error(f"Scan failed: {error.message}", extra=self._event(
            'scan_failure',
            project=project,
            error_code=error.error_code,
            error_details=error.details,
            scan_id=scan_id,
        ))

    def log_scan_cancelled(self, project: str, reason: str,
                           scan_id: Optional[str] = None) -> None:
        self.logger.warning(f"Scan cancelled: {reason}", extra=self._event(
            'scan_cancelled',
            project=project,
            scan_id=scan_id,
        ))


    def log_invalid_option(self, project: str, warning: InvalidOptionWarning,
                           scan_id: Optional[str] = None) -> None:
        """Log an optional setting that was left out of the command."""
        self.logger.warning(str(warning), extra=self._event(
            'invalid_option',
            project=project,
            option=warning.option,
            value=warning.value,
            reason=warning.reason,
            scan_id=scan_id,
        ))
