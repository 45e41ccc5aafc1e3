"""Logging framework for the Black Duck plugin."""

from .audit_logger import ScanAuditLogger
from .logger_manager import LoggerManager
from .secret_filter import SecretMaskingFilter
from .structured_formatter import StructuredFormatter

__all__ = ['LoggerManager', 'ScanAuditLogger', 'SecretMaskingFilter', 'StructuredFormatter']
