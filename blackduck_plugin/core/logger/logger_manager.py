"""Logger manager for centralized logging configuration."""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any, Iterable, Optional, TextIO

from .secret_filter import SecretMaskingFilter
from .structured_formatter import StructuredFormatter

ROOT_LOGGER = 'blackduck_plugin'
AUDIT_LOGGER = f'{ROOT_LOGGER}.audit'
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class LoggerManager:
    """Manages logging configuration and setup for the plugin."""

    def __init__(self, config: Dict[str, Any], secrets: Iterable[str] = (),
                 stream: Optional[TextIO] = None):
        """Initialize logger manager with configuration.

        Args:
            config: Configuration dictionary containing logging settings
            secrets: Values masked in every handler's output
            stream: Console stream, stderr when None
        """
        self.config = config
        self.logging_config = config.get('logging', {})
        self.loggers: Dict[str, logging.Logger] = {}
        self.secret_filter = SecretMaskingFilter(secrets)
        self.stream = stream
        self.file_handler: Optional[logging.Handler] = None
        self._setup_logging()

    def _setup_logging(self) -> None:
        root_logger = logging.getLogger(ROOT_LOGGER)
        root_logger.setLevel(self._get_log_level())
        self._detach_handlers(root_logger)

        root_logger.addHandler(self._console_handler())

        log_file = self.logging_config.get('file')
        if log_file:
            self.file_handler = self._file_handler(Path(log_file))
            root_logger.addHandler(self.file_handler)

        self.loggers['root'] = root_logger
        self._setup_audit_logger()

    def _setup_audit_logger(self) -> None:
        """Give scan audit events their own handlers.

        Events go to the console and to ``logging.audit_file`` when set,
        otherwise to the shared ``logging.file`` handler.
        """
        audit_logger = logging.getLogger(AUDIT_LOGGER)
        audit_logger.setLevel(logging.INFO)
        audit_logger.propagate = False  # Don't propagate to the plugin root logger
        self._detach_handlers(audit_logger)

        audit_logger.addHandler(self._console_handler())

        audit_file = self.logging_config.get('audit_file')
        if audit_file:
            audit_logger.addHandler(self._file_handler(Path(audit_file), level=logging.INFO))
        elif self.file_handler is not None:
            audit_logger.addHandler(self.file_handler)

        self.loggers['audit'] = audit_logger

    def _get_log_level(self) -> int:
        level_name = str(self.logging_config.get('level', 'INFO')).upper()
        return getattr(logging, level_name, logging.INFO)

    def _console_handler(self) -> logging.Handler:
        # stdout belongs to the scanner; diagnostics go to stderr
        console_handler = logging.StreamHandler(self.stream)

        if self.logging_config.get('format_type', 'text') == 'json':
            console_handler.setFormatter(StructuredFormatter())
        else:
            format_str = self.logging_config.get('format') or DEFAULT_FORMAT
            console_handler.setFormatter(logging.Formatter(format_str))

        console_handler.setLevel(self._get_log_level())
        console_handler.addFilter(self.secret_filter)
        return console_handler

    def _file_handler(self, log_file: Path, level: Optional[int] = None) -> logging.Handler:
        """Create a rotating JSON file handler.

        Args:
            log_file: Target log file; parent directories are created
            level: Handler level, the configured level when None
        """
        log_file.parent.mkdir(parents=True, exist_ok=True)

        max_bytes = self._parse_size(str(self.logging_config.get('max_file_size', '10MB')))
        backup_count = self.logging_config.get('backup_count', 5)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )

        # Always use structured format for file logs
        file_handler.setFormatter(StructuredFormatter())
        file_handler.setLevel(self._get_log_level() if level is None else level)
        file_handler.addFilter(self.secret_filter)
        return file_handler

    def _detach_handlers(self, logger: logging.Logger) -> None:
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    def _parse_size(self, size_str: str) -> int:
        """Parse size string (e.g. '10MB') to bytes."""
        size_str = size_str.upper()
        multipliers = {
            'KB': 1024,
            'MB': 1024 * 1024,
            'GB': 1024 * 1024 * 1024,
            'B': 1,
        }

        for unit, multiplier in multipliers.items():
            if size_str.endswith(unit):
                number_str = size_str[:-len(unit)]
                try:
                    return int(float(number_str) * multiplier)
                except ValueError:
                    break

        # Default to 10MB if parsing fails
        return 10 * 1024 * 1024

    def add_secret(self, secret: str) -> None:
        self.secret_filter.add_secret(secret)

    def get_logger(self, name: str) -> logging.Logger:
        """Get logger by name.

        Args:
            name: Logger name

        Returns:
            Logger instance under the plugin root
        """
        if name in self.loggers:
            return self.loggers[name]

        logger = logging.getLogger(f'{ROOT_LOGGER}.{name}')
        self.loggers[name] = logger
        return logger

    def set_level(self, level: str) -> None:
        """Set logging level for all loggers."""
        log_level = getattr(logging, level.upper(), logging.INFO)

        for logger in self.loggers.values():
            logger.setLevel(log_level)
            for handler in logger.handlers:
                handler.setLevel(log_level)

    def shutdown(self) -> None:
        """Close and detach every handler this manager installed."""
        root_logger = self.loggers.get('root')
        if root_logger is not None:
            self._detach_handlers(root_logger)

        audit_logger = self.loggers.get('audit')
        if audit_logger is not None:
            self._detach_handlers(audit_logger)
            audit_logger.propagate = True
