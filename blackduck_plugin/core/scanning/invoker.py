"""Scan invoker: validate, build the Detect command, run it, report."""

import asyncio
import contextlib
import logging
import signal
import sys
import time
import uuid
from typing import Optional

from ...platform import PlatformDetector, PlatformType
from ...tools.base import ProcessRunner, ToolExecutionResult
from ..exceptions import (
    MissingRequiredConfigError, ScanCancelledError, ScanExecutionError
)
from ..logger.audit_logger import ScanAuditLogger
from .command_builder import build_command
from .data_structures import CommandLine, ScanConfig

logger = logging.getLogger(__name__)


def validate_config(config: ScanConfig) -> None:
    """Reject a config whose URL, token or project name is empty.

    Raises:
        MissingRequiredConfigError: Listing every missing field
    """
    missing = config.missing_required()
    if missing:
        raise MissingRequiredConfigError(list(missing), config_section='blackduck')


class ScanInvoker:
    """Runs one Black Duck Detect scan for one ScanConfig.

    The platform is resolved once at construction so that building and
    executing always agree on the shell strategy.
    """

    def __init__(self, config: ScanConfig, platform_type: Optional[PlatformType] = None,
                 runner: Optional[ProcessRunner] = None,
                 audit_logger: Optional[ScanAuditLogger] = None,
                 execution_timeout: Optional[float] = None):
        """Initialize scan invoker.

        Args:
            config: Scan inputs
            platform_type: Host platform; detected when None
            runner: Process runner; a default ProcessRunner when None
            audit_logger: Audit event sink
            execution_timeout: Wall-clock limit for the scanner in seconds,
                no limit when None or 0
        """
        self.config = config
        self.platform_type = platform_type or PlatformDetector.detect()
        self.runner = runner or ProcessRunner()
        self.audit_logger = audit_logger or ScanAuditLogger()
        self.execution_timeout = execution_timeout or None
        self.scan_id = uuid.uuid4().hex[:12]

    def validate(self) -> None:
        validate_config(self.config)

    def build_command(self) -> CommandLine:
        return build_command(self.config, self.platform_type)

    async def execute(self, command_line: CommandLine) -> ToolExecutionResult:
        """Run the built command with pass-through output."""
        return await self.runner.run(command_line, timeout=self.execution_timeout)

    async def run_async(self) -> ToolExecutionResult:
        """Validate, build and execute, stopping at the first failure.

        Returns:
            ToolExecutionResult of the successful scan

        Raises:
            MissingRequiredConfigError: Required configuration is empty
            ScanExecutionError: Detect failed or could not be started
            ScanCancelledError: The scan was cancelled or timed out
        """
        self.validate()
        command_line = self.build_command()

        project = self.config.project_name
        self.audit_logger.log_scan_start(
            project=project,
            service_url=self.config.service_url,
            platform=self.platform_type.value,
            command=command_line.masked(),
            scan_id=self.scan_id,
        )
        for warning in command_line.warnings:
            self.audit_logger.log_invalid_option(project, warning, scan_id=self.scan_id)

        start_time = time.monotonic()
        with self._cancel_on_sigterm():
            try:
                result = await self.execute(command_line)
            except ScanCancelledError as e:
                self.audit_logger.log_scan_cancelled(project, e.message, scan_id=self.scan_id)
                raise
            except ScanExecutionError as e:
                self.audit_logger.log_scan_failure(project, e, scan_id=self.scan_id)
                raise

        self.audit_logger.log_scan_complete(
            project, time.monotonic() - start_time, scan_id=self.scan_id
        )
        return result

    def run(self) -> ToolExecutionResult:
        """Synchronous entry point for the CLI.

        Ctrl+C cancels the running task, which terminates the scanner and
        surfaces as ScanCancelledError.
        """
        try:
            return asyncio.run(self.run_async())
        except KeyboardInterrupt:
            raise ScanCancelledError("Scan interrupted by user") from None

    @contextlib.contextmanager
    def _cancel_on_sigterm(self):
        """Turn SIGTERM from the CI runner into task cancellation."""
        loop = asyncio.get_running_loop()
        installed = False
        if sys.platform != "win32":
            try:
                loop.add_signal_handler(signal.SIGTERM, asyncio.current_task().cancel)
                installed = True
            except (NotImplementedError, RuntimeError, ValueError) as e:
                # Only the main thread may install signal handlers
                logger.debug(f"SIGTERM handler not installed: {e}")

        try:
            yield
        finally:
            if installed:
                loop.remove_signal_handler(signal.SIGTERM)


def run_scan(config: ScanConfig, platform_type: Optional[PlatformType] = None,
             execution_timeout: Optional[float] = None) -> ToolExecutionResult:
    """Run a scan end to end; raises a ScanError or ConfigurationError on failure."""
    return ScanInvoker(config, platform_type=platform_type,
                       execution_timeout=execution_timeout).run()

