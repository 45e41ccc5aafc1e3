"""Pass-through execution of the scanner process."""

import asyncio
import contextlib
import os
import signal
import sys
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, TextIO
import logging

import psutil

from ..core.exceptions import ScanCancelledError, ScanExecutionError, ScanTimeoutError

if TYPE_CHECKING:
    from ..core.scanning.data_structures import CommandLine

IS_WINDOWS = sys.platform == "win32"


@dataclass
class ToolExecutionResult:
    """Result of a finished scanner run."""
    tool: str
    success: bool
    returncode: int
    execution_time: float
    command: str
    pid: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'tool': self.tool,
            'success': self.success,
            'returncode': self.returncode,
            'execution_time': self.execution_time,
            'command': self.command,
            'pid': self.pid,
        }


class ProcessRunner:
    """Runs one command with the child's output wired to our own streams.

    Nothing is captured: Detect writes straight to the CI log. On
    cancellation or timeout the whole process tree is terminated before the
    error is raised.
    """

    def __init__(self, name: str = "detect", grace_period: float = 5.0,
                 echo_stream: Optional[TextIO] = None):
        """Initialize process runner.

        Args:
            name: Tool name used in results and logger names
            grace_period: Seconds between SIGTERM and SIGKILL
            echo_stream: Where the command is echoed; stdout when None
        """
        self.name = name
        self.grace_period = grace_period
        self.echo_stream = echo_stream
        self.logger = logging.getLogger(f"blackduck_plugin.tool.{name}")

    def echo(self, command_line: 'CommandLine') -> None:
        stream = self.echo_stream or sys.stdout
        print(f"Running command: {command_line.masked()}", file=stream, flush=True)

    async def run(self, command_line: 'CommandLine',
                  timeout: Optional[float] = None) -> ToolExecutionResult:
        """Run ``command_line`` to completion.

        Args:
            command_line: Command to execute
            timeout: Optional wall-clock limit in seconds

        Returns:
            ToolExecutionResult for a zero exit status

        Raises:
            ScanExecutionError: Non-zero exit or the process could not start
            ScanCancelledError: The awaiting task was cancelled
            ScanTimeoutError: ``timeout`` elapsed
        """
        masked = command_line.masked()
        self.echo(command_line)
        self.logger.debug("Spawning scanner process", extra={'command': masked})

        start_time = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                *command_line.argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=None,
                stderr=None,
                start_new_session=not IS_WINDOWS,
            )
        except OSError as e:
            self.logger.error(f"Failed to start {self.name}: {e}")
            raise ScanExecutionError(command=masked, original_exception=e) from e
        except asyncio.CancelledError:
            # asyncio kills a child whose transport was still being set up
            self.logger.warning("Scan cancelled while starting the scanner process")
            raise ScanCancelledError() from None

        try:
            if timeout is not None and timeout > 0:
                returncode = await asyncio.wait_for(process.wait(), timeout=timeout)
            else:
                returncode = await process.wait()
        except asyncio.TimeoutError:
            self.logger.warning(f"Command timed out after {timeout} seconds")
            await self.terminate(process)
            raise ScanTimeoutError(timeout) from None
        except asyncio.CancelledError:
            self.logger.warning("Scan cancelled, terminating scanner process")
            await self.terminate(process)
            raise ScanCancelledError(details={'pid': process.pid}) from None

        execution_time = time.monotonic() - start_time
        self.logger.debug(f"Command finished with return code {returncode}")

        if returncode != 0:
            raise ScanExecutionError(exit_code=returncode, command=masked)

        return ToolExecutionResult(
            tool=self.name,
            success=True,
            returncode=returncode,
            execution_time=execution_time,
            command=masked,
            pid=process.pid,
        )

    async def terminate(self, process: asyncio.subprocess.Process) -> None:
        """Terminate ``process`` and every descendant it spawned."""
        descendants = self._descendants(process.pid)

        self._signal_tree(process, descendants, kill=False)
        try:
            await asyncio.wait_for(process.wait(), timeout=self.grace_period)
        except asyncio.TimeoutError:
            self.logger.warning(f"{self.name} ignored SIGTERM, killing it")
            self._signal_tree(process, descendants, kill=True)
            await process.wait()

        loop = asyncio.get_running_loop()
        _, alive = await loop.run_in_executor(
            None, lambda: psutil.wait_procs(descendants, timeout=self.grace_period)
        )
        for child in alive:
            with contextlib.suppress(psutil.NoSuchProcess):
                child.kill()

    def _descendants(self, pid: int) -> List[psutil.Process]:
        try:
            return psutil.Process(pid).children(recursive=True)
        except psutil.NoSuchProcess:
            return []

    def _signal_tree(self, process: asyncio.subprocess.Process,
                     descendants: List[psutil.Process], kill: bool) -> None:
        if not IS_WINDOWS:
            # The child leads its own session, so this reaches grandchildren too
            sig = signal.SIGKILL if kill else signal.SIGTERM
            with contextlib.suppress(ProcessLookupError, PermissionError):
                os.killpg(process.pid, sig)

        for child in descendants:
            with contextlib.suppress(psutil.NoSuchProcess):
                if kill:
                    child.kill()
                else:
                    child.terminate()

        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                if kill:
                    process.kill()
                else:
                    process.terminate()
