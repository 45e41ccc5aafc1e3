"""Tests for pass-through execution of the scanner process."""

import asyncio
import io
import shutil
import sys
import time

import psutil
import pytest

from blackduck_plugin.core.exceptions import (
    ScanCancelledError, ScanExecutionError, ScanTimeoutError
)
from blackduck_plugin.core.scanning import CommandLine
from blackduck_plugin.platform import PlatformType
from blackduck_plugin.tools import ProcessRunner, ToolExecutionResult

requires_bash = pytest.mark.skipif(
    sys.platform == "win32" or shutil.which("bash") is None,
    reason="needs a POSIX bash"
)


def bash(script: str, secrets=()) -> CommandLine:
    return CommandLine(
        argv=("bash", "-c", script),
        script=script,
        platform=PlatformType.LINUX,
        secrets=tuple(secrets),
    )


def wait_for_file(path, timeout: float = 10.0) -> str:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if path.exists() and path.read_text().strip():
            return path.read_text().strip()
        time.sleep(0.05)
    raise AssertionError(f"{path} was never written")


def is_gone(pid: int) -> bool:
    try:
        return psutil.Process(pid).status() == psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return True


@pytest.fixture
def echo_stream():
    return io.StringIO()


@pytest.fixture
def runner(echo_stream):
    return ProcessRunner(grace_period=2.0, echo_stream=echo_stream)


@requires_bash
class TestProcessRunner:
    """Real subprocess runs through bash."""

    @pytest.mark.asyncio
    async def test_exit_zero_is_success(self, runner):
        result = await runner.run(bash("exit 0"))

        assert isinstance(result, ToolExecutionResult)
        assert result.success is True
        assert result.returncode == 0
        assert result.execution_time >= 0
        assert result.to_dict()['tool'] == 'detect'

    @pytest.mark.asyncio
    async def test_exit_one_is_execution_error(self, runner):
        with pytest.raises(ScanExecutionError) as exc_info:
            await runner.run(bash("exit 1"))

        assert exc_info.value.exit_code == 1
        assert "failed with exit code 1" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_binary_is_execution_error(self, runner):
        command = CommandLine(
            argv=("/nonexistent/bin/bash-for-tests", "-c", "true"),
            script="true",
            platform=PlatformType.LINUX,
        )

        with pytest.raises(ScanExecutionError) as exc_info:
            await runner.run(command)

        assert exc_info.value.exit_code is None
        assert isinstance(exc_info.value.original_exception, OSError)

    @pytest.mark.asyncio
    async def test_command_is_echoed_masked_before_running(self, runner, echo_stream):
        await runner.run(bash("echo test-token >/dev/null", secrets=["test-token"]))

        assert echo_stream.getvalue() == "Running command: bash -c echo ****** >/dev/null\n"

    @pytest.mark.asyncio
    async def test_output_is_not_captured(self, runner, capfd):
        await runner.run(bash("echo scanner-out; echo scanner-err >&2"))

        captured = capfd.readouterr()
        assert "scanner-out" in captured.out
        assert "scanner-err" in captured.err

    @pytest.mark.asyncio
    async def test_cancellation_terminates_process_tree(self, runner, temp_dir):
        pid_file = temp_dir / "child.pid"
        script = f"sleep 60 & echo $! > '{pid_file}'; wait"

        task = asyncio.create_task(runner.run(bash(script)))
        child_pid = int(await asyncio.get_running_loop().run_in_executor(
            None, wait_for_file, pid_file
        ))

        task.cancel()
        with pytest.raises(ScanCancelledError) as exc_info:
            await task

        assert not isinstance(exc_info.value, ScanTimeoutError)
        shell_pid = exc_info.value.details['pid']
        assert is_gone(shell_pid)
        assert is_gone(child_pid)

    @pytest.mark.asyncio
    async def test_timeout_terminates_process(self, runner):
        started = time.monotonic()

        with pytest.raises(ScanTimeoutError) as exc_info:
            await runner.run(bash("sleep 60"), timeout=0.5)

        assert exc_info.value.timeout_seconds == 0.5
        assert time.monotonic() - started < 30

    @pytest.mark.asyncio
    async def test_sigterm_ignoring_child_is_killed(self, echo_stream):
        runner = ProcessRunner(grace_period=0.5, echo_stream=echo_stream)

        with pytest.raises(ScanTimeoutError):
            await runner.run(bash("trap '' TERM; sleep 60"), timeout=0.5)


def test_echo_defaults_to_stdout(capsys):
    command = bash("true", secrets=["true"])

    ProcessRunner().echo(command)

    assert capsys.readouterr().out == "Running command: bash -c ******\n"


@pytest.mark.asyncio
async def test_cancellation_while_spawning(monkeypatch, echo_stream):
    spawning = asyncio.Event()

    async def slow_spawn(*args, **kwargs):
        spawning.set()
        await asyncio.sleep(60)

    monkeypatch.setattr("blackduck_plugin.tools.base.asyncio.create_subprocess_exec", slow_spawn)
    runner = ProcessRunner(echo_stream=echo_stream)

    task = asyncio.create_task(runner.run(bash("true")))
    await spawning.wait()
    task.cancel()

    with pytest.raises(ScanCancelledError) as exc_info:
        await task

    assert exc_info.value.error_code == "SCAN_CANCELLED"
