"""Subprocess-based process spawner."""

from __future__ import annotations

import asyncio
import os
import time

from simpler_prettier.logging import VERBOSE, get_logger
from simpler_prettier.terminal.protocol import LineCallback
from simpler_prettier.terminal.result import ProcessResult

log = get_logger("terminal")

# Reader buffer per pipe; longer lines are still read, in pieces of this size
STREAM_LIMIT = 1024 * 1024


def _emit(raw: bytes, sink: list[str], callback: LineCallback | None) -> None:
    line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
    sink.append(line)
    if callback is None:
        return
    try:
        callback(line)
    except Exception as e:
        log.error("Error in output line callback: %s", e)


async def _pump_lines(
    stream: asyncio.StreamReader | None,
    sink: list[str],
    callback: LineCallback | None,
) -> None:
    """Read a stream line by line, collecting and forwarding each line.

    A line longer than the reader limit is gathered piecewise and emitted once
    its newline (or EOF) arrives.
    """
    if stream is None:
        return
    pending = bytearray()
    while True:
        try:
            pending += await stream.readuntil(b"\n")
        except asyncio.LimitOverrunError as e:
            pending += await stream.read(e.consumed)
            continue
        except asyncio.IncompleteReadError as e:
            pending += e.partial
            if pending:
                _emit(bytes(pending), sink, callback)
            return
        _emit(bytes(pending), sink, callback)
        pending.clear()


async def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        pass  # Process already gone
    await process.wait()


class SubprocessSpawner:
    """Launch processes using asyncio subprocess.

    stdout and stderr are read concurrently, line by line, so callers can log
    formatter output as it arrives.
    """

    def __init__(self, default_cwd: str = ".") -> None:
        """Initialize the spawner.

        Args:
            default_cwd: Default working directory for processes.
        """
        self._default_cwd = default_cwd

    async def spawn(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        on_stdout: LineCallback | None = None,
        on_stderr: LineCallback | None = None,
    ) -> ProcessResult:
        """Run a process using asyncio subprocess.

        Returns:
            ProcessResult with execution details. Launch failures are reported
            through the result (127 not found, 126 permission denied, 1 other),
            never raised.

        Cancelling the calling task kills the child before the cancellation
        propagates.
        """
        start_time = time.perf_counter()

        cmd_list = [command]
        if args:
            cmd_list.extend(args)
        full_command = " ".join(cmd_list)

        working_dir = cwd or self._default_cwd

        process_env = os.environ.copy()
        if env:
            process_env.update(env)

        log.log(VERBOSE, "Spawning %s (cwd=%s)", full_command, working_dir)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd_list,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=working_dir,
                env=process_env,
                limit=STREAM_LIMIT,
            )
        except FileNotFoundError:
            return self._launch_failure(full_command, 127, f"Command not found: {command}", start_time)
        except PermissionError:
            return self._launch_failure(full_command, 126, f"Permission denied: {command}", start_time)
        except OSError as e:
            return self._launch_failure(full_command, 1, f"OS error: {e}", start_time)

        stdout_lines: list[str] = []
        stderr_lines: list[str] = []

        completion = asyncio.gather(
            _pump_lines(process.stdout, stdout_lines, on_stdout),
            _pump_lines(process.stderr, stderr_lines, on_stderr),
            process.wait(),
        )

        try:
            if timeout is not None:
                await asyncio.wait_for(completion, timeout=timeout)
            else:
                await completion
        except asyncio.CancelledError:
            log.debug("Spawn of %s cancelled, killing pid %s", full_command, process.pid)
            await _kill(process)
            raise
        except asyncio.TimeoutError:
            duration_ms = (time.perf_counter() - start_time) * 1000
            await _kill(process)

            return ProcessResult(
                command=full_command,
                exit_code=None,
                stdout="\n".join(stdout_lines),
                stderr=f"Command timed out after {timeout}s",
                status="timeout",
                signal="SIGKILL",
                duration_ms=duration_ms,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000
        exit_code = process.returncode

        if exit_code is not None and exit_code < 0:
            status = "killed"
            signal_name: str | None = f"signal {-exit_code}"
        else:
            status = "ok" if exit_code == 0 else "error"
            signal_name = None

        return ProcessResult(
            command=full_command,
            exit_code=exit_code,
            stdout="\n".join(stdout_lines),
            stderr="\n".join(stderr_lines),
            status=status,
            signal=signal_name,
            duration_ms=duration_ms,
        )

    @staticmethod
    def _launch_failure(
        full_command: str, exit_code: int, message: str, start_time: float
    ) -> ProcessResult:
        duration_ms = (time.perf_counter() - start_time) * 1000
        return ProcessResult(
            command=full_command,
            exit_code=exit_code,
            stdout="",
            stderr=message,
            status="error",
            signal=None,
            duration_ms=duration_ms,
        )
