"""
External process execution.

Runs the renderer as a child process and collects everything it produces.
Exit codes are returned, never raised: deciding what counts as failure is
the pipeline's job.
"""

import subprocess
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from wkpdf.contexts.rendering.exceptions import RenderTimeoutError, SpawnError
from wkpdf.contexts.rendering.logger import _log_debug, _log_warning


@dataclass
class ProcessResult:
    """
    Result of one external invocation.

    Attributes:
        stdout: Raw standard output (PDF bytes for a render)
        stderr: Standard error, decoded as UTF-8 with replacement
        returncode: Exit status of the child
        elapsed_s: Wall time from spawn to exit
    """

    stdout: bytes
    stderr: str
    returncode: int
    elapsed_s: float = 0.0


def run_process(
    command: Sequence[str],
    stdin: bytes = b"",
    timeout: Optional[float] = None,
) -> ProcessResult:
    """
    Run a command to completion and capture its output.

    stdin is written while stdout and stderr are drained concurrently
    (Popen.communicate), so a child that fills its output pipes before
    reading all of its input cannot deadlock against us.

    Args:
        command: Argument vector; passed directly to the OS, never via a shell
        stdin: Bytes to feed to the child's standard input (closed afterwards)
        timeout: Seconds to wait before killing the child (None = no limit)

    Returns:
        ProcessResult with stdout, stderr and exit status

    Raises:
        SpawnError: If the executable cannot be launched
        RenderTimeoutError: If the deadline expires (child is killed first)
    """
    command = [str(part) for part in command]
    start_time = time.time()

    try:
        proc = subprocess.Popen(
            command,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        # FileNotFoundError, PermissionError, exec format errors, ...
        raise SpawnError(command, original_error=e) from e

    _log_debug(f"Spawned pid {proc.pid}: {command[0]}")

    try:
        stdout, stderr = proc.communicate(input=stdin, timeout=timeout)
    except subprocess.TimeoutExpired:
        proc.kill()
        # Reap the child and close its pipes
        proc.communicate()
        _log_warning(f"Killed pid {proc.pid} after {timeout:g}s")
        raise RenderTimeoutError(command, timeout)

    elapsed_s = time.time() - start_time
    _log_debug(f"pid {proc.pid} exited with {proc.returncode} ({elapsed_s:.2f}s)")

    return ProcessResult(
        stdout=stdout,
        stderr=stderr.decode("utf-8", errors="replace"),
        returncode=proc.returncode,
        elapsed_s=elapsed_s,
    )
