"""Subprocess utilities for external tool invocation.

This module provides the subprocess wrappers used for every invocation of
ffmpeg, ffprobe and user hooks: attached runs that block until the process
exits, and detached runs that are never waited on.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def run_command(
    args: list[str | Path],
    timeout: float | None = None,
    errors: str = "replace",
    **kwargs: Any,
) -> tuple[str, str, int]:
    """Run external command and wait for it to exit.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds. None waits indefinitely.
        errors: Error handling mode for text decoding (default "replace").
        **kwargs: Additional subprocess.run arguments.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        OSError: If the executable cannot be started.
        subprocess.TimeoutExpired: If a timeout was given and expired.
    """
    str_args = [str(arg) for arg in args]
    command_name = str_args[0].split("/")[-1] if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()
    result = subprocess.run(  # nosec B603 - args are built from options
        str_args,
        capture_output=True,
        text=True,
        errors=errors,
        timeout=timeout,
        **kwargs,
    )

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": result.returncode,
        },
    )

    return result.stdout or "", result.stderr or "", result.returncode


def spawn_detached(args: list[str | Path]) -> int:
    """Start an external command without waiting for it.

    The child runs in its own session with its standard streams discarded,
    so it survives the caller and its outcome is never observed.

    Returns:
        The child's process id.

    Raises:
        OSError: If the executable cannot be started.
    """
    str_args = [str(arg) for arg in args]
    logger.debug("Spawning detached command: %s", " ".join(str_args))

    process = subprocess.Popen(  # nosec B603 - args are built from options
        str_args,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )
    return process.pid
