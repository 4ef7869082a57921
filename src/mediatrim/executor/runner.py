"""Process runner for ffmpeg and ffprobe invocations.

Runs an external process either attached (block until exit, capture
output, classify the outcome) or detached (fire and forget), and
optionally persists each attached invocation to a diagnostic log.
"""

from __future__ import annotations

import logging
import shlex
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from mediatrim.config.models import TrimOptions
from mediatrim.core.subprocess_utils import run_command, spawn_detached
from mediatrim.domain import OutcomeKind

from .types import CommandOutcome

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Runs external commands and classifies their outcome.

    Classification of an attached run, first match wins:
    1. The run function returned something other than
       (stdout, stderr, returncode): internal error
    2. Non-empty stderr while stderr counts as an error: transcoder error
    3. The process could not be started or exited non-zero: invocation error
    4. Otherwise: success, with the elapsed time in the message
    """

    def __init__(
        self,
        options: TrimOptions,
        run_fn: Callable[[list[str]], Any] = run_command,
        spawn_fn: Callable[[list[str]], Any] = spawn_detached,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.options = options
        self._run_fn = run_fn
        self._spawn_fn = spawn_fn
        self._clock = clock

    def run(
        self,
        args: list[str],
        output_path: Path | None = None,
        detached: bool = False,
        log_path: Path | None = None,
        label: str = "ffmpeg",
        stderr_is_error: bool | None = None,
    ) -> CommandOutcome:
        """Run a command.

        Args:
            args: Full argument vector, executable first.
            output_path: File the command produces, for reporting.
            detached: Start the process and return without waiting.
            log_path: Diagnostic log file, written when options.write_log is
                set. Ignored for detached runs.
            label: Name used in error messages.
            stderr_is_error: Whether any stderr output means failure. None
                derives it from the configured ffmpeg verbosity.

        Returns:
            CommandOutcome describing the result.
        """
        if detached:
            return self._run_detached(args, output_path, label)

        if stderr_is_error is None:
            stderr_is_error = self.options.stderr_is_error

        start = self._clock()
        try:
            result = self._run_fn(args)
        except OSError as e:
            outcome = CommandOutcome(
                kind=OutcomeKind.INVOCATION_ERROR,
                message=f"error: {e}",
                output_path=output_path,
                elapsed_seconds=self._clock() - start,
            )
        else:
            outcome = self._classify(
                result, output_path, self._clock() - start, label, stderr_is_error
            )

        if outcome.success:
            logger.info("%s completed: %s", label, outcome.message)
        else:
            logger.warning("%s failed: %s", label, outcome.message)

        if log_path is not None and self.options.write_log:
            outcome = self._write_log(log_path, args, outcome)

        return outcome

    def _run_detached(
        self, args: list[str], output_path: Path | None, label: str
    ) -> CommandOutcome:
        try:
            pid = self._spawn_fn(args)
        except OSError as e:
            logger.warning("Could not start detached %s: %s", label, e)
            return CommandOutcome(
                kind=OutcomeKind.INVOCATION_ERROR,
                message=f"error: {e}",
                output_path=output_path,
            )

        logger.info("Started detached %s (pid %s)", label, pid)
        return CommandOutcome(
            kind=OutcomeKind.DETACHED,
            message=f"Running {label} detached. Output: {output_path}",
            output_path=output_path,
        )

    @staticmethod
    def _classify(
        result: Any,
        output_path: Path | None,
        elapsed: float,
        label: str,
        stderr_is_error: bool,
    ) -> CommandOutcome:
        if not (isinstance(result, tuple) and len(result) == 3):
            return CommandOutcome(
                kind=OutcomeKind.INTERNAL_ERROR,
                message=f"Unexpected result type: {type(result).__name__}",
                output_path=output_path,
                elapsed_seconds=elapsed,
            )

        stdout, stderr, returncode = result
        stderr_text = (stderr or "").strip()
        common = {
            "output_path": output_path,
            "elapsed_seconds": elapsed,
            "stdout": stdout or "",
            "stderr": stderr or "",
            "returncode": returncode,
        }

        if stderr_text and stderr_is_error:
            return CommandOutcome(
                kind=OutcomeKind.TRANSCODER_ERROR,
                message=f"{label} error: {stderr_text}",
                **common,
            )

        if returncode != 0:
            detail = stderr_text.splitlines()[-1] if stderr_text else ""
            message = f"error: {label} exited with status {returncode}"
            if detail:
                message = f"{message}: {detail}"
            return CommandOutcome(
                kind=OutcomeKind.INVOCATION_ERROR, message=message, **common
            )

        if output_path is not None:
            message = f"Output: {output_path} ({elapsed:.1f}s)"
        else:
            message = f"{label} finished ({elapsed:.1f}s)"
        return CommandOutcome(kind=OutcomeKind.SUCCESS, message=message, **common)

    @staticmethod
    def _write_log(
        log_path: Path, args: list[str], outcome: CommandOutcome
    ) -> CommandOutcome:
        """Append the invocation and its outcome to the diagnostic log.

        Write failures are recorded on the outcome, never raised.
        """
        timestamp = datetime.now(timezone.utc).isoformat()
        lines = [
            f"[{timestamp}] $ {shlex.join(args)}",
            f"outcome: {outcome.kind.value}",
            f"message: {outcome.message}",
        ]
        if outcome.elapsed_seconds is not None:
            lines.append(f"elapsed: {outcome.elapsed_seconds:.3f}s")
        if outcome.returncode is not None:
            lines.append(f"returncode: {outcome.returncode}")
        if outcome.stderr:
            lines.append("stderr:")
            lines.append(outcome.stderr.rstrip())
        lines.append("")

        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            with log_path.open("a", encoding="utf-8") as f:
                f.write("\n".join(lines) + "\n")
        except OSError as e:
            logger.warning("Could not write diagnostic log %s: %s", log_path, e)
            return replace(outcome, log_error=f"Could not write log {log_path}: {e}")

        logger.debug("Wrote diagnostic log %s", log_path)
        return outcome
