"""Trim executor.

Ties the pieces together for one trim request: select tracks, resolve the
output size, build filters, assemble the ffmpeg command, run it, and run
hooks when it succeeded attached.
"""

from __future__ import annotations

import logging
import shlex
import uuid
from collections.abc import Callable
from pathlib import Path

from mediatrim.config.models import TrimOptions
from mediatrim.domain import (
    HostState,
    TrimMode,
    TrimRequest,
    TrimValidationError,
)
from mediatrim.logging.context import trim_context

from .command import build_ffmpeg_command, format_output_path, resolve_extension
from .filters import FilterGraphBuilder
from .hooks import HookEngine
from .runner import ProcessRunner
from .size import resolve_size
from .tracks import select_tracks
from .types import BuildContext, TrimResult

logger = logging.getLogger(__name__)

MISSING_RANGE_MESSAGE = "A-B loop not defined."


def _log_report(message: str) -> None:
    logger.info(message)


def diagnostic_log_path(options: TrimOptions, ctx: BuildContext) -> Path:
    """Diagnostic log file for an output, next to it by default."""
    directory = options.log_dir or ctx.output_path.parent
    return directory / f"{ctx.output_path.name}.log"


class TrimExecutor:
    """Executes trim requests against a host state."""

    def __init__(
        self,
        options: TrimOptions,
        runner: ProcessRunner | None = None,
        hook_engine: HookEngine | None = None,
        report: Callable[[str], None] | None = None,
        dry_run: bool = False,
        burn_subtitles: bool | None = None,
    ) -> None:
        """Initialize the trim executor.

        Args:
            options: Resolved options.
            runner: Process runner (None = default runner for options).
            hook_engine: Hook engine (None = hooks parsed from options).
            report: Callback receiving user-facing status messages.
            dry_run: Build commands without running anything.
            burn_subtitles: Override options.burn_subtitles.
        """
        self.options = options
        self.runner = runner or ProcessRunner(options)
        self.hook_engine = hook_engine or HookEngine(options.parsed_hooks)
        self.report = report or _log_report
        self.dry_run = dry_run
        self.burn_subtitles = burn_subtitles

    def create_context(self, host: HostState, request: TrimRequest) -> BuildContext:
        """Build the context for a request, running any intermediate steps.

        Raises:
            TrimValidationError: If the request's range is invalid.
        """
        request.validate()

        ext = resolve_extension(self.options, host.path)
        output_path = format_output_path(
            host.path, request.start, request.end, ext, self.options.output_dir
        )
        ctx = BuildContext(
            input_path=host.path,
            output_path=output_path,
            start=request.start,
            end=request.end,
            ext=ext,
        )

        source = host.geometry
        hint = self.options.parsed_size_hint
        if hint is not None:
            ctx.size = resolve_size(hint, source)
            ctx.size_changed = ctx.size is not None and ctx.size != source

        selected = select_tracks(host.tracks)
        builder = FilterGraphBuilder(self.options, self.runner, dry_run=self.dry_run)
        builder.build(
            ctx,
            selected,
            request.mode,
            channel_layout=host.channel_layout,
            burn_subtitles=self.burn_subtitles,
        )
        return ctx

    def execute(self, host: HostState, request: TrimRequest) -> TrimResult:
        """Run one trim request.

        Validation failures are reported and returned as a rejected result
        without spawning any process.
        """
        trim_id = uuid.uuid4().hex[:8]
        with trim_context(trim_id, host.path):
            try:
                ctx = self.create_context(host, request)
                command = build_ffmpeg_command(ctx, self.options)
            except TrimValidationError as e:
                self.report(str(e))
                return TrimResult(rejected=str(e))

            result = TrimResult(command=command, notices=list(ctx.notices))
            for notice in ctx.notices:
                self.report(notice)

            if self.dry_run:
                self.report(shlex.join(command))
                return result

            self.report(f"Running... {request.mode.describe()}")
            outcome = self.runner.run(
                command,
                output_path=ctx.output_path,
                detached=request.mode.detached,
                log_path=diagnostic_log_path(self.options, ctx),
            )
            result.outcome = outcome
            self.report(outcome.message)
            if outcome.log_error:
                self.report(outcome.log_error)

            if outcome.success and not request.mode.detached:
                result.hook_results = self.hook_engine.run(ctx.output_path)
                for hook_result in result.hook_results:
                    self.report(str(hook_result))

            return result

    def trim_loop(self, host: HostState, mode: TrimMode) -> TrimResult:
        """Trim the host's A-B range, if one is defined."""
        if not host.has_trim_range:
            self.report(MISSING_RANGE_MESSAGE)
            return TrimResult(rejected=MISSING_RANGE_MESSAGE)
        request = TrimRequest(start=host.loop_start, end=host.loop_end, mode=mode)
        return self.execute(host, request)
