"""Post-run hooks.

A hook specification is a semicolon-separated list of commands, each a
pipe-separated list of argument tokens::

    notify-send|Trimmed|<output>;cp|${output}|/mnt/share/

Placeholders (``<name>`` or ``${name}``) are substituted before each run.
The only placeholder is ``output``, the produced file's full path. Hooks
run one after another, attached, and a failing hook does not stop the
ones after it. Each result is reported as its stderr, else the failure
(could not start, or a non-zero exit), else its stdout, else "no output".
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mediatrim.core.subprocess_utils import run_command

from .types import HookResult

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"<(\w+)>|\$\{(\w+)\}")
KNOWN_PLACEHOLDERS = frozenset({"output"})
NO_OUTPUT = "no output"


class HookSpecError(ValueError):
    """Raised when a hook specification is malformed."""

    pass


@dataclass(frozen=True)
class Hook:
    """One post-run command template."""

    tokens: tuple[str, ...]

    @property
    def label(self) -> str:
        """First token before substitution, used when reporting."""
        return self.tokens[0]

    def render(self, values: Mapping[str, str]) -> list[str]:
        """Substitute placeholders and drop tokens that end up empty."""
        rendered = (substitute(token, values) for token in self.tokens)
        return [token for token in rendered if token != ""]


def substitute(token: str, values: Mapping[str, str]) -> str:
    """Replace every known placeholder in a token.

    Unknown placeholders are left untouched.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        return values.get(name, match.group(0))

    return PLACEHOLDER_PATTERN.sub(_replace, token)


def parse_hooks(spec: str | None) -> tuple[Hook, ...]:
    """Parse a hook specification.

    Blank commands (e.g. from a trailing ``;``) are skipped. Surrounding
    whitespace is stripped from commands and tokens.

    Raises:
        HookSpecError: If a command has no program token or uses an
            unknown placeholder.
    """
    if spec is None:
        return ()
    if not isinstance(spec, str):
        raise HookSpecError(f"Hook specification must be a string, got {spec!r}")

    hooks: list[Hook] = []
    for position, command in enumerate(spec.split(";"), start=1):
        if not command.strip():
            continue
        tokens = tuple(token.strip() for token in command.split("|"))
        if not tokens[0]:
            raise HookSpecError(f"Hook {position} has no command: {command!r}")
        for token in tokens:
            for match in PLACEHOLDER_PATTERN.finditer(token):
                name = match.group(1) or match.group(2)
                if name not in KNOWN_PLACEHOLDERS:
                    raise HookSpecError(
                        f"Hook {position} uses unknown placeholder {match.group(0)}"
                    )
        hooks.append(Hook(tokens=tokens))
    return tuple(hooks)


def parse_hooks_lenient(spec: str | None) -> tuple[Hook, ...]:
    """Parse a hook specification, disabling hooks if it is malformed."""
    try:
        return parse_hooks(spec)
    except HookSpecError as e:
        logger.warning("Hooks disabled: %s", e)
        return ()


class HookEngine:
    """Runs hooks against a produced file."""

    def __init__(
        self,
        hooks: Iterable[Hook],
        run_fn: Callable[[list[str]], Any] = run_command,
    ) -> None:
        self.hooks = tuple(hooks)
        self._run_fn = run_fn

    def run(self, output_path: Path) -> list[HookResult]:
        """Run every hook in order and collect their results."""
        values = {"output": str(output_path)}
        return [self._run_one(hook, values) for hook in self.hooks]

    def _run_one(self, hook: Hook, values: Mapping[str, str]) -> HookResult:
        args = hook.render(values)
        if not args:
            return HookResult(hook.label, "error: empty command", success=False)

        logger.debug("Running hook %s: %s", hook.label, args)
        try:
            stdout, stderr, returncode = self._run_fn(args)
        except OSError as e:
            logger.warning("Hook %s could not be started: %s", hook.label, e)
            return HookResult(hook.label, f"error: {e}", success=False)

        success = returncode == 0
        if not success:
            logger.warning("Hook %s exited with status %s", hook.label, returncode)

        message = (stderr or "").strip()
        if not message and not success:
            message = f"error: {hook.label} exited with status {returncode}"
        message = message or (stdout or "").strip() or NO_OUTPUT
        return HookResult(hook.label, message, success=success)
