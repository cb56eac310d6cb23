"""Format the one-line session summary."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from pydantic import ValidationError

from .. import git
from ..process import CommandRunner
from .models import StatusInput


class StatusInputError(ValueError):
    """Raised when the statusline input is not a valid JSON object."""


def parse_status_input(raw: str) -> StatusInput:
    try:
        return StatusInput.model_validate_json(raw)
    except ValidationError as exc:
        raise StatusInputError(f"failed to parse statusline input: {exc}") from exc


def replace_tilde(path: str, home: str) -> str:
    if home and path.startswith(home):
        return "~" + path[len(home):]
    return path


def format_status_output(
    model: str,
    cwd: str,
    branch: str | None = None,
    used_percentage: float | None = None,
) -> str:
    parts = [f"🤖 {model}", f"📁 {cwd}"]
    if branch:
        parts.append(f"🌿 {branch}")
    if used_percentage is not None:
        parts.append(f"💭 {used_percentage:.0f}%")
    return " | ".join(parts)


def _home() -> str:
    try:
        return str(Path.home())
    except RuntimeError:
        return ""


def render_statusline(
    status: StatusInput,
    *,
    home: str | None = None,
    runner: CommandRunner | None = None,
) -> str:
    """Build the statusline for ``status``, looking up the branch of its directory."""

    runner = runner or CommandRunner()
    home = _home() if home is None else home
    current_dir = status.workspace.current_dir
    return format_status_output(
        status.model.display_name,
        replace_tilde(current_dir, home),
        git.current_branch(runner, current_dir),
        status.context_window.used_percentage,
    )


def statusline(
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    *,
    home: str | None = None,
    runner: CommandRunner | None = None,
) -> None:
    """Read a status record from ``stdin`` and write one line to ``stdout``."""

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    status = parse_status_input(stdin.read())
    stdout.write(render_statusline(status, home=home, runner=runner) + "\n")


__all__ = [
    "StatusInputError",
    "format_status_output",
    "parse_status_input",
    "render_statusline",
    "replace_tilde",
    "statusline",
]
