"""Open the task's changes in difit."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from .. import git
from ..process import CommandRunner, CommandRunnerError
from .errors import TaskError

BASE_BRANCH_VAR = "VIBE_BASE_BRANCH"
DIFIT = ("npx", "-y", "difit", "--include-untracked")


def review_diff(
    *,
    runner: CommandRunner | None = None,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> None:
    """Pipe ``git diff <base>...HEAD`` into difit, base taken from ``VIBE_BASE_BRANCH``."""

    runner = runner or CommandRunner()
    environ = os.environ if environ is None else environ
    base = environ.get(BASE_BRANCH_VAR, "")
    if not base:
        raise TaskError(f"{BASE_BRANCH_VAR} is not set. Run this command from a vibe worktree.")

    try:
        diff = git.diff_against(runner, base, cwd=cwd)
    except git.GitError as exc:
        raise TaskError(str(exc)) from exc

    try:
        result = runner.run(DIFIT, cwd=cwd, input=diff, interactive=True)
    except CommandRunnerError as exc:
        raise TaskError(f"failed to run difit: {exc}") from exc
    if not result.ok:
        raise TaskError(f"difit exited with status {result.returncode}")


__all__ = ["BASE_BRANCH_VAR", "review_diff"]
