"""Find task worktrees in other repositories that share the current branch."""

from __future__ import annotations

import logging
from pathlib import Path

from .. import git
from ..config import VibeSettings, get_settings
from ..process import CommandRunner
from .create import resolve_home
from .errors import TaskError
from .models import WorktreeEntry

logger = logging.getLogger(__name__)


def branch_of(runner: CommandRunner, cwd: Path) -> str:
    branch = git.current_branch(runner, cwd)
    if not branch:
        raise TaskError("not on a git branch")
    return branch


def find_sibling_worktrees(
    branch: str,
    *,
    settings: VibeSettings | None = None,
    runner: CommandRunner | None = None,
    home: Path | None = None,
) -> list[WorktreeEntry]:
    """Every ``<workspaces_dir>/<repo>/<task>`` worktree currently on ``branch``."""

    settings = settings or get_settings()
    runner = runner or CommandRunner()
    root = resolve_home(home) / settings.workspaces_dir
    if not root.is_dir():
        return []

    matches: list[WorktreeEntry] = []
    for repo_dir in sorted(path for path in root.iterdir() if path.is_dir()):
        try:
            task_dirs = sorted(path for path in repo_dir.iterdir() if path.is_dir())
        except OSError as exc:
            logger.warning("skipping %s: %s", repo_dir, exc)
            continue
        for task_dir in task_dirs:
            if git.current_branch(runner, task_dir) == branch:
                matches.append(
                    WorktreeEntry(
                        repo_name=repo_dir.name,
                        task_name=task_dir.name,
                        path=task_dir,
                        branch=branch,
                    )
                )
    return matches


__all__ = ["branch_of", "find_sibling_worktrees"]
