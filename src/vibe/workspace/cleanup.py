"""Remove finished task worktrees together with their branches."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from .. import git, selector
from ..config import VibeSettings, get_settings
from ..process import CommandRunner
from .create import resolve_home
from .errors import NotARepositoryError, TaskError
from .models import WorktreeEntry, workspace_root

logger = logging.getLogger(__name__)

Confirm = Callable[[list[WorktreeEntry]], bool]


def list_task_dirs(root: Path) -> list[str]:
    if not root.is_dir():
        return []
    return sorted(entry.name for entry in root.iterdir() if entry.is_dir())


def current_task(cwd: Path, root: Path) -> str | None:
    """Name of the task whose workspace contains ``cwd``, if any."""

    try:
        relative = cwd.relative_to(root)
    except ValueError:
        return None
    return relative.parts[0] if relative.parts else None


def prompt_confirmation(entries: list[WorktreeEntry]) -> bool:
    print("The following tasks will be deleted:")
    for entry in entries:
        print(f"  - {entry.task_name} (branch: {entry.branch})")
    try:
        answer = input("Are you sure? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def cleanup_tasks(
    *,
    settings: VibeSettings | None = None,
    runner: CommandRunner | None = None,
    home: Path | None = None,
    cwd: Path | None = None,
    confirm: Confirm = prompt_confirmation,
) -> list[WorktreeEntry]:
    """Interactively pick task worktrees of the current repository and delete them.

    The task the caller is standing in is never offered. Returns the
    entries that were removed.
    """

    settings = settings or get_settings()
    runner = runner or CommandRunner()
    cwd = cwd or Path.cwd()

    try:
        repo_root = git.show_toplevel(runner, cwd)
    except git.GitError as exc:
        raise NotARepositoryError("not a git repository") from exc
    repo_name = git.repo_name(runner, repo_root)
    root = workspace_root(resolve_home(home), settings.workspaces_dir, repo_name)

    tasks = list_task_dirs(root)
    if not tasks:
        print("No tasks found")
        return []

    active = current_task(cwd, root)
    available = [task for task in tasks if task != active]
    if not available:
        print("No tasks available for cleanup (only current task exists)")
        return []

    try:
        picked = selector.select(runner, available, prompt="Select tasks to delete> ")
    except selector.SelectorError as exc:
        raise TaskError(str(exc)) from exc
    if not picked:
        print("No tasks selected")
        return []

    entries = [
        WorktreeEntry(
            repo_name=repo_name,
            task_name=name,
            path=root / name,
            branch=git.current_branch(runner, root / name),
        )
        for name in picked
    ]
    if not confirm(entries):
        print("Aborted")
        return []

    for entry in entries:
        print(f"Removing {entry.task_name}...")
        try:
            git.remove_worktree(runner, repo_root, entry.path)
        except git.GitError as exc:
            logger.warning("failed to remove worktree %s: %s", entry.path, exc)
        if entry.branch:
            try:
                git.delete_branch(runner, repo_root, entry.branch)
            except git.GitError as exc:
                logger.warning("failed to delete branch %s: %s", entry.branch, exc)

    try:
        git.prune_worktrees(runner, repo_root)
    except git.GitError as exc:
        logger.warning("failed to prune worktrees: %s", exc)

    print("Done")
    return entries


__all__ = ["cleanup_tasks", "current_task", "list_task_dirs", "prompt_confirmation"]
