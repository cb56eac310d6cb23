"""Thin wrappers around the git commands vibe relies on."""

from __future__ import annotations

from pathlib import Path

from .process import CommandRunner, CommandRunnerError


class GitError(RuntimeError):
    """Raised when a git command fails."""


def _git(
    runner: CommandRunner,
    *args: str,
    cwd: Path | None = None,
    stream_stderr: bool = False,
    strip: bool = True,
) -> str:
    try:
        result = runner.run(["git", *args], cwd=cwd, stream_stderr=stream_stderr)
    except CommandRunnerError as exc:
        raise GitError(str(exc)) from exc
    if not result.ok:
        detail = result.stderr.strip() or f"exit status {result.returncode}"
        raise GitError(f"git {' '.join(args)} failed: {detail}")
    return result.stdout.strip() if strip else result.stdout


def show_toplevel(runner: CommandRunner, cwd: Path | None = None) -> Path:
    """Return the top-level directory of the repository enclosing ``cwd``."""

    return Path(_git(runner, "rev-parse", "--show-toplevel", cwd=cwd))


def common_dir(runner: CommandRunner, repo_root: Path) -> Path:
    """Return the absolute shared ``.git`` directory, also for linked worktrees."""

    output = _git(runner, "-C", str(repo_root), "rev-parse", "--git-common-dir")
    if not output:
        raise GitError("git rev-parse --git-common-dir returned no path")
    git_dir = Path(output)
    if not git_dir.is_absolute():
        git_dir = repo_root / git_dir
    return git_dir


def repo_name(runner: CommandRunner, repo_root: Path) -> str:
    """Name of the repository, stable across all of its worktrees.

    The parent of the common git directory is the main checkout, so a task
    started from inside another task's worktree still files under the same
    repository. Falls back to the top-level directory name.
    """

    try:
        name = common_dir(runner, repo_root).parent.name
    except GitError:
        name = ""
    return name or repo_root.name


def current_branch(runner: CommandRunner, directory: str | Path | None) -> str:
    """Checked-out branch of ``directory``; empty for detached HEAD or any failure."""

    if not directory:
        return ""
    try:
        return _git(runner, "-C", str(directory), "branch", "--show-current")
    except GitError:
        return ""


def add_worktree(
    runner: CommandRunner,
    repo_root: Path,
    path: Path,
    branch: str,
    source_branch: str | None = None,
) -> None:
    args = ["-C", str(repo_root), "worktree", "add", "-b", branch, str(path)]
    if source_branch:
        args.append(source_branch)
    _git(runner, *args, stream_stderr=True)


def remove_worktree(runner: CommandRunner, repo_root: Path, path: Path) -> None:
    _git(runner, "-C", str(repo_root), "worktree", "remove", "--force", str(path))


def delete_branch(runner: CommandRunner, repo_root: Path, branch: str) -> None:
    _git(runner, "-C", str(repo_root), "branch", "-D", branch)


def prune_worktrees(runner: CommandRunner, repo_root: Path) -> None:
    _git(runner, "-C", str(repo_root), "worktree", "prune")


def diff_against(runner: CommandRunner, base: str, cwd: Path | None = None) -> str:
    """Changes on HEAD since it diverged from ``base``."""

    return _git(runner, "diff", f"{base}...HEAD", cwd=cwd, strip=False)


__all__ = [
    "GitError",
    "add_worktree",
    "common_dir",
    "current_branch",
    "delete_branch",
    "diff_against",
    "prune_worktrees",
    "remove_worktree",
    "repo_name",
    "show_toplevel",
]
