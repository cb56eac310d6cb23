"""Create a worktree for a new task and hand it to the coding assistant."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable

from .. import git, selector
from ..config import VibeSettings, get_settings
from ..process import CommandRunner, CommandRunnerError
from .errors import (
    InvalidTaskNameError,
    NoSelectionError,
    NotARepositoryError,
    TaskError,
    WorktreeError,
)
from .models import TaskWorkspace, sanitize_task_name, workspace_root
from .trust import TrustConfigError, grant_trust

logger = logging.getLogger(__name__)

ASSISTANT = "claude"
ENV_TOOL = "direnv"


def resolve_home(home: Path | None = None) -> Path:
    if home is not None:
        return home
    try:
        return Path.home()
    except RuntimeError as exc:
        raise TaskError(f"failed to get home directory: {exc}") from exc


def _require_task_name(task_name: str) -> str:
    sanitized = sanitize_task_name(task_name)
    if not sanitized:
        raise InvalidTaskNameError(f"invalid task name: {task_name!r}")
    return sanitized


def _plan(
    settings: VibeSettings,
    home: Path,
    repo_root: Path,
    repo_name: str,
    task_name: str,
    source_branch: str | None,
) -> TaskWorkspace:
    return TaskWorkspace(
        repo_root=repo_root,
        repo_name=repo_name,
        task_name=task_name,
        path=workspace_root(home, settings.workspaces_dir, repo_name) / task_name,
        branch=f"{settings.branch_prefix}{task_name}",
        source_branch=source_branch,
    )


def _warn(workspace: TaskWorkspace, message: str, *, label: str | None = None) -> None:
    if label:
        message = f"{label}: {message}"
    workspace.warnings.append(message)
    logger.warning(message)


def copy_files(repo_root: Path, destination: Path, files: Iterable[str]) -> list[str]:
    """Copy each existing file under ``repo_root`` to the same place under ``destination``.

    Missing sources are skipped. Returns a message per file that could not
    be copied.
    """

    failures: list[str] = []
    for relative in files:
        source = repo_root / relative
        if not source.is_file():
            continue
        target = destination / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as exc:
            failures.append(f"failed to copy {relative}: {exc}")
        else:
            logger.info("Copied %s", relative)
    return failures


def _allow_environment(runner: CommandRunner, workspace: TaskWorkspace, label: str | None) -> None:
    if not runner.is_installed(ENV_TOOL):
        _warn(workspace, f"{ENV_TOOL} not installed, skipping {ENV_TOOL} allow", label=label)
        return
    try:
        result = runner.run([ENV_TOOL, "allow"], cwd=workspace.path, stream_stderr=True)
    except CommandRunnerError as exc:
        _warn(workspace, f"{ENV_TOOL} allow failed: {exc}", label=label)
        return
    if not result.ok:
        _warn(workspace, f"{ENV_TOOL} allow exited with status {result.returncode}", label=label)


def _prepare(
    runner: CommandRunner,
    settings: VibeSettings,
    home: Path,
    workspace: TaskWorkspace,
    *,
    label: str | None = None,
) -> None:
    """Create the worktree and configure it; only the worktree step may raise."""

    logger.info("Creating worktree at %s", workspace.path)
    try:
        git.add_worktree(
            runner,
            workspace.repo_root,
            workspace.path,
            workspace.branch,
            workspace.source_branch,
        )
    except git.GitError as exc:
        raise WorktreeError(f"failed to create worktree: {exc}") from exc

    for failure in copy_files(workspace.repo_root, workspace.path, settings.files_to_copy):
        _warn(workspace, failure, label=label)

    _allow_environment(runner, workspace, label)

    try:
        grant_trust(workspace.path, settings.trust_config_path(home))
    except TrustConfigError as exc:
        _warn(workspace, f"failed to update claude config: {exc}", label=label)


def _launch_assistant(runner: CommandRunner, workspace: TaskWorkspace, base_branch: str) -> None:
    if not runner.is_installed(ASSISTANT):
        _warn(workspace, f"{ASSISTANT} not installed")
        return
    env = {"VIBE_BASE_BRANCH": base_branch} if base_branch else None
    try:
        result = runner.run(
            [ASSISTANT, f"/rename {workspace.task_name}"],
            cwd=workspace.path,
            interactive=True,
            env=env,
        )
    except CommandRunnerError as exc:
        _warn(workspace, f"failed to start {ASSISTANT}: {exc}")
        return
    if not result.ok:
        _warn(workspace, f"{ASSISTANT} exited with status {result.returncode}")


def create_task(
    task_name: str,
    source_branch: str | None = None,
    *,
    settings: VibeSettings | None = None,
    runner: CommandRunner | None = None,
    home: Path | None = None,
    cwd: Path | None = None,
) -> TaskWorkspace:
    """Create a worktree for ``task_name`` in the enclosing repository.

    The worktree lands in ``~/<workspaces_dir>/<repo>/<task>`` on a new
    ``<branch_prefix><task>`` branch, cut from ``source_branch`` when given
    and from HEAD otherwise. Auxiliary files are copied over, direnv and the
    assistant's trust dialog are pre-approved, and an assistant session is
    started in the new directory. Everything after the worktree itself is
    best-effort and reported through ``TaskWorkspace.warnings``.
    """

    settings = settings or get_settings()
    runner = runner or CommandRunner()
    sanitized = _require_task_name(task_name)

    try:
        repo_root = git.show_toplevel(runner, cwd)
    except git.GitError as exc:
        raise NotARepositoryError("not a git repository") from exc

    home = resolve_home(home)
    workspace = _plan(
        settings, home, repo_root, git.repo_name(runner, repo_root), sanitized, source_branch
    )
    base_branch = source_branch or git.current_branch(runner, repo_root)

    _prepare(runner, settings, home, workspace)
    _launch_assistant(runner, workspace, base_branch)
    return workspace


def create_task_multi(
    task_name: str,
    *,
    settings: VibeSettings | None = None,
    runner: CommandRunner | None = None,
    home: Path | None = None,
) -> list[TaskWorkspace]:
    """Create a worktree for ``task_name`` in each repository picked through ghq and fzf.

    A repository that fails is reported as a warning and skipped; the call
    only fails when no worktree could be created at all. No assistant
    session is started.
    """

    settings = settings or get_settings()
    runner = runner or CommandRunner()
    sanitized = _require_task_name(task_name)

    for tool in ("ghq", "fzf"):
        if not runner.is_installed(tool):
            raise TaskError(f"{tool} is not installed")

    try:
        repositories = selector.list_repositories(runner)
        selected = selector.select(
            runner, repositories, prompt="Select repositories (TAB to select): "
        )
    except selector.SelectorError as exc:
        raise TaskError(str(exc)) from exc
    if not selected:
        raise NoSelectionError("no repositories selected")

    home = resolve_home(home)
    created: list[TaskWorkspace] = []
    for entry in selected:
        repo_root = Path(entry)
        name = git.repo_name(runner, repo_root)
        workspace = _plan(settings, home, repo_root, name, sanitized, None)
        try:
            _prepare(runner, settings, home, workspace, label=name)
        except WorktreeError as exc:
            logger.warning("failed to create worktree for %s: %s", name, exc)
            continue
        logger.info("Created worktree: %s", workspace.path)
        created.append(workspace)

    if not created:
        raise TaskError("no worktrees were created")
    return created


__all__ = ["copy_files", "create_task", "create_task_multi", "resolve_home"]
