"""Task naming and the workspace record produced by task creation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

_INVALID_RUN = re.compile(r"[^A-Za-z0-9_-]+")


def sanitize_task_name(name: str) -> str:
    """Reduce ``name`` to ``[A-Za-z0-9_-]``, collapsing other runs to one dash."""

    return _INVALID_RUN.sub("-", name.strip()).strip("-")


@dataclass(slots=True)
class TaskWorkspace:
    """A worktree created for one task in one repository."""

    repo_root: Path
    repo_name: str
    task_name: str
    path: Path
    branch: str
    source_branch: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass(slots=True)
class WorktreeEntry:
    """An existing task worktree on disk."""

    repo_name: str
    task_name: str
    path: Path
    branch: str


def workspace_root(home: Path, workspaces_dir: str, repo_name: str) -> Path:
    """Directory holding every task workspace of ``repo_name``."""

    return home / workspaces_dir / repo_name


__all__ = ["TaskWorkspace", "WorktreeEntry", "sanitize_task_name", "workspace_root"]
