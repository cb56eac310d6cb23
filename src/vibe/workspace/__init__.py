"""Task workspaces: creation, trust setup, discovery and cleanup."""

from .cleanup import cleanup_tasks
from .create import copy_files, create_task, create_task_multi
from .discovery import branch_of, find_sibling_worktrees
from .errors import (
    InvalidTaskNameError,
    NoSelectionError,
    NotARepositoryError,
    TaskError,
    WorktreeError,
)
from .models import TaskWorkspace, WorktreeEntry, sanitize_task_name
from .review import review_diff
from .trust import TrustConfigError, grant_trust

__all__ = [
    "InvalidTaskNameError",
    "NoSelectionError",
    "NotARepositoryError",
    "TaskError",
    "TaskWorkspace",
    "TrustConfigError",
    "WorktreeEntry",
    "WorktreeError",
    "branch_of",
    "cleanup_tasks",
    "copy_files",
    "create_task",
    "create_task_multi",
    "find_sibling_worktrees",
    "grant_trust",
    "review_diff",
    "sanitize_task_name",
]
