"""Errors raised by the workspace commands."""

from __future__ import annotations


class TaskError(RuntimeError):
    """Base class for failures of a workspace command."""


class InvalidTaskNameError(TaskError):
    """The task name is empty once sanitized."""


class NotARepositoryError(TaskError):
    """The command was run outside a git repository."""


class WorktreeError(TaskError):
    """git refused to create the worktree."""


class NoSelectionError(TaskError):
    """The user picked nothing in an interactive selection."""


__all__ = [
    "InvalidTaskNameError",
    "NoSelectionError",
    "NotARepositoryError",
    "TaskError",
    "WorktreeError",
]
