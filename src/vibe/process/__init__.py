"""Subprocess orchestration for the external tools vibe drives."""

from .runner import (
    CommandNotFoundError,
    CommandResult,
    CommandRunner,
    CommandRunnerError,
    FakeCommandRunner,
)
from .utils import child_environment

__all__ = [
    "CommandNotFoundError",
    "CommandResult",
    "CommandRunner",
    "CommandRunnerError",
    "FakeCommandRunner",
    "child_environment",
]
