"""Command-line entry point for vibe."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

from . import __version__
from .config import ConfigError, VibeSettings, configure_logging, get_settings
from .process import CommandRunner, CommandRunnerError
from .statusline import StatusInputError, statusline
from .workspace import (
    TaskError,
    branch_of,
    cleanup_tasks,
    create_task,
    create_task_multi,
    find_sibling_worktrees,
    review_diff,
)

USAGE = """\
vibe - A personal vibe coding tool

Usage:
  vibe <command> [options]

Commands:
  new [-b <branch>] [-m] <task>  Create a new worktree for a task
  cleanup                        Remove task worktrees of this repository
  repos                          List task worktrees on the current branch
  diff                           Review the task's changes with difit
  statusline                     Output statusline info from JSON input
  version                        Show version information

Options:
  -h, --help
        Show this help message
"""

NEW_USAGE = "Usage: vibe new [-b <branch>] [-m] <task-name>"

Handler = Callable[[list[str], VibeSettings, CommandRunner], int]


class UsageError(Exception):
    """Raised by the argument parser instead of exiting with status 2."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise UsageError(message)


def build_new_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="vibe new", description="Create a new worktree for a task")
    parser.add_argument("-b", "--branch", help="Branch or ref to start the task from (default: HEAD)")
    parser.add_argument(
        "-m",
        "--multi",
        action="store_true",
        help="Pick several ghq repositories with fzf and create the worktree in each",
    )
    parser.add_argument("task", nargs="?", help="Task name")
    return parser


def cmd_new(argv: list[str], settings: VibeSettings, runner: CommandRunner) -> int:
    try:
        args = build_new_parser().parse_args(argv)
    except UsageError as exc:
        print(f"vibe new: {exc}", file=sys.stderr)
        print(NEW_USAGE, file=sys.stderr)
        return 1
    if not args.task:
        print(NEW_USAGE, file=sys.stderr)
        return 1

    if args.multi:
        if args.branch:
            print("vibe new: --branch cannot be combined with --multi", file=sys.stderr)
            return 1
        for workspace in create_task_multi(args.task, settings=settings, runner=runner):
            print(f"Created worktree: {workspace.path}")
        return 0

    workspace = create_task(args.task, args.branch, settings=settings, runner=runner)
    print(f"Worktree created at {workspace.path}")
    print(f"Branch: {workspace.branch}")
    return 0


def cmd_statusline(argv: list[str], settings: VibeSettings, runner: CommandRunner) -> int:
    statusline(sys.stdin, sys.stdout, runner=runner)
    return 0


def cmd_cleanup(argv: list[str], settings: VibeSettings, runner: CommandRunner) -> int:
    cleanup_tasks(settings=settings, runner=runner)
    return 0


def cmd_repos(argv: list[str], settings: VibeSettings, runner: CommandRunner) -> int:
    branch = branch_of(runner, Path.cwd())
    matches = find_sibling_worktrees(branch, settings=settings, runner=runner)
    if not matches:
        print(f"No repositories found for branch: {branch}")
        return 0
    for match in matches:
        print(f"{match.repo_name}\t{match.path}")
    return 0


def cmd_diff(argv: list[str], settings: VibeSettings, runner: CommandRunner) -> int:
    review_diff(runner=runner)
    return 0


def cmd_version(argv: list[str], settings: VibeSettings, runner: CommandRunner) -> int:
    print(f"vibe version {__version__}")
    return 0


COMMANDS: dict[str, Handler] = {
    "new": cmd_new,
    "statusline": cmd_statusline,
    "cleanup": cmd_cleanup,
    "repos": cmd_repos,
    "diff": cmd_diff,
    "version": cmd_version,
}

# Commands that run without loading the user configuration.
SETTINGS_FREE_COMMANDS = frozenset({"statusline", "version"})


def main(
    argv: list[str] | None = None,
    *,
    settings: VibeSettings | None = None,
    runner: CommandRunner | None = None,
) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] in {"-h", "--help", "help"}:
        print(USAGE, end="", file=sys.stderr)
        return 0

    command, rest = args[0], args[1:]
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"Unknown command: {command}", file=sys.stderr)
        print(USAGE, end="", file=sys.stderr)
        return 1

    if settings is None and command in SETTINGS_FREE_COMMANDS:
        settings = VibeSettings.model_construct()
    try:
        settings = settings or get_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)

    try:
        return handler(rest, settings, runner or CommandRunner())
    except (TaskError, StatusInputError, CommandRunnerError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
