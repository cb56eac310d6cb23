"""Repository listing via ghq and interactive picking via fzf."""

from __future__ import annotations

from typing import Iterable

from .process import CommandRunner, CommandRunnerError

# fzf exits 1 when nothing matched and 130 when the user hit Ctrl-C / Esc.
_NO_SELECTION_CODES = {1, 130}


class SelectorError(RuntimeError):
    """Raised when ghq or fzf fail for reasons other than an empty pick."""


def list_repositories(runner: CommandRunner) -> list[str]:
    """Full paths of every repository ghq manages."""

    try:
        result = runner.run(["ghq", "list", "--full-path"])
    except CommandRunnerError as exc:
        raise SelectorError(f"failed to run ghq: {exc}") from exc
    if not result.ok:
        raise SelectorError(f"failed to run ghq: {result.stderr.strip() or result.returncode}")
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def select(
    runner: CommandRunner,
    choices: Iterable[str],
    *,
    prompt: str,
) -> list[str]:
    """Let the user pick any number of ``choices`` with fzf; an empty list means no pick."""

    items = [choice for choice in choices if choice]
    if not items:
        return []

    try:
        result = runner.run(
            ["fzf", "--multi", "--prompt", prompt],
            input="\n".join(items) + "\n",
            stream_stderr=True,
        )
    except CommandRunnerError as exc:
        raise SelectorError(f"fzf error: {exc}") from exc
    if result.returncode in _NO_SELECTION_CODES:
        return []
    if not result.ok:
        raise SelectorError(f"fzf error: exit status {result.returncode}")
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


__all__ = ["SelectorError", "list_repositories", "select"]
