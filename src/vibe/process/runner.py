"""Synchronous runner for the external command-line tools."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from .utils import child_environment

logger = logging.getLogger(__name__)


class CommandRunnerError(RuntimeError):
    """Base class for command runner errors."""


class CommandNotFoundError(CommandRunnerError):
    """Raised when an executable cannot be located."""


@dataclass(slots=True)
class CommandResult:
    """Holds the outcome of a subprocess invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Execute external commands, blocking until each one exits.

    ``interactive`` runs attach the child to the current terminal (stdin,
    stdout and stderr are inherited) and nothing is captured.
    ``stream_stderr`` captures stdout only and lets stderr through, which
    suits tools like fzf or git whose diagnostics belong on the terminal.
    """

    def __init__(self, search_path: str | None = None) -> None:
        self._search_path = search_path

    def which(self, name: str) -> Path | None:
        binary = shutil.which(name, path=self._search_path)
        return Path(binary) if binary else None

    def is_installed(self, name: str) -> bool:
        return self.which(name) is not None

    def require(self, name: str) -> Path:
        binary = self.which(name)
        if binary is None:
            raise CommandNotFoundError(f"{name} is not installed")
        return binary

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | str | None = None,
        input: str | None = None,
        interactive: bool = False,
        stream_stderr: bool = False,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        cmd = tuple(str(arg) for arg in args)
        if not cmd:
            raise CommandRunnerError("No command given")
        logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd or ".")
        try:
            return self._invoke(
                cmd,
                cwd=cwd,
                input=input,
                interactive=interactive,
                stream_stderr=stream_stderr,
                env=env,
            )
        except FileNotFoundError as exc:
            raise CommandNotFoundError(f"{cmd[0]} executable not found on PATH") from exc
        except OSError as exc:
            raise CommandRunnerError(f"Failed to run {cmd[0]}: {exc}") from exc

    def _invoke(
        self,
        cmd: tuple[str, ...],
        *,
        cwd: Path | str | None,
        input: str | None,
        interactive: bool,
        stream_stderr: bool,
        env: Mapping[str, str] | None,
    ) -> CommandResult:
        if cwd is not None and not Path(cwd).is_dir():
            raise CommandRunnerError(f"Working directory does not exist: {cwd}")
        process = subprocess.run(
            list(cmd),
            cwd=str(cwd) if cwd is not None else None,
            input=input,
            stdout=None if interactive else subprocess.PIPE,
            stderr=None if interactive or stream_stderr else subprocess.PIPE,
            env=child_environment(env),
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        return CommandResult(
            args=cmd,
            returncode=process.returncode,
            stdout=process.stdout or "",
            stderr=process.stderr or "",
        )


@dataclass(slots=True)
class Invocation:
    """A command recorded by :class:`FakeCommandRunner`."""

    args: tuple[str, ...]
    cwd: str | None
    input: str | None
    interactive: bool
    env: dict[str, str] = field(default_factory=dict)


class FakeCommandRunner(CommandRunner):
    """Test double that answers commands from scripted prefix rules.

    ``responses`` pairs an argument prefix with the result to return; the
    first matching rule wins and unmatched commands succeed with empty
    output. ``installed`` limits which executables :meth:`which` reports,
    ``None`` meaning every executable is available.
    """

    def __init__(
        self,
        responses: Iterable[tuple[Sequence[str], CommandResult]] | None = None,
        *,
        installed: Iterable[str] | None = None,
    ) -> None:
        super().__init__()
        self._responses = [(tuple(prefix), result) for prefix, result in (responses or [])]
        self._installed = set(installed) if installed is not None else None
        self._invocations: list[Invocation] = []

    def which(self, name: str) -> Path | None:
        if self._installed is not None and name not in self._installed:
            return None
        return Path("/usr/bin") / name

    def _invoke(
        self,
        cmd: tuple[str, ...],
        *,
        cwd: Path | str | None,
        input: str | None,
        interactive: bool,
        stream_stderr: bool,
        env: Mapping[str, str] | None,
    ) -> CommandResult:
        self._invocations.append(
            Invocation(
                args=cmd,
                cwd=str(cwd) if cwd is not None else None,
                input=input,
                interactive=interactive,
                env=dict(env or {}),
            )
        )
        if self._installed is not None and cmd[0] not in self._installed:
            raise FileNotFoundError(cmd[0])
        for prefix, result in self._responses:
            if cmd[: len(prefix)] == prefix:
                return replace(result, args=cmd)
        return CommandResult(args=cmd, returncode=0)

    @property
    def invocations(self) -> list[Invocation]:
        return self._invocations

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [invocation.args for invocation in self._invocations]
