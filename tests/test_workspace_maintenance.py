from __future__ import annotations

import logging
from pathlib import Path

import pytest

from vibe.config import VibeSettings
from vibe.process import CommandResult, FakeCommandRunner
from vibe.workspace import (
    TaskError,
    WorktreeEntry,
    branch_of,
    cleanup_tasks,
    find_sibling_worktrees,
    review_diff,
)
from vibe.workspace.cleanup import current_task


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(args=(), returncode=0, stdout=stdout)


def make_tasks(home: Path, repo_name: str, *names: str) -> Path:
    root = home / ".vibe-workspaces" / repo_name
    for name in names:
        (root / name).mkdir(parents=True)
    return root


def cleanup_runner(repo: Path, root: Path, *, fzf: CommandResult) -> FakeCommandRunner:
    return FakeCommandRunner(
        [
            (("git", "rev-parse", "--show-toplevel"), ok(f"{repo}\n")),
            (("git", "-C", str(repo), "rev-parse", "--git-common-dir"), ok(".git\n")),
            (("git", "-C", str(root / "alpha"), "branch"), ok("feature/alpha\n")),
            (("git", "-C", str(root / "gamma"), "branch"), ok("")),
            (("fzf",), fzf),
        ]
    )


def test_current_task(tmp_path: Path) -> None:
    root = tmp_path / "ws" / "repo"

    assert current_task(root / "beta" / "src", root) == "beta"
    assert current_task(tmp_path / "elsewhere", root) is None
    assert current_task(root, root) is None


def test_cleanup_removes_selected_tasks(
    repo: Path, home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = make_tasks(home, "myrepo", "alpha", "beta", "gamma")
    fake = cleanup_runner(repo, root, fzf=ok("alpha\ngamma\n"))
    confirmed: list[list[WorktreeEntry]] = []

    def confirm(entries: list[WorktreeEntry]) -> bool:
        confirmed.append(entries)
        return True

    removed = cleanup_tasks(
        settings=VibeSettings(),
        runner=fake,
        home=home,
        cwd=root / "beta" / "src",
        confirm=confirm,
    )

    fzf = next(inv for inv in fake.invocations if inv.args[0] == "fzf")
    assert fzf.input == "alpha\ngamma\n"
    assert [entry.task_name for entry in removed] == ["alpha", "gamma"]
    assert [entry.branch for entry in confirmed[0]] == ["feature/alpha", ""]
    assert ("git", "-C", str(repo), "worktree", "remove", "--force", str(root / "alpha")) in fake.commands
    assert ("git", "-C", str(repo), "branch", "-D", "feature/alpha") in fake.commands
    assert ("git", "-C", str(repo), "worktree", "remove", "--force", str(root / "gamma")) in fake.commands
    assert not any(cmd[3:5] == ("branch", "-D") and cmd[-1] == "" for cmd in fake.commands)
    assert fake.commands[-1] == ("git", "-C", str(repo), "worktree", "prune")
    assert capsys.readouterr().out.endswith("Done\n")


def test_cleanup_aborts_without_confirmation(
    repo: Path, home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = make_tasks(home, "myrepo", "alpha")
    fake = cleanup_runner(repo, root, fzf=ok("alpha\n"))

    removed = cleanup_tasks(
        settings=VibeSettings(), runner=fake, home=home, cwd=repo, confirm=lambda entries: False
    )

    assert removed == []
    assert "Aborted" in capsys.readouterr().out
    assert not any("remove" in cmd for cmd in fake.commands)


def test_cleanup_without_tasks(repo: Path, home: Path, capsys: pytest.CaptureFixture[str]) -> None:
    fake = cleanup_runner(repo, home / ".vibe-workspaces" / "myrepo", fzf=ok())

    assert cleanup_tasks(settings=VibeSettings(), runner=fake, home=home, cwd=repo) == []
    assert capsys.readouterr().out == "No tasks found\n"


def test_cleanup_with_empty_selection(repo: Path, home: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = make_tasks(home, "myrepo", "alpha")
    fake = cleanup_runner(repo, root, fzf=CommandResult(args=(), returncode=130))

    assert cleanup_tasks(settings=VibeSettings(), runner=fake, home=home, cwd=repo) == []
    assert capsys.readouterr().out == "No tasks selected\n"


def test_find_sibling_worktrees(home: Path) -> None:
    make_tasks(home, "api", "login")
    make_tasks(home, "web", "login", "other")
    root = home / ".vibe-workspaces"
    fake = FakeCommandRunner(
        [
            (("git", "-C", str(root / "api" / "login")), ok("feature/login\n")),
            (("git", "-C", str(root / "web" / "login")), ok("feature/login\n")),
            (("git", "-C", str(root / "web" / "other")), ok("feature/other\n")),
        ]
    )

    matches = find_sibling_worktrees("feature/login", settings=VibeSettings(), runner=fake, home=home)

    assert [(match.repo_name, match.path) for match in matches] == [
        ("api", root / "api" / "login"),
        ("web", root / "web" / "login"),
    ]


def test_find_sibling_worktrees_skips_unreadable_repository(
    home: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    make_tasks(home, "api", "login")
    make_tasks(home, "web", "login")
    root = home / ".vibe-workspaces"
    locked = root / "api"
    real_iterdir = Path.iterdir

    def iterdir(self: Path):
        if self == locked:
            raise PermissionError(13, "Permission denied", str(self))
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", iterdir)
    fake = FakeCommandRunner([(("git",), ok("feature/login\n"))])

    with caplog.at_level(logging.WARNING):
        matches = find_sibling_worktrees("feature/login", settings=VibeSettings(), runner=fake, home=home)

    assert [match.path for match in matches] == [root / "web" / "login"]
    assert f"skipping {locked}" in caplog.text


def test_find_sibling_worktrees_without_workspaces(home: Path) -> None:
    assert find_sibling_worktrees("main", settings=VibeSettings(), runner=FakeCommandRunner(), home=home) == []


def test_branch_of_requires_branch(tmp_path: Path) -> None:
    with pytest.raises(TaskError, match="not on a git branch"):
        branch_of(FakeCommandRunner(), tmp_path)


def test_review_diff_requires_base_branch() -> None:
    with pytest.raises(TaskError, match="VIBE_BASE_BRANCH is not set"):
        review_diff(runner=FakeCommandRunner(), environ={})


def test_review_diff_pipes_into_difit() -> None:
    fake = FakeCommandRunner([(("git", "diff"), ok("diff --git a/x b/x\n"))])

    review_diff(runner=fake, environ={"VIBE_BASE_BRANCH": "main"})

    assert fake.commands[0] == ("git", "diff", "main...HEAD")
    difit = fake.invocations[1]
    assert difit.args == ("npx", "-y", "difit", "--include-untracked")
    assert difit.input == "diff --git a/x b/x\n"
    assert difit.interactive


def test_review_diff_reports_difit_failure() -> None:
    fake = FakeCommandRunner([(("npx",), CommandResult(args=(), returncode=1))])

    with pytest.raises(TaskError, match="difit exited with status 1"):
        review_diff(runner=fake, environ={"VIBE_BASE_BRANCH": "main"})
