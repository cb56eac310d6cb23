"""vibe: worktree-per-task helper and statusline formatter."""

__version__ = "0.1.0"

__all__ = ["__version__"]
