"""Utility helpers for the command runner."""

from __future__ import annotations

import os
from typing import Mapping


def child_environment(additional: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return the caller's environment with ``additional`` variables layered on top."""

    env = dict(os.environ)
    if additional:
        env.update(additional)
    return env
