"""Pre-approve the assistant's trust dialog for new workspaces."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUST_ENTRY = {"hasTrustDialogAccepted": True}


class TrustConfigError(RuntimeError):
    """Raised when the trust config exists but cannot be read or rewritten."""


def grant_trust(workspace_path: Path, config_path: Path) -> bool:
    """Record ``workspace_path`` as trusted in ``config_path``.

    A missing config file is left alone. Existing project entries and any
    unrelated keys are preserved in their original order. Returns ``True``
    when a new entry was added.
    """

    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("Trust config %s not found, skipping", config_path)
        return False
    except OSError as exc:
        raise TrustConfigError(f"failed to read {config_path}: {exc}") from exc

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TrustConfigError(f"failed to parse {config_path}: {exc}") from exc
    if not isinstance(document, dict):
        raise TrustConfigError(f"{config_path} does not contain a JSON object")

    projects = document.get("projects")
    if not isinstance(projects, dict):
        projects = {}
        document["projects"] = projects

    key = str(workspace_path)
    added = key not in projects
    if added:
        projects[key] = dict(_TRUST_ENTRY)

    try:
        config_path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as exc:
        raise TrustConfigError(f"failed to write {config_path}: {exc}") from exc
    return added


__all__ = ["TrustConfigError", "grant_trust"]
