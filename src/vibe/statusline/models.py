"""Input models for the statusline command."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class ModelInfo(BaseModel):
    display_name: str = Field(default="", description="Human-friendly model name.")

    @field_validator("display_name", mode="before")
    @classmethod
    def _null_as_blank(cls, value: Any):  # type: ignore[override]
        return "" if value is None else value


class WorkspaceInfo(BaseModel):
    current_dir: str = Field(default="", description="Directory the session is working in.")

    @field_validator("current_dir", mode="before")
    @classmethod
    def _null_as_blank(cls, value: Any):  # type: ignore[override]
        return "" if value is None else value


class ContextWindow(BaseModel):
    # Numbers only; a quoted "25" is rejected instead of read as 25%.
    used_percentage: float | None = Field(
        default=None,
        strict=True,
        description="Share of the context window in use; absent when unknown.",
    )


class StatusInput(BaseModel):
    """Session snapshot piped to the statusline command as JSON."""

    model: ModelInfo = Field(default_factory=ModelInfo)
    workspace: WorkspaceInfo = Field(default_factory=WorkspaceInfo)
    context_window: ContextWindow = Field(default_factory=ContextWindow)

    @field_validator("model", "workspace", "context_window", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any):  # type: ignore[override]
        return {} if value is None else value


__all__ = ["ContextWindow", "ModelInfo", "StatusInput", "WorkspaceInfo"]
