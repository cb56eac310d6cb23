"""Statusline rendering for the coding assistant's prompt bar."""

from .formatter import (
    StatusInputError,
    format_status_output,
    parse_status_input,
    render_statusline,
    replace_tilde,
    statusline,
)
from .models import StatusInput

__all__ = [
    "StatusInput",
    "StatusInputError",
    "format_status_output",
    "parse_status_input",
    "render_statusline",
    "replace_tilde",
    "statusline",
]
