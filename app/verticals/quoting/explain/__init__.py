from __future__ import annotations

from .breakdown_builder import Breakdown, TrailEntry
from .formatter import (
    format_notices_header,
    format_steps_bullets,
    format_steps_bullets_text,
    format_steps_newlines,
)

__all__ = [
    "Breakdown",
    "TrailEntry",
    "format_notices_header",
    "format_steps_bullets",
    "format_steps_bullets_text",
    "format_steps_newlines",
]
