"""
Domain models for browsing Claude Code sessions.

Separation of concerns:
- schemas/session.py: JSONL record representations (parsing)
- models.py: summaries and display models built from those records (this file)
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import Field

from cclog.base_model import StrictModel

__all__ = ['ParsedMessage', 'Project', 'SessionSummary']


class ParsedMessage(StrictModel):
    """A user or assistant message flattened for one-line display."""

    type: Literal['user', 'assistant']
    timestamp: str  # Local time of day, e.g. '14:03:27'
    type_label: str  # Fixed-width label, e.g. 'User      '
    content: str  # Newlines collapsed, truncated to 200 characters
    is_tool_use: bool


class SessionSummary(StrictModel):
    """
    Summary of one session file, built from a bounded prefix scan.

    message_count only covers the scanned prefix, not the whole file.
    """

    session_id: str  # File stem of {session_id}.jsonl
    file_path: Path
    start_timestamp: datetime
    last_timestamp: datetime | None
    first_user_message: str
    message_count: int
    file_size: int  # Bytes
    modification_time: datetime
    matched_summaries: list[str] | None = None
    preview_messages: list[ParsedMessage] = Field(default_factory=list)
    project_path: str | None = None  # cwd recorded in the session


class Project(StrictModel):
    """A directory under the projects root that holds at least one session."""

    encoded_name: str  # Directory name, e.g. '-Users-bob-dev-my-app'
    path: str  # Recovered (or naively decoded) project path
    path_recovered: bool  # True when the path was confirmed to exist on disk
    session_count: int
    last_activity: datetime
