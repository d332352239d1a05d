"""
Shared exceptions for cclog.

Exception Hierarchy:
    CclogError (base)
    ├── ProjectNotFoundError (no log directory for a project)
    ├── SessionNotFoundError (session ID not present in any project)
    ├── SessionParseError (session file without usable records)
    ├── TerminalRequiredError (picker started without a TTY)
    └── ClaudeNotFoundError (claude CLI missing from PATH)
"""

from __future__ import annotations

from pathlib import Path


class CclogError(Exception):
    """Base exception for all cclog errors."""


class ProjectNotFoundError(CclogError):
    """Raised when no Claude Code logs exist for a project directory."""

    def __init__(self, project_path: Path | str) -> None:
        self.project_path = str(project_path)
        super().__init__(f'No Claude logs found for this project: {self.project_path}')


class SessionNotFoundError(CclogError):
    """Raised when a session ID does not match any session file."""

    def __init__(self, session_id: str, searched: Path) -> None:
        self.session_id = session_id
        self.searched = searched
        super().__init__(f'Session not found: {session_id} (searched in {searched})')


class SessionParseError(CclogError):
    """Raised when a session file has no record with a valid timestamp."""

    def __init__(self, file_path: Path) -> None:
        self.file_path = file_path
        super().__init__(f'No valid timestamp found in {file_path}')


class TerminalRequiredError(CclogError):
    """Raised when an interactive picker is requested without a TTY on stdin."""

    def __init__(self) -> None:
        super().__init__('An interactive terminal is required (stdin is not a TTY).')


class ClaudeNotFoundError(CclogError):
    """Raised when the Claude Code CLI cannot be found in PATH."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f'{command} command not found. Please install the Claude Code CLI first.')
