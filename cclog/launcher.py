"""
Process handoff helpers.

Both functions replace the current process via os.execvp(), so they never
return on success.
"""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

from cclog.config import settings
from cclog.exceptions import ClaudeNotFoundError


def launch_claude_with_session(session_id: str) -> None:
    """
    Launch Claude Code with --resume, replacing current process.

    Args:
        session_id: Session ID to resume

    Raises:
        ClaudeNotFoundError: If the Claude Code CLI is not found in PATH
    """
    command = settings.CLAUDE_COMMAND
    if not shutil.which(command):
        raise ClaudeNotFoundError(command)

    os.execvp(command, [command, '--resume', session_id])


def launch_browser_in_directory(project_path: Path | str) -> None:
    """
    Re-run the session browser inside a project directory.

    Args:
        project_path: Directory whose sessions should be listed

    Raises:
        FileNotFoundError: If the project directory no longer exists
    """
    os.chdir(project_path)
    os.execvp(sys.executable, [sys.executable, '-m', 'cclog'])
