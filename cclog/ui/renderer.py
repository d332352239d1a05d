"""
Display formatting for sessions, projects and messages.

Pure string functions: no I/O and no decisions beyond layout.
"""

from __future__ import annotations

from datetime import UTC, datetime

import typer

from cclog.models import ParsedMessage, Project, SessionSummary

MAX_MESSAGE_WIDTH = 60
MAX_PATH_WIDTH = 80


def info(text: str) -> str:
    return typer.style(text, fg=typer.colors.BRIGHT_BLACK)


def highlight(text: str) -> str:
    return typer.style(text, reverse=True)


def _truncate(text: str, width: int) -> str:
    if len(text) > width:
        return text[: width - 3] + '...'
    return text


def _local(timestamp: datetime) -> datetime:
    return timestamp.astimezone()


def render_session_row(session: SessionSummary) -> str:
    """One session list row: start time, message count, first user message."""
    start_time = f'{_local(session.start_timestamp):%Y/%m/%d %H:%M:%S}'
    message = _truncate(' '.join(session.first_user_message.split()), MAX_MESSAGE_WIDTH)
    return f'{start_time}  {session.message_count:<8}  {message}'


def render_project_row(project: Project, now: datetime | None = None) -> str:
    """One project list row: relative last activity, session count, path."""
    last_active = format_relative_time(project.last_activity, now)
    path = project.path
    if len(path) > MAX_PATH_WIDTH:
        path = '...' + path[-(MAX_PATH_WIDTH - 3) :]
    return f'{last_active:<12} {project.session_count:<8}  {path}'


def render_session_info(session: SessionSummary) -> str:
    lines = [
        f'Session:    {session.session_id}',
        f'Messages:   {session.message_count}',
        f'Started:    {_local(session.start_timestamp):%Y-%m-%d %H:%M:%S}',
    ]

    if session.last_timestamp and session.last_timestamp != session.start_timestamp:
        lines.append(f'Finished:   {_local(session.last_timestamp):%Y-%m-%d %H:%M:%S}')
        duration = int((session.last_timestamp - session.start_timestamp).total_seconds())
        lines.append(f'Duration:   {format_duration(duration)}')

    if session.project_path:
        lines.append(f'Project:    {session.project_path}')

    if session.matched_summaries:
        lines.extend(['', 'Topics:'])
        lines.extend(f'  • {summary}' for summary in session.matched_summaries[:5])

    if session.preview_messages:
        lines.extend(['', 'Preview:'])
        for message in session.preview_messages:
            label = 'User: ' if message.type == 'user' else 'Assistant: '
            lines.append(f'  {label}{_truncate(message.content, MAX_MESSAGE_WIDTH)}')

    return '\n'.join(lines)


def render_session_message(message: ParsedMessage) -> str:
    if message.is_tool_use:
        color = typer.colors.BRIGHT_BLACK
    elif message.type == 'user':
        color = typer.colors.CYAN
    else:
        color = typer.colors.WHITE
    return typer.style(f'{message.type_label}{message.timestamp}  {message.content}', fg=color)


def format_relative_time(date: datetime, now: datetime | None = None) -> str:
    """Compact age of `date`, e.g. '42s ago', '3h ago', '2mo ago'."""
    now = now or datetime.now(UTC)
    diff = int((now - date).total_seconds())

    if diff < 60:
        return f'{diff}s ago'
    if diff < 3600:
        return f'{diff // 60}m ago'
    if diff < 86400:
        return f'{diff // 3600}h ago'
    if diff < 604800:
        return f'{diff // 86400}d ago'
    if diff < 2592000:
        return f'{diff // 604800}w ago'
    return f'{diff // 2592000}mo ago'


def format_duration(seconds: int) -> str:
    """Human duration: '45s', '12m', '3h 5m', '2d 4h'."""
    if seconds < 60:
        return f'{seconds}s'
    if seconds < 3600:
        return f'{seconds // 60}m'

    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if seconds < 86400:
        return f'{hours}h {minutes}m' if minutes else f'{hours}h'

    days = seconds // 86400
    remaining_hours = (seconds % 86400) // 3600
    return f'{days}d {remaining_hours}h' if remaining_hours else f'{days}d'
