#!/usr/bin/env python3
"""
Command-line interface for cclog.

Browse Claude Code conversation history:

    cclog                  Browse sessions of the current directory
    cclog projects         Browse all projects
    cclog view SESSION     Print a session transcript
    cclog info SESSION     Print session information
    cclog export SESSION   Export a session as Markdown or JSON
    cclog help             Show the command overview

SESSION is a path to a session file or a session ID.
"""

from __future__ import annotations

import asyncio
import shlex
import sys
import traceback
from collections.abc import Awaitable, Callable, Coroutine
from pathlib import Path
from typing import Any, TypeGuard

import typer

from cclog.config import settings
from cclog.exceptions import CclogError, TerminalRequiredError
from cclog.launcher import launch_browser_in_directory, launch_claude_with_session
from cclog.logger import CLILogger
from cclog.models import Project, SessionSummary
from cclog.services import ExportFormat, ProjectService, SessionExporter, SessionParserService
from cclog.ui import Action, InteractiveSelector, Resolved, SelectableRow, SelectorMode
from cclog.ui.renderer import (
    render_project_row,
    render_session_info,
    render_session_message,
    render_session_row,
)

app = typer.Typer(
    name='cclog',
    help='Browse Claude Code conversation history',
    add_completion=False,
)

VERBOSE_OPTION = typer.Option(False, '--verbose', '-v', help='Verbose output')


def _is_export_format(value: str) -> TypeGuard[ExportFormat]:
    """Type guard for valid export formats."""
    return value in ('markdown', 'json')


def _validate_export_format(value: str) -> ExportFormat:
    """Validate and narrow export format for typer callback."""
    if _is_export_format(value):
        return value
    raise typer.BadParameter("Must be 'markdown' or 'json'")


def _run(coro: Coroutine[Any, Any, None], logger: CLILogger, action: str) -> None:
    """Run a command coroutine with the shared error policy."""
    try:
        asyncio.run(coro)
    except typer.Exit:
        raise
    except (CclogError, FileNotFoundError) as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except Exception as e:
        asyncio.run(logger.error(f'Failed to {action}: {e}'))
        if logger.verbose:
            traceback.print_exc()
        raise typer.Exit(1)


def _require_tty() -> None:
    if not sys.stdin.isatty():
        raise TerminalRequiredError()


def _project_service(logger: CLILogger) -> ProjectService:
    return ProjectService(settings.PROJECTS_DIR, logger=logger)


async def _resolve_session_file(session: str, logger: CLILogger) -> Path:
    """Accept a session file path or a bare session ID."""
    path = Path(session).expanduser()
    if path.is_file():
        return path
    await logger.info(f'{session} is not a file, looking it up as a session ID')
    return await _project_service(logger).find_session_file(session)


# ==============================================================================
# Browse commands
# ==============================================================================


@app.callback(invoke_without_command=True)
def browse(ctx: typer.Context, verbose: bool = VERBOSE_OPTION) -> None:
    """Browse sessions of the current directory.

    Enter prints the session ID, Ctrl+V prints the transcript, Ctrl+P prints
    the file path and Ctrl+R resumes the session with claude.
    """
    if ctx.invoked_subcommand is not None:
        return
    logger = CLILogger(verbose=verbose)
    _run(_browse_sessions_async(logger), logger, 'browse sessions')


async def _browse_sessions_async(logger: CLILogger) -> None:
    cwd = Path.cwd()
    sessions = await _project_service(logger).get_current_project_sessions(cwd)
    if not sessions:
        typer.echo('No sessions found for this project')
        return
    _require_tty()

    rows = [
        SelectableRow(f'Claude Code Sessions for: {cwd}', header=True),
        SelectableRow('Enter: Return session ID, Ctrl+C: Exit', header=True),
        SelectableRow('CREATED             MESSAGES  FIRST_MESSAGE', header=True),
    ]
    rows.extend(
        SelectableRow(
            render_session_row(session),
            search_text=f'{session.session_id} {session.first_user_message}',
            value=session,
        )
        for session in sessions
    )

    def resume(row: SelectableRow) -> None:
        launch_claude_with_session(row.value.session_id)

    selector = InteractiveSelector(
        rows,
        mode=SelectorMode.SESSIONS,
        height=settings.SESSION_LIST_HEIGHT,
        preview=lambda row: render_session_info(row.value),
        handoffs={Action.RESUME: resume},
    )

    match await asyncio.to_thread(selector.show):
        case Resolved(row=row, action=Action.VIEW):
            await _print_transcript(row.value.file_path)
        case Resolved(row=row, action=Action.PATH):
            typer.echo(str(row.value.file_path))
        case Resolved(row=row):
            session: SessionSummary = row.value
            typer.echo(session.session_id)


@app.command()
def projects(verbose: bool = VERBOSE_OPTION) -> None:
    """Browse all projects, most recently active first.

    Enter prints a cd command, Ctrl+P prints the path, Ctrl+O browses the
    project's sessions and Ctrl+L prints its session files.
    """
    logger = CLILogger(verbose=verbose)
    _run(_browse_projects_async(logger), logger, 'browse projects')


async def _browse_projects_async(logger: CLILogger) -> None:
    service = _project_service(logger)
    all_projects = await service.get_all_projects()
    if not all_projects:
        typer.echo('No Claude projects found')
        return
    _require_tty()

    rows = [
        SelectableRow('Claude Code Projects (sorted by recent activity)', header=True),
        SelectableRow('Enter: Show project path', header=True),
        SelectableRow('LAST_ACTIVE  SESSIONS  PROJECT_PATH', header=True),
    ]
    rows.extend(
        SelectableRow(render_project_row(project), search_text=project.path, value=project) for project in all_projects
    )

    def preview(row: SelectableRow) -> str:
        project: Project = row.value
        text = f'cd {shlex.quote(project.path)}'
        if not project.path_recovered:
            text += '\n(path not found on disk, decoded from the log directory name)'
        return text

    def open_sessions(row: SelectableRow) -> None:
        launch_browser_in_directory(row.value.path)

    selector = InteractiveSelector(
        rows,
        mode=SelectorMode.PROJECTS,
        height=settings.PROJECT_LIST_HEIGHT,
        preview=preview,
        handoffs={Action.SESSIONS: open_sessions},
    )

    match await asyncio.to_thread(selector.show):
        case Resolved(row=row, action=Action.PATH):
            typer.echo(row.value.path)
        case Resolved(row=row, action=Action.FILES):
            for file_path in await service.get_session_files(row.value):
                typer.echo(str(file_path))
        case Resolved(row=row):
            typer.echo(f'cd {shlex.quote(row.value.path)}')


# ==============================================================================
# Session commands
# ==============================================================================


async def _print_transcript(file_path: Path) -> None:
    messages = await SessionParserService().parse_for_display(file_path)
    if not messages:
        typer.echo('No messages found in session')
        return
    for message in messages:
        typer.echo(render_session_message(message))


def _session_command(
    session: str,
    verbose: bool,
    action: str,
    handler: Callable[[Path, CLILogger], Awaitable[None]],
) -> None:
    logger = CLILogger(verbose=verbose)

    async def run() -> None:
        await handler(await _resolve_session_file(session, logger), logger)

    _run(run(), logger, action)


@app.command()
def view(
    session: str = typer.Argument(..., help='Session file or session ID'),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print a session transcript."""

    async def handler(file_path: Path, logger: CLILogger) -> None:
        await _print_transcript(file_path)

    _session_command(session, verbose, 'view session', handler)


@app.command()
def info(
    session: str = typer.Argument(..., help='Session file or session ID'),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print session information."""

    async def handler(file_path: Path, logger: CLILogger) -> None:
        summary = await SessionParserService().parse_minimal(file_path)
        typer.echo(render_session_info(summary))

    _session_command(session, verbose, 'read session info', handler)


@app.command()
def export(
    session: str = typer.Argument(..., help='Session file or session ID'),
    format: str = typer.Option(
        'markdown', '--format', '-f', help='Export format: markdown or json', callback=_validate_export_format
    ),
    output: Path | None = typer.Option(None, '--output', '-o', help='Output file (default: stdout)'),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Export a session as Markdown or JSON."""
    export_format = _validate_export_format(format)

    async def handler(file_path: Path, logger: CLILogger) -> None:
        document = await SessionExporter().export(file_path, export_format, logger)
        if output is None:
            typer.echo(document, nl=False)
            return
        output.write_text(document, encoding='utf-8')
        typer.secho(f'✓ Exported {file_path.stem} to {output}', fg=typer.colors.GREEN, err=True)

    _session_command(session, verbose, 'export session', handler)


@app.command('help', hidden=True)
def help_command(ctx: typer.Context) -> None:
    """Show the command overview."""
    typer.echo((ctx.parent or ctx).get_help())


# Short aliases
app.command('h', hidden=True)(help_command)
app.command('p', hidden=True)(projects)
app.command('v', hidden=True)(view)
app.command('i', hidden=True)(info)
app.command('e', hidden=True)(export)


def main() -> None:
    app()


if __name__ == '__main__':
    main()
