"""
Loggers for cclog services.

Services report skipped files and malformed records through LoggerProtocol and
never print directly. The CLI passes a CLILogger; tests and library callers
that do not care pass nothing and get a NullLogger.

Everything goes to stderr: stdout carries the selected session ID, path or
`cd` command so it can be captured with `$(cclog)`.
"""

from __future__ import annotations

from typing import Protocol

import typer

__all__ = ['CLILogger', 'LoggerProtocol', 'NullLogger']


class LoggerProtocol(Protocol):
    async def info(self, message: str) -> None: ...
    async def warning(self, message: str) -> None: ...
    async def error(self, message: str) -> None: ...


class NullLogger:
    """Discards everything."""

    async def info(self, message: str) -> None:
        pass

    async def warning(self, message: str) -> None:
        pass

    async def error(self, message: str) -> None:
        pass


class CLILogger:
    """
    Logger for command-line usage.

    A projects directory routinely holds half-written or foreign .jsonl files,
    so skip warnings are noise unless --verbose is given. Errors always show.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    async def info(self, message: str) -> None:
        if self.verbose:
            typer.echo(f'[INFO] {message}', err=True)

    async def warning(self, message: str) -> None:
        if self.verbose:
            typer.secho(f'[WARNING] {message}', fg=typer.colors.YELLOW, err=True)

    async def error(self, message: str) -> None:
        typer.secho(f'[ERROR] {message}', fg=typer.colors.RED, err=True)
