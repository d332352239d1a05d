"""
Interactive list picker with incremental substring filtering.

A picker session reads one key at a time from a raw-mode terminal, updates a
SelectionState and redraws the whole frame, until a key resolves it:

    Enter      -> Resolved(row, default_action)
    Esc        -> Cancelled()
    Ctrl+<key> -> Resolved(row, action), or Handoff(row, action) when a
                  handoff handler is registered for the action
    Ctrl+C     -> process exit

Header rows lead the row list. They are always shown and never filtered or
selected.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from cclog.ui.renderer import highlight, info
from cclog.ui.terminal import CLEAR_SCREEN, TerminalFactory, open_terminal

__all__ = [
    'Action',
    'Cancelled',
    'Handoff',
    'InteractiveSelector',
    'Outcome',
    'Resolved',
    'SelectableRow',
    'SelectionState',
    'SelectorMode',
]


class SelectorMode(StrEnum):
    """What the rows are; decides which contextual actions apply."""

    SESSIONS = 'sessions'
    PROJECTS = 'projects'


class Action(StrEnum):
    SELECT = 'select'
    RESUME = 'resume'
    VIEW = 'view'
    PATH = 'path'
    SESSIONS = 'sessions'  # list the sessions of a project
    FILES = 'files'  # list the session files of a project


ACTION_KEYS: dict[str, Action] = {
    'CTRL_V': Action.VIEW,
    'CTRL_P': Action.PATH,
    'CTRL_R': Action.RESUME,
    'CTRL_O': Action.SESSIONS,
    'CTRL_L': Action.FILES,
}

MODE_ACTIONS: dict[SelectorMode, frozenset[Action]] = {
    SelectorMode.SESSIONS: frozenset({Action.VIEW, Action.PATH, Action.RESUME}),
    SelectorMode.PROJECTS: frozenset({Action.PATH, Action.SESSIONS, Action.FILES}),
}

NAVIGATION_HELP = '↑↓: Navigate, Enter: Select, Esc: Cancel, Ctrl+C: Exit'

MODE_HELP: dict[SelectorMode, str] = {
    SelectorMode.SESSIONS: 'Ctrl+V: View, Ctrl+P: Path, Ctrl+R: Resume',
    SelectorMode.PROJECTS: 'Ctrl+P: Path, Ctrl+O: Sessions, Ctrl+L: Files',
}

PREVIEW_RULE = '─' * 80


@dataclass(frozen=True)
class SelectableRow:
    """One line of a pick list."""

    display: str  # Already formatted (may contain ANSI styles)
    search_text: str = ''  # Matched case-insensitively against the query
    value: Any = None
    header: bool = False


@dataclass(frozen=True)
class Resolved:
    row: SelectableRow
    action: Action


@dataclass(frozen=True)
class Cancelled:
    pass


@dataclass(frozen=True)
class Handoff:
    """Control was passed to an external program for `row`."""

    row: SelectableRow
    action: Action


type Outcome = Resolved | Cancelled | Handoff


@dataclass
class SelectionState:
    """
    Mutable state of one picker session.

    Invariant: header_count <= cursor <= max(header_count, len(filtered) - 1),
    so the cursor never points at a header row.
    """

    rows: Sequence[SelectableRow]
    query: str = ''
    header_count: int = field(init=False)
    filtered: list[SelectableRow] = field(init=False)
    cursor: int = field(init=False)

    def __post_init__(self) -> None:
        self.header_count = sum(1 for row in self.rows if row.header)
        if any(row.header for row in self.rows[self.header_count :]):
            raise ValueError('header rows must come before content rows')
        self.filtered = list(self.rows)
        self.cursor = self.header_count
        if self.query:
            self.refilter()

    @property
    def header_rows(self) -> list[SelectableRow]:
        return list(self.rows[: self.header_count])

    @property
    def content_rows(self) -> list[SelectableRow]:
        return self.filtered[self.header_count :]

    @property
    def current_row(self) -> SelectableRow | None:
        if self.header_count <= self.cursor < len(self.filtered):
            return self.filtered[self.cursor]
        return None

    def refilter(self) -> None:
        """Recompute `filtered` from `query`, then clamp the cursor."""
        if not self.query:
            self.filtered = list(self.rows)
        else:
            needle = self.query.lower()
            self.filtered = self.header_rows + [
                row for row in self.rows[self.header_count :] if needle in row.search_text.lower()
            ]
        upper = max(self.header_count, len(self.filtered) - 1)
        self.cursor = max(self.header_count, min(self.cursor, upper))

    def move(self, delta: int) -> bool:
        target = self.cursor + delta
        if self.header_count <= target < len(self.filtered):
            self.cursor = target
            return True
        return False

    def append_query(self, text: str) -> None:
        self.query += text
        self.refilter()

    def backspace(self) -> bool:
        if not self.query:
            return False
        self.query = self.query[:-1]
        self.refilter()
        return True

    def visible_rows(self, height: int) -> Iterator[tuple[int, SelectableRow]]:
        """Content rows in a window of `height` lines that keeps the cursor in view."""
        offset = max(0, self.cursor - self.header_count - height + 1)
        start = self.header_count + offset
        for index in range(start, min(start + height, len(self.filtered))):
            yield index, self.filtered[index]


class InteractiveSelector:
    """
    Keyboard-driven picker over a list of rows.

    Args:
        rows: Header rows followed by content rows
        mode: Which contextual actions are valid and which help line is shown
        height: Maximum number of content rows on screen
        preview: Text shown under the list for the row under the cursor ('' hides it)
        default_action: Action resolved by Enter
        handoffs: Handlers for actions that hand control to another program; each
            runs after the terminal is restored and normally does not return
        terminal_factory: Context manager factory yielding the raw-mode terminal
    """

    def __init__(
        self,
        rows: Sequence[SelectableRow],
        *,
        mode: SelectorMode,
        height: int = 20,
        preview: Callable[[SelectableRow], str] | None = None,
        default_action: Action = Action.SELECT,
        handoffs: Mapping[Action, Callable[[SelectableRow], None]] | None = None,
        terminal_factory: TerminalFactory = open_terminal,
    ) -> None:
        self.rows = list(rows)
        self.mode = mode
        self.height = height
        self.preview = preview
        self.default_action = default_action
        self.handoffs = dict(handoffs or {})
        self.terminal_factory = terminal_factory

    def show(self) -> Outcome:
        """Run the picker until a key resolves it."""
        state = SelectionState(self.rows)
        if not state.content_rows:
            return Cancelled()

        with self.terminal_factory() as terminal:
            terminal.write(self.render(state))
            while True:
                redraw, outcome = self.handle_key(state, terminal.read_key())
                if outcome is not None:
                    break
                if redraw:
                    terminal.write(self.render(state))

        if isinstance(outcome, Handoff):
            self.handoffs[outcome.action](outcome.row)
        return outcome

    def handle_key(self, state: SelectionState, key: str) -> tuple[bool, Outcome | None]:
        """
        Apply one key to `state`.

        Returns:
            (redraw needed, outcome or None while the picker stays active)

        Raises:
            SystemExit: On Ctrl+C (the terminal is restored by the caller's context)
        """
        match key:
            case '':
                # Input closed
                return False, Cancelled()
            case 'CTRL_C':
                sys.exit(0)
            case 'ESC':
                return False, Cancelled()
            case 'ENTER':
                row = state.current_row
                return False, self._resolve(row, self.default_action) if row else Cancelled()
            case 'UP':
                return state.move(-1), None
            case 'DOWN':
                return state.move(1), None
            case 'BACKSPACE':
                return state.backspace(), None
            case _ if key in ACTION_KEYS:
                action = ACTION_KEYS[key]
                row = state.current_row
                if row is None or action not in MODE_ACTIONS[self.mode]:
                    return False, None
                return False, self._resolve(row, action)
            case _ if len(key) == 1 and key.isprintable():
                state.append_query(key)
                return True, None
            case _:
                return False, None

    def _resolve(self, row: SelectableRow, action: Action) -> Outcome:
        if action in self.handoffs:
            return Handoff(row, action)
        return Resolved(row, action)

    def render(self, state: SelectionState) -> str:
        """Full frame for the current state (raw mode, so lines end in CRLF)."""
        lines = [f'> {state.query}', '']
        lines.extend(info(row.display) for row in state.header_rows)

        for index, row in state.visible_rows(self.height):
            if index == state.cursor:
                lines.append(highlight(f'> {row.display}'))
            else:
                lines.append(f'  {row.display}')

        current = state.current_row
        if current is not None and self.preview is not None:
            text = self.preview(current)
            if text:
                lines.extend(['', PREVIEW_RULE, *text.splitlines()])

        lines.extend(['', info(NAVIGATION_HELP)])
        if current is not None:
            lines.append(info(MODE_HELP[self.mode]))

        return CLEAR_SCREEN + '\r\n'.join(lines) + '\r\n'
