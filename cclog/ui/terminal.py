"""Terminal control for the interactive picker.

Owns the raw-mode lifecycle and decodes raw stdin bytes into key tokens:
UP, DOWN, LEFT, RIGHT, ENTER, ESC, TAB, BACKSPACE, CTRL_<letter>, UNKNOWN for
unrecognized escape sequences, '' at end of input, and the decoded character
for printable input.
"""

from __future__ import annotations

import contextlib
import os
import select
import sys
import termios
import tty
from collections.abc import Callable, Iterator
from typing import Protocol, TextIO

ESC_SEQUENCE_TIMEOUT_MS = 25

HIDE_CURSOR = '\x1b[?25l'
SHOW_CURSOR = '\x1b[?25h'
CLEAR_SCREEN = '\x1b[2J\x1b[H'

_SPECIAL_BYTES = {
    b'\r': 'ENTER',
    b'\n': 'ENTER',
    b'\t': 'TAB',
    b'\x7f': 'BACKSPACE',
    b'\x08': 'BACKSPACE',
}

_ARROWS = {b'A': 'UP', b'B': 'DOWN', b'C': 'RIGHT', b'D': 'LEFT'}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_escape_sequence(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return 'ESC'
    if seq not in {b'[', b'O'}:
        # Alt+<key>
        return 'UNKNOWN'

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return 'ESC'
    if seq in _ARROWS:
        return _ARROWS[seq]

    # Drain parameters up to the final byte of the CSI sequence
    while not 0x40 <= seq[0] <= 0x7E:
        seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            break
    return 'UNKNOWN'


def read_key(fd: int) -> str:
    """Block until one key arrives on `fd` and return its token."""
    ch = os.read(fd, 1)
    if not ch:
        return ''

    if ch in _SPECIAL_BYTES:
        return _SPECIAL_BYTES[ch]
    if ch == b'\x1b':
        return _read_escape_sequence(fd)
    if ch[0] < 0x20:
        return f'CTRL_{chr(ch[0] + 0x40)}'

    data = ch
    for _ in range(_utf8_length(ch[0]) - 1):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode('utf-8', errors='replace')


class KeyTerminal(Protocol):
    """What the picker needs from a terminal: one key in, one frame out."""

    def read_key(self) -> str: ...
    def write(self, text: str) -> None: ...


type TerminalFactory = Callable[[], contextlib.AbstractContextManager[KeyTerminal]]


class Terminal:
    """Raw-mode terminal handle returned by open_terminal()."""

    def __init__(self, stdin_fd: int, output: TextIO) -> None:
        self.stdin_fd = stdin_fd
        self.output = output

    def read_key(self) -> str:
        return read_key(self.stdin_fd)

    def write(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()


@contextlib.contextmanager
def open_terminal(stdin_fd: int | None = None, output: TextIO | None = None) -> Iterator[Terminal]:
    """
    Put the terminal in raw mode with a hidden cursor for the duration of the block.

    The saved tty attributes and the cursor are restored on every exit path,
    including exceptions and SystemExit raised inside the block.

    Args:
        stdin_fd: Input descriptor (default: sys.stdin)
        output: Frame output stream (default: sys.stderr, keeping stdout for results)
    """
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    output = output or sys.stderr
    saved_tty_state = termios.tcgetattr(stdin_fd)
    try:
        tty.setraw(stdin_fd, termios.TCSAFLUSH)
        output.write(HIDE_CURSOR)
        output.flush()
        yield Terminal(stdin_fd, output)
    finally:
        output.write(CLEAR_SCREEN + SHOW_CURSOR)
        output.flush()
        termios.tcsetattr(stdin_fd, termios.TCSAFLUSH, saved_tty_state)
