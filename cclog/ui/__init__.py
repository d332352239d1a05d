"""Terminal user interface: picker, terminal control and display formatting."""

from __future__ import annotations

from cclog.ui.selector import (
    Action,
    Cancelled,
    Handoff,
    InteractiveSelector,
    Outcome,
    Resolved,
    SelectableRow,
    SelectionState,
    SelectorMode,
)

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
