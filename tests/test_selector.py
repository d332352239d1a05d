"""
Tests for the interactive picker: filtering, cursor movement, key dispatch and rendering.
"""

from __future__ import annotations

import pytest
import typer
from conftest import FakeTerminal

from cclog.ui.selector import (
    Action,
    Cancelled,
    Handoff,
    InteractiveSelector,
    Resolved,
    SelectableRow,
    SelectionState,
    SelectorMode,
)

HEADER = SelectableRow('Sessions', header=True)


def make_rows() -> list[SelectableRow]:
    return [
        HEADER,
        SelectableRow('alpha task', search_text='alpha task', value='s1'),
        SelectableRow('beta task', search_text='beta task', value='s2'),
        SelectableRow('Gamma release', search_text='Gamma release', value='s3'),
    ]


def run_picker(
    keys: list[str],
    rows: list[SelectableRow] | None = None,
    mode: SelectorMode = SelectorMode.SESSIONS,
    **kwargs,
) -> tuple[object, FakeTerminal]:
    terminal = FakeTerminal(keys)
    selector = InteractiveSelector(
        make_rows() if rows is None else rows,
        mode=mode,
        terminal_factory=terminal.session,
        **kwargs,
    )
    return selector.show(), terminal


class TestSelectionState:
    def test_initial_state(self) -> None:
        state = SelectionState(make_rows())
        assert state.cursor == 1
        assert state.filtered == make_rows()
        assert state.current_row.value == 's1'

    def test_filter_keeps_headers_and_order(self) -> None:
        state = SelectionState(make_rows(), query='task')
        assert [row.value for row in state.filtered] == [None, 's1', 's2']
        assert state.filtered[0] is state.rows[0]

    def test_filter_is_case_insensitive(self) -> None:
        state = SelectionState(make_rows(), query='GAMMA')
        assert [row.value for row in state.content_rows] == ['s3']

    def test_refilter_is_idempotent(self) -> None:
        state = SelectionState(make_rows(), query='ta')
        once = list(state.filtered)
        state.refilter()
        assert state.filtered == once

    def test_empty_query_restores_everything(self) -> None:
        state = SelectionState(make_rows())
        state.append_query('zzz')
        assert state.content_rows == []
        while state.backspace():
            pass
        assert state.filtered == make_rows()

    def test_no_match_leaves_cursor_without_target(self) -> None:
        state = SelectionState(make_rows())
        state.move(2)
        state.append_query('nothing')
        assert state.cursor == state.header_count
        assert state.current_row is None

    def test_cursor_clamped_after_filter(self) -> None:
        state = SelectionState(make_rows())
        state.move(2)
        assert state.current_row.value == 's3'
        state.append_query('task')
        assert state.current_row.value == 's2'

    def test_move_is_clamped(self) -> None:
        state = SelectionState(make_rows())
        assert state.move(-1) is False
        assert state.move(1) is True
        assert state.move(1) is True
        assert state.move(1) is False
        assert state.current_row.value == 's3'

    def test_backspace_on_empty_query(self) -> None:
        state = SelectionState(make_rows())
        assert state.backspace() is False

    def test_cursor_never_on_header(self) -> None:
        state = SelectionState(make_rows())
        selector = InteractiveSelector(make_rows(), mode=SelectorMode.SESSIONS)
        keys = ['UP', 'DOWN', 'DOWN', 'DOWN', 'g', 'UP', 'BACKSPACE', 'x', 'DOWN', 'BACKSPACE', 'UP', 'UP', 't', 'a']
        for key in keys:
            selector.handle_key(state, key)
            assert state.cursor >= state.header_count
            assert state.current_row is None or not state.current_row.header

    def test_visible_rows_follow_cursor(self) -> None:
        rows = [HEADER] + [SelectableRow(f'row {i}', search_text=f'row {i}', value=i) for i in range(10)]
        state = SelectionState(rows)
        assert [row.value for _, row in state.visible_rows(3)] == [0, 1, 2]
        state.move(5)
        assert [row.value for _, row in state.visible_rows(3)] == [3, 4, 5]

    def test_headers_must_lead(self) -> None:
        with pytest.raises(ValueError):
            SelectionState([SelectableRow('a', value=1), HEADER])


class TestShow:
    def test_filter_then_enter_selects(self) -> None:
        outcome, terminal = run_picker(['a', 'l', 'p', 'h', 'a', 'ENTER'])
        assert outcome == Resolved(make_rows()[1], Action.SELECT)
        assert outcome.row.value == 's1'
        assert terminal.released

    def test_navigate_then_enter(self) -> None:
        outcome, _ = run_picker(['DOWN', 'DOWN', 'UP', 'ENTER'])
        assert outcome.row.value == 's2'

    @pytest.mark.parametrize('keys', [['ESC'], ['b', 'e', 'ESC'], ['z', 'z', 'ESC'], ['DOWN', 'ESC']])
    def test_escape_cancels(self, keys: list[str]) -> None:
        outcome, terminal = run_picker(keys)
        assert outcome == Cancelled()
        assert terminal.released

    def test_enter_without_match_cancels(self) -> None:
        outcome, _ = run_picker(['q', 'ENTER'])
        assert outcome == Cancelled()

    def test_end_of_input_cancels(self) -> None:
        outcome, _ = run_picker([''])
        assert outcome == Cancelled()

    def test_empty_rows_cancel_without_terminal(self) -> None:
        outcome, terminal = run_picker([], rows=[])
        assert outcome == Cancelled()
        assert not terminal.entered

    def test_header_only_rows_cancel_without_terminal(self) -> None:
        outcome, terminal = run_picker([], rows=[HEADER])
        assert outcome == Cancelled()
        assert not terminal.entered

    def test_unknown_keys_are_ignored(self) -> None:
        outcome, terminal = run_picker(['UNKNOWN', 'LEFT', 'TAB', 'CTRL_X', 'ENTER'])
        assert outcome.row.value == 's1'
        assert len(terminal.frames) == 1

    def test_default_action_is_configurable(self) -> None:
        outcome, _ = run_picker(['ENTER'], default_action=Action.RESUME)
        assert outcome == Resolved(make_rows()[1], Action.RESUME)

    def test_view_and_path_in_sessions_mode(self) -> None:
        outcome, _ = run_picker(['CTRL_V'])
        assert outcome == Resolved(make_rows()[1], Action.VIEW)
        outcome, _ = run_picker(['DOWN', 'CTRL_P'])
        assert outcome == Resolved(make_rows()[2], Action.PATH)

    def test_view_ignored_in_projects_mode(self) -> None:
        outcome, _ = run_picker(['CTRL_V', 'CTRL_R', 'CTRL_L'], mode=SelectorMode.PROJECTS)
        assert outcome == Resolved(make_rows()[1], Action.FILES)

    def test_project_actions_ignored_in_sessions_mode(self) -> None:
        outcome, _ = run_picker(['CTRL_O', 'CTRL_L', 'ESC'])
        assert outcome == Cancelled()

    def test_actions_ignored_without_content_row(self) -> None:
        outcome, _ = run_picker(['x', 'y', 'CTRL_P', 'ESC'])
        assert outcome == Cancelled()

    def test_handoff_runs_after_terminal_release(self) -> None:
        terminal = FakeTerminal(['DOWN', 'CTRL_R'])
        seen = []

        def resume(row: SelectableRow) -> None:
            seen.append((row.value, terminal.released))

        selector = InteractiveSelector(
            make_rows(),
            mode=SelectorMode.SESSIONS,
            handoffs={Action.RESUME: resume},
            terminal_factory=terminal.session,
        )
        outcome = selector.show()
        assert seen == [('s2', True)]
        assert outcome == Handoff(make_rows()[2], Action.RESUME)

    def test_ctrl_c_exits_and_restores_terminal(self) -> None:
        terminal = FakeTerminal(['a', 'CTRL_C'])
        selector = InteractiveSelector(make_rows(), mode=SelectorMode.SESSIONS, terminal_factory=terminal.session)
        with pytest.raises(SystemExit):
            selector.show()
        assert terminal.released


class TestRender:
    def frame(self, keys: list[str], **kwargs) -> str:
        outcome, terminal = run_picker([*keys, 'ESC'], **kwargs)
        return typer.unstyle(terminal.frames[-1])

    def test_query_headers_and_cursor(self) -> None:
        frame = self.frame(['DOWN', 't'])
        lines = frame.split('\r\n')
        assert lines[0].endswith('> t')
        assert 'Sessions' in lines
        assert '  alpha task' in lines
        assert '> beta task' in lines

    def test_preview_for_cursor_row(self) -> None:
        frame = self.frame(['DOWN'], preview=lambda row: f'preview of {row.value}\nsecond line')
        assert 'preview of s2\r\nsecond line' in frame

    def test_empty_preview_is_suppressed(self) -> None:
        frame = self.frame([], preview=lambda row: '')
        assert '─' * 80 not in frame

    def test_footer_depends_on_mode(self) -> None:
        assert 'Ctrl+R: Resume' in self.frame([])
        projects_frame = self.frame([], mode=SelectorMode.PROJECTS)
        assert 'Ctrl+O: Sessions' in projects_frame
        assert 'Ctrl+V' not in projects_frame

    def test_window_height(self) -> None:
        rows = [HEADER] + [SelectableRow(f'row {i}', search_text=f'row {i}', value=i) for i in range(30)]
        frame = self.frame([], rows=rows, height=5)
        assert 'row 4' in frame
        assert 'row 5' not in frame
