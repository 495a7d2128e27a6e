import random

import pytest

from tests import helpers  # noqa: F401  # ensures project root on sys.path
from budget_tui.selection import Mode, SelectionModel


@pytest.mark.parametrize("count", [0, 1, 2, 5, 30])
def test_row_stays_in_bounds_for_random_moves(count):
    rng = random.Random(count)
    model = SelectionModel(count, 4, viewport_height=3)
    for _ in range(200):
        rng.choice([model.next_row, model.previous_row])()
        if count == 0:
            assert model.row is None
        else:
            assert 0 <= model.row < count
            assert model.scroll_offset <= model.row < model.scroll_offset + 3


def test_empty_model_ignores_row_moves():
    model = SelectionModel(0, 4)
    model.next_row()
    model.previous_row()
    assert model.row is None
    assert model.scroll_offset == 0


def test_row_movement_clamps_at_edges():
    model = SelectionModel(3, 4)
    assert model.row == 0
    model.previous_row()
    assert model.row == 0
    model.next_row()
    model.next_row()
    model.next_row()
    assert model.row == 2


def test_scroll_follows_row():
    model = SelectionModel(10, 4, viewport_height=4)
    for _ in range(5):
        model.next_row()
    assert model.row == 5
    assert model.scroll_offset == 2
    for _ in range(4):
        model.previous_row()
    assert model.row == 1
    assert model.scroll_offset == 1


def test_set_viewport_resyncs_offset():
    model = SelectionModel(10, 4, viewport_height=2)
    model.select(9, None)
    assert model.scroll_offset == 8
    model.set_viewport(5)
    assert model.scroll_offset == 5
    model.set_viewport(20)
    assert model.scroll_offset == 0


def test_columns_clamp_not_wrap():
    model = SelectionModel(3, 4)
    model.next_column()
    assert model.column == 0
    model.previous_column()
    assert model.column == 0
    for _ in range(6):
        model.next_column()
    assert model.column == 3


def test_previous_column_from_nothing_selects_last():
    model = SelectionModel(3, 4)
    model.previous_column()
    assert model.column == 3


def test_deselect_keeps_row():
    model = SelectionModel(3, 4)
    model.next_row()
    model.next_column()
    model.deselect()
    assert model.selected == (1, None)


def test_start_editing_requires_cell():
    model = SelectionModel(3, 4)
    assert model.start_editing() is False
    assert model.mode is Mode.BROWSING
    model.next_column()
    assert model.start_editing() is True
    assert model.editing
    model.stop_editing()
    assert model.mode is Mode.BROWSING


def test_start_editing_on_empty_table():
    model = SelectionModel(0, 4)
    model.next_column()
    assert model.start_editing() is False


def test_select_clamps_into_bounds():
    model = SelectionModel(3, 4)
    model.select(10, 10)
    assert model.selected == (2, 3)
    model.select(-4, None)
    assert model.selected == (0, None)


def test_resize_clamps_row_and_handles_empty():
    model = SelectionModel(5, 4, viewport_height=2)
    model.select(4, 1)
    model.start_editing()
    model.resize(3)
    assert model.row == 2
    model.resize(0)
    assert model.row is None
    assert model.mode is Mode.BROWSING
    model.resize(2)
    assert model.row == 0
