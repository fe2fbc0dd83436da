"""
Unit tests for Grid.

- construction and label validation
- solve(): propagation between rows and columns, SOLVED / STALLED outcomes
- next_hint()
- export and text rendering
"""

import logging

import numpy as np
import pytest

from griddler.config import TRACE_LOG_DIR, TRACE_LOG_FILE
from griddler.errors import InfeasibleLabelError
from griddler.format.plain import PlainGrid, create_plain, scrape_labels, wipe_cells
from griddler.grid.grid import Grid
from griddler.logging_utils import TRACE_LOGGER_NAME
from griddler.types import CellState, GridState, LineKind

U = CellState.UNKNOWN
F = CellState.FILLED
M = CellState.MARKED


def build_grid(columns, rows):
    grid = Grid(len(columns), len(rows))
    for c, labels in enumerate(columns):
        grid.set_labels(LineKind.COLUMN, c, labels)
    for r, labels in enumerate(rows):
        grid.set_labels(LineKind.ROW, r, labels)
    return grid


def grid_from_picture(picture):
    """塗りの絵からラベルを作り、セルを消した盤面にする。"""
    plain = create_plain(len(picture[0]), len(picture))
    for row, cells in zip(plain.rows, picture):
        row.cells = list(cells)
    scrape_labels(plain)
    wipe_cells(plain)
    return Grid.load(plain)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def frame_grid():
    """5x5 の枠（外周が塗り、内側が ×）。"""
    edge = [5]
    side = [1, 1]
    return build_grid([edge, side, side, side, edge], [edge, side, side, side, edge])


# ============================================================================
# Construction
# ============================================================================

class TestConstruction:

    def test_new_grid_is_blank(self):
        grid = Grid(3, 2)

        assert grid.cells.shape == (2, 3)
        assert grid.unsolved_cell_count == 6
        assert grid.state is GridState.UNSOLVED
        assert grid.get_labels(LineKind.ROW, 1) == []

    def test_non_positive_dimensions_rejected(self):
        with pytest.raises(ValueError):
            Grid(0, 3)

    def test_set_labels_stores_values(self):
        grid = Grid(5, 1)
        grid.set_labels(LineKind.ROW, 0, [2, 1])

        assert grid.get_labels(LineKind.ROW, 0) == [2, 1]

    def test_labels_too_long_for_line(self):
        grid = Grid(5, 1)
        grid.set_labels(LineKind.ROW, 0, [1])

        with pytest.raises(InfeasibleLabelError, match="Row 0"):
            grid.set_labels(LineKind.ROW, 0, [3, 3])

        assert grid.get_labels(LineKind.ROW, 0) == [1]

    def test_labels_conflicting_with_cells(self):
        grid = Grid(3, 1)
        grid.set_cell(0, 1, M)

        with pytest.raises(InfeasibleLabelError):
            grid.set_labels(LineKind.ROW, 0, [2])

        assert grid.get_labels(LineKind.ROW, 0) == []

    def test_non_positive_label_rejected(self):
        grid = Grid(3, 1)

        with pytest.raises(InfeasibleLabelError):
            grid.set_labels(LineKind.ROW, 0, [0])

    def test_unknown_line_index(self):
        grid = Grid(3, 2)

        with pytest.raises(IndexError, match="Not found"):
            grid.set_labels(LineKind.ROW, 2, [1])
        with pytest.raises(IndexError):
            grid.get_labels(LineKind.COLUMN, -1)

    def test_load_applies_cells(self):
        plain = PlainGrid.model_validate({
            "columns": [{"labels": []}, {"labels": [1]}],
            "rows": [{"labels": [1], "cells": [2, 1]}],
        })
        grid = Grid.load(plain)

        assert grid.get_state(0, 0) is M
        assert grid.get_state(0, 1) is F
        assert grid.line_cells(LineKind.COLUMN, 1) == [F]

    def test_load_rejects_cells_contradicting_row_labels(self):
        plain = PlainGrid.model_validate({
            "columns": [{"labels": [1]}, {"labels": [1]}],
            "rows": [{"labels": [1], "cells": [1, 1]}],
        })

        with pytest.raises(InfeasibleLabelError, match="Row 0"):
            Grid.load(plain)

    def test_load_rejects_cells_contradicting_column_labels(self):
        plain = PlainGrid.model_validate({
            "columns": [{"labels": []}, {"labels": [1]}],
            "rows": [{"labels": [1], "cells": [1, 0]}],
        })

        with pytest.raises(InfeasibleLabelError, match="Col 0"):
            Grid.load(plain)

    @pytest.mark.parametrize("row, col", [(0, -1), (0, 3), (-1, 0), (1, 0)])
    def test_set_cell_outside_grid(self, row, col):
        grid = Grid(3, 1)

        with pytest.raises(IndexError):
            grid.set_cell(row, col, F)

        assert grid.cells.tolist() == [[0, 0, 0]]

    def test_set_state_names_the_line(self):
        grid = Grid(3, 2)

        with pytest.raises(IndexError, match="Col 1: cell 2 not found"):
            grid.set_state(LineKind.COLUMN, 1, 2, F)

    def test_get_state_outside_grid(self):
        grid = Grid(3, 1)

        with pytest.raises(IndexError, match="Row 0: cell -1 not found"):
            grid.get_state(0, -1)

    def test_set_cell_rejects_unknown_state(self):
        grid = Grid(3, 1)

        with pytest.raises(ValueError):
            grid.set_cell(0, 0, 5)

        assert grid.unsolved_cell_count == 3


# ============================================================================
# solve()
# ============================================================================

class TestSolve:

    def test_frame_is_solved(self, frame_grid):
        result = frame_grid.solve()

        expected = np.full((5, 5), int(M))
        expected[0, :] = expected[4, :] = expected[:, 0] = expected[:, 4] = int(F)

        assert result.solved
        assert frame_grid.state is GridState.SOLVED
        assert np.array_equal(frame_grid.cells, expected)
        assert len(result.solved_cells) == 25
        assert result.passes >= 10

    def test_single_cell(self):
        grid = build_grid([[1]], [[1]])
        result = grid.solve()

        assert result.solved
        assert grid.get_state(0, 0) is F
        assert result.plain.rows[0].cells == [1]

    def test_ambiguous_grid_stalls(self):
        grid = build_grid([[1], [1]], [[1], [1]])
        result = grid.solve()

        assert not result.solved
        assert grid.state is GridState.STALLED
        assert grid.unsolved_cell_count == 4
        assert result.solved_cells == []

    def test_partial_progress_then_stall(self):
        grid = build_grid([[1], [], [1]], [[1], [1]])
        result = grid.solve()

        assert not result.solved
        assert grid.cells.tolist() == [[0, 2, 0], [0, 2, 0]]
        assert sorted((r, c) for r, c, _ in result.solved_cells) == [(0, 1), (1, 1)]

    def test_picture_round_trip(self):
        picture = [
            [0, 1, 0],
            [1, 1, 1],
            [0, 1, 0],
        ]
        grid = grid_from_picture(picture)
        result = grid.solve()

        assert result.solved
        assert (grid.cells == int(F)).astype(int).tolist() == picture

    def test_solve_is_idempotent(self, frame_grid):
        frame_grid.solve()
        before = frame_grid.cells

        result = frame_grid.solve()

        assert np.array_equal(frame_grid.cells, before)
        assert result.solved_cells == []

    def test_known_cells_are_kept(self):
        grid = build_grid([[1], [1]], [[1], [1]])
        grid.set_cell(0, 0, F)

        result = grid.solve()

        assert result.solved
        assert grid.cells.tolist() == [[1, 2], [2, 1]]

    def test_contradiction_raises(self):
        grid = build_grid([[], []], [[2]])

        with pytest.raises(InfeasibleLabelError):
            grid.solve()

        assert grid.state is GridState.UNSOLVED


# ============================================================================
# next_hint()
# ============================================================================

class TestHint:

    def test_hint_points_at_productive_line(self, frame_grid):
        hint = frame_grid.next_hint()

        assert hint is not None
        assert hint.cells
        assert hint.kind in (LineKind.ROW, LineKind.COLUMN)

    def test_hint_is_deterministic(self):
        first = build_grid([[5], [1, 1], [1, 1], [1, 1], [5]], [[5], [1, 1], [1, 1], [1, 1], [5]])
        second = build_grid([[5], [1, 1], [1, 1], [1, 1], [5]], [[5], [1, 1], [1, 1], [1, 1], [5]])

        h1, h2 = first.next_hint(), second.next_hint()

        assert (h1.kind, h1.index, h1.cells) == (h2.kind, h2.index, h2.cells)

    def test_no_hint_on_stalled_grid(self):
        grid = build_grid([[1], [1]], [[1], [1]])

        assert grid.next_hint() is None

    def test_no_hint_on_solved_grid(self):
        grid = build_grid([[1]], [[1]])
        grid.solve()

        assert grid.next_hint() is None


# ============================================================================
# Export
# ============================================================================

class TestExport:

    def test_export_plain(self):
        grid = build_grid([[1], []], [[1]])
        grid.set_cell(0, 1, M)

        plain = grid.export_plain()

        assert [c.labels for c in plain.columns] == [[1], []]
        assert plain.rows[0].labels == [1]
        assert plain.rows[0].cells == [0, 2]

    def test_to_text(self, frame_grid):
        frame_grid.solve()

        assert frame_grid.to_text().splitlines() == [
            "■■■■■",
            "■▣▣▣■",
            "■▣▣▣■",
            "■▣▣▣■",
            "■■■■■",
        ]

    def test_line_solver_accessor(self):
        grid = build_grid([[1], [1], [1]], [[3]])
        solver = grid.line_solver(LineKind.ROW, 0)

        assert solver.index_ref == "Row 0"
        assert solver.solve().fills == [0, 1, 2]
        # the accessor works on a copy
        assert grid.unsolved_cell_count == 3


# ============================================================================
# Trace logging
# ============================================================================

def test_trace_writes_line_dumps(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    grid = build_grid([[1]], [[1]])
    grid.trace = True

    grid.solve()

    for handler in logging.getLogger(TRACE_LOGGER_NAME).handlers:
        handler.flush()
    text = (tmp_path / TRACE_LOG_DIR / TRACE_LOG_FILE).read_text(encoding="utf-8")
    assert "Col 0: ■ 1 | L0: R=0-0" in text
