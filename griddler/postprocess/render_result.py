# -*- coding: utf-8 -*-
"""
解いた結果をもとに表示用の情報を構築するモジュールです。
"""

from __future__ import annotations

from typing import Any, Dict, List

import numpy as np
import pandas as pd

from ..format.dense import to_dense
from ..grid.grid import Grid
from ..types import CELL_SYMBOLS, CellState, SolveResult


def build_board_frame(cells: np.ndarray) -> pd.DataFrame:
    """
    セル配列を、記号（□ ■ ▣）の DataFrame にします。

    Parameters
    ----------
    cells : numpy.ndarray
        shape = (height, width) のセル状態の配列。

    Returns
    -------
    pandas.DataFrame
        index が行番号、columns が列番号の DataFrame。
    """
    symbols = np.vectorize(lambda v: CELL_SYMBOLS[CellState(int(v))], otypes=[object])(cells)
    return pd.DataFrame(symbols)


def render_board(cells: np.ndarray) -> List[str]:
    """セル配列を 1 行 1 文字列のリストにします。"""
    df = build_board_frame(cells)
    return ["".join(row) for row in df.values.tolist()]


def build_result(grid: Grid, result: SolveResult) -> Dict[str, Any]:
    """
    Grid.solve() の結果を、JSON にそのまま出せる dict にまとめます。
    """
    dense = to_dense(result.plain)
    return {
        "solved": result.solved,
        "state": grid.state.value,
        "elapsed_ms": result.elapsed_ms,
        "passes": result.passes,
        "unsolved_cells": grid.unsolved_cell_count,
        "solved_cells": [[r, c, int(s)] for r, c, s in result.solved_cells],
        "plain": result.plain.model_dump(),
        "dense": dense.model_dump(),
        "board": render_board(grid.cells),  # ★ DataFrame ではなく文字列のリストで返す
    }
