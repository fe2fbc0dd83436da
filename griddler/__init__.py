# griddler/__init__.py
# -*- coding: utf-8 -*-
"""
griddler パッケージの入口となるモジュールです。

    from griddler import solve

と呼び出されることを想定しています。

ここでは、盤面の入力（サイズ・dense 形式・プレーン形式・画像）を受け取り、
1. 入力の解釈（PlainGrid への変換）
2. Grid の構築（ラベルの検証を含む）
3. 行・列の推論の伝播
4. 表示用の結果構築
を順番に呼び出します。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from .config import DEFAULT_CATALOG_PATH
from .catalog.loader import iter_puzzles, load_catalog
from .errors import GridSourceError, InfeasibleLabelError, MalformedEncodingError
from .format.dense import DenseGrid, to_dense, to_plain
from .format.plain import PlainGrid
from .grid.grid import Grid
from .grid.sources import Dimensions, GridSource, ImageSource, load_grid
from .line.solver import LineSolver
from .logging_utils import get_logger
from .postprocess.render_result import build_result
from .types import CellState, LineKind

logger = get_logger()

__all__ = [
    "CellState",
    "DenseGrid",
    "Dimensions",
    "Grid",
    "GridSourceError",
    "ImageSource",
    "InfeasibleLabelError",
    "LineKind",
    "LineSolver",
    "MalformedEncodingError",
    "PlainGrid",
    "hint",
    "solve",
    "solve_catalog",
    "to_dense",
    "to_plain",
]


def solve(source: GridSource, trace: bool = False) -> Dict[str, Any]:
    """
    盤面を解くメイン関数です。

    Returns
    -------
    dict
        solved, state, elapsed_ms, plain, dense, board などを持つ dict。
    """
    grid = load_grid(source, trace=trace)
    result = grid.solve()
    return build_result(grid, result)


def hint(source: GridSource) -> Optional[Dict[str, Any]]:
    """
    次に手をつけるとよいライン（行 or 列）を返します。

    ヒントがなければ None を返します。
    """
    grid = load_grid(source)
    found = grid.next_hint()
    if found is None:
        return None
    return {"kind": found.kind.value, "index": found.index, "cells": found.cells}


def solve_catalog(path: str | Path = DEFAULT_CATALOG_PATH) -> pd.DataFrame:
    """
    パズル一覧 CSV のパズルをすべて解き、結果を DataFrame で返します。

    ラベルが矛盾しているパズルは solved=False とし、error 列に理由を入れます。
    """
    df = load_catalog(path)
    logger.info("Catalog loaded: %d puzzles.", len(df))

    records = []
    for name, dense in iter_puzzles(df):
        try:
            out = solve(dense)
        except (InfeasibleLabelError, MalformedEncodingError) as e:
            logger.warning("Puzzle %s rejected: %s", name, e)
            records.append({"name": name, "solved": False, "elapsed_ms": 0.0,
                            "unsolved_cells": None, "error": str(e)})
            continue
        records.append({
            "name": name,
            "solved": out["solved"],
            "elapsed_ms": out["elapsed_ms"],
            "unsolved_cells": out["unsolved_cells"],
            "error": "",
        })

    return pd.DataFrame(records, columns=["name", "solved", "elapsed_ms", "unsolved_cells", "error"])
