# -*- coding: utf-8 -*-
"""
パズル一覧 CSV を読み込むモジュールです。

CSV の仕様：
- 'name'    : パズル名（重複していたら最初の行を使う）
- 'columns' : dense 形式の列ラベル（c）
- 'rows'    : dense 形式の行ラベル＋セル（r）

戻り値の DataFrame には、列数・行数を表す 'width' / 'height' 列を追加します。
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Tuple

import pandas as pd

from ..format.dense import DenseGrid

REQUIRED_COLUMNS = ("name", "columns", "rows")


def load_catalog(path: str | Path) -> pd.DataFrame:
    """
    パズル一覧 CSV を読み込み、統一フォーマットの DataFrame にして返します。

    Parameters
    ----------
    path : str or Path
        CSV ファイルのパス。

    Returns
    -------
    pandas.DataFrame
        'name', 'columns', 'rows', 'width', 'height' 列を持つ DataFrame。
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Puzzle catalog CSV not found: {p}")

    # "1.2" のようなラベルが数値として読まれないよう、すべて文字列で読む
    df = pd.read_csv(p, encoding="utf-8-sig", dtype=str, keep_default_na=False)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Puzzle catalog CSV must have columns {list(REQUIRED_COLUMNS)} (missing {missing}).")

    # dfの重複を削除
    df = df.drop_duplicates(subset=["name"], keep="first")

    df["width"] = df["columns"].str.count(r"\|") + 1
    df["height"] = df["rows"].str.count(r"\|") + 1

    # index を 0 から振り直しておくと扱いやすい
    df = df.reset_index(drop=True)

    return df


def iter_puzzles(df: pd.DataFrame) -> Iterator[Tuple[str, DenseGrid]]:
    """load_catalog() の DataFrame から (name, DenseGrid) を順に返します。"""
    for row in df.itertuples(index=False):
        yield row.name, DenseGrid(c=row.columns, r=row.rows)
