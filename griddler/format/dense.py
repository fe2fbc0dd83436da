# -*- coding: utf-8 -*-
"""
プレーン形式 ↔ dense 形式（コンパクトな文字列）を変換するモジュールです。

dense 形式
----------
- c : 列ごとのラベルを "." でつなぎ、列同士を "|" でつないだ文字列
- r : 行ごとのラベルを "." でつなぎ、その後ろに "." + セルのランレングスを付け、
      行同士を "|" でつないだ文字列

セルのランレングスは記号 f（塗り）/ m（×）/ e（未確定）に個数を付けたものです。
個数が 1 のときは省略します。

例: 幅 5, ラベル [2, 1], セル 塗り,塗り,×,未確定,塗り  →  "2.1.f2mef"

塗りも × もない行はランレングス部分を付けません。
読み込み時、ランレングス部分がない行は「全セル未確定」とみなします。
"""

from __future__ import annotations

import re
from itertools import groupby
from typing import List

from pydantic import BaseModel

from ..errors import MalformedEncodingError
from .plain import PlainDataSet, PlainGrid, create_plain

# セル状態 → 記号
CELL_SYMBOLS = {0: "e", 1: "f", 2: "m"}
SYMBOL_CELLS = {v: k for k, v in CELL_SYMBOLS.items()}

LABEL_RE = re.compile(r"[0-9]+")
TAIL_RE = re.compile(r"(?:[mfe][0-9]*)+")
RUN_RE = re.compile(r"([mfe])([0-9]*)")


class DenseGrid(BaseModel):
    """dense 形式の盤面です。"""

    c: str
    r: str


def _derive(row: PlainDataSet) -> str:
    """行のセルをランレングス文字列にします（塗りも × もなければ空文字）。"""
    cells = row.cells
    if not cells or not any(v in (1, 2) for v in cells):
        return ""

    items = []
    for state, run in groupby(cells):
        count = len(list(run))
        items.append(f"{CELL_SYMBOLS[state]}{count if count > 1 else ''}")
    return "." + "".join(items)


def to_dense(plain: PlainGrid) -> DenseGrid:
    """プレーン形式を dense 形式に変換します。"""
    return DenseGrid(
        c="|".join(".".join(str(v) for v in col.labels) for col in plain.columns),
        r="|".join(".".join(str(v) for v in row.labels) + _derive(row) for row in plain.rows),
    )


def _parse_labels(tokens: List[str], ref: str) -> List[int]:
    if tokens == [""]:
        return []

    labels = []
    for token in tokens:
        if not LABEL_RE.fullmatch(token) or int(token) < 1:
            raise MalformedEncodingError(f"{ref}: invalid label {token!r}")
        labels.append(int(token))
    return labels


def _parse_cells(tail: str, width: int, ref: str) -> List[int]:
    if not TAIL_RE.fullmatch(tail):
        raise MalformedEncodingError(f"{ref}: invalid cell data {tail!r}")

    cells: List[int] = []
    for symbol, count in RUN_RE.findall(tail):
        n = int(count) if count else 1
        if n < 1:
            raise MalformedEncodingError(f"{ref}: invalid run length in {tail!r}")
        cells.extend([SYMBOL_CELLS[symbol]] * n)

    if len(cells) != width:
        raise MalformedEncodingError(
            f"{ref}: cell data {tail!r} covers {len(cells)} cells, expected {width}"
        )
    return cells


def to_plain(dense: DenseGrid) -> PlainGrid:
    """
    dense 形式をプレーン形式に変換します。

    解釈できない行・列があれば MalformedEncodingError を送出します。
    """
    cols = dense.c.split("|")
    rows = dense.r.split("|")
    plain = create_plain(len(cols), len(rows))

    for i, (col, text) in enumerate(zip(plain.columns, cols)):
        col.labels = _parse_labels(text.split("."), f"Col {i}")

    for i, (row, text) in enumerate(zip(plain.rows, rows)):
        ref = f"Row {i}"
        tokens = text.split(".")
        if tokens[-1] and tokens[-1][0] in SYMBOL_CELLS:
            row.cells = _parse_cells(tokens.pop(), plain.width, ref)
        row.labels = _parse_labels(tokens, ref)

    return plain

