# -*- coding: utf-8 -*-
"""
プレーン形式の盤面を表すモジュールです。

プレーン形式は、Grid と外部（dense 形式・画像・HTTP API）との間で
やり取りする素朴な表現です。

    {
      "columns": [{"labels": [1, 2]}, ...],            # 長さ = 列数
      "rows":    [{"labels": [3], "cells": [0, 1, 2]}, ...]  # 長さ = 行数
    }

cells の値は 0 = 未確定, 1 = 塗り, 2 = × です。
"""

from __future__ import annotations

from itertools import groupby
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, PositiveInt, field_validator


class PlainSet(BaseModel):
    """列（ラベルのみ）。"""

    labels: List[PositiveInt] = Field(default_factory=list)

    @field_validator("labels", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return [] if v is None else v


class PlainDataSet(PlainSet):
    """行（ラベルとセル）。"""

    cells: Optional[List[Literal[0, 1, 2]]] = None


class PlainGrid(BaseModel):
    """プレーン形式の盤面です。"""

    columns: List[PlainSet]
    rows: List[PlainDataSet]

    @property
    def width(self) -> int:
        return len(self.columns)

    @property
    def height(self) -> int:
        return len(self.rows)


def create_plain(columns: int, rows: int) -> PlainGrid:
    """ラベルなし・全セル未確定の盤面を作ります。"""
    return PlainGrid(
        columns=[PlainSet(labels=[]) for _ in range(columns)],
        rows=[PlainDataSet(labels=[], cells=[0] * columns) for _ in range(rows)],
    )


def wipe_cells(plain: PlainGrid) -> None:
    """すべてのセルを未確定に戻します。"""
    for row in plain.rows:
        row.cells = [0] * plain.width


def wipe_labels(plain: PlainGrid) -> None:
    """すべてのラベルを消します。"""
    for row in plain.rows:
        row.labels = []
    for col in plain.columns:
        col.labels = []


def run_lengths(cells: List[int]) -> List[int]:
    """塗りマス（1）の連続の長さを順に返します。"""
    return [len(list(run)) for state, run in groupby(cells) if state == 1]


def scrape_labels(plain: PlainGrid) -> None:
    """
    塗りマスの並びから、行・列のラベルを作り直します。

    画像から取り込んだ絵をパズルにするときなどに使います。
    """
    grid_rows = [row.cells or [0] * plain.width for row in plain.rows]
    for row, cells in zip(plain.rows, grid_rows):
        row.labels = run_lengths(cells)
    for c, col in enumerate(plain.columns):
        col.labels = run_lengths([cells[c] for cells in grid_rows])
