# -*- coding: utf-8 -*-
"""
盤面の入力を解釈するモジュールです。

入力は次のいずれかで、API の入口で一度だけ PlainGrid に変換します。
- Dimensions  : 幅・高さだけ（空の盤面）
- DenseGrid   : dense 形式
- PlainGrid   : プレーン形式
- ImageSource : 画像（黒い画素が塗り）
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

from ..errors import GridSourceError
from ..format.dense import DenseGrid, to_plain
from ..format.image import ImageLike, from_image
from ..format.plain import PlainGrid, create_plain
from .grid import Grid


@dataclass
class Dimensions:
    """幅と高さだけを指定した、空の盤面です。"""

    width: int
    height: int


@dataclass
class ImageSource:
    """画像（配列またはファイルパス）から取り込む盤面です。"""

    image: ImageLike


GridSource = Union[Dimensions, DenseGrid, PlainGrid, ImageSource]


def as_plain(source: GridSource) -> PlainGrid:
    """入力をプレーン形式に変換します。"""
    if isinstance(source, PlainGrid):
        return source
    if isinstance(source, DenseGrid):
        return to_plain(source)
    if isinstance(source, Dimensions):
        if source.width < 1 or source.height < 1:
            raise GridSourceError(f"Invalid dimensions: {source.width}x{source.height}")
        return create_plain(source.width, source.height)
    if isinstance(source, ImageSource):
        return from_image(source.image)
    raise GridSourceError("Unable to interpret as a plain grid.")


def parse_source(data: Mapping[str, Any]) -> GridSource:
    """
    dict（JSON など）から入力の種類を判定します。

    - {"width", "height"} または {"x", "y"} → Dimensions
    - {"c", "r"}                          → DenseGrid
    - {"columns", "rows"}                 → PlainGrid
    """
    if "width" in data and "height" in data:
        return Dimensions(int(data["width"]), int(data["height"]))
    if "x" in data and "y" in data:
        return Dimensions(int(data["x"]), int(data["y"]))
    if "c" in data and "r" in data:
        return DenseGrid(c=data["c"], r=data["r"])
    if "columns" in data and "rows" in data:
        return PlainGrid.model_validate(data)
    raise GridSourceError("Unable to interpret as a plain grid.")


def load_grid(source: GridSource, trace: bool = False) -> Grid:
    """入力から Grid を作ります。"""
    return Grid.load(as_plain(source), trace=trace)
