# -*- coding: utf-8 -*-
"""
griddler.grid パッケージ

盤面全体に関する処理をまとめたサブパッケージです。
- grid.py    : 行・列の推論を伝播させる Grid
- sources.py : いろいろな入力（サイズ・dense・プレーン・画像）の解釈
"""

from .grid import Grid
from .sources import Dimensions, GridSource, ImageSource, as_plain, load_grid, parse_source

__all__ = [
    "Dimensions",
    "Grid",
    "GridSource",
    "ImageSource",
    "as_plain",
    "load_grid",
    "parse_source",
]
