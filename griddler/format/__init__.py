# -*- coding: utf-8 -*-
"""
griddler.format パッケージ

盤面の入出力形式をまとめたサブパッケージです。
- plain.py : プレーン形式（pydantic モデル）と、その補助関数
- dense.py : プレーン形式 ↔ dense 形式（ランレングス文字列）
- image.py : 画像 → プレーン形式（黒い画素を塗りマスとして取り込む）
"""

from .dense import DenseGrid, to_dense, to_plain
from .plain import PlainDataSet, PlainGrid, PlainSet, create_plain

__all__ = [
    "DenseGrid",
    "PlainDataSet",
    "PlainGrid",
    "PlainSet",
    "create_plain",
    "to_dense",
    "to_plain",
]
