# -*- coding: utf-8 -*-
"""
griddler.line パッケージ

1 ライン（行または列）の中だけで完結する推論をまとめています。

- scan.py   : セルを前方・後方に走査し、スペース・ブロックとラベルの範囲を求める
- links.py  : ラベルとスペース／ブロックの対応表
- solver.py : 対応表を不動点まで絞り込み、確定セルを求める LineSolver
"""

from .solver import LineSolver

__all__ = ["LineSolver"]
