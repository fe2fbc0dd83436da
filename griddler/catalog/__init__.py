# -*- coding: utf-8 -*-
"""
griddler.catalog パッケージ

パズル一覧（CSV）の読み込みをまとめています。
"""

from .loader import iter_puzzles, load_catalog

__all__ = ["iter_puzzles", "load_catalog"]
