# -*- coding: utf-8 -*-
"""
griddler パッケージで送出する例外をまとめたモジュールです。

いずれも ValueError のサブクラスなので、
呼び出し側は ValueError としてまとめて扱うこともできます。
"""

from __future__ import annotations


class InfeasibleLabelError(ValueError):
    """ラインのラベルがライン長や現在のセル状態と両立しないときに送出します。"""


class MalformedEncodingError(ValueError):
    """dense 形式の文字列を解釈できないときに送出します。"""


class GridSourceError(ValueError):
    """入力をグリッドとして解釈できないときに送出します。"""
