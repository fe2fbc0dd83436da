# -*- coding: utf-8 -*-
"""
ログ出力の設定を行うモジュールです。

- get_logger(name)   : griddler 全体で使う通常のロガー（標準エラー出力, INFO）
- get_trace_logger() : ラインごとの詳細を書き出すロガー（ファイル, DEBUG）
"""

from __future__ import annotations

import logging
import os

from .config import TRACE_LOG_DIR, TRACE_LOG_FILE

# griddler パッケージ共通で使うロガー名
LOGGER_NAME = "griddler"
TRACE_LOGGER_NAME = "griddler_trace"


# 出力の書式（通常ログ）
CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"


def _ensure_console_handler(base: logging.Logger) -> None:
    """griddler ロガーに標準エラー出力のハンドラを 1 つだけ付けます。"""
    if base.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    base.addHandler(handler)
    base.setLevel(logging.INFO)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    griddler 全体で共通して使う logger を返します。

    Parameters
    ----------
    name : str or None
        "grid" や "line" のようなサブ名。指定すると "griddler.grid" のような
        子ロガーを返します（出力先は親の griddler ロガーのものを使います）。
    """
    base = logging.getLogger(LOGGER_NAME)
    _ensure_console_handler(base)
    return base if name is None else base.getChild(name)


def get_trace_logger() -> logging.Logger:
    """
    ラインごとのラベル範囲・リンクの状態を書き出す logger を返します。

    ログファイルは最初に呼ばれたときに作成します。
    """
    logger = logging.getLogger(TRACE_LOGGER_NAME)

    if logger.handlers:
        return logger  # すでに初期化済み

    logger.setLevel(logging.DEBUG)

    os.makedirs(TRACE_LOG_DIR, exist_ok=True)
    log_file = os.path.join(TRACE_LOG_DIR, TRACE_LOG_FILE)

    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    fh.setFormatter(formatter)

    logger.addHandler(fh)

    # 他ロガーへの伝播禁止（stdout に出さない）
    logger.propagate = False

    return logger
