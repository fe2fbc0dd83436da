# -*- coding: utf-8 -*-
"""
griddler 全体で共通して使う設定値をまとめたモジュールです。

実運用時には、ここを編集することで
- 伝播ループの打ち切り上限
- 画像取り込み時の「黒マス」判定の閾値
- パズル一覧 CSV の場所
- トレースログの出力先
などを簡単に変更できます。
"""

from __future__ import annotations

# ==== 解探索関連 ===========================================================

# Grid.solve() のワークリストで処理するライン数の上限。
# 通常は不動点に達して自然に止まるため、保険としての値です。
MAX_PROPAGATION_PASSES: int = 10000

# 1 ライン内の絞り込みループ（不動点計算）の反復上限。
MAX_REFINE_ITERATIONS: int = 1000

# ヒント候補が複数あるとき、どれを返すかを決める値。
# 候補数で割った余りの位置の候補を返します。
HINT_SEED: int = 263


# ==== 画像取り込み関連 =====================================================

# この値以下の画素値を「黒」とみなします（各色チャンネル共通）。
IMAGE_BLACK_LEVEL: int = 0

# アルファチャンネルがある場合、この値以上を「不透明」とみなします。
IMAGE_OPAQUE_ALPHA: int = 255


# ==== パズル一覧（CSV）関連 ================================================

# パズル一覧 CSV のパス
# 例: data/puzzles.csv （name, columns, rows 列）
DEFAULT_CATALOG_PATH: str = "data/puzzles.csv"


# ==== ログ関連 =============================================================

# ラインごとの詳細ログ（ラベルの範囲やリンク）を書き出す場所
TRACE_LOG_DIR: str = "logs"
TRACE_LOG_FILE: str = "line_trace.log"
