# -*- coding: utf-8 -*-
"""
ラインのセルを走査するモジュールです。

前方パスでは
- スペース（× 以外の連続）
- ブロック（塗りマスの連続）
- 各ラベルの earliest（左詰めにしたときの開始位置）
を求めます。

後方パスでは、ラインを反転して同じ処理を行い、
各ラベルの latest（右詰めにしたときの終了位置）だけを求めます。

どちらのパスも「ラベルを順番に詰めていく」だけの緩い配置なので、
得られる範囲は真の範囲を必ず含みます。
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..errors import InfeasibleLabelError
from ..types import BlockSet, CellState, Label, SpaceSet


def perform_cell_pass(
    cells: Sequence[CellState],
    labels: List[Label],
    forwards: bool,
) -> Tuple[List[SpaceSet], List[BlockSet]]:
    """
    セルを一方向に走査し、ラベルの範囲を更新します。

    Parameters
    ----------
    cells : sequence of CellState
        ラインのセル。
    labels : list of Label
        ラインのラベル。earliest（forwards=True）または
        latest（forwards=False）がその場で書き換わります。
    forwards : bool
        True なら左（上）から、False なら右（下）から走査します。

    Returns
    -------
    spaces : list of SpaceSet
    blocks : list of BlockSet
        前方パスのときだけ意味を持ちます（後方パスでは空リスト）。
    """
    n = len(cells)
    spaces: List[SpaceSet] = []
    blocks: List[BlockSet] = []
    pending: List[BlockSet] = []  # 現在のスペース内のブロック

    space_start = -1
    block_start = -1
    label_start = -1
    block_count = 0
    label_index = 0 if forwards else len(labels) - 1
    step = 1 if forwards else -1

    def place(label: Label, start: int) -> None:
        if forwards:
            label.earliest = start
        else:
            label.latest = n - (start + 1)

    ordered = list(cells) if forwards else list(reversed(cells))
    # 末尾に × を 1 つ足して、最後のスペース・ブロックを閉じる
    ordered.append(CellState.MARKED)

    for i, cell in enumerate(ordered):
        # --- スペースとラベルの開始 ---
        if space_start == -1 and cell != CellState.MARKED:
            space_start = i
            label_start = i

        # --- ブロックの開始 ---
        if block_start == -1 and cell == CellState.FILLED:
            block_start = i

        label = labels[label_index] if 0 <= label_index < len(labels) else None

        # --- ラベルが長さに達した ---
        if label is not None and label_start != -1 and i - label_start >= label.value:
            if block_start != -1:
                # ブロックに接しているので、ブロックの終わりまでずらす
                label_start = i - label.value
            else:
                place(label, label_start)
                label_start += 1 + label.value
                label_index += step

        # --- ブロックの終了 ---
        space_index = len(spaces)
        if block_start != -1 and cell != CellState.FILLED:
            block_len = i - block_start
            pending.append(
                BlockSet(
                    start=block_start,
                    size=block_len,
                    index=block_count,
                    space_index=space_index,
                )
            )
            block_count += 1

            # ラベルより長いブロックは覆えないので、ブロックの後ろからやり直す
            if label is not None and block_len > label.value:
                label_start = i + 1

            # ブロックの終わりでちょうどラベルが収まった
            if label is not None and i - label_start == label.value:
                place(label, label_start)
                label_index += step
                label_start += 1 + label.value

            block_start = -1

        # --- スペースの終了 ---
        if space_start != -1 and cell == CellState.MARKED:
            if forwards:
                spaces.append(SpaceSet(start=space_start, size=i - space_start, index=space_index))
                blocks.extend(pending)
            pending = []
            space_start = -1
            label_start = n

    return spaces, blocks


def scan_line(
    cells: Sequence[CellState],
    labels: List[Label],
    line_ref: str = "",
) -> Tuple[List[SpaceSet], List[BlockSet]]:
    """
    前方・後方の両パスを実行し、スペースとブロックを返します。

    どちらかのパスでラベルを置ききれなかった場合や、
    earliest と latest の間にラベルが収まらない場合は
    InfeasibleLabelError を送出します。
    """
    spaces, blocks = perform_cell_pass(cells, labels, forwards=True)
    perform_cell_pass(cells, labels, forwards=False)

    for label in labels:
        if not label.placed:
            raise InfeasibleLabelError(
                f"{line_ref}: label {label.index_ref} ({label.value}) could not be placed"
            )
        if label.earliest + label.value - 1 > label.latest:
            raise InfeasibleLabelError(
                f"{line_ref}: label {label.index_ref} ({label.value}) has no feasible window "
                f"({label.earliest}-{label.latest})"
            )

    return spaces, blocks
