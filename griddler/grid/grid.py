# -*- coding: utf-8 -*-
"""
盤面全体を持ち、行と列の推論を交互に伝播させる Grid を定義するモジュールです。

Grid.solve() は「未処理ライン (kind, index) のキュー（ワークリスト）」で伝播させます。

ざっくり流れ
------------
1. すべての列・行をキューに入れる
2. キューからラインを 1 つ取り出し、LineSolver で確定セルを求める
3. 確定セルを盤面に書き込み、そのセルと直交するラインをキューに入れる
   （すでにキューにあるラインは入れない）
4. キューが空になるまで繰り返す

最後に未確定セルが残っていなければ SOLVED、残っていれば STALLED です。
STALLED はエラーではなく、「これ以上は推測が必要」という終了状態です。
"""

from __future__ import annotations

import time
from collections import deque
from typing import Deque, List, Optional, Sequence, Set, Tuple

import numpy as np

from ..config import HINT_SEED, MAX_PROPAGATION_PASSES
from ..errors import GridSourceError, InfeasibleLabelError
from ..format.plain import PlainDataSet, PlainGrid, PlainSet
from ..line.solver import LineSolver
from ..logging_utils import get_logger, get_trace_logger
from ..types import (
    CellState,
    GridState,
    HintResult,
    Label,
    LineKind,
    LineSolveResult,
    SolveResult,
)

logger = get_logger("grid")

Line = Tuple[LineKind, int]


class Grid:
    """
    お絵かきロジックの盤面です。

    セルは (row, col) で引ける 2 次元の numpy 配列 1 つだけに持ち、
    ラインを解くときはその行（列）をコピーして LineSolver に渡し、
    結果を書き戻します。

    Parameters
    ----------
    width : int
        列数。
    height : int
        行数。
    trace : bool
        True のとき、ラインごとの詳細をトレースログに書き出します。
    """

    def __init__(self, width: int, height: int, trace: bool = False) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be positive (got {width}x{height})")

        self.width = width
        self.height = height
        self.trace = trace
        self.state = GridState.UNSOLVED
        self._cells = np.zeros((height, width), dtype=np.int8)
        self._row_labels: List[List[int]] = [[] for _ in range(height)]
        self._column_labels: List[List[int]] = [[] for _ in range(width)]

    @classmethod
    def load(cls, plain: PlainGrid, trace: bool = False) -> "Grid":
        """プレーン形式の盤面から Grid を作ります。"""
        grid = cls(len(plain.columns), len(plain.rows), trace=trace)

        # セルを先にすべて置き、ラベルはそのセルに対して検証する
        for r, row in enumerate(plain.rows):
            if row.cells is not None and len(row.cells) != grid.width:
                raise GridSourceError(
                    f"Row {r}: expected {grid.width} cells, got {len(row.cells)}"
                )
            for c, state in enumerate(row.cells or []):
                if state != CellState.UNKNOWN:
                    grid.set_state(LineKind.ROW, r, c, CellState(state))

        for c, col in enumerate(plain.columns):
            grid.set_labels(LineKind.COLUMN, c, col.labels)
        for r, row in enumerate(plain.rows):
            grid.set_labels(LineKind.ROW, r, row.labels)

        return grid

    # ------------------------------------------------------------------
    # 状態の参照
    # ------------------------------------------------------------------
    @property
    def cells(self) -> np.ndarray:
        """セル配列のコピー（shape = (height, width)）。"""
        return self._cells.copy()

    @property
    def unsolved_cell_count(self) -> int:
        return int(np.count_nonzero(self._cells == int(CellState.UNKNOWN)))

    @property
    def solved(self) -> bool:
        return self.unsolved_cell_count == 0

    def line_length(self, kind: LineKind) -> int:
        return self.width if kind is LineKind.ROW else self.height

    def line_count(self, kind: LineKind) -> int:
        return self.height if kind is LineKind.ROW else self.width

    def get_labels(self, kind: LineKind, index: int) -> List[int]:
        self._check_index(kind, index)
        target = self._row_labels if kind is LineKind.ROW else self._column_labels
        return list(target[index])

    def line_cells(self, kind: LineKind, index: int) -> List[CellState]:
        """ラインのセルをコピーして返します。"""
        self._check_index(kind, index)
        line = self._cells[index, :] if kind is LineKind.ROW else self._cells[:, index]
        return [CellState(int(v)) for v in line]

    def line_solver(self, kind: LineKind, index: int) -> LineSolver:
        return LineSolver(kind, index, self.line_cells(kind, index), self.get_labels(kind, index))

    def get_state(self, row: int, col: int) -> CellState:
        self._check_cell(LineKind.ROW, row, col)
        return CellState(int(self._cells[row, col]))

    # ------------------------------------------------------------------
    # 状態の変更
    # ------------------------------------------------------------------
    def set_state(self, kind: LineKind, index: int, cell_index: int, state: CellState) -> None:
        """
        ライン基準の位置でセルの状態を設定します。

        位置が盤面の外なら IndexError、state が 0/1/2 以外なら ValueError を送出します。
        """
        self._check_cell(kind, index, cell_index)
        state = CellState(state)
        if kind is LineKind.ROW:
            self._cells[index, cell_index] = int(state)
        else:
            self._cells[cell_index, index] = int(state)

    def set_cell(self, row: int, col: int, state: CellState) -> None:
        self.set_state(LineKind.ROW, row, col, state)

    def set_labels(self, kind: LineKind, index: int, values: Sequence[int]) -> None:
        """
        ラインのラベルを設定します。

        ラベルの最小合計長がライン長を超える場合や、
        現在のセル状態ではラベルを置ききれない場合は InfeasibleLabelError を送出し、
        ラベルは変更しません。
        """
        self._check_index(kind, index)
        line_ref = kind.ref(index)
        values = [int(v) for v in values]

        if any(v < 1 for v in values):
            raise InfeasibleLabelError(f"{line_ref}: label values must be positive ({values})")

        set_size = self.line_length(kind)
        min_size = Label.min_size(values)
        if min_size > set_size:
            raise InfeasibleLabelError(
                f"{line_ref}: The minimum total label size ({min_size}) "
                f"exceeds the set length ({set_size})"
            )

        # 現在のセルで実際に置けるかを確認（置けなければここで送出）
        LineSolver(kind, index, self.line_cells(kind, index), values)

        target = self._row_labels if kind is LineKind.ROW else self._column_labels
        target[index] = values

    # ------------------------------------------------------------------
    # 解く
    # ------------------------------------------------------------------
    def solve(self) -> SolveResult:
        """
        すべてのラインを起点に、確定セルがなくなるまで伝播させます。

        Returns
        -------
        SolveResult
            解いた後の盤面、solved、経過時間、確定したセルなど。
        """
        t0 = time.perf_counter()
        self.state = GridState.PROPAGATING
        logger.info("=== solve() START === (%dx%d, %d unknown)", self.width, self.height, self.unsolved_cell_count)

        queue: Deque[Line] = deque(self._all_lines())
        queued: Set[Line] = set(queue)
        solved_cells: List[Tuple[int, int, CellState]] = []
        passes = 0

        while queue:
            if passes >= MAX_PROPAGATION_PASSES:
                logger.warning("Propagation stopped after %d passes.", passes)
                break

            kind, index = queue.popleft()
            queued.discard((kind, index))
            passes += 1

            try:
                result = self._solve_line(kind, index)
            except InfeasibleLabelError:
                self.state = GridState.UNSOLVED
                logger.error("solve() aborted at %s", kind.ref(index))
                raise
            if not result:
                continue

            for cell_index in result.changed:
                row, col = (index, cell_index) if kind is LineKind.ROW else (cell_index, index)
                solved_cells.append((row, col, self.get_state(row, col)))

                cross = (kind.other, cell_index)
                if cross not in queued:
                    queue.append(cross)
                    queued.add(cross)

        solved = self.solved
        self.state = GridState.SOLVED if solved else GridState.STALLED
        elapsed_ms = (time.perf_counter() - t0) * 1000.0

        logger.info(
            "=== solve() END === %s in %.1f ms (%d passes, %d cells, %d unknown)",
            self.state.value, elapsed_ms, passes, len(solved_cells), self.unsolved_cell_count,
        )
        return SolveResult(
            plain=self.export_plain(),
            solved=solved,
            elapsed_ms=elapsed_ms,
            solved_cells=solved_cells,
            passes=passes,
        )

    def next_hint(self) -> Optional[HintResult]:
        """
        すべてのラインを 1 回ずつだけ解き（伝播はしない）、
        新しくセルが確定したラインの 1 つをヒントとして返します。

        この 1 回分で確定したセルは盤面に反映されます。
        ヒントがなければ None を返します。
        """
        hintworthy: List[HintResult] = []
        for kind, index in self._all_lines():
            result = self._solve_line(kind, index)
            if result:
                hintworthy.append(HintResult(kind=kind, index=index, cells=result.changed))

        if not hintworthy:
            logger.info("No hint available.")
            return None

        hint = hintworthy[HINT_SEED % len(hintworthy)]
        logger.info("Hint: %s (%d candidates)", hint.kind.ref(hint.index), len(hintworthy))
        return hint

    # ------------------------------------------------------------------
    # 出力
    # ------------------------------------------------------------------
    def export_plain(self) -> PlainGrid:
        return PlainGrid(
            columns=[PlainSet(labels=list(lb)) for lb in self._column_labels],
            rows=[
                PlainDataSet(labels=list(lb), cells=[int(v) for v in self._cells[r, :]])
                for r, lb in enumerate(self._row_labels)
            ],
        )

    def to_text(self) -> str:
        """盤面を 1 行 1 文字列のテキストにします（□ 未確定, ■ 塗り, ▣ ×）。"""
        return "\n".join(
            "".join(CellState(int(v)).symbol for v in self._cells[r, :])
            for r in range(self.height)
        )

    # ------------------------------------------------------------------
    # 内部処理
    # ------------------------------------------------------------------
    def _all_lines(self) -> List[Line]:
        return [(LineKind.COLUMN, c) for c in range(self.width)] + [
            (LineKind.ROW, r) for r in range(self.height)
        ]

    def _check_index(self, kind: LineKind, index: int) -> None:
        if not 0 <= index < self.line_count(kind):
            raise IndexError(f"{kind.ref(index)}: Not found")

    def _check_cell(self, kind: LineKind, index: int, cell_index: int) -> None:
        self._check_index(kind, index)
        if not 0 <= cell_index < self.line_length(kind):
            raise IndexError(f"{kind.ref(index)}: cell {cell_index} not found")

    def _solve_line(self, kind: LineKind, index: int) -> Optional[LineSolveResult]:
        """1 ラインを解いて盤面に書き戻します。解き終わったラインは None。"""
        cells = self.line_cells(kind, index)
        if CellState.UNKNOWN not in cells:
            return None

        solver = LineSolver(kind, index, cells, self.get_labels(kind, index))
        result = solver.solve()

        for i in result.marks:
            self.set_state(kind, index, i, CellState.MARKED)
        for i in result.fills:
            self.set_state(kind, index, i, CellState.FILLED)

        if self.trace:
            trace = get_trace_logger()
            trace.debug("%s | %s", solver.console_ref, solver.labels_ref)
        if result:
            logger.debug(
                "%s: marks=%s fills=%s", solver.index_ref, result.marks, result.fills
            )
        return result
