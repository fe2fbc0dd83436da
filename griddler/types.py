# -*- coding: utf-8 -*-
"""
お絵かきロジック solver で使う主なデータ構造（型）をまとめたモジュールです。

dataclass を使うことで、
「この構造体はどんなフィールドを持っているのか」を
分かりやすく表現しています。

- CellState / LineKind : セルの状態と、行・列の種別
- Label                : 1 つの数字ヒント（連続して塗るマスの長さ）
- BlockSet / SpaceSet  : 塗りマスの連続（ブロック）と、×以外の連続（スペース）
- LabelSetLink         : ラベルとスペース／ブロックの対応関係
- LineSolveResult / SolveResult / HintResult : 解いた結果
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, List, Optional, Tuple

# グリッド上の座標を表す型 (row, col)
CellCoord = Tuple[int, int]


class CellState(IntEnum):
    """
    セルの状態です。値はプレーン形式の cells 配列（0/1/2）と一致させています。

    UNKNOWN → FILLED / MARKED の一方向にしか遷移しません。
    """

    UNKNOWN = 0
    FILLED = 1
    MARKED = 2

    @property
    def symbol(self) -> str:
        """テキスト表示用の記号を返します。"""
        return CELL_SYMBOLS[self]


CELL_SYMBOLS = {
    CellState.UNKNOWN: "□",
    CellState.FILLED: "■",
    CellState.MARKED: "▣",
}


class LineKind(Enum):
    """ライン（行 or 列）の種別です。"""

    ROW = "row"
    COLUMN = "column"

    @property
    def other(self) -> "LineKind":
        """直交する側の種別を返します。"""
        return LineKind.COLUMN if self is LineKind.ROW else LineKind.ROW

    def ref(self, index: int) -> str:
        """ログやエラーメッセージ用の参照文字列（例: "Row 3"）。"""
        return f"{self.value.capitalize()[:3]} {index}"


class GridState(Enum):
    """Grid.solve() の状態遷移です。"""

    UNSOLVED = "unsolved"
    PROPAGATING = "propagating"
    SOLVED = "solved"
    STALLED = "stalled"


@dataclass
class Label:
    """
    1 つの数字ヒントを表すクラスです。

    Attributes
    ----------
    value : int
        連続して塗るマスの長さ（1 以上）。
    index : int
        ライン内でのラベルの並び順（0 始まり）。
    earliest : int or None
        このラベルの連続が始まりうる最も左（上）の位置。
    latest : int or None
        このラベルの連続が終わりうる最も右（下）の位置。
    """

    value: int
    index: int
    earliest: Optional[int] = None
    latest: Optional[int] = None

    @property
    def index_ref(self) -> str:
        return f"L{self.index}"

    @property
    def placed(self) -> bool:
        """前方・後方の両パスで位置が決まったかどうか。"""
        return self.earliest is not None and self.latest is not None

    @staticmethod
    def min_size(values: List[int]) -> int:
        """
        ラベル列を並べるのに最低限必要な長さを返します。

        各ラベルの合計に、ラベル間の空白 1 マスずつを加えたものです。
        例: [3, 3] -> 3 + 1 + 3 = 7
        """
        if not values:
            return 0
        return sum(values) + len(values) - 1


@dataclass
class SpaceSet:
    """× 以外のセルが連続する区間（スペース）です。"""

    start: int
    size: int
    index: int

    @property
    def end(self) -> int:
        return self.start + self.size - 1


@dataclass
class BlockSet:
    """
    塗りマスが連続する区間（ブロック）です。

    min_size / max_size はリンクしているラベルの値の最小・最大、
    left_edge / right_edge はこのブロックを含む連続が
    必ず塗られる範囲（はみ出し分を含む）を表します。
    """

    start: int
    size: int
    index: int
    space_index: int
    min_size: int = 0
    max_size: int = 0
    left_edge: int = -1
    right_edge: int = -1

    def __post_init__(self) -> None:
        if self.left_edge < 0:
            self.left_edge = self.start
        if self.right_edge < 0:
            self.right_edge = self.end

    @property
    def end(self) -> int:
        return self.start + self.size - 1

    @property
    def edged(self) -> bool:
        """観測された範囲より外側まで確定しているかどうか。"""
        return self.left_edge < self.start or self.right_edge > self.end


@dataclass
class LabelSetLink:
    """
    ラベルとスペース（またはブロック）の対応関係です。

    known が True のとき、その対応しか残っていないことを表します。
    """

    label_index: int
    set_index: int
    known: bool = False


@dataclass
class LineSolveResult:
    """1 ラインを解いた結果（新たに × / 塗りになったセルの位置）。"""

    marks: List[int] = field(default_factory=list)
    fills: List[int] = field(default_factory=list)

    @property
    def changed(self) -> List[int]:
        return sorted(self.marks + self.fills)

    def __bool__(self) -> bool:
        return bool(self.marks or self.fills)


@dataclass
class SolveResult:
    """
    Grid.solve() の結果です。

    Attributes
    ----------
    plain : PlainGrid
        解いた後の盤面（プレーン形式）。
    solved : bool
        未確定のセルが残っていなければ True。
    elapsed_ms : float
        solve() にかかった時間（ミリ秒）。
    solved_cells : list of (row, col, CellState)
        今回の solve() で確定したセル。
    passes : int
        ライン単位の処理回数。
    """

    plain: Any
    solved: bool
    elapsed_ms: float
    solved_cells: List[Tuple[int, int, CellState]] = field(default_factory=list)
    passes: int = 0


@dataclass
class HintResult:
    """ヒントとして示すライン（と、そこで確定したセル）です。"""

    kind: LineKind
    index: int
    cells: List[int] = field(default_factory=list)
