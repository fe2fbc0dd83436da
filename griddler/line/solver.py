# -*- coding: utf-8 -*-
"""
1 ライン分の推論を行う LineSolver を定義するモジュールです。

ざっくり流れ
------------
1. セルを前方・後方に走査し、スペース・ブロックと各ラベルの範囲を求める（scan.py）
2. ラベル ↔ スペース、ラベル ↔ ブロックの対応表を作る
3. 次の手順を、対応表とラベル範囲が変化しなくなるまで繰り返す
   - update_maps                 : 候補ラベルが 1 つしかないブロックを確定させる
   - apply_block_value_ranges    : ブロックの取りうる長さの最小・最大を求める
   - apply_block_position_ranges : 届かない隣のブロックを使ってブロックを外側へ伸ばす
   - apply_distinct_block_pairing: ブロックのまとまり数 = ラベル数なら対応を決める
   - apply_label_bounds          : ラベルの並び順とスペースの大きさで範囲を詰める
4. solve() で、確定した × と塗りのセルを求める

どの手順も「範囲を狭める」「リンクを消す」だけなので、必ず不動点で止まります。
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Set, Tuple

from ..config import MAX_REFINE_ITERATIONS
from ..errors import InfeasibleLabelError
from ..logging_utils import get_logger
from ..types import BlockSet, CellState, Label, LineKind, LineSolveResult, SpaceSet
from .links import LinkTable
from .scan import scan_line

logger = get_logger("line")


class LineSolver:
    """
    1 ライン（行または列）のセル・ラベル・対応表を持ち、確定セルを求めるクラスです。

    コンストラクタで絞り込みを不動点まで進めておき、
    solve() で確定したセルをラインのセル配列に反映して返します。
    セル配列は呼び出し側のコピーで、Grid への書き戻しは呼び出し側が行います。

    Parameters
    ----------
    kind : LineKind
        行か列か。
    index : int
        行（列）番号。
    cells : sequence of CellState
        ラインの現在のセル状態。
    label_values : sequence of int
        ラインのラベル（数字ヒント）。
    """

    def __init__(
        self,
        kind: LineKind,
        index: int,
        cells: Sequence[CellState],
        label_values: Sequence[int],
    ) -> None:
        self.kind = kind
        self.index = index
        self.cells: List[CellState] = [CellState(c) for c in cells]
        self.labels: List[Label] = [Label(v, i) for i, v in enumerate(label_values)]
        self.space_links = LinkTable()
        self.block_links = LinkTable()

        self.spaces: List[SpaceSet]
        self.blocks: List[BlockSet]
        self.spaces, self.blocks = scan_line(self.cells, self.labels, self.index_ref)

        self._set_label_spaces()
        self._set_label_blocks()
        self.iterations = self._refine()
        self._check_windows()

    # ------------------------------------------------------------------
    # 参照用の文字列
    # ------------------------------------------------------------------
    @property
    def index_ref(self) -> str:
        return self.kind.ref(self.index)

    @property
    def state_ref(self) -> str:
        return "".join(c.symbol for c in self.cells)

    @property
    def label_ref(self) -> str:
        return ".".join(str(lb.value) for lb in self.labels)

    @property
    def labels_ref(self) -> str:
        return " / ".join(self.get_label_ref(i) for i in range(len(self.labels)))

    @property
    def console_ref(self) -> str:
        return f"{self.index_ref}: {self.state_ref} {self.label_ref}"

    @property
    def solved(self) -> bool:
        return CellState.UNKNOWN not in self.cells

    def get_label_ref(self, index: int) -> str:
        """
        ラベル 1 つ分の状態を文字列にします。

        例: "L0: R=0-4 S=0K B=1M"（K=確定リンク, M=候補リンク）
        """
        label = self.labels[index]
        s_links = ",".join(
            f"{ln.set_index}{'K' if ln.known else 'M'}" for ln in self.space_links.for_label(index)
        )
        b_links = ",".join(
            f"{ln.set_index}{'K' if ln.known else 'M'}" for ln in self.block_links.for_label(index)
        )
        return f"{label.index_ref}: R={label.earliest}-{label.latest} S={s_links} B={b_links}"

    # ------------------------------------------------------------------
    # 確定セルの算出
    # ------------------------------------------------------------------
    def solve(self) -> LineSolveResult:
        """
        × にできるセルと塗れるセルを求め、ラインのセル配列に反映します。

        - どのラベルの範囲 [earliest, latest] にも入らない未確定セル → ×
        - ラベルを左詰め・右詰めしたときに重なるセル → 塗り
        - 外側へ伸びたブロックの伸びた部分 → 塗り
        - 最大長に達したブロックの両隣 → ×
        """
        blanks: Set[int] = {i for i, c in enumerate(self.cells) if c == CellState.UNKNOWN}

        marks: Set[int] = {
            i for i in blanks
            if all(i < lb.earliest or i > lb.latest for lb in self.labels)
        }
        fills: Set[int] = {
            i for lb in self.labels for i in blanks
            if lb.latest - lb.value < i < lb.earliest + lb.value
        }

        for block in self.blocks:
            if block.max_size == 0:
                continue
            if block.edged:
                fills.update(i for i in blanks if block.left_edge <= i <= block.right_edge)
            if 1 + block.right_edge - block.left_edge == block.max_size:
                marks.update((block.left_edge - 1, block.right_edge + 1))

        marks &= blanks
        fills &= blanks
        clash = marks & fills
        if clash:
            raise InfeasibleLabelError(
                f"{self.index_ref}: cells {sorted(clash)} would be both filled and marked"
            )

        for i in marks:
            self.cells[i] = CellState.MARKED
        for i in fills:
            self.cells[i] = CellState.FILLED

        return LineSolveResult(marks=sorted(marks), fills=sorted(fills))

    # ------------------------------------------------------------------
    # 対応表の初期化
    # ------------------------------------------------------------------
    def _set_label_spaces(self) -> None:
        """各ラベルの範囲と重なるスペースをリンクします。"""
        for label in self.labels:
            spaces = [
                s for s in self.spaces
                if label.earliest <= s.end and label.latest >= s.start
            ]
            if not spaces:
                raise InfeasibleLabelError(
                    f"{self.index_ref}: at least one label could not be assigned - {self.console_ref}"
                )
            self.space_links.upsert_many(label.index, (s.index for s in spaces), len(spaces) == 1)

    def _set_label_blocks(self) -> None:
        """
        各ラベルの範囲に収まり、ラベルより長くないブロックをリンクします。

        どのラベルともリンクできないブロックがあれば、
        そのブロックを説明できるラベルがないので InfeasibleLabelError とします。
        """
        for label in self.labels:
            ranged = [
                b.index for b in self.blocks
                if b.start >= label.earliest and b.end <= label.latest and b.size <= label.value
            ]
            self.block_links.upsert_many(label.index, ranged, False)

        for block in self.blocks:
            if not self.block_links.for_set(block.index):
                raise InfeasibleLabelError(
                    f"{self.index_ref}: block at {block.start}-{block.end} matches no label"
                    f" - {self.console_ref}"
                )

    # ------------------------------------------------------------------
    # 不動点までの絞り込み
    # ------------------------------------------------------------------
    def _fingerprint(self) -> Tuple:
        return (
            tuple((lb.earliest, lb.latest) for lb in self.labels),
            frozenset(self.space_links.snapshot()),
            frozenset(self.block_links.snapshot()),
        )

    def _refine(self) -> int:
        """対応表とラベル範囲が変化しなくなるまで絞り込みを繰り返します。"""
        iterations = 0
        changed = True
        while changed:
            iterations += 1
            if iterations > MAX_REFINE_ITERATIONS:
                logger.warning(
                    "%s: refinement stopped after %d iterations", self.index_ref, MAX_REFINE_ITERATIONS
                )
                break

            before = self._fingerprint()
            links_changed = self._update_maps()
            self._apply_block_value_ranges()
            links_changed = self._apply_block_position_ranges() or links_changed
            links_changed = self._apply_distinct_block_pairing() or links_changed
            links_changed = self._apply_label_bounds() or links_changed
            changed = links_changed or self._fingerprint() != before

        return iterations

    def _tighten(self, label: Label, space: SpaceSet, left: int, right: int) -> None:
        """ラベルが [left, right] を必ず覆うとして範囲を詰めます。"""
        label.earliest = max(label.earliest, space.start, 1 + right - label.value)
        label.latest = min(label.latest, space.end, left + label.value - 1)

    def _update_maps(self) -> bool:
        """候補ラベルが 1 つしかないブロックについて、リンクを確定させます。"""
        links_changed = False
        for block in self.blocks:
            links = self.block_links.for_set(block.index)
            if len(links) != 1:
                continue

            l_idx = links[0].label_index
            label = self.labels[l_idx]

            # ブロック ↔ ラベルを確定
            self.block_links.upsert(l_idx, block.index, True)

            # ラベルの範囲を、ブロックのあるスペースとブロック自身で詰める
            space = self.spaces[block.space_index]
            self._tighten(label, space, block.start, block.end)

            # 範囲外になったスペースとのリンクを削除
            for ln in self.space_links.for_label(l_idx):
                s = self.spaces[ln.set_index]
                if label.earliest > s.end or label.latest < s.start:
                    self.space_links.delete(l_idx, s.index)

            # 残ったスペースが 1 つならそれが確定
            remaining = self.space_links.for_label(l_idx)
            if len(remaining) == 1:
                self.space_links.upsert(l_idx, remaining[0].set_index, True)

            # 範囲外になったブロックとのリンクを削除
            for ln in self.block_links.for_label(l_idx):
                if ln.set_index == block.index:
                    continue
                b = self.blocks[ln.set_index]
                if b.start > label.latest or b.end < label.earliest:
                    self.block_links.delete(l_idx, b.index)
                    links_changed = True

        return links_changed

    def _apply_block_value_ranges(self) -> None:
        """リンクしているラベルの値から、ブロックの min_size / max_size を決めます。"""
        for block in self.blocks:
            values = [self.labels[ln.label_index].value for ln in self.block_links.for_set(block.index)]
            block.min_size = min(values, default=len(self.cells))
            block.max_size = max(values, default=0)

    def _neighbour(self, block: BlockSet, offset: int) -> Optional[BlockSet]:
        """同じスペース内の隣のブロックを返します。"""
        n_idx = block.index + offset
        if 0 <= n_idx < len(self.blocks) and self.blocks[n_idx].space_index == block.space_index:
            return self.blocks[n_idx]
        return None

    def _apply_block_position_ranges(self) -> bool:
        """
        届かない（同じラベルでは覆えない）隣のブロックを調べ、
        ブロックが必ず伸びる範囲 left_edge / right_edge を求めます。
        """
        links_changed = False
        for block in self.blocks:
            space = self.spaces[block.space_index]

            prev_blk = self._neighbour(block, -1)
            if prev_blk is not None and not (1 + block.start - prev_blk.max_size > prev_blk.end):
                prev_blk = None
            next_blk = self._neighbour(block, 1)
            if next_blk is not None and not (block.end + next_blk.max_size - 1 < next_blk.start):
                next_blk = None

            unl_edge = space.start if prev_blk is None else prev_blk.end + 2
            unr_edge = space.end if next_blk is None else next_blk.start - 2

            if prev_blk is not None:
                links_changed = self._try_remove_links(block.index, for_next=False) or links_changed
            if next_blk is not None:
                links_changed = self._try_remove_links(block.index, for_next=True) or links_changed

            if block.max_size == 0:
                block.left_edge, block.right_edge = block.start, block.end
                continue

            block.left_edge = min(block.start, 1 + unr_edge - block.min_size)
            block.right_edge = max(block.end, unl_edge + block.min_size - 1)

            # 外側へ伸びたなら、確定しているラベルの範囲も詰める
            if block.edged:
                for ln in self.block_links.for_set(block.index):
                    if ln.known:
                        self._tighten(self.labels[ln.label_index], space, block.left_edge, block.right_edge)

        return links_changed

    def _try_remove_links(self, block_index: int, for_next: bool) -> bool:
        """
        届かない隣同士のブロックが、同じ 2 つのラベルだけにリンクしている場合、
        順序が逆になる組み合わせはありえないので削除します。
        """
        neighbour_index = block_index + 1 if for_next else block_index - 1
        block_labels = [ln.label_index for ln in self.block_links.for_set(block_index)]
        neighbour_labels = [ln.label_index for ln in self.block_links.for_set(neighbour_index)]
        if len(block_labels) != 2 or block_labels != neighbour_labels:
            return False

        first, second = block_labels
        if for_next:
            self.block_links.delete(first, neighbour_index)
            self.block_links.delete(second, block_index)
        else:
            self.block_links.delete(second, neighbour_index)
            self.block_links.delete(first, block_index)
        return True

    def _apply_distinct_block_pairing(self) -> bool:
        """
        互いに届くブロックをまとめ、まとまりの数がラベル数と一致するなら、
        i 番目のラベルを i 番目のまとまり以外から切り離します。
        """
        bunches: List[List[int]] = []
        prev: Optional[BlockSet] = None
        for block in self.blocks:
            in_reach = (
                prev is not None
                and prev.space_index == block.space_index
                and prev.start + prev.max_size - 1 >= block.right_edge
            )
            if in_reach:
                bunches[-1].append(block.index)
            else:
                bunches.append([block.index])
            prev = block

        if not bunches or len(bunches) != len(self.labels):
            return False

        links_changed = False
        for label in self.labels:
            own = set(bunches[label.index])
            for ln in self.block_links.for_label(label.index):
                if ln.set_index not in own:
                    self.block_links.delete(label.index, ln.set_index)
                    links_changed = True
        return links_changed

    def _apply_label_bounds(self) -> bool:
        """
        ラベル同士の並び順と、収まりうるスペースから範囲を詰めます。

        - 前のラベルより必ず 1 マス以上後ろ、次のラベルより必ず 1 マス以上前
        - ラベルが収まらないスペース・範囲外のブロックとのリンクは削除
        """
        for prev, label in zip(self.labels, self.labels[1:]):
            label.earliest = max(label.earliest, prev.earliest + prev.value + 1)
        for label, nxt in reversed(list(zip(self.labels, self.labels[1:]))):
            label.latest = min(label.latest, nxt.latest - nxt.value - 1)

        links_changed = False
        for label in self.labels:
            viable = []
            for ln in self.space_links.for_label(label.index):
                s = self.spaces[ln.set_index]
                if max(s.start, label.earliest) + label.value - 1 <= min(s.end, label.latest):
                    viable.append(s)
                else:
                    self.space_links.delete(label.index, s.index)
                    links_changed = True

            if not viable:
                raise InfeasibleLabelError(
                    f"{self.index_ref}: label {label.index_ref} ({label.value}) fits no space"
                    f" - {self.console_ref}"
                )
            label.earliest = max(label.earliest, viable[0].start)
            label.latest = min(label.latest, viable[-1].end)
            if len(viable) == 1:
                self.space_links.upsert(label.index, viable[0].index, True)

            for ln in self.block_links.for_label(label.index):
                b = self.blocks[ln.set_index]
                if b.start < label.earliest or b.end > label.latest or b.size > label.value:
                    self.block_links.delete(label.index, b.index)
                    links_changed = True

        return links_changed

    def _check_windows(self) -> None:
        """
        絞り込みの結果、収まる場所がなくなったラベルや、
        どのラベルにも属さなくなったブロックがあれば送出します。
        """
        for label in self.labels:
            if label.earliest + label.value - 1 > label.latest:
                raise InfeasibleLabelError(
                    f"{self.index_ref}: label {label.index_ref} ({label.value}) has no feasible window"
                    f" - {self.console_ref}"
                )
        for block in self.blocks:
            if not self.block_links.for_set(block.index):
                raise InfeasibleLabelError(
                    f"{self.index_ref}: block at {block.start}-{block.end} matches no label"
                    f" - {self.console_ref}"
                )
