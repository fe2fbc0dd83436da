# -*- coding: utf-8 -*-
"""
ラベルとスペース／ブロックの対応表（リンク表）を扱うモジュールです。

ラベル番号・セット番号のどちらからでも引けるように、
索引を 2 つ持っています。
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Set, Tuple

from ..types import LabelSetLink


class LinkTable:
    """
    ラベル ↔ セット（スペースまたはブロック）の多対多の対応表です。

    for_label() はセット番号順、for_set() はラベル番号順でリンクを返します。
    """

    def __init__(self) -> None:
        self._links: Dict[Tuple[int, int], LabelSetLink] = {}
        self._by_label: Dict[int, Set[int]] = {}
        self._by_set: Dict[int, Set[int]] = {}

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[LabelSetLink]:
        return iter(sorted(self._links.values(), key=lambda ln: (ln.label_index, ln.set_index)))

    def __contains__(self, key: Tuple[int, int]) -> bool:
        return key in self._links

    def get(self, label_index: int, set_index: int) -> LabelSetLink | None:
        return self._links.get((label_index, set_index))

    def for_label(self, label_index: int) -> List[LabelSetLink]:
        return [
            self._links[(label_index, s)]
            for s in sorted(self._by_label.get(label_index, ()))
        ]

    def for_set(self, set_index: int) -> List[LabelSetLink]:
        return [
            self._links[(lb, set_index)]
            for lb in sorted(self._by_set.get(set_index, ()))
        ]

    def upsert(self, label_index: int, set_index: int, known: bool) -> None:
        """リンクがあれば known を更新し、なければ追加します。"""
        link = self._links.get((label_index, set_index))
        if link is not None:
            link.known = known
            return
        self._links[(label_index, set_index)] = LabelSetLink(label_index, set_index, known)
        self._by_label.setdefault(label_index, set()).add(set_index)
        self._by_set.setdefault(set_index, set()).add(label_index)

    def upsert_many(self, label_index: int, set_indexes: Iterable[int], known: bool) -> None:
        for set_index in set_indexes:
            self.upsert(label_index, set_index, known)

    def delete(self, label_index: int, set_index: int) -> bool:
        """リンクを削除します。削除したら True を返します。"""
        if self._links.pop((label_index, set_index), None) is None:
            return False
        self._by_label[label_index].discard(set_index)
        self._by_set[set_index].discard(label_index)
        return True

    def snapshot(self) -> Set[Tuple[int, int, bool]]:
        """変化の検出用に、現在のリンクを集合で返します。"""
        return {(ln.label_index, ln.set_index, ln.known) for ln in self._links.values()}
