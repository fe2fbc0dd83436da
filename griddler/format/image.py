# -*- coding: utf-8 -*-
"""
画像 ↔ プレーン形式を変換するモジュールです。

- 1 画素 = 1 セル
- 不透明な黒い画素 → 塗り（1）、それ以外 → 未確定（0）

画像は OpenCV で読み込むので、チャンネル順は BGR(A) です。
（黒かどうかだけを見るので、RGB(A) の配列を渡しても結果は同じです）
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import cv2
import numpy as np

from ..config import IMAGE_BLACK_LEVEL, IMAGE_OPAQUE_ALPHA
from ..errors import GridSourceError
from .plain import PlainGrid, create_plain

ImageLike = Union[np.ndarray, str, Path]


def load_pixels(image: ImageLike) -> np.ndarray:
    """ファイルパスなら OpenCV で読み込み、配列ならそのまま返します。"""
    if isinstance(image, (str, Path)):
        pixels = cv2.imread(str(image), cv2.IMREAD_UNCHANGED)
        if pixels is None:
            raise FileNotFoundError(f"Image not found or unreadable: {image}")
        return pixels
    return np.asarray(image)


def black_mask(pixels: np.ndarray) -> np.ndarray:
    """
    不透明な黒い画素を True とするマスクを返します。

    Parameters
    ----------
    pixels : numpy.ndarray
        shape = (h, w)（グレースケール）, (h, w, 1), (h, w, 3) または (h, w, 4)。

    Returns
    -------
    numpy.ndarray
        shape = (h, w) の bool 配列。
    """
    if pixels.ndim == 2:
        return pixels <= IMAGE_BLACK_LEVEL

    if pixels.ndim != 3 or pixels.shape[2] not in (1, 3, 4):
        raise GridSourceError(f"Unsupported image shape: {pixels.shape}")

    channels = pixels.shape[2]
    if channels == 1:
        return pixels[:, :, 0] <= IMAGE_BLACK_LEVEL

    mask = np.all(pixels[:, :, :3] <= IMAGE_BLACK_LEVEL, axis=2)
    if channels == 4:
        mask &= pixels[:, :, 3] >= IMAGE_OPAQUE_ALPHA
    return mask


def from_image(image: ImageLike) -> PlainGrid:
    """画像をプレーン形式の盤面（ラベルなし）にします。"""
    mask = black_mask(load_pixels(image))
    height, width = mask.shape
    if width == 0 or height == 0:
        raise GridSourceError(f"Empty image: {mask.shape}")

    plain = create_plain(width, height)
    for r, row in enumerate(plain.rows):
        row.cells = [int(v) for v in mask[r]]
    return plain


def to_image(plain: PlainGrid) -> np.ndarray:
    """
    盤面を BGRA 画像にします（塗り = 不透明な黒、それ以外 = 不透明な白）。

    from_image() で読み戻すと、塗りのセルだけが復元されます。
    """
    pixels = np.full((plain.height, plain.width, 4), 255, dtype=np.uint8)
    for r, row in enumerate(plain.rows):
        for c, state in enumerate(row.cells or []):
            if state == 1:
                pixels[r, c, :3] = 0
    return pixels


def save_image(plain: PlainGrid, path: Union[str, Path]) -> Path:
    """to_image() の結果を PNG などとして保存します。"""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(p), to_image(plain)):
        raise OSError(f"Failed to write image: {p}")
    return p
