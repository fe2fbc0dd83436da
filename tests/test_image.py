"""
Unit tests for image import / export.

Images are built as numpy arrays; file based tests write PNGs with OpenCV into tmp_path.
"""

import cv2
import numpy as np
import pytest

from griddler.errors import GridSourceError
from griddler.format.image import black_mask, from_image, load_pixels, save_image, to_image
from griddler.format.plain import create_plain


# ============================================================================
# Fixtures for creating synthetic test images
# ============================================================================

@pytest.fixture
def bgra_image():
    """2x3 の BGRA 画像: (0,0) 不透明な黒, (0,2) 透明な黒, (1,1) 半透明の黒, 他は白。"""
    img = np.full((2, 3, 4), 255, dtype=np.uint8)
    img[0, 0] = (0, 0, 0, 255)
    img[0, 2] = (0, 0, 0, 0)
    img[1, 1] = (0, 0, 0, 128)
    return img


@pytest.fixture
def gray_image():
    img = np.full((2, 2), 200, dtype=np.uint8)
    img[1, 0] = 0
    return img


# ============================================================================
# black_mask
# ============================================================================

class TestBlackMask:

    def test_alpha_must_be_opaque(self, bgra_image):
        mask = black_mask(bgra_image)

        assert mask.tolist() == [[True, False, False], [False, False, False]]

    def test_grayscale(self, gray_image):
        assert black_mask(gray_image).tolist() == [[False, False], [True, False]]

    def test_single_channel(self, gray_image):
        assert black_mask(gray_image[:, :, np.newaxis]).tolist() == [[False, False], [True, False]]

    def test_dark_gray_is_not_black(self):
        img = np.full((1, 1, 3), 1, dtype=np.uint8)

        assert not black_mask(img)[0, 0]

    def test_unsupported_shape(self):
        with pytest.raises(GridSourceError):
            black_mask(np.zeros((2, 2, 2), dtype=np.uint8))


# ============================================================================
# from_image / to_image
# ============================================================================

class TestConversion:

    def test_from_image(self, bgra_image):
        plain = from_image(bgra_image)

        assert (plain.width, plain.height) == (3, 2)
        assert [r.cells for r in plain.rows] == [[1, 0, 0], [0, 0, 0]]
        assert all(r.labels == [] for r in plain.rows)

    def test_empty_image(self):
        with pytest.raises(GridSourceError):
            from_image(np.zeros((0, 3, 3), dtype=np.uint8))

    def test_to_image_only_keeps_fills(self):
        plain = create_plain(3, 1)
        plain.rows[0].cells = [1, 2, 0]

        img = to_image(plain)

        assert img.shape == (1, 3, 4)
        assert img[0, 0].tolist() == [0, 0, 0, 255]
        assert img[0, 1].tolist() == [255, 255, 255, 255]
        assert [r.cells for r in from_image(img).rows] == [[1, 0, 0]]


# ============================================================================
# Files
# ============================================================================

class TestFiles:

    def test_save_and_load(self, tmp_path):
        plain = create_plain(2, 2)
        plain.rows[0].cells = [1, 0]
        plain.rows[1].cells = [0, 1]

        path = save_image(plain, tmp_path / "out" / "picture.png")

        assert path.exists()
        assert load_pixels(path).shape == (2, 2, 4)
        assert [r.cells for r in from_image(str(path)).rows] == [[1, 0], [0, 1]]

    def test_rgb_png(self, tmp_path):
        img = np.full((1, 2, 3), 255, dtype=np.uint8)
        img[0, 1] = 0
        path = tmp_path / "rgb.png"
        cv2.imwrite(str(path), img)

        assert [r.cells for r in from_image(path).rows] == [[0, 1]]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_pixels(tmp_path / "missing.png")
