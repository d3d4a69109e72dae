"""Synthetic test images and noise."""

from __future__ import annotations

import numpy as np

from improclab.common import CANVAS_SIZE, CIRCLE_RADIUS

_RECT_TOP_LEFT = (23, 23)
_RECT_BOTTOM_RIGHT = (233, 233)


def _saturate_u8(value) -> int:
    return int(np.clip(round(value), 0, 255))


def fill_rectangle(img: np.ndarray, top_left, bottom_right, value) -> None:
    """Fill, in place, the rectangle spanned by two (x, y) corners; the far corner is exclusive."""
    x0, x1 = sorted((int(top_left[0]), int(bottom_right[0])))
    y0, y1 = sorted((int(top_left[1]), int(bottom_right[1])))
    img[max(y0, 0):max(y1, 0), max(x0, 0):max(x1, 0)] = value


def fill_circle(img: np.ndarray, center, radius, value) -> None:
    """Fill, in place, the disc of integer radius around an (x, y) center."""
    r = int(radius)
    if r < 0:
        raise ValueError(f"radius must be non-negative, got {radius}")
    cx, cy = (round(c) for c in center)
    rows, cols = img.shape[:2]
    yy, xx = np.ogrid[:rows, :cols]
    mask = (xx - cx) ** 2 + (yy - cy) ** 2 <= r * r
    img[mask] = value


def gen_tgtimg00(lev0: int, lev1: int, lev2: int) -> np.ndarray:
    """Build the 256x256 test target: background, inner square and central disc."""
    img = np.full((CANVAS_SIZE, CANVAS_SIZE), _saturate_u8(lev0), dtype=np.uint8)
    fill_rectangle(img, _RECT_TOP_LEFT, _RECT_BOTTOM_RIGHT, _saturate_u8(lev1))
    center = (CANVAS_SIZE / 2.0, CANVAS_SIZE / 2.0)
    fill_circle(img, center, CIRCLE_RADIUS, _saturate_u8(lev2))
    return img


def add_noise_gau(img, std, seed: int | None = 0) -> np.ndarray:
    """Return a copy of an 8-bit image with zero-mean Gaussian noise added.

    The default fixed seed makes the noise reproducible between calls.
    """
    arr = np.asarray(img)
    if arr.dtype != np.uint8:
        raise ValueError(f"expected an 8-bit image, got {arr.dtype}")
    rng = np.random.default_rng(seed)
    noise = rng.normal(0.0, std, arr.shape)
    return np.clip(arr + noise, 0.0, 255.0).astype(np.uint8)