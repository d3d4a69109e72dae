"""Quantile-based autocontrast for 8-bit images."""

from __future__ import annotations

import numpy as np

_LEVELS = 256
_TOP = _LEVELS - 1


def _as_u8(img) -> np.ndarray:
    arr = np.asarray(img)
    if arr.dtype != np.uint8:
        raise ValueError(f"expected an 8-bit image, got {arr.dtype}")
    if arr.size == 0:
        raise ValueError("image is empty")
    return arr


def _histogram(plane: np.ndarray) -> np.ndarray:
    return np.bincount(plane.ravel(), minlength=_LEVELS)


def _edges(black_hist, white_hist, area, q_black, q_white) -> tuple[int, int]:
    below = np.flatnonzero(np.cumsum(black_hist) / area > q_black)
    min_edge = int(below[0]) if below.size else 0
    above = np.flatnonzero(np.cumsum(white_hist[::-1]) / area > q_white)
    max_edge = _TOP - int(above[0]) if above.size else _TOP
    return min_edge, max_edge


def _lookup_table(min_edge: int, max_edge: int, normal: float) -> np.ndarray:
    levels = np.arange(_LEVELS)
    scaled = np.clip(np.rint((levels - min_edge) * normal), 0, _TOP)
    lut = np.where(levels < min_edge, 0, np.where(levels > max_edge, _TOP, scaled))
    return lut.astype(np.uint8)


def _stretch_plane(plane: np.ndarray, area: int, q_black: float, q_white: float) -> np.ndarray:
    hist = _histogram(plane)
    min_edge, max_edge = _edges(hist, hist, area, q_black, q_white)
    span = max_edge - min_edge
    normal = _TOP / span if span else 0.0
    return _lookup_table(min_edge, max_edge, normal)[plane]


def autocontrast(img, q_black: float, q_white: float) -> np.ndarray:
    """Stretch each channel independently between its black and white quantiles."""
    arr = _as_u8(img)
    if arr.ndim not in (2, 3):
        raise ValueError(f"expected a 2-D or 3-D image array, got {arr.ndim} dimensions")
    area = arr.shape[0] * arr.shape[1]
    if arr.ndim == 2:
        return _stretch_plane(arr, area, q_black, q_white)
    planes = [_stretch_plane(plane, area, q_black, q_white) for plane in np.moveaxis(arr, -1, 0)]
    return np.stack(planes, axis=-1)


def autocontrast_rgb(img, q_black: float, q_white: float) -> np.ndarray:
    """Stretch all channels with one mapping found from per-pixel channel minima and maxima."""
    arr = _as_u8(img)
    if arr.ndim != 3 or arr.shape[2] < 3:
        raise ValueError("expected an image with at least three channels")
    area = arr.shape[0] * arr.shape[1]
    black = arr[..., :3].min(axis=2)
    white = arr[..., :3].max(axis=2)
    min_edge, max_edge = _edges(_histogram(black), _histogram(white), area, q_black, q_white)
    span = max_edge - min_edge
    normal = float(np.float32(_TOP) / np.float32(span)) if span else 0.0
    return _lookup_table(min_edge, max_edge, normal)[arr]