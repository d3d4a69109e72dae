"""Diagonal gradient views of a grid of disc test images."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np

from improclab.imageinfo import write_image
from improclab.synth import fill_circle

CELL = 127
DISC_RADIUS = 40
LEVELS = (0, 127, 255)


def gen_image(object_color: int, bg_color: int) -> np.ndarray:
    """Return a 127x127 8-bit image with a centered disc of radius 40."""
    img = np.full((CELL, CELL), bg_color, dtype=np.uint8)
    fill_circle(img, (CELL // 2, CELL // 2), DISC_RADIUS, object_color)
    return img


def build_grid() -> np.ndarray:
    """Tile every disc/background pair of distinct levels 3x2, then rotate clockwise."""
    images = [gen_image(disc, bg) for disc in LEVELS for bg in LEVELS if disc != bg]
    rows = [np.hstack(pair) for pair in zip(images[::2], images[1::2])]
    return np.ascontiguousarray(np.rot90(np.vstack(rows), k=-1))


def _normalize(arr: np.ndarray) -> np.ndarray:
    lo, hi = float(arr.min()), float(arr.max())
    scale = 255.0 / (hi - lo) if hi > lo else 0.0
    return np.clip(np.rint((arr - lo) * scale), 0, 255).astype(np.uint8)


def gradient_views(grid) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Return the two diagonal differences, the squared magnitude and a colour composite.

    The first three are 8-bit images stretched to 0..255. The composite is RGB
    with the magnitude in red, the second difference in green and the first
    difference in blue.
    """
    arr = np.asarray(grid)
    if arr.ndim != 2 or arr.size == 0:
        raise ValueError("expected a non-empty single-channel image")
    padded = np.pad(arr.astype(np.float32), ((1, 0), (1, 0)), mode="reflect")
    upper_left = padded[:-1, :-1]
    up = padded[:-1, 1:]
    left = padded[1:, :-1]
    here = padded[1:, 1:]

    first = upper_left - here
    second = up - left
    magnitude = first * first + second * second

    v1, v2, v3 = (_normalize(view) for view in (first, second, magnitude))
    v4 = np.stack((v3, v2, v1), axis=-1)
    return v1, v2, v3, v4


def _as_rgb(gray: np.ndarray) -> np.ndarray:
    return np.repeat(gray[..., np.newaxis], 3, axis=2)


def _mosaic(views) -> np.ndarray:
    v1, v2, v3, v4 = views
    top = np.hstack((_as_rgb(v1), _as_rgb(v2)))
    bottom = np.hstack((_as_rgb(v3), v4))
    return np.vstack((top, bottom))


def main(argv=None) -> int:
    """Write the disc grid and the 2x2 mosaic of its gradient views."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        prog = Path(sys.argv[0]).name or "gradients"
        print(f"Usage: {prog} <output_orig> <output_result>", file=sys.stderr)
        return 1
    grid = build_grid()
    write_image(args[0], grid)
    write_image(args[1], _mosaic(gradient_views(grid)))
    return 0


if __name__ == "__main__":
    sys.exit(main())