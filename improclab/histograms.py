"""Test targets with noise, each followed by its brightness histogram."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np

from improclab.common import CANVAS_SIZE, ExitCode
from improclab.imageinfo import write_image
from improclab.synth import add_noise_gau, gen_tgtimg00

LUMEN = ((0, 127, 255), (20, 127, 235), (55, 127, 200), (90, 127, 165))
NOISE_STD = (3, 7, 15)
FIRST_BG = 195
SECOND_BG = 235
_HIST_PEAK = 250.0


def make_hist(src, bg_color) -> np.ndarray:
    """Draw the 256-bin histogram of an 8-bit image as black bars on a square canvas."""
    arr = np.asarray(src)
    if arr.dtype != np.uint8:
        raise ValueError(f"expected an 8-bit image, got {arr.dtype}")
    if arr.size == 0:
        raise ValueError("image is empty")
    hist = np.bincount(arr.ravel(), minlength=CANVAS_SIZE)
    scaled = (hist * (_HIST_PEAK / hist.max())).astype(np.float32)
    heights = np.rint(scaled).astype(int)

    canvas = np.full((CANVAS_SIZE, CANVAS_SIZE), bg_color, dtype=np.uint8)
    rows = np.arange(CANVAS_SIZE)[:, np.newaxis]
    bars = (rows >= CANVAS_SIZE - heights) & (heights > 0)
    canvas[bars] = 0
    return canvas


def make_hist_picture(inp1, inp2, inp3, inp4, first_bg_color, second_bg_color) -> np.ndarray:
    """Stack four images vertically, each followed by its histogram.

    Histogram backgrounds alternate between the two colours, starting with the first.
    """
    parts = []
    for image, bg in zip(
        (inp1, inp2, inp3, inp4),
        (first_bg_color, second_bg_color, first_bg_color, second_bg_color),
    ):
        parts.append(np.asarray(image))
        parts.append(make_hist(image, bg))
    return np.vstack(parts)


def build_histogram_sheet() -> np.ndarray:
    """Build the sheet of four targets, their noisy copies and all histograms side by side."""
    samples = [gen_tgtimg00(*levels) for levels in LUMEN]
    noisy = [[add_noise_gau(sample, std) for sample in samples] for std in NOISE_STD]
    columns = []
    for i, sample in enumerate(samples):
        first, second = (FIRST_BG, SECOND_BG) if i % 2 == 0 else (SECOND_BG, FIRST_BG)
        columns.append(
            make_hist_picture(sample, noisy[0][i], noisy[1][i], noisy[2][i], first, second)
        )
    return np.hstack(columns)


def main(argv=None) -> int:
    """Write the histogram sheet to the file named on the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Savefile was not provided; Terminating...", file=sys.stderr)
        return ExitCode.INVALID_PARAMETER
    if len(args) > 1:
        print("We save to multiple files. Terminating...", file=sys.stderr)
        return ExitCode.TOO_MANY_OPEN_FILES

    try:
        write_image(Path(args[0]), build_histogram_sheet())
    except (OSError, ValueError) as ex:
        print(ex, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())