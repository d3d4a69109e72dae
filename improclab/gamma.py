"""Gray ramp with a series of gamma-corrected copies stacked beneath it."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np

from improclab.common import ExitCode, is_debugger_present
from improclab.imageinfo import write_image

STRIP_ROWS = 30
STRIP_COLS = 768
GAMMA_COEFFICIENTS = (1.8, 2.0, 2.2, 2.4, 2.6)
DEBUG_OUTPUT = Path("TEST_IMAGES/image.png")


def generate_gray_image(rows: int, cols: int) -> np.ndarray:
    """Return an 8-bit ramp whose column j holds j // 3 (wrapping at 256)."""
    ramp = ((np.arange(cols) // 3) % 256).astype(np.uint8)
    return np.broadcast_to(ramp, (rows, cols)).copy()


def gamma_correct(img, gamma: float) -> np.ndarray:
    """Apply 255 * (v / 255) ** gamma to an 8-bit image, truncating the result."""
    arr = np.asarray(img)
    if arr.dtype != np.uint8:
        raise ValueError(f"expected an 8-bit image, got {arr.dtype}")
    corrected = 255.0 * np.power(arr / 255.0, gamma)
    return corrected.astype(np.uint8)


def build_gamma_strip() -> np.ndarray:
    """Stack the ramp and one gamma-corrected copy per coefficient vertically."""
    base = generate_gray_image(STRIP_ROWS, STRIP_COLS)
    bands = [base] + [gamma_correct(base, gamma) for gamma in GAMMA_COEFFICIENTS]
    return np.vstack(bands)


def main(argv=None) -> int:
    """Write the gamma strip to the file named on the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    if argv is None and is_debugger_present():
        path = DEBUG_OUTPUT
    else:
        if not args:
            print("Savefile was not provided; Terminating...", file=sys.stderr)
            return ExitCode.INVALID_PARAMETER
        if len(args) > 1:
            print("We save to multiple files. Terminating...", file=sys.stderr)
            return ExitCode.TOO_MANY_OPEN_FILES
        path = Path(args[0])

    try:
        write_image(path, build_gamma_strip())
    except (OSError, ValueError) as ex:
        print(ex, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())