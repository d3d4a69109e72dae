"""Check that listed image files are named after their identifier strings."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np

from improclab.common import ExitCode
from improclab.imageinfo import get_list_of_file_paths, read_image, strid_from_array


def _load_unchanged(path: Path) -> np.ndarray:
    try:
        return read_image(path, unchanged=True)
    except OSError:
        # An unreadable file is described as an empty 8-bit image.
        return np.zeros((0, 0), dtype=np.uint8)


def check_listed_images(path_lst) -> list[tuple[str, str, bool]]:
    """Return (file name, identifier, matches) for every image in a list file.

    A file matches when its name without the last extension equals the
    identifier computed from the image it holds.
    """
    results = []
    for path in get_list_of_file_paths(path_lst):
        strid = strid_from_array(_load_unchanged(path))
        results.append((path.name, strid, strid == path.stem))
    return results


def main(argv=None) -> int:
    """Print a good/bad verdict for every image named in a list file."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Lstfile was not provided; Terminating...", file=sys.stderr)
        return ExitCode.INVALID_PARAMETER
    if len(args) > 1:
        print("We cannot open more than one Lstfile. Terminating...", file=sys.stderr)
        return ExitCode.TOO_MANY_OPEN_FILES

    try:
        results = check_listed_images(args[0])
    except OSError:
        print("Could not open the file; Terminating...", file=sys.stderr)
        return 0

    for name, strid, ok in results:
        verdict = "good" if ok else f"bad, should be {strid}"
        print(f"{name}\t{verdict}")
    return 0


if __name__ == "__main__":
    sys.exit(main())