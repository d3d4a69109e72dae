"""Image identifiers, list files and image file input/output."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from improclab.common import ImageType


def strid_from_array(img, n: int = 4) -> str:
    """Describe an image as WWWWxHHHH.C.TYPE with sizes zero-padded to n digits."""
    arr = np.asarray(img)
    if arr.ndim not in (2, 3):
        raise ValueError(f"expected a 2-D or 3-D image array, got {arr.ndim} dimensions")
    height, width = arr.shape[:2]
    channels = arr.shape[2] if arr.ndim == 3 else 1
    image_type = ImageType.for_dtype(arr.dtype)
    return f"{str(width).zfill(n)}x{str(height).zfill(n)}.{channels}.{image_type.value}"


def get_list_of_file_paths(path_lst) -> list[Path]:
    """Read a list file and return its entries resolved against the list's directory."""
    path_lst = Path(path_lst)
    base = path_lst.parent
    with open(path_lst, encoding="utf-8") as lst:
        return [base / line.removesuffix("\n") for line in lst]


def _to_color(arr: np.ndarray) -> np.ndarray:
    if arr.dtype == np.uint16:
        arr = (arr >> 8).astype(np.uint8)
    elif arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    if arr.ndim == 2:
        arr = np.repeat(arr[..., np.newaxis], 3, axis=2)
    elif arr.shape[2] < 3:
        arr = np.repeat(arr[..., :1], 3, axis=2)
    else:
        arr = arr[..., :3]
    return np.ascontiguousarray(arr)


def read_image(path, unchanged: bool = False) -> np.ndarray:
    """Load an image as an array.

    With ``unchanged`` the stored channels and depth are kept; otherwise the
    result is always an 8-bit three-channel RGB image.
    """
    with Image.open(path) as pic:
        pic.load()
        if pic.mode == "1":
            decoded = pic.convert("L")
        elif pic.mode == "P":
            decoded = pic.convert("RGBA" if "transparency" in pic.info else "RGB")
        else:
            decoded = pic
        arr = np.array(decoded)
    return arr if unchanged else _to_color(arr)


def write_image(path, img) -> None:
    """Save an array as an image file whose format follows the file extension."""
    arr = np.ascontiguousarray(img)
    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[..., 0]
    Image.fromarray(arr).save(path)