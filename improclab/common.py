"""Shared constants and enumerations for the image-processing tools."""

from __future__ import annotations

import sys
from enum import Enum, IntEnum

import numpy as np

CANVAS_SIZE = 256
CIRCLE_RADIUS = 83.0

_WINDOWS = sys.platform.startswith("win")


class ExitCode(IntEnum):
    """Process exit statuses reported by the command-line tools."""

    TOO_MANY_OPEN_FILES = 4 if _WINDOWS else 1
    INVALID_PARAMETER = 87 if _WINDOWS else 3
    INVALID_NAME = 123 if _WINDOWS else 73


class ImageType(str, Enum):
    """Element type tags used in image identifier strings."""

    UINT08 = "uint08"
    SINT08 = "sint08"
    UINT16 = "uint16"
    SINT16 = "sint16"
    UINT32 = "uint32"
    SINT32 = "sint32"
    REAL32 = "real32"
    REAL64 = "real64"

    @classmethod
    def for_dtype(cls, dtype) -> "ImageType":
        """Return the tag for a numpy element type; raise ValueError if unsupported."""
        try:
            return _DTYPE_TYPES[np.dtype(dtype)]
        except KeyError:
            raise ValueError(f"unsupported image element type: {np.dtype(dtype)}") from None


_DTYPE_TYPES = {
    np.dtype(np.uint8): ImageType.UINT08,
    np.dtype(np.int8): ImageType.SINT08,
    np.dtype(np.uint16): ImageType.UINT16,
    np.dtype(np.int16): ImageType.SINT16,
    np.dtype(np.int32): ImageType.SINT32,
    np.dtype(np.float32): ImageType.REAL32,
    np.dtype(np.float64): ImageType.REAL64,
}


class AutocontrastType(str, Enum):
    """Autocontrast algorithms selectable from the command line."""

    NAIVE = "naive"
    RGB = "rgb"


def is_debugger_present() -> bool:
    """Report whether a trace function (such as a debugger) is active."""
    return sys.gettrace() is not None