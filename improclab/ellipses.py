"""Detection of elliptical blobs laid out on a grid of square cells."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from scipy import ndimage

from improclab.imageinfo import read_image, write_image

CELL_SIZE = 256
MORPH_SIZE = 7
MIN_COMPONENT_SIDE = 5
MIN_FIT_POINTS = 5
OUTLINE_COLOR = (255, 0, 0)
OUTLINE_THICKNESS = 2

_GAUSS_5 = np.array([0.0625, 0.25, 0.375, 0.25, 0.0625])
_EIGHT_CONNECTED = np.ones((3, 3), dtype=bool)
_FLT_EPSILON = float(np.finfo(np.float32).eps)


@dataclass(frozen=True)
class DetectedEllipse:
    """An ellipse found in the image, with its center relative to its grid cell."""

    center_x: float
    center_y: float
    width: float
    height: float
    angle: float
    row: int
    col: int


@dataclass(frozen=True)
class RotatedEllipse:
    """An ellipse given by its center, full axis lengths and rotation in degrees.

    ``size[0]`` is the axis that lies along ``angle``, measured from the x axis
    towards the y axis in image coordinates.
    """

    center: tuple[float, float]
    size: tuple[float, float]
    angle: float

    @property
    def area(self) -> float:
        """Area of the bounding rectangle, width times height."""
        return self.size[0] * self.size[1]

    def shifted(self, dx: float, dy: float) -> "RotatedEllipse":
        """Return the same ellipse moved by (dx, dy)."""
        return RotatedEllipse((self.center[0] + dx, self.center[1] + dy), self.size, self.angle)


def otsu_threshold(gray) -> int:
    """Return the Otsu threshold of an 8-bit image; pixels above it are foreground."""
    arr = np.asarray(gray)
    if arr.dtype != np.uint8:
        raise ValueError(f"expected an 8-bit image, got {arr.dtype}")
    if arr.size == 0:
        raise ValueError("image is empty")
    levels = np.arange(256, dtype=np.float64)
    p = np.bincount(arr.ravel(), minlength=256) / arr.size
    q1 = np.cumsum(p)
    q2 = 1.0 - q1
    valid = (np.minimum(q1, q2) >= _FLT_EPSILON) & (np.maximum(q1, q2) <= 1.0 - _FLT_EPSILON)
    if not valid.any():
        return 0
    mu = float((levels * p).sum())
    cum_mu = np.cumsum(levels * p)
    with np.errstate(divide="ignore", invalid="ignore"):
        mu1 = cum_mu / q1
        mu2 = (mu - cum_mu) / q2
        sigma = q1 * q2 * (mu1 - mu2) ** 2
    sigma = np.where(valid, sigma, 0.0)
    best = int(np.argmax(sigma))
    return best if sigma[best] > 0 else 0


def fit_ellipse(points) -> RotatedEllipse:
    """Least-squares fit of an ellipse to (x, y) points; the first axis is the major one."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError("points must be an array of (x, y) pairs")
    if len(pts) < MIN_FIT_POINTS:
        raise ValueError(f"at least {MIN_FIT_POINTS} points are needed to fit an ellipse")
    mean = pts.mean(axis=0)
    centered = pts - mean
    scale = float(np.abs(centered).max())
    if scale == 0:
        raise ValueError("points are all identical")
    u, v = (centered / scale).T
    ones = np.ones_like(u)

    conic, *_ = np.linalg.lstsq(np.column_stack((u * u, u * v, v * v, u, v)), ones, rcond=None)
    a, b, c, d, e = conic
    try:
        x0, y0 = np.linalg.solve([[2 * a, b], [b, 2 * c]], [-d, -e])
    except np.linalg.LinAlgError:
        raise ValueError("points do not determine an ellipse") from None

    du, dv = u - x0, v - y0
    quad, *_ = np.linalg.lstsq(np.column_stack((du * du, du * dv, dv * dv)), ones, rcond=None)
    a, b, c = quad
    eigvals, eigvecs = np.linalg.eigh([[a, b / 2], [b / 2, c]])
    if not np.all(np.isfinite(eigvals)) or eigvals[0] <= 0:
        raise ValueError("points do not determine an ellipse")

    semi = scale / np.sqrt(eigvals)
    major = eigvecs[:, 0]
    angle = math.degrees(math.atan2(major[1], major[0])) % 180.0
    center = (float(mean[0] + scale * x0), float(mean[1] + scale * y0))
    return RotatedEllipse(center, (float(2 * semi[0]), float(2 * semi[1])), angle)


def draw_ellipse(img: np.ndarray, ellipse: RotatedEllipse, color, thickness: int = 1) -> None:
    """Draw an ellipse outline in place; a negative thickness fills it."""
    cx, cy = ellipse.center
    a = max(ellipse.size[0] / 2, 0.5)
    b = max(ellipse.size[1] / 2, 0.5)
    reach = max(a, b) + max(thickness, 1)
    rows, cols = img.shape[:2]
    y0, y1 = max(math.floor(cy - reach), 0), min(math.ceil(cy + reach) + 1, rows)
    x0, x1 = max(math.floor(cx - reach), 0), min(math.ceil(cx + reach) + 1, cols)
    if y0 >= y1 or x0 >= x1:
        return

    yy, xx = np.mgrid[y0:y1, x0:x1]
    dx, dy = xx - cx, yy - cy
    theta = math.radians(ellipse.angle)
    u = dx * math.cos(theta) + dy * math.sin(theta)
    v = -dx * math.sin(theta) + dy * math.cos(theta)
    f = (u / a) ** 2 + (v / b) ** 2 - 1.0
    if thickness < 0:
        mask = f <= 0
    else:
        grad = 2.0 * np.hypot(u / (a * a), v / (b * b))
        with np.errstate(divide="ignore", invalid="ignore"):
            dist = np.abs(f) / grad
        mask = dist <= max(thickness, 1) / 2.0

    values = np.atleast_1d(np.asarray(color))
    value = values[0] if img.ndim == 2 else values
    img[y0:y1, x0:x1][mask] = value


def _to_gray(arr: np.ndarray) -> np.ndarray:
    rgb = arr.astype(np.float64)
    gray = 0.299 * rgb[..., 0] + 0.587 * rgb[..., 1] + 0.114 * rgb[..., 2]
    return np.clip(np.rint(gray), 0, 255).astype(np.uint8)


def _gaussian_blur(gray: np.ndarray) -> np.ndarray:
    out = ndimage.convolve1d(gray.astype(np.float64), _GAUSS_5, axis=0, mode="mirror")
    out = ndimage.convolve1d(out, _GAUSS_5, axis=1, mode="mirror")
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def _ellipse_kernel(size: int) -> np.ndarray:
    r = c = size // 2
    kernel = np.zeros((size, size), dtype=bool)
    for dy, row in enumerate(kernel, start=-r):
        dx = round(c * math.sqrt((r * r - dy * dy) / (r * r))) if r else 0
        row[max(c - dx, 0):min(c + dx + 1, size)] = True
    return kernel


def _erode(mask, kernel, iterations):
    return ndimage.binary_erosion(mask, structure=kernel, iterations=iterations, border_value=1)


def _dilate(mask, kernel, iterations):
    return ndimage.binary_dilation(mask, structure=kernel, iterations=iterations, border_value=0)


def _open(mask, kernel, iterations):
    return _dilate(_erode(mask, kernel, iterations), kernel, iterations)


def _close(mask, kernel, iterations):
    return _erode(_dilate(mask, kernel, iterations), kernel, iterations)


def _foreground(arr: np.ndarray) -> np.ndarray:
    gray = _gaussian_blur(_to_gray(arr))
    binary = gray > otsu_threshold(gray)
    kernel = _ellipse_kernel(MORPH_SIZE)
    morph = _open(binary, kernel, 1)
    morph = _close(morph, kernel, 2)
    morph = _open(morph, kernel, 2)
    morph = _close(morph, kernel, 2)
    return _dilate(morph, kernel, 2)


def _locate(ellipse: RotatedEllipse, cell_size: int = CELL_SIZE) -> DetectedEllipse:
    cx, cy = ellipse.center
    col = int(int(cx) / cell_size)
    row = int(int(cy) / cell_size)
    return DetectedEllipse(
        center_x=cx - col * cell_size,
        center_y=cy - row * cell_size,
        width=ellipse.size[0],
        height=ellipse.size[1],
        angle=ellipse.angle,
        row=row,
        col=col,
    )


def detect_objects(img) -> tuple[np.ndarray, list[DetectedEllipse]]:
    """Find bright elliptical blobs in an RGB image.

    Returns a copy of the image with the fitted ellipses outlined in red and
    the list of detections, each placed in its grid cell.
    """
    arr = np.asarray(img)
    if arr.dtype != np.uint8 or arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError("expected an 8-bit three-channel image")
    morph = _foreground(arr)
    result = arr.copy()
    detections = []

    labels, _ = ndimage.label(morph, structure=_EIGHT_CONNECTED)
    for box in ndimage.find_objects(labels):
        if box is None:
            continue
        top, left = box[0].start, box[1].start
        height, width = box[0].stop - top, box[1].stop - left
        if width < MIN_COMPONENT_SIDE or height < MIN_COMPONENT_SIDE:
            continue
        ys, xs = np.nonzero(morph[box])
        if xs.size < MIN_FIT_POINTS:
            continue
        try:
            fitted = fit_ellipse(np.column_stack((xs, ys)))
        except ValueError:
            continue
        if fitted.area > CELL_SIZE * CELL_SIZE:
            continue
        placed = fitted.shifted(left, top)
        draw_ellipse(result, placed, OUTLINE_COLOR, OUTLINE_THICKNESS)
        detections.append(_locate(placed))
    return result, detections


def _format_number(value: float) -> str:
    return format(float(value), "g")


def save_detection_results(file_path, detections) -> None:
    """Write the detection count, then seven lines per detection."""
    items = list(detections)
    lines = [str(len(items))]
    for det in items:
        lines.extend(
            _format_number(value)
            for value in (det.center_x, det.center_y, det.width, det.height, det.angle)
        )
        lines.extend((str(det.row), str(det.col)))
    Path(file_path).write_text("\n".join(lines) + "\n", encoding="utf-8")


def main(argv=None) -> int:
    """Detect ellipses in an image, save the annotated image and the detections."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        prog = Path(sys.argv[0]).name or "ellipses"
        print(f"Usage: {prog} <input_image> <output_image> [output_detections]")
        return 1

    input_path, output_path = args[0], args[1]
    info_path = args[2] if len(args) > 2 else f"{Path(output_path).stem}_detections.txt"

    try:
        try:
            img = read_image(input_path)
        except OSError:
            raise OSError(f"Could not load image: {input_path}") from None
        result, detections = detect_objects(img)
        write_image(output_path, result)
        save_detection_results(info_path, detections)
    except (OSError, ValueError) as ex:
        print(f"Error: {ex}", file=sys.stderr)
        return 1

    print("Successfully processed image. Results saved to:")
    print(f"  Image: {output_path}")
    print(f"  Detections: {info_path}")
    print(f"Detected objects: {len(detections)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())