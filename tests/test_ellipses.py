import math

import numpy as np
import pytest

from improclab.ellipses import (
    DetectedEllipse,
    RotatedEllipse,
    detect_objects,
    draw_ellipse,
    fit_ellipse,
    main,
    otsu_threshold,
    save_detection_results,
)
from improclab.imageinfo import read_image, write_image
from improclab.synth import fill_circle


def _ellipse_points(cx, cy, a, b, angle_deg, count=60):
    t = np.linspace(0.0, 2 * np.pi, count, endpoint=False)
    th = np.radians(angle_deg)
    x = cx + a * np.cos(t) * np.cos(th) - b * np.sin(t) * np.sin(th)
    y = cy + a * np.cos(t) * np.sin(th) + b * np.sin(t) * np.cos(th)
    return np.column_stack((x, y))


def _two_disc_image():
    img = np.zeros((256, 512, 3), dtype=np.uint8)
    fill_circle(img, (128, 128), 40, 255)
    fill_circle(img, (384, 128), 40, 255)
    return img


def test_otsu_separates_two_levels():
    gray = np.full((10, 10), 50, dtype=np.uint8)
    gray[:, 5:] = 200
    t = otsu_threshold(gray)
    assert 50 <= t < 200
    assert ((gray > t) == (gray == 200)).all()


def test_otsu_rejects_non_u8():
    with pytest.raises(ValueError):
        otsu_threshold(np.zeros((4, 4), dtype=np.float32))


def test_fit_ellipse_recovers_parameters():
    fitted = fit_ellipse(_ellipse_points(100.0, 80.0, 40.0, 20.0, 30.0))
    assert fitted.center[0] == pytest.approx(100.0, abs=1e-6)
    assert fitted.center[1] == pytest.approx(80.0, abs=1e-6)
    assert fitted.size[0] == pytest.approx(80.0, abs=1e-6)
    assert fitted.size[1] == pytest.approx(40.0, abs=1e-6)
    assert fitted.angle == pytest.approx(30.0, abs=1e-6)


def test_fit_ellipse_major_axis_first():
    fitted = fit_ellipse(_ellipse_points(10.0, 10.0, 5.0, 9.0, 0.0))
    assert fitted.size[0] >= fitted.size[1]
    assert fitted.size[0] == pytest.approx(18.0, abs=1e-6)


def test_fit_ellipse_needs_five_points():
    with pytest.raises(ValueError):
        fit_ellipse([(0, 0), (1, 0), (0, 1), (1, 1)])


def test_fit_ellipse_rejects_collinear_points():
    with pytest.raises(ValueError):
        fit_ellipse([(x, 0) for x in range(10)])


def test_rotated_ellipse_area_and_shift():
    ell = RotatedEllipse((1.0, 2.0), (3.0, 4.0), 10.0)
    moved = ell.shifted(5, 6)
    assert moved.center == (6.0, 8.0)
    assert moved.area == ell.area == 12.0


def test_draw_ellipse_outline():
    img = np.zeros((60, 60, 3), dtype=np.uint8)
    draw_ellipse(img, RotatedEllipse((30.0, 30.0), (40.0, 20.0), 0.0), (255, 0, 0), 2)
    assert tuple(img[30, 50]) == (255, 0, 0)
    assert tuple(img[30, 10]) == (255, 0, 0)
    assert tuple(img[40, 30]) == (255, 0, 0)
    assert tuple(img[30, 30]) == (0, 0, 0)


def test_draw_ellipse_filled_on_gray():
    img = np.zeros((60, 60), dtype=np.uint8)
    draw_ellipse(img, RotatedEllipse((30.0, 30.0), (40.0, 20.0), 0.0), (200, 0, 0), -1)
    assert img[30, 30] == 200
    assert img[0, 0] == 0


def test_detect_objects_finds_discs_in_cells():
    img = _two_disc_image()
    original = img.copy()
    result, detections = detect_objects(img)
    assert len(detections) == 2
    by_col = sorted(detections, key=lambda d: d.col)
    assert [d.col for d in by_col] == [0, 1]
    for det in by_col:
        assert det.row == 0
        assert det.center_x == pytest.approx(128, abs=3)
        assert det.center_y == pytest.approx(128, abs=3)
        assert abs(det.width - det.height) < 2
    assert (img == original).all()
    red = (result[..., 0] == 255) & (result[..., 1] == 0) & (result[..., 2] == 0)
    assert red.sum() > 0


def test_detect_objects_rejects_gray():
    with pytest.raises(ValueError):
        detect_objects(np.zeros((16, 16), dtype=np.uint8))


def test_save_detection_results(tmp_path):
    path = tmp_path / "det.txt"
    save_detection_results(path, [DetectedEllipse(12.5, 100.0, 30.25, 20.0, 45.0, 1, 2)])
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["1", "12.5", "100", "30.25", "20", "45", "1", "2"]


def test_main_requires_two_arguments():
    assert main(["only.png"]) == 1


def test_main_missing_input(tmp_path, capsys):
    code = main([str(tmp_path / "missing.png"), str(tmp_path / "out.png")])
    assert code == 1
    assert "Could not load image" in capsys.readouterr().err


def test_main_writes_outputs(tmp_path):
    src = tmp_path / "in.png"
    write_image(src, _two_disc_image())
    out = tmp_path / "out.png"
    det = tmp_path / "det.txt"
    assert main([str(src), str(out), str(det)]) == 0
    lines = det.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "2"
    assert len(lines) == 1 + 2 * 7
    assert read_image(out).shape == (256, 512, 3)


def test_main_default_detection_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_image(tmp_path / "in.png", _two_disc_image())
    assert main(["in.png", "out.png"]) == 0
    info = tmp_path / "out_detections.txt"
    assert info.read_text(encoding="utf-8").splitlines()[0] == "2"
    assert math.isfinite(float(info.read_text(encoding="utf-8").splitlines()[1]))