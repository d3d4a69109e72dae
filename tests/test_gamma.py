import numpy as np
import pytest

from improclab.common import ExitCode
from improclab.gamma import (
    GAMMA_COEFFICIENTS,
    STRIP_COLS,
    STRIP_ROWS,
    build_gamma_strip,
    gamma_correct,
    generate_gray_image,
    main,
)
from improclab.imageinfo import read_image


def test_gray_image_ramp():
    img = generate_gray_image(2, 9)
    assert img.dtype == np.uint8
    assert img.shape == (2, 9)
    assert img[0].tolist() == [0, 0, 0, 1, 1, 1, 2, 2, 2]
    assert np.array_equal(img[0], img[1])


def test_full_ramp_reaches_white():
    img = generate_gray_image(STRIP_ROWS, STRIP_COLS)
    assert img[0, 0] == 0
    assert img[0, -1] == 255
    assert np.all(np.diff(img[0].astype(int)) >= 0)


def test_gamma_keeps_extremes():
    img = np.array([[0, 255]], dtype=np.uint8)
    assert gamma_correct(img, 2.2).tolist() == [[0, 255]]


@pytest.mark.parametrize("gamma", GAMMA_COEFFICIENTS)
def test_gamma_darkens_and_stays_monotonic(gamma):
    base = generate_gray_image(1, STRIP_COLS)
    corrected = gamma_correct(base, gamma)
    assert corrected.dtype == np.uint8
    assert np.all(corrected <= base)
    assert np.all(np.diff(corrected[0].astype(int)) >= 0)


def test_gamma_rejects_non_8bit():
    with pytest.raises(ValueError):
        gamma_correct(np.zeros((2, 2), dtype=np.float32), 2.0)


def test_strip_layout():
    strip = build_gamma_strip()
    count = len(GAMMA_COEFFICIENTS) + 1
    assert strip.shape == (STRIP_ROWS * count, STRIP_COLS)
    base = generate_gray_image(STRIP_ROWS, STRIP_COLS)
    assert np.array_equal(strip[:STRIP_ROWS], base)
    for k, gamma in enumerate(GAMMA_COEFFICIENTS, start=1):
        band = strip[k * STRIP_ROWS:(k + 1) * STRIP_ROWS]
        assert np.array_equal(band, gamma_correct(base, gamma))


def test_main_writes_strip(tmp_path):
    out = tmp_path / "strip.png"
    assert main([str(out)]) == 0
    assert np.array_equal(read_image(out, unchanged=True), build_gamma_strip())


def test_main_argument_errors(capsys):
    assert main([]) == ExitCode.INVALID_PARAMETER
    assert main(["a.png", "b.png"]) == ExitCode.TOO_MANY_OPEN_FILES
    err = capsys.readouterr().err
    assert "Savefile was not provided" in err
    assert "multiple files" in err


def test_main_reports_write_failure(tmp_path, capsys):
    assert main([str(tmp_path / "missing" / "strip.png")]) == 0
    assert capsys.readouterr().err != ""
    assert not (tmp_path / "missing").exists()