# improclab

A set of small image-processing tools built on NumPy, Pillow and SciPy.
It generates synthetic test images, names images by their shape and pixel
type, applies gamma correction, draws histograms, stretches contrast, finds
ellipses and visualises diagonal image gradients. Every tool reads and
writes image files; the format follows the file extension.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

### improclab-check-ids

```
improclab-check-ids LISTFILE
```

`LISTFILE` is a text file with one image file name per line, relative to the
directory of the list file. Every image is read unchanged, and its id of the
form `WWWWxHHHH.C.TYPE` (width and height zero-padded to four digits, the
channel count, and a pixel type such as `uint08`, `uint16` or `real32`) is
compared with the file name without its last extension. Each line of output
is the file name, a tab, and either `good` or `bad, should be <id>`. A file
that cannot be read as an image is described as an empty 8-bit image.

Exit status: 0 on success (also when the list file cannot be opened, in which
case a message is printed to standard error), a non-zero code when no list
file or more than one is given.

### improclab-gamma

```
improclab-gamma OUTPUT
```

Writes a gray ramp 768 pixels wide and 30 high (column `j` holds `j // 3`),
followed by the same ramp gamma-corrected with 1.8, 2.0, 2.2, 2.4 and 2.6,
stacked vertically. When started under a trace function such as a debugger,
with no arguments, it writes to `TEST_IMAGES/image.png` instead.

### improclab-histograms

```
improclab-histograms OUTPUT
```

Builds four 256×256 test targets (background, inner square and central disc
at different levels), adds Gaussian noise with standard deviations 3, 7 and
15 (with a fixed seed, so the output is reproducible), and writes a sheet of
four columns, each showing an image and its three noisy copies, every one
followed by its histogram. Histogram backgrounds alternate between gray
levels 195 and 235.

### improclab-autocontrast

```
improclab-autocontrast TYPE INPUT BLACK_QUANTILE WHITE_QUANTILE OUTPUT
```

`TYPE` is `naive` (each channel stretched on its own) or `rgb` (one mapping
for all channels, from the per-pixel minimum and maximum of the channels).
The input is read as an 8-bit RGB image. The quantiles give the share of
darkest and brightest pixels that are clipped to black and white. Run it
with `help` (or with a single argument) to print a short reminder of the
arguments.

### improclab-ellipses

```
improclab-ellipses INPUT OUTPUT [DETECTIONS]
```

Converts the image to gray, blurs it, thresholds it with Otsu's method,
cleans it up with morphological opening, closing and dilation, fits an
ellipse to every connected component at least 5 pixels wide and high, and
draws the ellipses in red on a copy of the input. Ellipses whose bounding
area exceeds one 256×256 cell are skipped. The detections file (by default
`<output stem>_detections.txt` in the current directory) starts with the
count, followed by seven lines per ellipse: centre x and y inside its
256-pixel cell, width, height, angle, and the row and column of the cell.

### improclab-gradients

```
improclab-gradients GRID_OUTPUT RESULT_OUTPUT
```

Writes a grid of six 127×127 disc-on-background images (every pair of
distinct levels from 0, 127 and 255), rotated a quarter turn clockwise, and a
second image: a 2×2 mosaic of the two diagonal differences, the squared
gradient magnitude, and a colour composite with the magnitude in red, the
second difference in green and the first difference in blue.

## Library use

The modules can also be used directly:

- `improclab.synth`: `gen_tgtimg00`, `add_noise_gau`, `fill_rectangle`, `fill_circle`
- `improclab.imageinfo`: `strid_from_array`, `get_list_of_file_paths`, `read_image`, `write_image`
- `improclab.contrast`: `autocontrast`, `autocontrast_rgb`
- `improclab.gamma`: `generate_gray_image`, `gamma_correct`, `build_gamma_strip`
- `improclab.histograms`: `make_hist`, `make_hist_picture`, `build_histogram_sheet`
- `improclab.ellipses`: `otsu_threshold`, `fit_ellipse`, `draw_ellipse`, `detect_objects`, `save_detection_results`
- `improclab.gradients`: `gen_image`, `build_grid`, `gradient_views`
- `improclab.common`: `ExitCode`, `ImageType`, `AutocontrastType`, `is_debugger_present`

```python
from improclab.synth import gen_tgtimg00, add_noise_gau
from improclab.contrast import autocontrast
from improclab.imageinfo import strid_from_array

img = gen_tgtimg00(20, 127, 235)
noisy = add_noise_gau(img, 7)
stretched = autocontrast(noisy, 0.05, 0.05)
print(strid_from_array(stretched))   # 0256x0256.1.uint08
```

## What it does not do

The tools have no on-screen display: results are only written to files.