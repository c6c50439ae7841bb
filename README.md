# sudokuvision

Image processing, grid location, digit recognition and solving for sudoku
pictures. Images are handled as NumPy arrays.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## What is in the package

- `sudokuvision.imaging`: `load_image` returns an `(height, width, 3)` RGB
  array, `save_image` writes one (format from the file extension);
  `pack_rgb` / `unpack_rgb` convert to and from `0xRRGGBB` values.
- `sudokuvision.grayscale.to_grayscale`: grey conversion with a strong
  contrast curve.
- `sudokuvision.gaussian.gaussian_blur`: 5×5 Gaussian blur with clamped
  borders.
- `sudokuvision.canny`: Sobel convolution, gradient magnitude and direction,
  non-maximum suppression, double threshold and hysteresis; `canny` runs the
  whole edge detector.
- `sudokuvision.rotation`: `rotate`, `rotate_shearing` (rotation by three
  shears) and `parse_angle`.
- `sudokuvision.image_process`: the `Operation` enum (`--grayscale`,
  `--gaussian`, `--sobel`, `--canny`, `--all`, `--rotation`);
  `apply_operation` applies one step to an array, `image_process` loads a
  file, applies the step and saves `Grayscale.bmp`, `Gaussian.bmp`,
  `Sobel.bmp`, `Canny.bmp`, `ImageProcessing.bmp` or `Rotation.bmp` in the
  output directory.
- `sudokuvision.detection`: `hough_transform`, `draw_hough_lines`,
  `dominant_angle`, and `detection(path, step, angle, output_dir)` for the
  steps `--rotation`, `--hough`, `--blob` and `--all`. The `--all` step
  straightens the picture (`Hough.bmp`, `Rotation.bmp`) and crops the grid
  out of its edge map into `Blob.bmp`.
- `sudokuvision.blob`: the `Blob` bounding box, `generate_blobs`,
  `merge_blobs`, `crop` and `blob_crop`, which crops an edge image to its
  largest dense region.
- `sudokuvision.digitizer`: reduces a digit picture to a 16×16 grid of
  dark/light cells (`digitize`, `transform`, `count_dark_cells`,
  `write_bitmap`).
- `sudokuvision.network`: `Network`, a 256–16–16–9 feed-forward network with
  `compute`, `learn`, `classify` (digit 1 to 9), `load_weights` and
  `shuffle`.
- `sudokuvision.legacy_network`: `LegacyNetwork`, an earlier layout
  (256–128–64–9, or 2–4–4–1 for XOR) with small starting weights.
- `sudokuvision.solver`: backtracking solver on grid text files.

## Solving a grid file

```python
from sudokuvision.solver import read_sudoku, solve, format_sudoku

grid = read_sudoku("grid")
if solve(grid):
    print(format_sudoku(grid))
```

A grid file holds 81 cell characters, digits `1`–`9` for given cells and `.`
for empty ones; spaces and newlines are ignored. `solve_file(path)` solves
the file and writes the answer next to it with a `.result` suffix.

## Processing a picture

```python
from sudokuvision.detection import detection

detection("sudoku.png", "--all", output_dir="out")  # writes out/Blob.bmp
```

## Command line

### Train or query the digit network

```
sudokuvision-train learn
```

trains the network for 3001 steps on pictures found under
`training_data/1/` … `training_data/9/` in the current directory, prints a
report every hundred steps and stores the weights in `digits.txt`. Any other
argument is taken as a picture to classify with the stored weights:

```
sudokuvision-train cell.png
```

### Earlier network

```
sudokuvision-legacy x weights.txt 1 0
sudokuvision-legacy d weights.txt data.txt
```

query the earlier XOR (`x`) and digit (`d`) networks, reading weights from
the given file when it exists. With `x weights.txt learn` or
`d weights.txt data.txt learn` they train instead (for a very large number of
iterations). In the XOR query the second input must be `0`.

## What the package does not do

There is no command that takes a picture all the way to a solved grid: the
package does not cut the cropped grid into its 81 cells, does not write the
recognised grid file from a picture, and does not draw the solution back
onto the picture. There is no graphical interface. The steps above have to
be called one by one.