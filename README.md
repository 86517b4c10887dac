# gapface

Face detection on 8-bit grayscale images with a Haar-style boosted cascade.
The pipeline is integer arithmetic throughout: fixed-point bilinear
downscaling, integral and squared-integral images in unsigned 32-bit
arithmetic, a per-window variance normalisation, and cascade stages scored by
weak classifiers. Candidates from three pyramid levels are merged by
non-maximum suppression and can be framed on the input image.

The package has no runtime dependencies. Images are flat, row-major sequences
of byte values (`bytes`, `bytearray` or lists of `int`).

## Installation

```
pip install gapface
```

To run the tests:

```
pip install "gapface[test]"
pytest
```

## Modules

- `gapface.cascade`
  - `CascadeStage`: the weak classifiers of one stage (`thresholds`,
    `alpha1`, `alpha2`, `rect_num`, `weights`, `rectangles`). The inputs are
    checked for consistency when it is built, and a `ValueError` is raised if
    they do not fit together. `rectangles_of(i)` and `weights_of(i)` return
    the rectangles and weights of weak classifier `i`.
  - `Cascade`: the stages with one threshold per stage. Iterating it yields
    `(stage, threshold)` pairs.
  - `DetectorSettings`: `detect_stride` (1), `max_windows` (20),
    `non_max_threshold` (250), `stages_in_l1` (5), `total_stages` (25),
    `layers` (three booleans, all on) and `window_size` (24).
- `gapface.kernels`: `resize_bilinear` returns a new `bytearray`.
  `integral_image` and `squared_integral_image` return lists of unsigned
  32-bit sums. The module also has `rect_sum`, `isqrt_rounded`
  (square root rounded to nearest), and the classifier steps
  `evaluate_weak_classifier`, `evaluate_window` and `evaluate_cascade`.
  `evaluate_window` returns 0 for homogeneous windows (variance below 2500)
  or rejected windows, and otherwise the summed stage margins.
  `evaluate_cascade` returns the response map over all window positions.
- `gapface.pyramid`: `pyramid_levels(width, height, count, factor=1.25)`
  lists level sizes, each the previous one divided by `factor` and truncated.
- `gapface.detector`
  - `Detection` is a window in input coordinates, with a score.
  - `rect_intersect_area` computes the overlap of two windows.
  - `non_max_suppress(detections, threshold=250)` drops the weaker window
    of every pair that overlaps by at least `threshold` pixels.
  - `stage_footprint` and `largest_stage_footprint` report the buffer
    size of a stage.
  - `FaceDetector` scans levels of 64x48, 51x38 and 40x30 pixels with the
    window size from the settings. It stops collecting candidates after
    `max_windows` of them.
  - `DetectionResult` holds `detections`, `candidate_count`, the annotated
    `image` and a 160x120 `preview`. Its `num_faces` property counts the
    detections.
- `gapface.draw`
  - `gray_to_rgb` returns a new RGB buffer.
  - `draw_line` clamps its end points to the image.
  - `draw_line_rgb` skips pixels that fall off the image.
  - `draw_rectangle` and `draw_rectangle_rgb` draw outlines clipped to the
    image.

  All drawing functions except `gray_to_rgb` change the buffer in place.

## Example

`FaceDetector` needs a cascade with at least `settings.total_stages` stages.
It uses only the first `total_stages` of them. A toy one-stage cascade:

```python
from gapface.cascade import Cascade, CascadeStage, DetectorSettings
from gapface.detector import FaceDetector

stage = CascadeStage(
    thresholds=[0], alpha1=[-1], alpha2=[1],
    rect_num=[0, 1], weights=[1], rectangles=[(0, 0, 12, 24)],
)
cascade = Cascade(thresholds=[0], stages=[stage])
detector = FaceDetector(cascade, DetectorSettings(total_stages=1, stages_in_l1=0))

pixels = bytearray(open("frame.gray", "rb").read())  # 324 x 244, one byte per pixel
result = detector.run(pixels, 324, 244)

for face in result.detections:
    print(face.x, face.y, face.w, face.h, face.score)
```

- `detect` returns the detections and leaves the image unchanged.
- `annotate` draws a black frame five pixels thick around each given
  detection, in place.
- `run` does both on a copy of the frame and also builds the preview.

## Drawing

```python
from gapface.draw import draw_rectangle, gray_to_rgb

image = bytearray(64 * 48)
draw_rectangle(image, 48, 64, 10, 10, 20, 20, 255)
rgb = gray_to_rgb(image, 64, 48)
```

## What it does not do

- The package ships no trained cascade. You build the `Cascade` from your
  own stage data.
- It does not capture from a camera.
- It does not stream frames or send results anywhere.
- It has no command-line program. Reading and writing image files is up to
  the caller.