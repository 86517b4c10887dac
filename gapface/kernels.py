"""Image kernels of the face detector: resize, integral images and cascade scoring.

Images are flat, row-major sequences of 8-bit pixels. Integral images are
flat lists of unsigned 32-bit sums. Pixel ``(x, y)`` of an integral image
holds the sum of all pixels in rows ``0..y`` and columns ``0..x``.
"""

from __future__ import annotations

from math import isqrt
from typing import Sequence

from .cascade import Cascade, CascadeStage

_U32 = 0xFFFFFFFF
_HOMOGENEOUS_VARIANCE = 50 * 50


def _u32(value: int) -> int:
    return value & _U32


def _i32(value: int) -> int:
    value &= _U32
    return value - (1 << 32) if value & 0x80000000 else value


def _div_trunc(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _check_image(image: Sequence[int], width: int, height: int) -> None:
    if width < 1 or height < 1:
        raise ValueError("image dimensions must be positive")
    if len(image) < width * height:
        raise ValueError(
            f"image buffer holds {len(image)} pixels, {width * height} needed"
        )


def resize_bilinear(
    image: Sequence[int], width: int, height: int, out_width: int, out_height: int
) -> bytearray:
    """Scale a gray image with fixed-point bilinear interpolation."""
    _check_image(image, width, height)
    if out_width < 1 or out_height < 1:
        raise ValueError("output dimensions must be positive")

    w_step = ((width - 1) << 16) // out_width
    h_step = ((height - 1) << 16) // out_height
    last_col = width - 1
    last_row = height - 1
    out = bytearray(out_width * out_height)

    for y in range(out_height):
        h_coeff = y * h_step
        row0 = h_coeff >> 16
        row1 = min(row0 + 1, last_row)
        hc2 = (h_coeff >> 9) & 127
        hc1 = 128 - hc2
        base0 = row0 * width
        base1 = row1 * width
        for x in range(out_width):
            w_coeff = x * w_step
            col0 = w_coeff >> 16
            col1 = min(col0 + 1, last_col)
            wc2 = (w_coeff >> 9) & 127
            wc1 = 128 - wc2
            p1 = image[base0 + col0]
            p2 = image[base1 + col0]
            p3 = image[base0 + col1]
            p4 = image[base1 + col1]
            value = ((p1 * hc1 + p2 * hc2) * wc1 + (p3 * hc1 + p4 * hc2) * wc2) >> 14
            out[y * out_width + x] = value & 0xFF
    return out


def _integral(values: Sequence[int], width: int, height: int) -> list[int]:
    out = [0] * (width * height)
    above = [0] * width
    for y in range(height):
        running = 0
        base = y * width
        for x in range(width):
            running += values[base + x]
            above[x] = _u32(above[x] + running)
            out[base + x] = above[x]
        # `above` now holds cumulative sums including row y
    return out


def integral_image(image: Sequence[int], width: int, height: int) -> list[int]:
    """Integral image of a gray image, in unsigned 32-bit arithmetic."""
    _check_image(image, width, height)
    return _integral(image, width, height)


def squared_integral_image(image: Sequence[int], width: int, height: int) -> list[int]:
    """Integral image of the squared pixel values, in unsigned 32-bit arithmetic."""
    _check_image(image, width, height)
    squares = [p * p for p in image[: width * height]]
    return _integral(squares, width, height)


def isqrt_rounded(value: int) -> int:
    """Square root of an unsigned 32-bit value, rounded to the nearest integer."""
    if not 0 <= value <= _U32:
        raise ValueError("value must be an unsigned 32-bit integer")
    root = isqrt(value)
    if value - root * root > root:
        root += 1
    return root


def rect_sum(
    integral: Sequence[int], x: int, y: int, w: int, h: int, stride: int
) -> int:
    """Look up a box sum from four corners of an integral image.

    The result is taken modulo 2**32 and read as a signed 32-bit integer.
    """
    corners = (
        (h + y) * stride + w + x,
        y * stride + x,
        y * stride + w + x,
        (h + y) * stride + x,
    )
    if any(not 0 <= c < len(integral) for c in corners):
        raise IndexError("rectangle reaches outside the integral image")
    a, b, c, d = (integral[i] for i in corners)
    return _i32(a + b - c - d)


def evaluate_weak_classifier(
    integral: Sequence[int],
    img_w: int,
    stage: CascadeStage,
    std: int,
    index: int,
    off_x: int,
    off_y: int,
) -> int:
    """Score of weak classifier ``index`` of ``stage`` on the shifted window."""
    threshold = _i32(stage.thresholds[index] * std)
    total = 0
    for (x, y, w, h), weight in zip(stage.rectangles_of(index), stage.weights_of(index)):
        feature = rect_sum(integral, off_x + x, off_y + y, w, h, img_w)
        total = _i32(total + feature * (weight << 12))
    return stage.alpha2[index] if total >= threshold else stage.alpha1[index]


def evaluate_window(
    integral: Sequence[int],
    squared: Sequence[int],
    cascade: Cascade,
    win_w: int,
    win_h: int,
    img_w: int,
    off_x: int,
    off_y: int,
) -> int:
    """Run the whole cascade on one window.

    Returns 0 when the window is too homogeneous or a stage rejects it,
    otherwise the sum of the margins by which each stage passed.
    """
    n = win_w * win_h
    if n <= 0:
        raise ValueError("window dimensions must be positive")
    i_s = rect_sum(integral, off_x, off_y, win_w, win_h, img_w)
    i_sq = rect_sum(squared, off_x, off_y, win_w, win_h, img_w)
    mean = _div_trunc(i_s, n)
    variance = _div_trunc(i_sq, n) - mean * mean
    if variance < _HOMOGENEOUS_VARIANCE:
        return 0

    std = isqrt_rounded(_u32(i_sq * n - i_s * i_s))

    score = 0
    for stage, threshold in cascade:
        stage_sum = sum(
            evaluate_weak_classifier(integral, img_w, stage, std, i, off_x, off_y)
            for i in range(stage.stage_size)
        )
        score += stage_sum - threshold
        if stage_sum < threshold:
            return 0
    return score


def evaluate_cascade(
    integral: Sequence[int],
    squared: Sequence[int],
    width: int,
    height: int,
    cascade: Cascade,
    win_w: int,
    win_h: int,
    stride: int = 1,
) -> list[int]:
    """Response map of the cascade over every window position.

    The map is ``(width - win_w + 1) x (height - win_h + 1)``, row-major.
    Positions off the stride grid, and windows whose corner lookup would
    read past the integral image, score 0.
    """
    if win_w < 1 or win_h < 1:
        raise ValueError("window dimensions must be positive")
    if win_w > width or win_h > height:
        raise ValueError("window is larger than the image")
    if stride < 1:
        raise ValueError("stride must be at least 1")
    size = width * height
    if len(integral) < size or len(squared) < size:
        raise ValueError("integral images are smaller than width * height")

    out_w = width - win_w + 1
    out_h = height - win_h + 1
    response = [0] * (out_w * out_h)
    for line in range(0, out_h, stride):
        for col in range(0, out_w, stride):
            if (line + win_h) * width + col + win_w >= size:
                continue
            response[line * out_w + col] = evaluate_window(
                integral, squared, cascade, win_w, win_h, width, col, line
            )
    return response