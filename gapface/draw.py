"""Drawing of lines and rectangles into 8-bit gray and RGB images.

Images are flat, row-major ``bytearray`` buffers. Drawing functions change
the buffer in place.
"""

from __future__ import annotations

from typing import Iterator

Color = tuple[int, int, int]


def _check_buffer(image: bytearray, size: int) -> None:
    if len(image) < size:
        raise ValueError(f"image buffer holds {len(image)} bytes, {size} needed")


def _clamp(value: int, low: int, high: int) -> int:
    return max(min(value, high), low)


def _line_pixels(
    height: int, width: int, x0: int, y0: int, x1: int, y1: int
) -> Iterator[int]:
    """Yield the flat pixel indices of a line, skipping those off the image."""
    if x1 < x0:
        x0, y0, x1, y1 = x1, y1, x0, y0
    step = -1 if y1 < y0 else 1
    h = abs(y1 - y0) + 1
    w = x1 - x0 + 1
    total = height * width

    if w < h:
        rem = 0
        y = y0
        for i in range(x0, x1 + 1):
            for _ in range((h + rem) // w):
                pos = i + y * width
                y += step
                if 0 <= pos < total:
                    yield pos
            rem = (h + rem) % w
    else:
        rem = 0
        x = x0
        for j in range(y0, y1 + step, step):
            for _ in range((w + rem) // h):
                pos = x + j * width
                x += 1
                if 0 <= pos < total:
                    yield pos
            rem = (w + rem) % h


def _rectangle_pixels(
    height: int, width: int, x: int, y: int, w: int, h: int
) -> Iterator[int]:
    """Yield the flat pixel indices of a rectangle outline."""
    x1 = min(x + w - 1, width - 1)
    y1 = min(y + h - 1, height - 1)
    x = _clamp(x, 0, width - 1)
    y = _clamp(y, 0, height - 1)
    total = height * width
    for i in range(x, x1):
        for pos in (y * width + i, y1 * width + i):
            if 0 <= pos < total:
                yield pos
    for i in range(y, y1 + 1):
        for pos in (i * width + x, i * width + x1):
            if 0 <= pos < total:
                yield pos


def gray_to_rgb(image: bytes | bytearray, width: int, height: int) -> bytearray:
    """Return an RGB image whose three channels all copy the gray image."""
    size = width * height
    if len(image) < size:
        raise ValueError(f"image buffer holds {len(image)} bytes, {size} needed")
    return bytearray(value for pixel in image[:size] for value in (pixel, pixel, pixel))


def draw_line(
    image: bytearray,
    height: int,
    width: int,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    value: int,
) -> None:
    """Draw a line into a gray image; the end points are clamped to the image."""
    _check_buffer(image, height * width)
    x0, x1 = _clamp(x0, 0, width - 1), _clamp(x1, 0, width - 1)
    y0, y1 = _clamp(y0, 0, height - 1), _clamp(y1, 0, height - 1)
    for pos in _line_pixels(height, width, x0, y0, x1, y1):
        image[pos] = value


def draw_line_rgb(
    image: bytearray,
    height: int,
    width: int,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    color: Color,
) -> None:
    """Draw a line into an RGB image; pixels off the image are skipped."""
    _check_buffer(image, 3 * height * width)
    rgb = bytes(color)
    if len(rgb) != 3:
        raise ValueError("color must have three components")
    for pos in _line_pixels(height, width, x0, y0, x1, y1):
        image[3 * pos : 3 * pos + 3] = rgb


def draw_rectangle(
    image: bytearray,
    height: int,
    width: int,
    x: int,
    y: int,
    w: int,
    h: int,
    value: int,
) -> None:
    """Draw a rectangle outline into a gray image, clipped to the image."""
    _check_buffer(image, height * width)
    for pos in _rectangle_pixels(height, width, x, y, w, h):
        image[pos] = value


def draw_rectangle_rgb(
    image: bytearray,
    height: int,
    width: int,
    x: int,
    y: int,
    w: int,
    h: int,
    color: Color,
) -> None:
    """Draw a rectangle outline into an RGB image, clipped to the image."""
    _check_buffer(image, 3 * height * width)
    rgb = bytes(color)
    if len(rgb) != 3:
        raise ValueError("color must have three components")
    for pos in _rectangle_pixels(height, width, x, y, w, h):
        image[3 * pos : 3 * pos + 3] = rgb