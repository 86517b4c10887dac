import pytest

from gapface.draw import (
    draw_line,
    draw_line_rgb,
    draw_rectangle,
    draw_rectangle_rgb,
    gray_to_rgb,
)

W, H = 16, 12


def blank(channels=1):
    return bytearray(W * H * channels)


def lit(image):
    return {i for i, v in enumerate(image) if v}


def test_gray_to_rgb_copies_each_pixel_three_times():
    gray = bytes(range(W * H))
    rgb = gray_to_rgb(gray, W, H)
    assert len(rgb) == 3 * W * H
    assert rgb[0::3] == gray
    assert rgb[1::3] == gray
    assert rgb[2::3] == gray


def test_gray_to_rgb_short_buffer():
    with pytest.raises(ValueError):
        gray_to_rgb(bytes(5), W, H)


def test_horizontal_line():
    image = blank()
    draw_line(image, H, W, 2, 5, 9, 5, 200)
    assert lit(image) == {5 * W + x for x in range(2, 10)}
    assert image[5 * W + 2] == 200


def test_vertical_line():
    image = blank()
    draw_line(image, H, W, 3, 1, 3, 8, 1)
    assert lit(image) == {y * W + 3 for y in range(1, 9)}


@pytest.mark.parametrize(
    "x0,y0,x1,y1",
    [(0, 0, 10, 3), (1, 9, 4, 0), (2, 2, 5, 11), (12, 1, 0, 7)],
)
def test_line_covers_endpoints_and_has_max_extent_pixels(x0, y0, x1, y1):
    image = blank()
    draw_line(image, H, W, x0, y0, x1, y1, 255)
    pixels = lit(image)
    assert y0 * W + x0 in pixels
    assert y1 * W + x1 in pixels
    assert len(pixels) == max(abs(x1 - x0), abs(y1 - y0)) + 1


def test_line_direction_does_not_matter():
    a, b = blank(), blank()
    draw_line(a, H, W, 1, 2, 13, 9, 7)
    draw_line(b, H, W, 13, 9, 1, 2, 7)
    assert a == b


def test_line_endpoints_are_clamped():
    a, b = blank(), blank()
    draw_line(a, H, W, -10, -4, 40, 30, 9)
    draw_line(b, H, W, 0, 0, W - 1, H - 1, 9)
    assert a == b


def test_rgb_line_matches_gray_line_inside_image():
    gray, rgb = blank(), blank(3)
    draw_line(gray, H, W, 2, 10, 14, 1, 1)
    draw_line_rgb(rgb, H, W, 2, 10, 14, 1, (10, 20, 30))
    pixels = lit(gray)
    assert {i // 3 for i in lit(rgb)} == pixels
    for p in pixels:
        assert rgb[3 * p : 3 * p + 3] == bytearray((10, 20, 30))


def test_rgb_line_skips_pixels_before_image_start():
    image = blank(3)
    draw_line_rgb(image, H, W, 0, -3, 0, 2, (1, 1, 1))
    assert {i // 3 for i in lit(image)} == {0, W, 2 * W}


def test_rectangle_outline_only():
    image = blank()
    draw_rectangle(image, H, W, 2, 3, 5, 4, 100)
    x1, y1 = 2 + 5 - 1, 3 + 4 - 1
    expected = set()
    for x in range(2, x1 + 1):
        expected |= {3 * W + x, y1 * W + x}
    for y in range(3, y1 + 1):
        expected |= {y * W + 2, y * W + x1}
    assert lit(image) == expected
    assert image[4 * W + 4] == 0


def test_rectangle_clipped_to_image():
    a, b = blank(), blank()
    draw_rectangle(a, H, W, -3, -2, 40, 40, 5)
    draw_rectangle(b, H, W, 0, 0, W, H, 5)
    assert a == b
    assert a[(H - 1) * W + (W - 1)] == 5


def test_rgb_rectangle_matches_gray_rectangle():
    gray, rgb = blank(), blank(3)
    draw_rectangle(gray, H, W, 4, 1, 6, 7, 1)
    draw_rectangle_rgb(rgb, H, W, 4, 1, 6, 7, (255, 0, 128))
    assert {i // 3 for i in lit(rgb)} == lit(gray)
    first = min(lit(gray))
    assert rgb[3 * first : 3 * first + 3] == bytearray((255, 0, 128))


def test_draw_rejects_short_buffer():
    with pytest.raises(ValueError):
        draw_line(bytearray(10), H, W, 0, 0, 3, 3, 1)
    with pytest.raises(ValueError):
        draw_rectangle_rgb(blank(), H, W, 0, 0, 3, 3, (1, 2, 3))


def test_rgb_color_must_have_three_components():
    with pytest.raises(ValueError):
        draw_line_rgb(blank(3), H, W, 0, 0, 3, 3, (1, 2))