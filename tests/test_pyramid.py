import pytest

from gapface.pyramid import pyramid_levels


def test_first_reduction_of_model_size():
    assert pyramid_levels(80, 60, 4, 1.25)[1] == (64, 48)


def test_detector_levels_end_at_expected_size():
    assert pyramid_levels(64, 48, 3, 1.25)[-1] == (40, 30)


def test_first_level_is_input_and_length_is_count():
    levels = pyramid_levels(100, 70, 5, 1.25)
    assert levels[0] == (100, 70)
    assert len(levels) == 5


def test_levels_strictly_decrease():
    levels = pyramid_levels(320, 240, 6, 1.25)
    for (w0, h0), (w1, h1) in zip(levels, levels[1:]):
        assert w1 < w0
        assert h1 < h0


def test_factor_one_keeps_size():
    assert pyramid_levels(33, 21, 3, 1.0) == [(33, 21)] * 3


def test_zero_count_is_empty():
    assert pyramid_levels(64, 48, 0) == []


def test_default_factor_matches_explicit():
    assert pyramid_levels(64, 48, 3) == pyramid_levels(64, 48, 3, 1.25)


@pytest.mark.parametrize(
    "args",
    [
        (0, 10, 2, 1.25),
        (10, 0, 2, 1.25),
        (10, 10, -1, 1.25),
        (10, 10, 2, 0),
        (10, 10, 2, -2.0),
    ],
)
def test_invalid_arguments(args):
    with pytest.raises(ValueError):
        pyramid_levels(*args)


def test_collapsing_levels_raise():
    with pytest.raises(ValueError):
        pyramid_levels(2, 2, 5, 2.0)