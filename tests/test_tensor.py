import numpy as np
import pytest

from mandelplot import render
from mandelplot.tensor import render_tensor

UPPER_LEFT = complex(-2.0, 1.2)
LOWER_RIGHT = complex(1.0, -1.2)


def test_render_tensor_shape_and_dtype():
    gray = render_tensor((8, 5), UPPER_LEFT, LOWER_RIGHT)
    assert gray.shape == (5, 8)
    assert gray.dtype == np.uint8


def test_render_tensor_far_outside_the_set():
    gray = render_tensor((4, 3), complex(10.0, 10.0), complex(20.0, 5.0))
    assert (gray == 254).all()


def test_render_tensor_near_origin():
    gray = render_tensor((5, 5), complex(-0.01, 0.01), complex(0.01, -0.01))
    assert (gray == 0).all()


@pytest.mark.parametrize(
    "bounds, upper_left, lower_right",
    [
        ((24, 16), UPPER_LEFT, LOWER_RIGHT),
        ((40, 30), complex(-1.2, 0.35), complex(-1.0, 0.2)),
    ],
)
def test_render_tensor_matches_scalar_renderer(bounds, upper_left, lower_right):
    pixels = bytearray(bounds[0] * bounds[1])
    render(pixels, bounds, upper_left, lower_right)
    scalar = np.frombuffer(bytes(pixels), dtype=np.uint8).reshape(bounds[1], bounds[0])

    gray = render_tensor(bounds, upper_left, lower_right)
    assert np.array_equal(gray, scalar)


def test_render_tensor_rejects_bad_arguments():
    with pytest.raises(ValueError):
        render_tensor((0, 5), UPPER_LEFT, LOWER_RIGHT)
    with pytest.raises(ValueError):
        render_tensor((5, 5), UPPER_LEFT, LOWER_RIGHT, limit=0)
