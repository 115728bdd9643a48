import math

import numpy as np
import pytest

from getensor.datasets.synthetic_datasets import (
    constant_image,
    oriented_grating,
    polynomial_ramp,
)
from getensor.utils.backends import Backend
from getensor.utils.testing import execute_both_backends


@execute_both_backends
def test_constant_image():
    image = constant_image((5, 7), value=3.5, dtype=np.float32)

    assert image.shape == (5, 7)
    assert image.dtype == np.float32
    np.testing.assert_array_equal(Backend.to_numpy(image), 3.5)


@execute_both_backends
def test_polynomial_ramp():
    ramp_x = Backend.to_numpy(polynomial_ramp((4, 6), degree=2, axis=1))
    ramp_y = Backend.to_numpy(polynomial_ramp((4, 6), degree=1, axis=0, dtype=np.uint8))

    np.testing.assert_array_equal(ramp_x[2], np.arange(6) ** 2)
    np.testing.assert_array_equal(ramp_x[:, 3], 9)
    assert ramp_y.dtype == np.uint8
    np.testing.assert_array_equal(ramp_y[:, 0], np.arange(4))
    np.testing.assert_array_equal(ramp_y[1], 1)


def test_polynomial_ramp_invalid_axis():
    with pytest.raises(ValueError):
        polynomial_ramp((4, 4), axis=2)


@execute_both_backends
def test_oriented_grating(length=32):
    horizontal = Backend.to_numpy(oriented_grating(length, wavelength=8, angle=0.0, amplitude=2.0))
    vertical = Backend.to_numpy(oriented_grating(length, wavelength=8, angle=math.pi / 2))

    assert horizontal.shape == (length, length)
    # angle 0: varies along x only
    np.testing.assert_allclose(horizontal, horizontal[:1, :].repeat(length, axis=0))
    np.testing.assert_allclose(horizontal[0, :9:4], [2.0, -2.0, 2.0], atol=1e-12)
    # angle 90 degrees: varies along y only
    np.testing.assert_allclose(vertical, vertical[:, :1].repeat(length, axis=1), atol=1e-12)
    assert np.abs(vertical).max() <= 1.0 + 1e-12


@execute_both_backends
@pytest.mark.parametrize(
    "getensor_grating",
    [dict(length=48, wavelength=12, angle_degrees=45, dtype=np.float32)],
    indirect=True,
)
def test_oriented_grating_diagonal(getensor_grating):
    image = Backend.to_numpy(getensor_grating)

    assert image.dtype == np.float32
    # wave vector along (1, 1) in the y-up frame: constant along the diagonals of the array
    np.testing.assert_allclose(image[1:, 1:], image[:-1, :-1], atol=1e-5)
