from typing import Tuple

import numpy

from getensor.utils.backends import Backend


def constant_image(shape: Tuple[int, int] = (32, 32), value: float = 1.0, dtype=numpy.float64):
    """Image of given shape where every pixel has the same value, allocated on the current backend."""
    xp = Backend.get_xp_module()
    return xp.full(shape, value, dtype=dtype)


def polynomial_ramp(shape: Tuple[int, int] = (32, 32), degree: int = 1, axis: int = 1, dtype=numpy.float64):
    """
    Image whose values are a power of the pixel coordinate along one axis: value = coordinate ** degree

    Parameters
    ----------
    shape : image shape (height, width).
    degree : power of the coordinate, 1 gives a linear ramp.
    axis : 1 for a ramp along x (columns), 0 for a ramp along y (rows).
    dtype : dtype of the image.

    Returns
    -------
    Ramp image, constant along the other axis.

    """
    if axis not in (0, 1):
        raise ValueError(f"Ramp axis must be 0 or 1, got {axis}")

    xp = Backend.get_xp_module()

    coordinate = xp.arange(shape[axis], dtype=numpy.float64) ** degree
    if axis == 1:
        image = xp.broadcast_to(coordinate[xp.newaxis, :], shape)
    else:
        image = xp.broadcast_to(coordinate[:, xp.newaxis], shape)

    return image.astype(dtype)
