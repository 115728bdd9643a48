import math

import numpy
from arbol import asection

from getensor.utils.backends import Backend


@asection("Generating synthetic oriented grating")
def oriented_grating(
    length: int = 64, wavelength: float = 16.0, angle: float = 0.0, amplitude: float = 1.0, dtype=numpy.float64
):
    """
    Generates a square image of a sinusoidal plane wave.

    The wave vector makes the given angle with the x axis, measured counter-clockwise
    with the y axis pointing up, i.e. towards decreasing row indices:

        value(x, y) = amplitude * cos(2 pi / wavelength * (x cos(angle) - row sin(angle)))

    Parameters
    ----------
    length : image side length in pixels.
    wavelength : wavelength in pixels.
    angle : orientation of the wave vector, in radians.
    amplitude : amplitude of the wave.
    dtype : dtype of the image.

    Returns
    -------
    Grating image of shape (length, length).

    """
    xp = Backend.get_xp_module()

    frequency = 2 * math.pi / wavelength
    rows, cols = xp.meshgrid(
        xp.arange(length, dtype=numpy.float64), xp.arange(length, dtype=numpy.float64), indexing="ij"
    )
    phase = frequency * (cols * math.cos(angle) - rows * math.sin(angle))

    return (amplitude * xp.cos(phase)).astype(dtype)
