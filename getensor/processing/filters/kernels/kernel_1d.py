from math import comb
from typing import Optional, Sequence

import numpy


class Kernel1D:
    """
    Finite 1D convolution kernel with an explicit center.

    Coefficients are indexed from `left` to `right` (left <= 0 <= right), index 0 being
    the kernel center. The kernel is applied as a convolution:

        result[x] = sum_k kernel[k] * source[x - k]

    so that, for example, the central difference kernel [0.5, 0, -0.5] (left=-1)
    responds with +1 to a unit ramp.

    Parameters
    ----------
    coefficients : kernel coefficients, ordered from index `left` to index `right`.
    left : index of the first coefficient, defaults to -(len(coefficients) // 2),
        which centers odd-sized kernels.
    """

    __slots__ = ("_coefficients", "_left")

    def __init__(self, coefficients: Sequence[float], left: Optional[int] = None):
        coefficients = numpy.array(coefficients, dtype=numpy.float64)

        if coefficients.ndim != 1 or coefficients.size == 0:
            raise ValueError(f"Kernel coefficients must be a non-empty 1D sequence, got shape {coefficients.shape}")
        if not numpy.all(numpy.isfinite(coefficients)):
            raise ValueError("Kernel coefficients must be finite")

        if left is None:
            left = -(coefficients.size // 2)
        left = int(left)
        right = left + coefficients.size - 1
        if not left <= 0 <= right:
            raise ValueError(f"Kernel center must lie within the kernel, got left={left}, right={right}")

        coefficients.setflags(write=False)
        self._coefficients = coefficients
        self._left = left

    @property
    def coefficients(self) -> numpy.ndarray:
        return self._coefficients

    @property
    def left(self) -> int:
        return self._left

    @property
    def right(self) -> int:
        return self._left + self._coefficients.size - 1

    @property
    def size(self) -> int:
        return self._coefficients.size

    def __len__(self):
        return self.size

    def __getitem__(self, index: int) -> float:
        if not self.left <= index <= self.right:
            raise IndexError(f"Kernel index {index} outside of [{self.left}, {self.right}]")
        return float(self._coefficients[index - self.left])

    def __eq__(self, other):
        if not isinstance(other, Kernel1D):
            return NotImplemented
        return self.left == other.left and numpy.array_equal(self.coefficients, other.coefficients)

    def __hash__(self):
        return hash((self.left, self.coefficients.tobytes()))

    def __repr__(self):
        return f"Kernel1D({self.coefficients.tolist()}, left={self.left})"

    def correlation_weights(self) -> numpy.ndarray:
        """Weights for a correlation-based filter (e.g. ndimage.correlate1d) equivalent to this convolution."""
        return self._coefficients[::-1].copy()

    def correlation_origin(self) -> int:
        """Origin matching correlation_weights(): the reversed kernel is centered on index `right`."""
        return self.right - self.size // 2


def explicit_kernel(coefficients: Sequence[float], left: Optional[int] = None) -> Kernel1D:
    """Kernel from explicitly given coefficients, see Kernel1D."""
    return Kernel1D(coefficients, left=left)


def central_difference_kernel() -> Kernel1D:
    """Symmetric difference [0.5, 0, -0.5], unit response to a ramp and zero DC response."""
    return Kernel1D([0.5, 0.0, -0.5], left=-1)


def smoothing_kernel() -> Kernel1D:
    """
    3-tap smoothing kernel [3/16, 10/16, 3/16].

    Paired with the central difference kernel, it gives gradients with good rotation invariance.
    """
    return Kernel1D([3.0 / 16.0, 10.0 / 16.0, 3.0 / 16.0], left=-1)


def binomial_kernel(radius: int = 1) -> Kernel1D:
    """
    Normalised binomial kernel of size 2 * radius + 1, i.e. radius=1 gives [0.25, 0.5, 0.25].

    Parameters
    ----------
    radius : kernel radius, must be non-negative.

    Returns
    -------
    Binomial smoothing kernel with unit sum.

    """
    if radius < 0:
        raise ValueError(f"Binomial kernel radius must be non-negative, got {radius}")

    order = 2 * radius
    coefficients = numpy.array([comb(order, k) for k in range(order + 1)], dtype=numpy.float64)
    coefficients /= coefficients.sum()
    return Kernel1D(coefficients, left=-radius)
