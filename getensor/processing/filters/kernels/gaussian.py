from math import factorial, sqrt

import numpy
from numpy.polynomial.hermite import hermval

from getensor.processing.filters.kernels.kernel_1d import Kernel1D


def _radius(sigma: float, window_ratio: float) -> int:
    return max(1, int(window_ratio * sigma + 0.5))


def gaussian_kernel_1d(sigma: float = 1.0, window_ratio: float = 3.0) -> Kernel1D:
    """
    Computes a sampled 1D Gaussian kernel

    Parameters
    ----------
    sigma : Gaussian sigma, in pixels.
    window_ratio : kernel radius in units of sigma (rounded, at least one pixel).

    Returns
    -------
    Gaussian kernel with unit sum.

    """
    if sigma <= 0:
        raise ValueError(f"Gaussian sigma must be positive, got {sigma}")

    radius = _radius(sigma, window_ratio)
    x = numpy.arange(-radius, radius + 1, dtype=numpy.float64)
    kernel = numpy.exp(-0.5 * numpy.square(x) / (sigma * sigma))
    kernel /= numpy.sum(kernel)

    return Kernel1D(kernel, left=-radius)


def gaussian_derivative_kernel_1d(sigma: float = 1.0, order: int = 1, window_ratio: float = 3.0) -> Kernel1D:
    """
    Computes a sampled 1D Gaussian derivative kernel

    The kernel radius grows with the derivative order: (window_ratio + order / 2) * sigma.
    Odd order kernels are made exactly odd-symmetric, even order kernels have their DC
    component removed. The kernel is then scaled so that its response to x^order / order! is exactly 1, i.e.:

        sum_k kernel[k] * (-k)^order / order! == 1

    Parameters
    ----------
    sigma : Gaussian sigma, in pixels.
    order : derivative order, 0 gives the Gaussian itself.
    window_ratio : kernel radius in units of sigma for order 0.

    Returns
    -------
    Gaussian derivative kernel.

    """
    if order < 0:
        raise ValueError(f"Derivative order must be non-negative, got {order}")
    if order == 0:
        return gaussian_kernel_1d(sigma, window_ratio=window_ratio)
    if sigma <= 0:
        raise ValueError(f"Gaussian sigma must be positive, got {sigma}")

    radius = _radius(sigma, window_ratio + 0.5 * order)
    x = numpy.arange(-radius, radius + 1, dtype=numpy.float64)

    # d^n/dx^n exp(-x^2 / 2 sigma^2) is proportional to (-1)^n H_n(x / (sigma sqrt 2)) exp(-x^2 / 2 sigma^2):
    hermite = hermval(x / (sigma * sqrt(2.0)), [0] * order + [1])
    kernel = (-1) ** order * hermite * numpy.exp(-0.5 * numpy.square(x) / (sigma * sigma))

    if order % 2:
        # odd orders: exactly odd-symmetric, zero center tap
        kernel = 0.5 * (kernel - kernel[::-1])
    else:
        kernel -= numpy.mean(kernel)

    response = numpy.sum(kernel * numpy.power(-x, order)) / factorial(order)
    if response == 0:
        raise ValueError(f"Degenerate Gaussian derivative kernel for sigma={sigma} and order={order}")
    kernel /= response

    return Kernel1D(kernel, left=-radius)
