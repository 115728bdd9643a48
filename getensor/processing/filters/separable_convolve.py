from getensor.processing.filters.kernels.kernel_1d import Kernel1D
from getensor.utils import xpArray
from getensor.utils.backends import Backend

BORDER_MODES = ("mirror", "reflect", "nearest", "wrap", "constant")


def convolve_1d(image: xpArray, kernel: Kernel1D, axis: int, mode: str = "mirror", cval: float = 0.0) -> xpArray:
    """
    Convolves an image with a 1D kernel along one axis.

    Parameters
    ----------
    image : image to convolve, numpy or cupy array. The result has the same dtype,
        so integer images should be converted to a floating point dtype beforehand.
    kernel : 1D kernel, applied as a convolution (see Kernel1D).
    axis : axis along which to convolve.
    mode : border extension mode: 'mirror' (d c b | a b c d | c b a),
        'reflect' (c b a | a b c d | d c b), 'nearest', 'wrap' or 'constant'.
    cval : value beyond the border for mode 'constant'.

    Returns
    -------
    Convolved image, same shape and dtype as the input.

    """
    if mode not in BORDER_MODES:
        raise ValueError(f"Unknown border mode '{mode}', must be one of: {BORDER_MODES}")

    xp = Backend.get_xp_module(image)
    sp = Backend.get_sp_module(image)

    weights = xp.asarray(kernel.correlation_weights())

    return sp.ndimage.correlate1d(
        image, weights, axis=axis, mode=mode, cval=cval, origin=kernel.correlation_origin()
    )


def separable_convolve(
    image: xpArray, kernel_x: Kernel1D, kernel_y: Kernel1D, mode: str = "mirror", cval: float = 0.0
) -> xpArray:
    """
    Separable 2D convolution: kernel_x is applied along x (axis 1, columns),
    then kernel_y along y (axis 0, rows).

    Parameters
    ----------
    image : 2D image of shape (height, width).
    kernel_x : kernel applied along the horizontal axis.
    kernel_y : kernel applied along the vertical axis.
    mode : border extension mode, see convolve_1d.
    cval : value beyond the border for mode 'constant'.

    Returns
    -------
    Convolved image, same shape and dtype as the input.

    """
    if image.ndim != 2:
        raise ValueError(f"Separable convolution expects a 2D image, got an image of shape {image.shape}")

    result = convolve_1d(image, kernel_x, axis=1, mode=mode, cval=cval)
    result = convolve_1d(result, kernel_y, axis=0, mode=mode, cval=cval)
    return result
