from functools import partial
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

import numexpr
import numpy
from arbol import aprint, asection
from joblib import Parallel, delayed

from getensor.exceptions import InvalidOutputShapeError
from getensor.processing.filters.kernels.kernel_1d import Kernel1D
from getensor.processing.filters.separable_convolve import separable_convolve
from getensor.utils import xpArray
from getensor.utils.backends import Backend, NumpyBackend
from getensor.utils.dtypes import real_promote_dtype
from getensor.utils.misc import compute_num_workers

# t11, t12 (== t21) and t22, signs set for a right-handed (y-up) coordinate system:
TENSOR_CHANNEL_EXPRESSIONS = (
    "gxx ** 2 + gxy ** 2 - gx * gx3",
    "-gxy * (gxx + gyy) + 0.5 * (gx * gy3 + gy * gx3)",
    "gxy ** 2 + gyy ** 2 - gy * gy3",
)

# Maximal number of independent tasks within one stage of the computation:
_MAX_STAGE_WIDTH = 3


class GradientEnergyDerivatives(NamedTuple):
    """Derivative fields from which the gradient energy tensor is assembled, all of the image's shape."""

    gx: xpArray
    gy: xpArray
    gxx: xpArray
    gxy: xpArray
    gyy: xpArray
    laplace: xpArray
    gx3: xpArray
    gy3: xpArray


def gradient_energy_tensor(
    image: xpArray,
    derivative_kernel: Kernel1D,
    smoothing_kernel: Kernel1D,
    out: Optional[xpArray] = None,
    mode: str = "mirror",
    internal_dtype=None,
    workers: int = 1,
    workersbackend: str = "threading",
) -> xpArray:
    """
    Computes the gradient energy tensor (GET operator) of a scalar 2D image.

    The GET operator is described in:
    M. Felsberg, U. Koethe: "GET: The Connection Between Monogenic Scale-Space and Gaussian Derivatives",
    Scale-Space 2005, LNCS 3459, pp. 192-203, and
    U. Koethe, M. Felsberg: "Riesz-Transforms Versus Derivatives: On the Relationship Between the
    Boundary Tensor and the Energy Tensor", ditto, pp. 179-191.

    The derivative kernel is applied along one image axis while the other axis is smoothed with the
    smoothing kernel, first on the image, then on its first derivatives, and finally on the laplacian
    gxx + gyy. Kernels can be as small as 3 taps, e.g. central_difference_kernel() and smoothing_kernel(),
    or Gaussian based: gaussian_derivative_kernel_1d(0.7, order=1) and gaussian_kernel_1d(0.7).

    The tensor is returned as an array of shape (height, width, 3) holding t11, t12 (== t21) and t22.
    Signs are adjusted for a right-handed coordinate system: orientations derived from the tensor are
    counter-clockwise with the x-axis at zero degrees, e.g.: 0.5 * arctan2(2 * t12, t11 - t22)

    Parameters
    ----------
    image : 2D image of shape (height, width), any real dtype. Not modified.
    derivative_kernel : odd-symmetric 1D derivative kernel, e.g. [0.5, 0, -0.5].
    smoothing_kernel : even-symmetric 1D smoothing kernel, e.g. [3/16, 10/16, 3/16].
    out : optional output array of shape (height, width, 3), written in place.
        Checked before any computation, nothing is written if it has the wrong shape.
    mode : border extension mode of the convolutions, see convolve_1d.
    internal_dtype : dtype for internal computation, defaults to the real promotion of the image's dtype.
    workers : number of workers for the independent convolutions of each stage,
        -1 for as many as there are cores, -2 for half, etc.
    workersbackend : joblib backend used when workers != 1.

    Returns
    -------
    Tensor field of shape (height, width, 3): the given output array if any,
    otherwise a new array of the internal dtype on the current backend.

    """
    _check_image(image)
    if out is not None:
        _check_output_shape(out, tuple(image.shape))

    with asection(f"Computing gradient energy tensor of image of shape: {image.shape} and dtype: {image.dtype}"):
        derivatives = gradient_energy_tensor_derivatives(
            image,
            derivative_kernel,
            smoothing_kernel,
            mode=mode,
            internal_dtype=internal_dtype,
            workers=workers,
            workersbackend=workersbackend,
        )

        if out is None:
            xp = Backend.get_xp_module(derivatives.gx)
            out = xp.empty(tuple(image.shape) + (3,), dtype=derivatives.gx.dtype)

        assemble_gradient_energy_tensor(derivatives, out, workers=workers, workersbackend=workersbackend)

    return out


def gradient_energy_tensor_derivatives(
    image: xpArray,
    derivative_kernel: Kernel1D,
    smoothing_kernel: Kernel1D,
    mode: str = "mirror",
    internal_dtype=None,
    workers: int = 1,
    workersbackend: str = "threading",
) -> GradientEnergyDerivatives:
    """
    Computes the derivative fields of the gradient energy tensor.

    Four stages, each completed before the next one starts:
    (gx, gy) from the image, (gxx, gxy, gyy) from (gx, gy), laplace = gxx + gyy,
    and (gx3, gy3) from the laplacian.

    Parameters
    ----------
    image : 2D image of shape (height, width).
    derivative_kernel : 1D derivative kernel.
    smoothing_kernel : 1D smoothing kernel.
    mode : border extension mode of the convolutions.
    internal_dtype : dtype of the derivative fields, defaults to the real promotion of the image's dtype.
    workers : number of workers for the independent convolutions of each stage.
    workersbackend : joblib backend used when workers != 1.

    Returns
    -------
    GradientEnergyDerivatives named tuple.

    """
    _check_image(image)

    internal_dtype = real_promote_dtype(image.dtype if internal_dtype is None else internal_dtype)
    image = Backend.to_backend(image, dtype=internal_dtype)
    xp = Backend.get_xp_module(image)

    n_jobs = _stage_workers(workers)
    run_stage = partial(_run_stage, n_jobs=n_jobs, workersbackend=workersbackend)
    convolve = partial(separable_convolve, mode=mode)
    d, s = derivative_kernel, smoothing_kernel

    gx, gy = run_stage([partial(convolve, image, d, s), partial(convolve, image, s, d)])

    gxx, gxy, gyy = run_stage([partial(convolve, gx, d, s), partial(convolve, gx, s, d), partial(convolve, gy, s, d)])

    laplace = xp.add(gxx, gyy)

    gx3, gy3 = run_stage([partial(convolve, laplace, d, s), partial(convolve, laplace, s, d)])

    return GradientEnergyDerivatives(gx, gy, gxx, gxy, gyy, laplace, gx3, gy3)


def assemble_gradient_energy_tensor(
    derivatives: GradientEnergyDerivatives,
    out: xpArray,
    workers: int = 1,
    workersbackend: str = "threading",
) -> xpArray:
    """
    Assembles the three tensor channels, pixel by pixel, from the derivative fields:

        t11 = gxx^2 + gxy^2 - gx * gx3
        t12 = -gxy * (gxx + gyy) + 0.5 * (gx * gy3 + gy * gx3)
        t22 = gxy^2 + gyy^2 - gy * gy3

    All channels are computed before the first one is written.

    Parameters
    ----------
    derivatives : derivative fields, see gradient_energy_tensor_derivatives.
    out : output array of shape (height, width, 3).
    workers : number of workers, one channel per worker.
    workersbackend : joblib backend used when workers != 1.

    Returns
    -------
    The output array.

    """
    _check_output_shape(out, tuple(derivatives.gx.shape))

    evaluate = partial(_evaluate_channel, derivatives=derivatives)
    channels = _run_stage(
        [partial(evaluate, channel) for channel in range(3)],
        n_jobs=_stage_workers(workers),
        workersbackend=workersbackend,
    )

    xp_out = Backend.get_xp_module(out)
    for channel, values in enumerate(channels):
        if xp_out is numpy:
            values = Backend.to_numpy(values)
        else:
            values = xp_out.asarray(values)
        out[..., channel] = values

    return out


def _check_image(image: xpArray) -> None:
    if image.ndim != 2:
        raise ValueError(f"Gradient energy tensor expects a 2D image, got an image of shape {image.shape}")


def _check_output_shape(out: xpArray, shape: Tuple[int, ...]) -> None:
    if out.ndim != 3 or out.shape[-1] != 3:
        raise InvalidOutputShapeError(
            f"Output must have 3 channels (t11, t12, t22) along its last axis, got an output of shape {out.shape}"
        )
    if tuple(out.shape[:-1]) != shape:
        raise InvalidOutputShapeError(f"Output of shape {out.shape} does not match image of shape {shape}")


def _stage_workers(workers: int) -> int:
    if workers == 1:
        return 1
    if not isinstance(Backend.current(), NumpyBackend):
        # device and memory pool settings are thread-local to the backend context
        aprint("Multiple workers only supported with the numpy backend, using a single worker.")
        return 1
    return compute_num_workers(workers, _MAX_STAGE_WIDTH)


def _run_stage(tasks: Sequence[Callable[[], xpArray]], n_jobs: int, workersbackend: str) -> List[xpArray]:
    # returns only once every task of the stage is complete
    if n_jobs == 1 or len(tasks) == 1:
        return [task() for task in tasks]
    return Parallel(n_jobs=min(n_jobs, len(tasks)), backend=workersbackend)(delayed(task)() for task in tasks)


def _evaluate_channel(channel: int, derivatives: GradientEnergyDerivatives) -> xpArray:
    expression = TENSOR_CHANNEL_EXPRESSIONS[channel]
    xp = Backend.get_xp_module(derivatives.gx)

    if xp is numpy:
        return numexpr.evaluate(expression, local_dict=derivatives._asdict())
    else:
        import cupy

        return _fused_channel_functions(cupy)[channel](*derivatives)


def _fused_channel_functions(cupy) -> Tuple[Callable, ...]:
    @cupy.fuse()
    def t11(gx, gy, gxx, gxy, gyy, laplace, gx3, gy3):
        return gxx * gxx + gxy * gxy - gx * gx3

    @cupy.fuse()
    def t12(gx, gy, gxx, gxy, gyy, laplace, gx3, gy3):
        return -gxy * (gxx + gyy) + 0.5 * (gx * gy3 + gy * gx3)

    @cupy.fuse()
    def t22(gx, gy, gxx, gxy, gyy, laplace, gx3, gy3):
        return gxy * gxy + gyy * gyy - gy * gy3

    return t11, t12, t22
