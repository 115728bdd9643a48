import numpy


def real_promote_dtype(dtype) -> numpy.dtype:
    """
    Returns the floating point dtype used for intermediate computations on images of a given dtype.

    Half and single precision images are computed in single precision, everything else
    (booleans, integers, double and extended precision) in double precision. Repeated
    differentiation of integer images would otherwise lose all fractional information.
    Extended precision is reduced to double precision because the convolution primitives
    accumulate in double precision anyway.

    Parameters
    ----------
    dtype : dtype (or anything numpy.dtype accepts) of the input image samples.

    Returns
    -------
    numpy dtype: float32 or float64

    """
    dtype = numpy.dtype(dtype)

    if dtype.kind == "c":
        raise TypeError(f"Complex dtype {dtype} not supported, images must be real valued")
    elif dtype.kind not in "biuf":
        raise TypeError(f"Non numeric dtype {dtype} not supported")

    if dtype.kind == "f" and dtype.itemsize <= 4:
        return numpy.dtype(numpy.float32)

    return numpy.dtype(numpy.float64)
