import numpy
import pytest

from getensor.utils.dtypes import real_promote_dtype


@pytest.mark.parametrize(
    "dtype, expected",
    [
        (numpy.bool_, numpy.float64),
        (numpy.uint8, numpy.float64),
        (numpy.int16, numpy.float64),
        (numpy.uint16, numpy.float64),
        (numpy.int32, numpy.float64),
        (numpy.int64, numpy.float64),
        (numpy.float16, numpy.float32),
        (numpy.float32, numpy.float32),
        (numpy.float64, numpy.float64),
        (numpy.longdouble, numpy.float64),
    ],
)
def test_real_promote_dtype(dtype, expected):
    assert real_promote_dtype(dtype) == numpy.dtype(expected)


def test_real_promote_dtype_accepts_strings():
    assert real_promote_dtype("uint8") == numpy.float64
    assert real_promote_dtype("f4") == numpy.float32


@pytest.mark.parametrize("dtype", [numpy.complex64, numpy.complex128, numpy.object_, "U8"])
def test_real_promote_dtype_rejects_non_real(dtype):
    with pytest.raises(TypeError):
        real_promote_dtype(dtype)
