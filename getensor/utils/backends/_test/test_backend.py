import numpy
import pytest
import scipy

from getensor.utils.backends import (
    Backend,
    BestBackend,
    CupyBackend,
    NumpyBackend,
    dispatch_data_to_backend,
)
from getensor.utils.testing import cupy_only


def test_backend_context():
    assert type(Backend.current(raise_error_if_none=False)) == NumpyBackend

    with pytest.raises(RuntimeError):
        Backend.current(raise_error_if_none=True)

    with NumpyBackend() as backend_1:
        backend_c = Backend.current()
        assert backend_c == backend_1

        with NumpyBackend() as backend_2:
            backend_c = Backend.current()
            assert backend_c == backend_2
            assert backend_1 != backend_2

        backend_c = Backend.current()
        assert backend_c == backend_1

    with pytest.raises(RuntimeError):
        Backend.current(raise_error_if_none=True)


def test_numpy_backend_conversions():
    array = numpy.linspace(0, 1, 64, dtype=numpy.float32).reshape(8, 8)

    with NumpyBackend():
        array_b = Backend.to_backend(array, numpy.float64)
        array_r = Backend.to_numpy(array_b, numpy.float32)

        assert array_b.dtype == numpy.float64
        assert pytest.approx(array, rel=1e-6) == array_r

        # no copy unless needed:
        assert Backend.to_backend(array) is array
        assert Backend.to_backend(array, numpy.float32) is array

        copy = Backend.to_backend(array, force_copy=True)
        copy[0, 0] = 17
        assert array[0, 0] == 0

        assert Backend.get_xp_module() is numpy
        assert Backend.get_xp_module(array) is numpy
        assert Backend.get_sp_module() is scipy
        assert Backend.get_sp_module(array).ndimage is not None


def test_numpy_backend_computes_dask_arrays():
    import dask.array as da

    array = da.ones((16, 16), chunks=(8, 8))

    with NumpyBackend():
        array_b = Backend.to_backend(array)
        array_n = Backend.to_numpy(array * 2, dtype=numpy.float32)

    assert isinstance(array_b, numpy.ndarray)
    assert array_b.sum() == 256
    assert array_n.dtype == numpy.float32
    assert array_n.sum() == 512


def test_dispatch_data_to_backend():
    array = numpy.zeros((2, 2))
    args = [array, (array, 3), "text"]
    kwargs = dict(shape=(4, 4), arrays=[array])

    with NumpyBackend():
        dispatch_data_to_backend(args, kwargs)

    assert isinstance(args[1], tuple)
    assert args[2] == "text"
    assert kwargs["shape"] == (4, 4)
    assert isinstance(kwargs["arrays"], list)
    assert isinstance(kwargs["arrays"][0], numpy.ndarray)


@cupy_only
def test_cupy_backend_roundtrip():
    import cupy

    array = numpy.arange(16, dtype=numpy.float32).reshape(4, 4)

    with CupyBackend() as backend:
        array_b = Backend.to_backend(array)
        assert isinstance(array_b, cupy.ndarray)
        assert Backend.get_xp_module() is cupy
        assert Backend.get_xp_module(array_b) is cupy
        # numpy arrays keep their module under any backend:
        assert Backend.get_xp_module(array) is numpy

        array_r = Backend.to_numpy(array_b)
        assert isinstance(array_r, numpy.ndarray)
        numpy.testing.assert_array_equal(array, array_r)

        backend.synchronise()
        backend.clear_memory_pool()


def test_best_backend():
    with BestBackend() as backend:
        assert isinstance(backend, (NumpyBackend, CupyBackend))
        assert Backend.current() is backend

        xp = Backend.get_xp_module()
        array = Backend.to_backend(numpy.ones((4, 4)))
        assert float(xp.sum(array)) == 16
