import inspect
from functools import wraps
from typing import Callable

import pytest

from getensor.utils.backends import CupyBackend, NumpyBackend, dispatch_data_to_backend
from getensor.utils.backends.cupy_backend import is_cupy_available


def _add_cuda_signature(func: Callable) -> Callable:
    """Adds `cuda` argument to the given function."""
    sig = inspect.signature(func)
    params = list(sig.parameters.values())

    params.insert(0, inspect.Parameter("cuda", kind=inspect.Parameter.POSITIONAL_OR_KEYWORD))

    func.__signature__ = sig.replace(parameters=params)

    parametrizer = pytest.mark.parametrize("cuda", [False, True], ids=["cpu", "gpu"])
    func = parametrizer(func)
    return func


def execute_both_backends(func: Callable) -> Callable:
    """Runs the decorated test once with a NumpyBackend and once with a CupyBackend (skipped without cupy)."""

    @wraps(func)
    def wrapper(cuda: bool, *args, **kwargs):
        args = list(args)
        if cuda:
            if not is_cupy_available() or CupyBackend.num_devices() == 0:
                pytest.skip(f"Cupy or CUDA device not found. Skipping {func.__name__} gpu test.")
            with CupyBackend():
                dispatch_data_to_backend(args, kwargs)
                func(*args, **kwargs)
        else:
            with NumpyBackend():
                # it assumes that is a numpy array by default
                func(*args, **kwargs)

    return _add_cuda_signature(wrapper)


def cupy_only(func: Callable) -> Callable:
    """Skips the decorated test function if cupy is not found."""

    @pytest.mark.skipif(
        not is_cupy_available() or CupyBackend.num_devices() == 0,
        reason=f"Cupy or CUDA device not found. Skipping {func.__name__} gpu test.",
    )
    @wraps(func)
    def _func(*args, **kwargs):
        return func(*args, **kwargs)

    return _func
