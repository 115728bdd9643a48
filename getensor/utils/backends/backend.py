import gc
import threading
import types
from abc import ABC, abstractmethod
from typing import Any, Dict, List, MutableSequence, Optional, Tuple

import numpy
import scipy
from dask.array import Array

from getensor.utils import xpArray


class Backend(ABC):
    """
    Compute backend on which tensor fields are computed.

    Backends are used as context managers, the innermost active backend of the
    current thread decides where arrays live and which numpy-like and scipy-like
    modules are used:

        with CupyBackend():
            tensor = gradient_energy_tensor(image, derivative_kernel, smoothing_kernel)

    Outside of any backend context computations run with numpy.
    """

    _local = threading.local()

    @staticmethod
    def _stack() -> List["Backend"]:
        if not hasattr(Backend._local, "backend_stack"):
            Backend._local.backend_stack = []
        return Backend._local.backend_stack

    @staticmethod
    def current(raise_error_if_none: bool = False) -> "Backend":
        stack = Backend._stack()
        if stack:
            return stack[-1]
        if raise_error_if_none:
            raise RuntimeError("No backend available in current thread context")

        from getensor.utils.backends.numpy_backend import NumpyBackend

        return NumpyBackend()

    @staticmethod
    def to_numpy(array: xpArray, dtype=None, force_copy: bool = False) -> numpy.ndarray:
        """Moves an array (numpy, cupy or dask) to main memory as a numpy array."""
        if isinstance(array, Array):
            array = array.compute()
        return _coerce(Backend.current()._to_numpy(array), dtype, force_copy)

    @staticmethod
    def to_backend(array: xpArray, dtype=None, force_copy: bool = False) -> Any:
        """Moves an array (numpy, cupy or dask) to the current backend."""
        if isinstance(array, Array):
            array = array.compute()
        return _coerce(Backend.current()._to_backend(array), dtype, force_copy)

    @staticmethod
    def get_xp_module(array: Optional[xpArray] = None) -> types.ModuleType:
        """numpy-like module of the given array, or of the current backend if no array is given."""
        if array is None:
            return Backend.current().xp
        return _array_modules(array)[0]

    @staticmethod
    def get_sp_module(array: Optional[xpArray] = None) -> types.ModuleType:
        """scipy-like module of the given array, or of the current backend if no array is given."""
        if array is None:
            return Backend.current().sp
        return _array_modules(array)[1]

    def __enter__(self):
        Backend._stack().append(self)
        return self

    def __exit__(self, type, value, traceback):
        Backend._stack().pop()

    @property
    @abstractmethod
    def xp(self) -> types.ModuleType:
        raise NotImplementedError("Method not implemented!")

    @property
    @abstractmethod
    def sp(self) -> types.ModuleType:
        raise NotImplementedError("Method not implemented!")

    def synchronise(self) -> None:
        """Waits until all computations queued on the backend are complete."""

    def clear_memory_pool(self) -> None:
        gc.collect()

    @abstractmethod
    def _to_numpy(self, array: xpArray) -> numpy.ndarray:
        raise NotImplementedError("Method not implemented!")

    @abstractmethod
    def _to_backend(self, array: xpArray) -> Any:
        raise NotImplementedError("Method not implemented!")


def _coerce(array: xpArray, dtype, force_copy: bool) -> xpArray:
    if dtype is not None:
        return array.astype(dtype, copy=force_copy)
    return array.copy() if force_copy else array


def _array_modules(array: xpArray) -> Tuple[types.ModuleType, types.ModuleType]:
    try:
        import cupy
    except ImportError:
        return numpy, scipy

    if cupy.get_array_module(array) is cupy:
        import cupyx.scipy.ndimage  # noqa: F401

        return cupy, cupyx.scipy
    return numpy, scipy


def _maybe_to_backend(obj: Any) -> Any:

    if isinstance(obj, numpy.ndarray):
        # this must be first because arrays are iterables
        return Backend.to_backend(obj)

    if isinstance(obj, Dict):
        dispatch_data_to_backend([], obj)
        return obj

    elif isinstance(obj, (List, Tuple)):
        converted = list(obj)
        dispatch_data_to_backend(converted, {})
        return tuple(converted) if isinstance(obj, tuple) else converted

    else:
        return obj


def dispatch_data_to_backend(args: MutableSequence, kwargs: Dict) -> None:
    """Moves numpy arrays found in args and kwargs to the current backend INPLACE!"""
    for i, v in enumerate(args):
        args[i] = _maybe_to_backend(v)

    for k, v in kwargs.items():
        kwargs[k] = _maybe_to_backend(v)
