import types

import numpy
import scipy
import scipy.ndimage  # noqa: F401  makes scipy.ndimage reachable from NumpyBackend.sp

from getensor.utils import xpArray
from getensor.utils.backends.backend import Backend


class NumpyBackend(Backend):
    """NumpyBackend: CPU computation with numpy and scipy."""

    def __init__(self, *args, **kwargs):
        """Instantiates a Numpy-based compute backend, arguments are accepted and ignored"""
        super().__init__()

    def __str__(self):
        return "NumpyBackend"

    @property
    def xp(self) -> types.ModuleType:
        return numpy

    @property
    def sp(self) -> types.ModuleType:
        return scipy

    def _to_numpy(self, array: xpArray) -> numpy.ndarray:
        return numpy.asarray(array)

    def _to_backend(self, array: xpArray) -> numpy.ndarray:
        return numpy.asarray(array)
