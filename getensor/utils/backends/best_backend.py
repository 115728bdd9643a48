from arbol import aprint

from getensor.utils.backends.cupy_backend import CupyBackend
from getensor.utils.backends.numpy_backend import NumpyBackend


def BestBackend(*args, **kwargs):
    """Returns a CupyBackend if cupy is installed and a GPU is functional, a NumpyBackend otherwise."""
    try:
        import cupy

        device_id = kwargs.get("device_id", 0)
        with cupy.cuda.Device(device_id):
            array = cupy.array([1, 2, 3])
            assert cupy.median(array) == 2
        return CupyBackend(*args, **kwargs)

    except Exception:
        aprint("Cupy module not found or not functional! falling back to numpy.")
        return NumpyBackend(*args, **kwargs)
