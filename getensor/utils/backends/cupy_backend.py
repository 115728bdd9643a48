import gc
import types

import numpy
from arbol import aprint

from getensor.utils import xpArray
from getensor.utils.backends.backend import Backend


class CupyBackend(Backend):
    """
    CupyBackend: GPU computation with cupy and cupyx.scipy on one CUDA device.

    While the context is active, the device is current and, if enabled, allocations
    go through a memory pool owned by the backend, released when the context exits.
    """

    @staticmethod
    def num_devices() -> int:
        try:
            import cupy

            return cupy.cuda.runtime.getDeviceCount()
        except Exception:
            return 0

    def __init__(self, device_id: int = 0, enable_memory_pool: bool = True, enable_memory_pool_clearing: bool = True):
        """
        Instantiates a Cupy-based compute backend

        Parameters
        ----------
        device_id : CUDA device id to use for allocation and compute
        enable_memory_pool : Allocates through a memory pool owned by this backend.
        enable_memory_pool_clearing : Frees the memory pool upon calling 'clear_memory_pool'
        """
        super().__init__()
        import cupy
        import cupyx.scipy.ndimage  # noqa: F401

        self.device_id = device_id
        self.enable_memory_pool = enable_memory_pool
        self.enable_memory_pool_clearing = enable_memory_pool_clearing

        self.cupy_device: cupy.cuda.Device = cupy.cuda.Device(device_id)
        self.mempool = cupy.cuda.MemoryPool() if enable_memory_pool else None
        self._previous_allocator = None

    def __str__(self):
        free_mem, total_mem = self.cupy_device.mem_info
        return (
            f"Cupy backend [device id:{self.device_id} with {free_mem // (1024 * 1024)} MB free memory "
            f"out of {total_mem // (1024 * 1024)} MB]"
        )

    def __enter__(self):
        from cupy.cuda import memory

        self.cupy_device.__enter__()
        if self.mempool is not None:
            self._previous_allocator = memory._get_thread_local_allocator()
            memory._set_thread_local_allocator(self.mempool.malloc)

        return super().__enter__()

    def __exit__(self, type, value, traceback):
        super().__exit__(type, value, traceback)
        self.clear_memory_pool()

        if self._previous_allocator is not None:
            from cupy.cuda import memory

            memory._set_thread_local_allocator(self._previous_allocator)
            self._previous_allocator = None

        self.cupy_device.__exit__()

    @property
    def xp(self) -> types.ModuleType:
        import cupy

        return cupy

    @property
    def sp(self) -> types.ModuleType:
        import cupyx.scipy

        return cupyx.scipy

    def synchronise(self) -> None:
        self.cupy_device.synchronize()

    def clear_memory_pool(self) -> None:
        if not self.enable_memory_pool_clearing or self.mempool is None:
            gc.collect()
            return

        used_before = self.mempool.used_bytes() / 1e9
        gc.collect()
        self.mempool.free_all_blocks()
        aprint(f"Released memory pool: used {used_before:.3f} GBs -> {self.mempool.used_bytes() / 1e9:.3f} GBs")

    def _to_numpy(self, array: xpArray) -> numpy.ndarray:
        import cupy

        if isinstance(array, cupy.ndarray):
            return cupy.asnumpy(array)
        return numpy.asarray(array)

    def _to_backend(self, array: xpArray) -> xpArray:
        import cupy

        if isinstance(array, cupy.ndarray):
            return array
        with self.cupy_device:
            return cupy.asarray(array)


def is_cupy_available() -> bool:
    try:
        import cupy  # noqa

        return True
    except ImportError:
        return False
