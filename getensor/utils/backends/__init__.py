from getensor.utils.backends.backend import Backend, dispatch_data_to_backend
from getensor.utils.backends.best_backend import BestBackend
from getensor.utils.backends.cupy_backend import CupyBackend, is_cupy_available
from getensor.utils.backends.numpy_backend import NumpyBackend
