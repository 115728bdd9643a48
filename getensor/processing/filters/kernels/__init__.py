from getensor.processing.filters.kernels.gaussian import (
    gaussian_derivative_kernel_1d,
    gaussian_kernel_1d,
)
from getensor.processing.filters.kernels.kernel_1d import (
    Kernel1D,
    binomial_kernel,
    central_difference_kernel,
    explicit_kernel,
    smoothing_kernel,
)
