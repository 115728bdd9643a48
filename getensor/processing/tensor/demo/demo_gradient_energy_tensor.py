import math

import numpy
from arbol import aprint, asection

from getensor.datasets.synthetic_datasets import oriented_grating
from getensor.processing.filters.kernels import (
    gaussian_derivative_kernel_1d,
    gaussian_kernel_1d,
)
from getensor.processing.tensor.gradient_energy_tensor import gradient_energy_tensor
from getensor.utils.backends import Backend, CupyBackend, NumpyBackend


def demo_gradient_energy_tensor_numpy():
    with NumpyBackend():
        _demo_gradient_energy_tensor()


def demo_gradient_energy_tensor_cupy():
    try:
        with CupyBackend():
            _demo_gradient_energy_tensor()
    except ModuleNotFoundError:
        aprint("Cupy module not found! demo ignored")


def _demo_gradient_energy_tensor(length=256, display=True):
    xp = Backend.get_xp_module()

    # four quadrants with gratings of different orientations:
    image = xp.zeros((length, length), dtype=xp.float32)
    half = length // 2
    for i, angle in enumerate((0, 30, 60, 120)):
        grating = oriented_grating(length=half, wavelength=12, angle=math.radians(angle), dtype=xp.float32)
        image[(i // 2) * half : (i // 2 + 1) * half, (i % 2) * half : (i % 2 + 1) * half] = grating

    with asection("Computing GET with Gaussian derivative kernels of sigma 0.7"):
        tensor = gradient_energy_tensor(image, gaussian_derivative_kernel_1d(0.7), gaussian_kernel_1d(0.7))
        Backend.current().synchronise()

    t11, t12, t22 = (Backend.to_numpy(tensor[..., c]) for c in range(3))
    energy = t11 + t22
    orientation = numpy.degrees(0.5 * numpy.arctan2(2 * t12, t11 - t22))

    medians = {}
    for i, angle in enumerate((0, 30, 60, 120)):
        row, col = i // 2, i % 2
        quadrant = (slice(row * half + 8, (row + 1) * half - 8), slice(col * half + 8, (col + 1) * half - 8))
        medians[angle] = float(numpy.median(orientation[quadrant]))
        aprint(f"Grating at {angle} degrees, median estimated orientation: {medians[angle]:.2f}")

    if display:
        import napari

        viewer = napari.Viewer()
        viewer.add_image(Backend.to_numpy(image), name="image")
        viewer.add_image(energy, name="energy (trace)")
        viewer.add_image(orientation, name="orientation", colormap="twilight")
        viewer.add_image(t11, name="t11", visible=False)
        viewer.add_image(t12, name="t12", visible=False)
        viewer.add_image(t22, name="t22", visible=False)
        napari.run()

    return medians


if __name__ == "__main__":
    demo_gradient_energy_tensor_cupy()
    demo_gradient_energy_tensor_numpy()
