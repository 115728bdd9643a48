from getensor.datasets.synthetic_datasets.grating import oriented_grating
from getensor.datasets.synthetic_datasets.ramps import constant_image, polynomial_ramp
