#!/usr/bin/env python

import os
from datetime import datetime

from setuptools import find_packages, setup

# Package meta-data.
NAME = "getensor"
DESCRIPTION = "Gradient Energy Tensor (GET) of 2D images from cascaded separable derivative filters"
URL = "https://github.com/royerlab/getensor"
EMAIL = "loic.royer@czbiohub.org"
AUTHOR = "Loic A Royer"
REQUIRES_PYTHON = ">=3.8.0"

now = datetime.now()
seconds_since_midnight = (now - now.replace(hour=0, minute=0, second=0, microsecond=0)).total_seconds()
minutes_since_midnight = int(seconds_since_midnight // 60)
VERSION = datetime.today().strftime("%Y.%m.%d") + f".{minutes_since_midnight}"

CUPY_VERSION = "12.2.0"

# What packages are required for this module to be executed?
REQUIRED = [
    "numpy>=1.20",
    "scipy>=1.8.0",
    "numexpr",
    "joblib",
    "dask",
    "arbol",
    "pytest",
]

# What packages are optional?
EXTRAS = {
    "source": [
        f"cupy=={CUPY_VERSION}",
    ],
    "cuda12x": [
        f"cupy-cuda12x=={CUPY_VERSION}",
    ],
    "cuda11x": [
        f"cupy-cuda11x=={CUPY_VERSION}",
    ],
    "napari": [
        "napari[all]",
    ],
    "dev": [
        "flake8",
        "pytest",
        "coverage",
    ],
}

here = os.path.abspath(os.path.dirname(__file__))

# Import the README and use it as the long-description.
try:
    with open(os.path.join(here, "README.md"), encoding="utf-8") as f:
        long_description = "\n" + f.read()
except FileNotFoundError:
    long_description = DESCRIPTION


setup(
    name=NAME,
    version=VERSION,
    description=DESCRIPTION,
    long_description=long_description,
    long_description_content_type="text/markdown",
    author=AUTHOR,
    author_email=EMAIL,
    python_requires=REQUIRES_PYTHON,
    url=URL,
    packages=find_packages(exclude=["tests", "*.tests", "*.tests.*", "tests.*"]),
    install_requires=REQUIRED,
    extras_require=EXTRAS,
    include_package_data=True,
    license="BSD 3-Clause",
    classifiers=[
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Image Processing",
    ],
)
