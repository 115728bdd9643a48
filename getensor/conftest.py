import math

import pytest

from getensor.datasets.synthetic_datasets import oriented_grating, polynomial_ramp


@pytest.fixture
def getensor_grating(request):
    """Oriented grating, request.param holds the keyword arguments of oriented_grating."""
    params = dict(request.param)
    params["angle"] = math.radians(params.pop("angle_degrees", 0.0))
    return oriented_grating(**params)


@pytest.fixture
def getensor_ramp(request):
    return polynomial_ramp(**request.param)


def pytest_addoption(parser):
    """pytest command line parser"""
    parser.addoption("--display", action="store", type=bool, default=False)


@pytest.fixture()
def display_test(pytestconfig):
    """display test fixture from pytest parser"""
    return pytestconfig.getoption("display")
