import os

from getensor.utils.misc import compute_num_workers


def test_compute_num_workers():
    assert compute_num_workers(1, 3) == 1
    assert compute_num_workers(8, 3) == 3
    assert compute_num_workers(2, 3) == 2
    assert compute_num_workers(0, 3) == 1


def test_compute_num_workers_negative():
    expected = min(max(1, int(os.cpu_count() / -(-1))), 2)
    assert compute_num_workers(-1, 2) == expected
    assert 1 <= compute_num_workers(-2, 7) <= 7
