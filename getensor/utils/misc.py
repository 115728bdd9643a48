import os

from arbol import aprint


def compute_num_workers(n_workers: int, n_tasks: int) -> int:
    """Number of workers to use for n_tasks independent tasks; negative n_workers means cpu_count / -n_workers."""
    if n_workers < 0:
        n_workers = int(os.cpu_count() / -n_workers)
    n_workers = min(max(1, n_workers), n_tasks)
    aprint(f"Number of workers: {n_workers}")
    return n_workers
