import numpy as np


def as_index_array(values) -> np.ndarray:
    """View ``values`` as a 1-D array of element indices without copying when possible."""
    arr = np.asarray(values)
    if arr.size == 0:
        return np.asarray(arr, dtype=np.intp).reshape(0)
    if not np.issubdtype(arr.dtype, np.integer):
        raise ValueError(f"Element indices must be integers, got {arr.dtype}")
    return np.asarray(arr, dtype=np.intp)


def as_flag_array(values) -> np.ndarray:
    arr = np.asarray(values)
    if arr.size == 0:
        return np.asarray(arr, dtype=np.bool_).reshape(0)
    return np.asarray(arr, dtype=np.bool_)


def readonly(arr: np.ndarray) -> np.ndarray:
    """Return a read-only view of ``arr``."""
    view = arr.view()
    view.setflags(write=False)
    return view


def unique_and_bounded(elements: int, order: np.ndarray) -> bool:
    """
    Check that ``order`` is duplicate-free and every entry lies in ``0..elements``.

    Args:
        elements: Size of the universe
        order: Candidate sequence of element indices

    Returns:
        True if the sequence is a valid (possibly partial) permutation
    """
    if order.ndim != 1:
        return False
    if order.size == 0:
        return True
    if order.size > elements:
        return False
    if order.min() < 0 or order.max() >= elements:
        return False
    return np.unique(order).size == order.size


def sort_using(a: list, b: list):
    """Sort ``a`` and ``b`` in place, both ordered by the values in ``b``."""
    if len(a) != len(b):
        raise ValueError(f"Length mismatch: {len(a)} != {len(b)}")
    # Insertion sort keeps equal keys in their original order
    for i in range(1, len(b)):
        j = i
        while j > 0 and b[j - 1] > b[j]:
            a[j], a[j - 1] = a[j - 1], a[j]
            b[j], b[j - 1] = b[j - 1], b[j]
            j -= 1
