import logging

import numpy as np

from orders.errors import AllocError

logger = logging.getLogger(__name__)


class PackedArray:
    """
    A growable flat numpy array.

    Capacity is reserved up front with :meth:`reserve`, which raises
    :class:`AllocError` without touching the stored data if the allocation
    fails. Writes after a successful reservation never allocate.
    """

    def __init__(self, dtype, values=None):
        self.dtype = np.dtype(dtype)
        if values is None:
            self._data = np.empty(0, dtype=self.dtype)
            self._size = 0
        else:
            self._data = np.array(values, dtype=self.dtype).reshape(-1)
            self._size = self._data.size

    def __len__(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._data.size

    @property
    def data(self) -> np.ndarray:
        """Writable view of the stored values."""
        return self._data[: self._size]

    def _allocate(self, capacity: int) -> np.ndarray:
        return np.empty(capacity, dtype=self.dtype)

    def reserve(self, additional: int):
        """Make room for ``additional`` more values."""
        needed = self._size + additional
        if needed <= self._data.size:
            return
        capacity = max(needed, 2 * self._data.size)
        try:
            grown = self._allocate(capacity)
        except (MemoryError, ValueError) as e:
            logger.warning(f"Could not reserve {capacity} x {self.dtype}: {e}")
            raise AllocError(f"Could not allocate {capacity} values") from e
        grown[: self._size] = self._data[: self._size]
        self._data = grown

    def extend(self, values):
        values = np.asarray(values, dtype=self.dtype).reshape(-1)
        self.reserve(values.size)
        self._data[self._size : self._size + values.size] = values
        self._size += values.size

    def append(self, value):
        self.reserve(1)
        self._data[self._size] = value
        self._size += 1

    def last(self, default=0):
        return self._data[self._size - 1].item() if self._size else default

    def view(self, start: int, end: int) -> np.ndarray:
        """Read-only view of ``[start, end)``."""
        view = self._data[start:end]
        view.setflags(write=False)
        return view

    def replace(self, values):
        """Swap in new contents, keeping no reference to the old buffer."""
        self._data = np.ascontiguousarray(values, dtype=self.dtype).reshape(-1)
        self._size = self._data.size

    def clear(self):
        self._data = np.empty(0, dtype=self.dtype)
        self._size = 0


def spans(order_end: np.ndarray):
    """Start offsets and lengths of every order, given their end offsets."""
    starts = np.zeros(len(order_end), dtype=np.intp)
    starts[1:] = order_end[:-1]
    return starts, order_end - starts
