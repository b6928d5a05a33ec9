import numpy as np

from orders.binary import BinaryRef
from orders.errors import ElementsMismatchError
from orders.sampling import coin_flips

from ._buffer import PackedArray
from .base import DenseOrders


class BinaryDense(DenseOrders):
    """Packed high/low flags, ``elements`` per order."""

    def __init__(self, elements: int):
        super().__init__(elements)
        self._values = PackedArray(np.bool_)

    def __len__(self) -> int:
        if self._elements == 0:
            return 0
        return len(self._values) // self._elements

    def _push(self, order):
        if self._elements == 0:
            raise ElementsMismatchError(0, order.elements)
        self._check_elements(order, length=self._elements)
        self._values.extend(order.values)

    def try_get(self, i: int):
        if not 0 <= i < len(self):
            return None
        start = i * self._elements
        return BinaryRef(
            self._values.view(start, start + self._elements), guard=self._guard()
        )

    def _generate(self, rng: np.random.Generator, count: int):
        self._values.reserve(count * self._elements)
        self._values.extend(coin_flips(rng, count * self._elements))

    def _remove_element(self, target: int):
        rows = self._values.data.reshape(len(self), self._elements)
        self._values.replace(np.delete(rows, target, axis=1))

    def _clear(self):
        self._values.clear()

    def _frame_columns(self) -> dict:
        n, e = len(self), self._elements
        return {
            "order_id": np.repeat(np.arange(n), e),
            "element": np.tile(np.arange(e), n),
            "high": self._values.data.copy(),
        }
