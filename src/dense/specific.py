import logging

import numpy as np

from orders.errors import ElementsMismatchError
from orders.specific import Specific

from ._buffer import PackedArray
from .base import DenseOrders

logger = logging.getLogger(__name__)


class SpecificDense(DenseOrders):
    """One winning element per order."""

    def __init__(self, elements: int):
        super().__init__(elements)
        self._winners = PackedArray(np.intp)

    @classmethod
    def from_winners(cls, elements: int, winners) -> "SpecificDense":
        """
        Build a collection from an array of winners.

        Raises:
            ValueError: If a winner is not in ``0..elements``
        """
        values = np.asarray(winners, dtype=np.intp).reshape(-1)
        if values.size and (values.min() < 0 or values.max() >= elements):
            raise ValueError(f"Winners out of range for {elements} elements")
        out = cls(elements)
        out._winners = PackedArray(np.intp, values)
        return out

    def __len__(self) -> int:
        return len(self._winners)

    def _push(self, order):
        if self._elements == 0:
            raise ElementsMismatchError(0, order.elements)
        self._check_elements(order)
        self._winners.append(order.value)

    def try_get(self, i: int):
        if not 0 <= i < len(self):
            return None
        return Specific(int(self._winners.data[i]), self._elements)

    def tally(self) -> np.ndarray:
        """Number of orders won by each element."""
        return np.bincount(self._winners.data, minlength=self._elements)

    def _generate(self, rng: np.random.Generator, count: int):
        self._winners.reserve(count)
        self._winners.extend(rng.integers(0, self._elements, size=count))

    def _remove_element(self, target: int):
        # Orders whose winner is removed rank nobody any more and are dropped
        winners = self._winners.data
        kept = winners[winners != target]
        kept[kept > target] -= 1
        dropped = winners.size - kept.size
        if dropped:
            logger.debug(f"Dropped {dropped} orders won by element {target}")
        self._winners.replace(kept)

    def _clear(self):
        self._winners.clear()

    def _frame_columns(self) -> dict:
        return {
            "order_id": np.arange(len(self)),
            "winner": self._winners.data.copy(),
        }
