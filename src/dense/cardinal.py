import logging
from typing import Optional

import numpy as np

from orders.cardinal import CardinalRef
from orders.errors import ElementsMismatchError

from ._buffer import PackedArray
from .base import DenseOrders
from .binary import BinaryDense

logger = logging.getLogger(__name__)


class CardinalDense(DenseOrders):
    """
    Packed integer scores, ``elements`` per order, every score within
    ``[min_score, max_score]``.
    """

    def __init__(self, elements: int, min_score: int = 0, max_score: Optional[int] = None):
        super().__init__(elements)
        if max_score is None:
            max_score = max(elements - 1, min_score)
        if min_score > max_score:
            raise ValueError(f"min_score {min_score} is above max_score {max_score}")
        self.min_score = min_score
        self.max_score = max_score
        self._scores = PackedArray(np.int64)

    def __len__(self) -> int:
        if self._elements == 0:
            return 0
        return len(self._scores) // self._elements

    def _rows(self) -> np.ndarray:
        return self._scores.data.reshape(len(self), self._elements)

    def _push(self, order):
        if self._elements == 0:
            raise ElementsMismatchError(0, order.elements)
        self._check_elements(order, length=self._elements)
        values = np.asarray(order.values)
        if values.size and (values.min() < self.min_score or values.max() > self.max_score):
            raise ValueError(
                f"Scores {values.tolist()} outside [{self.min_score}, {self.max_score}]"
            )
        self._scores.extend(values)

    def try_get(self, i: int):
        if not 0 <= i < len(self):
            return None
        start = i * self._elements
        return CardinalRef(
            self._scores.view(start, start + self._elements), guard=self._guard()
        )

    def _generate(self, rng: np.random.Generator, count: int):
        self._scores.reserve(count * self._elements)
        self._scores.extend(
            rng.integers(
                self.min_score, self.max_score + 1, size=(count, self._elements)
            )
        )

    def _remove_element(self, target: int):
        self._scores.replace(np.delete(self._rows(), target, axis=1))

    def _clear(self):
        self._scores.clear()

    def _frame_columns(self) -> dict:
        n, e = len(self), self._elements
        return {
            "order_id": np.repeat(np.arange(n), e),
            "element": np.tile(np.arange(e), n),
            "score": self._scores.data.copy(),
        }

    def to_binary(self, cutoff: int) -> BinaryDense:
        """Consume this collection; scores at or above ``cutoff`` become high."""
        out = BinaryDense(self._elements)
        out._values = PackedArray(np.bool_, self._scores.data >= cutoff)
        self._scores = PackedArray(np.int64)
        self._mutated()
        logger.debug(f"Converted {len(out)} cardinal orders to binary at cutoff {cutoff}")
        return out
