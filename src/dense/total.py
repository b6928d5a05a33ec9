import logging

import numpy as np

from orders.chain import ChainRef
from orders.errors import ElementsMismatchError

from ._buffer import PackedArray
from .base import DenseOrders
from .chain import ChainIDense
from .tied import TiedDense

logger = logging.getLogger(__name__)


class TotalDense(DenseOrders):
    """
    Packed complete chains. Order ``i`` occupies
    ``[i * elements, (i + 1) * elements)`` of one flat index array.
    """

    def __init__(self, elements: int):
        super().__init__(elements)
        self._orders = PackedArray(np.intp)

    def __len__(self) -> int:
        if self._elements == 0:
            return 0
        return len(self._orders) // self._elements

    def _rows(self) -> np.ndarray:
        return self._orders.data.reshape(len(self), self._elements)

    def _push(self, order):
        if self._elements == 0:
            raise ElementsMismatchError(0, order.elements)
        self._check_elements(order, length=self._elements)
        self._orders.extend(order.order)

    def try_get(self, i: int):
        if not 0 <= i < len(self):
            return None
        start = i * self._elements
        return ChainRef.new_unchecked(
            self._orders.view(start, start + self._elements), guard=self._guard()
        )

    def _generate(self, rng: np.random.Generator, count: int):
        self._orders.reserve(count * self._elements)
        identity = np.tile(np.arange(self._elements, dtype=np.intp), (count, 1))
        self._orders.extend(rng.permuted(identity, axis=1))

    def _remove_element(self, target: int):
        rows = self._rows()
        kept = rows[rows != target].reshape(len(self), self._elements - 1)
        kept[kept > target] -= 1
        self._orders.replace(kept)

    def _clear(self):
        self._orders.clear()

    def _frame_columns(self) -> dict:
        n, e = len(self), self._elements
        return {
            "order_id": np.repeat(np.arange(n), e),
            "rank_position": np.tile(np.arange(1, e + 1), n),
            "element": self._orders.data.copy(),
        }

    def _take_orders(self) -> PackedArray:
        orders = self._orders
        self._orders = PackedArray(np.intp)
        self._mutated()
        return orders

    def to_chain_incomplete(self) -> ChainIDense:
        """
        Consume this collection into incomplete chains where every order
        happens to rank all elements.
        """
        n, e = len(self), self._elements
        out = ChainIDense(e)
        out._orders = self._take_orders()
        out._order_end = PackedArray(np.intp, (np.arange(n, dtype=np.intp) + 1) * e)
        logger.debug(f"Converted {n} total orders to incomplete chains")
        return out

    def to_tied(self) -> TiedDense:
        """Consume this collection into tied orders without any ties."""
        n, e = len(self), self._elements
        out = TiedDense(e)
        out._orders = self._take_orders()
        out._ties = PackedArray(np.bool_, np.zeros(n * max(e - 1, 0), dtype=np.bool_))
        logger.debug(f"Converted {n} total orders to tied orders")
        return out
