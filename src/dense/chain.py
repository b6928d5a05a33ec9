import logging

import numpy as np

from orders.chain import ChainIRef

from ._buffer import PackedArray, spans
from .base import DenseOrders
from .tied_incomplete import TiedIDense

logger = logging.getLogger(__name__)


class ChainIDense(DenseOrders):
    """
    Packed incomplete chains of varying length.

    ``order_end[i]`` is the exclusive end of order ``i`` in the flat index
    array; order ``i`` starts where order ``i - 1`` ends.
    """

    def __init__(self, elements: int):
        super().__init__(elements)
        self._orders = PackedArray(np.intp)
        self._order_end = PackedArray(np.intp)

    def __len__(self) -> int:
        return len(self._order_end)

    def _push(self, order):
        self._check_elements(order)
        values = order.order
        self._orders.reserve(len(values))
        self._order_end.reserve(1)
        end = self._order_end.last() + len(values)
        self._orders.extend(values)
        self._order_end.append(end)

    def try_get(self, i: int):
        if not 0 <= i < len(self):
            return None
        ends = self._order_end.data
        start = int(ends[i - 1]) if i > 0 else 0
        return ChainIRef.new_unchecked(
            self._elements,
            self._orders.view(start, int(ends[i])),
            guard=self._guard(),
        )

    def _generate(self, rng: np.random.Generator, count: int):
        e = self._elements
        sizes = rng.integers(1, e + 1, size=count)
        identity = np.tile(np.arange(e, dtype=np.intp), (count, 1))
        shuffled = rng.permuted(identity, axis=1)
        # Keep the first `size` entries of each shuffled row
        values = shuffled[np.arange(e) < sizes[:, None]]

        self._orders.reserve(values.size)
        self._order_end.reserve(count)
        self._orders.extend(values)
        self._order_end.extend(self._order_end.last() + np.cumsum(sizes))

    def _remove_element(self, target: int):
        values = self._orders.data
        _, lengths = spans(self._order_end.data)
        owner = np.repeat(np.arange(len(self)), lengths)

        keep = values != target
        removed = np.bincount(owner[~keep], minlength=len(self))
        kept = values[keep]
        kept[kept > target] -= 1

        self._orders.replace(kept)
        self._order_end.replace(np.cumsum(lengths - removed))

    def _clear(self):
        self._orders.clear()
        self._order_end.clear()

    def _frame_columns(self) -> dict:
        starts, lengths = spans(self._order_end.data)
        positions = np.arange(len(self._orders)) - np.repeat(starts, lengths)
        return {
            "order_id": np.repeat(np.arange(len(self)), lengths),
            "rank_position": positions + 1,
            "element": self._orders.data.copy(),
        }

    def to_tied(self) -> TiedIDense:
        """Consume this collection into incomplete tied orders without any ties."""
        _, lengths = spans(self._order_end.data)
        tie_counts = np.maximum(lengths - 1, 0)

        out = TiedIDense(self._elements)
        out._orders = self._orders
        out._order_end = self._order_end
        out._ties = PackedArray(np.bool_, np.zeros(int(tie_counts.sum()), dtype=np.bool_))
        out._tie_end = PackedArray(np.intp, np.cumsum(tie_counts))

        self._orders = PackedArray(np.intp)
        self._order_end = PackedArray(np.intp)
        self._mutated()
        logger.debug(f"Converted {len(out)} incomplete chains to tied orders")
        return out
