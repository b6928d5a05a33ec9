import logging
from typing import Iterable, Optional

import numpy as np

from orders.sampling import coin_flips
from orders.tied import TiedIRef, drop_rank

from ._buffer import PackedArray, spans
from .base import DenseOrders

logger = logging.getLogger(__name__)


class TiedIDense(DenseOrders):
    """
    Packed incomplete tied orders of varying length.

    Orders and tie flags live in two flat arrays, each with its own end
    offsets. An order of length ``k`` owns ``max(k - 1, 0)`` tie flags.
    """

    def __init__(self, elements: int):
        super().__init__(elements)
        self._orders = PackedArray(np.intp)
        self._ties = PackedArray(np.bool_)
        self._order_end = PackedArray(np.intp)
        self._tie_end = PackedArray(np.intp)

    @classmethod
    def from_refs(cls, refs: Iterable) -> Optional["TiedIDense"]:
        """
        Collect tied orders into a new collection.

        Returns:
            None if ``refs`` is empty or two orders disagree on ``elements``
        """
        out = None
        for ref in refs:
            if out is None:
                out = cls(ref.elements)
            elif ref.elements != out.elements:
                logger.debug(
                    f"Cannot collect order over {ref.elements} elements "
                    f"into {out.elements}"
                )
                return None
            out.push(ref)
        return out

    def __len__(self) -> int:
        return len(self._order_end)

    def _push(self, order):
        self._check_elements(order)
        values, flags = order.order, order.tied
        self._orders.reserve(len(values))
        self._ties.reserve(len(flags))
        self._order_end.reserve(1)
        self._tie_end.reserve(1)

        order_end = self._order_end.last() + len(values)
        tie_end = self._tie_end.last() + len(flags)
        self._orders.extend(values)
        self._ties.extend(flags)
        self._order_end.append(order_end)
        self._tie_end.append(tie_end)

    def try_get(self, i: int):
        if not 0 <= i < len(self):
            return None
        order_end, tie_end = self._order_end.data, self._tie_end.data
        start = int(order_end[i - 1]) if i > 0 else 0
        tie_start = int(tie_end[i - 1]) if i > 0 else 0
        return TiedIRef.new_unchecked(
            self._elements,
            self._orders.view(start, int(order_end[i])),
            self._ties.view(tie_start, int(tie_end[i])),
            guard=self._guard(),
        )

    def _generate(self, rng: np.random.Generator, count: int):
        e = self._elements
        sizes = rng.integers(1, e + 1, size=count)
        identity = np.tile(np.arange(e, dtype=np.intp), (count, 1))
        shuffled = rng.permuted(identity, axis=1)
        values = shuffled[np.arange(e) < sizes[:, None]]
        tie_counts = sizes - 1
        flags = coin_flips(rng, int(tie_counts.sum()))

        self._orders.reserve(values.size)
        self._ties.reserve(flags.size)
        self._order_end.reserve(count)
        self._tie_end.reserve(count)
        self._orders.extend(values)
        self._ties.extend(flags)
        self._order_end.extend(self._order_end.last() + np.cumsum(sizes))
        self._tie_end.extend(self._tie_end.last() + np.cumsum(tie_counts))

    def _remove_element(self, target: int):
        orders, ties = self._orders.data, self._ties.data
        new_orders, new_ties, lengths, tie_counts = [], [], [], []
        start = tie_start = 0
        for end, tie_end in zip(self._order_end.data.tolist(), self._tie_end.data.tolist()):
            order = orders[start:end]
            tied = ties[tie_start:tie_end]
            hits = np.flatnonzero(order == target)
            if hits.size:
                order, tied = drop_rank(order, tied, int(hits[0]))
            order = np.where(order > target, order - 1, order)

            new_orders.append(order)
            new_ties.append(tied)
            lengths.append(order.size)
            tie_counts.append(tied.size)
            start, tie_start = end, tie_end

        self._orders.replace(np.concatenate(new_orders))
        self._ties.replace(np.concatenate(new_ties))
        self._order_end.replace(np.cumsum(lengths))
        self._tie_end.replace(np.cumsum(tie_counts))

    def _clear(self):
        self._orders.clear()
        self._ties.clear()
        self._order_end.clear()
        self._tie_end.clear()

    def _frame_columns(self) -> dict:
        starts, lengths = spans(self._order_end.data)
        positions = np.arange(len(self._orders)) - np.repeat(starts, lengths)
        return {
            "order_id": np.repeat(np.arange(len(self)), lengths),
            "rank_position": positions + 1,
            "element": self._orders.data.copy(),
            "group": _group_numbers(self._ties.data, self._tie_end.data, lengths),
        }


def _group_numbers(ties: np.ndarray, tie_end: np.ndarray, lengths: np.ndarray) -> np.ndarray:
    """Tie group index of every ranked element, counted from 0 within each order."""
    groups = []
    tie_start = 0
    for end, length in zip(tie_end.tolist(), lengths.tolist()):
        if length:
            flags = ties[tie_start:end]
            groups.append(np.concatenate(([0], np.cumsum(~flags))))
        tie_start = end
    if not groups:
        return np.empty(0, dtype=np.intp)
    return np.concatenate(groups)
