import logging
from typing import Iterable, Optional

import numpy as np

from orders.errors import ElementsMismatchError
from orders.sampling import coin_flips
from orders.tied import TiedRef

from ._buffer import PackedArray
from .base import DenseOrders
from .cardinal import CardinalDense
from .specific import SpecificDense
from .tied_incomplete import TiedIDense

logger = logging.getLogger(__name__)


class TiedDense(DenseOrders):
    """
    Packed complete orders with ties.

    ``orders`` holds ``len * elements`` indices and ``ties`` holds
    ``len * (elements - 1)`` flags, where ``ties[i * (elements - 1) + r]`` says
    whether rank ``r`` of order ``i`` is tied with rank ``r + 1``.
    """

    def __init__(self, elements: int):
        super().__init__(elements)
        self._orders = PackedArray(np.intp)
        self._ties = PackedArray(np.bool_)

    @classmethod
    def from_refs(cls, refs: Iterable) -> Optional["TiedDense"]:
        """
        Collect complete tied orders into a new collection.

        Orders over zero elements carry no data, so collecting only those
        gives an empty collection with ``elements == 0``.

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
            if out.elements:
                out.push(ref)
        return out

    def __len__(self) -> int:
        if self._elements == 0:
            return 0
        return len(self._orders) // self._elements

    @property
    def _tie_width(self) -> int:
        return max(self._elements - 1, 0)

    def _rows(self):
        n = len(self)
        return (
            self._orders.data.reshape(n, self._elements),
            self._ties.data.reshape(n, self._tie_width),
        )

    def _push(self, order):
        if self._elements == 0:
            raise ElementsMismatchError(0, order.elements)
        self._check_elements(order, length=self._elements)
        values, flags = order.order, order.tied
        if len(flags) != self._tie_width:
            raise ValueError(
                f"Order over {self._elements} elements needs {self._tie_width} tie flags, "
                f"got {len(flags)}"
            )
        self._orders.reserve(self._elements)
        self._ties.reserve(self._tie_width)
        self._orders.extend(values)
        self._ties.extend(flags)

    def try_get(self, i: int):
        if not 0 <= i < len(self):
            return None
        e, w = self._elements, self._tie_width
        return TiedRef.new_unchecked(
            self._orders.view(i * e, (i + 1) * e),
            self._ties.view(i * w, (i + 1) * w),
            guard=self._guard(),
        )

    def _generate(self, rng: np.random.Generator, count: int):
        e = self._elements
        self._orders.reserve(count * e)
        self._ties.reserve(count * self._tie_width)
        identity = np.tile(np.arange(e, dtype=np.intp), (count, 1))
        self._orders.extend(rng.permuted(identity, axis=1))
        self._ties.extend(coin_flips(rng, count * self._tie_width))

    def _remove_element(self, target: int):
        n, e = len(self), self._elements
        orders, ties = self._rows()
        rows = np.arange(n)
        rank = np.argmax(orders == target, axis=1)

        kept = orders[orders != target].reshape(n, e - 1)
        kept[kept > target] -= 1

        # Interior ranks: the neighbours stay tied only if both were tied to
        # the removed element. The merged flag takes the left slot.
        ties = ties.copy()
        interior = (rank > 0) & (rank < e - 1)
        r, k = rows[interior], rank[interior]
        ties[r, k - 1] &= ties[r, k]
        drop = np.minimum(rank, e - 2)
        keep = np.ones_like(ties)
        keep[rows, drop] = False
        merged = ties[keep].reshape(n, e - 2)

        self._orders.replace(kept)
        self._ties.replace(merged)

    def _clear(self):
        self._orders.clear()
        self._ties.clear()

    def _group_starts(self, ties: np.ndarray) -> np.ndarray:
        """Rank at which each position's tie group starts."""
        n, e = ties.shape[0], self._elements
        boundary = np.ones((n, e), dtype=bool)
        boundary[:, 1:] = ~ties
        starts = np.where(boundary, np.arange(e), 0)
        return np.maximum.accumulate(starts, axis=1)

    def _frame_columns(self) -> dict:
        n, e = len(self), self._elements
        orders, ties = self._rows()
        groups = np.zeros((n, e), dtype=np.intp)
        groups[:, 1:] = np.cumsum(~ties, axis=1)
        return {
            "order_id": np.repeat(np.arange(n), e),
            "rank_position": np.tile(np.arange(1, e + 1), n),
            "element": orders.reshape(-1).copy(),
            "group": groups.reshape(-1),
        }

    def _take(self):
        orders, ties = self._orders, self._ties
        self._orders = PackedArray(np.intp)
        self._ties = PackedArray(np.bool_)
        self._mutated()
        return orders, ties

    def to_cardinal(self) -> CardinalDense:
        """
        Consume this collection into scores.

        Every member of a tie group scores ``elements - 1`` minus the number of
        elements ranked strictly above the group, so the top group scores
        ``elements - 1`` and tied elements share a score. This differs from
        numbering groups 0, 1, 2, ...: after a group of two the next score drops
        by two, not one.

        Raises:
            AllocError: If the score array could not be allocated
        """
        n, e = len(self), self._elements
        max_score = max(e - 1, 0)
        scores = PackedArray(np.int64)
        scores.reserve(n * e)

        orders, ties = self._rows()
        values = np.empty((n, e), dtype=np.int64)
        values[np.arange(n)[:, None], orders] = max_score - self._group_starts(ties)
        scores.extend(values)

        self._take()
        out = CardinalDense(e, min_score=0, max_score=max_score)
        out._scores = scores
        logger.debug(f"Converted {n} tied orders to cardinal scores")
        return out

    def to_specific(self, rng: np.random.Generator) -> SpecificDense:
        """
        Consume this collection, picking one winner per order uniformly at
        random from its top tie group.
        """
        n, e = len(self), self._elements
        if n == 0:
            self._take()
            return SpecificDense(e)
        orders, ties = self._rows()
        if self._tie_width == 0:
            top_size = np.ones(n, dtype=np.intp)
        else:
            untied = ~ties
            top_size = np.where(untied.any(axis=1), np.argmax(untied, axis=1) + 1, e)
        picks = rng.integers(0, top_size)
        winners = orders[np.arange(n), picks]

        out = SpecificDense.from_winners(e, winners)
        self._take()
        logger.debug(f"Picked winners for {n} tied orders")
        return out

    def to_incomplete(self) -> TiedIDense:
        """Consume this collection into incomplete tied orders that rank everything."""
        n, e, w = len(self), self._elements, self._tie_width
        out = TiedIDense(e)
        out._orders, out._ties = self._take()
        out._order_end = PackedArray(np.intp, (np.arange(n, dtype=np.intp) + 1) * e)
        out._tie_end = PackedArray(np.intp, (np.arange(n, dtype=np.intp) + 1) * w)
        return out
